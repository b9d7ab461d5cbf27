"""PICA+ records and the parser that reads them from bytes."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import BinaryIO

from picaplus.errors import ParsePicaError
from picaplus.field import Field, parse_field
from picaplus.path import Path

_NEWLINE = b"\n"


def parse_fields(data: bytes) -> list[Field]:
    """Parse one or more fields, optionally followed by a newline.

    The whole input must be consumed; otherwise ``ParsePicaError`` is raised.
    """
    rest = bytes(data)
    fields = [_first_field(rest)]
    rest = fields[0][1]
    parsed = [fields[0][0]]
    while rest and not rest == _NEWLINE:
        field, rest = parse_field(rest)
        parsed.append(field)
    return parsed


def _first_field(data: bytes) -> tuple[Field, bytes]:
    if not data:
        raise ParsePicaError("Invalid record.", data)
    return parse_field(data)


class ByteRecord:
    """A PICA+ record whose subfield values may hold invalid UTF-8 data.

    A record behaves as a read-only sequence of its fields.
    """

    __slots__ = ("fields", "raw_data")

    def __init__(
        self, fields: Iterable[Field], raw_data: bytes | None = None
    ) -> None:
        self.fields = list(fields)
        self.raw_data = None if raw_data is None else bytes(raw_data)

    @classmethod
    def from_bytes(cls, data: bytes | str) -> ByteRecord:
        """Parse a record; raise ``ParsePicaError`` if it is invalid."""
        if isinstance(data, str):
            data = data.encode("utf-8")
        data = bytes(data)
        try:
            fields = parse_fields(data)
        except ParsePicaError:
            raise ParsePicaError("Invalid record.", data) from None
        return cls(fields, data)

    def validate(self) -> None:
        """Raise ``Utf8Error`` if any subfield value is not valid UTF-8."""
        for field in self.fields:
            field.validate()

    def write(self, stream: BinaryIO) -> None:
        """Write the record, terminated by a newline, to ``stream``."""
        for field in self.fields:
            field.write(stream)
        stream.write(_NEWLINE)

    def first(self, tag: str) -> Field | None:
        """Return the first field with the given tag, or ``None``."""
        return next((field for field in self.fields if field.tag == tag), None)

    def all(self, tag: str) -> list[Field] | None:
        """Return all fields with the given tag, or ``None`` if there are none."""
        result = [field for field in self.fields if field.tag == tag]
        return result or None

    def path(self, path: Path) -> list[bytes]:
        """Return all subfield values addressed by ``path``."""
        values: list[bytes] = []
        for field in self.fields:
            if not (
                field.tag == path.tag
                and path.occurrence.is_match(field.occurrence)
                and any(field.contains_code(code) for code in path.codes)
            ):
                continue
            for code in path.codes:
                values.extend(
                    subfield.value for subfield in field.get(code) or ()
                )
        return values

    def __len__(self) -> int:
        return len(self.fields)

    def __iter__(self) -> Iterator[Field]:
        return iter(self.fields)

    def __getitem__(self, index: int) -> Field:
        return self.fields[index]

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.fields == other.fields and self.raw_data == other.raw_data

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        return "\n".join(str(field) for field in self.fields)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.fields!r})"


class StringRecord(ByteRecord):
    """A PICA+ record whose subfield values are all valid UTF-8."""

    __slots__ = ()

    def __init__(
        self, fields: Iterable[Field], raw_data: bytes | None = None
    ) -> None:
        super().__init__(fields, raw_data)
        self.validate()

    @classmethod
    def from_byte_record(cls, record: ByteRecord) -> StringRecord:
        """Check a ``ByteRecord`` for valid UTF-8 and wrap it."""
        return cls(record.fields, record.raw_data)

    @classmethod
    def from_bytes(cls, data: bytes | str) -> StringRecord:
        """Parse and validate a record."""
        return cls.from_byte_record(ByteRecord.from_bytes(data))

    def to_dict(self) -> dict:
        """Return the record as plain data, ready for JSON encoding."""
        return {
            "fields": [
                {
                    "tag": str(field.tag),
                    "occurrence": (
                        None if field.occurrence is None else str(field.occurrence)
                    ),
                    "subfields": [
                        {"tag": subfield.code, "value": subfield.value.decode("utf-8")}
                        for subfield in field.subfields
                    ],
                }
                for field in self.fields
            ]
        }