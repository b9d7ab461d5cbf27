"""PICA+ fields and occurrences."""

from __future__ import annotations

import re
from dataclasses import dataclass
from dataclasses import field as _dc_field
from typing import BinaryIO

from picaplus.errors import InvalidOccurrenceError, ParsePicaError
from picaplus.subfield import (
    FIELD_SEPARATOR,
    SUBFIELD_SEPARATOR,
    Subfield,
    parse_subfield,
)
from picaplus.tag import Tag, parse_tag

_OCCURRENCE_RE = re.compile(rb"[0-9]{2,3}")
_OCCURRENCE_PREFIX_RE = re.compile(rb"/([0-9]{2,3})")


@dataclass(frozen=True)
class Occurrence:
    """The occurrence of a field, two or three digits such as ``01``."""

    value: str

    def __post_init__(self) -> None:
        raw = self.value
        if isinstance(raw, str):
            raw = raw.encode("utf-8")
        else:
            raw = bytes(raw)
        if _OCCURRENCE_RE.fullmatch(raw) is None:
            raise InvalidOccurrenceError("Invalid occurrence")
        object.__setattr__(self, "value", raw.decode("ascii"))

    def __str__(self) -> str:
        return self.value


def _parse_occurrence(data: bytes) -> tuple[Occurrence | None, bytes]:
    """Parse an optional ``/NN`` occurrence at the start of ``data``."""
    if not data.startswith(b"/"):
        return None, data
    match = _OCCURRENCE_PREFIX_RE.match(data)
    if match is None:
        raise ParsePicaError("Invalid occurrence.", data)
    return Occurrence(match.group(1).decode("ascii")), data[match.end():]


@dataclass
class Field:
    """A PICA+ field: a tag, an optional occurrence and its subfields."""

    tag: Tag
    occurrence: Occurrence | None = None
    subfields: list[Subfield] = _dc_field(default_factory=list)

    def __post_init__(self) -> None:
        if not isinstance(self.tag, Tag):
            self.tag = Tag(self.tag)
        if self.occurrence is not None and not isinstance(
            self.occurrence, Occurrence
        ):
            self.occurrence = Occurrence(self.occurrence)
        self.subfields = list(self.subfields)

    def contains_code(self, code: str) -> bool:
        """Return whether a subfield with ``code`` exists."""
        return any(subfield.code == code for subfield in self.subfields)

    def get(self, code: str) -> list[Subfield] | None:
        """Return all subfields with ``code``, or ``None`` if there are none."""
        result = [subfield for subfield in self.subfields if subfield.code == code]
        return result or None

    def first(self, code: str) -> bytes | None:
        """Return the value of the first subfield with ``code``."""
        return next(
            (subfield.value for subfield in self.subfields if subfield.code == code),
            None,
        )

    def all(self, code: str) -> list[bytes] | None:
        """Return the values of all subfields with ``code``, or ``None``."""
        result = [
            subfield.value for subfield in self.subfields if subfield.code == code
        ]
        return result or None

    def validate(self) -> None:
        """Raise ``Utf8Error`` if any subfield value is not valid UTF-8."""
        for subfield in self.subfields:
            subfield.validate()

    def write(self, stream: BinaryIO) -> None:
        """Write the field in its binary form to ``stream``."""
        stream.write(self._head().encode("ascii"))
        for subfield in self.subfields:
            subfield.write(stream)
        stream.write(FIELD_SEPARATOR)

    def _head(self) -> str:
        if self.occurrence is None:
            return f"{self.tag} "
        return f"{self.tag}/{self.occurrence} "

    def __str__(self) -> str:
        return self._head() + "".join(str(subfield) for subfield in self.subfields)


def parse_field(data: bytes) -> tuple[Field, bytes]:
    """Parse a field, up to and including its separator, from ``data``."""
    tag, rest = parse_tag(data)
    occurrence, rest = _parse_occurrence(rest)
    if not rest.startswith(b" "):
        raise ParsePicaError("Invalid field.", data)
    rest = rest[1:]
    subfields = []
    while rest.startswith(SUBFIELD_SEPARATOR):
        subfield, rest = parse_subfield(rest)
        subfields.append(subfield)
    if not rest.startswith(FIELD_SEPARATOR):
        raise ParsePicaError("Invalid field.", data)
    return Field(tag, occurrence, subfields), rest[1:]