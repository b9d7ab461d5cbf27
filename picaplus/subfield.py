"""PICA+ subfields."""

from __future__ import annotations

from dataclasses import dataclass
from typing import BinaryIO

from picaplus.errors import InvalidSubfieldError, ParsePicaError, Utf8Error

SUBFIELD_SEPARATOR = b"\x1f"
FIELD_SEPARATOR = b"\x1e"


def _is_code(code: str) -> bool:
    return len(code) == 1 and code.isascii() and code.isalnum()


@dataclass(frozen=True)
class Subfield:
    """A PICA+ subfield whose value may hold invalid UTF-8 data."""

    code: str
    value: bytes

    def __post_init__(self) -> None:
        if not _is_code(self.code):
            raise InvalidSubfieldError(f"Invalid subfield code '{self.code}'")
        value = self.value
        if isinstance(value, str):
            value = value.encode("utf-8")
        else:
            value = bytes(value)
        if FIELD_SEPARATOR in value or SUBFIELD_SEPARATOR in value:
            raise InvalidSubfieldError("Invalid subfield value.")
        object.__setattr__(self, "value", value)

    def validate(self) -> None:
        """Raise ``Utf8Error`` unless the value is valid UTF-8."""
        if self.value.isascii():
            return
        try:
            self.value.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise Utf8Error(str(exc)) from exc

    def write(self, stream: BinaryIO) -> None:
        """Write the subfield in its binary form to ``stream``."""
        stream.write(SUBFIELD_SEPARATOR + self.code.encode("ascii") + self.value)

    def __str__(self) -> str:
        return f"${self.code}{self.value.decode('utf-8', errors='replace')}"


def parse_subfield_code(data: bytes) -> tuple[str, bytes]:
    """Parse a subfield code at the start of ``data``."""
    code = data[:1].decode("latin-1")
    if not _is_code(code):
        raise ParsePicaError("Invalid subfield code.", data)
    return code, data[1:]


def parse_subfield_value(data: bytes) -> tuple[bytes, bytes]:
    """Parse a subfield value, which runs up to the next separator."""
    end = len(data)
    for separator in (FIELD_SEPARATOR, SUBFIELD_SEPARATOR):
        position = data.find(separator)
        if position != -1:
            end = min(end, position)
    return data[:end], data[end:]


def parse_subfield(data: bytes) -> tuple[Subfield, bytes]:
    """Parse a subfield, starting with its separator, from ``data``."""
    if not data.startswith(SUBFIELD_SEPARATOR):
        raise ParsePicaError("Invalid subfield.", data)
    code, rest = parse_subfield_code(data[1:])
    value, rest = parse_subfield_value(rest)
    return Subfield(code, value), rest