"""Paths that address subfield values within a PICA+ record.

Grammar::

    path       ::= tag occurrence? '.' codes
    tag        ::= [012] [0-9]{2} ([A-Z] | '@')
    occurrence ::= '/' ([0-9]{2,3} | '*')
    codes      ::= code | '[' code+ ']'
    code       ::= [a-z] | [A-Z] | [0-9]
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from picaplus.errors import InvalidSubfieldError, ParsePathError, ParsePicaError
from picaplus.field import Occurrence
from picaplus.subfield import parse_subfield_code
from picaplus.tag import Tag, parse_tag

_WHITESPACE = b" \t\r\n"
_OCCURRENCE_PREFIX_RE = re.compile(rb"/([0-9]{2,3})")


@dataclass(frozen=True)
class OccurrenceMatcher:
    """Matches the occurrence of a field.

    With ``wildcard`` set every occurrence matches; otherwise the field's
    occurrence must equal ``occurrence`` (``None`` meaning no occurrence).
    """

    occurrence: Occurrence | None = None
    wildcard: bool = False

    @classmethod
    def none(cls) -> OccurrenceMatcher:
        """Match fields without an occurrence."""
        return cls()

    @classmethod
    def any(cls) -> OccurrenceMatcher:
        """Match fields with any occurrence or none."""
        return cls(wildcard=True)

    @classmethod
    def some(cls, occurrence: Occurrence | str) -> OccurrenceMatcher:
        """Match fields with exactly the given occurrence."""
        if not isinstance(occurrence, Occurrence):
            occurrence = Occurrence(occurrence)
        return cls(occurrence=occurrence)

    def is_match(self, occurrence: Occurrence | None) -> bool:
        """Return whether ``occurrence`` is matched."""
        return self.wildcard or occurrence == self.occurrence


class Path:
    """A tag, an occurrence matcher and one or more subfield codes."""

    __slots__ = ("tag", "occurrence", "codes")

    def __init__(
        self,
        tag: Tag | str,
        occurrence: OccurrenceMatcher,
        codes: list[str],
    ) -> None:
        codes = list(codes)
        for code in codes:
            if not (len(code) == 1 and code.isascii() and code.isalnum()):
                raise InvalidSubfieldError(
                    f"Invalid subfield code '{code}' in path expression."
                )
        self.tag = tag if isinstance(tag, Tag) else Tag(tag)
        self.occurrence = occurrence
        self.codes = codes

    @classmethod
    def from_bytes(cls, data: bytes | str) -> Path:
        """Parse a path expression; raise ``ParsePathError`` if invalid."""
        return parse_path(data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Path):
            return NotImplemented
        return (
            self.tag == other.tag
            and self.occurrence == other.occurrence
            and self.codes == other.codes
        )

    def __hash__(self) -> int:
        return hash((self.tag, self.occurrence, tuple(self.codes)))

    def __repr__(self) -> str:
        return f"Path({self.tag!r}, {self.occurrence!r}, {self.codes!r})"


def parse_subfield_codes(data: bytes) -> tuple[list[str], bytes]:
    """Parse a single code or a bracketed list of codes."""
    if not data.startswith(b"["):
        code, rest = parse_subfield_code(data)
        return [code], rest
    rest = data[1:]
    codes = []
    while rest and not rest.startswith(b"]"):
        code, rest = parse_subfield_code(rest)
        codes.append(code)
    if not codes or not rest.startswith(b"]"):
        raise ParsePicaError("Invalid subfield codes.", data)
    return codes, rest[1:]


def _parse_occurrence_matcher(data: bytes) -> tuple[OccurrenceMatcher, bytes]:
    if data.startswith(b"/*"):
        return OccurrenceMatcher.any(), data[2:]
    if data.startswith(b"/"):
        match = _OCCURRENCE_PREFIX_RE.match(data)
        if match is None:
            raise ParsePicaError("Invalid occurrence.", data)
        occurrence = Occurrence(match.group(1).decode("ascii"))
        return OccurrenceMatcher.some(occurrence), data[match.end():]
    return OccurrenceMatcher.none(), data


def parse_path(data: bytes | str) -> Path:
    """Parse a whole path expression, allowing surrounding whitespace."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    try:
        rest = bytes(data).lstrip(_WHITESPACE)
        tag, rest = parse_tag(rest)
        occurrence, rest = _parse_occurrence_matcher(rest)
        if not rest.startswith(b"."):
            raise ParsePicaError("Expected '.'.", rest)
        codes, rest = parse_subfield_codes(rest[1:])
    except ParsePicaError as exc:
        raise ParsePathError("Invalid path expression") from exc
    if rest.strip(_WHITESPACE):
        raise ParsePathError("Invalid path expression")
    return Path(tag, occurrence, codes)