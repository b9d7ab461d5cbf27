"""PICA+ tags.

Grammar::

    tag ::= [012] [0-9]{2} ([A-Z] | '@')
"""

from __future__ import annotations

import enum
import re

from picaplus.errors import InvalidTagError, ParsePicaError

_TAG_RE = re.compile(rb"[012][0-9]{2}[A-Z@]")


class Level(enum.Enum):
    """The level a field belongs to, given by the first digit of its tag."""

    MAIN = "main"
    LOCAL = "local"
    COPY = "copy"


_LEVELS = {"0": Level.MAIN, "1": Level.LOCAL, "2": Level.COPY}


class Tag:
    """A PICA+ tag such as ``003@``."""

    __slots__ = ("value",)

    def __init__(self, value: str | bytes) -> None:
        raw = value if isinstance(value, bytes) else value.encode("utf-8")
        if _TAG_RE.fullmatch(raw) is None:
            raise InvalidTagError("Invalid tag")
        self.value = raw.decode("ascii")

    @classmethod
    def _from_unchecked(cls, value: str) -> Tag:
        tag = cls.__new__(cls)
        tag.value = value
        return tag

    def level(self) -> Level:
        """Return the level of the tag."""
        try:
            return _LEVELS[self.value[:1]]
        except KeyError:
            raise ValueError(
                "Expected tag to start with '0', '1' or '2'."
            ) from None

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Tag):
            return self.value == other.value
        if isinstance(other, str):
            return self.value == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.value)

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"Tag({self.value!r})"


def parse_tag(data: bytes) -> tuple[Tag, bytes]:
    """Parse a tag at the start of ``data``; return it and the rest."""
    match = _TAG_RE.match(data)
    if match is None:
        raise ParsePicaError("Invalid tag.", data)
    return Tag._from_unchecked(match.group().decode("ascii")), data[match.end():]