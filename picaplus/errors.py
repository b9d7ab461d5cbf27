"""Exceptions raised while building, parsing and validating PICA+ data."""


class PicaError(Exception):
    """Base class of all errors raised by this package."""


class InvalidTagError(PicaError, ValueError):
    """A tag does not follow the PICA+ tag syntax."""


class InvalidSubfieldError(PicaError, ValueError):
    """A subfield code or value is not allowed."""


class InvalidOccurrenceError(PicaError, ValueError):
    """An occurrence does not follow the PICA+ occurrence syntax."""


class Utf8Error(PicaError, ValueError):
    """A value is not a valid UTF-8 byte sequence."""


class ParsePicaError(PicaError):
    """PICA+ data could not be parsed.

    ``data`` holds the bytes that were being parsed when the error occurred.
    """

    def __init__(self, message: str, data: bytes = b"") -> None:
        super().__init__(message)
        self.message = message
        self.data = bytes(data)

    def __str__(self) -> str:
        return self.message


class ParsePathError(PicaError, ValueError):
    """A path expression could not be parsed."""