"""Reading PICA+ records, one per line, from binary streams and files."""

from __future__ import annotations

import gzip
import os
import sys
from collections.abc import Iterator
from typing import BinaryIO

from picaplus.errors import ParsePicaError
from picaplus.record import ByteRecord, StringRecord

_NEWLINE = b"\n"


class _ByteRecordIterator:
    """Yields ``ByteRecord`` objects read line by line from a reader.

    An invalid record raises ``ParsePicaError`` from ``__next__`` unless the
    reader skips invalid records; iteration may go on after such an error.
    """

    def __init__(self, reader: Reader) -> None:
        self._reader = reader
        self._line = 0

    def __iter__(self) -> _ByteRecordIterator:
        return self

    def __next__(self) -> ByteRecord:
        reader = self._reader
        while True:
            if reader.limit > 0 and self._line >= reader.limit:
                raise StopIteration
            data = reader.stream.readline()
            if not data:
                raise StopIteration
            self._line += 1
            try:
                return ByteRecord.from_bytes(data)
            except ParsePicaError as exc:
                if reader.skip_invalid:
                    continue
                raise ParsePicaError(
                    f"Invalid record on line {self._line}.", exc.data
                ) from None


class _StringRecordIterator:
    """Yields ``StringRecord`` objects, checking every value for UTF-8."""

    def __init__(self, reader: Reader) -> None:
        self._records = _ByteRecordIterator(reader)
        self._skip_invalid = reader.skip_invalid

    def __iter__(self) -> _StringRecordIterator:
        return self

    def __next__(self) -> StringRecord:
        while True:
            record = next(self._records)
            try:
                return StringRecord.from_byte_record(record)
            except ValueError:
                if self._skip_invalid:
                    continue
                raise


class Reader:
    """Reads PICA+ records from a binary stream.

    With ``skip_invalid`` set, invalid records are passed over silently;
    otherwise iterating raises an error for each of them. A positive
    ``limit`` caps the number of lines read by one iteration.
    """

    def __init__(
        self, stream: BinaryIO, skip_invalid: bool = True, limit: int = 0
    ) -> None:
        if limit < 0:
            raise ValueError("limit must not be negative")
        self.stream = stream
        self.skip_invalid = skip_invalid
        self.limit = limit
        self._owns_stream = True

    def byte_records(self) -> Iterator[ByteRecord]:
        """Return an iterator over the records as ``ByteRecord`` objects."""
        return _ByteRecordIterator(self)

    def records(self) -> Iterator[StringRecord]:
        """Return an iterator over the records as ``StringRecord`` objects."""
        return _StringRecordIterator(self)

    def __iter__(self) -> Iterator[StringRecord]:
        return self.records()

    def close(self) -> None:
        """Close the underlying stream, unless it is standard input."""
        if self._owns_stream:
            self.stream.close()

    def __enter__(self) -> Reader:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def _open_stream(path: str | os.PathLike[str]) -> BinaryIO:
    if os.fspath(path).endswith(".gz"):
        return gzip.open(path, "rb")
    return open(path, "rb")


def open_reader(
    path: str | os.PathLike[str], skip_invalid: bool = True, limit: int = 0
) -> Reader:
    """Open a reader on a file; files ending in ``.gz`` are decompressed."""
    return Reader(_open_stream(path), skip_invalid, limit)


def reader_from_path_or_stdin(
    path: str | os.PathLike[str] | None,
    skip_invalid: bool = True,
    limit: int = 0,
) -> Reader:
    """Open a reader on ``path`` if given, otherwise on standard input."""
    if path is not None:
        return open_reader(path, skip_invalid, limit)
    reader = Reader(sys.stdin.buffer, skip_invalid, limit)
    reader._owns_stream = False
    return reader