"""Writing PICA+ records to binary streams and files, plain or gzipped."""

from __future__ import annotations

import gzip as _gzip
import os
import sys
from typing import BinaryIO, Union

from picaplus.record import ByteRecord

_DEFAULT_COMPRESSLEVEL = 6


def _write_record(writer: Union[PlainWriter, GzipWriter], record: ByteRecord) -> None:
    if record.raw_data is not None:
        writer.write(record.raw_data)
    else:
        record.write(writer)


class _ClosingMixin:
    """Closing and context-manager support shared by the writers."""

    stream: BinaryIO
    _owns_stream: bool
    _finished: bool

    def finish(self) -> None:  # overridden by every writer
        raise TypeError("writer does not define finish()")

    def close(self) -> None:
        """Finish the writer and close the stream if it was opened here."""
        if not self._finished:
            self.finish()
        if self._owns_stream:
            self.stream.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class PlainWriter(_ClosingMixin):
    """Writes PICA+ records uncompressed."""

    def __init__(self, stream: BinaryIO) -> None:
        self.stream = stream
        self._owns_stream = False
        self._finished = False

    def write(self, data: bytes) -> int:
        """Write raw bytes; return the number of bytes written."""
        data = bytes(data)
        self.stream.write(data)
        return len(data)

    def write_byte_record(self, record: ByteRecord) -> None:
        """Write a record, using its original bytes when it has them."""
        _write_record(self, record)

    def finish(self) -> None:
        """Flush the underlying stream."""
        flush = getattr(self.stream, "flush", None)
        if flush is not None:
            flush()
        self._finished = True


class GzipWriter(_ClosingMixin):
    """Writes PICA+ records as a gzip-compressed stream."""

    def __init__(self, stream: BinaryIO) -> None:
        self.stream = stream
        self._owns_stream = False
        self._finished = False
        self._encoder = _gzip.GzipFile(
            fileobj=stream, mode="wb", compresslevel=_DEFAULT_COMPRESSLEVEL
        )

    def write(self, data: bytes) -> int:
        """Compress and write raw bytes; return the number of bytes taken."""
        data = bytes(data)
        self._encoder.write(data)
        return len(data)

    def write_byte_record(self, record: ByteRecord) -> None:
        """Write a record, using its original bytes when it has them."""
        _write_record(self, record)

    def finish(self) -> None:
        """Write the gzip trailer; the underlying stream stays open."""
        self._encoder.close()
        flush = getattr(self.stream, "flush", None)
        if flush is not None and not getattr(self.stream, "closed", False):
            flush()
        self._finished = True


def _from_file(
    path: str | os.PathLike[str], gzip: bool
) -> Union[PlainWriter, GzipWriter]:
    compress = gzip or os.fspath(path).endswith(".gz")
    stream = open(path, "wb")
    writer: Union[PlainWriter, GzipWriter] = (
        GzipWriter(stream) if compress else PlainWriter(stream)
    )
    writer._owns_stream = True
    return writer


def open_writer(
    path: str | os.PathLike[str], gzip: bool = False
) -> Union[PlainWriter, GzipWriter]:
    """Create a writer on a file; ``.gz`` files or ``gzip`` compress it."""
    return _from_file(path, gzip)


def writer_from_stream(
    stream: BinaryIO, gzip: bool = False
) -> Union[PlainWriter, GzipWriter]:
    """Create a writer on an existing binary stream."""
    return GzipWriter(stream) if gzip else PlainWriter(stream)


def writer_from_path_or_stdout(
    path: str | os.PathLike[str] | None, gzip: bool = False
) -> Union[PlainWriter, GzipWriter]:
    """Create a writer on ``path`` if given, otherwise on standard output.

    Standard output is always written uncompressed.
    """
    if path is not None:
        return _from_file(path, gzip)
    return PlainWriter(sys.stdout.buffer)