import gzip
import io

import pytest

from picaplus.field import Field, Occurrence
from picaplus.reader import open_reader
from picaplus.record import ByteRecord, StringRecord
from picaplus.subfield import Subfield
from picaplus.tag import Tag
from picaplus.writer import (
    GzipWriter,
    PlainWriter,
    open_writer,
    writer_from_path_or_stdout,
    writer_from_stream,
)

RAW = b"003@ \x1f0123456789\x1e\n"


def _built_record():
    return ByteRecord(
        [
            Field(
                Tag("012A"),
                Occurrence("001"),
                [Subfield("0", "123456789X")],
            ),
            Field(
                Tag("012A"),
                Occurrence("002"),
                [Subfield("0", "123456789X")],
            ),
        ]
    )


def test_plain_writer_writes_raw_data():
    stream = io.BytesIO()
    writer = PlainWriter(stream)
    writer.write_byte_record(ByteRecord.from_bytes(RAW))
    writer.finish()
    assert stream.getvalue() == RAW


def test_plain_writer_serialises_built_record():
    stream = io.BytesIO()
    writer = PlainWriter(stream)
    writer.write_byte_record(_built_record())
    writer.finish()
    assert stream.getvalue() == (
        b"012A/001 \x1f0123456789X\x1e012A/002 \x1f0123456789X\x1e\n"
    )


def test_plain_write_returns_length():
    stream = io.BytesIO()
    writer = PlainWriter(stream)
    assert writer.write(b"abc") == 3
    assert stream.getvalue() == b"abc"


def test_gzip_writer_round_trip():
    stream = io.BytesIO()
    writer = GzipWriter(stream)
    writer.write_byte_record(ByteRecord.from_bytes(RAW))
    writer.write_byte_record(_built_record())
    writer.finish()
    expected = RAW + b"012A/001 \x1f0123456789X\x1e012A/002 \x1f0123456789X\x1e\n"
    assert gzip.decompress(stream.getvalue()) == expected
    assert not stream.closed


def test_gzip_write_after_finish_fails():
    writer = GzipWriter(io.BytesIO())
    writer.finish()
    with pytest.raises(ValueError):
        writer.write(b"x")


@pytest.mark.parametrize("compress", [False, True])
def test_writer_from_stream(compress):
    stream = io.BytesIO()
    writer = writer_from_stream(stream, compress)
    writer.write_byte_record(ByteRecord.from_bytes(RAW))
    writer.finish()
    data = stream.getvalue()
    assert (gzip.decompress(data) if compress else data) == RAW


def test_open_writer_plain_file_round_trip(tmp_path):
    path = tmp_path / "out.dat"
    record = ByteRecord.from_bytes(RAW)
    with open_writer(path) as writer:
        writer.write_byte_record(record)
    assert path.read_bytes() == RAW
    with open_reader(path) as reader:
        assert list(reader.records()) == [StringRecord.from_byte_record(record)]


def test_open_writer_gz_extension_compresses(tmp_path):
    path = tmp_path / "out.dat.gz"
    with open_writer(path) as writer:
        writer.write_byte_record(ByteRecord.from_bytes(RAW))
    assert gzip.decompress(path.read_bytes()) == RAW
    with open_reader(path) as reader:
        assert len(list(reader.byte_records())) == 1


def test_open_writer_gzip_flag_compresses(tmp_path):
    path = tmp_path / "out.dat"
    writer = open_writer(path, gzip=True)
    writer.write_byte_record(ByteRecord.from_bytes(RAW))
    writer.close()
    assert gzip.decompress(path.read_bytes()) == RAW


def test_writer_from_path(tmp_path):
    path = tmp_path / "out.dat"
    writer = writer_from_path_or_stdout(path)
    writer.write_byte_record(_built_record())
    writer.close()
    assert ByteRecord.from_bytes(path.read_bytes()).fields == _built_record().fields


def test_writer_to_stdout(capsysbinary):
    writer = writer_from_path_or_stdout(None)
    writer.write_byte_record(ByteRecord.from_bytes(RAW))
    writer.finish()
    assert capsysbinary.readouterr().out == RAW