import gzip
import io

import pytest

from picaplus.errors import ParsePicaError, Utf8Error
from picaplus.reader import Reader, open_reader, reader_from_path_or_stdin
from picaplus.record import ByteRecord, StringRecord

MIXED = b"003@ \x1f0123\x1e\n003@ \x1f!456\x1e\n003@ \x1f0789\x1e\n"
TWO = b"003@ \x1f0123456789\x1e\n003@ \x1f0123456789\x1e\n"


def test_reads_single_record():
    data = b"003@ \x1f0123456789\x1e\n"
    records = list(Reader(io.BytesIO(data)).records())
    assert records == [StringRecord.from_byte_record(ByteRecord.from_bytes(data))]


def test_skip_invalid_false_reports_error_and_continues():
    iterator = Reader(io.BytesIO(MIXED), skip_invalid=False).records()
    first = next(iterator)
    assert first.first("003@").first("0") == b"123"
    with pytest.raises(ParsePicaError) as excinfo:
        next(iterator)
    assert str(excinfo.value) == "Invalid record on line 2."
    assert excinfo.value.data == b"003@ \x1f!456\x1e\n"
    third = next(iterator)
    assert third.first("003@").first("0") == b"789"
    with pytest.raises(StopIteration):
        next(iterator)


def test_skip_invalid_true_drops_bad_records():
    records = list(Reader(io.BytesIO(MIXED), skip_invalid=True).records())
    assert [r.first("003@").first("0") for r in records] == [b"123", b"789"]


def test_skip_invalid_is_default():
    assert len(list(Reader(io.BytesIO(MIXED)).byte_records())) == 2


def test_limit():
    records = list(Reader(io.BytesIO(TWO), limit=1).records())
    assert len(records) == 1
    assert len(list(Reader(io.BytesIO(TWO), limit=0).records())) == 2


def test_negative_limit_rejected():
    with pytest.raises(ValueError):
        Reader(io.BytesIO(TWO), limit=-1)


def test_byte_records_keep_invalid_utf8():
    data = b"003@ \x1ffoo\xffbar\x1e\n"
    records = list(Reader(io.BytesIO(data)).byte_records())
    assert len(records) == 1
    assert records[0].raw_data == data


def test_records_skip_invalid_utf8():
    data = b"003@ \x1f0foo\xffbar\x1e\n003@ \x1f0ok\x1e\n"
    records = list(Reader(io.BytesIO(data)).records())
    assert [r.first("003@").first("0") for r in records] == [b"ok"]


def test_records_raise_on_invalid_utf8():
    data = b"003@ \x1f0foo\xffbar\x1e\n"
    byte_record = next(Reader(io.BytesIO(data), skip_invalid=False).byte_records())
    assert byte_record.first("003@").first("0") == b"foo\xffbar"
    iterator = Reader(io.BytesIO(data), skip_invalid=False).records()
    with pytest.raises(Utf8Error):
        next(iterator)


def test_record_without_trailing_newline():
    data = b"003@ \x1f0123456789\x1e"
    records = list(Reader(io.BytesIO(data)).records())
    assert records[0].raw_data == data


def test_open_reader_plain_and_gzip(tmp_path):
    plain = tmp_path / "records.dat"
    plain.write_bytes(TWO)
    packed = tmp_path / "records.dat.gz"
    packed.write_bytes(gzip.compress(TWO))
    with open_reader(plain) as reader:
        from_plain = list(reader.records())
    with open_reader(packed) as reader:
        from_gzip = list(reader.records())
    assert len(from_plain) == 2
    assert from_plain == from_gzip


def test_open_reader_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        open_reader(tmp_path / "missing.dat")


def test_reader_from_path(tmp_path):
    path = tmp_path / "records.dat"
    path.write_bytes(MIXED)
    with reader_from_path_or_stdin(str(path), skip_invalid=True, limit=2) as reader:
        records = list(reader.records())
    assert [r.first("003@").first("0") for r in records] == [b"123"]


def test_close_closes_stream():
    stream = io.BytesIO(TWO)
    reader = Reader(stream)
    reader.close()
    assert stream.closed
    with pytest.raises(ValueError):
        list(reader.records())


def test_iterating_reader_yields_string_records():
    records = list(Reader(io.BytesIO(TWO)))
    assert all(isinstance(r, StringRecord) for r in records)
    assert len(records) == 2