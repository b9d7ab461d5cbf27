# picaplus

A small library for working with PICA+ records, the format that many library
catalogues use. It parses records, checks tags, occurrences and subfields,
selects values with path expressions, and reads and writes record files.
Those files can be plain or gzip-compressed.

## Installation

```
pip install picaplus
```

To run the test suite:

```
pip install "picaplus[test]"
pytest
```

## The format

Each record sits on one line. A field has these parts, in order:

- a tag, such as `003@`
- an optional occurrence, such as `/01`
- a space
- its subfields
- the separator `\x1e`

Each subfield is `\x1f` followed by a one-character code (ASCII letter or
digit) and then the value.

```
003@ \x1f0123456789X\x1e012A/01 \x1fa123\x1e\n
```

## Modules

- `picaplus.errors` holds the exceptions. All of them derive from `PicaError`:
  - `InvalidTagError`
  - `InvalidSubfieldError`
  - `InvalidOccurrenceError`
  - `Utf8Error`
  - `ParsePicaError`, which carries `message` and the offending `data`
  - `ParsePathError`
- `picaplus.tag` holds `Tag`, `Level` (`MAIN`, `LOCAL`, `COPY`) and `parse_tag`.
- `picaplus.subfield` holds `Subfield` and the `parse_subfield*` functions.
- `picaplus.field` holds `Occurrence`, `Field` and `parse_field`.
- `picaplus.path` holds `Path`, `OccurrenceMatcher`, `parse_path` and
  `parse_subfield_codes`.
- `picaplus.record` holds `ByteRecord`, `StringRecord` and `parse_fields`.
- `picaplus.reader` holds `Reader`, `open_reader` and
  `reader_from_path_or_stdin`.
- `picaplus.writer` holds `PlainWriter`, `GzipWriter`, `open_writer`,
  `writer_from_stream` and `writer_from_path_or_stdout`.

## Building and inspecting values

```python
from picaplus.field import Field
from picaplus.subfield import Subfield
from picaplus.tag import Level, Tag

Tag("003@").level()          # Level.MAIN
Tag("303@")                  # raises InvalidTagError
Subfield("!", "abc")         # raises InvalidSubfieldError

field = Field("012A", "01", [Subfield("a", "abc"), Subfield("a", "hij")])
str(field)                   # "012A/01 $aabc$ahij"
field.first("a")             # b"abc"
field.all("a")               # [b"abc", b"hij"]
field.get("c")               # None
field.contains_code("a")     # True
```

Subfield values are stored as `bytes`. A value given as `str` is encoded as
UTF-8. A value may not contain `\x1e` or `\x1f`. `validate()` on a subfield,
field or record raises `Utf8Error` if a value is not valid UTF-8.

## Parsing records

```python
from picaplus.record import ByteRecord, StringRecord

record = ByteRecord.from_bytes(b"003@ \x1f0123456789X\x1e012A/01 \x1fa123\x1e")
print(record)
# 003@ $0123456789X
# 012A/01 $a123

len(record)                      # 2
record.first("003@").first("0")  # b"123456789X"
record.all("012B")               # None

string_record = StringRecord.from_bytes(b"003@ \x1f0123456789X\x1e")
string_record.to_dict()          # plain data, ready for json.dumps
```

A record acts as a read-only sequence of its fields. If the input cannot be
parsed, `ParsePicaError` is raised. `StringRecord` also requires every value
to be valid UTF-8. If one is not, it raises `Utf8Error`.

## Path expressions

A path names three things:

- a tag
- an optional occurrence: `/NN`, `/NNN`, or `/*` for any occurrence
- one subfield code, or several codes in brackets

```python
from picaplus.path import OccurrenceMatcher, Path

path = Path.from_bytes("012A/*.[ab]")
path == Path("012A", OccurrenceMatcher.any(), ["a", "b"])   # True
record.path(Path.from_bytes("003@.0"))                      # [b"123456789X"]
```

- `003@.0` matches subfield `0` of field `003@` when the field has no
  occurrence.
- `012A/01.0` matches occurrence `01` only.
- `012A/*.[abc]` matches subfields `a`, `b` and `c` whatever the occurrence.

Whitespace is allowed around the expression. An invalid expression raises
`ParsePathError("Invalid path expression")`.

## Reading files

```python
from picaplus.reader import open_reader

with open_reader("records.dat.gz", skip_invalid=True, limit=0) as reader:
    for record in reader.records():
        print(record.first("003@"))
```

- **Compression:** files whose names end in `.gz` are decompressed as they are
  read.
- **Record types:** `records()` yields `StringRecord` objects, and
  `byte_records()` yields `ByteRecord` objects.
- **Invalid records:** `skip_invalid` is `True` by default, and invalid lines
  are then passed over. With `skip_invalid=False`, an invalid line raises
  `ParsePicaError` with its line number, for example
  `Invalid record on line 2.`. Iteration can continue after that error.
- **Limit:** a `limit` greater than zero stops each iteration after that many
  lines.
- **Standard input:** `reader_from_path_or_stdin(None)` reads from standard
  input, and closing the reader then leaves standard input open.
- **Other streams:** `Reader(stream)` wraps any binary stream.

## Writing files

```python
from picaplus.writer import open_writer

with open_writer("out.dat.gz") as writer:
    writer.write_byte_record(record)
```

- **Compression:** the output is gzip-compressed when `gzip=True` or when the
  path ends in `.gz`.
- **Record bytes:** a record parsed from bytes is written back exactly as it
  was read. A record built from fields is written field by field and ends
  with a newline.
- **Finishing:** `finish()` flushes a plain writer and writes the gzip trailer
  for a gzip writer.
- **Closing:** `close()` finishes the writer. It also closes the file if the
  writer opened it.
- **Existing streams:** `writer_from_stream` wraps a binary stream that is
  already open.
- **Standard output:** `writer_from_path_or_stdout(None)` writes uncompressed
  output to standard output.

## What this package does not do

This is a library only. It has no command-line program, for example for
concatenating or filtering record files. The only query syntax is the path
expressions above; there is no filter or selection language.