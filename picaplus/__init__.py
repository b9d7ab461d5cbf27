"""Parse, validate, query, read and write PICA+ bibliographic records."""

__version__ = "0.1.0"

__all__ = ["errors", "tag", "subfield", "field", "path", "record", "reader", "writer"]