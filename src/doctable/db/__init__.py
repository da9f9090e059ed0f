"""
doctable.db

Persistence package (SQLite documents via SQLAlchemy connections).

Responsibilities:
- Provide document tables, SQL fragments, binding, codecs, and engine helpers.
"""

from doctable.db.async_table import AsyncDocumentTable
from doctable.db.binding import Statement, bind
from doctable.db.codec import Codec, JsonCodec
from doctable.db.errors import (
    DeserializationError,
    DocTableError,
    MissingIDField,
    NoDocument,
    SerializationError,
    StatementError,
    UnsupportedBindType,
)
from doctable.db.fragments import SQL, by_id
from doctable.db.table import DocumentTable

__all__ = [
    "AsyncDocumentTable",
    "Codec",
    "DeserializationError",
    "DocTableError",
    "DocumentTable",
    "JsonCodec",
    "MissingIDField",
    "NoDocument",
    "SQL",
    "SerializationError",
    "Statement",
    "StatementError",
    "UnsupportedBindType",
    "bind",
    "by_id",
]
