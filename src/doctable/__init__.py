"""
doctable

JSON documents in SQLite tables, addressed by sortable IDs and raw SQL fragments.

Responsibilities:
- Expose package version metadata and the public table API.
"""

from doctable.db import (
    SQL,
    AsyncDocumentTable,
    DeserializationError,
    DocTableError,
    DocumentTable,
    MissingIDField,
    NoDocument,
    SerializationError,
    StatementError,
    UnsupportedBindType,
    bind,
    by_id,
)

__all__ = [
    "SQL",
    "AsyncDocumentTable",
    "DeserializationError",
    "DocTableError",
    "DocumentTable",
    "MissingIDField",
    "NoDocument",
    "SerializationError",
    "StatementError",
    "UnsupportedBindType",
    "__version__",
    "bind",
    "by_id",
]

__version__ = "0.1.0"
