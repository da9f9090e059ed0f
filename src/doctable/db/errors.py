"""
doctable.db.errors

Error types raised by document tables.

Responsibilities:
- Give callers one base class (`DocTableError`) to catch.
- Carry enough context (operation, table, query, raw document) to debug a failure.
"""

from __future__ import annotations

from typing import Any


class DocTableError(Exception):
    # Filled in by the table operation the error escaped from.
    operation: str | None = None
    table: str | None = None

    def with_context(self, *, operation: str, table: str) -> DocTableError:
        self.operation = operation
        self.table = table
        self.add_note(f"doctable: during {operation} on {table!r}")
        return self


class MissingIDField(DocTableError):
    def __init__(self, record_type: type) -> None:
        super().__init__(
            f"doctable: expected type {record_type.__qualname__} to contain an ID field of type str"
        )
        self.record_type = record_type


class SerializationError(DocTableError):
    pass


class DeserializationError(DocTableError):
    """
    A stored document could not be decoded into the table's record type.
    The offending text is kept on `raw`.
    """

    def __init__(self, message: str, *, raw: str) -> None:
        super().__init__(f"{message}\n{raw}")
        self.raw = raw


class StatementError(DocTableError):
    def __init__(self, message: str, *, operation: str, table: str, query: str) -> None:
        super().__init__(f"doctable: {operation} on {table!r} failed: {message} (query: {query!r})")
        self.operation = operation
        self.table = table
        self.query = query


class UnsupportedBindType(DocTableError, TypeError):
    def __init__(self, value: Any, *, reason: str | None = None) -> None:
        kind = type(value).__qualname__
        detail = f"doctable: unexpected value {value!r} of type {kind}"
        if reason:
            detail = f"{detail} ({reason})"
        super().__init__(detail)
        self.value = value
        self.kind = kind


class NoDocument(DocTableError, LookupError):
    def __init__(self, table: str) -> None:
        super().__init__(f"doctable: no document in {table!r}")
        self.table = table


# --- Module Notes -----------------------------------------------------------
# `NoDocument` is also a LookupError so callers can treat "not found" separately
# from hard failures without importing doctable types.
