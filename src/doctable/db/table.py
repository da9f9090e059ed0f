"""
doctable.db.table

Typed document tables over SQLite.

Responsibilities:
- Bind a table name to a record type and precompute its statement text.
- Translate insert/one/all/delete/patch/replace into raw SQLite statements
  against the single `data` column, binding fragment args by position.
- Run the standard migrations (table + unique index on the projected ID).

Opinions:
- Documents carry a string `ID`; empty IDs are filled with ULIDs on insert.
- Documents live in a column named `data`, stored as JSONB when SQLite supports it.
- SQL is only lightly hidden: callers pass `SQL` fragments for where/order/limit.
"""

from __future__ import annotations

import sqlite3
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from typing import Any, Generic, TypeVar

from sqlalchemy import exc as sa_exc
from sqlalchemy.engine import Connection

from doctable.db.binding import Statement, bind
from doctable.db.codec import Codec, JsonCodec, get_id, with_id
from doctable.db.errors import (
    DeserializationError,
    DocTableError,
    NoDocument,
    SerializationError,
    StatementError,
)
from doctable.db.fragments import SQL, compose
from doctable.db.ids import new_id
from doctable.observability.logging import table_logger
from doctable.settings import DocumentFormat, get_settings

T = TypeVar("T")

_JSONB_MIN_SQLITE = (3, 45, 0)


def resolve_document_format(fmt: DocumentFormat | str | None) -> DocumentFormat:
    if fmt is None:
        fmt = get_settings().document_format
    fmt = DocumentFormat(fmt)
    if fmt is DocumentFormat.auto:
        if sqlite3.sqlite_version_info >= _JSONB_MIN_SQLITE:
            return DocumentFormat.jsonb
        return DocumentFormat.json
    return fmt


class TableStatements(Generic[T]):
    """
    Statement building shared by the sync and async tables.
    Holds no per-call state; safe to share across threads and tasks.
    """

    def __init__(
        self,
        name: str,
        record_type: type[T],
        *,
        codec: Codec[T] | None = None,
        document_format: DocumentFormat | str | None = None,
    ) -> None:
        self.name = name
        self.record_type = record_type
        self.codec: Codec[T] = codec if codec is not None else JsonCodec(record_type)
        self.document_format = resolve_document_format(document_format)

        encode = "jsonb" if self.document_format is DocumentFormat.jsonb else "json"
        merge = "jsonb_patch" if self.document_format is DocumentFormat.jsonb else "json_patch"
        self.q_insert = f"insert into {name} (data) values ({encode}(?))"
        self.q_create = f"create table if not exists {name} (data blob)"
        self.q_index_id = f"create unique index if not exists {name}_ID on {name} (data->>'ID')"
        self._set_patch = f"set data = {merge}(data, ?)"
        self._set_replace = f"set data = {encode}(?)"

        self.log = table_logger(type(self).__module__, name)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r}, {self.record_type.__qualname__})"

    @contextmanager
    def _operation(self, operation: str) -> Iterator[None]:
        # Tag codec/binding errors with the operation and table they escaped from.
        try:
            yield
        except DocTableError as e:
            if e.operation is None:
                e.with_context(operation=operation, table=self.name)
            raise

    def _encode(self, record: T, *, omit_defaults: bool = False) -> str:
        try:
            return self.codec.serialize(record, omit_defaults=omit_defaults)
        except SerializationError as e:
            self.log.warning("document.unencodable", error=str(e))
            raise

    def _decode(self, raw: str) -> T:
        try:
            return self.codec.deserialize(raw)
        except DeserializationError as e:
            self.log.warning("document.undecodable", error=str(e.__cause__ or e))
            raise

    def _prepare_insert(self, record: T) -> tuple[T, Statement]:
        if get_id(record) == "":
            record = with_id(record, new_id())
        stmt = Statement(self.q_insert)
        bind(stmt, 1, self._encode(record))
        return record, stmt

    def _select(self, fragments: Iterable[SQL], *, limit_one: bool) -> Statement:
        return compose(
            f"select json(data) from {self.name}",
            fragments,
            "limit 1" if limit_one else "",
        )

    def _delete(self, fragments: Iterable[SQL]) -> Statement:
        return compose(f"delete from {self.name}", fragments)

    def _patch(self, partial: T, fragments: Iterable[SQL]) -> Statement:
        # The merge document is bound first, ahead of the fragments' own args.
        doc = self._encode(partial, omit_defaults=True)
        return compose(f"update {self.name}", [SQL(self._set_patch, (doc,)), *fragments])

    def _replace(self, record: T, fragments: Iterable[SQL]) -> Statement:
        doc = self._encode(record)
        return compose(f"update {self.name}", [SQL(self._set_replace, (doc,)), *fragments])

    def _decode_rows(self, rows: Iterable[Any]) -> list[T]:
        return [self._decode(row[0]) for row in rows]

    def _no_document(self) -> NoDocument:
        return NoDocument(self.name)

    def _statement_error(
        self, operation: str, query: str, err: sa_exc.SQLAlchemyError
    ) -> StatementError:
        orig = getattr(err, "orig", None) or err
        self.log.warning("statement.failed", operation=operation, query=query, error=str(orig))
        return StatementError(str(orig), operation=operation, table=self.name, query=query)


class DocumentTable(TableStatements[T]):
    """
    Sync document table. Every operation takes a live SQLAlchemy `Connection`;
    transactions (commit/rollback) are the caller's.
    """

    def _execute(self, conn: Connection, operation: str, stmt: Statement):
        try:
            return conn.exec_driver_sql(stmt.text, stmt.parameters())
        except sa_exc.SQLAlchemyError as e:
            raise self._statement_error(operation, stmt.text, e) from e

    def migrate(self, conn: Connection) -> None:
        """
        Create the table and its unique ID index if missing. Idempotent; run it on
        application startup. A failed index step leaves the table in place.
        """

        self._execute(conn, "create table", Statement(self.q_create))
        self._execute(conn, "create ID index", Statement(self.q_index_id))
        self.log.debug("table.migrated")

    def insert(self, conn: Connection, record: T) -> T:
        """
        Insert a new document. A record with an ID is stored and returned as is;
        an empty ID yields a shallow copy carrying a generated ID.
        """

        with self._operation("insert"):
            record, stmt = self._prepare_insert(record)
            self._execute(conn, "insert", stmt)
        self.log.debug("document.inserted", id=get_id(record))
        return record

    def one(self, conn: Connection, *sqls: SQL) -> T:
        # Raises NoDocument when nothing matches.
        found = self.one_or_none(conn, *sqls)
        if found is None:
            raise self._no_document()
        return found

    def one_or_none(self, conn: Connection, *sqls: SQL) -> T | None:
        with self._operation("select"):
            stmt = self._select(sqls, limit_one=True)
            row = self._execute(conn, "select", stmt).first()
            if row is None:
                return None
            return self._decode(row[0])

    def all(self, conn: Connection, *sqls: SQL) -> list[T]:
        # An empty list (not NoDocument) when nothing matches.
        with self._operation("select"):
            stmt = self._select(sqls, limit_one=False)
            return self._decode_rows(self._execute(conn, "select", stmt).all())

    def delete(self, conn: Connection, *sqls: SQL) -> None:
        with self._operation("delete"):
            self._execute(conn, "delete", self._delete(sqls))
        self.log.debug("documents.deleted")

    def patch(self, conn: Connection, partial: T, *sqls: SQL) -> None:
        """
        Merge `partial` into matching documents (`jsonb_patch`). Fields equal to
        their declared default are left out of the partial and keep stored values.
        """

        with self._operation("patch"):
            self._execute(conn, "patch", self._patch(partial, sqls))
        self.log.debug("documents.patched")

    def replace(self, conn: Connection, record: T, *sqls: SQL) -> None:
        # Whole-document overwrite: omitted fields come back as their defaults.
        with self._operation("replace"):
            self._execute(conn, "replace", self._replace(record, sqls))
        self.log.debug("documents.replaced")


# --- Module Notes -----------------------------------------------------------
# `exec_driver_sql` hands the text to sqlite3 untouched, so `?` placeholders bind
# positionally in fragment order.
