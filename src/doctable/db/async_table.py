"""
doctable.db.async_table

Async document tables (SQLAlchemy asyncio + aiosqlite).

Responsibilities:
- Expose the same operations as `DocumentTable` as coroutines over `AsyncConnection`.
- Reuse the shared statement building so SQL text and binding order match exactly.
"""

from __future__ import annotations

from typing import TypeVar

from sqlalchemy import exc as sa_exc
from sqlalchemy.ext.asyncio import AsyncConnection

from doctable.db.binding import Statement
from doctable.db.codec import get_id
from doctable.db.fragments import SQL
from doctable.db.table import TableStatements

T = TypeVar("T")


class AsyncDocumentTable(TableStatements[T]):
    async def _execute(self, conn: AsyncConnection, operation: str, stmt: Statement):
        try:
            return await conn.exec_driver_sql(stmt.text, stmt.parameters())
        except sa_exc.SQLAlchemyError as e:
            raise self._statement_error(operation, stmt.text, e) from e

    async def migrate(self, conn: AsyncConnection) -> None:
        await self._execute(conn, "create table", Statement(self.q_create))
        await self._execute(conn, "create ID index", Statement(self.q_index_id))
        self.log.debug("table.migrated")

    async def insert(self, conn: AsyncConnection, record: T) -> T:
        with self._operation("insert"):
            record, stmt = self._prepare_insert(record)
            await self._execute(conn, "insert", stmt)
        self.log.debug("document.inserted", id=get_id(record))
        return record

    async def one(self, conn: AsyncConnection, *sqls: SQL) -> T:
        found = await self.one_or_none(conn, *sqls)
        if found is None:
            raise self._no_document()
        return found

    async def one_or_none(self, conn: AsyncConnection, *sqls: SQL) -> T | None:
        with self._operation("select"):
            result = await self._execute(conn, "select", self._select(sqls, limit_one=True))
            # Async results are buffered; fetching is synchronous.
            row = result.first()
            if row is None:
                return None
            return self._decode(row[0])

    async def all(self, conn: AsyncConnection, *sqls: SQL) -> list[T]:
        with self._operation("select"):
            result = await self._execute(conn, "select", self._select(sqls, limit_one=False))
            return self._decode_rows(result.all())

    async def delete(self, conn: AsyncConnection, *sqls: SQL) -> None:
        with self._operation("delete"):
            await self._execute(conn, "delete", self._delete(sqls))
        self.log.debug("documents.deleted")

    async def patch(self, conn: AsyncConnection, partial: T, *sqls: SQL) -> None:
        with self._operation("patch"):
            await self._execute(conn, "patch", self._patch(partial, sqls))
        self.log.debug("documents.patched")

    async def replace(self, conn: AsyncConnection, record: T, *sqls: SQL) -> None:
        with self._operation("replace"):
            await self._execute(conn, "replace", self._replace(record, sqls))
        self.log.debug("documents.replaced")


# --- Module Notes -----------------------------------------------------------
# Semantics (ID generation, NoDocument, patch/replace merge rules) are documented
# on `doctable.db.table.DocumentTable`.
