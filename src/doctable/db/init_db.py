"""
doctable.db.init_db

Startup migration helpers.

Responsibilities:
- Run the standard (idempotent) migrations for several tables in one call.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import AsyncConnection

from doctable.db.async_table import AsyncDocumentTable
from doctable.db.table import DocumentTable
from doctable.observability.logging import get_logger

log = get_logger(__name__)


def migrate_all(conn: Connection, *tables: DocumentTable[Any]) -> None:
    """
    Migrate tables in order. Stops at the first failure; tables migrated before it
    stay migrated, and rerunning is safe.
    """

    for table in tables:
        table.migrate(conn)
    log.info("tables.migrated", tables=[t.name for t in tables])


async def migrate_all_async(conn: AsyncConnection, *tables: AsyncDocumentTable[Any]) -> None:
    for table in tables:
        await table.migrate(conn)
    log.info("tables.migrated", tables=[t.name for t in tables])
