"""
doctable.db.session

SQLAlchemy engine + connection helpers (sync and async).

Responsibilities:
- Create engines from settings with SQLite-appropriate connect args.
- Provide transactional connection scopes for callers outside a framework.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterator
from contextlib import asynccontextmanager, contextmanager

import sqlalchemy
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine
from sqlalchemy.ext.asyncio import create_async_engine as _create_async_engine

from doctable.settings import Settings


def _connect_args(settings: Settings) -> dict[str, float]:
    # sqlite3 waits this long on a locked database before raising "database is locked".
    return {"timeout": settings.busy_timeout_seconds}


def create_engine(settings: Settings) -> Engine:
    return sqlalchemy.create_engine(
        settings.database_url,
        echo=settings.echo_sql,
        connect_args=_connect_args(settings),
    )


def create_async_engine(settings: Settings) -> AsyncEngine:
    return _create_async_engine(
        settings.async_database_url,
        echo=settings.echo_sql,
        connect_args=_connect_args(settings),
    )


@contextmanager
def connection_scope(engine: Engine) -> Iterator[Connection]:
    """
    One connection, one transaction: commits on success, rolls back on error.
    Table operations issued inside share that transaction.
    """

    with engine.begin() as conn:
        yield conn


@asynccontextmanager
async def async_connection_scope(engine: AsyncEngine) -> AsyncIterator[AsyncConnection]:
    async with engine.begin() as conn:
        yield conn


# --- Module Notes -----------------------------------------------------------
# A connection is not safe for concurrent use; open one scope per thread/task.
