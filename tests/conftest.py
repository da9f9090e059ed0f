"""
tests.conftest

Shared fixtures for document table tests.

Responsibilities:
- Provide file-backed SQLite engines/connections under `tmp_path`.
- Parametrize table tests over both stored document formats.
"""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator

import pytest
from sqlalchemy.engine import Connection, Engine

from doctable.db.session import create_engine
from doctable.settings import Settings

JSONB_SUPPORTED = sqlite3.sqlite_version_info >= (3, 45, 0)


@pytest.fixture(
    params=[
        "json",
        pytest.param(
            "jsonb",
            marks=pytest.mark.skipif(not JSONB_SUPPORTED, reason="SQLite < 3.45 has no JSONB"),
        ),
    ]
)
def document_format(request: pytest.FixtureRequest) -> str:
    return request.param


@pytest.fixture
def settings(tmp_path) -> Settings:
    db = tmp_path / "docs.db"
    return Settings(
        env="test",
        database_url=f"sqlite:///{db}",
        async_database_url=f"sqlite+aiosqlite:///{db}",
    )


@pytest.fixture
def engine(settings: Settings) -> Iterator[Engine]:
    engine = create_engine(settings)
    yield engine
    engine.dispose()


@pytest.fixture
def conn(engine: Engine) -> Iterator[Connection]:
    with engine.connect() as conn:
        yield conn


# --- Module Notes -----------------------------------------------------------
# Connections are never committed in table tests; each test gets a fresh database file.
