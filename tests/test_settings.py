"""
tests.test_settings

Tests for settings, document-format resolution, logging setup and session helpers.
"""

from __future__ import annotations

import json
import logging
import sqlite3

import pytest
import structlog
from pydantic import BaseModel
from sqlalchemy.engine import Connection, Engine

from doctable.db.fragments import by_id
from doctable.db.init_db import migrate_all
from doctable.db.session import connection_scope
from doctable.db.table import DocumentTable, resolve_document_format
from doctable.observability.logging import (
    configure_from_settings,
    configure_logging,
    get_logger,
)
from doctable.settings import DocumentFormat, Settings, get_settings


class Jedi(BaseModel):
    ID: str = ""
    Name: str = ""


def test_settings_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DOCTABLE_DOCUMENT_FORMAT", "json")
    monkeypatch.setenv("DOCTABLE_DATABASE_URL", "sqlite:///elsewhere.db")

    settings = Settings()

    assert settings.document_format is DocumentFormat.json
    assert settings.database_url == "sqlite:///elsewhere.db"


def test_table_reads_default_format_from_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DOCTABLE_DOCUMENT_FORMAT", "json")
    get_settings.cache_clear()
    try:
        table = DocumentTable("jedis", Jedi)
    finally:
        get_settings.cache_clear()

    assert table.document_format is DocumentFormat.json
    assert table.q_insert == "insert into jedis (data) values (json(?))"


def test_resolve_document_format() -> None:
    expected = (
        DocumentFormat.jsonb if sqlite3.sqlite_version_info >= (3, 45, 0) else DocumentFormat.json
    )
    assert resolve_document_format("auto") is expected
    assert resolve_document_format(DocumentFormat.jsonb) is DocumentFormat.jsonb
    with pytest.raises(ValueError):
        resolve_document_format("bson")


def test_jsonb_statement_text() -> None:
    table = DocumentTable("jedis", Jedi, document_format="jsonb")
    assert table.q_insert == "insert into jedis (data) values (jsonb(?))"
    assert table.q_create == "create table if not exists jedis (data blob)"
    assert table.q_index_id == (
        "create unique index if not exists jedis_ID on jedis (data->>'ID')"
    )


def test_configure_logging_emits_json(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO)
    configure_logging(service_name="holonet", level="INFO")
    try:
        get_logger("doctable.test").info("hello", planet="tatooine")
    finally:
        structlog.reset_defaults()

    payload = json.loads(caplog.records[-1].getMessage())
    assert payload["event"] == "hello"
    assert payload["service"] == "holonet"
    assert payload["planet"] == "tatooine"
    assert payload["logger"] == "doctable.test"


def test_configure_from_settings(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO)
    configure_from_settings(Settings(env="prod", service_name="archives"))
    try:
        get_logger("doctable.test").warning("lost", system="kamino")
    finally:
        structlog.reset_defaults()

    payload = json.loads(caplog.records[-1].getMessage())
    assert payload["service"] == "archives"
    assert payload["level"] == "warning"


def test_connection_scope_commits_and_rolls_back(engine: Engine) -> None:
    jedis = DocumentTable("jedis", Jedi, document_format="json")

    with connection_scope(engine) as conn:
        migrate_all(conn, jedis)
        jedis.insert(conn, Jedi(ID="kept", Name="luke"))

    with pytest.raises(RuntimeError):
        with connection_scope(engine) as conn:
            jedis.insert(conn, Jedi(ID="dropped", Name="leia"))
            raise RuntimeError("abort")

    with connection_scope(engine) as conn:
        assert [j.ID for j in jedis.all(conn)] == ["kept"]


def test_table_events_are_silent_unless_enabled(
    conn: Connection, capsys: pytest.CaptureFixture[str], caplog: pytest.LogCaptureFixture
) -> None:
    # structlog left at its defaults, as in an application that never configures it.
    structlog.reset_defaults()
    jedis = DocumentTable("jedis", Jedi, document_format="json")

    migrate_all(conn, jedis)
    inserted = jedis.insert(conn, Jedi(Name="luke"))
    jedis.delete(conn, by_id(inserted.ID))

    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == ""
    assert "document.inserted" not in caplog.text

    caplog.set_level(logging.DEBUG, logger="doctable.db.table")
    jedis.insert(conn, Jedi(Name="leia"))
    assert "document.inserted" in caplog.text
    assert capsys.readouterr().out == ""
