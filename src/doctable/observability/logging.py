"""
doctable.observability.logging

Structured logging configuration.

Responsibilities:
- Configure `structlog` for applications embedding doctable (JSON or console output).
- Provide bound loggers for table operations.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from doctable.settings import Settings


def configure_logging(*, service_name: str, level: str, json: bool = True) -> None:
    """
    Opt-in logging setup. Library modules only obtain loggers; nothing is
    configured at import time.
    """

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )

    renderer: Any = (
        structlog.processors.JSONRenderer() if json else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            _add_service_name(service_name),
            structlog.processors.dict_tracebacks,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def configure_from_settings(settings: Settings) -> None:
    # Console output for local development, JSON everywhere else.
    configure_logging(
        service_name=settings.service_name,
        level=settings.log_level,
        json=settings.env != "dev",
    )


def _add_service_name(service_name: str):
    def processor(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        event_dict.setdefault("service", service_name)
        return event_dict

    return processor


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    # Always backed by a stdlib logger so its level gates output, including when the
    # host never configured structlog (whose defaults print everything to stdout).
    return structlog.wrap_logger(
        logging.getLogger(name), wrapper_class=structlog.stdlib.BoundLogger
    )


def table_logger(name: str, table: str) -> structlog.stdlib.BoundLogger:
    return get_logger(name).bind(table=table)


# --- Module Notes -----------------------------------------------------------
# Every event emitted by a table carries `table=`; query text is only attached to
# failure events so debug logs stay compact.
