"""Logging configuration helpers for Trek."""

from __future__ import annotations

import logging
import os
from typing import Final

_DEFAULT_FORMAT: Final[str] = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_ACCESS_FORMAT: Final[str] = '%(client_addr)s - "%(request_line)s" %(status_code)s'
_DEFAULT_DATEFMT: Final[str] = "%Y-%m-%d %H:%M:%S"


def _resolve_level(level_name: str) -> int:
    """Translate a log level string or number into a logging level."""

    value = level_name.strip()
    if value.isdigit():
        return int(value)

    numeric = getattr(logging, value.upper(), None)
    if isinstance(numeric, int):
        return numeric

    return logging.INFO


def _stream_to_console(
    name: str, level: int, fmt: str, datefmt: str | None = _DEFAULT_DATEFMT
) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt, datefmt))
        logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger


def configure_logging(*, debug: bool = False, log_sql: bool = False) -> None:
    """Route Trek, access and (optionally) SQL logs to the console.

    ``LOG_LEVEL`` overrides the level derived from ``debug``. The request
    middleware logs through ``trek.access`` and therefore shares the ``trek``
    handler.
    """

    env_level = os.getenv("LOG_LEVEL")
    level = _resolve_level(env_level or ("DEBUG" if debug else "INFO"))

    _stream_to_console("trek", level, _DEFAULT_FORMAT)
    # uvicorn's own access log stays at INFO or above.
    _stream_to_console("uvicorn.access", max(level, logging.INFO), _ACCESS_FORMAT, None)

    if log_sql:
        _stream_to_console("sqlalchemy.engine", logging.INFO, _DEFAULT_FORMAT)
