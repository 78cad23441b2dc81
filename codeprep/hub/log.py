"""Loguru setup for the hub.

Every record goes to one loguru sink.  Records from the standard ``logging``
module (uvicorn, SQLAlchemy, Alembic) are forwarded into loguru, and editor
log lines carry the editor they came from through the ``editor_id`` extra,
bound by ``WorkspaceState``.
"""

from __future__ import annotations

import logging
import sys

from loguru import logger

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<magenta>{extra[editor_id]}</magenta> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "aiosqlite", "httpx", "httpcore")


class _InterceptHandler(logging.Handler):
    """Forward stdlib records to loguru, keeping the real call site."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(level: str = "INFO", *, json: bool = False) -> None:
    """Make loguru the only sink.

    With *json* set, records are written as one JSON object per line
    (loguru's ``serialize``) for log collectors.  Call once at startup.
    """
    level = level.upper()

    logger.remove()
    logger.configure(extra={"editor_id": "-"})
    if json:
        logger.add(sys.stderr, level=level, serialize=True)
    else:
        logger.add(sys.stderr, level=level, format=LOG_FORMAT)

    logging.basicConfig(handlers=[_InterceptHandler()], level=0, force=True)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger.info("Logging ready (level={}, json={})", level, json)
