"""Structured Logging — JSON formatter, setup, and last-resort fault hooks.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Extra fields (procedure, error_code, path, status, ...) surfaced when present
    - JSON format in production, human-readable in development
    - A synchronous exception escaping every handler is logged, then the process exits(1)
    - An exception from a background asyncio task is logged and the process keeps running

Design Decisions:
    - JSONFormatter over third-party libs: zero dependencies, full control
    - setup_logging / install_fault_handlers called once on startup via lifespan
"""

import asyncio
import logging
import json
import sys
from datetime import datetime, timezone
from types import TracebackType

logger = logging.getLogger(__name__)

_EXTRA_FIELDS = (
    "error_code", "path", "method", "status", "procedure",
    "parameter_count", "parameters", "login_type", "project_name", "module_name",
)


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json"):
    """Configure logging for the application."""
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s — %(message)s",
        ))
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))


def _fatal_excepthook(
    exc_type: type[BaseException],
    exc: BaseException,
    tb: TracebackType | None,
) -> None:
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc, tb)
        return
    logger.critical("Uncaught exception encountered.", exc_info=(exc_type, exc, tb))
    sys.exit(1)


def _task_exception_handler(loop: asyncio.AbstractEventLoop, context: dict) -> None:
    exc = context.get("exception")
    logger.error(
        f"Unhandled asyncio task failure: {context.get('message')}",
        exc_info=(type(exc), exc, exc.__traceback__) if exc else None,
    )


def install_fault_handlers(loop: asyncio.AbstractEventLoop | None = None) -> None:
    """Fatal hook for sync faults, log-only hook for async task faults."""
    sys.excepthook = _fatal_excepthook
    if loop is not None:
        loop.set_exception_handler(_task_exception_handler)
