"""Central logging configuration for atlasconvert."""
from __future__ import annotations

import json
import logging
import os
import sys
import threading
import uuid
from datetime import datetime, timezone
from typing import Any


_CONFIG_LOCK = threading.Lock()
_CONFIGURED = False
_CORRELATION_ID = os.getenv("ATLASCONVERT_CORR_ID") or str(uuid.uuid4())

_DEFAULT_EXTRA_CHARS = 200


def _excerpt_limit() -> int:
    raw = os.getenv("ATLASCONVERT_LOG_EXCERPT", "")
    try:
        limit = int(raw)
    except ValueError:
        return _DEFAULT_EXTRA_CHARS
    return limit if limit > 0 else _DEFAULT_EXTRA_CHARS


# Document bodies can be attached to records as ``extra``; keep log lines short.
_MAX_EXTRA_CHARS = _excerpt_limit()

# Library default: stay silent unless the host configures logging.
if not logging.getLogger("atlasconvert").handlers:
    logging.getLogger("atlasconvert").addHandler(logging.NullHandler())

_RESERVED_ATTRS = frozenset(
    {
        "args",
        "msg",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "message",
        "taskName",
    }
)


def get_correlation_id() -> str:
    """Return the run-scoped correlation identifier."""

    return _CORRELATION_ID


class _CorrelationIdFilter(logging.Filter):
    """Inject the correlation identifier into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401
        if not getattr(record, "correlation_id", None):
            record.correlation_id = _CORRELATION_ID
        return True


def _excerpt(value: Any) -> Any:
    if isinstance(value, str) and len(value) > _MAX_EXTRA_CHARS:
        return f"{value[:_MAX_EXTRA_CHARS]}... ({len(value)} chars)"
    return value


class _ExcerptFilter(logging.Filter):
    """Shorten oversized string extras such as raw markup or ADF JSON."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401
        for key in list(record.__dict__.keys()):
            if key in _RESERVED_ATTRS:
                continue
            record.__dict__[key] = _excerpt(record.__dict__[key])
        return True


class _JsonFormatter(logging.Formatter):
    """Formatter that outputs structured JSON payloads."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        payload: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "correlation_id": getattr(record, "correlation_id", _CORRELATION_ID),
        }
        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS or key in payload or key == "name":
                continue
            payload[key] = value
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


class _StructuredFormatter(logging.Formatter):
    """Plain-text structured formatter."""

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)sZ %(levelname)s %(name)s [corr=%(correlation_id)s] %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: D401, N802
        dt = datetime.fromtimestamp(record.created, tz=timezone.utc)
        return dt.strftime(self.datefmt or "%Y-%m-%dT%H:%M:%S")


def configure_logging(level_override: str | None = None) -> None:
    """Attach a stdout handler to the ``atlasconvert`` logger tree.

    Importing the package never calls this; until it is called, records
    propagate to whatever handlers the host application installed. Only the
    package logger is touched, never the root logger.
    """

    global _CONFIGURED

    with _CONFIG_LOCK:
        package_logger = logging.getLogger("atlasconvert")
        first_configuration = not _CONFIGURED
        if first_configuration:
            handler = logging.StreamHandler(stream=sys.stdout)
            use_json = os.getenv("ATLASCONVERT_LOG_JSON", "false").lower() == "true"
            handler.addFilter(_CorrelationIdFilter())
            handler.addFilter(_ExcerptFilter())
            handler.setFormatter(_JsonFormatter() if use_json else _StructuredFormatter())
            package_logger.handlers = [handler]
            package_logger.propagate = False
            _CONFIGURED = True

        level: int | None = None
        if level_override:
            level = getattr(logging, level_override.upper(), logging.INFO)
        elif first_configuration:
            env_level = os.getenv("ATLASCONVERT_LOG_LEVEL", "WARNING").upper()
            level = getattr(logging, env_level, logging.WARNING)

        if level is not None:
            package_logger.setLevel(level)


def get_logger(name: str) -> logging.Logger:
    """Return a logger; handlers are left to :func:`configure_logging`."""

    return logging.getLogger(name)


__all__ = ["get_logger", "configure_logging", "get_correlation_id"]
