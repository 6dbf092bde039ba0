"""Stdout logging setup driven by ``LoggingSettings``."""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime

from packages.warden_shared.config import LoggingSettings

from . import fields
from .context import bind_context, get_context


class ContextFilter(logging.Filter):
    """Copy the bound context onto each record as attributes and as ``context``."""

    def filter(self, record: logging.LogRecord) -> bool:
        context = get_context()
        record.context = context
        record.__dict__.update(context)
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per line: core fields first, then bound context."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, object] = {
            fields.TIMESTAMP: datetime.fromtimestamp(record.created, UTC).isoformat(),
            fields.LEVEL: record.levelname,
            fields.LOGGER: record.name,
            fields.MESSAGE: record.getMessage(),
        }
        payload.update(_context_of(record))
        if record.exc_info:
            payload[fields.EXCEPTION] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str, separators=(",", ":"))


class PlainFormatter(logging.Formatter):
    """Console line with bound context appended as sorted ``key=value`` pairs."""

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        pairs = " ".join(
            f"{key}={value}" for key, value in sorted(_context_of(record).items())
        )
        return f"{line} {pairs}" if pairs else line


def configure_logging(settings: LoggingSettings | None = None) -> None:
    """Install a single stdout handler on the root logger.

    Calling this again replaces the previous handler. ``service`` and
    ``environment`` are bound into the logging context of the caller.
    """
    settings = settings or LoggingSettings()
    handler = logging.StreamHandler(stream=sys.stdout)
    handler.addFilter(ContextFilter())
    handler.setFormatter(
        JsonFormatter() if settings.json_output else PlainFormatter()
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(settings.level)

    bind_context(
        **{
            fields.SERVICE: settings.service or None,
            fields.ENVIRONMENT: settings.environment or None,
        }
    )


def get_logger(name: str | None = None) -> logging.Logger:
    return logging.getLogger(name)


def _context_of(record: logging.LogRecord) -> dict[str, object]:
    context = getattr(record, "context", None)
    return dict(context) if isinstance(context, dict) else {}
