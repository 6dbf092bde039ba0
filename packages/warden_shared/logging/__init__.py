"""Structured stdout logging for Warden components."""

from .config import (
    ContextFilter,
    JsonFormatter,
    PlainFormatter,
    configure_logging,
    get_logger,
)
from .context import bind_context, clear_context, get_context, log_context
from .public_api import (
    CompletionContext,
    InvocationContext,
    PublicApiInstrumentationConcern,
    PublicApiLoggingConcern,
    public_api_instrumented,
    public_api_logged,
)

__all__ = [
    "CompletionContext",
    "ContextFilter",
    "InvocationContext",
    "JsonFormatter",
    "PlainFormatter",
    "PublicApiInstrumentationConcern",
    "PublicApiLoggingConcern",
    "bind_context",
    "clear_context",
    "configure_logging",
    "get_context",
    "get_logger",
    "log_context",
    "public_api_instrumented",
    "public_api_logged",
]
