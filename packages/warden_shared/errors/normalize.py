"""Classification of exceptions raised by service store implementations."""

from __future__ import annotations

from . import codes
from .factories import dependency_error, internal_error, not_found_error
from .types import ErrorDetail

# First matching row wins. Pydantic's ValidationError is a ValueError, so
# undecodable stored documents land on the ValueError row.
_STORE_EXCEPTION_RULES = (
    (LookupError, codes.RESOURCE_NOT_FOUND, "entity not found"),
    (TimeoutError, codes.DEPENDENCY_TIMEOUT, "store timeout"),
    (ConnectionError, codes.DEPENDENCY_UNAVAILABLE, "store unavailable"),
    (ValueError, codes.STORE_DECODE_FAILURE, "stored entity could not be decoded"),
)


def exception_to_error(exc: Exception) -> ErrorDetail:
    """Classify a store exception; anything unrecognized is internal."""
    metadata = {"exception_type": type(exc).__name__}
    text = _text_of(exc)
    for exc_type, code, fallback in _STORE_EXCEPTION_RULES:
        if not isinstance(exc, exc_type):
            continue
        message = text or fallback
        if code == codes.RESOURCE_NOT_FOUND:
            return not_found_error(message, code=code, metadata=metadata)
        return dependency_error(
            message,
            code=code,
            retryable=code != codes.STORE_DECODE_FAILURE,
            metadata=metadata,
        )
    return internal_error(
        text or "unexpected exception",
        code=codes.UNEXPECTED_EXCEPTION,
        metadata=metadata,
    )


def _text_of(exc: Exception) -> str:
    """Return ``str(exc)``, or the type name when ``__str__`` itself fails."""
    try:
        return str(exc)
    except Exception:  # noqa: BLE001
        return type(exc).__name__
