"""Structured log fields carried per execution context.

Fields live in a ``ContextVar`` holding a read-only mapping, so a validation
pass running in one thread or task never sees another pass's fields.
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from types import MappingProxyType
from typing import Iterator, Mapping

_EMPTY: Mapping[str, str] = MappingProxyType({})

_LOG_FIELDS: ContextVar[Mapping[str, str]] = ContextVar(
    "warden_log_fields", default=_EMPTY
)


def get_context() -> dict[str, str]:
    """Return a mutable copy of the fields bound in the current context."""
    return dict(_LOG_FIELDS.get())


def bind_context(**values: object) -> None:
    """Bind fields until they are cleared. ``None`` values are dropped."""
    _LOG_FIELDS.set(_with(values))


def clear_context(*keys: str) -> None:
    """Drop the named fields, or every field when no name is given."""
    if not keys:
        _LOG_FIELDS.set(_EMPTY)
        return
    remaining = {
        key: value for key, value in _LOG_FIELDS.get().items() if key not in keys
    }
    _LOG_FIELDS.set(MappingProxyType(remaining))


@contextmanager
def log_context(values: Mapping[str, object]) -> Iterator[None]:
    """Bind fields for the duration of a block, then restore the previous set."""
    token = _LOG_FIELDS.set(_with(values))
    try:
        yield
    finally:
        _LOG_FIELDS.reset(token)


def _with(values: Mapping[str, object]) -> Mapping[str, str]:
    merged = dict(_LOG_FIELDS.get())
    for key, value in values.items():
        if value is not None:
            merged[str(key)] = str(value)
    return MappingProxyType(merged)
