"""Constructors for ``ErrorDetail`` values, one per category."""

from __future__ import annotations

from typing import Mapping

from . import codes
from .types import ErrorCategory, ErrorDetail


def validation_error(
    message: str,
    *,
    code: str = codes.INVALID_ARGUMENT,
    metadata: Mapping[str, object] | None = None,
) -> ErrorDetail:
    return _build(ErrorCategory.VALIDATION, message, code, False, metadata)


def not_found_error(
    message: str,
    *,
    code: str = codes.RESOURCE_NOT_FOUND,
    metadata: Mapping[str, object] | None = None,
) -> ErrorDetail:
    return _build(ErrorCategory.NOT_FOUND, message, code, False, metadata)


def dependency_error(
    message: str,
    *,
    code: str = codes.DEPENDENCY_UNAVAILABLE,
    retryable: bool = True,
    metadata: Mapping[str, object] | None = None,
) -> ErrorDetail:
    """Store-side failure; retryable unless the stored data itself is bad."""
    return _build(ErrorCategory.DEPENDENCY, message, code, retryable, metadata)


def internal_error(
    message: str,
    *,
    code: str = codes.INTERNAL_ERROR,
    metadata: Mapping[str, object] | None = None,
) -> ErrorDetail:
    return _build(ErrorCategory.INTERNAL, message, code, False, metadata)


def _build(
    category: ErrorCategory,
    message: str,
    code: str,
    retryable: bool,
    metadata: Mapping[str, object] | None,
) -> ErrorDetail:
    return ErrorDetail(
        code=code,
        message=message,
        category=category,
        retryable=retryable,
        metadata={str(key): str(value) for key, value in (metadata or {}).items()},
    )
