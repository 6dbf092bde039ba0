"""Structured validation failure records and the collector that accumulates them."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum

from packages.warden_shared.errors import (
    ErrorDetail,
    codes,
    internal_error,
    not_found_error,
    validation_error,
)


class FailureCondition(str, Enum):
    """What exactly was wrong with the field a failure points at."""

    MISSING = "missing"
    INVALID_VALUE = "invalid value"
    NOT_FOUND = "not found"
    INTERNAL_ERROR = "internal error"


@dataclass(frozen=True)
class ValidationFailureDetail:
    """One reportable defect found during a validation pass."""

    field_name: str
    sub_field_name: str
    condition: FailureCondition
    reason: str

    @property
    def is_internal_error(self) -> bool:
        return self.condition is FailureCondition.INTERNAL_ERROR

    @property
    def is_semantic_error(self) -> bool:
        return not self.is_internal_error

    @property
    def is_missing(self) -> bool:
        return self.condition is FailureCondition.MISSING

    def to_error_detail(self) -> ErrorDetail:
        """Convert into the shared error shape for the request-handling layer."""
        metadata = {"field": self.field_name}
        if self.sub_field_name:
            metadata["sub_field"] = self.sub_field_name
        message = self.reason or self.condition.value
        if self.condition is FailureCondition.MISSING:
            return validation_error(
                message, code=codes.MISSING_REQUIRED_FIELD, metadata=metadata
            )
        if self.condition is FailureCondition.NOT_FOUND:
            return not_found_error(
                message, code=codes.RESOURCE_NOT_FOUND, metadata=metadata
            )
        if self.condition is FailureCondition.INTERNAL_ERROR:
            return internal_error(message, metadata=metadata)
        return validation_error(message, code=codes.INVALID_ARGUMENT, metadata=metadata)

    def __str__(self) -> str:
        return (
            f"Validation failure: field[{self.field_name}], "
            f"subfield[{self.sub_field_name}], type[{self.condition.value}], "
            f"reason[{self.reason}]"
        )


class ValidationFailureDetailBuilder:
    """Fluent builder producing immutable ``ValidationFailureDetail`` values.

    Conditions are mutually exclusive; the last one marked wins. A builder
    with no condition marked produces an invalid-value failure.
    """

    def __init__(self) -> None:
        self._field_name = ""
        self._sub_field_name = ""
        self._condition = FailureCondition.INVALID_VALUE
        self._reason = ""

    def field(self, name: str) -> ValidationFailureDetailBuilder:
        self._field_name = name
        return self

    def sub_field(self, name: str | None) -> ValidationFailureDetailBuilder:
        self._sub_field_name = name or ""
        return self

    def is_an_internal_error(self) -> ValidationFailureDetailBuilder:
        self._condition = FailureCondition.INTERNAL_ERROR
        return self

    def is_missing(self) -> ValidationFailureDetailBuilder:
        self._condition = FailureCondition.MISSING
        return self

    def is_invalid_value(self) -> ValidationFailureDetailBuilder:
        self._condition = FailureCondition.INVALID_VALUE
        return self

    def is_not_found(self) -> ValidationFailureDetailBuilder:
        self._condition = FailureCondition.NOT_FOUND
        return self

    def because_of(self, reason: str) -> ValidationFailureDetailBuilder:
        self._reason = reason
        return self

    def build(self) -> ValidationFailureDetail:
        return ValidationFailureDetail(
            field_name=self._field_name,
            sub_field_name=self._sub_field_name,
            condition=self._condition,
            reason=self._reason,
        )


class FailureCollector:
    """Append-only, ordered sequence of failures for one validation pass."""

    def __init__(self) -> None:
        self._failures: list[ValidationFailureDetail] = []

    def add(self, failure: ValidationFailureDetail) -> None:
        self._failures.append(failure)

    @property
    def failures(self) -> tuple[ValidationFailureDetail, ...]:
        return tuple(self._failures)

    @property
    def is_empty(self) -> bool:
        return len(self._failures) == 0

    def __iter__(self) -> Iterator[ValidationFailureDetail]:
        return iter(tuple(self._failures))

    def __len__(self) -> int:
        return len(self._failures)
