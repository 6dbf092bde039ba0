"""Authoritative in-process Python API for Policy Validation."""

from __future__ import annotations

import logging
from abc import ABC
from dataclasses import dataclass
from typing import Generic, TypeVar

from packages.warden_shared.errors import ErrorDetail
from packages.warden_shared.logging import (
    fields,
    get_logger,
    log_context,
    public_api_instrumented,
)
from services.action.policy_validation.component import SERVICE_COMPONENT_ID
from services.action.policy_validation.config import PolicyValidationSettings
from services.action.policy_validation.domain import (
    Policy,
    Service,
    ServiceDefinition,
    ValidationAction,
)
from services.action.policy_validation.failures import (
    FailureCollector,
    ValidationFailureDetail,
    ValidationFailureDetailBuilder,
)
from services.action.policy_validation.interfaces import ServiceStore
from services.action.policy_validation.metadata_index import MetadataIndex

_LOGGER = get_logger(__name__)

TEntity = TypeVar("TEntity")

UNIMPLEMENTED_REASON = "unimplemented method called"


class ValidationFailedError(Exception):
    """Aggregated rejection raised when a validation pass finds defects.

    ``message`` is ``None`` when a rule-check reported invalid without
    recording any failure.
    """

    def __init__(
        self,
        message: str | None,
        failures: tuple[ValidationFailureDetail, ...] = (),
    ) -> None:
        super().__init__(message or "")
        self.message = message
        self.failures = failures

    @property
    def errors(self) -> tuple[ErrorDetail, ...]:
        return tuple(failure.to_error_detail() for failure in self.failures)


class Validator(ABC, Generic[TEntity]):
    """Per-action validation orchestrator for one entity kind.

    Subclasses supply ``check_rules`` (entity already in the store, addressed
    by id) and ``check_candidate`` (proposed instance). Both append every
    violation they find to the collector and return whether the entity is
    valid. The defaults refuse everything.
    """

    def __init__(
        self,
        *,
        index: MetadataIndex,
        failure_delimiter: str = ";",
        logger: logging.Logger | None = None,
    ) -> None:
        self._index = index
        self._failure_delimiter = failure_delimiter
        self._logger = logger or _LOGGER
        self._instrumented_validate = public_api_instrumented(
            logger=self._logger,
            component_id=SERVICE_COMPONENT_ID,
            api_name="validate",
            id_fields=("entity_id", "action"),
        )(self._validate_stored)
        self._instrumented_validate_candidate = public_api_instrumented(
            logger=self._logger,
            component_id=SERVICE_COMPONENT_ID,
            api_name="validate_candidate",
            id_fields=("action",),
        )(self._validate_proposed)

    def validate(self, *, entity_id: int, action: ValidationAction) -> None:
        """Validate a stored entity; raise ``ValidationFailedError`` if invalid."""
        self._instrumented_validate(entity_id=entity_id, action=action)

    def validate_candidate(self, *, candidate: TEntity, action: ValidationAction) -> None:
        """Validate a proposed entity instance before it is persisted."""
        self._instrumented_validate_candidate(candidate=candidate, action=action)

    def _validate_stored(self, *, entity_id: int, action: ValidationAction) -> None:
        failures = FailureCollector()
        valid = self.check_rules(entity_id, action, failures)
        self._conclude(valid=valid, failures=failures, entity_id=entity_id, action=action)

    def _validate_proposed(self, *, candidate: TEntity, action: ValidationAction) -> None:
        failures = FailureCollector()
        valid = self.check_candidate(candidate, action, failures)
        self._conclude(
            valid=valid,
            failures=failures,
            entity_id=getattr(candidate, "id", None),
            action=action,
        )

    def check_rules(
        self, entity_id: int, action: ValidationAction, failures: FailureCollector
    ) -> bool:
        failures.add(_unimplemented_failure())
        return False

    def check_candidate(
        self, candidate: TEntity, action: ValidationAction, failures: FailureCollector
    ) -> bool:
        failures.add(_unimplemented_failure())
        return False

    def serialize_failures(self, failures: FailureCollector) -> str | None:
        """Join failures in collection order, each followed by the delimiter."""
        if failures.is_empty:
            self._logger.warning("serialize_failures called with no failures")
            return None
        return "".join(
            f"{failure}{self._failure_delimiter}" for failure in failures
        )

    def _conclude(
        self,
        *,
        valid: bool,
        failures: FailureCollector,
        entity_id: int | None,
        action: ValidationAction,
    ) -> None:
        if valid:
            return
        for failure in failures:
            with log_context(
                {
                    fields.EVENT: fields.VALIDATION_FAILURE_EVENT,
                    fields.VALIDATOR: type(self).__name__,
                    fields.ENTITY_ID: entity_id,
                    fields.ACTION: action.value,
                    fields.FIELD: failure.field_name,
                    fields.SUB_FIELD: failure.sub_field_name or None,
                    fields.CONDITION: failure.condition.value,
                }
            ):
                self._logger.info("Validation failure: %s", failure.reason)
        message = self.serialize_failures(failures)
        raise ValidationFailedError(message, failures.failures)


def _unimplemented_failure() -> ValidationFailureDetail:
    return (
        ValidationFailureDetailBuilder()
        .is_an_internal_error()
        .because_of(UNIMPLEMENTED_REASON)
        .build()
    )


@dataclass(frozen=True)
class ValidatorSet:
    """One validator per entity kind, sharing a single metadata index."""

    policy: Validator[Policy]
    service: Validator[Service]
    service_definition: Validator[ServiceDefinition]


def build_validators(
    *,
    settings: PolicyValidationSettings,
    store: ServiceStore,
    logger: logging.Logger | None = None,
) -> ValidatorSet:
    """Build the default validator set over one store."""
    from services.action.policy_validation.implementation import (
        PolicyValidator,
        ServiceDefinitionValidator,
        ServiceValidator,
    )

    index = MetadataIndex(
        store,
        logger=logger,
        failure_log_level=settings.store_failure_log_level,
    )
    options = {
        "index": index,
        "failure_delimiter": settings.failure_delimiter,
        "logger": logger,
    }
    return ValidatorSet(
        policy=PolicyValidator(**options),
        service=ServiceValidator(**options),
        service_definition=ServiceDefinitionValidator(**options),
    )
