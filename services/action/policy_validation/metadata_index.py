"""Read-only lookups over the service store that never raise."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TypeVar

from packages.warden_shared.errors import exception_to_error
from packages.warden_shared.logging import fields, get_logger, log_context
from services.action.policy_validation.domain import (
    Policy,
    Service,
    ServiceDefinition,
)
from services.action.policy_validation.interfaces import (
    PolicySearchFilter,
    ServiceStore,
)

_LOGGER = get_logger(__name__)

TResult = TypeVar("TResult")


class MetadataIndex:
    """Accessor over definitions, services and policies keyed by id or name.

    Every store failure (missing row, unreachable backend, undecodable
    document) is logged here and turned into an absent result. Validators
    built on top only ever see ``None`` or an empty tuple.
    """

    def __init__(
        self,
        store: ServiceStore,
        *,
        logger: logging.Logger | None = None,
        failure_log_level: int | str = logging.DEBUG,
    ) -> None:
        if store is None:
            raise ValueError("MetadataIndex requires a store")
        self._store = store
        self._logger = logger or _LOGGER
        self._failure_log_level = _resolve_level(failure_log_level)

    def get_service_definition(self, service_def_id: int) -> ServiceDefinition | None:
        return self._guarded(
            "get_service_definition",
            lambda: self._store.get_service_definition(service_def_id=service_def_id),
            None,
            service_def_id=service_def_id,
        )

    def get_service_definition_by_name(
        self, name: str | None
    ) -> ServiceDefinition | None:
        if not name:
            return None
        return self._guarded(
            "get_service_definition_by_name",
            lambda: self._store.get_service_definition_by_name(name=name),
            None,
            name=name,
        )

    def get_service(self, service_id: int) -> Service | None:
        return self._guarded(
            "get_service",
            lambda: self._store.get_service(service_id=service_id),
            None,
            service_id=service_id,
        )

    def get_service_by_name(self, name: str | None) -> Service | None:
        if not name:
            return None
        return self._guarded(
            "get_service_by_name",
            lambda: self._store.get_service_by_name(name=name),
            None,
            name=name,
        )

    def get_policy(self, policy_id: int) -> Policy | None:
        return self._guarded(
            "get_policy",
            lambda: self._store.get_policy(policy_id=policy_id),
            None,
            policy_id=policy_id,
        )

    def list_policies(
        self,
        policy_name: str | None = None,
        service_name: str | None = None,
    ) -> tuple[Policy, ...]:
        search_filter = PolicySearchFilter(
            policy_name=policy_name, service_name=service_name
        )
        policies = self._guarded(
            "list_policies",
            lambda: self._store.list_policies(search_filter=search_filter),
            None,
            policy_name=policy_name,
            service_name=service_name,
        )
        if policies is None:
            return ()
        return tuple(policies)

    def _guarded(
        self,
        operation: str,
        call: Callable[[], TResult | None],
        default: TResult | None,
        **references: object,
    ) -> TResult | None:
        """Run one store call, converting any exception into ``default``."""
        try:
            return call()
        except Exception as exc:  # noqa: BLE001
            error = exception_to_error(exc)
            with log_context(
                {
                    fields.EVENT: fields.STORE_FAILURE_EVENT,
                    fields.STORE_OPERATION: operation,
                    fields.ERROR_CODE: error.code,
                    fields.ERROR_CATEGORY: error.category.value,
                    **references,
                }
            ):
                self._logger.log(
                    self._failure_log_level,
                    "Store lookup failed; treating result as absent",
                    exc_info=True,
                )
            return default


def _resolve_level(level: int | str) -> int:
    """Return a numeric logging level, rejecting unknown level names."""
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"unknown log level: {level!r}")
        return resolved
    if isinstance(level, bool) or not isinstance(level, int):
        raise ValueError(f"log level must be an int or level name: {level!r}")
    return level
