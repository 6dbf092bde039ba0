"""Protocol for the authoritative store consulted during validation."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from pydantic import BaseModel, ConfigDict

from services.action.policy_validation.domain import (
    Policy,
    Service,
    ServiceDefinition,
)


class PolicySearchFilter(BaseModel):
    """Optional exact-match filters for policy listing."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    policy_name: str | None = None
    service_name: str | None = None


class ServiceStore(Protocol):
    """Read contract over persisted definitions, services and policies.

    Any method may raise an implementation-defined exception. Callers inside
    this service never see it: ``MetadataIndex`` absorbs it.
    """

    def get_service_definition(
        self, *, service_def_id: int
    ) -> ServiceDefinition | None:
        """Return one service definition by identifier."""

    def get_service_definition_by_name(self, *, name: str) -> ServiceDefinition | None:
        """Return one service definition by unique name."""

    def get_service(self, *, service_id: int) -> Service | None:
        """Return one service by identifier."""

    def get_service_by_name(self, *, name: str) -> Service | None:
        """Return one service by unique name."""

    def get_policy(self, *, policy_id: int) -> Policy | None:
        """Return one policy by identifier."""

    def list_policies(self, *, search_filter: PolicySearchFilter) -> Sequence[Policy]:
        """Return policies matching every filter that is set."""
