"""Pydantic settings for Policy Validation behavior."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from packages.warden_shared.config import WardenSettings, resolve_component_settings
from services.action.policy_validation.component import SERVICE_COMPONENT_ID


class PolicyValidationSettings(BaseModel):
    """Validation runtime behavior and optional SQL store wiring."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    failure_delimiter: str = Field(default=";", min_length=1)
    store_failure_log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "DEBUG"
    store_url: str | None = None
    create_schema: bool = False


def resolve_policy_validation_settings(
    settings: WardenSettings,
) -> PolicyValidationSettings:
    """Resolve validation settings from ``components.service.policy_validation``."""
    return resolve_component_settings(
        settings=settings,
        component_id=SERVICE_COMPONENT_ID,
        model=PolicyValidationSettings,
    )
