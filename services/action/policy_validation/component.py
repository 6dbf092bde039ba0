"""Component declaration and wiring for Policy Validation."""

from __future__ import annotations

from collections.abc import Mapping

from packages.warden_shared.config import WardenSettings

SERVICE_COMPONENT_ID = "service_policy_validation"
STORE_COMPONENT_KEY = "service_store"


def build_component(
    *, settings: WardenSettings, components: Mapping[str, object]
) -> object:
    """Build the validator set over a supplied, SQL, or in-memory store."""
    from services.action.policy_validation.config import (
        resolve_policy_validation_settings,
    )
    from services.action.policy_validation.data import (
        InMemoryServiceStore,
        PolicyValidationSqlRuntime,
        SqlServiceStore,
    )
    from services.action.policy_validation.service import build_validators

    service_settings = resolve_policy_validation_settings(settings)
    store = components.get(STORE_COMPONENT_KEY)
    if store is None:
        if service_settings.store_url:
            runtime = PolicyValidationSqlRuntime.from_settings(service_settings)
            store = SqlServiceStore(runtime)
        else:
            store = InMemoryServiceStore()

    return build_validators(settings=service_settings, store=store)
