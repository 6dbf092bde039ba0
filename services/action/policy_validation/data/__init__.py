"""Policy Validation data layer exports."""

from services.action.policy_validation.data.repository import (
    InMemoryServiceStore,
    SqlServiceStore,
)
from services.action.policy_validation.data.runtime import PolicyValidationSqlRuntime
from services.action.policy_validation.data.schema import (
    metadata,
    policies,
    service_definitions,
    services,
)

__all__ = [
    "InMemoryServiceStore",
    "PolicyValidationSqlRuntime",
    "SqlServiceStore",
    "metadata",
    "policies",
    "service_definitions",
    "services",
]
