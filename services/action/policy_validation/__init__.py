"""Policy Validation package exports."""

from packages.warden_shared.errors import ErrorCategory, ErrorDetail
from services.action.policy_validation.component import (
    SERVICE_COMPONENT_ID,
    build_component,
)
from services.action.policy_validation.config import (
    PolicyValidationSettings,
    resolve_policy_validation_settings,
)
from services.action.policy_validation.data import (
    InMemoryServiceStore,
    PolicyValidationSqlRuntime,
    SqlServiceStore,
)
from services.action.policy_validation.domain import (
    AccessTypeDef,
    ConfigDef,
    EnumDef,
    Policy,
    PolicyItem,
    PolicyItemAccess,
    PolicyResource,
    ResourceDef,
    Service,
    ServiceDefinition,
    ValidationAction,
)
from services.action.policy_validation.failures import (
    FailureCollector,
    FailureCondition,
    ValidationFailureDetail,
    ValidationFailureDetailBuilder,
)
from services.action.policy_validation.implementation import (
    PolicyValidator,
    ServiceDefinitionValidator,
    ServiceValidator,
)
from services.action.policy_validation.interfaces import (
    PolicySearchFilter,
    ServiceStore,
)
from services.action.policy_validation.metadata_index import MetadataIndex
from services.action.policy_validation.service import (
    ValidationFailedError,
    Validator,
    ValidatorSet,
    build_validators,
)

__all__ = [
    "AccessTypeDef",
    "ConfigDef",
    "EnumDef",
    "ErrorCategory",
    "ErrorDetail",
    "FailureCollector",
    "FailureCondition",
    "InMemoryServiceStore",
    "MetadataIndex",
    "Policy",
    "PolicyItem",
    "PolicyItemAccess",
    "PolicyResource",
    "PolicySearchFilter",
    "PolicyValidationSettings",
    "PolicyValidationSqlRuntime",
    "PolicyValidator",
    "ResourceDef",
    "SERVICE_COMPONENT_ID",
    "Service",
    "ServiceDefinition",
    "ServiceDefinitionValidator",
    "ServiceStore",
    "ServiceValidator",
    "SqlServiceStore",
    "ValidationAction",
    "ValidationFailedError",
    "ValidationFailureDetail",
    "ValidationFailureDetailBuilder",
    "Validator",
    "ValidatorSet",
    "build_component",
    "build_validators",
    "resolve_policy_validation_settings",
]
