"""Structured log field names used across Warden."""

# Core record fields.
TIMESTAMP = "timestamp"
LEVEL = "level"
LOGGER = "logger"
MESSAGE = "message"
EXCEPTION = "exception"
EVENT = "event"
SERVICE = "service"
ENVIRONMENT = "environment"

# Public API instrumentation.
COMPONENT_ID = "component_id"
API_NAME = "api_name"
PUBLIC_API_INVOCATION_EVENT = "public_api_invocation"
PUBLIC_API_COMPLETION_EVENT = "public_api_completion"
PUBLIC_API_INSTRUMENTATION_FAILURE_EVENT = "public_api_instrumentation_failure"
SUCCESS = "success"
DURATION_MS = "duration_ms"
ERRORS = "errors"
STAGE = "stage"
CONCERN = "concern"

# Validation failures.
VALIDATION_FAILURE_EVENT = "validation_failure"
VALIDATOR = "validator"
ENTITY_ID = "entity_id"
ACTION = "action"
FIELD = "field"
SUB_FIELD = "sub_field"
CONDITION = "condition"

# Service store lookups.
STORE_FAILURE_EVENT = "store_failure"
STORE_OPERATION = "store_operation"
ERROR_CODE = "error_code"
ERROR_CATEGORY = "error_category"
