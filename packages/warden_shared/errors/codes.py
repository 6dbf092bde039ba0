"""Machine-readable error codes attached to ``ErrorDetail`` values."""

# Rejected input.
INVALID_ARGUMENT = "INVALID_ARGUMENT"
MISSING_REQUIRED_FIELD = "MISSING_REQUIRED_FIELD"
RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"

# Service store access.
DEPENDENCY_TIMEOUT = "DEPENDENCY_TIMEOUT"
DEPENDENCY_UNAVAILABLE = "DEPENDENCY_UNAVAILABLE"
STORE_DECODE_FAILURE = "STORE_DECODE_FAILURE"

# Defects in Warden itself.
INTERNAL_ERROR = "INTERNAL_ERROR"
UNEXPECTED_EXCEPTION = "UNEXPECTED_EXCEPTION"
