"""Canonical structured logging field names shared by HWSC services."""

TIMESTAMP = "timestamp"
LEVEL = "level"
LOGGER = "logger"
MESSAGE = "message"
EVENT = "event"
EXCEPTION = "exception"

# Correlation.
TRACE_ID = "trace_id"
ENVELOPE_ID = "envelope_id"
SOURCE = "source"
PRINCIPAL = "principal"

# Public API invocation.
COMPONENT_ID = "component_id"
API_NAME = "api_name"
PUBLIC_API_INVOCATION_EVENT = "public_api_invocation"
PUBLIC_API_COMPLETION_EVENT = "public_api_completion"
SUCCESS = "success"
DURATION_MS = "duration_ms"
ERRORS = "errors"
ERROR_CATEGORY = "error_category"

# Document identifiers.
DUID = "duid"
UUID = "uuid"
FUID = "fuid"

# Service level.
SERVICE = "service"
ENVIRONMENT = "environment"
SERVICE_STATE = "service_state"
MONGO_ROLE = "mongo_role"
