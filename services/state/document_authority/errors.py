"""Stable error kinds raised and returned by the Document Authority Service."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from packages.hwsc_shared.errors import ErrorCategory, ErrorDetail


@dataclass(frozen=True)
class ErrorKind:
    """One externally visible failure identity."""

    code: str
    message: str
    category: ErrorCategory


def _validation(code: str, message: str) -> ErrorKind:
    return ErrorKind(code=code, message=message, category=ErrorCategory.VALIDATION)


# Request shape
NIL_REQUEST = _validation("NIL_REQUEST", "Nil request")
NIL_REQUEST_DATA = _validation("NIL_REQUEST_DATA", "Nil request data")
MISSING_DUID = _validation("MISSING_DUID", "Missing DUID")
NIL_QUERY_ARGUMENTS = _validation("NIL_QUERY_ARGUMENTS", "Nil query arguments")
NIL_QUERY_TRANSACTION = _validation("NIL_QUERY_TRANSACTION", "nil QueryTransaction")
INVALID_FILE_METADATA_PARAMETERS = _validation(
    "INVALID_FILE_METADATA_PARAMETERS", "invalid FileMetadataParameters"
)
INVALID_MEDIA_TYPE = _validation("INVALID_MEDIA_TYPE", "invalid media type")
INVALID_SERVICE_STATE = _validation("INVALID_SERVICE_STATE", "invalid service state")

# Document fields
INVALID_DUID = _validation("INVALID_DUID", "invalid Document duid")
INVALID_UUID = _validation("INVALID_UUID", "invalid Document uuid")
INVALID_FUID = _validation("INVALID_FUID", "invalid Document fuid")
INVALID_LAST_NAME = _validation("INVALID_LAST_NAME", "invalid Document LastName")
INVALID_FIRST_NAME = _validation("INVALID_FIRST_NAME", "invalid Document FirstName")
INVALID_CALL_TYPE_NAME = _validation(
    "INVALID_CALL_TYPE_NAME", "invalid Document CallTypeName"
)
INVALID_GROUND_TYPE = _validation("INVALID_GROUND_TYPE", "invalid Document GroundType")
INVALID_CITY = _validation("INVALID_CITY", "invalid Document City")
INVALID_STATE = _validation("INVALID_STATE", "invalid Document State")
INVALID_PROVINCE = _validation("INVALID_PROVINCE", "invalid Document Province")
INVALID_COUNTRY = _validation("INVALID_COUNTRY", "invalid Document Country")
INVALID_OCEAN = _validation("INVALID_OCEAN", "invalid Document Ocean")
INVALID_SENSOR_TYPE = _validation("INVALID_SENSOR_TYPE", "invalid Document SensorType")
INVALID_SENSOR_NAME = _validation("INVALID_SENSOR_NAME", "invalid Document SensorName")
INVALID_SAMPLING_RATE = _validation(
    "INVALID_SAMPLING_RATE", "invalid Document SamplingRate"
)
INVALID_LATITUDE = _validation("INVALID_LATITUDE", "invalid Document Latitude")
INVALID_LONGITUDE = _validation("INVALID_LONGITUDE", "invalid Document Longitude")

NIL_IMAGE_URLS = _validation("NIL_IMAGE_URLS", "nil Document ImageURLs")
NIL_AUDIO_URLS = _validation("NIL_AUDIO_URLS", "nil Document AudioURLs")
NIL_VIDEO_URLS = _validation("NIL_VIDEO_URLS", "nil Document VideoURLs")
NIL_FILE_URLS = _validation("NIL_FILE_URLS", "nil Document FileURLs")
INVALID_IMAGE_URL = _validation("INVALID_IMAGE_URL", "invalid Document ImageURL")
INVALID_AUDIO_URL = _validation("INVALID_AUDIO_URL", "invalid Document AudioURL")
INVALID_VIDEO_URL = _validation("INVALID_VIDEO_URL", "invalid Document VideoURL")
INVALID_FILE_URL = _validation("INVALID_FILE_URL", "invalid Document FileURL")
INVALID_IMAGE_TYPE = _validation(
    "INVALID_IMAGE_TYPE", "invalid Document image type ImageURL"
)
INVALID_AUDIO_TYPE = _validation(
    "INVALID_AUDIO_TYPE", "invalid Document audio type AudioURL"
)
INVALID_VIDEO_TYPE = _validation(
    "INVALID_VIDEO_TYPE", "invalid Document video type VideoURL"
)
UNREACHABLE_URI = _validation("UNREACHABLE_URI", "invalid Document URI")

INVALID_RECORD_TIMESTAMP = _validation(
    "INVALID_RECORD_TIMESTAMP", "invalid Document RecordTimestamp"
)
INVALID_CREATE_TIMESTAMP = _validation(
    "INVALID_CREATE_TIMESTAMP", "invalid Document CreateTimestamp"
)
INVALID_UPDATE_TIMESTAMP = _validation(
    "INVALID_UPDATE_TIMESTAMP", "invalid Document UpdateTimestamp"
)
MISSING_IMAGE_OR_AUDIO = _validation(
    "MISSING_IMAGE_OR_AUDIO", "requires at least 1 valid Document ImageURL or AudioURL"
)

# Distinct pipeline
NIL_QUERY_RESULT = ErrorKind(
    code="NIL_QUERY_RESULT",
    message="nil query result",
    category=ErrorCategory.INTERNAL,
)
INVALID_DISTINCT_RESULT = ErrorKind(
    code="INVALID_DISTINCT_RESULT",
    message="invalid distinct result",
    category=ErrorCategory.INTERNAL,
)
INVALID_DISTINCT_FIELD_NAME = ErrorKind(
    code="INVALID_DISTINCT_FIELD_NAME",
    message="invalid distinct field name",
    category=ErrorCategory.INTERNAL,
)

# Resources
SERVICE_UNAVAILABLE = ErrorKind(
    code="SERVICE_UNAVAILABLE",
    message="Service unavailable",
    category=ErrorCategory.DEPENDENCY,
)
DOCUMENT_NOT_FOUND = ErrorKind(
    code="DOCUMENT_NOT_FOUND",
    message="document not found",
    category=ErrorCategory.NOT_FOUND,
)


class DocumentServiceError(Exception):
    """Failure carrying one stable ``ErrorKind``."""

    def __init__(self, kind: ErrorKind, *, metadata: Mapping[str, str] | None = None):
        super().__init__(kind.message)
        self.kind = kind
        self.metadata = dict(metadata or {})

    def to_error_detail(self) -> ErrorDetail:
        """Return the shared structured error for this failure."""
        return to_error_detail(self.kind, metadata=self.metadata)


class DocumentValidationError(DocumentServiceError):
    """A request or document failed field-level validation."""


def to_error_detail(
    kind: ErrorKind, *, metadata: Mapping[str, str] | None = None
) -> ErrorDetail:
    """Build an ``ErrorDetail`` for one error kind."""
    return ErrorDetail(
        code=kind.code,
        message=kind.message,
        category=kind.category,
        retryable=kind.category == ErrorCategory.DEPENDENCY,
        metadata=dict(metadata or {}),
    )
