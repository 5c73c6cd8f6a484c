"""MongoDB substrate errors and pymongo exception normalization."""

from __future__ import annotations

from pymongo.errors import (
    AutoReconnect,
    ConnectionFailure,
    DuplicateKeyError,
    ExecutionTimeout,
    NetworkTimeout,
    OperationFailure,
    PyMongoError,
    ServerSelectionTimeoutError,
)

from packages.hwsc_shared.errors import (
    ErrorDetail,
    codes,
    conflict_error,
    dependency_error,
    internal_error,
)


class MongoSubstrateError(Exception):
    """Base error for MongoDB substrate failures."""

    message = "MongoDB failure"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)


class EmptyMongoUriError(MongoSubstrateError):
    """A reader or writer URI was blank at dial time."""

    message = "empty MongoDB URI"


class NilMongoClientError(MongoSubstrateError):
    """An operation needed a client handle that is currently unset."""

    message = "nil MongoDB client"


class MongoUnavailableError(MongoSubstrateError):
    """Dial, ping, or redial of a MongoDB handle failed."""

    message = "MongoDB unavailable"


def normalize_mongo_error(exc: Exception) -> ErrorDetail:
    """Map pymongo and substrate exceptions into shared error semantics."""
    metadata = {"exception_type": type(exc).__name__}

    if isinstance(exc, DuplicateKeyError):
        return conflict_error(
            "document already exists",
            code=codes.ALREADY_EXISTS,
            metadata=metadata,
        )

    if isinstance(exc, (ExecutionTimeout, NetworkTimeout, ServerSelectionTimeoutError)):
        return dependency_error(
            "MongoDB timed out",
            code=codes.DEPENDENCY_TIMEOUT,
            metadata=metadata,
        )

    if isinstance(exc, (ConnectionFailure, AutoReconnect, MongoSubstrateError)):
        return dependency_error(
            str(exc) if isinstance(exc, MongoSubstrateError) else "MongoDB unavailable",
            code=codes.DEPENDENCY_UNAVAILABLE,
            metadata=metadata,
        )

    if isinstance(exc, (OperationFailure, PyMongoError)):
        return dependency_error(
            "MongoDB request failed",
            code=codes.DEPENDENCY_FAILURE,
            retryable=False,
            metadata=metadata,
        )

    return internal_error(
        "unexpected MongoDB failure",
        code=codes.UNEXPECTED_EXCEPTION,
        metadata=metadata,
    )
