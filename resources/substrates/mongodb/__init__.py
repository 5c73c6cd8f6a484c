"""MongoDB substrate primitives for HWSC services."""

from resources.substrates.mongodb.client import dial, disconnect, ping
from resources.substrates.mongodb.errors import (
    EmptyMongoUriError,
    MongoSubstrateError,
    MongoUnavailableError,
    NilMongoClientError,
    normalize_mongo_error,
)
from resources.substrates.mongodb.handles import MongoHandles, MongoRole

__all__ = [
    "EmptyMongoUriError",
    "MongoHandles",
    "MongoRole",
    "MongoSubstrateError",
    "MongoUnavailableError",
    "NilMongoClientError",
    "dial",
    "disconnect",
    "normalize_mongo_error",
    "ping",
]
