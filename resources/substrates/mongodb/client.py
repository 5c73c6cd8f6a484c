"""Dial, ping, and disconnect helpers for MongoDB clients.

Each call gets its own bounded timeout; nothing here shares a deadline with
the process lifetime.
"""

from __future__ import annotations

from typing import Any, Callable

from pymongo import MongoClient
from pymongo.errors import PyMongoError

from resources.substrates.mongodb.errors import (
    EmptyMongoUriError,
    MongoUnavailableError,
    NilMongoClientError,
)

DEFAULT_TIMEOUT_SECONDS = 5.0

ClientFactory = Callable[..., Any]


def dial(
    uri: str,
    *,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    client_factory: ClientFactory = MongoClient,
) -> Any:
    """Connect one client to ``uri`` and confirm it answers ``ping``.

    Raises ``EmptyMongoUriError`` for a blank URI and ``MongoUnavailableError``
    when the connection or the ping fails.
    """
    if uri.strip() == "":
        raise EmptyMongoUriError()

    timeout_ms = max(1, int(timeout_seconds * 1000))
    try:
        client = client_factory(
            uri,
            serverSelectionTimeoutMS=timeout_ms,
            connectTimeoutMS=timeout_ms,
        )
    except (PyMongoError, ValueError) as exc:
        raise MongoUnavailableError() from exc

    if not ping(client, timeout_seconds=timeout_seconds):
        client.close()
        raise MongoUnavailableError()
    return client


def ping(client: Any, *, timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS) -> bool:
    """Return ``True`` when ``client`` answers the ``ping`` admin command."""
    if client is None:
        return False
    try:
        client.admin.command("ping", maxTimeMS=max(1, int(timeout_seconds * 1000)))
    except PyMongoError:
        return False
    return True


def disconnect(client: Any) -> None:
    """Close one client. Raises ``NilMongoClientError`` for ``None``."""
    if client is None:
        raise NilMongoClientError()
    client.close()
