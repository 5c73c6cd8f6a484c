"""Reader/writer MongoDB client pair with lazy dial and ping-driven refresh."""

from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import Any, Callable

from pymongo.errors import PyMongoError

from resources.substrates.mongodb.client import (
    DEFAULT_TIMEOUT_SECONDS,
    dial,
    disconnect,
    ping,
)
from resources.substrates.mongodb.errors import (
    MongoSubstrateError,
    MongoUnavailableError,
    NilMongoClientError,
)

_LOGGER = logging.getLogger(__name__)


class MongoRole(str, Enum):
    """Which of the two connection handles an operation uses."""

    READER = "reader"
    WRITER = "writer"


class MongoHandles:
    """Process-wide pair of MongoDB clients.

    Handles start unset and are dialed on first ``refresh``. A handle whose
    ping fails is redialed; a failed redial leaves the handle unset so the
    next caller tries again. Refreshes of one role are serialized, so the
    last successful dial is the one that stays installed.
    """

    def __init__(
        self,
        *,
        reader_uri: str,
        writer_uri: str,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        dialer: Callable[..., Any] = dial,
        pinger: Callable[..., bool] = ping,
    ) -> None:
        self._uris = {MongoRole.READER: reader_uri, MongoRole.WRITER: writer_uri}
        self._timeout_seconds = timeout_seconds
        self._dialer = dialer
        self._pinger = pinger
        self._clients: dict[MongoRole, Any] = {
            MongoRole.READER: None,
            MongoRole.WRITER: None,
        }
        self._locks = {role: threading.Lock() for role in MongoRole}

    def connect(self) -> None:
        """Dial both handles, raising the first dial failure."""
        for role in MongoRole:
            client = self._dialer(self._uris[role], timeout_seconds=self._timeout_seconds)
            with self._locks[role]:
                self._clients[role] = client
            _LOGGER.info("MongoDB %s handle connected", role.value)

    def client(self, role: MongoRole) -> Any:
        """Return the current client for ``role``; unset raises ``NilMongoClientError``."""
        client = self._clients[role]
        if client is None:
            raise NilMongoClientError()
        return client

    def refresh(self, role: MongoRole) -> Any:
        """Ensure ``role`` holds a live client and return it.

        Raises ``MongoUnavailableError`` when a (re)dial fails.
        """
        with self._locks[role]:
            current = self._clients[role]
            if current is not None and self._pinger(
                current, timeout_seconds=self._timeout_seconds
            ):
                return current

            try:
                client = self._dialer(
                    self._uris[role], timeout_seconds=self._timeout_seconds
                )
            except MongoSubstrateError as exc:
                self._clients[role] = None
                _LOGGER.warning("MongoDB %s handle refresh failed: %s", role.value, exc)
                raise MongoUnavailableError() from exc

            self._clients[role] = client
            if current is not None:
                _close_quietly(current)
            return client

    def close(self) -> None:
        """Disconnect both handles and leave them unset."""
        for role in MongoRole:
            with self._locks[role]:
                client = self._clients[role]
                self._clients[role] = None
            try:
                disconnect(client)
            except NilMongoClientError:
                _LOGGER.info("MongoDB %s handle already unset", role.value)


def _close_quietly(client: Any) -> None:
    try:
        client.close()
    except PyMongoError as exc:
        _LOGGER.warning("closing stale MongoDB client failed: %s", exc)
