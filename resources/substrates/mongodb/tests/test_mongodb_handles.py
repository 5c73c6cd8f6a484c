"""Tests for MongoDB dial/ping helpers and the reader/writer handle pair."""

from __future__ import annotations

import pytest
from pymongo.errors import ConnectionFailure, DuplicateKeyError, OperationFailure

from packages.hwsc_shared.errors import ErrorCategory, codes
from resources.substrates.mongodb import (
    EmptyMongoUriError,
    MongoHandles,
    MongoRole,
    MongoUnavailableError,
    NilMongoClientError,
    dial,
    disconnect,
    normalize_mongo_error,
    ping,
)


class _FakeAdmin:
    def __init__(self, client: "_FakeClient") -> None:
        self._client = client

    def command(self, name: str, **kwargs: object) -> dict[str, int]:
        self._client.commands.append((name, kwargs))
        if not self._client.healthy:
            raise ConnectionFailure("down")
        return {"ok": 1}


class _FakeClient:
    def __init__(self, uri: str, *, healthy: bool = True, **kwargs: object) -> None:
        self.uri = uri
        self.healthy = healthy
        self.options = kwargs
        self.closed = False
        self.commands: list[tuple[str, dict[str, object]]] = []
        self.admin = _FakeAdmin(self)

    def close(self) -> None:
        self.closed = True


class _FakeDialer:
    """Dialer returning fresh healthy clients unless told to fail."""

    def __init__(self) -> None:
        self.fail = False
        self.calls: list[str] = []
        self.clients: list[_FakeClient] = []

    def __call__(self, uri: str, *, timeout_seconds: float) -> _FakeClient:
        self.calls.append(uri)
        if self.fail:
            raise MongoUnavailableError()
        client = _FakeClient(uri)
        self.clients.append(client)
        return client


def test_dial_rejects_blank_uri() -> None:
    with pytest.raises(EmptyMongoUriError, match="empty MongoDB URI"):
        dial("   ", client_factory=_FakeClient)


def test_dial_passes_fresh_bounded_timeouts_and_pings() -> None:
    client = dial("mongodb://reader", timeout_seconds=5.0, client_factory=_FakeClient)

    assert client.options == {"serverSelectionTimeoutMS": 5000, "connectTimeoutMS": 5000}
    assert client.commands == [("ping", {"maxTimeMS": 5000})]


def test_dial_closes_client_and_raises_when_ping_fails() -> None:
    created: list[_FakeClient] = []

    def factory(uri: str, **kwargs: object) -> _FakeClient:
        client = _FakeClient(uri, healthy=False, **kwargs)
        created.append(client)
        return client

    with pytest.raises(MongoUnavailableError, match="MongoDB unavailable"):
        dial("mongodb://reader", client_factory=factory)
    assert created[0].closed is True


def test_ping_and_disconnect_handle_missing_client() -> None:
    assert ping(None) is False
    with pytest.raises(NilMongoClientError, match="nil MongoDB client"):
        disconnect(None)


def test_client_raises_before_any_dial() -> None:
    handles = MongoHandles(reader_uri="r", writer_uri="w", dialer=_FakeDialer())

    with pytest.raises(NilMongoClientError):
        handles.client(MongoRole.READER)


def test_refresh_dials_unset_handle_then_reuses_live_client() -> None:
    dialer = _FakeDialer()
    handles = MongoHandles(reader_uri="r", writer_uri="w", dialer=dialer)

    first = handles.refresh(MongoRole.WRITER)
    second = handles.refresh(MongoRole.WRITER)

    assert first is second
    assert dialer.calls == ["w"]
    assert handles.client(MongoRole.WRITER) is first


def test_refresh_redials_when_ping_fails() -> None:
    dialer = _FakeDialer()
    handles = MongoHandles(reader_uri="r", writer_uri="w", dialer=dialer)
    stale = handles.refresh(MongoRole.READER)
    stale.healthy = False

    fresh = handles.refresh(MongoRole.READER)

    assert fresh is not stale
    assert stale.closed is True
    assert dialer.calls == ["r", "r"]


def test_failed_redial_unsets_handle_so_next_caller_retries() -> None:
    dialer = _FakeDialer()
    handles = MongoHandles(reader_uri="r", writer_uri="w", dialer=dialer)
    handles.refresh(MongoRole.READER).healthy = False
    dialer.fail = True

    with pytest.raises(MongoUnavailableError):
        handles.refresh(MongoRole.READER)
    with pytest.raises(NilMongoClientError):
        handles.client(MongoRole.READER)

    dialer.fail = False
    assert handles.refresh(MongoRole.READER) is dialer.clients[-1]


def test_close_disconnects_both_handles_and_tolerates_unset() -> None:
    dialer = _FakeDialer()
    handles = MongoHandles(reader_uri="r", writer_uri="w", dialer=dialer)
    handles.refresh(MongoRole.READER)

    handles.close()

    assert dialer.clients[0].closed is True
    with pytest.raises(NilMongoClientError):
        handles.client(MongoRole.READER)


def test_normalize_mongo_error_categories() -> None:
    assert normalize_mongo_error(ConnectionFailure("x")).code == codes.DEPENDENCY_UNAVAILABLE
    assert normalize_mongo_error(DuplicateKeyError("x")).category == ErrorCategory.CONFLICT
    failed = normalize_mongo_error(OperationFailure("bad"))
    assert failed.category == ErrorCategory.DEPENDENCY
    assert failed.retryable is False
    assert normalize_mongo_error(MongoUnavailableError()).message == "MongoDB unavailable"
    assert normalize_mongo_error(RuntimeError("x")).category == ErrorCategory.INTERNAL
