"""Unit tests for the shared HTTP client wrapper."""

from __future__ import annotations

import httpx
import pytest

from packages.hwsc_shared.http import HttpClient, HttpRequestError, HttpStatusError


def test_http_client_get_returns_response() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"ok": True}, request=request)

    with HttpClient(transport=httpx.MockTransport(handler)) as client:
        assert client.get("https://media.example.test/a.png").json() == {"ok": True}


def test_http_client_maps_status_failure_to_typed_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="unavailable", request=request)

    client = HttpClient(transport=httpx.MockTransport(handler))
    try:
        with pytest.raises(HttpStatusError) as exc_info:
            client.get("https://media.example.test/a.png")
    finally:
        client.close()

    error = exc_info.value
    assert error.method == "GET"
    assert error.status_code == 503
    assert error.retryable is True


def test_http_client_maps_transport_failure_to_typed_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection failed", request=request)

    client = HttpClient(transport=httpx.MockTransport(handler))
    try:
        with pytest.raises(HttpRequestError) as exc_info:
            client.get("https://media.example.test/a.png")
    finally:
        client.close()

    error = exc_info.value
    assert error.url == "https://media.example.test/a.png"
    assert error.retryable is True
    assert isinstance(error.cause, httpx.ConnectError)


def test_status_returns_error_codes_without_raising() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, request=request)

    with HttpClient(transport=httpx.MockTransport(handler)) as client:
        assert client.status("https://media.example.test/missing.png") == 404


def test_status_follows_redirects() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/old.png":
            return httpx.Response(
                302, headers={"Location": "https://media.example.test/new.png"}, request=request
            )
        return httpx.Response(200, request=request)

    with HttpClient(transport=httpx.MockTransport(handler)) as client:
        assert client.status("https://media.example.test/old.png") == 200

