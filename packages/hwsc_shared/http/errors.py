"""Failures raised by ``HttpClient``."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class HttpClientError(Exception):
    """An outbound call did not produce a usable response."""

    message: str
    method: str
    url: str
    retryable: bool = False

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class HttpRequestError(HttpClientError):
    """No response arrived (DNS, connect, TLS, timeout or a malformed URL)."""

    cause: Exception | None = None


@dataclass(frozen=True)
class HttpStatusError(HttpClientError):
    status_code: int = 0
