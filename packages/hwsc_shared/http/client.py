"""Thin synchronous HTTP client wrapper over httpx."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import httpx

from .errors import HttpRequestError, HttpStatusError


class HttpClient:
    """Synchronous wrapper over ``httpx.Client`` with typed failures."""

    def __init__(
        self,
        *,
        timeout_seconds: float = 10.0,
        headers: Mapping[str, str] | None = None,
        follow_redirects: bool = True,
        transport: httpx.BaseTransport | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.Client(
            timeout=timeout_seconds,
            headers=dict(headers or {}),
            follow_redirects=follow_redirects,
            transport=transport,
        )

    def close(self) -> None:
        """Close underlying transport resources when owned."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> HttpClient:
        return self

    def __exit__(self, *_: object) -> None:
        self.close()

    def request(
        self,
        method: str,
        url: str,
        *,
        raise_for_status: bool = True,
        **kwargs: Any,
    ) -> httpx.Response:
        """Issue one request and map transport/status failures to typed errors."""
        try:
            response = self._client.request(method=method, url=url, **kwargs)
        except (httpx.RequestError, httpx.InvalidURL) as exc:
            raise _request_error(method, url, exc) from exc

        if raise_for_status and response.is_error:
            raise _status_error(response)
        return response

    def get(self, url: str, **kwargs: Any) -> httpx.Response:
        """Issue one GET request."""
        return self.request("GET", url, **kwargs)

    def status(self, url: str) -> int:
        """Return the final status code of a GET without reading the body.

        Redirects are followed. Transport failures raise ``HttpRequestError``;
        error statuses are returned, not raised.
        """
        try:
            with self._client.stream("GET", url) as response:
                return response.status_code
        except (httpx.RequestError, httpx.InvalidURL) as exc:
            raise _request_error("GET", url, exc) from exc


def _request_error(method: str, url: str, exc: Exception) -> HttpRequestError:
    request = getattr(exc, "_request", None)
    request_url = str(request.url) if request is not None else url
    request_method = request.method if request is not None else method.upper()
    return HttpRequestError(
        message=f"HTTP request failed for {request_method} {request_url}",
        method=request_method,
        url=request_url,
        retryable=True,
        cause=exc,
    )


def _status_error(response: httpx.Response) -> HttpStatusError:
    status_code = response.status_code
    return HttpStatusError(
        message=f"HTTP {status_code} for {response.request.method} {response.request.url}",
        method=response.request.method,
        url=str(response.request.url),
        retryable=status_code >= 500 or status_code == 429,
        status_code=status_code,
    )
