"""HTTP reachability probe used by URL validation."""

from __future__ import annotations

import logging

from packages.hwsc_shared.http import HttpClient, HttpRequestError

_LOGGER = logging.getLogger(__name__)


class HttpUrlProbe:
    """Report a URL reachable when a GET finishes with status below 400."""

    def __init__(self, *, client: HttpClient) -> None:
        self._client = client

    @classmethod
    def with_timeout(cls, timeout_seconds: float) -> "HttpUrlProbe":
        return cls(client=HttpClient(timeout_seconds=timeout_seconds))

    def __call__(self, url: str) -> bool:
        try:
            status = self._client.status(url)
        except HttpRequestError as exc:
            _LOGGER.info("URL probe failed: url=%s cause=%s", url, type(exc.cause).__name__)
            return False
        return status < 400

    def close(self) -> None:
        self._client.close()
