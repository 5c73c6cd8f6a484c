"""Outbound HTTP over httpx with typed failures."""

from .client import HttpClient
from .errors import HttpClientError, HttpRequestError, HttpStatusError

__all__ = ["HttpClient", "HttpClientError", "HttpRequestError", "HttpStatusError"]
