"""HTTP reachability probe tests."""

from __future__ import annotations

import httpx

from packages.hwsc_shared.http import HttpClient
from services.state.document_authority.probe import HttpUrlProbe


def _probe(handler) -> HttpUrlProbe:
    return HttpUrlProbe(client=HttpClient(transport=httpx.MockTransport(handler)))


def test_success_statuses_are_reachable() -> None:
    probe = _probe(lambda request: httpx.Response(204, request=request))
    assert probe("https://media.example.test/a.png") is True
    probe.close()


def test_error_statuses_are_unreachable() -> None:
    probe = _probe(lambda request: httpx.Response(404, request=request))
    assert probe("https://media.example.test/a.png") is False
    probe.close()


def test_transport_failures_are_unreachable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    probe = _probe(handler)
    assert probe("https://media.example.test/a.png") is False
    probe.close()
