"""Adapter tests for Document Authority gRPC codecs and error mapping."""

from __future__ import annotations

import json

import grpc
import pytest

from packages.hwsc_shared.envelope import Envelope, EnvelopeKind, new_meta
from packages.hwsc_shared.errors import (
    ErrorCategory,
    codes,
    dependency_error,
    internal_error,
    not_found_error,
    validation_error,
)
from services.state.document_authority.api import (
    METHOD_NAMES,
    SERVICE_NAME,
    GrpcDocumentService,
    _abort_for_transport_errors,
    decode_document_request,
    decode_document_response,
    encode_message,
    register_grpc,
)
from services.state.document_authority.domain import DocumentRequest, DocumentResponse
from services.state.document_authority.tests.test_document_service import (
    OWNER,
    _document,
    _service,
)


class _AbortCalled(RuntimeError):
    """Raised by fake gRPC context when abort() is invoked."""


class _FakeServicerContext:
    """Minimal gRPC context stub for adapter tests."""

    def __init__(self, metadata: tuple[tuple[str, str], ...] = ()) -> None:
        self.code: grpc.StatusCode | None = None
        self.details: str | None = None
        self._metadata = metadata

    def invocation_metadata(self) -> tuple[tuple[str, str], ...]:
        return self._metadata

    def abort(self, code: grpc.StatusCode, details: str) -> None:
        self.code = code
        self.details = details
        raise _AbortCalled(details)


class _FakeServer:
    def __init__(self) -> None:
        self.handlers: list[object] = []

    def add_generic_rpc_handlers(self, handlers: tuple[object, ...]) -> None:
        self.handlers.extend(handlers)


def _envelope_with_errors(*errors: object) -> Envelope[object]:
    meta = new_meta(kind=EnvelopeKind.COMMAND, source="test", principal="operator")
    return Envelope(metadata=meta, payload=None, errors=list(errors))


@pytest.mark.parametrize(
    ("error", "status"),
    [
        (validation_error("invalid Document Ocean", code="INVALID_OCEAN"), grpc.StatusCode.INVALID_ARGUMENT),
        (not_found_error("document not found"), grpc.StatusCode.NOT_FOUND),
        (dependency_error("Service unavailable"), grpc.StatusCode.UNAVAILABLE),
        (internal_error("invalid distinct result"), grpc.StatusCode.INTERNAL),
    ],
)
def test_abort_maps_error_categories(error, status: grpc.StatusCode) -> None:
    context = _FakeServicerContext()

    with pytest.raises(_AbortCalled):
        _abort_for_transport_errors(context=context, result=_envelope_with_errors(error))

    assert context.code == status
    assert context.details == error.message


def test_abort_prefers_most_severe_category() -> None:
    context = _FakeServicerContext()
    envelope = _envelope_with_errors(
        validation_error("invalid", code=codes.INVALID_ARGUMENT),
        dependency_error("MongoDB unavailable"),
    )

    with pytest.raises(_AbortCalled):
        _abort_for_transport_errors(context=context, result=envelope)

    assert context.code == grpc.StatusCode.UNAVAILABLE


def test_abort_is_noop_without_errors() -> None:
    context = _FakeServicerContext()
    _abort_for_transport_errors(context=context, result=_envelope_with_errors())
    assert context.code is None


def test_empty_body_decodes_to_no_request() -> None:
    assert decode_document_request(b"") is None


def test_codecs_use_camel_case_aliases() -> None:
    request = DocumentRequest(data=_document())

    encoded = encode_message(request)
    payload = json.loads(encoded)

    assert payload["data"]["publisherName"] == {"lastName": "Kim", "firstName": "Lisa"}
    assert payload["data"]["recordTimestamp"] == 1_514_764_800
    assert decode_document_request(encoded) == request


def test_response_round_trip_defaults() -> None:
    assert decode_document_response(b"") == DocumentResponse()
    assert decode_document_response(encode_message(DocumentResponse(code=14, message="Unavailable"))).code == 14


def test_create_document_over_adapter() -> None:
    service, repo, _, _ = _service()
    servicer = GrpcDocumentService(service)
    context = _FakeServicerContext(metadata=(("x-trace-id", "trace-1"),))

    response = servicer.CreateDocument(
        encode_message(DocumentRequest(data=_document())), context
    )

    assert response.code == 0
    assert response.message == "OK"
    assert response.data is not None
    assert response.data.duid in repo.rows


def test_nil_request_aborts_with_invalid_argument() -> None:
    service, _, _, _ = _service()
    servicer = GrpcDocumentService(service)
    context = _FakeServicerContext()

    with pytest.raises(_AbortCalled):
        servicer.CreateDocument(b"", context)

    assert context.code == grpc.StatusCode.INVALID_ARGUMENT
    assert context.details == "Nil request"


def test_malformed_body_aborts_with_invalid_argument() -> None:
    service, _, _, _ = _service()
    servicer = GrpcDocumentService(service)
    context = _FakeServicerContext()

    with pytest.raises(_AbortCalled):
        servicer.QueryDocument(b"{not json", context)

    assert context.code == grpc.StatusCode.INVALID_ARGUMENT


def test_missing_owner_collection_aborts_with_not_found() -> None:
    service, _, _, _ = _service()
    servicer = GrpcDocumentService(service)
    context = _FakeServicerContext()
    body = json.dumps({"data": {"uuid": OWNER}}).encode("utf-8")

    with pytest.raises(_AbortCalled):
        servicer.ListUserDocumentCollection(body, context)

    assert context.code == grpc.StatusCode.NOT_FOUND


def test_status_and_state_toggle_over_adapter() -> None:
    service, _, _, _ = _service()
    servicer = GrpcDocumentService(service)

    servicer.SetServiceState(b'{"state": "Unavailable"}', _FakeServicerContext())
    status = servicer.GetStatus(b"", _FakeServicerContext())

    assert status.code == 14
    assert status.message == "Unavailable"


def test_register_grpc_adds_one_generic_handler() -> None:
    service, _, _, _ = _service()
    server = _FakeServer()

    register_grpc(server=server, service=service)

    assert len(server.handlers) == 1
    assert server.handlers[0].service_name() == SERVICE_NAME
    assert "SetServiceState" in METHOD_NAMES
