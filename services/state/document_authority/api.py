"""gRPC adapter entrypoints for Document Authority Service.

Methods are registered through generic handlers under
``hwsc.document.v1.DocumentService``. Message bodies are the camelCase JSON
encoding of the pydantic request/response models; an empty body decodes to
no request at all.
"""

from __future__ import annotations

from typing import Any, Callable, Sequence

import grpc
from pydantic import BaseModel, ValidationError

from packages.hwsc_shared.envelope import (
    Envelope,
    EnvelopeKind,
    EnvelopeMeta,
    meta_from_headers,
)
from packages.hwsc_shared.errors import ErrorCategory
from services.state.document_authority.domain import (
    Document,
    DocumentRequest,
    DocumentResponse,
    QueryTransaction,
    ServiceStateRequest,
    ServiceStatus,
)
from services.state.document_authority.service import DocumentAuthorityService

SERVICE_NAME = "hwsc.document.v1.DocumentService"
TRACE_ID_METADATA_KEY = "x-trace-id"
PRINCIPAL_METADATA_KEY = "x-principal"
SOURCE = "grpc"

_ABORT_CODES: dict[ErrorCategory, grpc.StatusCode] = {
    ErrorCategory.VALIDATION: grpc.StatusCode.INVALID_ARGUMENT,
    ErrorCategory.NOT_FOUND: grpc.StatusCode.NOT_FOUND,
    ErrorCategory.CONFLICT: grpc.StatusCode.ALREADY_EXISTS,
    ErrorCategory.DEPENDENCY: grpc.StatusCode.UNAVAILABLE,
    ErrorCategory.INTERNAL: grpc.StatusCode.INTERNAL,
    ErrorCategory.UNSPECIFIED: grpc.StatusCode.UNKNOWN,
}


def encode_message(message: BaseModel | None) -> bytes:
    """Serialize one model with camelCase aliases; ``None`` is an empty body."""
    if message is None:
        return b""
    return message.model_dump_json(by_alias=True, exclude_none=True).encode("utf-8")


def decode_document_request(raw: bytes) -> DocumentRequest | None:
    if not raw:
        return None
    return DocumentRequest.model_validate_json(raw)


def decode_state_request(raw: bytes) -> ServiceStateRequest | None:
    if not raw:
        return None
    return ServiceStateRequest.model_validate_json(raw)


def decode_document_response(raw: bytes) -> DocumentResponse:
    if not raw:
        return DocumentResponse()
    return DocumentResponse.model_validate_json(raw)


class GrpcDocumentService:
    """gRPC servicer mapping transport requests into native service calls."""

    def __init__(self, service: DocumentAuthorityService) -> None:
        self._service = service

    def GetStatus(self, request: bytes, context: grpc.ServicerContext) -> DocumentResponse:
        del request
        result = self._service.get_status(
            meta=_meta_from_context(context, kind=EnvelopeKind.QUERY)
        )
        _abort_for_transport_errors(context=context, result=result)
        return _status_response(result.value)

    def CreateDocument(
        self, request: bytes, context: grpc.ServicerContext
    ) -> DocumentResponse:
        result = self._service.create_document(
            meta=_meta_from_context(context, kind=EnvelopeKind.COMMAND),
            request=_parse_document_request(request, context),
        )
        _abort_for_transport_errors(context=context, result=result)
        return _document_response(result.value)

    def ListUserDocumentCollection(
        self, request: bytes, context: grpc.ServicerContext
    ) -> DocumentResponse:
        result = self._service.list_user_document_collection(
            meta=_meta_from_context(context, kind=EnvelopeKind.QUERY),
            request=_parse_document_request(request, context),
        )
        _abort_for_transport_errors(context=context, result=result)
        return _collection_response(result.value)

    def UpdateDocument(
        self, request: bytes, context: grpc.ServicerContext
    ) -> DocumentResponse:
        result = self._service.update_document(
            meta=_meta_from_context(context, kind=EnvelopeKind.COMMAND),
            request=_parse_document_request(request, context),
        )
        _abort_for_transport_errors(context=context, result=result)
        return _document_response(result.value)

    def DeleteDocument(
        self, request: bytes, context: grpc.ServicerContext
    ) -> DocumentResponse:
        result = self._service.delete_document(
            meta=_meta_from_context(context, kind=EnvelopeKind.COMMAND),
            request=_parse_document_request(request, context),
        )
        _abort_for_transport_errors(context=context, result=result)
        return _document_response(result.value)

    def AddFileMetadata(
        self, request: bytes, context: grpc.ServicerContext
    ) -> DocumentResponse:
        result = self._service.add_file_metadata(
            meta=_meta_from_context(context, kind=EnvelopeKind.COMMAND),
            request=_parse_document_request(request, context),
        )
        _abort_for_transport_errors(context=context, result=result)
        return _document_response(result.value)

    def DeleteFileMetadata(
        self, request: bytes, context: grpc.ServicerContext
    ) -> DocumentResponse:
        result = self._service.delete_file_metadata(
            meta=_meta_from_context(context, kind=EnvelopeKind.COMMAND),
            request=_parse_document_request(request, context),
        )
        _abort_for_transport_errors(context=context, result=result)
        return _document_response(result.value)

    def ListDistinctFieldValues(
        self, request: bytes, context: grpc.ServicerContext
    ) -> DocumentResponse:
        result = self._service.list_distinct_field_values(
            meta=_meta_from_context(context, kind=EnvelopeKind.QUERY),
            request=_parse_document_request(request, context),
        )
        _abort_for_transport_errors(context=context, result=result)
        return _query_results_response(result.value)

    def QueryDocument(
        self, request: bytes, context: grpc.ServicerContext
    ) -> DocumentResponse:
        result = self._service.query_document(
            meta=_meta_from_context(context, kind=EnvelopeKind.QUERY),
            request=_parse_document_request(request, context),
        )
        _abort_for_transport_errors(context=context, result=result)
        return _collection_response(result.value)

    def SetServiceState(
        self, request: bytes, context: grpc.ServicerContext
    ) -> DocumentResponse:
        parsed = _parse(decode_state_request, request, context)
        result = self._service.set_service_state(
            meta=_meta_from_context(context, kind=EnvelopeKind.COMMAND),
            state="" if parsed is None else parsed.state,
        )
        _abort_for_transport_errors(context=context, result=result)
        return _status_response(result.value)


METHOD_NAMES: tuple[str, ...] = (
    "GetStatus",
    "CreateDocument",
    "ListUserDocumentCollection",
    "UpdateDocument",
    "DeleteDocument",
    "AddFileMetadata",
    "DeleteFileMetadata",
    "ListDistinctFieldValues",
    "QueryDocument",
    "SetServiceState",
)


def build_generic_handler(servicer: GrpcDocumentService) -> grpc.GenericRpcHandler:
    """Return the generic handler exposing every servicer method."""
    handlers = {
        name: grpc.unary_unary_rpc_method_handler(
            getattr(servicer, name),
            request_deserializer=None,
            response_serializer=encode_message,
        )
        for name in METHOD_NAMES
    }
    return grpc.method_handlers_generic_handler(SERVICE_NAME, handlers)


def register_grpc(*, server: grpc.Server, service: DocumentAuthorityService) -> None:
    """Register Document Authority gRPC handlers on one server."""
    server.add_generic_rpc_handlers((build_generic_handler(GrpcDocumentService(service)),))


class DocumentServiceClient:
    """Thin synchronous client for the Document Authority gRPC surface."""

    def __init__(
        self,
        *,
        target: str | None = None,
        channel: grpc.Channel | None = None,
        timeout_seconds: float = 10.0,
        trace_id: str | None = None,
    ) -> None:
        if channel is None and target is None:
            raise ValueError("either target or channel is required")
        self._owns_channel = channel is None
        self._channel = grpc.insecure_channel(target) if channel is None else channel
        self._timeout_seconds = timeout_seconds
        self._trace_id = trace_id

    def close(self) -> None:
        if self._owns_channel:
            self._channel.close()

    def __enter__(self) -> "DocumentServiceClient":
        return self

    def __exit__(self, *_: object) -> None:
        self.close()

    def get_status(self) -> DocumentResponse:
        return self._call("GetStatus", None)

    def create_document(self, request: DocumentRequest) -> DocumentResponse:
        return self._call("CreateDocument", request)

    def list_user_document_collection(self, request: DocumentRequest) -> DocumentResponse:
        return self._call("ListUserDocumentCollection", request)

    def update_document(self, request: DocumentRequest) -> DocumentResponse:
        return self._call("UpdateDocument", request)

    def delete_document(self, request: DocumentRequest) -> DocumentResponse:
        return self._call("DeleteDocument", request)

    def add_file_metadata(self, request: DocumentRequest) -> DocumentResponse:
        return self._call("AddFileMetadata", request)

    def delete_file_metadata(self, request: DocumentRequest) -> DocumentResponse:
        return self._call("DeleteFileMetadata", request)

    def list_distinct_field_values(self, request: DocumentRequest) -> DocumentResponse:
        return self._call("ListDistinctFieldValues", request)

    def query_document(self, request: DocumentRequest) -> DocumentResponse:
        return self._call("QueryDocument", request)

    def set_service_state(self, state: str) -> DocumentResponse:
        return self._call("SetServiceState", ServiceStateRequest(state=state))

    def _call(self, method: str, request: BaseModel | None) -> DocumentResponse:
        """Invoke one unary method; transport failures raise ``grpc.RpcError``."""
        rpc = self._channel.unary_unary(
            f"/{SERVICE_NAME}/{method}",
            request_serializer=encode_message,
            response_deserializer=decode_document_response,
        )
        metadata: Sequence[tuple[str, str]] = ()
        if self._trace_id:
            metadata = ((TRACE_ID_METADATA_KEY, self._trace_id),)
        return rpc(request, timeout=self._timeout_seconds, metadata=metadata)


def _parse(
    decoder: Callable[[bytes], Any], raw: bytes, context: grpc.ServicerContext
) -> Any:
    try:
        return decoder(raw)
    except ValidationError as exc:
        context.abort(grpc.StatusCode.INVALID_ARGUMENT, f"malformed request: {exc}")
        raise


def _parse_document_request(
    raw: bytes, context: grpc.ServicerContext
) -> DocumentRequest | None:
    return _parse(decode_document_request, raw, context)


def _meta_from_context(
    context: grpc.ServicerContext, *, kind: EnvelopeKind
) -> EnvelopeMeta:
    """Build envelope metadata from gRPC invocation metadata."""
    return meta_from_headers(
        context.invocation_metadata(),
        kind=kind,
        source=SOURCE,
        trace_key=TRACE_ID_METADATA_KEY,
        principal_key=PRINCIPAL_METADATA_KEY,
    )


def _abort_for_transport_errors(
    *,
    context: grpc.ServicerContext,
    result: Envelope[Any],
) -> None:
    """Abort the call with a status code derived from the envelope errors."""
    category = result.severest()
    if category is None:
        return
    context.abort(_ABORT_CODES[category], "; ".join(result.messages(category)))


def _status_response(status: ServiceStatus | None) -> DocumentResponse:
    if status is None:
        return DocumentResponse()
    return DocumentResponse(code=status.code, message=status.message)


def _document_response(document: Document | None) -> DocumentResponse:
    return DocumentResponse(data=document)


def _collection_response(documents: list[Document] | None) -> DocumentResponse:
    return DocumentResponse(document_collection=list(documents or ()))


def _query_results_response(results: QueryTransaction | None) -> DocumentResponse:
    return DocumentResponse(query_results=results)
