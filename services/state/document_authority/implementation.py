"""Concrete Document Authority Service implementation."""

from __future__ import annotations

import time
from typing import Any, Callable, TypeVar

from pymongo.errors import PyMongoError

from packages.hwsc_shared.envelope import (
    Envelope,
    EnvelopeMeta,
    failure,
    success,
    validate_meta,
)
from packages.hwsc_shared.ids import generate_duid, generate_fuid
from packages.hwsc_shared.logging import fields, get_logger, log_context, public_api_logged
from resources.substrates.mongodb import MongoSubstrateError, normalize_mongo_error
from services.state.document_authority import errors
from services.state.document_authority.config import SERVICE_COMPONENT_ID
from services.state.document_authority.distinct import (
    DISTINCT_SEARCH_FIELDS,
    extract_distinct_results,
)
from services.state.document_authority.domain import (
    Document,
    DocumentRequest,
    FileMetadataParameters,
    MediaType,
    QueryTransaction,
    ServiceStatus,
)
from services.state.document_authority.errors import DocumentServiceError
from services.state.document_authority.interfaces import DocumentRepository
from services.state.document_authority.locks import OwnerLockRegistry
from services.state.document_authority.query import build_aggregate_pipeline
from services.state.document_authority.runtime import DocumentRuntime
from services.state.document_authority.service import DocumentAuthorityService
from services.state.document_authority.state import ServiceState, ServiceStateGate
from services.state.document_authority.validation import (
    UrlProbe,
    validate_document,
    validate_duid,
    validate_fuid,
    validate_media_url,
    validate_record_timestamp,
    validate_uuid,
)

_LOGGER = get_logger(__name__)

T = TypeVar("T")

STATUS_OK = 0
STATUS_UNAVAILABLE = 14

_MEDIA_MAP_FIELDS: dict[MediaType, str] = {
    MediaType.FILE: "file_urls_map",
    MediaType.AUDIO: "audio_urls_map",
    MediaType.IMAGE: "image_urls_map",
    MediaType.VIDEO: "video_urls_map",
}


class DefaultDocumentAuthorityService(DocumentAuthorityService):
    """Default implementation backed by a document repository.

    Every RPC runs the same pipeline: request-shape guards, the readiness
    gate, argument validation, a handle refresh, the owner lock for
    mutations, document validation, and finally the database call.
    """

    def __init__(
        self,
        *,
        repository: DocumentRepository,
        gate: ServiceStateGate,
        locks: OwnerLockRegistry,
        probe: UrlProbe,
        clock: Callable[[], float] = time.time,
        duid_factory: Callable[[], str] = generate_duid,
        fuid_factory: Callable[[], str] = generate_fuid,
    ) -> None:
        self._repository = repository
        self._gate = gate
        self._locks = locks
        self._probe = probe
        self._clock = clock
        self._duid_factory = duid_factory
        self._fuid_factory = fuid_factory

    @classmethod
    def from_runtime(cls, runtime: DocumentRuntime) -> "DefaultDocumentAuthorityService":
        """Build the service over startup-owned resources."""
        return cls(
            repository=runtime.repository(),
            gate=runtime.gate,
            locks=runtime.locks,
            probe=runtime.probe,
        )

    @public_api_logged(logger=_LOGGER, component_id=SERVICE_COMPONENT_ID)
    def get_status(self, *, meta: EnvelopeMeta) -> Envelope[ServiceStatus]:
        """Report readiness; an unavailable gate or database is not an error."""
        meta_errors = validate_meta(meta)
        if meta_errors:
            return failure(meta=meta, errors=meta_errors)

        with self._gate.reading() as state:
            if state is ServiceState.UNAVAILABLE:
                return success(meta=meta, payload=_unavailable(state))
            try:
                self._repository.ensure_reader()
                self._repository.ensure_writer()
            except (MongoSubstrateError, PyMongoError) as exc:
                _LOGGER.warning("Database refresh failed during status check: %s", exc)
                return success(meta=meta, payload=_unavailable(state))
        return success(
            meta=meta,
            payload=ServiceStatus(code=STATUS_OK, message="OK", state=state.value),
        )

    @public_api_logged(logger=_LOGGER, component_id=SERVICE_COMPONENT_ID)
    def create_document(
        self, *, meta: EnvelopeMeta, request: DocumentRequest | None
    ) -> Envelope[Document]:
        return self._execute(
            meta=meta,
            operation="create_document",
            request=request,
            action=lambda: self._create(request),
        )

    @public_api_logged(logger=_LOGGER, component_id=SERVICE_COMPONENT_ID)
    def list_user_document_collection(
        self, *, meta: EnvelopeMeta, request: DocumentRequest | None
    ) -> Envelope[list[Document]]:
        return self._execute(
            meta=meta,
            operation="list_user_document_collection",
            request=request,
            action=lambda: self._list_by_owner(request),
        )

    @public_api_logged(logger=_LOGGER, component_id=SERVICE_COMPONENT_ID)
    def update_document(
        self, *, meta: EnvelopeMeta, request: DocumentRequest | None
    ) -> Envelope[Document]:
        return self._execute(
            meta=meta,
            operation="update_document",
            request=request,
            action=lambda: self._update(request),
        )

    @public_api_logged(logger=_LOGGER, component_id=SERVICE_COMPONENT_ID)
    def delete_document(
        self, *, meta: EnvelopeMeta, request: DocumentRequest | None
    ) -> Envelope[Document]:
        return self._execute(
            meta=meta,
            operation="delete_document",
            request=request,
            action=lambda: self._delete(request),
        )

    @public_api_logged(logger=_LOGGER, component_id=SERVICE_COMPONENT_ID)
    def add_file_metadata(
        self, *, meta: EnvelopeMeta, request: DocumentRequest | None
    ) -> Envelope[Document]:
        return self._execute(
            meta=meta,
            operation="add_file_metadata",
            request=request,
            action=lambda: self._add_file(request),
        )

    @public_api_logged(logger=_LOGGER, component_id=SERVICE_COMPONENT_ID)
    def delete_file_metadata(
        self, *, meta: EnvelopeMeta, request: DocumentRequest | None
    ) -> Envelope[Document]:
        return self._execute(
            meta=meta,
            operation="delete_file_metadata",
            request=request,
            action=lambda: self._delete_file(request),
        )

    @public_api_logged(logger=_LOGGER, component_id=SERVICE_COMPONENT_ID)
    def list_distinct_field_values(
        self, *, meta: EnvelopeMeta, request: DocumentRequest | None
    ) -> Envelope[QueryTransaction]:
        return self._execute(
            meta=meta,
            operation="list_distinct_field_values",
            request=request,
            action=lambda: self._list_distinct(request),
        )

    @public_api_logged(logger=_LOGGER, component_id=SERVICE_COMPONENT_ID)
    def query_document(
        self, *, meta: EnvelopeMeta, request: DocumentRequest | None
    ) -> Envelope[list[Document]]:
        return self._execute(
            meta=meta,
            operation="query_document",
            request=request,
            action=lambda: self._query(request),
        )

    @public_api_logged(
        logger=_LOGGER,
        component_id=SERVICE_COMPONENT_ID,
        id_fields=("state",),
    )
    def set_service_state(
        self, *, meta: EnvelopeMeta, state: str
    ) -> Envelope[ServiceStatus]:
        return self._execute(
            meta=meta,
            operation="set_service_state",
            request=None,
            action=lambda: self._set_state(state),
        )

    # Pipeline

    def _execute(
        self,
        *,
        meta: EnvelopeMeta,
        operation: str,
        request: DocumentRequest | None,
        action: Callable[[], T],
    ) -> Envelope[T]:
        """Run one handler body and fold its failures into the envelope."""
        meta_errors = validate_meta(meta)
        if meta_errors:
            return failure(meta=meta, errors=meta_errors)

        with log_context(_request_identifiers(request)):
            try:
                return success(meta=meta, payload=action())
            except DocumentServiceError as exc:
                _LOGGER.warning(
                    "%s rejected: code=%s message=%s",
                    operation,
                    exc.kind.code,
                    exc.kind.message,
                )
                return failure(meta=meta, errors=[exc.to_error_detail()])
            except (MongoSubstrateError, PyMongoError) as exc:
                _LOGGER.warning("%s database failure: %s", operation, exc)
                return failure(meta=meta, errors=[normalize_mongo_error(exc)])

    def _require_available(self) -> None:
        if not self._gate.is_available():
            raise DocumentServiceError(errors.SERVICE_UNAVAILABLE)

    def _now(self) -> int:
        return int(self._clock())

    # Handlers

    def _create(self, request: DocumentRequest | None) -> Document:
        document = _require_data(request)
        self._require_available()
        validate_uuid(document.uuid)
        self._repository.ensure_writer()

        with self._locks.hold(document.uuid):
            now = self._now()
            document = self._merge_request_urls(document, request).model_copy(
                update={"duid": "", "create_timestamp": now, "update_timestamp": 0}
            )
            validate_document(document, probe=self._probe, now=now)
            document = document.model_copy(update={"duid": self._duid_factory()})
            self._repository.insert(document)

        _LOGGER.info("Document created: duid=%s uuid=%s", document.duid, document.uuid)
        return document

    def _list_by_owner(self, request: DocumentRequest | None) -> list[Document]:
        document = _require_data(request)
        self._require_available()
        validate_uuid(document.uuid)
        self._repository.ensure_reader()

        documents = self._repository.find_by_owner(uuid=document.uuid)
        if not documents:
            raise DocumentServiceError(
                errors.DOCUMENT_NOT_FOUND, metadata={fields.UUID: document.uuid}
            )
        return documents

    def _update(self, request: DocumentRequest | None) -> Document:
        document = _require_data(request)
        if document.duid == "":
            raise DocumentServiceError(errors.MISSING_DUID)
        self._require_available()
        validate_uuid(document.uuid)
        self._repository.ensure_writer()

        with self._locks.hold(document.uuid):
            now = self._now()
            document = self._merge_request_urls(document, request).model_copy(
                update={"update_timestamp": now}
            )
            validate_document(document, probe=self._probe, now=now)
            updated = self._repository.replace(document)

        if updated is None:
            raise DocumentServiceError(
                errors.DOCUMENT_NOT_FOUND, metadata=_identity(document)
            )
        return updated

    def _delete(self, request: DocumentRequest | None) -> Document:
        document = _require_data(request)
        if document.duid == "":
            raise DocumentServiceError(errors.MISSING_DUID)
        self._require_available()
        validate_duid(document.duid)
        validate_uuid(document.uuid)
        self._repository.ensure_writer()

        with self._locks.hold(document.uuid):
            deleted = self._repository.delete(duid=document.duid, uuid=document.uuid)

        if deleted is None:
            raise DocumentServiceError(
                errors.DOCUMENT_NOT_FOUND, metadata=_identity(document)
            )
        return deleted

    def _add_file(self, request: DocumentRequest | None) -> Document:
        params = _require_file_parameters(request, require_url=True)
        self._require_available()
        validate_duid(params.duid)
        validate_uuid(params.uuid)
        media = _media_type(params.media)
        validate_media_url(params.url, media, probe=self._probe)
        self._repository.ensure_writer()

        with self._locks.hold(params.uuid):
            current = self._find_existing(params)
            urls = dict(getattr(current, _MEDIA_MAP_FIELDS[media]) or {})
            fuid = self._fuid_factory()
            urls[fuid] = params.url
            updated = self._replace_media_map(current, media, urls)

        _LOGGER.info("File metadata added: duid=%s fuid=%s", params.duid, fuid)
        return updated

    def _delete_file(self, request: DocumentRequest | None) -> Document:
        params = _require_file_parameters(request, require_url=False)
        self._require_available()
        validate_duid(params.duid)
        validate_uuid(params.uuid)
        validate_fuid(params.fuid)
        media = _media_type(params.media)
        self._repository.ensure_writer()

        with self._locks.hold(params.uuid):
            current = self._find_existing(params)
            urls = dict(getattr(current, _MEDIA_MAP_FIELDS[media]) or {})
            urls.pop(params.fuid, None)
            remaining = {
                other: urls if other is media else getattr(current, field) or {}
                for other, field in _MEDIA_MAP_FIELDS.items()
            }
            if not remaining[MediaType.IMAGE] and not remaining[MediaType.AUDIO]:
                raise DocumentServiceError(
                    errors.MISSING_IMAGE_OR_AUDIO, metadata=_identity(current)
                )
            return self._replace_media_map(current, media, urls)

    def _list_distinct(self, request: DocumentRequest | None) -> QueryTransaction:
        if request is None:
            raise DocumentServiceError(errors.NIL_REQUEST)
        self._require_available()
        self._repository.ensure_reader()

        result = QueryTransaction()
        for field, path in DISTINCT_SEARCH_FIELDS:
            raw = [value for value in self._repository.distinct(path) if value is not None]
            if not raw:
                continue
            extract_distinct_results(result, field.value, raw)
        return result

    def _query(self, request: DocumentRequest | None) -> list[Document]:
        if request is None:
            raise DocumentServiceError(errors.NIL_REQUEST)
        query = request.query_parameters
        if query is None:
            raise DocumentServiceError(errors.NIL_QUERY_ARGUMENTS)
        self._require_available()
        now = self._now()
        validate_record_timestamp(query.min_record_timestamp, now=now)
        validate_record_timestamp(query.max_record_timestamp, now=now)
        self._repository.ensure_reader()

        return self._repository.aggregate(build_aggregate_pipeline(query))

    def _set_state(self, state: str) -> ServiceStatus:
        try:
            target = ServiceState(state)
        except ValueError:
            raise DocumentServiceError(
                errors.INVALID_SERVICE_STATE, metadata={fields.SERVICE_STATE: str(state)}
            ) from None
        previous = self._gate.set(target)
        _LOGGER.info(
            "Service state changed: previous=%s current=%s",
            previous.value,
            target.value,
        )
        if target is ServiceState.UNAVAILABLE:
            return _unavailable(target)
        return ServiceStatus(code=STATUS_OK, message="OK", state=target.value)

    # Helpers

    def _merge_request_urls(
        self, document: Document, request: DocumentRequest | None
    ) -> Document:
        """Normalize absent URL maps to empty and add request URLs under new fuids."""
        incoming = {
            MediaType.IMAGE: None if request is None else request.image_urls,
            MediaType.AUDIO: None if request is None else request.audio_urls,
            MediaType.VIDEO: None if request is None else request.video_urls,
            MediaType.FILE: None if request is None else request.file_urls,
        }
        update: dict[str, Any] = {}
        for media, urls in incoming.items():
            field_name = _MEDIA_MAP_FIELDS[media]
            merged = dict(getattr(document, field_name) or {})
            for url in urls or ():
                merged[self._fuid_factory()] = url
            update[field_name] = merged
        return document.model_copy(update=update)

    def _find_existing(self, params: FileMetadataParameters) -> Document:
        current = self._repository.find_one(duid=params.duid, uuid=params.uuid)
        if current is None:
            raise DocumentServiceError(
                errors.DOCUMENT_NOT_FOUND,
                metadata={fields.DUID: params.duid, fields.UUID: params.uuid},
            )
        return current

    def _replace_media_map(
        self, current: Document, media: MediaType, urls: dict[str, str]
    ) -> Document:
        document = current.model_copy(
            update={_MEDIA_MAP_FIELDS[media]: urls, "update_timestamp": self._now()}
        )
        updated = self._repository.replace(document)
        if updated is None:
            raise DocumentServiceError(
                errors.DOCUMENT_NOT_FOUND, metadata=_identity(document)
            )
        return updated


def _require_data(request: DocumentRequest | None) -> Document:
    if request is None:
        raise DocumentServiceError(errors.NIL_REQUEST)
    if request.data is None:
        raise DocumentServiceError(errors.NIL_REQUEST_DATA)
    return request.data


def _require_file_parameters(
    request: DocumentRequest | None, *, require_url: bool
) -> FileMetadataParameters:
    if request is None:
        raise DocumentServiceError(errors.NIL_REQUEST)
    params = request.file_metadata_parameters
    if params is None or params.duid.strip() == "":
        raise DocumentServiceError(errors.INVALID_FILE_METADATA_PARAMETERS)
    if require_url and params.url.strip() == "":
        raise DocumentServiceError(errors.INVALID_FILE_METADATA_PARAMETERS)
    return params


def _media_type(raw: str) -> MediaType:
    try:
        return MediaType(raw.upper())
    except ValueError:
        raise DocumentServiceError(
            errors.INVALID_MEDIA_TYPE, metadata={"media": raw}
        ) from None


def _identity(document: Document) -> dict[str, str]:
    return {fields.DUID: document.duid, fields.UUID: document.uuid}


def _unavailable(state: ServiceState) -> ServiceStatus:
    return ServiceStatus(
        code=STATUS_UNAVAILABLE,
        message=ServiceState.UNAVAILABLE.value,
        state=state.value,
    )


def _request_identifiers(request: DocumentRequest | None) -> dict[str, str]:
    """Return non-empty document identifiers carried by one request."""
    if request is None:
        return {}
    identifiers: dict[str, str] = {}
    if request.data is not None:
        identifiers[fields.DUID] = request.data.duid
        identifiers[fields.UUID] = request.data.uuid
    params = request.file_metadata_parameters
    if params is not None:
        identifiers[fields.DUID] = params.duid
        identifiers[fields.UUID] = params.uuid
        identifiers[fields.FUID] = params.fuid
    return {key: value for key, value in identifiers.items() if value}
