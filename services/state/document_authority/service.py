"""Authoritative in-process Python API for Document Authority Service."""

from __future__ import annotations

from abc import ABC, abstractmethod

from packages.hwsc_shared.envelope import Envelope, EnvelopeMeta
from services.state.document_authority.domain import (
    Document,
    DocumentRequest,
    QueryTransaction,
    ServiceStatus,
)
from services.state.document_authority.runtime import DocumentRuntime


class DocumentAuthorityService(ABC):
    """Public API for bioacoustic document storage and faceted queries.

    Every method takes the whole wire request so request-shape failures
    ("Nil request", "Nil request data") are reported by the service itself.
    """

    @abstractmethod
    def get_status(self, *, meta: EnvelopeMeta) -> Envelope[ServiceStatus]:
        """Report readiness; also refreshes both database handles."""

    @abstractmethod
    def create_document(
        self, *, meta: EnvelopeMeta, request: DocumentRequest | None
    ) -> Envelope[Document]:
        """Validate and insert one new document, assigning its duid."""

    @abstractmethod
    def list_user_document_collection(
        self, *, meta: EnvelopeMeta, request: DocumentRequest | None
    ) -> Envelope[list[Document]]:
        """Return every document owned by the request's uuid."""

    @abstractmethod
    def update_document(
        self, *, meta: EnvelopeMeta, request: DocumentRequest | None
    ) -> Envelope[Document]:
        """Replace one stored document matched by duid and uuid."""

    @abstractmethod
    def delete_document(
        self, *, meta: EnvelopeMeta, request: DocumentRequest | None
    ) -> Envelope[Document]:
        """Delete one stored document matched by duid and uuid."""

    @abstractmethod
    def add_file_metadata(
        self, *, meta: EnvelopeMeta, request: DocumentRequest | None
    ) -> Envelope[Document]:
        """Add one URL under a fresh fuid to a document's media map."""

    @abstractmethod
    def delete_file_metadata(
        self, *, meta: EnvelopeMeta, request: DocumentRequest | None
    ) -> Envelope[Document]:
        """Remove one fuid from a document's media map."""

    @abstractmethod
    def list_distinct_field_values(
        self, *, meta: EnvelopeMeta, request: DocumentRequest | None
    ) -> Envelope[QueryTransaction]:
        """Return the distinct values of the six facet fields."""

    @abstractmethod
    def query_document(
        self, *, meta: EnvelopeMeta, request: DocumentRequest | None
    ) -> Envelope[list[Document]]:
        """Return documents matching the request's query parameters."""

    @abstractmethod
    def set_service_state(
        self, *, meta: EnvelopeMeta, state: str
    ) -> Envelope[ServiceStatus]:
        """Toggle the readiness gate between Available and Unavailable."""


def build_document_authority_service(
    *, runtime: DocumentRuntime
) -> DocumentAuthorityService:
    """Build the default implementation over one startup runtime."""
    from services.state.document_authority.implementation import (
        DefaultDocumentAuthorityService,
    )

    return DefaultDocumentAuthorityService.from_runtime(runtime)
