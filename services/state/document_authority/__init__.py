"""Document Authority Service native package exports."""

from packages.hwsc_shared.envelope import Envelope, EnvelopeKind, EnvelopeMeta
from packages.hwsc_shared.errors import ErrorCategory, ErrorDetail
from services.state.document_authority.config import (
    SERVICE_COMPONENT_ID,
    DocumentAuthoritySettings,
)
from services.state.document_authority.domain import (
    Document,
    DocumentRequest,
    DocumentResponse,
    FileMetadataParameters,
    MediaType,
    Publisher,
    QueryTransaction,
    ServiceStatus,
    StudySite,
)
from services.state.document_authority.implementation import (
    DefaultDocumentAuthorityService,
)
from services.state.document_authority.runtime import DocumentRuntime
from services.state.document_authority.service import (
    DocumentAuthorityService,
    build_document_authority_service,
)

__all__ = [
    "SERVICE_COMPONENT_ID",
    "DocumentAuthorityService",
    "DocumentAuthoritySettings",
    "DefaultDocumentAuthorityService",
    "DocumentRuntime",
    "build_document_authority_service",
    "Document",
    "DocumentRequest",
    "DocumentResponse",
    "FileMetadataParameters",
    "MediaType",
    "Publisher",
    "QueryTransaction",
    "ServiceStatus",
    "StudySite",
    "Envelope",
    "EnvelopeKind",
    "EnvelopeMeta",
    "ErrorCategory",
    "ErrorDetail",
]
