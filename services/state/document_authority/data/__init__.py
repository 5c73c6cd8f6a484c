"""Data-layer exports for Document Authority Service."""

from services.state.document_authority.data.repository import MongoDocumentRepository
from services.state.document_authority.data.runtime import DocumentMongoRuntime

__all__ = ["DocumentMongoRuntime", "MongoDocumentRepository"]
