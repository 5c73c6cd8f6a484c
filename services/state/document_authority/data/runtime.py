"""Service-owned MongoDB runtime wiring."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from packages.hwsc_shared.config import HwscSettings
from resources.substrates.mongodb import MongoHandles, MongoRole
from services.state.document_authority.config import (
    resolve_document_authority_settings,
)


@dataclass(frozen=True)
class DocumentMongoRuntime:
    """Reader/writer handles plus the database and collection they target."""

    handles: MongoHandles
    database: str
    collection: str

    @classmethod
    def from_settings(cls, settings: HwscSettings) -> "DocumentMongoRuntime":
        """Build runtime handles from settings; nothing is dialed yet."""
        service_settings = resolve_document_authority_settings(settings)
        mongo = settings.hosts.mongodb
        return cls(
            handles=MongoHandles(
                reader_uri=mongo.reader,
                writer_uri=mongo.writer,
                timeout_seconds=service_settings.dial_timeout_seconds,
            ),
            database=mongo.db,
            collection=mongo.collection,
        )

    def collection_for(self, role: MongoRole) -> Any:
        """Return the documents collection on the current ``role`` client."""
        client = self.handles.client(role)
        return client[self.database][self.collection]
