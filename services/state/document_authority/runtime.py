"""Process-wide collaborators shared by every Document Authority handler.

Built once at startup and threaded into the service instead of living in
module globals, so handlers can be exercised with fakes.
"""

from __future__ import annotations

from dataclasses import dataclass

from packages.hwsc_shared.config import HwscSettings
from services.state.document_authority.config import (
    DocumentAuthoritySettings,
    resolve_document_authority_settings,
)
from services.state.document_authority.data import (
    DocumentMongoRuntime,
    MongoDocumentRepository,
)
from services.state.document_authority.locks import OwnerLockRegistry
from services.state.document_authority.probe import HttpUrlProbe
from services.state.document_authority.state import ServiceStateGate


@dataclass(frozen=True)
class DocumentRuntime:
    """Settings, database handles, state gate, owner locks, and URL probe."""

    settings: DocumentAuthoritySettings
    mongo: DocumentMongoRuntime
    gate: ServiceStateGate
    locks: OwnerLockRegistry
    probe: HttpUrlProbe

    @classmethod
    def from_settings(cls, settings: HwscSettings) -> "DocumentRuntime":
        service_settings = resolve_document_authority_settings(settings)
        return cls(
            settings=service_settings,
            mongo=DocumentMongoRuntime.from_settings(settings),
            gate=ServiceStateGate(),
            locks=OwnerLockRegistry(),
            probe=HttpUrlProbe.with_timeout(service_settings.url_probe_timeout_seconds),
        )

    def connect(self) -> None:
        """Dial both database handles; failures propagate to the caller."""
        self.mongo.handles.connect()

    def repository(self) -> MongoDocumentRepository:
        return MongoDocumentRepository(self.mongo)

    def close(self) -> None:
        """Disconnect database handles and release the probe's HTTP client."""
        self.mongo.handles.close()
        self.probe.close()
