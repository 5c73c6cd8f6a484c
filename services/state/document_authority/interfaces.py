"""Transport-neutral protocol interfaces used by Document Authority Service."""

from __future__ import annotations

from typing import Any, Protocol, Sequence

from services.state.document_authority.domain import Document


class DocumentRepository(Protocol):
    """Protocol for authoritative document persistence operations.

    Reads go through the reader handle and writes through the writer handle.
    ``ensure_reader``/``ensure_writer`` refresh the matching handle and raise
    when it cannot be (re)established.
    """

    def ensure_reader(self) -> None:
        """Make sure the reader handle is live."""

    def ensure_writer(self) -> None:
        """Make sure the writer handle is live."""

    def insert(self, document: Document) -> None:
        """Insert one new document."""

    def find_by_owner(self, *, uuid: str) -> list[Document]:
        """Return every document owned by ``uuid``."""

    def find_one(self, *, duid: str, uuid: str) -> Document | None:
        """Return the document matching ``(duid, uuid)`` when present."""

    def replace(self, document: Document) -> Document | None:
        """Replace the stored ``(duid, uuid)`` match and return the new state."""

    def delete(self, *, duid: str, uuid: str) -> Document | None:
        """Delete the ``(duid, uuid)`` match and return what was removed."""

    def aggregate(self, pipeline: Sequence[dict[str, Any]]) -> list[Document]:
        """Run one aggregation pipeline and return matching documents."""

    def distinct(self, field_path: str) -> list[object]:
        """Return distinct values stored under ``field_path``."""
