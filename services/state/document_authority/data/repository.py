"""MongoDB-backed repository for Document Authority Service."""

from __future__ import annotations

from typing import Any, Sequence

from pymongo import ReturnDocument

from resources.substrates.mongodb import MongoRole
from services.state.document_authority.data.runtime import DocumentMongoRuntime
from services.state.document_authority.domain import Document

_NO_ID = {"_id": False}


class MongoDocumentRepository:
    """Persist documents in one MongoDB collection keyed by ``duid``."""

    def __init__(self, runtime: DocumentMongoRuntime) -> None:
        self._runtime = runtime

    def ensure_reader(self) -> None:
        self._runtime.handles.refresh(MongoRole.READER)

    def ensure_writer(self) -> None:
        self._runtime.handles.refresh(MongoRole.WRITER)

    def insert(self, document: Document) -> None:
        self._writer().insert_one(document.to_mongo())

    def find_by_owner(self, *, uuid: str) -> list[Document]:
        cursor = self._reader().find({"uuid": uuid}, _NO_ID)
        return [Document.from_mongo(raw) for raw in cursor]

    def find_one(self, *, duid: str, uuid: str) -> Document | None:
        raw = self._writer().find_one({"duid": duid, "uuid": uuid}, _NO_ID)
        return None if raw is None else Document.from_mongo(raw)

    def replace(self, document: Document) -> Document | None:
        raw = self._writer().find_one_and_replace(
            {"duid": document.duid, "uuid": document.uuid},
            document.to_mongo(),
            projection=_NO_ID,
            return_document=ReturnDocument.AFTER,
        )
        return None if raw is None else Document.from_mongo(raw)

    def delete(self, *, duid: str, uuid: str) -> Document | None:
        raw = self._writer().find_one_and_delete(
            {"duid": duid, "uuid": uuid}, projection=_NO_ID
        )
        return None if raw is None else Document.from_mongo(raw)

    def aggregate(self, pipeline: Sequence[dict[str, Any]]) -> list[Document]:
        cursor = self._reader().aggregate(list(pipeline))
        return [Document.from_mongo(raw) for raw in cursor]

    def distinct(self, field_path: str) -> list[object]:
        return list(self._reader().distinct(field_path))

    def _reader(self) -> Any:
        return self._runtime.collection_for(MongoRole.READER)

    def _writer(self) -> Any:
        return self._runtime.collection_for(MongoRole.WRITER)
