"""MongoDB repository tests over a fake collection."""

from __future__ import annotations

from typing import Any

import pytest
from pymongo import ReturnDocument

from resources.substrates.mongodb import MongoHandles, MongoRole, NilMongoClientError
from services.state.document_authority.data import (
    DocumentMongoRuntime,
    MongoDocumentRepository,
)
from services.state.document_authority.tests.test_document_service import OWNER, _document

DUID = "0ujsswThIGTUYm2K8FjOOfXtY1K"


class _FakeCollection:
    """Records pymongo collection calls and serves canned results."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple[Any, ...], dict[str, Any]]] = []
        self.result: Any = None

    def _call(self, name: str, *args: Any, **kwargs: Any) -> Any:
        self.calls.append((name, args, kwargs))
        return self.result

    def insert_one(self, *args: Any, **kwargs: Any) -> Any:
        return self._call("insert_one", *args, **kwargs)

    def find(self, *args: Any, **kwargs: Any) -> Any:
        return self._call("find", *args, **kwargs)

    def find_one(self, *args: Any, **kwargs: Any) -> Any:
        return self._call("find_one", *args, **kwargs)

    def find_one_and_replace(self, *args: Any, **kwargs: Any) -> Any:
        return self._call("find_one_and_replace", *args, **kwargs)

    def find_one_and_delete(self, *args: Any, **kwargs: Any) -> Any:
        return self._call("find_one_and_delete", *args, **kwargs)

    def aggregate(self, *args: Any, **kwargs: Any) -> Any:
        return self._call("aggregate", *args, **kwargs)

    def distinct(self, *args: Any, **kwargs: Any) -> Any:
        return self._call("distinct", *args, **kwargs)


class _FakeClient:
    def __init__(self, collection: _FakeCollection) -> None:
        self.collection = collection
        self.closed = False

    def __getitem__(self, database: str) -> dict[str, _FakeCollection]:
        assert database == "document"
        return {"documents": self.collection}

    def close(self) -> None:
        self.closed = True


def _repository() -> tuple[MongoDocumentRepository, _FakeCollection, _FakeCollection]:
    reader = _FakeCollection()
    writer = _FakeCollection()
    clients = {"mongodb://reader": _FakeClient(reader), "mongodb://writer": _FakeClient(writer)}
    handles = MongoHandles(
        reader_uri="mongodb://reader",
        writer_uri="mongodb://writer",
        dialer=lambda uri, timeout_seconds: clients[uri],
        pinger=lambda client, timeout_seconds: True,
    )
    handles.connect()
    runtime = DocumentMongoRuntime(handles=handles, database="document", collection="documents")
    return MongoDocumentRepository(runtime), reader, writer


def test_insert_writes_camel_case_record_to_writer() -> None:
    repo, reader, writer = _repository()
    document = _document(duid=DUID)

    repo.insert(document)

    name, args, _ = writer.calls[0]
    assert name == "insert_one"
    assert args[0]["duid"] == DUID
    assert args[0]["publisherName"] == {"lastName": "Kim", "firstName": "Lisa"}
    assert reader.calls == []


def test_find_by_owner_reads_from_reader_without_object_id() -> None:
    repo, reader, _ = _repository()
    reader.result = [{"_id": "abc", **_document(duid=DUID).to_mongo()}]

    documents = repo.find_by_owner(uuid=OWNER)

    assert documents == [_document(duid=DUID)]
    assert reader.calls[0][1] == ({"uuid": OWNER}, {"_id": False})


def test_replace_matches_owner_and_returns_after_image() -> None:
    repo, _, writer = _repository()
    document = _document(duid=DUID)
    writer.result = document.to_mongo()

    replaced = repo.replace(document)

    name, args, kwargs = writer.calls[0]
    assert name == "find_one_and_replace"
    assert args[0] == {"duid": DUID, "uuid": OWNER}
    assert kwargs["return_document"] == ReturnDocument.AFTER
    assert replaced == document


def test_missing_matches_return_none() -> None:
    repo, _, writer = _repository()
    writer.result = None

    assert repo.replace(_document(duid=DUID)) is None
    assert repo.delete(duid=DUID, uuid=OWNER) is None
    assert repo.find_one(duid=DUID, uuid=OWNER) is None


def test_aggregate_and_distinct_use_reader() -> None:
    repo, reader, writer = _repository()
    reader.result = []

    assert repo.aggregate([{"$match": {}}]) == []
    assert repo.distinct("groundType") == []
    assert [call[0] for call in reader.calls] == ["aggregate", "distinct"]
    assert writer.calls == []


def test_unset_handle_raises_nil_client() -> None:
    handles = MongoHandles(reader_uri="mongodb://reader", writer_uri="mongodb://writer")
    runtime = DocumentMongoRuntime(handles=handles, database="document", collection="documents")
    repo = MongoDocumentRepository(runtime)

    with pytest.raises(NilMongoClientError):
        repo.distinct("groundType")


def test_ensure_refreshes_matching_role() -> None:
    refreshed: list[MongoRole] = []
    repo, _, _ = _repository()
    handles = repo._runtime.handles
    original = handles.refresh

    def _refresh(role: MongoRole) -> Any:
        refreshed.append(role)
        return original(role)

    handles.refresh = _refresh  # type: ignore[method-assign]
    repo.ensure_reader()
    repo.ensure_writer()

    assert refreshed == [MongoRole.READER, MongoRole.WRITER]
