"""Shared fixtures for docsql tests."""

import asyncio
import datetime
from typing import Any, Dict, List, Optional

import pytest
from bson import Binary, Decimal128, ObjectId

from docsql.adapters.memory import MemoryStoreAdapter
from docsql.connection import StoreSession
from docsql.core.models import DocumentPage, Filter
from docsql.orchestrator import QueryOrchestrator


USERS = {
    "u1": {"age": 30, "name": "Bob"},
    "u2": {"age": 18, "name": "Eve", "tags": ["admin"]},
    "u3": {"name": "Ann", "age": 45, "address": {"city": "Oslo"}},
}


@pytest.fixture
def store() -> MemoryStoreAdapter:
    return MemoryStoreAdapter({"users": {key: dict(value) for key, value in USERS.items()}})


@pytest.fixture
def session(store) -> StoreSession:
    return StoreSession(store)


@pytest.fixture
def orchestrator(session) -> QueryOrchestrator:
    return QueryOrchestrator(session, page_size=2)


class RecordingStore(MemoryStoreAdapter):
    """Memory store that records calls and can be told to fail."""

    def __init__(self, data=None):
        super().__init__(data)
        self.calls: List[tuple] = []
        self.fail_with: Dict[str, Exception] = {}

    def _maybe_fail(self, operation: str) -> None:
        if operation in self.fail_with:
            raise self.fail_with[operation]

    async def list_documents(self, collection, filter=None, cursor=None, limit=50):
        self.calls.append(("list", collection, filter, cursor))
        self._maybe_fail("list")
        return await super().list_documents(collection, filter, cursor, limit)

    async def create_document(self, collection, fields):
        self.calls.append(("create", collection, dict(fields)))
        self._maybe_fail("create")
        return await super().create_document(collection, fields)

    async def update_document(self, collection, document_id, fields):
        self.calls.append(("update", collection, document_id, dict(fields)))
        self._maybe_fail("update")
        return await super().update_document(collection, document_id, fields)

    async def delete_document(self, collection, document_id):
        self.calls.append(("delete", collection, document_id))
        self._maybe_fail("delete")
        return await super().delete_document(collection, document_id)

    async def get_document(self, collection, document_id):
        self.calls.append(("get", collection, document_id))
        self._maybe_fail("get")
        return await super().get_document(collection, document_id)


class GatedStore(MemoryStoreAdapter):
    """
    Memory store whose listings wait for the test to release them.

    Each listing call parks on its own event, so the test decides the order
    in which overlapping requests resolve.
    """

    def __init__(self, data=None):
        super().__init__(data)
        self.gates: List[asyncio.Event] = []
        self.gated = False

    async def list_documents(
        self,
        collection: str,
        filter: Optional[Filter] = None,
        cursor: Optional[Any] = None,
        limit: int = 50,
    ) -> DocumentPage:
        page = await super().list_documents(collection, filter, cursor, limit)
        if self.gated:
            gate = asyncio.Event()
            self.gates.append(gate)
            await gate.wait()
        return page


@pytest.fixture
def recording_store() -> RecordingStore:
    return RecordingStore({"users": {key: dict(value) for key, value in USERS.items()}})


@pytest.fixture
def numbered_data() -> Dict[str, Dict[str, Dict[str, Any]]]:
    """Seven documents n1..n7 with an increasing `n` field."""
    return {"numbers": {f"n{i}": {"n": i} for i in range(1, 8)}}


@pytest.fixture
def gated_store(numbered_data) -> GatedStore:
    return GatedStore(numbered_data)


class FakeMongoCursor:
    def __init__(self, documents: List[Dict[str, Any]]):
        self.documents = documents

    def sort(self, *args) -> "FakeMongoCursor":
        return self

    def limit(self, count: int) -> "FakeMongoCursor":
        self.documents = self.documents[:count]
        return self

    async def to_list(self, length: Optional[int] = None) -> List[Dict[str, Any]]:
        return list(self.documents)


class FakeMongoCollection:
    """Records the calls MongoStoreAdapter makes; `find` ignores its query."""

    def __init__(self, documents: List[Dict[str, Any]]):
        self.documents = documents
        self.calls: List[tuple] = []

    def find(self, query: Dict[str, Any]) -> FakeMongoCursor:
        self.calls.append(("find", query))
        return FakeMongoCursor(self.documents)

    async def find_one(self, query: Dict[str, Any], projection: Any = None) -> Optional[Dict[str, Any]]:
        self.calls.append(("find_one", query))
        return next((doc for doc in self.documents if doc["_id"] == query["_id"]), None)

    async def update_one(self, query: Dict[str, Any], update: Dict[str, Any]) -> Any:
        self.calls.append(("update_one", query, update))
        matched = any(doc["_id"] == query["_id"] for doc in self.documents)
        return type("UpdateResult", (), {"matched_count": int(matched)})()


class FakeMongoDatabase:
    def __init__(self, collection: FakeMongoCollection):
        self.collection = collection

    def __getitem__(self, name: str) -> FakeMongoCollection:
        return self.collection

    async def command(self, name: str) -> Dict[str, Any]:
        return {"ok": 1}


class FakeMongoClient:
    """Stand-in for AsyncMongoClient serving fixed documents from any collection."""

    def __init__(self, documents: List[Dict[str, Any]]):
        self.collection = FakeMongoCollection(documents)
        self.closed = False

    def __getitem__(self, name: str) -> FakeMongoDatabase:
        return FakeMongoDatabase(self.collection)

    async def close(self) -> None:
        self.closed = True


ORDER_ID = ObjectId("64b7f0c2a1b2c3d4e5f60718")
CUSTOMER_ID = ObjectId("64b7f0c2a1b2c3d4e5f60001")


@pytest.fixture
def mongo_client() -> FakeMongoClient:
    """One order document holding BSON-only values."""
    return FakeMongoClient(
        [
            {
                "_id": ORDER_ID,
                "customer": CUSTOMER_ID,
                "total": Decimal128("19.99"),
                "lines": [{"product": CUSTOMER_ID, "qty": 2}],
                "placed": datetime.datetime(2024, 5, 1, 12, 0),
                "raw": Binary(b"\x00\x01"),
            }
        ]
    )
