"""
In-memory store adapter.

A process-local document store implementing the StoreAdapter protocol. Used
when no MongoDB URI is configured and as the backing store in tests.
"""

import copy
import itertools
import uuid
from typing import Any, Dict, Optional

from docsql.core.exceptions import DocumentNotFoundError, NotConnectedError
from docsql.core.models import Document, DocumentPage, Filter, FilterOperator

_MISSING = object()


def _lookup(fields: Dict[str, Any], path: str) -> Any:
    """Resolve a dotted field path; `_MISSING` when any segment is absent."""
    value: Any = fields
    for part in path.split("."):
        if not isinstance(value, dict) or part not in value:
            return _MISSING
        value = value[part]
    return value


def _kind(value: Any) -> str:
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    return type(value).__name__


def _equal(left: Any, right: Any) -> bool:
    return _kind(left) == _kind(right) and left == right


def _matches(fields: Dict[str, Any], document_id: str, condition: Filter) -> bool:
    if condition.field == "id":
        actual = document_id
    else:
        actual = _lookup(fields, condition.field)
    if actual is _MISSING:
        return False

    expected = condition.value
    operator = condition.operator

    if operator == FilterOperator.EQ:
        return _equal(actual, expected)
    if operator == FilterOperator.NE:
        return not _equal(actual, expected)
    if operator == FilterOperator.CONTAINS:
        return isinstance(actual, list) and any(_equal(item, expected) for item in actual)

    # Ordering comparisons only between values of the same kind
    if _kind(actual) != _kind(expected) or _kind(actual) not in ("number", "str"):
        return False
    if operator == FilterOperator.GT:
        return actual > expected
    if operator == FilterOperator.LT:
        return actual < expected
    if operator == FilterOperator.GE:
        return actual >= expected
    if operator == FilterOperator.LE:
        return actual <= expected
    return False


class MemoryStoreAdapter:
    """
    Document store held in a dict.

    Listing order is creation order. A cursor is the id of the last document
    of a page; positions are remembered after deletion so cursors stay valid.
    The position map therefore only grows, by one entry per id ever stored,
    for the lifetime of the adapter.
    """

    def __init__(self, data: Optional[Dict[str, Dict[str, Dict[str, Any]]]] = None):
        """
        Initialize in-memory store.

        Args:
            data: Optional seed data, {collection: {document_id: fields}}
        """
        self._collections: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self._positions: Dict[str, Dict[str, int]] = {}
        self._sequence = itertools.count()
        self._closed = False

        for collection, documents in (data or {}).items():
            for document_id, fields in documents.items():
                self._store(collection, document_id, fields)

    @property
    def connected(self) -> bool:
        return not self._closed

    def _check(self) -> None:
        if self._closed:
            raise NotConnectedError()

    async def ping(self) -> None:
        self._check()

    def _store(self, collection: str, document_id: str, fields: Dict[str, Any]) -> None:
        self._collections.setdefault(collection, {})[document_id] = copy.deepcopy(fields)
        positions = self._positions.setdefault(collection, {})
        if document_id not in positions:
            positions[document_id] = next(self._sequence)

    async def list_documents(
        self,
        collection: str,
        filter: Optional[Filter] = None,
        cursor: Optional[Any] = None,
        limit: int = 50,
    ) -> DocumentPage:
        self._check()
        documents = self._collections.get(collection, {})
        positions = self._positions.get(collection, {})

        after = -1
        if cursor is not None:
            after = positions.get(str(cursor), -1)

        page = []
        for document_id in sorted(documents, key=positions.__getitem__):
            if positions[document_id] <= after:
                continue
            fields = documents[document_id]
            if filter is not None and not _matches(fields, document_id, filter):
                continue
            page.append(Document(id=document_id, fields=copy.deepcopy(fields)))
            if len(page) >= limit:
                break

        next_cursor = page[-1].id if page else None
        return DocumentPage(documents=page, next_cursor=next_cursor)

    async def create_document(self, collection: str, fields: Dict[str, Any]) -> str:
        self._check()
        document_id = uuid.uuid4().hex[:20]
        self._store(collection, document_id, fields)
        return document_id

    async def update_document(
        self, collection: str, document_id: str, fields: Dict[str, Any]
    ) -> None:
        self._check()
        documents = self._collections.get(collection, {})
        if document_id not in documents:
            raise DocumentNotFoundError(f"No document to update: {collection}/{document_id}")
        documents[document_id].update(copy.deepcopy(fields))

    async def delete_document(self, collection: str, document_id: str) -> None:
        self._check()
        self._collections.get(collection, {}).pop(document_id, None)

    async def get_document(self, collection: str, document_id: str) -> Optional[Document]:
        self._check()
        fields = self._collections.get(collection, {}).get(document_id)
        if fields is None:
            return None
        return Document(id=document_id, fields=copy.deepcopy(fields))

    async def close(self) -> None:
        self._closed = True
