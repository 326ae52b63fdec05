"""
MongoDB store adapter.

Implements the StoreAdapter protocol on top of pymongo's asyncio client.
"""

import datetime
import logging
from typing import Any, Dict, Optional

from bson import Decimal128, ObjectId, json_util
from pymongo import ASCENDING, AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase

from docsql.adapters.mongodb.query_translator import MongoQueryTranslator, to_object_id
from docsql.core.exceptions import DocumentNotFoundError, NotConnectedError
from docsql.core.models import Document, DocumentPage, Filter

logger = logging.getLogger(__name__)


_PLAIN_TYPES = (str, int, float, bool, type(None), datetime.datetime)


def _to_plain(value: Any) -> Any:
    """
    Convert BSON values into JSON-compatible ones.

    ObjectIds become their hex string and Decimal128 its decimal text. Other
    BSON-only types (binary, regex, timestamp, ...) use their extended JSON
    form.
    """
    if isinstance(value, dict):
        return {key: _to_plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_plain(item) for item in value]
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, Decimal128):
        return str(value.to_decimal())
    if isinstance(value, _PLAIN_TYPES):
        return value
    try:
        return json_util.default(value)
    except TypeError:
        return str(value)


def _to_document(raw: Dict[str, Any]) -> Document:
    """Split a raw MongoDB document into id and JSON-compatible fields."""
    fields = dict(raw)
    document_id = fields.pop("_id")
    return Document(id=str(document_id), fields=_to_plain(fields))


class MongoStoreAdapter:
    """
    Document store backed by a MongoDB database.

    Collections map one-to-one to MongoDB collections; documents are
    addressed by `_id`, stringified on the way out.
    """

    def __init__(self, mongo_uri: str, database_name: str, client: Optional[AsyncMongoClient] = None):
        """
        Initialize MongoDB store adapter.

        Args:
            mongo_uri: MongoDB connection URI
            database_name: Name of the database
            client: Pre-built client, mainly for tests
        """
        self.mongo_uri = mongo_uri
        self.database_name = database_name

        self.client: AsyncMongoClient = client or AsyncMongoClient(mongo_uri)
        self.db: AsyncDatabase = self.client[database_name]
        self.translator = MongoQueryTranslator()
        self._closed = False

    @property
    def connected(self) -> bool:
        return not self._closed

    def _database(self) -> AsyncDatabase:
        if self._closed:
            raise NotConnectedError()
        return self.db

    async def ping(self) -> None:
        """Round-trip to the server; raises when it cannot be reached."""
        await self._database().command("ping")

    async def list_documents(
        self,
        collection: str,
        filter: Optional[Filter] = None,
        cursor: Optional[Any] = None,
        limit: int = 50,
    ) -> DocumentPage:
        query = self.translator.translate(filter, cursor)
        logger.debug("find on '%s': %s", collection, query)

        mongo_cursor = self._database()[collection].find(query).sort("_id", ASCENDING).limit(limit)
        raw_documents = await mongo_cursor.to_list(length=limit)

        documents = [_to_document(raw) for raw in raw_documents]
        next_cursor = documents[-1].id if documents else None
        return DocumentPage(documents=documents, next_cursor=next_cursor)

    async def create_document(self, collection: str, fields: Dict[str, Any]) -> str:
        # insert_one adds `_id` to the mapping it is given
        result = await self._database()[collection].insert_one(dict(fields))
        return str(result.inserted_id)

    async def update_document(
        self, collection: str, document_id: str, fields: Dict[str, Any]
    ) -> None:
        query = {"_id": to_object_id(document_id)}
        # $set rejects an empty document
        if not fields:
            if await self._database()[collection].find_one(query, {"_id": 1}) is None:
                raise DocumentNotFoundError(f"No document to update: {collection}/{document_id}")
            return

        result = await self._database()[collection].update_one(query, {"$set": fields})
        if result.matched_count == 0:
            raise DocumentNotFoundError(f"No document to update: {collection}/{document_id}")

    async def delete_document(self, collection: str, document_id: str) -> None:
        await self._database()[collection].delete_one({"_id": to_object_id(document_id)})

    async def get_document(self, collection: str, document_id: str) -> Optional[Document]:
        raw = await self._database()[collection].find_one({"_id": to_object_id(document_id)})
        if raw is None:
            return None
        return _to_document(raw)

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self.client.close()
