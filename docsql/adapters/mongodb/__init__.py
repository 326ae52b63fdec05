"""MongoDB adapter for docsql."""

from docsql.adapters.mongodb.query_translator import MongoQueryTranslator
from docsql.adapters.mongodb.store import MongoStoreAdapter

__all__ = ["MongoQueryTranslator", "MongoStoreAdapter"]
