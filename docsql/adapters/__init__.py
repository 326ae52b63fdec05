"""Store adapters."""

from docsql.config import StoreConfig
from docsql.core.interfaces import StoreAdapter


def create_adapter(config: StoreConfig) -> StoreAdapter:
    """
    Build the adapter selected by `config`.

    Returns:
        A MongoStoreAdapter when a MongoDB URI is configured, an empty
        MemoryStoreAdapter otherwise
    """
    if config.mongo_uri:
        from docsql.adapters.mongodb import MongoStoreAdapter

        return MongoStoreAdapter(mongo_uri=config.mongo_uri, database_name=config.database_name)

    from docsql.adapters.memory import MemoryStoreAdapter

    return MemoryStoreAdapter()
