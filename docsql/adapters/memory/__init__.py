"""In-memory adapter for docsql."""

from docsql.adapters.memory.store import MemoryStoreAdapter

__all__ = ["MemoryStoreAdapter"]
