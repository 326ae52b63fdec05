"""
Abstract interface for document store adapters.

This protocol defines the contract that every store adapter must implement
to be driven by the command executor and the reconciler.
"""

from typing import Any, Dict, Optional, Protocol

from docsql.core.models import Document, DocumentPage, Filter


class StoreAdapter(Protocol):
    """
    Access to a schemaless document store.

    Implementations raise `NotConnectedError` from every operation once the
    adapter is closed. Error messages are surfaced to the user verbatim.
    """

    @property
    def connected(self) -> bool:
        """Whether the adapter currently holds a live store session."""
        ...

    async def ping(self) -> None:
        """Round-trip to the store; raises when it cannot be reached."""
        ...

    async def list_documents(
        self,
        collection: str,
        filter: Optional[Filter] = None,
        cursor: Optional[Any] = None,
        limit: int = 50,
    ) -> DocumentPage:
        """
        List documents of a collection, optionally filtered.

        Args:
            collection: Collection path
            filter: Single-condition filter, or None for all documents
            cursor: Opaque token from a previous page; None starts at the beginning
            limit: Maximum number of documents to return

        Returns:
            The page of documents and the cursor identifying its last document
            (None when the page is empty)
        """
        ...

    async def create_document(self, collection: str, fields: Dict[str, Any]) -> str:
        """
        Create a document with a store-generated id.

        Returns:
            The generated document id
        """
        ...

    async def update_document(
        self, collection: str, document_id: str, fields: Dict[str, Any]
    ) -> None:
        """Merge `fields` into an existing document."""
        ...

    async def delete_document(self, collection: str, document_id: str) -> None:
        """Delete a document by id."""
        ...

    async def get_document(self, collection: str, document_id: str) -> Optional[Document]:
        """Point read; None when the document does not exist."""
        ...

    async def close(self) -> None:
        """Release the store session."""
        ...
