"""
Result formatting utilities.

Shapes raw store responses into the uniform tabular QueryResult.
"""

from typing import Any, List, Optional

from docsql.core.models import Document, QueryResult, ResultType

PERMISSION_PHRASES = (
    "permission-denied",
    "permission denied",
    "missing or insufficient permissions",
    "not authorized",
)

WRITE_COLUMNS = ["id", "status"]


def is_permission_error(message: str) -> bool:
    """Classify an error message as a permission failure by substring match."""
    lowered = message.lower()
    return any(phrase in lowered for phrase in PERMISSION_PHRASES)


class ResultFormatter:
    """
    Formats store responses into QueryResults.

    Column derivation follows the first document only: later documents may
    carry fields that never get a column.
    """

    @staticmethod
    def columns_for(documents: List[Document]) -> List[str]:
        """`id` first, then the first document's fields in order."""
        if not documents:
            return ["id"]
        return ["id"] + [key for key in documents[0].fields if key != "id"]

    @staticmethod
    def format_read(
        collection: str,
        documents: List[Document],
        page_cursor: Optional[Any] = None,
    ) -> QueryResult:
        """
        Format a listing into a read result.

        Args:
            collection: Collection the documents came from
            documents: Documents of the page
            page_cursor: Cursor reported by the store for the last document

        Returns:
            Read result; `page_cursor` is dropped when there are no rows
        """
        return QueryResult(
            type=ResultType.READ,
            columns=ResultFormatter.columns_for(documents),
            rows=[document.to_row() for document in documents],
            message=f"Fetched {len(documents)} documents from '{collection}'",
            collection_name=collection,
            page_cursor=page_cursor if documents else None,
        )

    @staticmethod
    def format_write(
        collection: str, document_id: str, status: str, message: str
    ) -> QueryResult:
        """Format a single-document write into a one-row status result."""
        return QueryResult(
            type=ResultType.WRITE,
            columns=list(WRITE_COLUMNS),
            rows=[{"id": document_id, "status": status}],
            message=message,
            collection_name=collection,
        )

    @staticmethod
    def format_error(error: Exception) -> QueryResult:
        message = str(error) or "Unknown error occurred"
        return QueryResult(
            type=ResultType.ERROR,
            message=message,
            permission_denied=is_permission_error(message),
        )
