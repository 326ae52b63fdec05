"""
Optimistic update reconciliation.

Cell edits are applied to the held result before the remote write is issued;
inserted rows are prepended once the store has assigned an id. A failed write
is reported but the local change is not rolled back, so the table and the
store can diverge until the next query.
"""

import json
import logging
from typing import Any, Dict

from docsql.connection import StoreSession
from docsql.core.exceptions import EditError, OptimisticWriteError
from docsql.core.models import QueryResult, ResultType
from docsql.history import QueryHistory
from docsql.query.coercion import format_literal

logger = logging.getLogger(__name__)


def _require_editable(result: QueryResult) -> str:
    if result is None or result.type != ResultType.READ or not result.collection_name:
        raise EditError("Editing requires a read result with a known collection")
    return result.collection_name


def edit_statement(collection: str, document_id: str, field: str, value: Any) -> str:
    """Display-only UPDATE statement recorded for an inline edit."""
    text = "JSON {...}" if isinstance(value, (dict, list)) else format_literal(value)
    return f"UPDATE {collection} SET {field} = {text} WHERE id = '{document_id}' (Inline Edit)"


def insert_statement(collection: str, fields: Dict[str, Any]) -> str:
    """Display-only INSERT statement recorded for an inline insert."""
    return f"INSERT INTO {collection} JSON {json.dumps(fields, default=str)} (Inline Insert)"


class Reconciler:
    """
    Applies edits and inserts to a held read result and the store.

    Each call records exactly one history entry whose status reflects the
    remote write only.
    """

    def __init__(self, session: StoreSession, history: QueryHistory):
        self.session = session
        self.history = history

    async def edit_cell(
        self, result: QueryResult, document_id: str, field: str, value: Any
    ) -> None:
        """
        Set `field` of the row with id `document_id` and write it through.

        Rows are matched by id, never by position.

        Raises:
            EditError: If `result` is not an editable read result or `field` is `id`
            OptimisticWriteError: If the store write fails; the local change stays
        """
        collection = _require_editable(result)
        if field == "id":
            raise EditError("The id column cannot be edited")

        for row in result.rows:
            if row.get("id") == document_id:
                row[field] = value

        statement = edit_statement(collection, document_id, field, value)
        try:
            await self.session.adapter.update_document(collection, document_id, {field: value})
        except Exception as e:
            logger.warning("Inline edit of %s.%s in '%s' failed: %s", document_id, field, collection, e)
            self.history.record(statement, success=False)
            raise OptimisticWriteError(f"Failed to save changes: {e}", e) from e

        self.history.record(statement, success=True)

    async def insert_row(self, result: QueryResult, fields: Dict[str, Any]) -> Dict[str, Any]:
        """
        Create a document and prepend it to the held result.

        Columns are left alone, so fields unknown to the result are carried in
        the row but get no column.

        Returns:
            The prepended row, including the store-assigned id

        Raises:
            EditError: If `result` is not an editable read result
            OptimisticWriteError: If the store write fails
        """
        collection = _require_editable(result)

        statement = insert_statement(collection, fields)
        try:
            document_id = await self.session.adapter.create_document(collection, dict(fields))
        except Exception as e:
            logger.warning("Inline insert into '%s' failed: %s", collection, e)
            self.history.record(statement, success=False)
            raise OptimisticWriteError(f"Failed to insert document: {e}", e) from e

        row = dict(fields)
        row["id"] = document_id
        result.rows.insert(0, row)
        self.history.record(statement, success=True)
        return row
