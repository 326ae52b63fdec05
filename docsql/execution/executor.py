"""
Command execution coordinator.

Dispatches parsed Commands to the connected store adapter and shapes the
responses into QueryResults.
"""

import logging
from typing import Any, Optional

from docsql.connection import StoreSession
from docsql.core.models import Command, CommandKind, QueryResult
from docsql.execution.result_formatter import ResultFormatter
from docsql.query.parser import parse_statement

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 50


class CommandExecutor:
    """
    Coordinates command execution.

    Never raises: parse failures and store failures alike come back as
    error-typed results carrying the underlying message.
    """

    def __init__(self, session: StoreSession, page_size: int = DEFAULT_PAGE_SIZE):
        """
        Initialize command executor.

        Args:
            session: Store session providing the adapter
            page_size: Maximum number of documents fetched per SELECT
        """
        self.session = session
        self.page_size = page_size

    async def run(self, statement: str, cursor: Optional[Any] = None) -> QueryResult:
        """
        Parse and execute a statement.

        Args:
            statement: Statement text
            cursor: Pagination cursor, used by SELECT only

        Returns:
            The shaped result (error-typed on any failure)
        """
        try:
            command = parse_statement(statement)
        except Exception as e:
            return ResultFormatter.format_error(e)
        return await self.execute(command, cursor)

    async def execute(self, command: Command, cursor: Optional[Any] = None) -> QueryResult:
        """
        Execute a parsed command.

        Args:
            command: Parsed command
            cursor: Pagination cursor, used by SELECT only

        Returns:
            The shaped result (error-typed on any failure)
        """
        try:
            if command.kind == CommandKind.SELECT:
                return await self._select(command, cursor)
            if command.kind == CommandKind.INSERT:
                return await self._insert(command)
            if command.kind == CommandKind.UPDATE:
                return await self._update(command)
            return await self._delete(command)
        except Exception as e:
            logger.debug("%s on '%s' failed: %s", command.kind.value, command.collection, e)
            return ResultFormatter.format_error(e)

    async def _select(self, command: Command, cursor: Optional[Any]) -> QueryResult:
        adapter = self.session.adapter
        page = await adapter.list_documents(
            command.collection,
            filter=command.filter,
            cursor=cursor,
            limit=self.page_size,
        )
        return ResultFormatter.format_read(command.collection, page.documents, page.next_cursor)

    async def _insert(self, command: Command) -> QueryResult:
        adapter = self.session.adapter
        document_id = await adapter.create_document(command.collection, command.payload or {})
        logger.info("Created document %s in '%s'", document_id, command.collection)
        return ResultFormatter.format_write(
            command.collection,
            document_id,
            "Created",
            f"Document created in '{command.collection}' with ID: {document_id}",
        )

    async def _update(self, command: Command) -> QueryResult:
        adapter = self.session.adapter
        document_id = command.target_id
        await adapter.update_document(command.collection, document_id, command.payload or {})
        logger.info("Updated document %s in '%s'", document_id, command.collection)

        # Confirmation read only; the update already succeeded.
        try:
            await adapter.get_document(command.collection, document_id)
        except Exception as e:
            logger.warning("Read-back of %s in '%s' failed: %s", document_id, command.collection, e)

        return ResultFormatter.format_write(
            command.collection,
            document_id,
            "Updated",
            f"Document '{document_id}' updated in '{command.collection}'",
        )

    async def _delete(self, command: Command) -> QueryResult:
        adapter = self.session.adapter
        document_id = command.target_id
        await adapter.delete_document(command.collection, document_id)
        logger.info("Deleted document %s from '%s'", document_id, command.collection)
        return ResultFormatter.format_write(
            command.collection,
            document_id,
            "Deleted",
            f"Document '{document_id}' deleted from '{command.collection}'",
        )
