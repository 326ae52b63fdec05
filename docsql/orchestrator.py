"""
Query orchestrator - main entry point.

Owns the state of one editor session: the current result, the active SELECT,
its cursor stack and the query history. Statements, paging, inline edits and
inserts all go through here.
"""

import itertools
import logging
from typing import Any, Dict, List, Optional

from docsql.adapters import create_adapter
from docsql.config import StoreConfig
from docsql.connection import StoreSession
from docsql.core.models import Command, CommandKind, QueryResult, ResultType
from docsql.editing.reconciler import Reconciler
from docsql.execution.executor import DEFAULT_PAGE_SIZE, CommandExecutor
from docsql.execution.result_formatter import ResultFormatter
from docsql.export import result_to_csv
from docsql.history import QueryHistory
from docsql.pagination import CursorStack, PageMove
from docsql.query.parser import parse_statement

logger = logging.getLogger(__name__)


class QueryOrchestrator:
    """
    Session controller for the query pipeline.

    State changes only once a response has resolved, and each response is
    applied in one step with no await in between. Overlapping requests are
    last-resolved-wins; with `discard_stale_responses` a response older than
    the last applied one is dropped instead. Page responses for a query that
    has since been replaced are always dropped.
    """

    def __init__(
        self,
        session: StoreSession,
        page_size: int = DEFAULT_PAGE_SIZE,
        discard_stale_responses: bool = False,
    ):
        """
        Initialize query orchestrator.

        Args:
            session: Store session shared with the executor and reconciler
            page_size: Documents per SELECT page
            discard_stale_responses: Drop responses older than the last applied one
        """
        self.session = session
        self.executor = CommandExecutor(session, page_size=page_size)
        self.history = QueryHistory()
        self.reconciler = Reconciler(session, self.history)
        self.cursor_stack = CursorStack()
        self.discard_stale_responses = discard_stale_responses

        self.result: Optional[QueryResult] = None
        self.active_statement: Optional[str] = None
        self._active_command: Optional[Command] = None
        self._columns: List[str] = []

        self._issued = itertools.count(1)
        self._applied = 0
        self._generation = 0

    @classmethod
    def from_config(cls, config: StoreConfig) -> "QueryOrchestrator":
        """
        Create orchestrator from configuration.

        Args:
            config: Store configuration

        Returns:
            Orchestrator connected to the configured store
        """
        session = StoreSession(create_adapter(config))
        return cls(
            session,
            page_size=config.page_size,
            discard_stale_responses=config.discard_stale_responses,
        )

    @property
    def page(self) -> int:
        return self.cursor_stack.page

    def _accept(self, sequence: int) -> bool:
        if self.discard_stale_responses and sequence < self._applied:
            logger.debug("Dropping stale response %d (applied %d)", sequence, self._applied)
            return False
        self._applied = max(self._applied, sequence)
        return True

    async def run(self, statement: str) -> Optional[QueryResult]:
        """
        Execute a statement and make its result current.

        Blank statements are ignored. Every executed statement is recorded in
        the history. A new statement starts a new cursor stack.

        Returns:
            The statement's result
        """
        if not statement.strip():
            return self.result

        sequence = next(self._issued)
        command: Optional[Command] = None
        try:
            command = parse_statement(statement)
        except Exception as e:
            result = ResultFormatter.format_error(e)
        else:
            result = await self.executor.execute(command)

        self.history.record(statement, success=not result.is_error)
        if not self._accept(sequence):
            return result

        self._generation += 1
        self.result = result
        self.active_statement = statement
        self.cursor_stack.reset()
        self._columns = list(result.columns)
        pageable = command is not None and command.kind == CommandKind.SELECT
        self._active_command = command if pageable and not result.is_error else None
        return result

    async def next_page(self) -> Optional[QueryResult]:
        """
        Fetch the page after the current one.

        A no-op when there is no active SELECT or the current page was empty.
        """
        if self.result is None or self._active_command is None:
            return self.result
        move = self.cursor_stack.plan_advance(self.result.page_cursor)
        if move is None:
            return self.result
        return await self._fetch_page(move)

    async def previous_page(self) -> Optional[QueryResult]:
        """Fetch the page before the current one; a no-op on page 1."""
        if self._active_command is None:
            return self.result
        move = self.cursor_stack.plan_retreat()
        if move is None:
            return self.result
        return await self._fetch_page(move)

    async def _fetch_page(self, move: PageMove) -> QueryResult:
        sequence = next(self._issued)
        generation = self._generation
        result = await self.executor.execute(self._active_command, move.cursor)

        if generation != self._generation:
            logger.debug("Dropping page %d of a replaced query", move.page)
            return result
        if not self._accept(sequence):
            return result

        if result.type == ResultType.READ:
            # Columns stay those of the first page
            result.columns = list(self._columns)
            self.cursor_stack.commit(move)
        self.result = result
        return result

    async def edit_cell(self, document_id: str, field: str, value: Any) -> None:
        """Optimistically edit one cell of the current result."""
        await self.reconciler.edit_cell(self.result, document_id, field, value)

    async def insert_row(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Create a document and prepend it to the current result."""
        return await self.reconciler.insert_row(self.result, fields)

    def export_csv(self) -> str:
        if self.result is None:
            return ""
        return result_to_csv(self.result)

    def reset(self) -> None:
        """Forget the current result, the active query and the history."""
        self._generation += 1
        self.result = None
        self.active_statement = None
        self._active_command = None
        self._columns = []
        self.cursor_stack.reset()
        self.history.clear()
