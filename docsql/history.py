"""Append-only query history."""

import time
from typing import Iterator, List

from docsql.core.models import HistoryStatus, QueryHistoryItem


class QueryHistory:
    """Executed statements in the order they were recorded."""

    def __init__(self):
        self._items: List[QueryHistoryItem] = []

    def record(self, query: str, success: bool) -> QueryHistoryItem:
        item = QueryHistoryItem(
            query=query,
            timestamp=time.time(),
            status=HistoryStatus.SUCCESS if success else HistoryStatus.ERROR,
        )
        self._items.append(item)
        return item

    @property
    def items(self) -> List[QueryHistoryItem]:
        return list(self._items)

    def clear(self) -> None:
        self._items = []

    def __iter__(self) -> Iterator[QueryHistoryItem]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)
