"""
Pagination cursor stack.

Keeps the cursor tokens of every page visited for the active query so that
backward navigation replays a cached cursor instead of re-scanning from the
start of the collection.
"""

from typing import Any, List, NamedTuple, Optional

# Cursor meaning "start of collection".
START_CURSOR = None


class PageMove(NamedTuple):
    """A planned move to `page`, fetched with `cursor`."""

    page: int
    cursor: Optional[Any]


class CursorStack:
    """
    Cursor tokens indexed by page.

    ``cursors[n]`` holds the token that fetches page ``n + 1``; ``cursors[0]``
    is always the start sentinel. Entries are appended the first time a page
    is reached and are never removed until `reset`.

    The ``plan_*`` methods compute a move without touching state; `commit`
    applies it. Callers that fetch between the two only mutate the stack once
    the page has actually arrived.
    """

    def __init__(self):
        self._cursors: List[Optional[Any]] = [START_CURSOR]
        self._page = 1

    @property
    def page(self) -> int:
        """Current page, 1-based."""
        return self._page

    @property
    def cursors(self) -> List[Optional[Any]]:
        return list(self._cursors)

    @property
    def can_retreat(self) -> bool:
        return self._page > 1

    def reset(self) -> None:
        self._cursors = [START_CURSOR]
        self._page = 1

    def plan_advance(self, returned_page_cursor: Optional[Any]) -> Optional[PageMove]:
        """
        Plan the move to the next page.

        Args:
            returned_page_cursor: Cursor reported with the current page

        Returns:
            The move, or None when the current page reported no cursor
            (it was empty, so there is nothing beyond it)
        """
        if returned_page_cursor is None:
            return None

        target = self._page + 1
        if len(self._cursors) >= target:
            return PageMove(target, self._cursors[target - 1])
        return PageMove(target, returned_page_cursor)

    def plan_retreat(self) -> Optional[PageMove]:
        """Plan the move to the previous page; None on page 1."""
        if self._page <= 1:
            return None
        target = self._page - 1
        return PageMove(target, self._cursors[target - 1])

    def commit(self, move: PageMove) -> None:
        """
        Apply a planned move.

        Raises:
            ValueError: If the move would leave a gap in the stack
        """
        index = move.page - 1
        if index == len(self._cursors):
            self._cursors.append(move.cursor)
        elif index > len(self._cursors):
            raise ValueError(f"cannot enter page {move.page} from {len(self._cursors)} known pages")
        self._page = move.page

    def advance(self, returned_page_cursor: Optional[Any]) -> Optional[Any]:
        """
        Move to the next page.

        A no-op returning None when `returned_page_cursor` is None: the page
        counter never moves past an empty page.

        Returns:
            The cursor to fetch the new page with
        """
        move = self.plan_advance(returned_page_cursor)
        if move is None:
            return None
        self.commit(move)
        return move.cursor

    def retreat(self) -> Optional[Any]:
        """
        Move to the previous page.

        A no-op on page 1. Returns the cached cursor of the new page, which is
        the start sentinel for page 1.
        """
        move = self.plan_retreat()
        if move is None:
            return START_CURSOR
        self.commit(move)
        return move.cursor
