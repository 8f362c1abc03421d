"""Search operation: delegate the query, then store the matched ids."""

from __future__ import annotations

from ..logging import get_logger

logger = get_logger(__name__)


class SearchMixin:
    """Query delegation and search-driven expansion.

    Search-driven expansion never writes the persisted snapshot, so clearing
    the query does not leave the search's auto-expansion behind as state.
    """

    @property
    def is_searching(self) -> bool:
        return self.search_query != ""

    async def search(self, query: str) -> None:
        if self.search_handler is None:
            return
        if not self._can_interact("search"):
            return
        generation = self.generation
        self.set_loading(True)
        try:
            self.search_query = query
            self._emit("search")
            try:
                result = await self.search_handler(query)
            except Exception:
                logger.exception("search handler failed", query=query)
                result = None
        finally:
            self.set_loading(False)

        if generation != self.generation or self.search_query != query:
            logger.warning("discarding stale search result", query=query)
            return
        if result is None:
            return

        self.filter_ids = frozenset(str(item) for item in result)
        self._emit("search")
        if query != "" and self.filter_ids:
            self.expand_all(notify=False)
        else:
            self.collapse_all(notify=False)


__all__ = ["SearchMixin"]
