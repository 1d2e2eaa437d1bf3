"""Service layer for free-text verse search."""

from __future__ import annotations

from ..models import ScoredVerse, SearchRequest
from ..query.search import compile_search
from ..repositories.store import VerseStore
from ..utils.logging import get_logger
from .verses import VERSE_TABLE, compile_counted, project

logger = get_logger(__name__)


class SearchService:
    """Compiles search requests and returns relevance-ranked verses."""

    def __init__(self, store: VerseStore) -> None:
        self._store = store

    async def search(self, body: SearchRequest) -> list[ScoredVerse]:
        """Run a search; results arrive sorted by descending score."""
        pipeline = compile_counted(
            "search", compile_search, body.term, body.filter, body.location, body.options
        )
        logger.debug(
            "search_compiled",
            extra={"filter": body.filter, "location": body.location, "search": repr(pipeline.search)},
        )
        rows = await self._store.aggregate(VERSE_TABLE, pipeline)
        return project(rows, ScoredVerse)
