"""
Full-text verse search router.

``filter`` selects how the term is matched (``exact`` for a phrase, anything
else for any word) and ``location`` narrows the books searched (``nt``, ``ot``,
``law``). Results are ordered by relevance, highest first.

Example Usage:
    ```bash
    curl -X POST http://localhost:8000/v1/search \\
      -H "Content-Type: application/json" \\
      -d '{"term": "spake unto Joshua", "filter": "exact", "location": "ot"}'
    ```
"""

from fastapi import APIRouter, Depends

from ..dependencies.store import get_store
from ..models import SearchRequest, SearchResponse
from ..repositories.store import VerseStore
from ..services.search import SearchService

router = APIRouter(prefix="/search", tags=["search"])


def get_search_service(store: VerseStore = Depends(get_store)) -> SearchService:
    """Dependency provider for SearchService."""
    return SearchService(store)


@router.post("", response_model=SearchResponse)
async def search(
    body: SearchRequest,
    service: SearchService = Depends(get_search_service),
) -> SearchResponse:
    """Search the verse text; unknown filter or location values use the defaults."""
    verses = await service.search(body)
    return SearchResponse(verses=verses)
