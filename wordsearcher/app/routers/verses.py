"""
Verse range retrieval router.

Provides REST endpoints for reading the verse corpus by range:
- A verse range within a chapter, or the whole chapter
- An inclusive range of books
- An inclusive range of chapters within one book
- A named custom range definition

Bounds are validated before the store is queried. Invalid bounds return 400
with a detail naming the offending field and value.

Example Usage:
    ```bash
    # Genesis 1:1-2
    curl "http://localhost:8000/v1/verses?book=1&chapter=1&verse_start=1&verse_end=2"

    # All of Genesis 1
    curl "http://localhost:8000/v1/verses?book=1&chapter=1"

    # Exodus and Leviticus
    curl "http://localhost:8000/v1/verses/books?start=2&end=3"

    # Matthew 1-4
    curl "http://localhost:8000/v1/verses/chapters?book=40&start=1&end=4"

    # A custom range definition
    curl http://localhost:8000/v1/verses/custom-ranges/gospels
    ```
"""

from fastapi import APIRouter, Depends, HTTPException, Query

from ..dependencies.store import get_store
from ..errors import NotFoundError, OutOfRangeError
from ..models import CustomRange, VerseResponse
from ..repositories.store import VerseStore
from ..services.verses import VerseService

router = APIRouter(prefix="/verses", tags=["verses"])


def get_verse_service(store: VerseStore = Depends(get_store)) -> VerseService:
    """Dependency provider for VerseService."""
    return VerseService(store)


# NOTE: Specific routes MUST be defined BEFORE any dynamic path segment.


@router.get("/books", response_model=VerseResponse)
async def book_range(
    start: int = Query(..., description="First book number (inclusive)"),
    end: int = Query(..., description="Last book number (inclusive)"),
    service: VerseService = Depends(get_verse_service),
) -> VerseResponse:
    """
    Return every verse in books ``start`` through ``end``.

    ``start == end`` returns a single book.

    Raises:
        HTTPException: 400 if ``start`` is negative or greater than ``end``
    """
    try:
        verses = await service.book_range(start, end)
    except OutOfRangeError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return VerseResponse(verses=verses)


@router.get("/chapters", response_model=VerseResponse)
async def chapter_range(
    book: int = Query(..., description="Book number"),
    start: int = Query(..., description="First chapter (inclusive)"),
    end: int = Query(..., description="Last chapter (inclusive)"),
    service: VerseService = Depends(get_verse_service),
) -> VerseResponse:
    """
    Return every verse in chapters ``start`` through ``end`` of ``book``.

    Raises:
        HTTPException: 400 if ``book`` or ``start`` is negative, or ``start > end``
    """
    try:
        verses = await service.chapter_range(book, start, end)
    except OutOfRangeError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return VerseResponse(verses=verses)


@router.get("/custom-ranges/{name}", response_model=CustomRange)
async def custom_range(
    name: str,
    service: VerseService = Depends(get_verse_service),
) -> CustomRange:
    """
    Return a named custom range.

    Response:
        ```json
        {"name": "gospels", "type": "books", "book_number": 40,
         "custom_range": [40, 41, 42, 43]}
        ```

    Raises:
        HTTPException: 404 if no custom range has this name
    """
    try:
        return await service.custom_range(name)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@router.get("", response_model=VerseResponse)
async def verse_range(
    book: int = Query(..., description="Book number (1-66)"),
    chapter: int = Query(..., description="Chapter number"),
    verse_start: int = Query(0, description="First verse; 0 returns the whole chapter"),
    verse_end: int = Query(0, description="Last verse (inclusive); ignored when verse_start is 0"),
    service: VerseService = Depends(get_verse_service),
) -> VerseResponse:
    """
    Return a range of verses in one chapter, or the whole chapter.

    Response:
        ```json
        {
          "verses": [
            {"book": 1, "book_name": "Genesis", "chapter": 1, "verse": 1,
             "text": "In the beginning God created the heaven and the earth.",
             "keywords": "beginning created heaven earth"}
          ]
        }
        ```

    Raises:
        HTTPException: 400 if ``verse_start`` is negative or greater than ``verse_end``
    """
    try:
        verses = await service.verse_range(book, chapter, verse_start, verse_end)
    except OutOfRangeError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return VerseResponse(verses=verses)
