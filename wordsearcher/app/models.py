from pydantic import BaseModel, Field, field_validator

# ============================================================================
# Verse Models - Corpus records and range responses
# ============================================================================


class Verse(BaseModel):
    """Verse record projected for API responses."""

    book: int
    book_name: str
    chapter: int
    verse: int
    text: str
    keywords: str = ""


class ScoredVerse(Verse):
    """Verse returned by a search, with its relevance score."""

    score: float = 0.0


class VerseResponse(BaseModel):
    """Verses container shared by range lookups."""

    verses: list[Verse]


class SearchResponse(BaseModel):
    """Search results ordered by descending relevance."""

    verses: list[ScoredVerse]


# ============================================================================
# Range Request Models
#
# Bounds are validated by the range compilers, whose errors name the field
# and offending value.
# ============================================================================


class VerseRequest(BaseModel):
    """A verse range within a chapter; ``verse_start == 0`` selects the chapter."""

    book: int
    chapter: int
    verse_start: int = 0
    verse_end: int = 0


class BookRangeRequest(BaseModel):
    """Inclusive range of books."""

    start: int
    end: int


class ChapterRangeRequest(BaseModel):
    """Inclusive range of chapters within a book."""

    book: int
    start: int
    end: int


class CustomRangeRequest(BaseModel):
    """Lookup key into the named custom range table."""

    name: str


class CustomRange(BaseModel):
    """Named, pre-defined range of books."""

    name: str
    type: str
    book_number: int
    custom_range: list[int] = Field(default_factory=list)


# ============================================================================
# Search Models
# ============================================================================


class SearchRequest(BaseModel):
    """Free-text search request.

    ``filter`` and ``location`` accept any string; unrecognised values fall back
    to the default behaviour instead of failing validation.
    """

    term: str
    filter: str = ""
    location: str = ""
    options: list[str] = Field(default_factory=list)

    @field_validator("term")
    @classmethod
    def validate_term(cls, value: str) -> str:
        """Ensure the search term contains non-whitespace characters."""
        if not value or not value.strip():
            raise ValueError("Search term must not be empty")
        return value


# ============================================================================
# Reading Plan Models
# ============================================================================


class BiblePlan(BaseModel):
    """One reading track of a named Bible plan."""

    name: str
    number: int
    days: list[str] = Field(default_factory=list)


class BiblePlanResponse(BaseModel):
    """All tracks sharing a plan name."""

    bible_plan: list[BiblePlan]


class BiblePlanDay(BaseModel):
    """The readings for one day across every track of a plan."""

    name: str
    day: int
    readings: list[str]
