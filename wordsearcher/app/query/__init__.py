"""Request validation and predicate compilation."""

from .plans import compile_plan_day, compile_plan_lookup
from .ranges import (
    compile_book_range,
    compile_chapter_or_verse,
    compile_chapter_range,
    compile_custom_range_lookup,
)
from .search import compile_search, normalize_mode

__all__ = [
    "compile_book_range",
    "compile_chapter_or_verse",
    "compile_chapter_range",
    "compile_custom_range_lookup",
    "compile_plan_day",
    "compile_plan_lookup",
    "compile_search",
    "normalize_mode",
]
