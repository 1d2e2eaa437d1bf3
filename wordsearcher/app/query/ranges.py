"""Range request validation and predicate compilation.

Every function validates its bounds first and raises
:class:`~wordsearcher.app.errors.OutOfRangeError` before building anything, so a
bad request never reaches the store. Equal bounds are always valid and select a
single verse, book or chapter.
"""

from __future__ import annotations

from ..errors import OutOfRangeError
from .predicates import Between, Equals, Filter, LookupKey


def _require_non_negative(field: str, value: int, label: str) -> None:
    if value < 0:
        raise OutOfRangeError(
            field, value, f"The {label} must be positive. Invalid {field}: {value}"
        )


def _require_ordered(start_field: str, start: int, end: int, label: str) -> None:
    if start > end:
        raise OutOfRangeError(
            start_field,
            start,
            f"The start of the {label} range cannot be greater than the end. "
            f"Invalid: {label.capitalize()} Start: {start}; {label.capitalize()} End: {end}",
        )


def compile_chapter_or_verse(
    book: int,
    chapter: int,
    verse_start: int,
    verse_end: int,
) -> Filter:
    """Compile a verse range, or a whole chapter when ``verse_start`` is 0.

    ``verse_end`` is ignored (and not validated) for whole-chapter requests.
    """
    _require_non_negative("verse_start", verse_start, "verse range")
    if verse_start == 0:
        return Filter((Equals("book", book), Equals("chapter", chapter)))

    _require_ordered("verse_start", verse_start, verse_end, "verse")
    return Filter(
        (
            Equals("book", book),
            Equals("chapter", chapter),
            Between("verse", verse_start, verse_end),
        )
    )


def compile_book_range(start: int, end: int) -> Filter:
    """Compile an inclusive range of books; chapters and verses are unconstrained."""
    _require_non_negative("start", start, "book range")
    _require_ordered("start", start, end, "book")
    return Filter((Between("book", start, end),))


def compile_chapter_range(book: int, start: int, end: int) -> Filter:
    """Compile an inclusive range of chapters within one book."""
    _require_non_negative("book", book, "book")
    _require_non_negative("start", start, "chapter range")
    _require_ordered("start", start, end, "chapter")
    return Filter((Equals("book", book), Between("chapter", start, end)))


def compile_custom_range_lookup(name: str) -> LookupKey:
    # Unknown or empty names are reported by the store as not found.
    return LookupKey("name", name)


__all__ = [
    "compile_book_range",
    "compile_chapter_or_verse",
    "compile_chapter_range",
    "compile_custom_range_lookup",
]
