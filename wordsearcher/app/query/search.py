"""
Free-text search compilation.

A search request carries a term, a filter mode and a location mode. Both modes
treat ``"all"`` and the empty string as "no constraint". When neither mode
constrains the search the result is a plain any-term match; otherwise a term
clause and a location clause are combined with AND.

Mode strings are never rejected. Anything unrecognised falls through to the
default branch of the relevant table.

Known limitations kept as-is:

- ``filter="in"`` contributes no term clause, so with a location mode set the
  search term is ignored and every verse in the location matches.
- ``location="bookname"`` selects the New Testament (book > 39); a book name
  supplied in ``options`` is not consulted.
"""

from __future__ import annotations

from collections.abc import Sequence

from .predicates import (
    AnyTermMatch,
    Bound,
    Clause,
    Conjunction,
    PhraseMatch,
    SearchPipeline,
)

TEXT_PATH = "text"
BOOK_PATH = "book"

# Last book of the Old Testament in canonical order.
OLD_TESTAMENT_LAST_BOOK = 39
# Genesis through Deuteronomy.
LAW_LAST_BOOK = 5

_UNCONSTRAINED = {"", "all"}


def normalize_mode(value: str | None) -> str:
    """Collapse ``None``, ``""`` and ``"all"`` into ``""``."""
    if value is None or value in _UNCONSTRAINED:
        return ""
    return value


def term_clause(term: str, filter_mode: str) -> Clause | None:
    """Return the text clause for ``filter_mode``, or ``None`` for ``"in"``."""
    if filter_mode == "exact":
        return PhraseMatch(TEXT_PATH, term, slop=0)
    if filter_mode == "in":
        return None
    return AnyTermMatch(TEXT_PATH, term)


def location_clause(location_mode: str, options: Sequence[str] = ()) -> Bound:
    """Return the book-number clause for ``location_mode``."""
    if location_mode == "nt":
        return Bound(BOOK_PATH, "gt", OLD_TESTAMENT_LAST_BOOK)
    if location_mode == "ot":
        return Bound(BOOK_PATH, "lte", OLD_TESTAMENT_LAST_BOOK)
    if location_mode == "law":
        return Bound(BOOK_PATH, "lte", LAW_LAST_BOOK)
    if location_mode == "bookname":
        # TODO: resolve the book named in options instead of the New Testament.
        return Bound(BOOK_PATH, "gt", OLD_TESTAMENT_LAST_BOOK)
    return Bound(BOOK_PATH, "gt", 0)


def compile_search(
    term: str,
    filter_mode: str | None = None,
    location_mode: str | None = None,
    options: Sequence[str] = (),
) -> SearchPipeline:
    """Compile a search request into a relevance-sorted pipeline."""
    filter_mode = normalize_mode(filter_mode)
    location_mode = normalize_mode(location_mode)

    if not filter_mode and not location_mode:
        return SearchPipeline(search=AnyTermMatch(TEXT_PATH, term))

    clauses: list[Clause] = []
    text = term_clause(term, filter_mode)
    if text is not None:
        clauses.append(text)
    clauses.append(location_clause(location_mode, options))
    return SearchPipeline(search=Conjunction(tuple(clauses)))


__all__ = [
    "LAW_LAST_BOOK",
    "OLD_TESTAMENT_LAST_BOOK",
    "compile_search",
    "location_clause",
    "normalize_mode",
    "term_clause",
]
