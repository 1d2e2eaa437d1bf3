"""
Store-agnostic query predicates.

The compilers in :mod:`.ranges` and :mod:`.search` produce these structures and
the store adapter renders them. Nothing here executes a query. All classes are
frozen so a compiled predicate can be compared and hashed in tests.

Two top-level shapes exist:

- :class:`Filter` for plain ``find`` calls (equality and inclusive ranges).
- :class:`SearchPipeline` for ``aggregate`` calls (full-text search stage,
  projection, relevance sort).

:class:`LookupKey` addresses a single named record for ``find_one``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

BoundOp = Literal["gt", "gte", "lt", "lte"]

SCORE_FIELD = "score"

VERSE_PROJECTION: tuple[str, ...] = (
    "book",
    "book_name",
    "chapter",
    "verse",
    "text",
    "keywords",
)


@dataclass(frozen=True)
class Equals:
    """``path == value``."""

    path: str
    value: int | str


@dataclass(frozen=True)
class Between:
    """``start <= path <= end``."""

    path: str
    start: int
    end: int


@dataclass(frozen=True)
class Bound:
    """One-sided comparison such as ``path > 39``."""

    path: str
    op: BoundOp
    value: int


@dataclass(frozen=True)
class AnyTermMatch:
    """Full-text match on any of the words in ``query``."""

    path: str
    query: str


@dataclass(frozen=True)
class PhraseMatch:
    """Full-text match on the words of ``query`` in order.

    ``slop`` is the number of words allowed between terms; 0 means adjacent.
    """

    path: str
    query: str
    slop: int = 0


Clause = Equals | Between | Bound | AnyTermMatch | PhraseMatch


@dataclass(frozen=True)
class Conjunction:
    """All clauses must match."""

    must: tuple[Clause, ...]


@dataclass(frozen=True)
class Filter:
    """Conjunctive equality/range filter executed with ``find``."""

    clauses: tuple[Equals | Between | Bound, ...]


@dataclass(frozen=True)
class Sort:
    path: str
    descending: bool = True


@dataclass(frozen=True)
class SearchPipeline:
    """Ordered search, project and sort stages executed with ``aggregate``."""

    search: AnyTermMatch | PhraseMatch | Conjunction
    project: tuple[str, ...] = VERSE_PROJECTION + (SCORE_FIELD,)
    sort: Sort = field(default_factory=lambda: Sort(SCORE_FIELD, descending=True))


@dataclass(frozen=True)
class LookupKey:
    """Single-record lookup by an exact key."""

    path: str
    value: str


CompiledPredicate = Filter | SearchPipeline | LookupKey


__all__ = [
    "AnyTermMatch",
    "Between",
    "Bound",
    "BoundOp",
    "Clause",
    "CompiledPredicate",
    "Conjunction",
    "Equals",
    "Filter",
    "LookupKey",
    "PhraseMatch",
    "SCORE_FIELD",
    "SearchPipeline",
    "Sort",
    "VERSE_PROJECTION",
]
