"""Store adapters executing compiled predicates."""

from .sql import render_aggregate, render_find, render_find_one
from .store import PostgresStore, VerseStore

__all__ = [
    "PostgresStore",
    "VerseStore",
    "render_aggregate",
    "render_find",
    "render_find_one",
]
