"""Domain errors raised by the compilers, store adapter and services."""

from __future__ import annotations

from typing import Any


class WordsearcherError(Exception):
    """Base class for all Wordsearcher errors."""


class OutOfRangeError(WordsearcherError, ValueError):
    """Raised when a request carries an invalid numeric bound.

    Always raised before the store is touched.
    """

    def __init__(self, field: str, value: Any, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.value = value


class NotFoundError(WordsearcherError, LookupError):
    """Raised when the store has no record for a lookup key."""


class StoreError(WordsearcherError):
    """Raised when the store fails or returns rows of the wrong shape."""


__all__ = ["WordsearcherError", "OutOfRangeError", "NotFoundError", "StoreError"]
