"""Reading plan lookups."""

from __future__ import annotations

from ..errors import OutOfRangeError
from .predicates import Equals, Filter


def compile_plan_lookup(name: str) -> Filter:
    """Select every track of the plan called ``name``."""
    return Filter((Equals("name", name),))


def compile_plan_day(name: str, day: int) -> Filter:
    """Validate ``day`` and select the plan tracks it will be read from."""
    if day < 0:
        raise OutOfRangeError(
            "day", day, f"The Bible Plan Day must be positive. Invalid day: {day}"
        )
    return compile_plan_lookup(name)


__all__ = ["compile_plan_day", "compile_plan_lookup"]
