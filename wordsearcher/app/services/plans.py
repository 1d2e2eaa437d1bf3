"""Reading plan retrieval."""

from __future__ import annotations

from ..errors import NotFoundError, OutOfRangeError
from ..models import BiblePlan, BiblePlanDay
from ..query.plans import compile_plan_day, compile_plan_lookup
from ..repositories.store import VerseStore
from .verses import compile_counted, project

PLAN_TABLE = "readingplan"


class PlanService:
    """Looks up Bible reading plans and their daily readings."""

    def __init__(self, store: VerseStore) -> None:
        self._store = store

    async def get_plan(self, name: str) -> list[BiblePlan]:
        """Return every track of the plan; unknown names give an empty list."""
        predicate = compile_counted("plan", compile_plan_lookup, name)
        rows = await self._store.find(PLAN_TABLE, predicate)
        return project(rows, BiblePlan)

    async def get_plan_day(self, name: str, day: int) -> BiblePlanDay:
        """Return the ``day``-th reading (zero based) of each track, in track order.

        Raises:
            OutOfRangeError: If ``day`` is negative or past the end of every track
            NotFoundError: If no plan has this name
        """
        predicate = compile_counted("plan_day", compile_plan_day, name, day)
        plans = project(await self._store.find(PLAN_TABLE, predicate), BiblePlan)
        if not plans:
            raise NotFoundError(f"Could not find the bible plan named {name}")

        readings = [plan.days[day] for plan in plans if day < len(plan.days)]
        if not readings:
            longest = max(len(plan.days) for plan in plans)
            raise OutOfRangeError(
                "day", day, f"The Bible Plan {name} has {longest} days. Invalid: {day}"
            )
        return BiblePlanDay(name=name, day=day, readings=readings)
