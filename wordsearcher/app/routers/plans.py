"""
Bible reading plan router.

Example Usage:
    ```bash
    curl http://localhost:8000/v1/plans/McCheyneBasedYearly
    curl http://localhost:8000/v1/plans/McCheyneBasedYearly/days/0
    ```
"""

from fastapi import APIRouter, Depends, HTTPException

from ..dependencies.store import get_store
from ..errors import NotFoundError, OutOfRangeError
from ..models import BiblePlanDay, BiblePlanResponse
from ..repositories.store import VerseStore
from ..services.plans import PlanService

router = APIRouter(prefix="/plans", tags=["plans"])


def get_plan_service(store: VerseStore = Depends(get_store)) -> PlanService:
    return PlanService(store)


@router.get("/{name}", response_model=BiblePlanResponse)
async def get_plan(
    name: str,
    service: PlanService = Depends(get_plan_service),
) -> BiblePlanResponse:
    """Return every reading track of the named plan."""
    plans = await service.get_plan(name)
    return BiblePlanResponse(bible_plan=plans)


@router.get("/{name}/days/{day}", response_model=BiblePlanDay)
async def get_plan_day(
    name: str,
    day: int,
    service: PlanService = Depends(get_plan_service),
) -> BiblePlanDay:
    """
    Return one day's readings from each track of the plan.

    ``day`` is zero based.

    Raises:
        HTTPException: 400 for a negative or too large day, 404 for an unknown plan
    """
    try:
        return await service.get_plan_day(name, day)
    except OutOfRangeError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
