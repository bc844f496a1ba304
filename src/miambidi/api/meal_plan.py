"""Meal plan endpoints."""

from datetime import date, timedelta

from fastapi import APIRouter, Depends, Request, status

from miambidi.api.dependencies import Actor, get_actor, get_container
from miambidi.api.schemas import MealAssignment, meal_payload
from miambidi.domain.meal_plans import MealSlot
from miambidi.services.meal_plans import DAYS_PER_WEEK, week_start

router = APIRouter(prefix="/meal-plan", tags=["meal-plan"])


def resolve_range(
    request: Request, start: date | None, end: date | None
) -> tuple[date, date]:
    """Default to the current week when no range is given."""
    if start is None:
        week_starts_on = get_container(request).settings.week_starts_on
        start = week_start(date.today(), week_starts_on)
    if end is None:
        end = start + timedelta(days=DAYS_PER_WEEK - 1)
    if end < start:
        raise ValueError("end must not be before start")
    return start, end


@router.get("")
async def get_meal_plan(
    request: Request,
    start: date | None = None,
    end: date | None = None,
    actor: Actor = Depends(get_actor),
) -> dict[str, object]:
    """Return the meals planned in a date range with summary counters."""
    start, end = resolve_range(request, start, end)
    store = get_container(request).meal_plan_service.load_store(
        actor.user, actor.family, start, end
    )
    stats = store.stats()
    meals = store.get_meals_for_date_range(start, end).values()
    return {
        "start": start.isoformat(),
        "end": end.isoformat(),
        "meals": [meal_payload(meal) for meal in meals],
        "stats": {
            "total_meals": stats.total_meals,
            "unique_recipes": stats.unique_recipes,
            "meals_by_slot": {
                slot.value: count for slot, count in stats.meals_by_slot.items()
            },
            "is_empty": stats.is_empty,
        },
    }


@router.put("/meals")
async def plan_meal(
    payload: MealAssignment, request: Request, actor: Actor = Depends(get_actor)
) -> dict[str, object]:
    """Assign a recipe to a slot, replacing any previous assignment."""
    meal = get_container(request).meal_plan_service.plan_meal(
        actor.user, actor.family, payload.day, payload.slot, payload.recipe_id
    )
    return meal_payload(meal)


@router.delete("/meals", status_code=status.HTTP_204_NO_CONTENT)
async def remove_meal(
    day: date, slot: MealSlot, request: Request, actor: Actor = Depends(get_actor)
) -> None:
    get_container(request).meal_plan_service.remove_meal(
        actor.user, actor.family, day, slot
    )


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def clear_meal_plan(request: Request, actor: Actor = Depends(get_actor)) -> None:
    get_container(request).meal_plan_service.clear_all(actor.user, actor.family)
