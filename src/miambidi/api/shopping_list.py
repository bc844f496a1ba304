"""Shopping list endpoints."""

from datetime import date

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import PlainTextResponse

from miambidi.api.dependencies import Actor, get_actor, get_container
from miambidi.api.meal_plan import resolve_range
from miambidi.api.schemas import shopping_list_payload
from miambidi.domain.shopping import ShoppingList
from miambidi.services.shopping import export_shopping_list

router = APIRouter(prefix="/shopping-list", tags=["shopping-list"])


def _generate(
    request: Request,
    actor: Actor,
    start: date | None,
    end: date | None,
    family_size: int | None,
) -> ShoppingList:
    start, end = resolve_range(request, start, end)
    return get_container(request).shopping_list_service.generate(
        actor.user, actor.family, start, end, family_size=family_size
    )


@router.get("")
async def get_shopping_list(
    request: Request,
    start: date | None = None,
    end: date | None = None,
    family_size: int | None = Query(default=None, gt=0),
    actor: Actor = Depends(get_actor),
) -> dict[str, object]:
    """Aggregate the ingredients of the meals planned in a date range."""
    shopping_list = _generate(request, actor, start, end, family_size)
    return shopping_list_payload(shopping_list)


@router.get("/export", response_class=PlainTextResponse)
async def export_shopping_list_text(
    request: Request,
    start: date | None = None,
    end: date | None = None,
    family_size: int | None = Query(default=None, gt=0),
    actor: Actor = Depends(get_actor),
) -> str:
    """Return the shopping list as plain text."""
    shopping_list = _generate(request, actor, start, end, family_size)
    return export_shopping_list(shopping_list)
