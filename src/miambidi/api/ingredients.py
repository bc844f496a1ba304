"""Ingredient catalog endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from miambidi.api.dependencies import Actor, get_actor, get_container
from miambidi.api.schemas import IngredientCreate, IngredientUpdate, ingredient_payload

router = APIRouter(prefix="/ingredients", tags=["ingredients"])


@router.get("")
async def list_ingredients(
    request: Request, actor: Actor = Depends(get_actor)
) -> dict[str, object]:
    ingredients = get_container(request).ingredient_service.list_visible(
        actor.user, actor.family
    )
    return {"ingredients": [ingredient_payload(item) for item in ingredients]}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_ingredient(
    payload: IngredientCreate, request: Request, actor: Actor = Depends(get_actor)
) -> dict[str, object]:
    ingredient = get_container(request).ingredient_service.add_ingredient(
        actor.user,
        actor.family,
        name=payload.name,
        category=payload.category,
        unit=payload.unit,
        price=payload.price,
        is_public=payload.is_public,
    )
    return ingredient_payload(ingredient)


@router.patch("/{ingredient_id}")
async def update_ingredient(
    ingredient_id: UUID,
    payload: IngredientUpdate,
    request: Request,
    actor: Actor = Depends(get_actor),
) -> dict[str, object]:
    ingredient = get_container(request).ingredient_service.update_ingredient(
        actor.user, actor.family, ingredient_id, payload.changes()
    )
    return ingredient_payload(ingredient)


@router.delete("/{ingredient_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_ingredient(
    ingredient_id: UUID, request: Request, actor: Actor = Depends(get_actor)
) -> None:
    get_container(request).ingredient_service.delete_ingredient(
        actor.user, actor.family, ingredient_id
    )
