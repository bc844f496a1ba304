"""Recipe endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from miambidi.api.dependencies import Actor, get_actor, get_container
from miambidi.api.schemas import (
    RecipeCreate,
    RecipeImport,
    RecipeUpdate,
    VisibilityChange,
    recipe_payload,
)
from miambidi.domain.recipes import RecipeDraft

router = APIRouter(prefix="/recipes", tags=["recipes"])


@router.get("")
async def list_recipes(
    request: Request, actor: Actor = Depends(get_actor)
) -> dict[str, object]:
    """Return the recipes visible to the caller."""
    recipes = get_container(request).recipe_service.list_visible(actor.user, actor.family)
    return {"recipes": [recipe_payload(recipe) for recipe in recipes]}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_recipe(
    payload: RecipeCreate, request: Request, actor: Actor = Depends(get_actor)
) -> dict[str, object]:
    draft = RecipeDraft(
        name=payload.name,
        ingredients=tuple(line.to_domain() for line in payload.ingredients),
        instructions=tuple(payload.instructions),
        visibility=payload.visibility,
        servings=payload.servings,
        category=payload.category,
        cuisine=payload.cuisine,
        description=payload.description,
    )
    recipe = get_container(request).recipe_service.add_recipe(
        actor.user, actor.family, draft
    )
    return recipe_payload(recipe)


@router.get("/{recipe_id}")
async def get_recipe(
    recipe_id: UUID, request: Request, actor: Actor = Depends(get_actor)
) -> dict[str, object]:
    recipe = get_container(request).recipe_service.view_recipe(
        actor.user, actor.family, recipe_id
    )
    return recipe_payload(recipe)


@router.patch("/{recipe_id}")
async def update_recipe(
    recipe_id: UUID,
    payload: RecipeUpdate,
    request: Request,
    actor: Actor = Depends(get_actor),
) -> dict[str, object]:
    """Apply a partial update to a recipe."""
    changes = payload.changes()
    if "ingredients" in changes:
        changes["ingredients"] = [line.to_domain() for line in payload.ingredients]
    recipe = get_container(request).recipe_service.update_recipe(
        actor.user, actor.family, recipe_id, changes
    )
    return recipe_payload(recipe)


@router.put("/{recipe_id}/visibility")
async def change_visibility(
    recipe_id: UUID,
    payload: VisibilityChange,
    request: Request,
    actor: Actor = Depends(get_actor),
) -> dict[str, object]:
    recipe = get_container(request).recipe_service.change_visibility(
        actor.user, actor.family, recipe_id, payload.visibility
    )
    return recipe_payload(recipe)


@router.post("/{recipe_id}/import", status_code=status.HTTP_201_CREATED)
async def import_recipe(
    recipe_id: UUID,
    payload: RecipeImport,
    request: Request,
    actor: Actor = Depends(get_actor),
) -> dict[str, object]:
    """Copy a visible recipe into the caller's family or private recipes."""
    recipe = get_container(request).recipe_service.import_recipe(
        actor.user, actor.family, recipe_id, payload.import_type
    )
    return recipe_payload(recipe)


@router.delete("/{recipe_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_recipe(
    recipe_id: UUID, request: Request, actor: Actor = Depends(get_actor)
) -> None:
    get_container(request).recipe_service.delete_recipe(
        actor.user, actor.family, recipe_id
    )
