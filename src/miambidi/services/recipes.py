"""Recipe management: creation, edits, visibility changes and imports."""

import logging
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID, uuid4

from miambidi.domain.families import Family
from miambidi.domain.models import UserRecord
from miambidi.domain.recipes import (
    ImportRecord,
    ImportType,
    Ownership,
    PromotionRecord,
    Recipe,
    RecipeDraft,
    Visibility,
)
from miambidi.errors import DenialReason, NotFoundError, PermissionDeniedError
from miambidi.services.permissions import (
    can_edit,
    can_manage,
    can_view,
    edit_denial_reason,
)

_logger = logging.getLogger(__name__)

EDITABLE_FIELDS = frozenset(
    {
        "name",
        "description",
        "ingredients",
        "instructions",
        "servings",
        "category",
        "cuisine",
    }
)

_PROMOTIONS = {
    (Visibility.PRIVATE, Visibility.FAMILY),
    (Visibility.PRIVATE, Visibility.PUBLIC),
    (Visibility.FAMILY, Visibility.PUBLIC),
}


class RecipeRepository(Protocol):
    """Persistence interface for recipes."""

    def get_recipe(self, recipe_id: UUID) -> Recipe | None:
        """Return a recipe by id, if present."""

    def get_recipes(self, recipe_ids: list[UUID]) -> list[Recipe]:
        """Return the recipes matching the given ids."""

    def list_recipes(self, user_id: UUID, family_id: UUID | None) -> list[Recipe]:
        """Return recipes that may be visible to the user."""

    def save_recipe(self, recipe: Recipe) -> None:
        """Insert or replace a recipe."""

    def delete_recipe(self, recipe_id: UUID) -> None:
        """Delete a recipe."""


@dataclass
class RecipeService:
    """Application service for recipe operations."""

    repository: RecipeRepository

    def get_recipe(self, recipe_id: UUID) -> Recipe:
        """Return a recipe or raise NotFoundError."""
        recipe = self.repository.get_recipe(recipe_id)
        if recipe is None:
            raise NotFoundError("recipe", recipe_id)
        return recipe

    def view_recipe(
        self, user: UserRecord, family: Family | None, recipe_id: UUID
    ) -> Recipe:
        """Return a recipe the user may read."""
        recipe = self.get_recipe(recipe_id)
        if not can_view(user, family, recipe):
            raise PermissionDeniedError(DenialReason.RECIPE_NOT_VISIBLE)
        return recipe

    def list_visible(self, user: UserRecord, family: Family | None) -> list[Recipe]:
        """Return the recipes the user may read, sorted by name."""
        family_id = family.id if family else None
        candidates = self.repository.list_recipes(user.id, family_id)
        visible = [r for r in candidates if can_view(user, family, r)]
        return sorted(visible, key=lambda recipe: recipe.name.casefold())

    def add_recipe(
        self, user: UserRecord, family: Family | None, draft: RecipeDraft
    ) -> Recipe:
        """Create a recipe owned by the user."""
        if draft.visibility == Visibility.FAMILY and family is None:
            raise PermissionDeniedError(DenialReason.FAMILY_REQUIRED)
        recipe = Recipe(
            id=uuid4(),
            name=draft.name.strip(),
            created_by=user.id,
            visibility=draft.visibility,
            family_id=None if draft.visibility == Visibility.PUBLIC else _id(family),
            ingredients=tuple(draft.ingredients),
            instructions=tuple(draft.instructions),
            servings=draft.servings,
            category=draft.category,
            cuisine=draft.cuisine,
            description=draft.description,
        )
        self.repository.save_recipe(recipe)
        _logger.info(
            "Recipe created: id=%s visibility=%s", recipe.id, recipe.visibility.value
        )
        return recipe

    def update_recipe(
        self,
        user: UserRecord,
        family: Family | None,
        recipe_id: UUID,
        changes: dict[str, object],
    ) -> Recipe:
        """Apply field changes when the user may edit the recipe."""
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Unsupported recipe fields: {sorted(unknown)}")
        recipe = self.get_recipe(recipe_id)
        if not can_edit(user, family, recipe):
            raise PermissionDeniedError(edit_denial_reason(recipe))
        values = _checked_recipe_changes(changes)
        updated = replace(recipe, **values)
        self.repository.save_recipe(updated)
        return updated

    def change_visibility(
        self,
        user: UserRecord,
        family: Family | None,
        recipe_id: UUID,
        visibility: Visibility,
    ) -> Recipe:
        """Move a recipe to another visibility tier."""
        if visibility == Visibility.FAMILY and family is None:
            raise PermissionDeniedError(DenialReason.FAMILY_REQUIRED)
        recipe = self.get_recipe(recipe_id)
        if not can_manage(user, family, recipe):
            raise PermissionDeniedError(DenialReason.MANAGE_RECIPE)

        family_id = _id(family) or recipe.family_id
        ownership = recipe.ownership
        if (recipe.visibility, visibility) in _PROMOTIONS:
            ownership = _record_promotion(recipe, user.id, visibility)
        updated = replace(
            recipe,
            visibility=visibility,
            family_id=None if visibility == Visibility.PUBLIC else family_id,
            ownership=ownership,
        )
        self.repository.save_recipe(updated)
        _logger.info(
            "Recipe visibility changed: id=%s %s->%s",
            recipe.id,
            recipe.visibility.value,
            visibility.value,
        )
        return updated

    def import_recipe(
        self,
        user: UserRecord,
        family: Family | None,
        recipe_id: UUID,
        import_type: ImportType,
        importer_name: str | None = None,
    ) -> Recipe:
        """Copy a visible recipe into the user's family or private recipes."""
        if import_type == ImportType.FAMILY and family is None:
            raise PermissionDeniedError(DenialReason.FAMILY_REQUIRED)
        original = self.get_recipe(recipe_id)
        if not can_view(user, family, original):
            raise PermissionDeniedError(DenialReason.RECIPE_NOT_VISIBLE)

        display_name = importer_name or user.display_name or user.email or "Utilisateur"
        name = original.name
        if import_type == ImportType.FAMILY:
            if original.family_id != family.id:
                name = f"{original.name} (par {family.name or 'Famille'})"
        else:
            name = f"{original.name} (importé par {display_name})"

        now = datetime.now(tz=UTC)
        imported = replace(
            original,
            id=uuid4(),
            name=name,
            created_by=user.id,
            family_id=_id(family),
            visibility=(
                Visibility.FAMILY
                if import_type == ImportType.FAMILY
                else Visibility.PRIVATE
            ),
            imported_from=ImportRecord(
                original_recipe_id=original.id,
                original_created_by=original.created_by,
                imported_by=user.id,
                import_type=import_type,
                imported_at=now,
                imported_by_name=display_name,
            ),
            ownership=Ownership(
                original_creator=original.created_by,
                current_owner=user.id,
                can_edit=frozenset({original.created_by, user.id}),
            ),
        )
        self.repository.save_recipe(imported)
        _logger.info(
            "Recipe imported: source=%s copy=%s type=%s",
            original.id,
            imported.id,
            import_type.value,
        )
        return imported

    def delete_recipe(
        self, user: UserRecord, family: Family | None, recipe_id: UUID
    ) -> None:
        """Delete a recipe when the user is its creator or a family admin."""
        recipe = self.get_recipe(recipe_id)
        if not can_manage(user, family, recipe):
            raise PermissionDeniedError(DenialReason.MANAGE_RECIPE)
        self.repository.delete_recipe(recipe.id)
        _logger.info("Recipe deleted: id=%s", recipe.id)


def _record_promotion(
    recipe: Recipe, promoted_by: UUID, visibility: Visibility
) -> Ownership:
    current = recipe.ownership or Ownership(
        original_creator=recipe.created_by,
        current_owner=recipe.created_by,
        can_edit=frozenset({recipe.created_by}),
    )
    can_edit_ids = current.can_edit
    if visibility == Visibility.PUBLIC:
        can_edit_ids = can_edit_ids | {promoted_by}
    promotion = PromotionRecord(
        from_visibility=recipe.visibility,
        to_visibility=visibility,
        promoted_by=promoted_by,
        promoted_at=datetime.now(tz=UTC),
    )
    return replace(
        current,
        can_edit=can_edit_ids,
        last_promoted_by=promoted_by,
        promotion_history=(*current.promotion_history, promotion),
    )


def _checked_recipe_changes(changes: dict[str, object]) -> dict[str, object]:
    values = dict(changes)
    if "name" in values:
        name = values["name"]
        if not isinstance(name, str) or not name.strip():
            raise ValueError("Recipe name must be a non-empty string")
        values["name"] = name.strip()
    for key in ("ingredients", "instructions"):
        if key in values:
            if values[key] is None or isinstance(values[key], str):
                raise ValueError(f"Recipe {key} must be a list")
            values[key] = tuple(values[key])
    servings = values.get("servings")
    if servings is not None and (
        isinstance(servings, bool) or not isinstance(servings, int) or servings <= 0
    ):
        raise ValueError("Recipe servings must be a positive integer")
    return values


def _id(family: Family | None) -> UUID | None:
    return family.id if family else None
