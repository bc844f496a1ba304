"""Ingredient catalog service."""

import logging
from dataclasses import dataclass, replace
from typing import Protocol
from uuid import UUID, uuid4

from miambidi.domain.families import Family
from miambidi.domain.models import UserRecord
from miambidi.domain.recipes import Ingredient
from miambidi.errors import DenialReason, NotFoundError, PermissionDeniedError
from miambidi.services.permissions import (
    can_edit,
    can_manage,
    can_view,
    edit_denial_reason,
)

_logger = logging.getLogger(__name__)

EDITABLE_FIELDS = frozenset({"name", "category", "unit", "price", "is_public"})


class IngredientRepository(Protocol):
    """Persistence interface for catalog ingredients."""

    def get_ingredient(self, ingredient_id: UUID) -> Ingredient | None:
        """Return an ingredient by id, if present."""

    def list_ingredients(self, family_id: UUID | None) -> list[Ingredient]:
        """Return public ingredients plus the family's own ingredients."""

    def save_ingredient(self, ingredient: Ingredient) -> None:
        """Insert or replace an ingredient."""

    def delete_ingredient(self, ingredient_id: UUID) -> None:
        """Delete an ingredient."""


@dataclass
class IngredientService:
    """Application service for the ingredient catalog."""

    repository: IngredientRepository

    def list_visible(self, user: UserRecord, family: Family | None) -> list[Ingredient]:
        """Return the ingredients the user may read, sorted by name."""
        candidates = self.repository.list_ingredients(family.id if family else None)
        visible = [item for item in candidates if can_view(user, family, item)]
        return sorted(visible, key=lambda item: item.name.casefold())

    def add_ingredient(  # noqa: PLR0913
        self,
        user: UserRecord,
        family: Family | None,
        name: str,
        category: str,
        unit: str,
        price: float,
        is_public: bool = True,
    ) -> Ingredient:
        """Register an ingredient owned by the user's family."""
        if family is None:
            raise PermissionDeniedError(DenialReason.FAMILY_REQUIRED)
        ingredient = Ingredient(
            id=uuid4(),
            name=name.strip(),
            category=category,
            unit=unit,
            price=price,
            family_id=family.id,
            is_public=is_public,
            created_by=user.id,
        )
        self.repository.save_ingredient(ingredient)
        _logger.info("Ingredient created: id=%s family=%s", ingredient.id, family.id)
        return ingredient

    def update_ingredient(
        self,
        user: UserRecord,
        family: Family | None,
        ingredient_id: UUID,
        changes: dict[str, object],
    ) -> Ingredient:
        """Apply field changes when the user may edit the ingredient."""
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Unsupported ingredient fields: {sorted(unknown)}")
        ingredient = self.get_ingredient(ingredient_id)
        if not can_edit(user, family, ingredient):
            raise PermissionDeniedError(edit_denial_reason(ingredient))
        updated = replace(ingredient, **_checked_ingredient_changes(changes))
        self.repository.save_ingredient(updated)
        return updated

    def delete_ingredient(
        self, user: UserRecord, family: Family | None, ingredient_id: UUID
    ) -> None:
        """Delete an ingredient when the user is its creator or a family admin."""
        ingredient = self.get_ingredient(ingredient_id)
        if not can_manage(user, family, ingredient):
            raise PermissionDeniedError(DenialReason.DELETE_INGREDIENT)
        self.repository.delete_ingredient(ingredient.id)
        _logger.info("Ingredient deleted: id=%s", ingredient.id)

    def get_ingredient(self, ingredient_id: UUID) -> Ingredient:
        """Return an ingredient or raise NotFoundError."""
        ingredient = self.repository.get_ingredient(ingredient_id)
        if ingredient is None:
            raise NotFoundError("ingredient", ingredient_id)
        return ingredient


def _checked_ingredient_changes(changes: dict[str, object]) -> dict[str, object]:
    values = dict(changes)
    for key in ("name", "category"):
        if key in values:
            text = values[key]
            if not isinstance(text, str) or not text.strip():
                raise ValueError(f"Ingredient {key} must be a non-empty string")
            values[key] = text.strip()
    if "unit" in values and not isinstance(values["unit"], str):
        raise ValueError("Ingredient unit must be a string")
    if "price" in values:
        price = values["price"]
        if isinstance(price, bool) or not isinstance(price, int | float) or price < 0:
            raise ValueError("Ingredient price must be a non-negative number")
    if "is_public" in values and not isinstance(values["is_public"], bool):
        raise ValueError("Ingredient is_public must be a boolean")
    return values
