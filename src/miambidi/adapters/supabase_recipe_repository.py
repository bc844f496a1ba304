"""Supabase implementation for recipes."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from miambidi.domain.recipes import (
    ImportRecord,
    ImportType,
    Ownership,
    PromotionRecord,
    Recipe,
    RecipeIngredient,
    Visibility,
)
from miambidi.services.recipes import RecipeRepository


@dataclass
class SupabaseRecipeRepository(RecipeRepository):
    """Supabase-backed repository for recipes."""

    client: Client

    def get_recipe(self, recipe_id: UUID) -> Recipe | None:
        """Return a recipe by id, if present."""
        response = (
            self.client.table("recipes")
            .select("*")
            .eq("id", str(recipe_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_recipe(response.data[0])

    def get_recipes(self, recipe_ids: list[UUID]) -> list[Recipe]:
        """Return the recipes matching the given ids."""
        if not recipe_ids:
            return []
        response = (
            self.client.table("recipes")
            .select("*")
            .in_("id", [str(recipe_id) for recipe_id in recipe_ids])
            .execute()
        )
        return [_parse_recipe(row) for row in response.data or []]

    def list_recipes(self, user_id: UUID, family_id: UUID | None) -> list[Recipe]:
        """Return public, family, own and shared-edit recipes."""
        filters = [
            "visibility.eq.public",
            f"created_by.eq.{user_id}",
            f"editor_ids.cs.{{{user_id}}}",
        ]
        if family_id is not None:
            filters.append(f"family_id.eq.{family_id}")
        response = (
            self.client.table("recipes").select("*").or_(",".join(filters)).execute()
        )
        return [_parse_recipe(row) for row in response.data or []]

    def save_recipe(self, recipe: Recipe) -> None:
        """Insert or replace a recipe."""
        response = self.client.table("recipes").upsert(_serialize_recipe(recipe)).execute()
        if not response.data:
            raise RuntimeError("Failed to save recipe")

    def delete_recipe(self, recipe_id: UUID) -> None:
        """Delete a recipe."""
        self.client.table("recipes").delete().eq("id", str(recipe_id)).execute()


def _serialize_recipe(recipe: Recipe) -> dict[str, object]:
    return {
        "id": str(recipe.id),
        "name": recipe.name,
        "created_by": str(recipe.created_by),
        "visibility": recipe.visibility.value,
        "is_public": recipe.visibility == Visibility.PUBLIC,
        "family_id": str(recipe.family_id) if recipe.family_id else None,
        "ingredients": [
            {
                "name": line.name,
                "quantity": line.quantity,
                "unit": line.unit,
                "price": line.price,
                "ingredient_id": str(line.ingredient_id) if line.ingredient_id else None,
                "notes": line.notes,
            }
            for line in recipe.ingredients
        ],
        "instructions": list(recipe.instructions),
        "servings": recipe.servings,
        "category": recipe.category,
        "cuisine": recipe.cuisine,
        "description": recipe.description,
        "total_cost": recipe.total_cost,
        "imported_from": _serialize_import(recipe.imported_from),
        "ownership": _serialize_ownership(recipe.ownership),
        "editor_ids": sorted(str(user_id) for user_id in recipe.editors),
    }


def _serialize_import(record: ImportRecord | None) -> dict[str, object] | None:
    if record is None:
        return None
    return {
        "original_recipe_id": str(record.original_recipe_id),
        "original_created_by": str(record.original_created_by),
        "imported_by": str(record.imported_by),
        "import_type": record.import_type.value,
        "imported_at": record.imported_at.isoformat() if record.imported_at else None,
        "original_created_by_name": record.original_created_by_name,
        "imported_by_name": record.imported_by_name,
    }


def _serialize_ownership(ownership: Ownership | None) -> dict[str, object] | None:
    if ownership is None:
        return None
    return {
        "original_creator": str(ownership.original_creator),
        "current_owner": str(ownership.current_owner),
        "can_edit": sorted(str(user_id) for user_id in ownership.can_edit),
        "last_promoted_by": (
            str(ownership.last_promoted_by) if ownership.last_promoted_by else None
        ),
        "promotion_history": [
            {
                "from": promotion.from_visibility.value,
                "to": promotion.to_visibility.value,
                "promoted_by": str(promotion.promoted_by),
                "promoted_at": promotion.promoted_at.isoformat(),
            }
            for promotion in ownership.promotion_history
        ],
    }


def _parse_recipe(row: dict[str, object]) -> Recipe:
    """Parse a recipe row into a domain model."""
    return Recipe(
        id=UUID(row["id"]),
        name=str(row.get("name", "")),
        created_by=UUID(row["created_by"]),
        visibility=Visibility(row.get("visibility") or Visibility.FAMILY.value),
        family_id=_uuid(row.get("family_id")),
        ingredients=tuple(
            RecipeIngredient(
                name=str(line.get("name", "")),
                quantity=float(line.get("quantity") or 0.0),
                unit=str(line.get("unit", "")),
                price=float(line.get("price") or 0.0),
                ingredient_id=_uuid(line.get("ingredient_id")),
                notes=line.get("notes"),
            )
            for line in row.get("ingredients") or []
        ),
        instructions=tuple(str(step) for step in row.get("instructions") or []),
        servings=row.get("servings"),
        category=row.get("category"),
        cuisine=row.get("cuisine"),
        description=row.get("description"),
        imported_from=_parse_import(row.get("imported_from")),
        ownership=_parse_ownership(row.get("ownership")),
    )


def _parse_import(raw: object) -> ImportRecord | None:
    if not isinstance(raw, dict):
        return None
    return ImportRecord(
        original_recipe_id=UUID(raw["original_recipe_id"]),
        original_created_by=UUID(raw["original_created_by"]),
        imported_by=UUID(raw["imported_by"]),
        import_type=ImportType(raw.get("import_type") or ImportType.PRIVATE.value),
        imported_at=_datetime(raw.get("imported_at")),
        original_created_by_name=raw.get("original_created_by_name"),
        imported_by_name=raw.get("imported_by_name"),
    )


def _parse_ownership(raw: object) -> Ownership | None:
    if not isinstance(raw, dict):
        return None
    return Ownership(
        original_creator=UUID(raw["original_creator"]),
        current_owner=UUID(raw["current_owner"]),
        can_edit=frozenset(UUID(value) for value in raw.get("can_edit") or []),
        last_promoted_by=_uuid(raw.get("last_promoted_by")),
        promotion_history=tuple(
            PromotionRecord(
                from_visibility=Visibility(entry["from"]),
                to_visibility=Visibility(entry["to"]),
                promoted_by=UUID(entry["promoted_by"]),
                promoted_at=datetime.fromisoformat(entry["promoted_at"]),
            )
            for entry in raw.get("promotion_history") or []
        ),
    )


def _uuid(raw: object) -> UUID | None:
    return UUID(raw) if isinstance(raw, str) and raw else None


def _datetime(raw: object) -> datetime | None:
    return datetime.fromisoformat(raw) if isinstance(raw, str) and raw else None
