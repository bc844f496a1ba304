"""Supabase implementation for the ingredient catalog."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from miambidi.domain.recipes import Ingredient
from miambidi.services.ingredients import IngredientRepository


@dataclass
class SupabaseIngredientRepository(IngredientRepository):
    """Supabase-backed repository for catalog ingredients."""

    client: Client

    def get_ingredient(self, ingredient_id: UUID) -> Ingredient | None:
        """Return an ingredient by id, if present."""
        response = (
            self.client.table("ingredients")
            .select("*")
            .eq("id", str(ingredient_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_ingredient(response.data[0])

    def list_ingredients(self, family_id: UUID | None) -> list[Ingredient]:
        """Return public ingredients plus the family's own ingredients."""
        query = self.client.table("ingredients").select("*")
        if family_id is None:
            query = query.eq("is_public", True)
        else:
            query = query.or_(f"is_public.eq.true,family_id.eq.{family_id}")
        response = query.order("name").execute()
        return [_parse_ingredient(row) for row in response.data or []]

    def save_ingredient(self, ingredient: Ingredient) -> None:
        """Insert or replace an ingredient."""
        response = (
            self.client.table("ingredients")
            .upsert(
                {
                    "id": str(ingredient.id),
                    "name": ingredient.name,
                    "category": ingredient.category,
                    "unit": ingredient.unit,
                    "price": ingredient.price,
                    "family_id": str(ingredient.family_id) if ingredient.family_id else None,
                    "is_public": ingredient.is_public,
                    "created_by": (
                        str(ingredient.created_by) if ingredient.created_by else None
                    ),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save ingredient")

    def delete_ingredient(self, ingredient_id: UUID) -> None:
        """Delete an ingredient."""
        self.client.table("ingredients").delete().eq("id", str(ingredient_id)).execute()


def _parse_ingredient(row: dict[str, object]) -> Ingredient:
    """Parse an ingredient row into a domain model."""
    family_id = row.get("family_id")
    created_by = row.get("created_by")
    return Ingredient(
        id=UUID(row["id"]),
        name=str(row.get("name", "")),
        category=str(row.get("category") or "Autres"),
        unit=str(row.get("unit", "")),
        price=float(row.get("price") or 0.0),
        family_id=UUID(family_id) if family_id else None,
        is_public=bool(row.get("is_public", True)),
        created_by=UUID(created_by) if created_by else None,
    )
