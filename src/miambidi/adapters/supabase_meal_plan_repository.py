"""Supabase implementation for meal plan entries."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from supabase import Client

from miambidi.domain.meal_plans import MealPlanRow, MealSlot, PlannedMeal
from miambidi.services.meal_plans import MealPlanRepository

_CONFLICT_COLUMNS = "family_id,plan_date,meal_slot"


@dataclass
class SupabaseMealPlanRepository(MealPlanRepository):
    """Supabase-backed repository for meal plans, one row per (day, slot)."""

    client: Client

    def list_entries(self, family_id: UUID, start: date, end: date) -> list[MealPlanRow]:
        """Return entries planned between start and end inclusive."""
        response = (
            self.client.table("meal_plan_entries")
            .select("plan_date, meal_slot, recipe_id, planned_at")
            .eq("family_id", str(family_id))
            .gte("plan_date", start.isoformat())
            .lte("plan_date", end.isoformat())
            .order("plan_date")
            .execute()
        )
        return [
            MealPlanRow(
                day=date.fromisoformat(row["plan_date"]),
                slot=MealSlot(row["meal_slot"]),
                recipe_id=UUID(row["recipe_id"]),
                planned_at=datetime.fromisoformat(row["planned_at"]),
            )
            for row in response.data or []
        ]

    def upsert_entry(self, family_id: UUID, meal: PlannedMeal) -> None:
        """Insert or overwrite the entry of a (day, slot) pair."""
        response = (
            self.client.table("meal_plan_entries")
            .upsert(
                {
                    "family_id": str(family_id),
                    "plan_date": meal.day.isoformat(),
                    "meal_slot": meal.slot.value,
                    "recipe_id": str(meal.recipe.id),
                    "planned_at": meal.planned_at.isoformat(),
                },
                on_conflict=_CONFLICT_COLUMNS,
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save meal plan entry")

    def delete_entry(self, family_id: UUID, day: date, slot: MealSlot) -> None:
        """Delete the entry of a (day, slot) pair if present."""
        self.client.table("meal_plan_entries").delete().eq(
            "family_id", str(family_id)
        ).eq("plan_date", day.isoformat()).eq("meal_slot", slot.value).execute()

    def delete_all(self, family_id: UUID) -> None:
        """Delete every entry of a family."""
        self.client.table("meal_plan_entries").delete().eq(
            "family_id", str(family_id)
        ).execute()
