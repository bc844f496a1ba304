"""Domain models for meal planning."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from uuid import UUID

from miambidi.domain.recipes import Recipe


class MealSlot(str, Enum):
    """Time-of-day bucket within a calendar day."""

    BREAKFAST = "Petit-déjeuner"
    LUNCH = "Déjeuner"
    DINNER = "Dîner"
    SNACK = "Collation"


@dataclass(frozen=True)
class PlannedMeal:
    """A recipe assigned to a (day, slot) pair."""

    day: date
    slot: MealSlot
    recipe: Recipe
    planned_at: datetime


@dataclass(frozen=True)
class MealPlanStats:
    """Counters over the planned meals."""

    total_meals: int
    unique_recipes: int
    meals_by_slot: dict[MealSlot, int]
    is_empty: bool


@dataclass(frozen=True)
class MealPlanRow:
    """Persisted meal plan entry referencing a recipe by id."""

    day: date
    slot: MealSlot
    recipe_id: UUID
    planned_at: datetime
