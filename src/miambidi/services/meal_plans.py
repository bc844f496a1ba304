"""Meal planning: the in-memory plan store and its persistence service."""

import logging
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, timedelta
from typing import Protocol
from uuid import UUID

from miambidi.domain.families import Family
from miambidi.domain.meal_plans import MealPlanRow, MealPlanStats, MealSlot, PlannedMeal
from miambidi.domain.models import UserRecord
from miambidi.domain.recipes import Recipe
from miambidi.errors import DenialReason, NotFoundError, PermissionDeniedError
from miambidi.services.permissions import belongs_to, can_view
from miambidi.services.recipes import RecipeRepository

_logger = logging.getLogger(__name__)

DAYS_PER_WEEK = 7

MealKey = tuple[date, MealSlot]


def coerce_day(value: date | str) -> date:
    """Accept a date or an ISO date string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def coerce_slot(value: MealSlot | str) -> MealSlot:
    """Accept a slot or its French label."""
    return value if isinstance(value, MealSlot) else MealSlot(value)


def week_start(day: date, week_starts_on: int = 0) -> date:
    """Return the first day of the week containing ``day`` (0 = Monday)."""
    offset = (day.weekday() - week_starts_on) % DAYS_PER_WEEK
    return day - timedelta(days=offset)


@dataclass
class MealPlanStore:
    """Assignments of recipes to (day, slot) pairs for one family.

    At most one recipe occupies a slot; planning again overwrites it. The week
    cursor only serves calendar navigation and never touches the entries.
    """

    entries: dict[MealKey, PlannedMeal] = field(default_factory=dict)
    week_starts_on: int = 0
    current_week: date = field(default_factory=date.today)

    def __post_init__(self) -> None:
        self.current_week = week_start(self.current_week, self.week_starts_on)

    def plan_meal(
        self,
        day: date | str,
        slot: MealSlot | str,
        recipe: Recipe | None,
        planned_at: datetime | None = None,
    ) -> PlannedMeal:
        """Assign a recipe to a slot, replacing any previous assignment."""
        if recipe is None:
            raise ValueError("A recipe is required to plan a meal")
        meal = PlannedMeal(
            day=coerce_day(day),
            slot=coerce_slot(slot),
            recipe=recipe,
            planned_at=planned_at or datetime.now(tz=UTC),
        )
        self.entries[(meal.day, meal.slot)] = meal
        return meal

    def remove_meal(self, day: date | str, slot: MealSlot | str) -> None:
        """Remove a planned meal; removing an empty slot is a no-op."""
        self.entries.pop((coerce_day(day), coerce_slot(slot)), None)

    def get_meal(self, day: date | str, slot: MealSlot | str) -> PlannedMeal:
        """Return the meal planned for a slot or raise NotFoundError."""
        key = (coerce_day(day), coerce_slot(slot))
        meal = self.entries.get(key)
        if meal is None:
            raise NotFoundError("meal", key)
        return meal

    def get_meals_for_date_range(
        self, start: date | str, end: date | str
    ) -> dict[MealKey, PlannedMeal]:
        """Return the entries whose day lies within [start, end]."""
        first, last = coerce_day(start), coerce_day(end)
        return {
            key: meal
            for key, meal in sorted(self.entries.items(), key=_entry_order)
            if first <= key[0] <= last
        }

    def get_current_week_meals(self) -> dict[MealKey, PlannedMeal]:
        """Return the entries of the week under the cursor."""
        end = self.current_week + timedelta(days=DAYS_PER_WEEK - 1)
        return self.get_meals_for_date_range(self.current_week, end)

    def get_planned_recipes(self) -> list[Recipe]:
        """Return every referenced recipe once, in calendar order."""
        seen: dict[UUID, Recipe] = {}
        for _, meal in sorted(self.entries.items(), key=_entry_order):
            seen.setdefault(meal.recipe.id, meal.recipe)
        return list(seen.values())

    def clear_all(self) -> None:
        """Remove every planned meal."""
        self.entries.clear()

    def has_meals(self) -> bool:
        return bool(self.entries)

    def stats(self) -> MealPlanStats:
        """Return counters over the planned meals."""
        by_slot: dict[MealSlot, int] = {}
        for slot in (key[1] for key in self.entries):
            by_slot[slot] = by_slot.get(slot, 0) + 1
        return MealPlanStats(
            total_meals=len(self.entries),
            unique_recipes=len({meal.recipe.id for meal in self.entries.values()}),
            meals_by_slot=by_slot,
            is_empty=not self.entries,
        )

    def navigate_week(self, direction: int) -> date:
        """Move the week cursor by ``direction`` weeks and return it."""
        self.current_week += timedelta(days=DAYS_PER_WEEK * direction)
        return self.current_week

    def set_week(self, day: date | str) -> date:
        """Move the week cursor to the week containing ``day``."""
        self.current_week = week_start(coerce_day(day), self.week_starts_on)
        return self.current_week


def _entry_order(item: tuple[MealKey, PlannedMeal]) -> tuple[date, int]:
    (day, slot), _ = item
    return day, list(MealSlot).index(slot)


class MealPlanRepository(Protocol):
    """Persistence interface for meal plan entries."""

    def list_entries(self, family_id: UUID, start: date, end: date) -> list[MealPlanRow]:
        """Return entries planned between start and end inclusive."""

    def upsert_entry(self, family_id: UUID, meal: PlannedMeal) -> None:
        """Insert or overwrite the entry of a (day, slot) pair."""

    def delete_entry(self, family_id: UUID, day: date, slot: MealSlot) -> None:
        """Delete the entry of a (day, slot) pair if present."""

    def delete_all(self, family_id: UUID) -> None:
        """Delete every entry of a family."""


@dataclass
class MealPlanService:
    """Loads, mutates and persists a family's meal plan."""

    repository: MealPlanRepository
    recipe_repository: RecipeRepository
    week_starts_on: int = 0

    def load_store(
        self, user: UserRecord, family: Family | None, start: date, end: date
    ) -> MealPlanStore:
        """Materialize the family's plan between start and end."""
        family = _require_family(user, family)
        rows = self.repository.list_entries(family.id, start, end)
        recipes = {
            recipe.id: recipe
            for recipe in self.recipe_repository.get_recipes(
                sorted({row.recipe_id for row in rows}, key=str)
            )
        }
        store = MealPlanStore(week_starts_on=self.week_starts_on, current_week=start)
        for row in rows:
            recipe = recipes.get(row.recipe_id)
            if recipe is None:
                _logger.warning(
                    "Skipping meal with missing recipe: family=%s day=%s recipe=%s",
                    family.id,
                    row.day,
                    row.recipe_id,
                )
                continue
            store.plan_meal(row.day, row.slot, recipe, planned_at=row.planned_at)
        return store

    def plan_meal(
        self,
        user: UserRecord,
        family: Family | None,
        day: date | str,
        slot: MealSlot | str,
        recipe_id: UUID,
    ) -> PlannedMeal:
        """Assign a recipe, dropped on a calendar slot, and persist it."""
        family = _require_family(user, family)
        recipe = self.recipe_repository.get_recipe(recipe_id)
        if recipe is None:
            raise NotFoundError("recipe", recipe_id)
        if not can_view(user, family, recipe):
            raise PermissionDeniedError(DenialReason.RECIPE_NOT_VISIBLE)
        meal = MealPlanStore(week_starts_on=self.week_starts_on).plan_meal(
            day, slot, recipe
        )
        self.repository.upsert_entry(family.id, meal)
        _logger.info(
            "Meal planned: family=%s day=%s slot=%s recipe=%s",
            family.id,
            meal.day,
            meal.slot.value,
            recipe.id,
        )
        return meal

    def remove_meal(
        self,
        user: UserRecord,
        family: Family | None,
        day: date | str,
        slot: MealSlot | str,
    ) -> None:
        """Remove a planned meal; absent entries are ignored."""
        family = _require_family(user, family)
        key_day, key_slot = coerce_day(day), coerce_slot(slot)
        self.repository.delete_entry(family.id, key_day, key_slot)
        _logger.info(
            "Meal removed: family=%s day=%s slot=%s", family.id, key_day, key_slot.value
        )

    def clear_all(self, user: UserRecord, family: Family | None) -> None:
        """Remove every planned meal of the family."""
        family = _require_family(user, family)
        self.repository.delete_all(family.id)
        _logger.info("Meal plan cleared: family=%s", family.id)


def _require_family(user: UserRecord, family: Family | None) -> Family:
    if family is None:
        raise PermissionDeniedError(DenialReason.FAMILY_REQUIRED)
    if not belongs_to(user, family):
        raise PermissionDeniedError(DenialReason.NOT_FAMILY_MEMBER)
    return family
