"""Shopping list generation from planned meals."""

import logging
import unicodedata
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date
from uuid import UUID

from miambidi.domain.families import Family
from miambidi.domain.meal_plans import PlannedMeal
from miambidi.domain.models import UserRecord
from miambidi.domain.recipes import Ingredient, Recipe
from miambidi.domain.shopping import ShoppingList, ShoppingListItem, ShoppingListSection
from miambidi.services.ingredients import IngredientService
from miambidi.services.meal_plans import MealPlanService

_logger = logging.getLogger(__name__)

OTHER_CATEGORY = "Autres"
DEFAULT_TITLE = "Liste de courses"

CATEGORY_ORDER: tuple[str, ...] = (
    "Légumes-feuilles & Aromates",
    "Tubercules & Plantains",
    "Fruits",
    "Viandes & Poissons",
    "Céréales & Légumineuses",
    "Produits laitiers",
    "Boissons",
    "Huiles & Condiments",
    "Épices & Piments",
    OTHER_CATEGORY,
)


def normalize_ingredient_name(name: str) -> str:
    """Lowercase, strip accents and collapse whitespace."""
    decomposed = unicodedata.normalize("NFKD", name)
    stripped = "".join(char for char in decomposed if not unicodedata.combining(char))
    return " ".join(stripped.casefold().split())


def normalize_unit(unit: str) -> str:
    return " ".join(unit.casefold().split())


@dataclass
class _Line:
    names: set[str] = field(default_factory=set)
    units: set[str] = field(default_factory=set)
    quantity: float = 0.0
    cost: float = 0.0
    recipes: dict[UUID, str] = field(default_factory=dict)


def build_shopping_list(
    meals: Iterable[PlannedMeal],
    catalog: Iterable[Ingredient] = (),
    *,
    family_size: int | None = None,
    start: date | None = None,
    end: date | None = None,
    title: str | None = None,
) -> ShoppingList:
    """Aggregate the ingredients of planned meals into a categorized list.

    A recipe planned in several slots counts once per slot. Lines merge on the
    normalized ingredient name and unit; the same ingredient in two different
    units stays as two items since no unit conversion is attempted. Totals do not
    depend on the order in which meals are given.
    """
    planned = list(meals)
    multiplicity = Counter(meal.recipe.id for meal in planned)
    recipes = {meal.recipe.id: meal.recipe for meal in planned}

    lines: dict[tuple[str, str], _Line] = {}
    for recipe_id in sorted(recipes, key=str):
        recipe = recipes[recipe_id]
        factor = multiplicity[recipe_id] * _serving_ratio(recipe, family_size)
        for ingredient in recipe.ingredients:
            key = (
                normalize_ingredient_name(ingredient.name),
                normalize_unit(ingredient.unit),
            )
            line = lines.setdefault(key, _Line())
            quantity = ingredient.quantity * factor
            line.names.add(ingredient.name.strip())
            line.units.add(ingredient.unit.strip())
            line.quantity += quantity
            line.cost += quantity * ingredient.price
            line.recipes[recipe.id] = recipe.name

    categories = _catalog_categories(catalog)
    grouped: dict[str, list[ShoppingListItem]] = {}
    for (name_key, unit_key), line in sorted(lines.items()):
        category = categories.get(name_key, OTHER_CATEGORY)
        recipe_ids = sorted(line.recipes, key=str)
        grouped.setdefault(category, []).append(
            ShoppingListItem(
                name=min(line.names),
                category=category,
                quantity=line.quantity,
                unit=min(line.units),
                recipe_ids=tuple(recipe_ids),
                recipe_names=tuple(sorted(set(line.recipes.values()))),
                estimated_cost=line.cost,
            )
        )

    sections = tuple(
        ShoppingListSection(category=category, items=tuple(grouped[category]))
        for category in _ordered_categories(grouped)
    )
    _logger.info(
        "Shopping list built: meals=%s recipes=%s items=%s",
        len(planned),
        len(recipes),
        len(lines),
    )
    return ShoppingList(
        title=title or _default_title(start),
        start=start,
        end=end,
        sections=sections,
        total_items=len(lines),
        total_recipes=len(recipes),
        total_meals=len(planned),
        estimated_cost=sum(line.cost for line in lines.values()),
    )


def _serving_ratio(recipe: Recipe, family_size: int | None) -> float:
    if not family_size or not recipe.servings or recipe.servings <= 0:
        return 1.0
    return family_size / recipe.servings


def _catalog_categories(catalog: Iterable[Ingredient]) -> dict[str, str]:
    categories: dict[str, str] = {}
    entries = sorted(
        (normalize_ingredient_name(item.name), item.category or OTHER_CATEGORY)
        for item in catalog
    )
    for name_key, category in entries:
        categories.setdefault(name_key, category)
    return categories


def _ordered_categories(grouped: dict[str, list[ShoppingListItem]]) -> list[str]:
    known = [category for category in CATEGORY_ORDER if category in grouped]
    unknown = sorted(category for category in grouped if category not in CATEGORY_ORDER)
    return known + unknown


def _default_title(start: date | None) -> str:
    if start is None:
        return DEFAULT_TITLE
    return f"{DEFAULT_TITLE} - Semaine du {start:%d/%m/%Y}"


def export_shopping_list(
    shopping_list: ShoppingList, generated_on: date | None = None
) -> str:
    """Render the list as plain text, one section per category."""
    generated_on = generated_on or date.today()
    lines = [shopping_list.title, f"Généré le {generated_on:%d/%m/%Y}", ""]
    if shopping_list.is_empty:
        lines.append("Aucun article")
    for section in shopping_list.sections:
        lines.append(section.category.upper())
        for item in section.items:
            parts = [_format_quantity(item.quantity), item.unit, item.name]
            lines.append("- " + " ".join(part for part in parts if part))
        lines.append("")
    return "\n".join(lines).rstrip("\n") + "\n"


def _format_quantity(quantity: float) -> str:
    return f"{quantity:g}"


@dataclass
class ShoppingListService:
    """Builds a family's shopping list for a date range."""

    meal_plan_service: MealPlanService
    ingredient_service: IngredientService
    default_family_size: int | None = None

    def generate(
        self,
        user: UserRecord,
        family: Family | None,
        start: date,
        end: date,
        family_size: int | None = None,
    ) -> ShoppingList:
        """Return the shopping list for meals planned between start and end."""
        store = self.meal_plan_service.load_store(user, family, start, end)
        meals = store.get_meals_for_date_range(start, end).values()
        catalog = self.ingredient_service.list_visible(user, family)
        return build_shopping_list(
            meals,
            catalog,
            family_size=family_size or self.default_family_size,
            start=start,
            end=end,
        )
