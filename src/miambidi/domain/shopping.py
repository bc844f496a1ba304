"""Domain models for generated shopping lists."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID


@dataclass(frozen=True)
class ShoppingListItem:
    """Aggregated quantity of one ingredient in one unit."""

    name: str
    category: str
    quantity: float
    unit: str
    recipe_ids: tuple[UUID, ...] = ()
    recipe_names: tuple[str, ...] = ()
    estimated_cost: float = 0.0


@dataclass(frozen=True)
class ShoppingListSection:
    """Items sharing a grocery category."""

    category: str
    items: tuple[ShoppingListItem, ...]


@dataclass(frozen=True)
class ShoppingList:
    """Shopping list derived from a meal plan slice."""

    title: str
    start: date | None
    end: date | None
    sections: tuple[ShoppingListSection, ...]
    total_items: int
    total_recipes: int
    total_meals: int
    estimated_cost: float

    @property
    def items(self) -> list[ShoppingListItem]:
        return [item for section in self.sections for item in section.items]

    @property
    def is_empty(self) -> bool:
        return not self.sections
