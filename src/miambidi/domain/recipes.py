"""Domain models for recipes and catalog ingredients."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import UUID


class Visibility(str, Enum):
    """Default read access tier of a recipe or ingredient."""

    PRIVATE = "private"
    FAMILY = "family"
    PUBLIC = "public"


class ImportType(str, Enum):
    """Destination of an imported recipe copy."""

    FAMILY = "family"
    PRIVATE = "private"


@dataclass(frozen=True)
class RecipeIngredient:
    """Ingredient line inside a recipe, denormalized at time of use."""

    name: str
    quantity: float
    unit: str
    price: float = 0.0
    ingredient_id: UUID | None = None
    notes: str | None = None

    @property
    def total_cost(self) -> float:
        return self.quantity * self.price


@dataclass(frozen=True)
class ImportRecord:
    """Attribution kept when a recipe is copied from another source."""

    original_recipe_id: UUID
    original_created_by: UUID
    imported_by: UUID
    import_type: ImportType
    imported_at: datetime | None = None
    original_created_by_name: str | None = None
    imported_by_name: str | None = None


@dataclass(frozen=True)
class PromotionRecord:
    """A visibility promotion such as private to public."""

    from_visibility: Visibility
    to_visibility: Visibility
    promoted_by: UUID
    promoted_at: datetime


@dataclass(frozen=True)
class Ownership:
    """Explicit edit allow-list, independent of family roles."""

    original_creator: UUID
    current_owner: UUID
    can_edit: frozenset[UUID] = field(default_factory=frozenset)
    promotion_history: tuple[PromotionRecord, ...] = ()
    last_promoted_by: UUID | None = None


@dataclass(frozen=True)
class Recipe:
    """A recipe with its visibility scope."""

    id: UUID
    name: str
    created_by: UUID
    visibility: Visibility = Visibility.FAMILY
    family_id: UUID | None = None
    ingredients: tuple[RecipeIngredient, ...] = ()
    instructions: tuple[str, ...] = ()
    servings: int | None = None
    category: str | None = None
    cuisine: str | None = None
    description: str | None = None
    imported_from: ImportRecord | None = None
    ownership: Ownership | None = None

    @property
    def editors(self) -> frozenset[UUID]:
        """User ids allowed to edit regardless of family role."""
        ids = {self.created_by}
        if self.ownership is not None:
            ids.update(self.ownership.can_edit)
        if self.imported_from is not None:
            ids.add(self.imported_from.original_created_by)
            ids.add(self.imported_from.imported_by)
        return frozenset(ids)

    @property
    def total_cost(self) -> float:
        return sum(line.total_cost for line in self.ingredients)


@dataclass(frozen=True)
class Ingredient:
    """Catalog ingredient owned by a family, optionally shared publicly."""

    id: UUID
    name: str
    category: str
    unit: str
    price: float
    family_id: UUID | None
    is_public: bool = True
    created_by: UUID | None = None
    imported_from: ImportRecord | None = None

    @property
    def visibility(self) -> Visibility:
        return Visibility.PUBLIC if self.is_public else Visibility.FAMILY

    @property
    def editors(self) -> frozenset[UUID]:
        if self.created_by is None:
            return frozenset()
        return frozenset({self.created_by})


@dataclass(frozen=True)
class RecipeDraft:
    """User input for a new recipe."""

    name: str
    ingredients: tuple[RecipeIngredient, ...] = ()
    instructions: tuple[str, ...] = ()
    visibility: Visibility = Visibility.FAMILY
    servings: int | None = None
    category: str | None = None
    cuisine: str | None = None
    description: str | None = None
