"""Pydantic request and response models for the HTTP API."""

from datetime import date
from typing import ClassVar, Self
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from miambidi.domain.families import Family, FamilyMember, MemberPreferences, Role
from miambidi.domain.meal_plans import MealSlot, PlannedMeal
from miambidi.domain.recipes import (
    ImportType,
    Ingredient,
    Recipe,
    RecipeIngredient,
    Visibility,
)
from miambidi.domain.shopping import ShoppingList


class PartialUpdate(BaseModel):
    """Partial update body; omitted fields are left untouched.

    Fields listed in ``non_nullable`` may be omitted but not sent as null.
    """

    non_nullable: ClassVar[frozenset[str]] = frozenset()

    @model_validator(mode="after")
    def _reject_nulls(self) -> Self:
        nulls = sorted(
            name
            for name in self.non_nullable & self.model_fields_set
            if getattr(self, name) is None
        )
        if nulls:
            raise ValueError(f"Fields may not be null: {nulls}")
        return self

    def changes(self) -> dict[str, object]:
        return self.model_dump(exclude_unset=True)


class PreferencesPayload(BaseModel):
    dietary_restrictions: list[str] = Field(default_factory=list)
    allergies: list[str] = Field(default_factory=list)
    favorite_categories: list[str] = Field(default_factory=list)
    disliked_foods: list[str] = Field(default_factory=list)

    def to_domain(self) -> MemberPreferences:
        return MemberPreferences(
            dietary_restrictions=frozenset(self.dietary_restrictions),
            allergies=frozenset(self.allergies),
            favorite_categories=frozenset(self.favorite_categories),
            disliked_foods=frozenset(self.disliked_foods),
        )


class FamilyCreate(BaseModel):
    name: str = Field(min_length=1)


class FamilyRename(BaseModel):
    name: str = Field(min_length=1)


class MemberCreate(BaseModel):
    display_name: str = Field(min_length=1)
    email: str | None = None
    age: int | None = Field(default=None, ge=0)
    preferences: PreferencesPayload = Field(default_factory=PreferencesPayload)


class MemberUpdate(PartialUpdate):
    non_nullable = frozenset({"display_name", "preferences"})

    display_name: str | None = Field(default=None, min_length=1)
    email: str | None = None
    age: int | None = Field(default=None, ge=0)
    preferences: PreferencesPayload | None = None


class RoleChange(BaseModel):
    role: Role


class IngredientLine(BaseModel):
    name: str = Field(min_length=1)
    quantity: float = Field(gt=0)
    unit: str = ""
    price: float = Field(default=0.0, ge=0)
    ingredient_id: UUID | None = None
    notes: str | None = None

    def to_domain(self) -> RecipeIngredient:
        return RecipeIngredient(**self.model_dump())


class RecipeCreate(BaseModel):
    name: str = Field(min_length=1)
    ingredients: list[IngredientLine] = Field(default_factory=list)
    instructions: list[str] = Field(default_factory=list)
    visibility: Visibility = Visibility.FAMILY
    servings: int | None = Field(default=None, gt=0)
    category: str | None = None
    cuisine: str | None = None
    description: str | None = None


class RecipeUpdate(PartialUpdate):
    non_nullable = frozenset({"name", "ingredients", "instructions"})

    name: str | None = Field(default=None, min_length=1)
    ingredients: list[IngredientLine] | None = None
    instructions: list[str] | None = None
    servings: int | None = Field(default=None, gt=0)
    category: str | None = None
    cuisine: str | None = None
    description: str | None = None


class VisibilityChange(BaseModel):
    visibility: Visibility


class RecipeImport(BaseModel):
    import_type: ImportType = ImportType.FAMILY


class IngredientCreate(BaseModel):
    name: str = Field(min_length=1)
    category: str = "Autres"
    unit: str = ""
    price: float = Field(default=0.0, ge=0)
    is_public: bool = True


class IngredientUpdate(PartialUpdate):
    non_nullable = frozenset({"name", "category", "unit", "price", "is_public"})

    name: str | None = Field(default=None, min_length=1)
    category: str | None = Field(default=None, min_length=1)
    unit: str | None = None
    price: float | None = Field(default=None, ge=0)
    is_public: bool | None = None


class MealAssignment(BaseModel):
    day: date
    slot: MealSlot
    recipe_id: UUID


def family_payload(family: Family) -> dict[str, object]:
    return {
        "id": str(family.id),
        "name": family.name,
        "admin_id": str(family.admin_id),
        "member_ids": sorted(str(member_id) for member_id in family.member_ids),
    }


def member_payload(member: FamilyMember) -> dict[str, object]:
    preferences = member.preferences
    return {
        "id": str(member.id),
        "family_id": str(member.family_id),
        "display_name": member.display_name,
        "role": member.role.value,
        "email": member.email,
        "age": member.age,
        "preferences": {
            "dietary_restrictions": sorted(preferences.dietary_restrictions),
            "allergies": sorted(preferences.allergies),
            "favorite_categories": sorted(preferences.favorite_categories),
            "disliked_foods": sorted(preferences.disliked_foods),
        },
    }


def recipe_payload(recipe: Recipe) -> dict[str, object]:
    return {
        "id": str(recipe.id),
        "name": recipe.name,
        "created_by": str(recipe.created_by),
        "visibility": recipe.visibility.value,
        "family_id": str(recipe.family_id) if recipe.family_id else None,
        "ingredients": [
            {
                "name": line.name,
                "quantity": line.quantity,
                "unit": line.unit,
                "price": line.price,
            }
            for line in recipe.ingredients
        ],
        "instructions": list(recipe.instructions),
        "servings": recipe.servings,
        "category": recipe.category,
        "cuisine": recipe.cuisine,
        "description": recipe.description,
        "total_cost": recipe.total_cost,
        "imported_from": (
            str(recipe.imported_from.original_recipe_id)
            if recipe.imported_from
            else None
        ),
    }


def ingredient_payload(ingredient: Ingredient) -> dict[str, object]:
    return {
        "id": str(ingredient.id),
        "name": ingredient.name,
        "category": ingredient.category,
        "unit": ingredient.unit,
        "price": ingredient.price,
        "is_public": ingredient.is_public,
        "family_id": str(ingredient.family_id) if ingredient.family_id else None,
    }


def meal_payload(meal: PlannedMeal) -> dict[str, object]:
    return {
        "day": meal.day.isoformat(),
        "slot": meal.slot.value,
        "recipe_id": str(meal.recipe.id),
        "recipe_name": meal.recipe.name,
        "planned_at": meal.planned_at.isoformat(),
    }


def shopping_list_payload(shopping_list: ShoppingList) -> dict[str, object]:
    return {
        "title": shopping_list.title,
        "start": shopping_list.start.isoformat() if shopping_list.start else None,
        "end": shopping_list.end.isoformat() if shopping_list.end else None,
        "total_items": shopping_list.total_items,
        "total_recipes": shopping_list.total_recipes,
        "total_meals": shopping_list.total_meals,
        "estimated_cost": shopping_list.estimated_cost,
        "sections": [
            {
                "category": section.category,
                "items": [
                    {
                        "name": item.name,
                        "quantity": item.quantity,
                        "unit": item.unit,
                        "recipes": list(item.recipe_names),
                        "estimated_cost": item.estimated_cost,
                    }
                    for item in section.items
                ],
            }
            for section in shopping_list.sections
        ],
    }
