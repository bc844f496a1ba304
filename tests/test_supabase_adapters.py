"""Tests for Supabase adapter implementations."""

from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from uuid import uuid4

import pytest

from miambidi.adapters.supabase_family_repository import SupabaseFamilyRepository
from miambidi.adapters.supabase_ingredient_repository import (
    SupabaseIngredientRepository,
)
from miambidi.adapters.supabase_meal_plan_repository import (
    SupabaseMealPlanRepository,
)
from miambidi.adapters.supabase_recipe_repository import SupabaseRecipeRepository
from miambidi.adapters.supabase_user_repository import SupabaseUserRepository
from miambidi.domain.families import Family, FamilyMember, MemberPreferences, Role
from miambidi.domain.meal_plans import MealSlot, PlannedMeal
from miambidi.domain.recipes import (
    ImportRecord,
    ImportType,
    Ingredient,
    Ownership,
    Recipe,
    RecipeIngredient,
    Visibility,
)


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {"select": [], "upsert": [], "update": [], "delete": []}
    )
    last_payload: object | None = None
    last_on_conflict: str | None = None
    last_filters: list[tuple[str, str, object]] = field(default_factory=list)

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def select(self, *_args) -> "FakeTable":
        self._action = "select"
        return self

    def upsert(self, payload, on_conflict: str = "") -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "upsert"
        self.last_payload = payload
        self.last_on_conflict = on_conflict or None
        return self

    def update(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "update"
        self.last_payload = payload
        return self

    def delete(self) -> "FakeTable":
        self._action = "delete"
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append(("eq", column, value))
        return self

    def in_(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append(("in", column, value))
        return self

    def or_(self, filters: str) -> "FakeTable":
        self.last_filters.append(("or", "", filters))
        return self

    def gte(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append(("gte", column, value))
        return self

    def lte(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append(("lte", column, value))
        return self

    def limit(self, _count: int) -> "FakeTable":
        return self

    def order(self, _column: str, desc: bool = False) -> "FakeTable":
        return self

    def execute(self) -> FakeResponse:
        action = getattr(self, "_action", "select")
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data)


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def test_supabase_user_repository() -> None:
    client = FakeSupabaseClient()
    users_table = client.table("users")
    user_id, family_id = uuid4(), uuid4()
    users_table.queue(
        "select",
        [
            {
                "id": str(user_id),
                "display_name": "Awa",
                "email": None,
                "family_id": str(family_id),
                "role": "admin",
            }
        ],
    )

    repository = SupabaseUserRepository(client)
    fetched = repository.get_user(user_id)
    repository.set_membership(user_id, None, None)

    assert fetched is not None
    assert fetched.family_id == family_id
    assert fetched.role == Role.ADMIN
    assert users_table.last_payload == {"family_id": None, "role": None}
    assert repository.get_user(uuid4()) is None


def test_supabase_family_repository_roundtrip() -> None:
    client = FakeSupabaseClient()
    families_table = client.table("families")
    members_table = client.table("family_members")
    admin_id = uuid4()
    family = Family(
        id=uuid4(),
        name="Diallo",
        admin_id=admin_id,
        member_ids=frozenset({admin_id}),
        created_by=admin_id,
    )
    member = FamilyMember(
        id=admin_id,
        family_id=family.id,
        display_name="Awa",
        role=Role.ADMIN,
        preferences=MemberPreferences(allergies=frozenset({"arachide"})),
    )
    repository = SupabaseFamilyRepository(client)

    families_table.queue("upsert", [{"id": str(family.id)}])
    repository.save_family(family)
    families_table.queue("select", [families_table.last_payload])
    members_table.queue("upsert", [{"id": str(member.id)}])
    repository.save_member(member)
    members_table.queue("select", [members_table.last_payload])

    assert repository.get_family(family.id) == family
    assert repository.list_members(family.id) == [member]
    assert members_table.last_on_conflict == "family_id,id"


def test_supabase_family_repository_raises_when_write_fails() -> None:
    repository = SupabaseFamilyRepository(FakeSupabaseClient())
    family = Family(id=uuid4(), name="Diallo", admin_id=uuid4())

    with pytest.raises(RuntimeError):
        repository.save_family(family)


def test_supabase_recipe_repository_roundtrip() -> None:
    client = FakeSupabaseClient()
    table = client.table("recipes")
    creator, importer = uuid4(), uuid4()
    recipe = Recipe(
        id=uuid4(),
        name="Yassa (par Diallo)",
        created_by=importer,
        visibility=Visibility.FAMILY,
        family_id=uuid4(),
        ingredients=(
            RecipeIngredient(name="Poulet", quantity=1.0, unit="kg", price=5.0),
        ),
        instructions=("Mariner", "Cuire"),
        servings=4,
        imported_from=ImportRecord(
            original_recipe_id=uuid4(),
            original_created_by=creator,
            imported_by=importer,
            import_type=ImportType.FAMILY,
            imported_at=datetime(2024, 3, 1, tzinfo=UTC),
        ),
        ownership=Ownership(
            original_creator=creator,
            current_owner=importer,
            can_edit=frozenset({creator, importer}),
        ),
    )
    repository = SupabaseRecipeRepository(client)

    table.queue("upsert", [{"id": str(recipe.id)}])
    repository.save_recipe(recipe)
    stored = table.last_payload
    table.queue("select", [stored])

    assert stored["editor_ids"] == sorted([str(creator), str(importer)])
    assert stored["is_public"] is False
    assert repository.get_recipe(recipe.id) == recipe


def test_supabase_recipe_repository_candidate_filter() -> None:
    client = FakeSupabaseClient()
    table = client.table("recipes")
    user_id, family_id = uuid4(), uuid4()

    SupabaseRecipeRepository(client).list_recipes(user_id, family_id)

    (_, _, filters) = table.last_filters[-1]
    assert "visibility.eq.public" in filters
    assert f"created_by.eq.{user_id}" in filters
    assert f"editor_ids.cs.{{{user_id}}}" in filters
    assert f"family_id.eq.{family_id}" in filters


def test_supabase_recipe_repository_get_recipes_skips_empty_lookup() -> None:
    client = FakeSupabaseClient()

    assert SupabaseRecipeRepository(client).get_recipes([]) == []
    assert client.table("recipes").last_filters == []


def test_supabase_ingredient_repository() -> None:
    client = FakeSupabaseClient()
    table = client.table("ingredients")
    family_id = uuid4()
    ingredient = Ingredient(
        id=uuid4(),
        name="Gombo",
        category="Légumes-feuilles & Aromates",
        unit="g",
        price=0.01,
        family_id=family_id,
        is_public=False,
    )
    repository = SupabaseIngredientRepository(client)

    table.queue("upsert", [{"id": str(ingredient.id)}])
    repository.save_ingredient(ingredient)
    table.queue("select", [table.last_payload])

    assert repository.list_ingredients(family_id) == [ingredient]
    assert table.last_filters[-1] == (
        "or",
        "",
        f"is_public.eq.true,family_id.eq.{family_id}",
    )


def test_supabase_meal_plan_repository() -> None:
    client = FakeSupabaseClient()
    table = client.table("meal_plan_entries")
    family_id = uuid4()
    recipe = Recipe(id=uuid4(), name="Mafé", created_by=uuid4())
    meal = PlannedMeal(
        day=date(2024, 3, 4),
        slot=MealSlot.DINNER,
        recipe=recipe,
        planned_at=datetime(2024, 3, 1, 12, tzinfo=UTC),
    )
    repository = SupabaseMealPlanRepository(client)

    table.queue("upsert", [{"plan_date": "2024-03-04"}])
    repository.upsert_entry(family_id, meal)
    assert table.last_on_conflict == "family_id,plan_date,meal_slot"
    assert table.last_payload["meal_slot"] == "Dîner"

    table.queue("select", [table.last_payload])
    (row,) = repository.list_entries(family_id, date(2024, 3, 4), date(2024, 3, 10))
    assert (row.day, row.slot, row.recipe_id) == (meal.day, meal.slot, recipe.id)
    assert ("lte", "plan_date", "2024-03-10") in table.last_filters

    repository.delete_entry(family_id, meal.day, meal.slot)
    assert table.last_filters[-1] == ("eq", "meal_slot", "Dîner")


def test_supabase_ingredient_repository_delete() -> None:
    client = FakeSupabaseClient()
    table = client.table("ingredients")
    ingredient_id = uuid4()

    SupabaseIngredientRepository(client).delete_ingredient(ingredient_id)

    assert table.last_filters == [("eq", "id", str(ingredient_id))]
