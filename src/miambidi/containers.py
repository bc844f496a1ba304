"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from miambidi.adapters.supabase_family_repository import SupabaseFamilyRepository
from miambidi.adapters.supabase_ingredient_repository import (
    SupabaseIngredientRepository,
)
from miambidi.adapters.supabase_meal_plan_repository import (
    SupabaseMealPlanRepository,
)
from miambidi.adapters.supabase_recipe_repository import SupabaseRecipeRepository
from miambidi.adapters.supabase_user_repository import SupabaseUserRepository
from miambidi.config import Settings
from miambidi.services.families import FamilyService
from miambidi.services.ingredients import IngredientService
from miambidi.services.meal_plans import MealPlanService
from miambidi.services.recipes import RecipeService
from miambidi.services.shopping import ShoppingListService
from miambidi.services.users import UserService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    user_service: UserService
    family_service: FamilyService
    recipe_service: RecipeService
    ingredient_service: IngredientService
    meal_plan_service: MealPlanService
    shopping_list_service: ShoppingListService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    user_repository = SupabaseUserRepository(supabase_client)
    family_repository = SupabaseFamilyRepository(supabase_client)
    recipe_repository = SupabaseRecipeRepository(supabase_client)
    ingredient_repository = SupabaseIngredientRepository(supabase_client)
    meal_plan_repository = SupabaseMealPlanRepository(supabase_client)

    ingredient_service = IngredientService(ingredient_repository)
    meal_plan_service = MealPlanService(
        repository=meal_plan_repository,
        recipe_repository=recipe_repository,
        week_starts_on=resolved_settings.week_starts_on,
    )
    return AppContainer(
        settings=resolved_settings,
        user_service=UserService(user_repository),
        family_service=FamilyService(
            repository=family_repository,
            membership_repository=user_repository,
        ),
        recipe_service=RecipeService(recipe_repository),
        ingredient_service=ingredient_service,
        meal_plan_service=meal_plan_service,
        shopping_list_service=ShoppingListService(
            meal_plan_service=meal_plan_service,
            ingredient_service=ingredient_service,
            default_family_size=resolved_settings.shopping_family_size,
        ),
    )
