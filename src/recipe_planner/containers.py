"""Dependency container wiring for the application."""

import random
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import timedelta

from supabase import AsyncClient

from recipe_planner.adapters.bcrypt_password_hasher import BcryptPasswordHasher
from recipe_planner.adapters.jwt_token_service import PyJwtTokenService
from recipe_planner.adapters.supabase_ingredient_repository import (
    SupabaseIngredientRepository,
)
from recipe_planner.adapters.supabase_menu_repository import SupabaseMenuRepository
from recipe_planner.adapters.supabase_recipe_repository import (
    SupabaseRecipeRepository,
)
from recipe_planner.adapters.supabase_user_repository import SupabaseUserRepository
from recipe_planner.config import Settings
from recipe_planner.services.auth import AccessGuard, PasswordHasher, TokenService
from recipe_planner.services.ingredients import IngredientRepository, IngredientService
from recipe_planner.services.integrity import ReferenceGuard
from recipe_planner.services.menus import MenuRepository, MenuService
from recipe_planner.services.nutrition import NutritionCalculator
from recipe_planner.services.planner import MealPlanGenerator
from recipe_planner.services.recipes import RecipeRepository, RecipeService
from recipe_planner.services.users import UserRepository, UserService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    access_guard: AccessGuard
    ingredient_service: IngredientService
    recipe_service: RecipeService
    menu_service: MenuService
    user_service: UserService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = AsyncClient(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    ingredient_repository = SupabaseIngredientRepository(supabase_client)
    recipe_repository = SupabaseRecipeRepository(supabase_client)
    menu_repository = SupabaseMenuRepository(supabase_client)
    user_repository = SupabaseUserRepository(supabase_client)
    token_service = PyJwtTokenService(
        secret=resolved_settings.jwt_secret,
        algorithm=resolved_settings.jwt_algorithm,
    )

    async def close_resources() -> None:
        await supabase_client.postgrest.aclose()

    return wire_services(
        settings=resolved_settings,
        ingredient_repository=ingredient_repository,
        recipe_repository=recipe_repository,
        menu_repository=menu_repository,
        user_repository=user_repository,
        token_service=token_service,
        hasher=BcryptPasswordHasher(rounds=resolved_settings.bcrypt_rounds),
        rng=random.Random(),
        close_resources=close_resources,
    )


def wire_services(  # noqa: PLR0913
    *,
    settings: Settings,
    ingredient_repository: IngredientRepository,
    recipe_repository: RecipeRepository,
    menu_repository: MenuRepository,
    user_repository: UserRepository,
    token_service: TokenService,
    hasher: PasswordHasher,
    rng: random.Random,
    close_resources: Callable[[], Awaitable[None]],
) -> AppContainer:
    """Build the services on top of concrete repositories."""
    calculator = NutritionCalculator(ingredient_repository, recipe_repository)
    guard = ReferenceGuard(
        ingredient_repository=ingredient_repository,
        recipe_repository=recipe_repository,
        menu_repository=menu_repository,
        user_repository=user_repository,
    )
    return AppContainer(
        settings=settings,
        access_guard=AccessGuard(user_repository, token_service),
        ingredient_service=IngredientService(
            ingredient_repository, user_repository, calculator, guard
        ),
        recipe_service=RecipeService(
            recipe_repository, user_repository, calculator, guard
        ),
        menu_service=MenuService(
            menu_repository,
            recipe_repository,
            user_repository,
            MealPlanGenerator(rng),
        ),
        user_service=UserService(
            repository=user_repository,
            ingredient_repository=ingredient_repository,
            recipe_repository=recipe_repository,
            hasher=hasher,
            token_service=token_service,
            guard=guard,
            token_ttl=timedelta(minutes=settings.token_ttl_minutes),
        ),
        close_resources=close_resources,
    )
