"""Referential integrity between ingredients, recipes, menus and users."""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING
from uuid import UUID

from recipe_planner.domain.errors import Conflict, Unavailable
from recipe_planner.domain.users import UserRecord

if TYPE_CHECKING:
    from recipe_planner.services.ingredients import IngredientRepository
    from recipe_planner.services.menus import MenuRepository
    from recipe_planner.services.recipes import RecipeRepository
    from recipe_planner.services.users import UserRepository

_logger = logging.getLogger(__name__)


@dataclass
class ReferenceGuard:
    """Blocks deletes that would orphan references and hands over ownership."""

    ingredient_repository: "IngredientRepository"
    recipe_repository: "RecipeRepository"
    menu_repository: "MenuRepository"
    user_repository: "UserRepository"

    async def ensure_ingredient_unreferenced(self, ingredient_id: UUID) -> None:
        """Raise Conflict when any recipe still uses the ingredient."""
        recipes = await self.recipe_repository.list_recipes_using_ingredient(
            ingredient_id
        )
        if recipes:
            raise Conflict(
                f"Ingredient is used by {len(recipes)} recipe(s)", count=len(recipes)
            )

    async def ensure_recipe_unreferenced(self, recipe_id: UUID) -> None:
        """Raise Conflict when any menu still serves the recipe."""
        menus = await self.menu_repository.list_menus_using_recipe(recipe_id)
        if menus:
            raise Conflict(f"Recipe is used by {len(menus)} menu(s)", count=len(menus))

    async def release_recipe(self, recipe_id: UUID) -> None:
        """Remove a deleted recipe from every user's favourites."""
        users = await self.user_repository.list_users_with_favorite(recipe_id)
        for user in users:
            await self.user_repository.remove_reference(
                user.id, "favorite_recipes", recipe_id
            )

    async def release_user(self, user: UserRecord) -> UserRecord | None:
        """Hand a departing user's ingredients and recipes to an administrator.

        The administrator is looked up once, before any write, so a missing
        administrator fails the whole operation. Saved menus are deleted.
        Returns the administrator that received ownership, if one was needed.
        """
        admin = None
        if user.created_ingredients or user.created_recipes:
            admin = await self.user_repository.find_admin(exclude_id=user.id)
            if admin is None:
                raise Unavailable("No other administrator can take over ownership")

        if admin is not None:
            moved_ingredients = await self._reassign_ingredients(user, admin.id)
            moved_recipes = await self._reassign_recipes(user, admin.id)
            await self.user_repository.update_user(
                admin.id,
                {
                    "created_ingredients": _merge(
                        admin.created_ingredients, moved_ingredients
                    ),
                    "created_recipes": _merge(admin.created_recipes, moved_recipes),
                },
            )
            _logger.info(
                "Reassigned %s ingredients and %s recipes from %s to %s",
                len(moved_ingredients),
                len(moved_recipes),
                user.id,
                admin.id,
            )

        for menu_id in user.saved_menus:
            await self.menu_repository.delete_menu(menu_id)
        return admin

    async def _reassign_ingredients(
        self, user: UserRecord, admin_id: UUID
    ) -> list[UUID]:
        moved: list[UUID] = []
        for ingredient_id in user.created_ingredients:
            if await self.ingredient_repository.get_ingredient(ingredient_id) is None:
                _logger.warning(
                    "User %s lists missing ingredient %s", user.id, ingredient_id
                )
                continue
            await self.ingredient_repository.update_ingredient(
                ingredient_id, {"owner_id": admin_id}
            )
            moved.append(ingredient_id)
        return moved

    async def _reassign_recipes(self, user: UserRecord, admin_id: UUID) -> list[UUID]:
        moved: list[UUID] = []
        for recipe_id in user.created_recipes:
            if await self.recipe_repository.get_recipe(recipe_id) is None:
                _logger.warning("User %s lists missing recipe %s", user.id, recipe_id)
                continue
            await self.recipe_repository.update_recipe(
                recipe_id, {"owner_id": admin_id}
            )
            moved.append(recipe_id)
        return moved


def _merge(existing: list[UUID], added: list[UUID]) -> list[UUID]:
    return list(dict.fromkeys([*existing, *added]))
