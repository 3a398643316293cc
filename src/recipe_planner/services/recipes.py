"""Recipe management and ingredient-based recipe search."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from recipe_planner.domain.enums import FoodType, parse_enum
from recipe_planner.domain.errors import NotFound, ValidationFailed
from recipe_planner.domain.recipes import IngredientUsage, RecipeRecord
from recipe_planner.domain.users import Principal
from recipe_planner.services.auth import authorize
from recipe_planner.services.integrity import ReferenceGuard
from recipe_planner.services.nutrition import NutritionCalculator
from recipe_planner.services.users import UserRepository
from recipe_planner.services.validation import (
    non_negative,
    parse_uuid,
    positive,
    positive_int,
)

SEARCH_LIMIT = 5
_EDITABLE_FIELDS = frozenset(
    {
        "name",
        "servings",
        "preparation_time",
        "food_type",
        "instructions",
        "comments",
        "cookware",
        "ingredients",
    }
)

_logger = logging.getLogger(__name__)


class RecipeRepository(Protocol):
    """Persistence interface for recipes."""

    async def create_recipe(self, payload: dict[str, object]) -> RecipeRecord:
        """Create a recipe and return it."""

    async def get_recipe(self, recipe_id: UUID) -> RecipeRecord | None:
        """Return a recipe by id, if present."""

    async def list_recipes(self, name: str | None = None) -> list[RecipeRecord]:
        """Return all recipes, optionally only those with an exact name."""

    async def update_recipe(
        self, recipe_id: UUID, payload: dict[str, object]
    ) -> RecipeRecord:
        """Update a recipe and return it."""

    async def delete_recipe(self, recipe_id: UUID) -> None:
        """Delete a recipe."""

    async def list_recipes_using_ingredient(
        self, ingredient_id: UUID
    ) -> list[RecipeRecord]:
        """Return recipes whose usage list references the ingredient."""

    async def list_recipes_using_any(
        self, ingredient_ids: list[UUID]
    ) -> list[RecipeRecord]:
        """Return recipes referencing at least one of the ingredients."""


@dataclass
class RecipeService:
    """Application service for recipe operations."""

    repository: RecipeRepository
    user_repository: UserRepository
    calculator: NutritionCalculator
    guard: ReferenceGuard

    async def create_recipe(
        self, principal: Principal, payload: dict[str, object]
    ) -> RecipeRecord:
        """Store a recipe with cost, allergens and nutrients derived."""
        fields = _clean_fields(payload)
        for required in (
            "name",
            "servings",
            "preparation_time",
            "food_type",
            "instructions",
            "ingredients",
        ):
            if required not in fields:
                raise ValidationFailed(f"{required} is required", field=required)
        fields.setdefault("cookware", [])

        nutrition = await self.calculator.build(fields["ingredients"])
        recipe = await self.repository.create_recipe(
            {
                **fields,
                "estimated_cost": nutrition.estimated_cost,
                "allergens": nutrition.allergens,
                "nutrients": nutrition.nutrients,
                "owner_id": principal.id,
            }
        )
        await self.user_repository.append_reference(
            principal.id, "created_recipes", recipe.id
        )
        _logger.info("Recipe %s created by %s", recipe.id, principal.id)
        return recipe

    async def list_recipes(self, name: str | None = None) -> list[RecipeRecord]:
        """Return every recipe, or those named exactly ``name``."""
        return await self.repository.list_recipes(name)

    async def get_recipe(self, recipe_id: UUID) -> RecipeRecord:
        """Return a recipe or raise NotFound."""
        recipe = await self.repository.get_recipe(recipe_id)
        if recipe is None:
            raise NotFound(f"Recipe {recipe_id} not found")
        return recipe

    async def update_recipe(
        self, principal: Principal, recipe_id: UUID, payload: dict[str, object]
    ) -> RecipeRecord:
        """Apply a partial update, rebuilding derived fields on usage changes."""
        current = await self.get_recipe(recipe_id)
        authorize(principal, current.owner_id)
        changes = _clean_fields(payload)
        if "ingredients" in changes:
            nutrition = await self.calculator.build(changes["ingredients"])
            changes.update(
                estimated_cost=nutrition.estimated_cost,
                allergens=nutrition.allergens,
                nutrients=nutrition.nutrients,
            )
        return await self.repository.update_recipe(recipe_id, changes)

    async def delete_recipe(
        self, principal: Principal, recipe_id: UUID
    ) -> RecipeRecord:
        """Delete a recipe no menu references and unlink it from users."""
        recipe = await self.get_recipe(recipe_id)
        authorize(principal, recipe.owner_id)
        await self.guard.ensure_recipe_unreferenced(recipe_id)
        await self.repository.delete_recipe(recipe_id)
        await self.guard.release_recipe(recipe_id)
        await self.user_repository.remove_reference(
            recipe.owner_id, "created_recipes", recipe_id
        )
        return recipe

    async def search_by_ingredients(
        self, ingredient_ids: list[UUID], limit: int = SEARCH_LIMIT
    ) -> list[RecipeRecord]:
        """Return recipes ranked by how many of the ingredients they use.

        Recipes using every requested ingredient come first.
        """
        wanted = set(ingredient_ids)
        if not wanted:
            return []
        candidates = await self.repository.list_recipes_using_any(list(wanted))

        def rank(recipe: RecipeRecord) -> tuple[bool, int]:
            overlap = len(wanted & set(recipe.ingredient_ids()))
            return overlap < len(wanted), -overlap

        return sorted(candidates, key=rank)[:limit]


def parse_usages(raw: object) -> list[IngredientUsage]:
    """Coerce a wire ingredient-usage list into domain values."""
    if not isinstance(raw, list) or not raw:
        raise ValidationFailed(
            "A recipe needs at least one ingredient", field="ingredients"
        )
    usages: list[IngredientUsage] = []
    for item in raw:
        if isinstance(item, IngredientUsage):
            usages.append(item)
            continue
        if not isinstance(item, dict) or "ingredient_id" not in item:
            raise ValidationFailed(
                "Each ingredient needs an ingredient_id and an amount",
                field="ingredients",
            )
        usages.append(
            IngredientUsage(
                ingredient_id=parse_uuid(item["ingredient_id"], "ingredients"),
                amount=positive(item.get("amount"), "ingredients"),
            )
        )
    return usages


def _clean_fields(payload: dict[str, object]) -> dict[str, object]:
    unknown = set(payload) - _EDITABLE_FIELDS
    if unknown:
        field = sorted(unknown)[0]
        raise ValidationFailed(f"{field} cannot be set on a recipe", field=field)
    fields: dict[str, object] = {}
    if payload.get("name") is not None:
        name = str(payload["name"]).strip()
        if not name:
            raise ValidationFailed("name must not be empty", field="name")
        fields["name"] = name
    if payload.get("servings") is not None:
        fields["servings"] = positive_int(payload["servings"], "servings")
    if payload.get("preparation_time") is not None:
        fields["preparation_time"] = non_negative(
            payload["preparation_time"], "preparation_time"
        )
    if payload.get("food_type") is not None:
        fields["food_type"] = parse_enum(FoodType, payload["food_type"], "food_type")
    if payload.get("instructions") is not None:
        instructions = _strings(payload["instructions"], "instructions")
        if not instructions:
            raise ValidationFailed(
                "A recipe needs at least one instruction", field="instructions"
            )
        fields["instructions"] = instructions
    if payload.get("cookware") is not None:
        fields["cookware"] = _strings(payload["cookware"], "cookware")
    if "comments" in payload:
        comments = payload["comments"]
        fields["comments"] = str(comments).strip() if comments is not None else None
    if payload.get("ingredients") is not None:
        fields["ingredients"] = parse_usages(payload["ingredients"])
    return fields


def _strings(raw: object, field: str) -> list[str]:
    if not isinstance(raw, list):
        raise ValidationFailed(f"{field} must be a list", field=field)
    return [str(item).strip() for item in raw if str(item).strip()]
