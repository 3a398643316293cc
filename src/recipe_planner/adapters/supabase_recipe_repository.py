"""Supabase-backed recipe repository."""

from dataclasses import dataclass
from uuid import UUID

from supabase import AsyncClient

from recipe_planner.adapters.supabase_ingredient_repository import parse_nutrients
from recipe_planner.adapters.supabase_rows import to_row
from recipe_planner.domain.enums import Allergen, FoodType
from recipe_planner.domain.recipes import IngredientUsage, RecipeRecord
from recipe_planner.services.recipes import RecipeRepository

_TABLE = "recipes"


@dataclass
class SupabaseRecipeRepository(RecipeRepository):
    """Supabase implementation for recipe persistence.

    Usages are stored as a jsonb list next to an ``ingredient_ids`` array
    column used for containment queries.
    """

    client: AsyncClient

    async def create_recipe(self, payload: dict[str, object]) -> RecipeRecord:
        """Insert a recipe row and return it."""
        response = (
            await self.client.table(_TABLE).insert(_recipe_row(payload)).execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create recipe in Supabase")
        return parse_recipe(response.data[0])

    async def get_recipe(self, recipe_id: UUID) -> RecipeRecord | None:
        """Return a recipe by id, if present."""
        response = (
            await self.client.table(_TABLE)
            .select("*")
            .eq("id", str(recipe_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return parse_recipe(response.data[0])

    async def list_recipes(self, name: str | None = None) -> list[RecipeRecord]:
        """Return all recipes, optionally filtered by exact name."""
        query = self.client.table(_TABLE).select("*")
        if name:
            query = query.eq("name", name)
        response = await query.order("name").execute()
        return [parse_recipe(row) for row in response.data or []]

    async def update_recipe(
        self, recipe_id: UUID, payload: dict[str, object]
    ) -> RecipeRecord:
        """Update a recipe row and return it."""
        if not payload:
            current = await self.get_recipe(recipe_id)
            if current is None:
                raise RuntimeError("Failed to update recipe")
            return current
        response = (
            await self.client.table(_TABLE)
            .update(_recipe_row(payload))
            .eq("id", str(recipe_id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update recipe")
        return parse_recipe(response.data[0])

    async def delete_recipe(self, recipe_id: UUID) -> None:
        """Delete a recipe row."""
        await self.client.table(_TABLE).delete().eq("id", str(recipe_id)).execute()

    async def list_recipes_using_ingredient(
        self, ingredient_id: UUID
    ) -> list[RecipeRecord]:
        """Return recipes whose usage list references the ingredient."""
        response = (
            await self.client.table(_TABLE)
            .select("*")
            .contains("ingredient_ids", [str(ingredient_id)])
            .execute()
        )
        return [parse_recipe(row) for row in response.data or []]

    async def list_recipes_using_any(
        self, ingredient_ids: list[UUID]
    ) -> list[RecipeRecord]:
        """Return recipes referencing at least one of the ingredients."""
        response = (
            await self.client.table(_TABLE)
            .select("*")
            .overlaps("ingredient_ids", [str(value) for value in ingredient_ids])
            .execute()
        )
        return [parse_recipe(row) for row in response.data or []]


def _recipe_row(payload: dict[str, object]) -> dict[str, object]:
    row = to_row(payload)
    usages = payload.get("ingredients")
    if isinstance(usages, list):
        ids = dict.fromkeys(str(usage.ingredient_id) for usage in usages)
        row["ingredient_ids"] = list(ids)
    return row


def parse_recipe(row: dict[str, object]) -> RecipeRecord:
    """Parse a recipe row into a domain model."""
    return RecipeRecord(
        id=UUID(row["id"]),
        name=str(row.get("name", "")),
        servings=int(row.get("servings", 1)),
        preparation_time=float(row.get("preparation_time", 0.0)),
        food_type=FoodType(row["food_type"]),
        owner_id=UUID(row["owner_id"]),
        instructions=[str(step) for step in row.get("instructions") or []],
        cookware=[str(item) for item in row.get("cookware") or []],
        ingredients=[
            IngredientUsage(
                ingredient_id=UUID(item["ingredient_id"]),
                amount=float(item["amount"]),
            )
            for item in row.get("ingredients") or []
        ],
        estimated_cost=float(row.get("estimated_cost", 0.0)),
        allergens=[Allergen(value) for value in row.get("allergens") or []],
        nutrients=parse_nutrients(row.get("nutrients")),
        comments=row.get("comments"),
    )
