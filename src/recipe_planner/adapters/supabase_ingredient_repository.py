"""Supabase-backed ingredient repository."""

from dataclasses import dataclass
from uuid import UUID

from supabase import AsyncClient

from recipe_planner.adapters.supabase_rows import to_row
from recipe_planner.domain.enums import Allergen, FoodGroup, NutrientName
from recipe_planner.domain.ingredients import IngredientRecord, Nutrient
from recipe_planner.services.ingredients import IngredientRepository

_TABLE = "ingredients"


@dataclass
class SupabaseIngredientRepository(IngredientRepository):
    """Supabase implementation for ingredient persistence."""

    client: AsyncClient

    async def create_ingredient(self, payload: dict[str, object]) -> IngredientRecord:
        """Insert an ingredient row and return it."""
        response = await self.client.table(_TABLE).insert(to_row(payload)).execute()
        if not response.data:
            raise RuntimeError("Failed to create ingredient in Supabase")
        return parse_ingredient(response.data[0])

    async def get_ingredient(self, ingredient_id: UUID) -> IngredientRecord | None:
        """Return an ingredient by id, if present."""
        response = (
            await self.client.table(_TABLE)
            .select("*")
            .eq("id", str(ingredient_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return parse_ingredient(response.data[0])

    async def get_by_name(self, name: str) -> IngredientRecord | None:
        """Return an ingredient by its normalised name, if present."""
        response = (
            await self.client.table(_TABLE)
            .select("*")
            .eq("name", name)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return parse_ingredient(response.data[0])

    async def list_ingredients(self) -> list[IngredientRecord]:
        """Return all ingredients ordered by name."""
        response = await self.client.table(_TABLE).select("*").order("name").execute()
        return [parse_ingredient(row) for row in response.data or []]

    async def update_ingredient(
        self, ingredient_id: UUID, payload: dict[str, object]
    ) -> IngredientRecord:
        """Update an ingredient row and return it."""
        if not payload:
            current = await self.get_ingredient(ingredient_id)
            if current is None:
                raise RuntimeError("Failed to update ingredient")
            return current
        response = (
            await self.client.table(_TABLE)
            .update(to_row(payload))
            .eq("id", str(ingredient_id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update ingredient")
        return parse_ingredient(response.data[0])

    async def delete_ingredient(self, ingredient_id: UUID) -> None:
        """Delete an ingredient row."""
        await self.client.table(_TABLE).delete().eq("id", str(ingredient_id)).execute()


def parse_ingredient(row: dict[str, object]) -> IngredientRecord:
    """Parse an ingredient row into a domain model."""
    return IngredientRecord(
        id=UUID(row["id"]),
        name=str(row.get("name", "")),
        amount=float(row.get("amount", 0.0)),
        unit=str(row.get("unit") or ""),
        estimated_cost=float(row.get("estimated_cost", 0.0)),
        food_group=FoodGroup(row["food_group"]),
        owner_id=UUID(row["owner_id"]),
        allergens=[Allergen(value) for value in row.get("allergens") or []],
        nutrients=parse_nutrients(row.get("nutrients")),
    )


def parse_nutrients(raw: object) -> list[Nutrient]:
    """Parse a stored nutrient list."""
    return [
        Nutrient(name=NutrientName(item["name"]), amount=float(item["amount"]))
        for item in raw or []
    ]
