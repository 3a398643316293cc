"""Supabase-backed menu repository."""

from dataclasses import dataclass
from uuid import UUID

from supabase import AsyncClient

from recipe_planner.adapters.supabase_rows import parse_uuid_list, to_row
from recipe_planner.domain.enums import Allergen, Diet
from recipe_planner.domain.menus import DayPlan, MenuRecord
from recipe_planner.services.menus import MenuRepository

_TABLE = "menus"


@dataclass
class SupabaseMenuRepository(MenuRepository):
    """Supabase implementation for menu persistence."""

    client: AsyncClient

    async def create_menu(self, payload: dict[str, object]) -> MenuRecord:
        """Insert a menu row and return it."""
        response = await self.client.table(_TABLE).insert(_menu_row(payload)).execute()
        if not response.data:
            raise RuntimeError("Failed to create menu in Supabase")
        return parse_menu(response.data[0])

    async def get_menu(self, menu_id: UUID) -> MenuRecord | None:
        """Return a menu by id, if present."""
        response = (
            await self.client.table(_TABLE)
            .select("*")
            .eq("id", str(menu_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return parse_menu(response.data[0])

    async def list_menus(self) -> list[MenuRecord]:
        """Return all menus."""
        response = await self.client.table(_TABLE).select("*").execute()
        return [parse_menu(row) for row in response.data or []]

    async def update_menu(
        self, menu_id: UUID, payload: dict[str, object]
    ) -> MenuRecord:
        """Update a menu row and return it."""
        if not payload:
            current = await self.get_menu(menu_id)
            if current is None:
                raise RuntimeError("Failed to update menu")
            return current
        response = (
            await self.client.table(_TABLE)
            .update(_menu_row(payload))
            .eq("id", str(menu_id))
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update menu")
        return parse_menu(response.data[0])

    async def delete_menu(self, menu_id: UUID) -> None:
        """Delete a menu row."""
        await self.client.table(_TABLE).delete().eq("id", str(menu_id)).execute()

    async def list_menus_using_recipe(self, recipe_id: UUID) -> list[MenuRecord]:
        """Return menus whose days reference the recipe."""
        response = (
            await self.client.table(_TABLE)
            .select("*")
            .contains("recipe_ids", [str(recipe_id)])
            .execute()
        )
        return [parse_menu(row) for row in response.data or []]


def _menu_row(payload: dict[str, object]) -> dict[str, object]:
    row = to_row(payload)
    days = payload.get("days")
    if isinstance(days, list):
        ids = dict.fromkeys(
            str(recipe_id) for day in days for recipe_id in day.recipe_ids()
        )
        row["recipe_ids"] = list(ids)
    return row


def parse_menu(row: dict[str, object]) -> MenuRecord:
    """Parse a menu row into a domain model."""
    diet = row.get("diet")
    return MenuRecord(
        id=UUID(row["id"]),
        title=str(row.get("title", "")),
        number_days=int(row.get("number_days", 0)),
        number_services=int(row.get("number_services", 0)),
        calories_target=float(row.get("calories_target") or 0.0),
        average_estimated_cost=float(row.get("average_estimated_cost") or 0.0),
        owner_id=UUID(row["owner_id"]),
        days=[
            DayPlan(
                starter_id=UUID(day["starter_id"]),
                main_id=UUID(day["main_id"]),
                dessert_id=UUID(day["dessert_id"]),
                bread=bool(day.get("bread", False)),
            )
            for day in row.get("days") or []
        ],
        allergies=[Allergen(value) for value in row.get("allergies") or []],
        diet=Diet(diet) if diet else None,
        excluded_ingredients=parse_uuid_list(row.get("excluded_ingredients")),
    )
