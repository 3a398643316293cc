"""Menu management and persisted meal plans."""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Protocol
from uuid import UUID

from recipe_planner.domain.enums import Allergen, Diet, parse_enum, parse_enum_list
from recipe_planner.domain.errors import NotFound, ValidationFailed
from recipe_planner.domain.menus import DayPlan, MenuRecord
from recipe_planner.domain.recipes import RecipeRecord
from recipe_planner.domain.users import Principal
from recipe_planner.services.auth import authorize
from recipe_planner.services.planner import MealPlanGenerator, average_estimated_cost
from recipe_planner.services.recipes import RecipeRepository
from recipe_planner.services.users import UserRepository
from recipe_planner.services.validation import (
    non_negative,
    parse_uuid,
    parse_uuid_list,
    positive_int,
)

_MENU_FIELDS = frozenset(
    {
        "title",
        "number_days",
        "number_services",
        "calories_target",
        "days",
        "allergies",
        "diet",
        "excluded_ingredients",
    }
)
_PLANNER_FIELDS = _MENU_FIELDS - {"title", "days"}

_logger = logging.getLogger(__name__)


class MenuRepository(Protocol):
    """Persistence interface for menus."""

    async def create_menu(self, payload: dict[str, object]) -> MenuRecord:
        """Create a menu and return it."""

    async def get_menu(self, menu_id: UUID) -> MenuRecord | None:
        """Return a menu by id, if present."""

    async def list_menus(self) -> list[MenuRecord]:
        """Return all menus."""

    async def update_menu(
        self, menu_id: UUID, payload: dict[str, object]
    ) -> MenuRecord:
        """Update a menu and return it."""

    async def delete_menu(self, menu_id: UUID) -> None:
        """Delete a menu."""

    async def list_menus_using_recipe(self, recipe_id: UUID) -> list[MenuRecord]:
        """Return menus that serve the recipe on any day."""


@dataclass
class MenuService:
    """Application service for menus and generated meal plans."""

    repository: MenuRepository
    recipe_repository: RecipeRepository
    user_repository: UserRepository
    generator: MealPlanGenerator

    async def create_menu(
        self, principal: Principal, payload: dict[str, object]
    ) -> MenuRecord:
        """Store a menu, drawing a meal plan when no days are supplied."""
        fields = _clean_fields(payload, _MENU_FIELDS)
        for required in ("title", "number_days", "number_services"):
            if required not in fields:
                raise ValidationFailed(f"{required} is required", field=required)
        fields.setdefault("calories_target", 0.0)
        fields.setdefault("allergies", [])
        fields.setdefault("excluded_ingredients", [])

        if "days" in fields:
            recipes = await self._load_recipes(fields["days"])
        else:
            pool = await self.recipe_repository.list_recipes()
            fields["days"] = self.generator.generate(
                pool,
                fields["number_days"],
                excluded_ingredients=fields["excluded_ingredients"],
                excluded_allergens=fields["allergies"],
            )
            recipes = {recipe.id: recipe for recipe in pool}
        _ensure_day_count(fields["days"], fields["number_days"])

        fields["average_estimated_cost"] = average_estimated_cost(
            fields["days"], recipes, fields["number_services"]
        )
        menu = await self.repository.create_menu({**fields, "owner_id": principal.id})
        await self.user_repository.append_reference(
            principal.id, "saved_menus", menu.id
        )
        _logger.info("Menu %s saved for %s", menu.id, principal.id)
        return menu

    async def plan(
        self, principal: Principal, payload: dict[str, object]
    ) -> MenuRecord:
        """Generate and save a dated menu for the principal.

        Exclusions the request leaves out come from the principal's dietary
        profile.
        """
        fields = _clean_fields(payload, _PLANNER_FIELDS)
        user = await self.user_repository.get_user(principal.id)
        if user is not None:
            fields.setdefault("allergies", user.dietary.allergies)
            fields.setdefault("diet", user.dietary.diet)
            fields.setdefault(
                "excluded_ingredients", user.dietary.excluded_ingredients
            )
        fields["title"] = date.today().strftime("%d/%m/%Y")
        return await self.create_menu(principal, fields)

    async def list_menus(self) -> list[MenuRecord]:
        """Return every menu."""
        return await self.repository.list_menus()

    async def get_menu(self, menu_id: UUID) -> MenuRecord:
        """Return a menu or raise NotFound."""
        menu = await self.repository.get_menu(menu_id)
        if menu is None:
            raise NotFound(f"Menu {menu_id} not found")
        return menu

    async def update_menu(
        self, principal: Principal, menu_id: UUID, payload: dict[str, object]
    ) -> MenuRecord:
        """Apply a partial update, re-pricing the plan when it changes."""
        current = await self.get_menu(menu_id)
        authorize(principal, current.owner_id)
        changes = _clean_fields(payload, _MENU_FIELDS)
        if changes.keys() & {"days", "number_days", "number_services"}:
            days = changes.get("days", current.days)
            number_days = changes.get("number_days", current.number_days)
            _ensure_day_count(days, number_days)
            recipes = await self._load_recipes(days)
            changes["average_estimated_cost"] = average_estimated_cost(
                days,
                recipes,
                changes.get("number_services", current.number_services),
            )
        return await self.repository.update_menu(menu_id, changes)

    async def delete_menu(self, principal: Principal, menu_id: UUID) -> MenuRecord:
        """Delete a menu and unlink it from its owner."""
        menu = await self.get_menu(menu_id)
        authorize(principal, menu.owner_id)
        await self.repository.delete_menu(menu_id)
        await self.user_repository.remove_reference(
            menu.owner_id, "saved_menus", menu_id
        )
        return menu

    async def _load_recipes(self, days: list[DayPlan]) -> dict[UUID, RecipeRecord]:
        recipes: dict[UUID, RecipeRecord] = {}
        for day in days:
            for recipe_id in day.recipe_ids():
                if recipe_id in recipes:
                    continue
                recipe = await self.recipe_repository.get_recipe(recipe_id)
                if recipe is None:
                    raise NotFound(f"Recipe {recipe_id} not found")
                recipes[recipe_id] = recipe
        return recipes


def parse_days(raw: object) -> list[DayPlan]:
    """Coerce a wire day list into domain values."""
    if not isinstance(raw, list):
        raise ValidationFailed("days must be a list", field="days")
    days: list[DayPlan] = []
    for item in raw:
        if isinstance(item, DayPlan):
            days.append(item)
            continue
        if not isinstance(item, dict):
            raise ValidationFailed("Each day must be an object", field="days")
        try:
            course_ids = [item[key] for key in ("starter_id", "main_id", "dessert_id")]
        except KeyError as exc:
            missing = exc.args[0]
            raise ValidationFailed(f"Day is missing {missing}", field="days") from exc
        starter_id, main_id, dessert_id = (
            parse_uuid(value, "days") for value in course_ids
        )
        days.append(
            DayPlan(
                starter_id=starter_id,
                main_id=main_id,
                dessert_id=dessert_id,
                bread=bool(item.get("bread", False)),
            )
        )
    return days


def _ensure_day_count(days: list[DayPlan], number_days: int) -> None:
    if len(days) != number_days:
        raise ValidationFailed(
            f"Expected {number_days} days but got {len(days)}", field="days"
        )


def _clean_fields(
    payload: dict[str, object], allowed: frozenset[str]
) -> dict[str, object]:
    unknown = set(payload) - allowed
    if unknown:
        field = sorted(unknown)[0]
        raise ValidationFailed(f"{field} cannot be set on a menu", field=field)
    fields: dict[str, object] = {}
    if payload.get("title") is not None:
        title = str(payload["title"]).strip()
        if not title:
            raise ValidationFailed("title must not be empty", field="title")
        fields["title"] = title
    for count_field in ("number_days", "number_services"):
        if payload.get(count_field) is not None:
            fields[count_field] = positive_int(payload[count_field], count_field)
    if payload.get("calories_target") is not None:
        fields["calories_target"] = non_negative(
            payload["calories_target"], "calories_target"
        )
    if payload.get("days") is not None:
        fields["days"] = parse_days(payload["days"])
    if payload.get("allergies") is not None:
        fields["allergies"] = parse_enum_list(
            Allergen, payload["allergies"], "allergies"
        )
    if "diet" in payload:
        diet = payload["diet"]
        fields["diet"] = parse_enum(Diet, diet, "diet") if diet else None
    if payload.get("excluded_ingredients") is not None:
        fields["excluded_ingredients"] = parse_uuid_list(
            payload["excluded_ingredients"], "excluded_ingredients"
        )
    return fields
