"""Ingredient management, including change propagation to recipes."""

import logging
from dataclasses import dataclass, replace
from typing import Protocol
from uuid import UUID

from recipe_planner.domain.enums import (
    Allergen,
    FoodGroup,
    NutrientName,
    parse_enum,
    parse_enum_list,
)
from recipe_planner.domain.errors import Conflict, NotFound, ValidationFailed
from recipe_planner.domain.ingredients import (
    IngredientRecord,
    Nutrient,
    ensure_mandatory_nutrients,
    normalize_ingredient_name,
)
from recipe_planner.domain.users import Principal
from recipe_planner.services.auth import authorize
from recipe_planner.services.integrity import ReferenceGuard
from recipe_planner.services.nutrition import PROPAGATED_FIELDS, NutritionCalculator
from recipe_planner.services.users import UserRepository
from recipe_planner.services.validation import non_negative, positive

_DEFAULT_REFERENCE_AMOUNT = 100.0
_DEFAULT_UNIT = "gr"
_UPDATABLE_FIELDS = frozenset(
    {"name", "amount", "unit", "estimated_cost", "food_group", "allergens", "nutrients"}
)

_logger = logging.getLogger(__name__)


class IngredientRepository(Protocol):
    """Persistence interface for ingredients."""

    async def create_ingredient(self, payload: dict[str, object]) -> IngredientRecord:
        """Create an ingredient and return it."""

    async def get_ingredient(self, ingredient_id: UUID) -> IngredientRecord | None:
        """Return an ingredient by id, if present."""

    async def get_by_name(self, name: str) -> IngredientRecord | None:
        """Return an ingredient by its normalised name, if present."""

    async def list_ingredients(self) -> list[IngredientRecord]:
        """Return all ingredients."""

    async def update_ingredient(
        self, ingredient_id: UUID, payload: dict[str, object]
    ) -> IngredientRecord:
        """Update an ingredient and return it."""

    async def delete_ingredient(self, ingredient_id: UUID) -> None:
        """Delete an ingredient."""


@dataclass
class IngredientService:
    """Application service for ingredient operations."""

    repository: IngredientRepository
    user_repository: UserRepository
    calculator: NutritionCalculator
    guard: ReferenceGuard

    async def create_ingredient(
        self, principal: Principal, payload: dict[str, object]
    ) -> IngredientRecord:
        """Validate and store a new ingredient owned by the principal."""
        fields = _clean_fields(payload)
        fields.setdefault("amount", _DEFAULT_REFERENCE_AMOUNT)
        fields.setdefault("unit", _DEFAULT_UNIT)
        fields.setdefault("allergens", [])
        for required in ("name", "estimated_cost", "food_group", "nutrients"):
            if required not in fields:
                raise ValidationFailed(f"{required} is required", field=required)
        ensure_mandatory_nutrients(fields["nutrients"])
        await self._ensure_name_available(fields["name"])

        ingredient = await self.repository.create_ingredient(
            {**fields, "owner_id": principal.id}
        )
        await self.user_repository.append_reference(
            principal.id, "created_ingredients", ingredient.id
        )
        _logger.info("Ingredient %s created by %s", ingredient.id, principal.id)
        return ingredient

    async def list_ingredients(self) -> list[IngredientRecord]:
        """Return every ingredient."""
        return await self.repository.list_ingredients()

    async def get_ingredient(self, ingredient_id: UUID) -> IngredientRecord:
        """Return an ingredient or raise NotFound."""
        ingredient = await self.repository.get_ingredient(ingredient_id)
        if ingredient is None:
            raise NotFound(f"Ingredient {ingredient_id} not found")
        return ingredient

    async def update_ingredient(
        self, principal: Principal, ingredient_id: UUID, payload: dict[str, object]
    ) -> IngredientRecord:
        """Apply a partial update and refresh every recipe that uses it.

        Dependent recipes are recomputed before anything is written so a
        failing fan-out leaves the ingredient untouched.
        """
        current = await self.get_ingredient(ingredient_id)
        authorize(principal, current.owner_id)
        unknown = set(payload) - _UPDATABLE_FIELDS
        if unknown:
            field = sorted(unknown)[0]
            raise ValidationFailed(f"{field} cannot be updated", field=field)

        changes = _clean_fields(payload)
        if "nutrients" in changes:
            ensure_mandatory_nutrients(changes["nutrients"])
        if "name" in changes and changes["name"] != current.name:
            await self._ensure_name_available(changes["name"])

        dependent = []
        if PROPAGATED_FIELDS & changes.keys():
            preview = replace(current, **changes)
            dependent = await self.calculator.plan_ingredient_change(current, preview)

        updated = await self.repository.update_ingredient(ingredient_id, changes)
        await self.calculator.apply(dependent)
        if dependent:
            _logger.info(
                "Ingredient %s update refreshed %s recipes",
                ingredient_id,
                len(dependent),
            )
        return updated

    async def delete_ingredient(
        self, principal: Principal, ingredient_id: UUID
    ) -> IngredientRecord:
        """Delete an ingredient no recipe references."""
        ingredient = await self.get_ingredient(ingredient_id)
        authorize(principal, ingredient.owner_id)
        await self.guard.ensure_ingredient_unreferenced(ingredient_id)
        await self.repository.delete_ingredient(ingredient_id)
        await self.user_repository.remove_reference(
            ingredient.owner_id, "created_ingredients", ingredient_id
        )
        return ingredient

    async def _ensure_name_available(self, name: str) -> None:
        if await self.repository.get_by_name(name) is not None:
            raise Conflict(f"Ingredient '{name}' already exists")


def parse_nutrients(raw: object) -> list[Nutrient]:
    """Coerce a wire nutrient list into domain values."""
    if not isinstance(raw, list):
        raise ValidationFailed("nutrients must be a list", field="nutrients")
    nutrients: list[Nutrient] = []
    for item in raw:
        if isinstance(item, Nutrient):
            nutrients.append(item)
            continue
        if not isinstance(item, dict) or "name" not in item or "amount" not in item:
            raise ValidationFailed(
                "Each nutrient needs a name and an amount", field="nutrients"
            )
        amount = non_negative(item["amount"], "nutrients")
        name = parse_enum(NutrientName, item["name"], "nutrients")
        nutrients.append(Nutrient(name=name, amount=amount))
    return nutrients


def _clean_fields(payload: dict[str, object]) -> dict[str, object]:
    """Normalise the supplied ingredient fields, leaving absent ones absent."""
    fields: dict[str, object] = {}
    if payload.get("name") is not None:
        fields["name"] = normalize_ingredient_name(str(payload["name"]))
    elif "name" in payload:
        raise ValidationFailed("name is required", field="name")
    if payload.get("amount") is not None:
        fields["amount"] = positive(payload["amount"], "amount")
    if payload.get("unit") is not None:
        fields["unit"] = str(payload["unit"]).strip()
    if payload.get("estimated_cost") is not None:
        fields["estimated_cost"] = non_negative(
            payload["estimated_cost"], "estimated_cost"
        )
    if payload.get("food_group") is not None:
        fields["food_group"] = parse_enum(
            FoodGroup, payload["food_group"], "food_group"
        )
    if "allergens" in payload:
        fields["allergens"] = parse_enum_list(
            Allergen, payload["allergens"], "allergens"
        )
    if payload.get("nutrients") is not None:
        fields["nutrients"] = parse_nutrients(payload["nutrients"])
    return fields

