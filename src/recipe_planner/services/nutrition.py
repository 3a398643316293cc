"""Derived cost, allergen and nutrient calculation for recipes."""

import logging
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING
from uuid import UUID

from recipe_planner.domain.enums import Allergen, NutrientName
from recipe_planner.domain.errors import NotFound
from recipe_planner.domain.ingredients import IngredientRecord, Nutrient
from recipe_planner.domain.recipes import (
    IngredientUsage,
    RecipeNutrition,
    RecipeRecord,
)

if TYPE_CHECKING:
    from recipe_planner.services.ingredients import IngredientRepository
    from recipe_planner.services.recipes import RecipeRepository

_logger = logging.getLogger(__name__)

# Ingredient fields whose change must be propagated to dependent recipes.
PROPAGATED_FIELDS = frozenset({"estimated_cost", "amount", "allergens", "nutrients"})


@dataclass
class NutritionCalculator:
    """Keeps recipe-derived fields consistent with their ingredients."""

    ingredient_repository: "IngredientRepository"
    recipe_repository: "RecipeRepository"

    async def build(self, usages: list[IngredientUsage]) -> RecipeNutrition:
        """Compute derived fields for a list of ingredient usages."""
        entries: list[tuple[IngredientRecord, float]] = []
        for usage in usages:
            ingredient = await self.ingredient_repository.get_ingredient(
                usage.ingredient_id
            )
            if ingredient is None:
                raise NotFound(f"Ingredient {usage.ingredient_id} not found")
            entries.append((ingredient, usage.amount))
        return fold_recipe_nutrition(entries)

    async def plan_ingredient_change(
        self, old: IngredientRecord, new: IngredientRecord
    ) -> list[RecipeRecord]:
        """Return every dependent recipe with the change applied, unsaved.

        All reads happen here so that a vanished ingredient aborts the batch
        before any recipe is written.
        """
        recipes = await self.recipe_repository.list_recipes_using_ingredient(old.id)
        removed = [a for a in old.allergens if a not in new.allergens]
        cache: dict[UUID, IngredientRecord] = {}
        updated: list[RecipeRecord] = []
        for recipe in recipes:
            still_carried: set[Allergen] = set()
            if removed:
                still_carried = await self._allergens_of_others(recipe, old.id, cache)
            updated.append(apply_ingredient_change(recipe, old, new, still_carried))
        return updated

    async def apply(self, recipes: list[RecipeRecord]) -> None:
        """Persist derived fields computed by plan_ingredient_change."""
        for recipe in recipes:
            await self.recipe_repository.update_recipe(
                recipe.id,
                {
                    "estimated_cost": recipe.estimated_cost,
                    "allergens": recipe.allergens,
                    "nutrients": recipe.nutrients,
                },
            )

    async def propagate_ingredient_change(
        self, old: IngredientRecord, new: IngredientRecord
    ) -> list[RecipeRecord]:
        """Plan and persist the fan-out of an ingredient change."""
        recipes = await self.plan_ingredient_change(old, new)
        await self.apply(recipes)
        _logger.info(
            "Propagated ingredient %s change to %s recipes", new.id, len(recipes)
        )
        return recipes

    async def _allergens_of_others(
        self,
        recipe: RecipeRecord,
        ingredient_id: UUID,
        cache: dict[UUID, IngredientRecord],
    ) -> set[Allergen]:
        carried: set[Allergen] = set()
        for other_id in recipe.ingredient_ids():
            if other_id == ingredient_id:
                continue
            other = cache.get(other_id)
            if other is None:
                other = await self.ingredient_repository.get_ingredient(other_id)
                if other is None:
                    raise NotFound(
                        f"Ingredient {other_id} used by recipe {recipe.id} not found"
                    )
                cache[other_id] = other
            carried.update(other.allergens)
        return carried


def fold_recipe_nutrition(
    entries: list[tuple[IngredientRecord, float]],
) -> RecipeNutrition:
    """Aggregate cost, allergens and nutrients over (ingredient, amount) pairs.

    Every ingredient value is scaled linearly by ``amount / reference amount``.
    """
    cost = 0.0
    allergens: list[Allergen] = []
    totals: dict[NutrientName, float] = {}
    for ingredient, used in entries:
        ratio = used / ingredient.amount
        cost += ingredient.estimated_cost * ratio
        for allergen in ingredient.allergens:
            if allergen not in allergens:
                allergens.append(allergen)
        for nutrient in ingredient.nutrients:
            totals[nutrient.name] = totals.get(nutrient.name, 0.0) + (
                nutrient.amount * ratio
            )
    return RecipeNutrition(
        estimated_cost=cost,
        allergens=allergens,
        nutrients=_to_nutrients(totals),
    )


def apply_ingredient_change(
    recipe: RecipeRecord,
    old: IngredientRecord,
    new: IngredientRecord,
    still_carried: set[Allergen],
) -> RecipeRecord:
    """Apply the delta between two versions of an ingredient to a recipe.

    ``still_carried`` holds the allergens of the recipe's other ingredients;
    an allergen dropped from the ingredient stays on the recipe if listed there.
    """
    used = recipe.used_amount(old.id)
    old_ratio = used / old.amount
    new_ratio = used / new.amount

    cost_delta = new.estimated_cost * new_ratio - old.estimated_cost * old_ratio
    cost = recipe.estimated_cost + cost_delta

    allergens = list(recipe.allergens)
    for allergen in new.allergens:
        if allergen not in old.allergens and allergen not in allergens:
            allergens.append(allergen)
    for allergen in old.allergens:
        if allergen in new.allergens or allergen in still_carried:
            continue
        if allergen in allergens:
            allergens.remove(allergen)

    totals: dict[NutrientName, float] = {}
    for nutrient in recipe.nutrients:
        totals[nutrient.name] = totals.get(nutrient.name, 0.0) + nutrient.amount
    new_names = [n.name for n in new.nutrients]
    names = dict.fromkeys(new_names + [n.name for n in old.nutrients])
    for name in names:
        delta = (
            new.nutrient_amount(name) * new_ratio
            - old.nutrient_amount(name) * old_ratio
        )
        if name in totals:
            totals[name] += delta
        elif name in new_names:
            totals[name] = delta

    return replace(
        recipe,
        estimated_cost=cost,
        allergens=allergens,
        nutrients=_to_nutrients(totals),
    )


def _to_nutrients(totals: dict[NutrientName, float]) -> list[Nutrient]:
    return [Nutrient(name=name, amount=amount) for name, amount in totals.items()]
