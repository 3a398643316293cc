"""Random meal-plan generation over a filtered recipe pool."""

import logging
import random
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from uuid import UUID

from recipe_planner.domain.enums import Allergen, FoodType
from recipe_planner.domain.errors import NoRecipeAvailable, NotFound
from recipe_planner.domain.menus import DayPlan
from recipe_planner.domain.recipes import RecipeRecord
from recipe_planner.services.validation import positive_int

_logger = logging.getLogger(__name__)


def filter_recipes(
    recipes: Iterable[RecipeRecord],
    excluded_ingredients: Iterable[UUID] = (),
    excluded_allergens: Iterable[Allergen] = (),
) -> list[RecipeRecord]:
    """Drop recipes that use an excluded ingredient or carry an excluded allergen."""
    ingredients = set(excluded_ingredients)
    allergens = set(excluded_allergens)
    return [
        recipe
        for recipe in recipes
        if not ingredients.intersection(recipe.ingredient_ids())
        and not allergens.intersection(recipe.allergens)
    ]


@dataclass
class MealPlanGenerator:
    """Draws a starter, a main and a dessert for every day of a plan.

    A recipe is not repeated within its course until every candidate of that
    course has been served once.
    """

    rng: random.Random = field(default_factory=random.Random)

    def generate(
        self,
        recipes: Iterable[RecipeRecord],
        days: int,
        excluded_ingredients: Iterable[UUID] = (),
        excluded_allergens: Iterable[Allergen] = (),
    ) -> list[DayPlan]:
        """Return ``days`` day plans drawn from the eligible recipes."""
        days = positive_int(days, "number_days")
        pool = filter_recipes(recipes, excluded_ingredients, excluded_allergens)
        courses = {
            course: [recipe for recipe in pool if recipe.food_type == course]
            for course in FoodType
        }
        for course, candidates in courses.items():
            if not candidates:
                raise NoRecipeAvailable(course.value)

        served: dict[FoodType, set[UUID]] = {course: set() for course in FoodType}
        plan: list[DayPlan] = []
        for _ in range(days):
            picks = {
                course: self._draw(candidates, served[course])
                for course, candidates in courses.items()
            }
            plan.append(
                DayPlan(
                    starter_id=picks[FoodType.STARTER].id,
                    main_id=picks[FoodType.MAIN].id,
                    dessert_id=picks[FoodType.DESSERT].id,
                )
            )
        _logger.info("Generated %s-day plan from %s recipes", days, len(pool))
        return plan

    def _draw(self, candidates: list[RecipeRecord], served: set[UUID]) -> RecipeRecord:
        fresh = [recipe for recipe in candidates if recipe.id not in served]
        if not fresh:
            fresh = candidates
        choice = self.rng.choice(fresh)
        served.add(choice.id)
        return choice


def average_estimated_cost(
    days: list[DayPlan],
    recipes: Mapping[UUID, RecipeRecord],
    number_services: int,
) -> float:
    """Return the mean daily cost of serving the plan to ``number_services``.

    A day costs the per-serving cost of its three recipes times the number of
    services.
    """
    if not days:
        return 0.0
    total = 0.0
    for day in days:
        for recipe_id in day.recipe_ids():
            recipe = recipes.get(recipe_id)
            if recipe is None:
                raise NotFound(f"Recipe {recipe_id} not found")
            total += recipe.estimated_cost / recipe.servings * number_services
    return total / len(days)
