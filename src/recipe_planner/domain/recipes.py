"""Domain models for recipes."""

from dataclasses import dataclass, field
from uuid import UUID

from recipe_planner.domain.enums import Allergen, FoodType
from recipe_planner.domain.ingredients import Nutrient


@dataclass(frozen=True)
class IngredientUsage:
    """Quantity of an ingredient consumed by a recipe."""

    ingredient_id: UUID
    amount: float


@dataclass(frozen=True)
class RecipeNutrition:
    """Fields derived from a recipe's ingredient usages."""

    estimated_cost: float
    allergens: list[Allergen]
    nutrients: list[Nutrient]


@dataclass(frozen=True)
class RecipeRecord:
    """Represents a recipe stored in the database."""

    id: UUID
    name: str
    servings: int
    preparation_time: float
    food_type: FoodType
    owner_id: UUID
    instructions: list[str] = field(default_factory=list)
    cookware: list[str] = field(default_factory=list)
    ingredients: list[IngredientUsage] = field(default_factory=list)
    estimated_cost: float = 0.0
    allergens: list[Allergen] = field(default_factory=list)
    nutrients: list[Nutrient] = field(default_factory=list)
    comments: str | None = None

    def ingredient_ids(self) -> list[UUID]:
        """Return the distinct ingredient ids in usage order."""
        return list(dict.fromkeys(usage.ingredient_id for usage in self.ingredients))

    def used_amount(self, ingredient_id: UUID) -> float:
        """Return the total amount of an ingredient the recipe consumes."""
        return sum(
            usage.amount
            for usage in self.ingredients
            if usage.ingredient_id == ingredient_id
        )
