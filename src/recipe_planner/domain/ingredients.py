"""Domain models for ingredients."""

from dataclasses import dataclass, field
from uuid import UUID

from recipe_planner.domain.enums import (
    MANDATORY_NUTRIENTS,
    Allergen,
    FoodGroup,
    NutrientName,
    unit_for,
)
from recipe_planner.domain.errors import ValidationFailed


@dataclass(frozen=True)
class Nutrient:
    """Amount of a nutrient, in the unit implied by its name."""

    name: NutrientName
    amount: float

    @property
    def unit(self) -> str:
        return unit_for(self.name)


@dataclass(frozen=True)
class IngredientRecord:
    """Represents an ingredient stored in the database.

    ``amount`` is the reference quantity the cost and nutrient values are
    stated against.
    """

    id: UUID
    name: str
    amount: float
    unit: str
    estimated_cost: float
    food_group: FoodGroup
    owner_id: UUID
    allergens: list[Allergen] = field(default_factory=list)
    nutrients: list[Nutrient] = field(default_factory=list)

    def nutrient_amount(self, name: NutrientName) -> float:
        """Return the amount of a nutrient per reference amount, 0 if absent."""
        return sum(n.amount for n in self.nutrients if n.name == name)


def normalize_ingredient_name(name: str) -> str:
    """Return the canonical (trimmed, lowercase) ingredient name."""
    normalized = name.strip().lower()
    if not normalized:
        raise ValidationFailed("Ingredient name must not be empty", field="name")
    return normalized


def ensure_mandatory_nutrients(nutrients: list[Nutrient]) -> None:
    """Raise when any of the mandatory label nutrients is missing."""
    present = {nutrient.name for nutrient in nutrients}
    missing = [name.value for name in MANDATORY_NUTRIENTS if name not in present]
    if missing:
        raise ValidationFailed(
            "Missing mandatory nutrients: " + ", ".join(missing),
            field="nutrients",
        )
