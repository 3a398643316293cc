"""Domain models for menus."""

from dataclasses import dataclass, field
from uuid import UUID

from recipe_planner.domain.enums import Allergen, Diet


@dataclass(frozen=True)
class DayPlan:
    """Recipes served on one day of a menu."""

    starter_id: UUID
    main_id: UUID
    dessert_id: UUID
    bread: bool = False

    def recipe_ids(self) -> list[UUID]:
        return [self.starter_id, self.main_id, self.dessert_id]


@dataclass(frozen=True)
class MenuRecord:
    """Represents a saved menu."""

    id: UUID
    title: str
    number_days: int
    number_services: int
    calories_target: float
    average_estimated_cost: float
    owner_id: UUID
    days: list[DayPlan] = field(default_factory=list)
    allergies: list[Allergen] = field(default_factory=list)
    diet: Diet | None = None
    excluded_ingredients: list[UUID] = field(default_factory=list)

    def recipe_ids(self) -> list[UUID]:
        """Return the distinct recipe ids referenced by the menu."""
        ids = [recipe_id for day in self.days for recipe_id in day.recipe_ids()]
        return list(dict.fromkeys(ids))
