"""Pydantic request bodies for the REST endpoints.

Fields accept both camelCase and snake_case keys; unknown keys are rejected.
"""

from uuid import UUID

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from recipe_planner.domain.enums import (
    ActivityLevel,
    Allergen,
    Diet,
    FoodGroup,
    FoodType,
    Gender,
    NutrientName,
    Role,
)


class RequestModel(BaseModel):
    model_config = ConfigDict(
        extra="forbid", populate_by_name=True, alias_generator=to_camel
    )

    def to_payload(self) -> dict[str, object]:
        """Return only the fields the client sent, keyed by attribute name."""
        return self.model_dump(exclude_unset=True)


class NutrientIn(RequestModel):
    name: NutrientName
    amount: float


class IngredientCreate(RequestModel):
    name: str
    amount: float | None = None
    unit: str | None = None
    estimated_cost: float
    food_group: FoodGroup
    allergens: list[Allergen] | None = None
    nutrients: list[NutrientIn]


class IngredientUpdate(RequestModel):
    name: str | None = None
    amount: float | None = None
    unit: str | None = None
    estimated_cost: float | None = None
    food_group: FoodGroup | None = None
    allergens: list[Allergen] | None = None
    nutrients: list[NutrientIn] | None = None


class IngredientUsageIn(RequestModel):
    ingredient_id: UUID
    amount: float


class RecipeCreate(RequestModel):
    name: str
    servings: int
    preparation_time: float
    food_type: FoodType
    instructions: list[str]
    comments: str | None = None
    cookware: list[str] | None = None
    ingredients: list[IngredientUsageIn]


class RecipeUpdate(RequestModel):
    name: str | None = None
    servings: int | None = None
    preparation_time: float | None = None
    food_type: FoodType | None = None
    instructions: list[str] | None = None
    comments: str | None = None
    cookware: list[str] | None = None
    ingredients: list[IngredientUsageIn] | None = None


class DayPlanIn(RequestModel):
    starter_id: UUID
    main_id: UUID
    dessert_id: UUID
    bread: bool = False


class MenuCreate(RequestModel):
    """A menu; the days are drawn at random when omitted."""

    title: str
    number_days: int
    number_services: int
    calories_target: float | None = None
    days: list[DayPlanIn] | None = None
    allergies: list[Allergen] | None = None
    diet: Diet | None = None
    excluded_ingredients: list[UUID] | None = None


class MenuUpdate(RequestModel):
    title: str | None = None
    number_days: int | None = None
    number_services: int | None = None
    calories_target: float | None = None
    days: list[DayPlanIn] | None = None
    allergies: list[Allergen] | None = None
    diet: Diet | None = None
    excluded_ingredients: list[UUID] | None = None


class PlannerRequest(RequestModel):
    """Inputs of a generated plan; omitted exclusions come from the profile."""

    number_days: int
    number_services: int
    calories_target: float | None = None
    allergies: list[Allergen] | None = None
    diet: Diet | None = None
    excluded_ingredients: list[UUID] | None = None


class UserCreate(RequestModel):
    username: str
    name: str
    email: str
    password: str
    allergies: list[Allergen] | None = None
    diet: Diet | None = None
    excluded_ingredients: list[UUID] | None = None
    gender: Gender | None = None
    weight: float | None = None
    height: float | None = None
    age: int | None = None
    activity_level: ActivityLevel | None = None


class UserUpdate(RequestModel):
    username: str | None = None
    name: str | None = None
    email: str | None = None
    password: str | None = None
    role: Role | None = None
    allergies: list[Allergen] | None = None
    diet: Diet | None = None
    excluded_ingredients: list[UUID] | None = None
    favorite_recipes: list[UUID] | None = None
    gender: Gender | None = None
    weight: float | None = None
    height: float | None = None
    age: int | None = None
    activity_level: ActivityLevel | None = None


class LoginRequest(RequestModel):
    username: str
    password: str


class RecipeSearchRequest(RequestModel):
    ingredients: list[UUID]


class ConsumptionRequest(RequestModel):
    gender: Gender
    weight: float
    height: float
    age: int
    activity_level: ActivityLevel
