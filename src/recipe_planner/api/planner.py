"""Meal planning, recipe search and consumption endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Request, status

from recipe_planner.api.dependencies import current_principal
from recipe_planner.api.presenters import (
    present_consumption,
    present_menu,
    present_recipe,
)
from recipe_planner.api.schemas import (
    ConsumptionRequest,
    PlannerRequest,
    RecipeSearchRequest,
)
from recipe_planner.domain.users import Principal  # noqa: TC001
from recipe_planner.services.consumption import consumption_for

if TYPE_CHECKING:
    from recipe_planner.containers import AppContainer

router = APIRouter(tags=["planner"])


@router.post("/planner", status_code=status.HTTP_201_CREATED)
async def generate_plan(
    body: PlannerRequest,
    request: Request,
    principal: Principal = Depends(current_principal),
) -> dict[str, object]:
    """Generate a meal plan and save it as one of the caller's menus."""
    container: AppContainer = request.app.state.container
    menu = await container.menu_service.plan(principal, body.to_payload())
    return present_menu(menu)


@router.post("/recipeSearchPerIngredients")
async def search_recipes(
    body: RecipeSearchRequest, request: Request
) -> dict[str, object]:
    """Return the recipes that best match a set of ingredients."""
    container: AppContainer = request.app.state.container
    recipes = await container.recipe_service.search_by_ingredients(body.ingredients)
    return {"recipes": [present_recipe(recipe) for recipe in recipes]}


@router.post("/calcNutrientsUser")
async def calculate_nutrients(body: ConsumptionRequest) -> dict[str, object]:
    """Estimate energy needs and per-meal macro targets."""
    return present_consumption(consumption_for(body.to_payload()))
