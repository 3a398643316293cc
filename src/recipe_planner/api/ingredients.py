"""Ingredient endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Request, status

from recipe_planner.api.dependencies import current_principal
from recipe_planner.api.presenters import present_ingredient
from recipe_planner.api.schemas import IngredientCreate, IngredientUpdate
from recipe_planner.domain.users import Principal  # noqa: TC001

if TYPE_CHECKING:
    from recipe_planner.containers import AppContainer

router = APIRouter(prefix="/ingredient", tags=["ingredients"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_ingredient(
    body: IngredientCreate,
    request: Request,
    principal: Principal = Depends(current_principal),
) -> dict[str, object]:
    """Create an ingredient owned by the caller."""
    container: AppContainer = request.app.state.container
    ingredient = await container.ingredient_service.create_ingredient(
        principal, body.to_payload()
    )
    return present_ingredient(ingredient)


@router.get("")
async def list_ingredients(request: Request) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    ingredients = await container.ingredient_service.list_ingredients()
    return {"ingredients": [present_ingredient(item) for item in ingredients]}


@router.get("/{ingredient_id}")
async def get_ingredient(ingredient_id: UUID, request: Request) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    ingredient = await container.ingredient_service.get_ingredient(ingredient_id)
    return present_ingredient(ingredient)


@router.patch("/{ingredient_id}")
async def update_ingredient(
    ingredient_id: UUID,
    body: IngredientUpdate,
    request: Request,
    principal: Principal = Depends(current_principal),
) -> dict[str, object]:
    """Update an ingredient and refresh the recipes that use it."""
    container: AppContainer = request.app.state.container
    ingredient = await container.ingredient_service.update_ingredient(
        principal, ingredient_id, body.to_payload()
    )
    return present_ingredient(ingredient)


@router.delete("/{ingredient_id}")
async def delete_ingredient(
    ingredient_id: UUID,
    request: Request,
    principal: Principal = Depends(current_principal),
) -> dict[str, object]:
    """Delete an ingredient that no recipe uses."""
    container: AppContainer = request.app.state.container
    ingredient = await container.ingredient_service.delete_ingredient(
        principal, ingredient_id
    )
    return present_ingredient(ingredient)
