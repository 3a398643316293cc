"""Recipe endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Request, status

from recipe_planner.api.dependencies import current_principal
from recipe_planner.api.presenters import present_recipe
from recipe_planner.api.schemas import RecipeCreate, RecipeUpdate
from recipe_planner.domain.users import Principal  # noqa: TC001

if TYPE_CHECKING:
    from recipe_planner.containers import AppContainer

router = APIRouter(prefix="/recipe", tags=["recipes"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_recipe(
    body: RecipeCreate,
    request: Request,
    principal: Principal = Depends(current_principal),
) -> dict[str, object]:
    """Create a recipe; cost, allergens and nutrients are derived."""
    container: AppContainer = request.app.state.container
    recipe = await container.recipe_service.create_recipe(principal, body.to_payload())
    return present_recipe(recipe)


@router.get("")
async def list_recipes(request: Request, name: str | None = None) -> dict[str, object]:
    """Return every recipe, or those with the given name."""
    container: AppContainer = request.app.state.container
    recipes = await container.recipe_service.list_recipes(name)
    return {"recipes": [present_recipe(recipe) for recipe in recipes]}


@router.get("/{recipe_id}")
async def get_recipe(recipe_id: UUID, request: Request) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    return present_recipe(await container.recipe_service.get_recipe(recipe_id))


@router.patch("/{recipe_id}")
async def update_recipe(
    recipe_id: UUID,
    body: RecipeUpdate,
    request: Request,
    principal: Principal = Depends(current_principal),
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    recipe = await container.recipe_service.update_recipe(
        principal, recipe_id, body.to_payload()
    )
    return present_recipe(recipe)


@router.delete("/{recipe_id}")
async def delete_recipe(
    recipe_id: UUID,
    request: Request,
    principal: Principal = Depends(current_principal),
) -> dict[str, object]:
    """Delete a recipe that no menu serves."""
    container: AppContainer = request.app.state.container
    recipe = await container.recipe_service.delete_recipe(principal, recipe_id)
    return present_recipe(recipe)
