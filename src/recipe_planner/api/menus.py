"""Menu endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Request, status

from recipe_planner.api.dependencies import current_principal
from recipe_planner.api.presenters import present_menu
from recipe_planner.api.schemas import MenuCreate, MenuUpdate
from recipe_planner.domain.users import Principal  # noqa: TC001

if TYPE_CHECKING:
    from recipe_planner.containers import AppContainer

router = APIRouter(prefix="/menu", tags=["menus"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_menu(
    body: MenuCreate,
    request: Request,
    principal: Principal = Depends(current_principal),
) -> dict[str, object]:
    """Save a menu, generating its days when none are given."""
    container: AppContainer = request.app.state.container
    menu = await container.menu_service.create_menu(principal, body.to_payload())
    return present_menu(menu)


@router.get("")
async def list_menus(request: Request) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    menus = await container.menu_service.list_menus()
    return {"menus": [present_menu(menu) for menu in menus]}


@router.get("/{menu_id}")
async def get_menu(menu_id: UUID, request: Request) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    return present_menu(await container.menu_service.get_menu(menu_id))


@router.patch("/{menu_id}")
async def update_menu(
    menu_id: UUID,
    body: MenuUpdate,
    request: Request,
    principal: Principal = Depends(current_principal),
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    menu = await container.menu_service.update_menu(
        principal, menu_id, body.to_payload()
    )
    return present_menu(menu)


@router.delete("/{menu_id}")
async def delete_menu(
    menu_id: UUID,
    request: Request,
    principal: Principal = Depends(current_principal),
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    menu = await container.menu_service.delete_menu(principal, menu_id)
    return present_menu(menu)
