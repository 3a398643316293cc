"""User and login endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Request, status

from recipe_planner.api.dependencies import current_principal
from recipe_planner.api.presenters import present_user
from recipe_planner.api.schemas import LoginRequest, UserCreate, UserUpdate
from recipe_planner.domain.users import Principal  # noqa: TC001

if TYPE_CHECKING:
    from recipe_planner.containers import AppContainer

router = APIRouter(tags=["users"])


@router.post("/user", status_code=status.HTTP_201_CREATED)
async def register_user(body: UserCreate, request: Request) -> dict[str, object]:
    """Sign up a regular user."""
    container: AppContainer = request.app.state.container
    user = await container.user_service.register(body.to_payload())
    return present_user(user)


@router.post("/login")
async def login(body: LoginRequest, request: Request) -> dict[str, str]:
    """Exchange credentials for a bearer token."""
    container: AppContainer = request.app.state.container
    token = await container.user_service.login(body.username, body.password)
    return {"token": token}


@router.get("/user")
async def list_users(
    request: Request, principal: Principal = Depends(current_principal)
) -> dict[str, object]:
    """Return every user; administrators only."""
    container: AppContainer = request.app.state.container
    users = await container.user_service.list_users(principal)
    return {"users": [present_user(user) for user in users]}


@router.get("/user/{user_id}")
async def get_user(
    user_id: UUID,
    request: Request,
    principal: Principal = Depends(current_principal),
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    return present_user(await container.user_service.get_user(principal, user_id))


@router.patch("/user/{user_id}")
async def update_user(
    user_id: UUID,
    body: UserUpdate,
    request: Request,
    principal: Principal = Depends(current_principal),
) -> dict[str, object]:
    container: AppContainer = request.app.state.container
    user = await container.user_service.update_user(
        principal, user_id, body.to_payload()
    )
    return present_user(user)


@router.delete("/user/{user_id}")
async def delete_user(
    user_id: UUID,
    request: Request,
    principal: Principal = Depends(current_principal),
) -> dict[str, object]:
    """Delete a user, handing their ingredients and recipes to an admin."""
    container: AppContainer = request.app.state.container
    user = await container.user_service.delete_user(principal, user_id)
    return present_user(user)
