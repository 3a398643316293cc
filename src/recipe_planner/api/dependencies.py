"""Shared FastAPI dependencies."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Header, Request

from recipe_planner.domain.users import Principal  # noqa: TC001
from recipe_planner.services.auth import parse_bearer

if TYPE_CHECKING:
    from recipe_planner.containers import AppContainer


async def current_principal(
    request: Request, authorization: str | None = Header(default=None)
) -> Principal:
    """Resolve the bearer token of the request to a principal."""
    container: AppContainer = request.app.state.container
    return await container.access_guard.authenticate(parse_bearer(authorization))
