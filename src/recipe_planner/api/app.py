"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from recipe_planner.api.ingredients import router as ingredients_router
from recipe_planner.api.menus import router as menus_router
from recipe_planner.api.planner import router as planner_router
from recipe_planner.api.recipes import router as recipes_router
from recipe_planner.api.users import router as users_router
from recipe_planner.app_logging import configure_logging
from recipe_planner.containers import AppContainer
from recipe_planner.domain.errors import (
    Conflict,
    Forbidden,
    NoRecipeAvailable,
    NotFound,
    RecipePlannerError,
    Unauthenticated,
    Unavailable,
    ValidationFailed,
)

_STATUS_BY_ERROR: dict[type[RecipePlannerError], int] = {
    NotFound: 404,
    ValidationFailed: 422,
    Unauthenticated: 401,
    Forbidden: 403,
    Conflict: 409,
    NoRecipeAvailable: 409,
    Unavailable: 503,
}


def status_for(error: RecipePlannerError) -> int:
    """Return the HTTP status an application error maps to."""
    for error_type in type(error).__mro__:
        if error_type in _STATUS_BY_ERROR:
            return _STATUS_BY_ERROR[error_type]
    return status.HTTP_400_BAD_REQUEST


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(title="Recipe Planner", lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(RecipePlannerError)
    async def handle_application_error(
        request: Request, exc: RecipePlannerError
    ) -> JSONResponse:
        code = status_for(exc)
        if code == status.HTTP_503_SERVICE_UNAVAILABLE:
            logger.warning("%s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=code,
            content={"error": exc.kind, "detail": exc.message, **exc.details()},
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "internal_error", "detail": "Internal server error"},
        )

    app.include_router(users_router)
    app.include_router(ingredients_router)
    app.include_router(recipes_router)
    app.include_router(menus_router)
    app.include_router(planner_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
