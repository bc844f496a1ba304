"""FastAPI application factory."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from miambidi.api.families import router as families_router
from miambidi.api.ingredients import router as ingredients_router
from miambidi.api.meal_plan import router as meal_plan_router
from miambidi.api.messages import denial_message, not_found_message
from miambidi.api.recipes import router as recipes_router
from miambidi.api.shopping_list import router as shopping_list_router
from miambidi.app_logging import configure_logging
from miambidi.config import parse_log_level
from miambidi.containers import AppContainer
from miambidi.errors import NotFoundError, PermissionDeniedError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(parse_log_level(container.settings.log_level))
    logger = logging.getLogger(__name__)

    app = FastAPI(title="MiamBidi")
    app.state.container = container

    app.include_router(families_router)
    app.include_router(recipes_router)
    app.include_router(ingredients_router)
    app.include_router(meal_plan_router)
    app.include_router(shopping_list_router)

    @app.exception_handler(PermissionDeniedError)
    async def permission_denied(
        request: Request, exc: PermissionDeniedError
    ) -> JSONResponse:
        logger.info(
            "Permission denied: path=%s reason=%s", request.url.path, exc.reason.value
        )
        return JSONResponse(
            status_code=status.HTTP_403_FORBIDDEN,
            content={"detail": denial_message(exc), "reason": exc.reason.value},
        )

    @app.exception_handler(NotFoundError)
    async def not_found(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"detail": not_found_message(exc), "reason": f"{exc.kind}_not_found"},
        )

    @app.exception_handler(ValueError)
    async def invalid_value(request: Request, exc: ValueError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": str(exc)},
        )

    @app.exception_handler(Exception)
    async def unhandled(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error: path=%s", request.url.path, exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Service temporairement indisponible. Veuillez réessayer."},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
