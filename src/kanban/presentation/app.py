from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import inject
from fastapi import FastAPI

from src.kanban.infrastructure.sql.orm import DatabaseOrm
from src.kanban.presentation.auth_routes import router as auth_router
from src.kanban.presentation.errors import register_exception_handlers
from src.kanban.presentation.routes import router as tasks_router
from src.kanban.presentation.schemas import HealthResponse
from src.setup.api_config import ApiSettings, get_api_settings

logger = logging.getLogger(__name__)


def create_app(settings: ApiSettings | None = None) -> FastAPI:
    """
    Build the API. Dependencies are resolved through ``inject``, so
    ``configure_di()`` must have run before the first request.
    """
    if settings is None:
        settings = get_api_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        orm = inject.instance(DatabaseOrm)
        if settings.AUTO_CREATE_SCHEMA:
            await orm.create_schema()
            logger.info("Database schema ready")
        yield
        await orm.dispose()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Kanban task board API",
        lifespan=lifespan,
    )
    app.state.settings = settings
    register_exception_handlers(app)

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    def health() -> HealthResponse:
        return HealthResponse()

    app.include_router(auth_router)
    app.include_router(tasks_router)
    return app
