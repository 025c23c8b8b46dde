"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from placar.api.championships import router as championships_router
from placar.api.matches import router as matches_router
from placar.api.standings import router as standings_router
from placar.api.statistics import router as statistics_router
from placar.api.teams import router as teams_router
from placar.config import Settings
from placar.db.engine import create_engine, create_tables, dispose_engine

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: create engine and tables. Shutdown: dispose of the engine."""
    settings: Settings = app.state.settings
    engine = create_engine(settings.database_url)
    await create_tables(engine)
    app.state.engine = engine
    logger.info("placar_started env=%s", settings.placar_env)

    yield

    await dispose_engine(engine)
    logger.info("placar_stopped")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the Placar FastAPI application."""
    settings = settings or Settings()

    logging.basicConfig(
        level=getattr(logging, settings.placar_log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="Placar",
        version="0.1.0",
        description="Championship management: teams, groups, fixtures and standings",
        docs_url="/docs" if settings.docs_enabled else None,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.include_router(championships_router)
    app.include_router(teams_router)
    app.include_router(matches_router)
    app.include_router(standings_router)
    app.include_router(statistics_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok", "env": settings.placar_env}

    return app


app = create_app()
