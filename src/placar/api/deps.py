"""FastAPI dependency injection for settings, database sessions and repository."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from placar.config import Settings
from placar.db.engine import get_session as open_session
from placar.db.models import ChampionshipRow
from placar.db.repository import Repository


async def get_settings(request: Request) -> Settings:
    """Get the settings the app was created with."""
    return request.app.state.settings


async def get_engine(request: Request) -> AsyncEngine:
    """Get the database engine from app state."""
    return request.app.state.engine


async def get_session(
    engine: Annotated[AsyncEngine, Depends(get_engine)],
) -> AsyncGenerator[AsyncSession, None]:
    """Yield an async session."""
    async with open_session(engine) as session:
        yield session


async def get_repo(session: Annotated[AsyncSession, Depends(get_session)]) -> Repository:
    """Get a repository instance bound to the current session."""
    return Repository(session)


SettingsDep = Annotated[Settings, Depends(get_settings)]
RepoDep = Annotated[Repository, Depends(get_repo)]


async def require_championship(repo: Repository, championship_id: str) -> ChampionshipRow:
    """Load a championship or answer 404."""
    championship = await repo.get_championship(championship_id)
    if championship is None:
        raise HTTPException(404, "Championship not found")
    return championship
