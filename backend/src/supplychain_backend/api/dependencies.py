"""Dependency providers for FastAPI routers."""

from __future__ import annotations

from functools import cache
from typing import Annotated

from fastapi import Depends

from supplychain_backend.database import (
    DatabaseGameSessionStore,
    DatabasePerformanceStore,
    build_database_service,
)
from supplychain_backend.game_logic import (
    GameSessionService,
    InMemoryGameSessionStore,
    InMemoryPerformanceStore,
)
from supplychain_backend.settings import BackendSettings, get_settings

SettingsDep = Annotated[BackendSettings, Depends(get_settings)]


@cache
def _build_game_session_service(
    session_backend: str, database_url: str
) -> GameSessionService:
    """Create the shared service for the configured storage backend."""
    if session_backend == "database":
        database = build_database_service(database_url)
        return GameSessionService(
            DatabaseGameSessionStore(database),
            DatabasePerformanceStore(database),
            unit_of_work=database.session,
        )
    return GameSessionService(InMemoryGameSessionStore(), InMemoryPerformanceStore())


def get_game_session_service(settings: SettingsDep) -> GameSessionService:
    """Return the shared :class:`GameSessionService` instance."""
    return _build_game_session_service(
        settings.session_backend, settings.database_url
    )


GameServiceDep = Annotated[GameSessionService, Depends(get_game_session_service)]

__all__ = ["GameServiceDep", "get_game_session_service"]
