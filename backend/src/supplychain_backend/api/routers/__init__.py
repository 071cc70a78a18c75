"""Route definitions for public HTTP endpoints."""

from supplychain_backend.api.routers.game import router as game_router
from supplychain_backend.api.routers.levels import router as levels_router

__all__ = ["game_router", "levels_router"]
