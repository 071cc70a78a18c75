"""Static level configuration endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from supplychain_backend.api.dependencies import GameServiceDep  # noqa: TC001
from supplychain_backend.api.models import ErrorResponse
from supplychain_backend.game_logic import LEVEL_IDS, LevelConfig

router = APIRouter(prefix="/api/levels", tags=["levels"])


@router.get(
    "/{level_id}",
    response_model=LevelConfig,
    responses={status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}},
)
def get_level(level_id: int, service: GameServiceDep) -> LevelConfig:
    """Return the static configuration of a level."""
    if level_id not in LEVEL_IDS:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown level {level_id}"
        )
    return service.level(level_id)
