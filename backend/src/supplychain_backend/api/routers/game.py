"""Day processing and saved-session endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from supplychain_backend.api.dependencies import GameServiceDep  # noqa: TC001
from supplychain_backend.api.models import (
    AckResponse,
    ErrorResponse,
    GameSessionRequest,
    GameStateResponse,
    ProcessDayRequest,
    ProcessDayResponse,
    SaveGameStateRequest,
)
from supplychain_backend.game_logic import LEVEL_IDS

router = APIRouter(prefix="/api/game", tags=["game"])

_ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
}


def _require_level(level_id: int) -> None:
    if level_id not in LEVEL_IDS:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown level {level_id}"
        )


@router.post(
    "/process-day", response_model=ProcessDayResponse, responses=_ERROR_RESPONSES
)
def process_day(
    payload: ProcessDayRequest, service: GameServiceDep
) -> ProcessDayResponse:
    """Validate the action, advance the game by one day and persist the state."""
    _require_level(payload.level_id)
    transition = service.process_day(
        payload.user_id, payload.level_id, payload.game_state, payload.action
    )
    return ProcessDayResponse(
        game_state=transition.state,
        game_over=transition.game_over,
        daily_result=transition.daily_result,
        result=transition.result,
    )


@router.post(
    "/load-game-state", response_model=GameStateResponse, responses=_ERROR_RESPONSES
)
def load_game_state(
    payload: GameSessionRequest, service: GameServiceDep
) -> GameStateResponse:
    """Return the saved state, or the opening state when nothing is saved."""
    _require_level(payload.level_id)
    state = service.load_state(payload.user_id, payload.level_id)
    return GameStateResponse(game_state=state)


@router.post(
    "/save-game-state", response_model=AckResponse, responses=_ERROR_RESPONSES
)
def save_game_state(
    payload: SaveGameStateRequest, service: GameServiceDep
) -> AckResponse:
    """Store the given state as the current session."""
    _require_level(payload.level_id)
    service.save_state(payload.user_id, payload.level_id, payload.game_state)
    return AckResponse()


@router.post(
    "/delete-game-state", response_model=GameStateResponse, responses=_ERROR_RESPONSES
)
def delete_game_state(
    payload: GameSessionRequest, service: GameServiceDep
) -> GameStateResponse:
    """Reset the session and return a fresh opening state."""
    _require_level(payload.level_id)
    state = service.delete_state(payload.user_id, payload.level_id)
    return GameStateResponse(game_state=state)
