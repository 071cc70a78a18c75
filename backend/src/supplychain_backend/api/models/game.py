"""Pydantic models for the game HTTP endpoints."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from supplychain_backend.game_logic.actions import GameAction
from supplychain_backend.game_logic.affordability import AffordabilityBreakdown
from supplychain_backend.game_logic.state import DailyResult, GameResult, GameState
from supplychain_backend.shared.value_objects import Currency, WireModel


class GameSessionRequest(WireModel):
    """Identifies the saved session of one user on one level."""

    user_id: str = Field(min_length=1, max_length=128)
    level_id: int = Field(ge=0)


class ProcessDayRequest(GameSessionRequest):
    """Payload asking the server to advance the game by one day."""

    game_state: GameState
    action: GameAction = Field(default_factory=GameAction)


class SaveGameStateRequest(GameSessionRequest):
    """Payload storing a game state as the current session."""

    game_state: GameState


class ProcessDayResponse(WireModel):
    """Response returned after a day has been processed."""

    success: bool = True
    game_state: GameState
    game_over: bool
    daily_result: DailyResult
    result: GameResult | None = None


class GameStateResponse(WireModel):
    """Response carrying the current game state of a session."""

    success: bool = True
    game_state: GameState


class AckResponse(WireModel):
    """Plain acknowledgement."""

    success: bool = True


class ErrorResponse(WireModel):
    """Structured error body for 4xx/5xx responses."""

    error: str
    details: dict[str, Any] | list[Any] | None = None
    total_cost: Currency | None = None
    holding_cost: Currency | None = None
    available_cash: Currency | None = None
    shortfall: Currency | None = None
    dominant_component: str | None = None
    cost_breakdown: AffordabilityBreakdown | None = None
