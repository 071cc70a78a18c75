"""Models used for API request and response payloads."""

from supplychain_backend.api.models.game import (
    AckResponse,
    ErrorResponse,
    GameSessionRequest,
    GameStateResponse,
    ProcessDayRequest,
    ProcessDayResponse,
    SaveGameStateRequest,
)

__all__ = [
    "AckResponse",
    "ErrorResponse",
    "GameSessionRequest",
    "GameStateResponse",
    "ProcessDayRequest",
    "ProcessDayResponse",
    "SaveGameStateRequest",
]
