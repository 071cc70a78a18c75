"""Exception taxonomy raised by the day-advancement engine."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from supplychain_backend.game_logic.affordability import AffordabilityReport
    from supplychain_backend.game_logic.state import GameState


class EngineError(Exception):
    """Base class for every error surfaced by the game engine."""

    def __init__(self, message: str, detail: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail or {}


class ValidationError(EngineError):
    """Raised when a game state or action is structurally invalid."""


class ActionValidationError(ValidationError):
    """Raised when an action references unknown entities or breaks level rules."""


class GameOverError(ValidationError):
    """Raised when a transition is requested for a finished level attempt."""


class StaleStateError(ValidationError):
    """Raised when a submitted state is not the latest persisted one."""


class AffordabilityError(EngineError):
    """Raised when the projected cost of an action exceeds available cash."""

    def __init__(self, report: AffordabilityReport) -> None:
        super().__init__(
            report.message or "Insufficient funds for the requested actions.",
            detail=report.model_dump(mode="json", by_alias=True),
        )
        self.report = report


class ProcessingError(EngineError):
    """Raised when processing would violate an internal invariant.

    ``original_state`` is the untouched input state so callers can keep it.
    """

    def __init__(
        self,
        message: str,
        *,
        original_state: GameState,
        detail: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, detail)
        self.original_state = original_state


__all__ = [
    "ActionValidationError",
    "AffordabilityError",
    "EngineError",
    "GameOverError",
    "ProcessingError",
    "StaleStateError",
    "ValidationError",
]
