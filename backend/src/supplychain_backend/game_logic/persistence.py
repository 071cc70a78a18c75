"""Persistence abstractions for saved sessions and completed attempts.

The engine never touches storage. It describes what must be persisted as
effects, and the orchestration layer hands those to adapters implementing the
protocols below (in-memory here, SQLAlchemy in :mod:`supplychain_backend.database`).
"""

from __future__ import annotations

from typing import Literal, Protocol

from pydantic import BaseModel
from pydantic.config import ConfigDict

from supplychain_backend.game_logic.state import GameResult, GameState  # noqa: TC001

SessionKey = tuple[str, int]
"""``(user_id, level_id)`` pair identifying a saved session."""


class SaveSessionEffect(BaseModel):
    """Persist *state* as the caller's current session."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["save_session"] = "save_session"
    state: GameState


class RecordResultEffect(BaseModel):
    """Record a finished attempt."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["record_result"] = "record_result"
    result: GameResult


class ClearSessionEffect(BaseModel):
    """Remove the caller's saved session."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["clear_session"] = "clear_session"


PersistenceEffect = SaveSessionEffect | RecordResultEffect | ClearSessionEffect


class GameSessionStore(Protocol):
    """Protocol describing how in-progress game states are persisted."""

    def save_state(self, user_id: str, level_id: int, state: GameState) -> None:
        """Persist *state*, replacing any previous value for the key."""

    def load_state(self, user_id: str, level_id: int) -> GameState | None:
        """Return the stored state or ``None``."""

    def delete_state(self, user_id: str, level_id: int) -> bool:
        """Remove the stored state and report whether one existed."""


class PerformanceStore(Protocol):
    """Protocol describing how finished attempts are recorded."""

    def record_result(self, result: GameResult) -> None:
        """Append *result* to the stored results."""

    def fetch_results(self, user_id: str, level_id: int) -> tuple[GameResult, ...]:
        """Return results for the key ordered by recording time."""


class InMemoryGameSessionStore:
    """Trivial in-memory implementation of :class:`GameSessionStore`."""

    def __init__(self) -> None:
        self._states: dict[SessionKey, GameState] = {}

    def save_state(self, user_id: str, level_id: int, state: GameState) -> None:
        """Store *state* keyed by ``(user_id, level_id)``."""
        self._states[(user_id, level_id)] = state

    def load_state(self, user_id: str, level_id: int) -> GameState | None:
        """Return the stored state if available."""
        return self._states.get((user_id, level_id))

    def delete_state(self, user_id: str, level_id: int) -> bool:
        """Drop the stored state."""
        return self._states.pop((user_id, level_id), None) is not None


class InMemoryPerformanceStore:
    """Trivial in-memory implementation of :class:`PerformanceStore`."""

    def __init__(self) -> None:
        self._results: dict[SessionKey, list[GameResult]] = {}

    def record_result(self, result: GameResult) -> None:
        """Append *result* to the sequence stored for its key."""
        key = (result.user_id, result.level_id)
        self._results.setdefault(key, []).append(result)

    def fetch_results(self, user_id: str, level_id: int) -> tuple[GameResult, ...]:
        """Return all results stored for the key."""
        return tuple(self._results.get((user_id, level_id), ()))


def apply_effects(
    effects: tuple[PersistenceEffect, ...] | list[PersistenceEffect],
    *,
    user_id: str,
    level_id: int,
    session_store: GameSessionStore,
    performance_store: PerformanceStore,
) -> None:
    """Execute *effects* in order against the given stores."""
    for effect in effects:
        if isinstance(effect, SaveSessionEffect):
            session_store.save_state(user_id, level_id, effect.state)
        elif isinstance(effect, RecordResultEffect):
            performance_store.record_result(effect.result)
        else:
            session_store.delete_state(user_id, level_id)


__all__ = [
    "ClearSessionEffect",
    "GameSessionStore",
    "InMemoryGameSessionStore",
    "InMemoryPerformanceStore",
    "PerformanceStore",
    "PersistenceEffect",
    "RecordResultEffect",
    "SaveSessionEffect",
    "SessionKey",
    "apply_effects",
]
