"""High-level orchestration connecting the engine to external callers.

:class:`GameSessionService` is the façade used by the API layer. It serialises
transitions per ``(user_id, level_id)``, runs validation, affordability and
day processing in order, and applies the resulting persistence effects.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterator  # noqa: TC003
from contextlib import AbstractContextManager, contextmanager, nullcontext
from dataclasses import dataclass, field

from supplychain_backend.game_logic.actions import GameAction, validate_action
from supplychain_backend.game_logic.affordability import require_affordable
from supplychain_backend.game_logic.configuration import LevelConfig  # noqa: TC001
from supplychain_backend.game_logic.engine import (
    DayContext,
    DayProcessor,
    DayTransition,
    initialize_game_state,
)
from supplychain_backend.game_logic.errors import StaleStateError
from supplychain_backend.game_logic.levels import get_level_configuration
from supplychain_backend.game_logic.persistence import (
    ClearSessionEffect,
    GameSessionStore,
    PersistenceEffect,
    PerformanceStore,
    SessionKey,
    apply_effects,
)
from supplychain_backend.game_logic.state import GameResult, GameState  # noqa: TC001
from supplychain_backend.shared.logger import get_logger

logger = get_logger(__name__)


@dataclass
class _SessionLock:
    lock: threading.Lock = field(default_factory=threading.Lock)
    holders: int = 0


class GameSessionService:
    """Coordinate game sessions for the API layer.

    The engine stays pure; this service owns the locks and the stores.
    *unit_of_work* wraps the effects of one transition so storage backends
    can apply them atomically.
    """

    def __init__(
        self,
        session_store: GameSessionStore,
        performance_store: PerformanceStore,
        *,
        level_provider: Callable[[int], LevelConfig] = get_level_configuration,
        processor: DayProcessor | None = None,
        unit_of_work: Callable[[], AbstractContextManager[object]] = nullcontext,
    ) -> None:
        self._session_store = session_store
        self._performance_store = performance_store
        self._level_provider = level_provider
        self._processor = processor or DayProcessor()
        self._unit_of_work = unit_of_work
        self._locks: dict[SessionKey, _SessionLock] = {}
        self._registry_lock = threading.Lock()

    def level(self, level_id: int) -> LevelConfig:
        """Return the configuration for *level_id*."""
        return self._level_provider(level_id)

    def process_day(
        self,
        user_id: str,
        level_id: int,
        state: GameState,
        action: GameAction,
    ) -> DayTransition:
        """Validate and process one day, persisting the outcome on success.

        *state* must match the stored session when one exists; otherwise
        :class:`StaleStateError` is raised. Nothing is persisted when a check
        or processing fails; the exception propagates to the caller.
        """
        config = self.level(level_id)
        with self._session_lock(user_id, level_id):
            self._ensure_latest(user_id, level_id, state)
            validate_action(state, action, config)
            require_affordable(state, action, config)
            transition = self._processor.advance(
                DayContext(
                    user_id=user_id,
                    configuration=config,
                    state=state,
                    action=action,
                )
            )
            self._apply(transition.effects, user_id, level_id)
        logger.info(
            "Processed day %s of level %s for %s (game over: %s)",
            state.day,
            level_id,
            user_id,
            transition.game_over,
        )
        return transition

    def load_state(self, user_id: str, level_id: int) -> GameState:
        """Return the stored state or a fresh opening state for the level."""
        config = self.level(level_id)
        with self._session_lock(user_id, level_id):
            stored = self._session_store.load_state(user_id, level_id)
        if stored is not None:
            return stored
        logger.debug("No saved session for %s on level %s", user_id, level_id)
        return initialize_game_state(config)

    def save_state(self, user_id: str, level_id: int, state: GameState) -> None:
        """Persist *state* as the current session."""
        self.level(level_id)
        with self._session_lock(user_id, level_id):
            self._session_store.save_state(user_id, level_id, state)

    def delete_state(self, user_id: str, level_id: int) -> GameState:
        """Clear the stored session and return a fresh opening state."""
        config = self.level(level_id)
        with self._session_lock(user_id, level_id):
            self._apply((ClearSessionEffect(),), user_id, level_id)
        return initialize_game_state(config)

    def results(self, user_id: str, level_id: int) -> tuple[GameResult, ...]:
        """Return the recorded results for the key."""
        return self._performance_store.fetch_results(user_id, level_id)

    def _ensure_latest(self, user_id: str, level_id: int, state: GameState) -> None:
        stored = self._session_store.load_state(user_id, level_id)
        if stored is None:
            return
        if (stored.day, stored.days_processed, stored.game_over) == (
            state.day,
            state.days_processed,
            state.game_over,
        ):
            return
        logger.warning(
            "Rejected stale state for %s on level %s: day %s submitted, %s stored",
            user_id,
            level_id,
            state.day,
            stored.day,
        )
        msg = (
            f"Game state for day {state.day} is out of date; the saved session "
            f"is on day {stored.day}."
        )
        raise StaleStateError(
            msg, detail={"submittedDay": state.day, "storedDay": stored.day}
        )

    def _apply(
        self, effects: tuple[PersistenceEffect, ...], user_id: str, level_id: int
    ) -> None:
        with self._unit_of_work():
            apply_effects(
                effects,
                user_id=user_id,
                level_id=level_id,
                session_store=self._session_store,
                performance_store=self._performance_store,
            )

    @contextmanager
    def _session_lock(self, user_id: str, level_id: int) -> Iterator[None]:
        """Hold the lock for the key; the entry is dropped once unused."""
        key = (user_id, level_id)
        with self._registry_lock:
            entry = self._locks.get(key)
            if entry is None:
                entry = self._locks[key] = _SessionLock()
            entry.holders += 1
        try:
            with entry.lock:
                yield
        finally:
            with self._registry_lock:
                entry.holders -= 1
                if entry.holders == 0:
                    del self._locks[key]


__all__ = ["GameSessionService"]
