"""SQLAlchemy-backed implementations of the game persistence protocols."""

from __future__ import annotations

from supplychain_backend.database.repositories import (
    GameSessionRepository,
    PerformanceRepository,
)
from supplychain_backend.database.schemas import PerformanceSchema
from supplychain_backend.database.service import DatabaseService  # noqa: TC001
from supplychain_backend.game_logic.state import GameResult, GameState


class DatabaseGameSessionStore:
    """Stores game states as JSON in the ``game_sessions`` table."""

    def __init__(self, database: DatabaseService) -> None:
        self._database = database

    def save_state(self, user_id: str, level_id: int, state: GameState) -> None:
        """Upsert *state* for the key."""
        payload = state.model_dump(mode="json", by_alias=True)
        with self._database.session() as session:
            GameSessionRepository(session).upsert(user_id, level_id, payload)

    def load_state(self, user_id: str, level_id: int) -> GameState | None:
        """Return the stored state for the key if any."""
        with self._database.session() as session:
            row = GameSessionRepository(session).get(user_id, level_id)
            if row is None:
                return None
            return GameState.model_validate(row.state)

    def delete_state(self, user_id: str, level_id: int) -> bool:
        """Delete the stored state for the key."""
        with self._database.session() as session:
            return GameSessionRepository(session).delete(user_id, level_id)


class DatabasePerformanceStore:
    """Records finished attempts in the ``performance`` table."""

    def __init__(self, database: DatabaseService) -> None:
        self._database = database

    def record_result(self, result: GameResult) -> None:
        """Insert a row for *result*."""
        payload = result.model_dump(mode="json", by_alias=True)
        history = payload.pop("history")
        with self._database.session() as session:
            PerformanceRepository(session).add(
                PerformanceSchema(
                    user_id=result.user_id,
                    level_id=result.level_id,
                    score=result.score,
                    cumulative_profit=result.cumulative_profit,
                    final_cash=result.final_cash,
                    final_day=result.final_day,
                    final_inventory=payload["finalInventory"],
                    result=payload,
                    history=history,
                )
            )

    def fetch_results(self, user_id: str, level_id: int) -> tuple[GameResult, ...]:
        """Return stored results for the key in insertion order."""
        with self._database.session() as session:
            rows = PerformanceRepository(session).list_for(user_id, level_id)
            return tuple(
                GameResult.model_validate({**row.result, "history": row.history})
                for row in rows
            )


__all__ = ["DatabaseGameSessionStore", "DatabasePerformanceStore"]
