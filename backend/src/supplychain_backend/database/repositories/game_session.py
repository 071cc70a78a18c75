"""Repository helpers for saved game sessions."""

from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from supplychain_backend.database.schemas import GameSessionSchema


class GameSessionRepository:
    """Encapsulates persistence operations for :class:`GameSessionSchema`."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, user_id: str, level_id: int) -> GameSessionSchema | None:
        """Return the session row for the key."""
        stmt = select(GameSessionSchema).where(
            GameSessionSchema.user_id == user_id,
            GameSessionSchema.level_id == level_id,
        )
        return self._session.scalar(stmt)

    def upsert(
        self, user_id: str, level_id: int, state: dict[str, Any]
    ) -> GameSessionSchema:
        """Insert or replace the stored state for the key."""
        row = self.get(user_id, level_id)
        if row is None:
            row = GameSessionSchema(user_id=user_id, level_id=level_id, state=state)
            self._session.add(row)
        else:
            row.state = state
        self._session.flush()
        return row

    def delete(self, user_id: str, level_id: int) -> bool:
        """Delete the session row for the key and report whether one existed."""
        stmt = delete(GameSessionSchema).where(
            GameSessionSchema.user_id == user_id,
            GameSessionSchema.level_id == level_id,
        )
        result = self._session.execute(stmt)
        return bool(result.rowcount)
