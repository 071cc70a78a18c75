"""Repository helpers for finished level attempts."""

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from supplychain_backend.database.schemas import PerformanceSchema


class PerformanceRepository:
    """Encapsulates persistence operations for :class:`PerformanceSchema`."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def add(self, performance: PerformanceSchema) -> PerformanceSchema:
        """Add a finished attempt to the database."""
        self._session.add(performance)
        self._session.flush()
        return performance

    def list_for(self, user_id: str, level_id: int) -> Sequence[PerformanceSchema]:
        """Return attempts for the key ordered by insertion."""
        stmt = (
            select(PerformanceSchema)
            .where(
                PerformanceSchema.user_id == user_id,
                PerformanceSchema.level_id == level_id,
            )
            .order_by(PerformanceSchema.id)
        )
        return self._session.scalars(stmt).all()
