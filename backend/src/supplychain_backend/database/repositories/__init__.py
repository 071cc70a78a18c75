"""Repository classes wrapping SQLAlchemy sessions."""

from supplychain_backend.database.repositories.game_session import (
    GameSessionRepository,
)
from supplychain_backend.database.repositories.performance import (
    PerformanceRepository,
)

__all__ = ["GameSessionRepository", "PerformanceRepository"]
