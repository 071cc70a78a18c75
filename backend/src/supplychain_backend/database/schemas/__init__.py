"""SQLAlchemy schemas."""

from supplychain_backend.database.schemas.game_session import GameSessionSchema
from supplychain_backend.database.schemas.performance import PerformanceSchema

__all__ = ["GameSessionSchema", "PerformanceSchema"]
