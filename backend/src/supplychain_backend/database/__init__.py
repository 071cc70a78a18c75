"""Database connectivity helpers, schemas and persistence adapters."""

from supplychain_backend.database.base import BaseSchema
from supplychain_backend.database.repositories import (
    GameSessionRepository,
    PerformanceRepository,
)
from supplychain_backend.database.schemas import GameSessionSchema, PerformanceSchema
from supplychain_backend.database.service import (
    DatabaseService,
    build_database_service,
)
from supplychain_backend.database.stores import (
    DatabaseGameSessionStore,
    DatabasePerformanceStore,
)

__all__ = [
    "BaseSchema",
    "DatabaseGameSessionStore",
    "DatabasePerformanceStore",
    "DatabaseService",
    "GameSessionRepository",
    "GameSessionSchema",
    "PerformanceRepository",
    "PerformanceSchema",
    "build_database_service",
]
