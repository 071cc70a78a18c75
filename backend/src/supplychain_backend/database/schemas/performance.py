"""Completed level attempt database schema."""

from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import JSON, DateTime, Integer, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column

from supplychain_backend.database.base import BaseSchema


class PerformanceSchema(BaseSchema):
    """Terminal result of one finished level attempt."""

    __tablename__ = "performance"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    level_id: Mapped[int] = mapped_column(Integer, nullable=False)
    score: Mapped[int] = mapped_column(Integer, nullable=False)
    cumulative_profit: Mapped[Decimal] = mapped_column(
        Numeric(14, 2), nullable=False
    )
    final_cash: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    final_day: Mapped[int] = mapped_column(Integer, nullable=False)
    final_inventory: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    result: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    history: Mapped[list[Any]] = mapped_column(JSON, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
