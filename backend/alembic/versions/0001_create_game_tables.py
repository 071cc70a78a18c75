"""Create game_sessions and performance tables."""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001_create_game_tables"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "game_sessions",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.String(length=128), nullable=False),
        sa.Column("level_id", sa.Integer(), nullable=False),
        sa.Column("state", sa.JSON(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.UniqueConstraint(
            "user_id", "level_id", name="uq_game_sessions_user_level"
        ),
    )
    op.create_index("ix_game_sessions_user_id", "game_sessions", ["user_id"])

    op.create_table(
        "performance",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.String(length=128), nullable=False),
        sa.Column("level_id", sa.Integer(), nullable=False),
        sa.Column("score", sa.Integer(), nullable=False),
        sa.Column("cumulative_profit", sa.Numeric(14, 2), nullable=False),
        sa.Column("final_cash", sa.Numeric(14, 2), nullable=False),
        sa.Column("final_day", sa.Integer(), nullable=False),
        sa.Column("final_inventory", sa.JSON(), nullable=False),
        sa.Column("result", sa.JSON(), nullable=False),
        sa.Column("history", sa.JSON(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index("ix_performance_user_id", "performance", ["user_id"])


def downgrade() -> None:
    op.drop_index("ix_performance_user_id", table_name="performance")
    op.drop_table("performance")
    op.drop_index("ix_game_sessions_user_id", table_name="game_sessions")
    op.drop_table("game_sessions")
