"""Score derivation and terminal result assembly."""

from __future__ import annotations

from decimal import ROUND_FLOOR, Decimal
from typing import TYPE_CHECKING

from supplychain_backend.game_logic.state import GameResult

if TYPE_CHECKING:
    from supplychain_backend.game_logic.configuration import LevelConfig
    from supplychain_backend.game_logic.state import GameState


def compute_score(
    *,
    cumulative_profit: Decimal,
    inventory_value: Decimal,
    days_processed: int,
    config: LevelConfig,
) -> int:
    """Return the normalised score bounded to ``[0, config.max_score]``.

    Profit plus the salvage value of remaining stock is scaled down by the
    level's divisor and by the share of the level actually played.
    """
    base = cumulative_profit + inventory_value * config.inventory_salvage_rate
    completion = min(Decimal(1), Decimal(days_processed) / config.days_to_complete)
    raw = (base / config.score_divisor) * completion
    score = int(raw.to_integral_value(rounding=ROUND_FLOOR))
    return max(0, min(score, config.max_score))


def calculate_score(state: GameState, config: LevelConfig) -> int:
    """Return the score for *state*."""
    return compute_score(
        cumulative_profit=state.cumulative_profit,
        inventory_value=state.inventory_value.total(),
        days_processed=state.days_processed,
        config=config,
    )


def calculate_game_result(
    state: GameState, config: LevelConfig, user_id: str
) -> GameResult:
    """Build the terminal :class:`GameResult` for *state*."""
    return GameResult(
        level_id=config.id,
        user_id=user_id,
        final_day=state.day,
        days_played=state.days_processed,
        final_cash=state.cash,
        final_inventory=state.inventory,
        final_inventory_value=state.inventory_value,
        cumulative_profit=state.cumulative_profit,
        score=calculate_score(state, config),
        history=state.history,
    )


__all__ = ["calculate_game_result", "calculate_score", "compute_score"]
