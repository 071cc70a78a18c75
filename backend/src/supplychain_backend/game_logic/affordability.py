"""Pre-validation of an action's projected cost against available cash."""

from __future__ import annotations

from decimal import Decimal

from pydantic import Field

from supplychain_backend.game_logic.actions import GameAction  # noqa: TC001
from supplychain_backend.game_logic.configuration import LevelConfig  # noqa: TC001
from supplychain_backend.game_logic.engine import simulate_day
from supplychain_backend.game_logic.errors import AffordabilityError
from supplychain_backend.game_logic.state import GameState  # noqa: TC001
from supplychain_backend.shared.logger import get_logger
from supplychain_backend.shared.value_objects import ZERO, Currency, WireModel

logger = get_logger(__name__)


class AffordabilityBreakdown(WireModel):
    """Projected cost components of an action."""

    purchase: Currency = ZERO
    supplier_transport: Currency = ZERO
    production: Currency = ZERO
    holding: Currency = ZERO
    overstock: Currency = ZERO
    restaurant_delivery: Currency = ZERO
    lateness: Currency = ZERO

    def total(self) -> Decimal:
        """Return the sum of every component."""
        return (
            self.purchase
            + self.supplier_transport
            + self.production
            + self.holding
            + self.overstock
            + self.restaurant_delivery
            + self.lateness
        )

    def dominant(self) -> str | None:
        """Return the wire name of the largest non-zero component."""
        fields = type(self).model_fields
        amounts = {
            field.alias or name: getattr(self, name) for name, field in fields.items()
        }
        name, amount = max(amounts.items(), key=lambda item: item[1])
        return name if amount > 0 else None


class AffordabilityReport(WireModel):
    """Outcome of comparing an action's projected cost with available cash."""

    valid: bool
    total_cost: Currency
    holding_cost: Currency
    available_cash: Currency
    cost_breakdown: AffordabilityBreakdown = Field(
        default_factory=AffordabilityBreakdown
    )
    shortfall: Currency = ZERO
    dominant_component: str | None = None
    message: str | None = None
    bypassed: bool = False


def validate_affordability(
    state: GameState, action: GameAction, config: LevelConfig
) -> AffordabilityReport:
    """Project the cost of *action* and compare it with ``state.cash``.

    The projection runs the same pipeline as day processing, so the figures
    match what the transition would book. A zero-cash team submitting only
    sales is always allowed through.
    """
    projection = simulate_day(state, action, config)
    costs = projection.costs
    breakdown = AffordabilityBreakdown(
        purchase=costs.purchases,
        supplier_transport=costs.transport,
        production=costs.production,
        holding=costs.holding,
        overstock=costs.overstock,
        restaurant_delivery=projection.customer_transport_cost,
        lateness=costs.lateness,
    )
    total_cost = breakdown.total()
    available = state.cash

    if action.is_sales_only() and available == ZERO:
        logger.info("Zero-cash sales-only action allowed for day %s", state.day)
        return AffordabilityReport(
            valid=True,
            total_cost=total_cost,
            holding_cost=costs.holding,
            available_cash=available,
            cost_breakdown=breakdown,
            bypassed=True,
        )

    if total_cost <= available:
        return AffordabilityReport(
            valid=True,
            total_cost=total_cost,
            holding_cost=costs.holding,
            available_cash=available,
            cost_breakdown=breakdown,
        )

    shortfall = total_cost - available
    dominant = breakdown.dominant()
    message = (
        f"Insufficient funds: the actions cost {total_cost:.2f} but only "
        f"{available:.2f} is available (short by {shortfall:.2f})."
    )
    if dominant is not None:
        message += f" Largest cost: {dominant}."
    return AffordabilityReport(
        valid=False,
        total_cost=total_cost,
        holding_cost=costs.holding,
        available_cash=available,
        cost_breakdown=breakdown,
        shortfall=shortfall,
        dominant_component=dominant,
        message=message,
    )


def require_affordable(
    state: GameState, action: GameAction, config: LevelConfig
) -> AffordabilityReport:
    """Return the report for *action* or raise :class:`AffordabilityError`."""
    report = validate_affordability(state, action, config)
    if not report.valid:
        logger.info(
            "Rejected unaffordable action on day %s: %s", state.day, report.message
        )
        raise AffordabilityError(report)
    return report


__all__ = [
    "AffordabilityBreakdown",
    "AffordabilityReport",
    "require_affordable",
    "validate_affordability",
]
