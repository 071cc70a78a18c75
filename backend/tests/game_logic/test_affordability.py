from __future__ import annotations

from decimal import Decimal

import pytest

from supplychain_backend.game_logic.actions import (
    CustomerOrderRequest,
    GameAction,
    SupplierOrder,
)
from supplychain_backend.game_logic.affordability import (
    require_affordable,
    validate_affordability,
)
from supplychain_backend.game_logic.configuration import MaterialRates
from supplychain_backend.game_logic.engine import initialize_game_state, process_day
from supplychain_backend.game_logic.errors import AffordabilityError, ProcessingError
from supplychain_backend.shared.value_objects import ZERO, MaterialKind


def _patty_order(quantity: int) -> SupplierOrder:
    return SupplierOrder(supplier_id=1, purchases={MaterialKind.PATTY: quantity})


def _sale(customer_id: int, quantity: int) -> CustomerOrderRequest:
    return CustomerOrderRequest(customer_id=customer_id, quantity=quantity)


def test_affordable_action_reports_projected_costs(level, opening_state) -> None:
    action = GameAction(
        supplier_orders=(_patty_order(20),),
        production=10,
        customer_orders=(_sale(1, 5),),
    )

    report = validate_affordability(opening_state, action, level)

    assert report.valid
    assert not report.bypassed
    assert report.cost_breakdown.purchase == Decimal("90.00")
    assert report.cost_breakdown.production == Decimal("100.00")
    assert report.cost_breakdown.restaurant_delivery == Decimal("10.00")
    assert report.total_cost == Decimal("200.00")
    assert report.available_cash == Decimal("5000.00")


def test_unaffordable_action_reports_shortfall(level, opening_state) -> None:
    poor = opening_state.model_copy(update={"cash": Decimal("50.00")})
    action = GameAction(supplier_orders=(_patty_order(20),))

    report = validate_affordability(poor, action, level)

    assert not report.valid
    assert report.shortfall == Decimal("40.00")
    assert report.dominant_component == "purchase"
    assert "40.00" in report.message


def test_projected_holding_cost_counts_against_cash(make_level) -> None:
    level = make_level(holding_costs=MaterialRates(finished_goods=Decimal(2)))
    state = initialize_game_state(level).model_copy(
        update={"cash": Decimal("100.00")}
    )
    action = GameAction(production=10)

    report = validate_affordability(state, action, level)

    assert report.holding_cost == Decimal("60.00")
    assert report.total_cost == Decimal("160.00")
    assert not report.valid
    assert report.dominant_component == "production"


def test_rejection_leaves_state_untouched(level, opening_state) -> None:
    poor = opening_state.model_copy(update={"cash": Decimal("10.00")})
    snapshot = poor.model_dump_json()

    with pytest.raises(AffordabilityError) as exc_info:
        require_affordable(poor, GameAction(production=5), level)

    assert poor.model_dump_json() == snapshot
    assert exc_info.value.report.shortfall == Decimal("40.00")
    assert exc_info.value.detail["totalCost"] == 50.0


def test_zero_cash_sales_only_action_is_bypassed(make_level) -> None:
    level = make_level(holding_costs=MaterialRates(finished_goods=Decimal(2)))
    broke = initialize_game_state(level).model_copy(update={"cash": ZERO})
    action = GameAction(customer_orders=(_sale(2, 10),))

    report = require_affordable(broke, action, level)

    assert report.valid
    assert report.bypassed
    assert report.total_cost > ZERO

    with pytest.raises(ProcessingError) as exc_info:
        process_day(broke, action, level)
    assert exc_info.value.original_state is broke


def test_zero_cash_bypass_requires_every_purchase_to_be_zero(
    level, opening_state
) -> None:
    broke = opening_state.model_copy(update={"cash": ZERO})
    action = GameAction(production=1, customer_orders=(_sale(1, 5),))

    report = validate_affordability(broke, action, level)

    assert not report.bypassed
    assert not report.valid


def test_bypass_requires_zero_cash(level, opening_state) -> None:
    action = GameAction(customer_orders=(_sale(1, 5),))

    report = validate_affordability(opening_state, action, level)

    assert report.valid
    assert not report.bypassed
