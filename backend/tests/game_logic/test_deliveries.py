from __future__ import annotations

from decimal import Decimal

from supplychain_backend.game_logic.configuration import (
    Customer,
    DeliveryOption,
    Supplier,
)
from supplychain_backend.game_logic.deliveries import (
    advance_queue,
    draw_lead_time,
    supplier_lead_time,
)
from supplychain_backend.game_logic.state import SupplierPendingOrder
from supplychain_backend.shared.value_objects import MaterialKind


def _order(days_remaining: int, quantity: int = 10) -> SupplierPendingOrder:
    return SupplierPendingOrder(
        supplier_id=1,
        material=MaterialKind.BUN,
        quantity=quantity,
        days_remaining=days_remaining,
        lead_time=3,
        placed_on_day=1,
        material_cost=Decimal(30),
        transport_cost=Decimal(0),
        total_cost=Decimal(30),
    )


def test_advance_resolves_due_orders_and_decrements_others() -> None:
    orders = (_order(1, quantity=5), _order(2), _order(3))

    advance = advance_queue(orders)

    assert [order.quantity for order in advance.resolved] == [5]
    assert [order.days_remaining for order in advance.remaining] == [1, 2]
    assert [order.days_remaining for order in orders] == [1, 2, 3]


def test_advance_preserves_queue_order() -> None:
    orders = (_order(2, quantity=1), _order(1, quantity=2), _order(2, quantity=3))

    advance = advance_queue(orders)

    assert [order.quantity for order in advance.remaining] == [1, 3]


def test_fixed_lead_time_is_returned_unchanged() -> None:
    supplier = Supplier(id=1, name="Fixed", lead_time=2)

    assert draw_lead_time(supplier, rng_seed=7, day=3, material=MaterialKind.BUN) == 2


def test_random_lead_time_is_drawn_from_range_deterministically() -> None:
    customer = Customer(
        id=1, name="Diner", price_per_unit=Decimal(49), lead_time_range=(1, 2, 3)
    )

    draws = [draw_lead_time(customer, rng_seed=11, day=day) for day in range(1, 31)]

    repeated = [draw_lead_time(customer, rng_seed=11, day=day) for day in range(1, 31)]
    assert draws == repeated
    assert set(draws) <= {1, 2, 3}
    assert len(set(draws)) > 1


def test_delivery_option_overrides_supplier_lead_time() -> None:
    supplier = Supplier(id=1, name="Slow", lead_time=3)
    express = DeliveryOption(id=2, name="Express", lead_time=1)

    lead_time = supplier_lead_time(
        supplier,
        rng_seed=0,
        day=1,
        material=MaterialKind.PATTY,
        delivery_option=express,
    )

    assert lead_time == 1
