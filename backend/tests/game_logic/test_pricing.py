from __future__ import annotations

from decimal import Decimal

import pytest

from supplychain_backend.game_logic.configuration import (
    Customer,
    DeliveryOption,
    MaterialRates,
    Supplier,
    TierPolicy,
)
from supplychain_backend.game_logic.pricing import (
    resolve_bracket,
    resolve_customer_revenue,
    resolve_customer_transport_cost,
    resolve_supplier_material_cost,
    resolve_supplier_price,
    resolve_supplier_transport_cost,
)
from supplychain_backend.shared.value_objects import ZERO, MaterialKind

TABLE = {10: Decimal("5.0"), 50: Decimal("4.5"), 100: Decimal("4.0")}


@pytest.mark.parametrize(
    ("quantity", "expected"),
    [(1, "5.0"), (10, "5.0"), (20, "4.5"), (50, "4.5"), (51, "4.0"), (100, "4.0")],
)
def test_covering_policy_picks_smallest_threshold_at_or_above(
    quantity: int, expected: str
) -> None:
    assert resolve_bracket(TABLE, quantity) == Decimal(expected)


@pytest.mark.parametrize(
    ("quantity", "expected"),
    [(10, "5.0"), (20, "5.0"), (50, "4.5"), (99, "4.5"), (500, "4.0")],
)
def test_floor_policy_picks_largest_threshold_at_or_below(
    quantity: int, expected: str
) -> None:
    assert resolve_bracket(TABLE, quantity, TierPolicy.FLOOR) == Decimal(expected)


def test_bracket_outside_table_resolves_to_none() -> None:
    assert resolve_bracket(TABLE, 101) is None
    assert resolve_bracket(TABLE, 5, TierPolicy.FLOOR) is None
    assert resolve_bracket({}, 5) is None


def test_zero_quantity_always_costs_nothing() -> None:
    supplier = Supplier(
        id=1,
        name="Tiered",
        price_tiers={MaterialKind.PATTY: TABLE},
        shipment_prices={MaterialKind.PATTY: {50: Decimal(116)}},
    )
    customer = Customer(
        id=1,
        name="Diner",
        price_per_unit=Decimal(25),
        default_transport_cost=Decimal(99),
    )

    assert resolve_supplier_price(supplier, MaterialKind.PATTY, 0) == ZERO
    assert resolve_supplier_transport_cost(supplier, MaterialKind.PATTY, 0) == ZERO
    assert resolve_customer_transport_cost(customer, 0) == ZERO
    assert resolve_customer_revenue(customer, 0) == (ZERO, ZERO, ZERO)


def test_supplier_price_falls_back_to_base_prices(level) -> None:
    supplier = Supplier(
        id=2,
        name="Flat",
        material_prices={MaterialKind.CHEESE: Decimal("1.5")},
        price_tiers={MaterialKind.PATTY: TABLE},
    )
    priced = level.model_copy(
        update={"material_base_prices": MaterialRates(bun=Decimal("2.7"))}
    )

    assert resolve_supplier_price(supplier, MaterialKind.PATTY, 500) == ZERO
    assert resolve_supplier_price(supplier, MaterialKind.CHEESE, 40) == Decimal("1.5")
    assert resolve_supplier_price(
        supplier, MaterialKind.BUN, 40, level=priced
    ) == Decimal("2.7")


def test_material_cost_is_quantity_times_unit_price() -> None:
    supplier = Supplier(id=1, name="Tiered", price_tiers={MaterialKind.PATTY: TABLE})

    cost = resolve_supplier_material_cost(supplier, MaterialKind.PATTY, 20)

    assert cost == Decimal("90.00")


def test_supplier_transport_adds_delivery_option_cost() -> None:
    supplier = Supplier(
        id=1,
        name="Shipper",
        shipment_prices={MaterialKind.BUN: {50: Decimal(89), 100: Decimal(98)}},
    )
    express = DeliveryOption(
        id=2, name="Express", lead_time=1, cost_per_unit=Decimal("0.25")
    )

    plain = resolve_supplier_transport_cost(supplier, MaterialKind.BUN, 100)
    rushed = resolve_supplier_transport_cost(
        supplier, MaterialKind.BUN, 100, delivery_option=express
    )

    assert plain == Decimal("98.00")
    assert rushed == Decimal("123.00")


def test_customer_transport_uses_default_when_no_bracket_matches() -> None:
    customer = Customer(
        id=1,
        name="Diner",
        price_per_unit=Decimal(30),
        transport_costs={5: Decimal(15), 10: Decimal(20)},
        default_transport_cost=Decimal(50),
    )

    assert resolve_customer_transport_cost(customer, 10) == Decimal("20.00")
    assert resolve_customer_transport_cost(customer, 40) == Decimal("50.00")
    assert resolve_customer_revenue(customer, 10) == (
        Decimal("300.00"),
        Decimal("20.00"),
        Decimal("280.00"),
    )
