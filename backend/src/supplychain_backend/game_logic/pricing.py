"""Tiered price and transport-cost resolution."""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

from supplychain_backend.game_logic.configuration import TierPolicy
from supplychain_backend.shared.value_objects import ZERO, quantize_currency

if TYPE_CHECKING:
    from collections.abc import Mapping

    from supplychain_backend.game_logic.configuration import (
        Customer,
        DeliveryOption,
        LevelConfig,
        Supplier,
    )
    from supplychain_backend.shared.value_objects import MaterialKind


def resolve_bracket(
    table: Mapping[int, Decimal],
    quantity: int,
    policy: TierPolicy = TierPolicy.COVERING,
) -> Decimal | None:
    """Return the price of the bracket that applies to *quantity*.

    ``COVERING`` picks the smallest threshold at or above *quantity*;
    ``FLOOR`` picks the largest threshold at or below it. ``None`` means no
    bracket applies.
    """
    if not table or quantity <= 0:
        return None
    if policy is TierPolicy.COVERING:
        candidates = [threshold for threshold in table if threshold >= quantity]
        return table[min(candidates)] if candidates else None
    candidates = [threshold for threshold in table if threshold <= quantity]
    return table[max(candidates)] if candidates else None


def resolve_supplier_price(
    supplier: Supplier,
    material: MaterialKind,
    quantity: int,
    *,
    level: LevelConfig | None = None,
) -> Decimal:
    """Return the unit price *supplier* charges for *quantity* of *material*.

    Falls back to the supplier's base price, then to the level's base price.
    """
    if quantity <= 0:
        return ZERO
    policy = level.tier_policy if level is not None else TierPolicy.COVERING
    tiered = resolve_bracket(supplier.price_tiers.get(material, {}), quantity, policy)
    if tiered is not None:
        return tiered
    base = supplier.material_prices.get(material)
    if base is not None:
        return base
    if level is not None:
        return level.material_base_prices.rate(material)
    return ZERO


def resolve_supplier_transport_cost(
    supplier: Supplier,
    material: MaterialKind,
    quantity: int,
    *,
    level: LevelConfig | None = None,
    delivery_option: DeliveryOption | None = None,
) -> Decimal:
    """Return the shipment cost for *quantity* of *material* from *supplier*."""
    if quantity <= 0:
        return ZERO
    policy = level.tier_policy if level is not None else TierPolicy.COVERING
    shipment = resolve_bracket(
        supplier.shipment_prices.get(material, {}), quantity, policy
    )
    cost = shipment if shipment is not None else ZERO
    if delivery_option is not None:
        cost += delivery_option.cost_per_unit * quantity
    return quantize_currency(cost)


def resolve_supplier_material_cost(
    supplier: Supplier,
    material: MaterialKind,
    quantity: int,
    *,
    level: LevelConfig | None = None,
) -> Decimal:
    """Return ``quantity × unit price`` rounded to currency precision."""
    unit_price = resolve_supplier_price(supplier, material, quantity, level=level)
    return quantize_currency(unit_price * quantity)


def resolve_customer_transport_cost(
    customer: Customer,
    shipment_size: int,
    *,
    level: LevelConfig | None = None,
) -> Decimal:
    """Return the transport cost of shipping *shipment_size* units to *customer*."""
    if shipment_size <= 0:
        return ZERO
    policy = level.tier_policy if level is not None else TierPolicy.COVERING
    tiered = resolve_bracket(customer.transport_costs, shipment_size, policy)
    if tiered is not None:
        return quantize_currency(tiered)
    return quantize_currency(customer.default_transport_cost)


def resolve_customer_revenue(
    customer: Customer,
    quantity: int,
    *,
    level: LevelConfig | None = None,
) -> tuple[Decimal, Decimal, Decimal]:
    """Return ``(gross, transport, net)`` revenue for selling *quantity* units."""
    if quantity <= 0:
        return ZERO, ZERO, ZERO
    gross = quantize_currency(customer.price_per_unit * quantity)
    transport = resolve_customer_transport_cost(customer, quantity, level=level)
    return gross, transport, gross - transport


__all__ = [
    "resolve_bracket",
    "resolve_customer_revenue",
    "resolve_customer_transport_cost",
    "resolve_supplier_material_cost",
    "resolve_supplier_price",
    "resolve_supplier_transport_cost",
]
