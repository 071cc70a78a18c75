"""Player-centric state containers used by the game logic layer."""

from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal
from typing import Any, Literal

from pydantic import Field, model_validator

from supplychain_backend.shared.logger import get_logger
from supplychain_backend.shared.value_objects import (
    ALL_MATERIALS,
    ZERO,
    Currency,
    MaterialKind,
    WireModel,
    quantize_currency,
)

logger = get_logger(__name__)


class InventoryLedger(WireModel):
    """Tracks unit holdings for every material kind in an immutable fashion."""

    patty: int = Field(default=0, ge=0)
    cheese: int = Field(default=0, ge=0)
    bun: int = Field(default=0, ge=0)
    potato: int = Field(default=0, ge=0)
    finished_goods: int = Field(default=0, ge=0)

    def quantity(self, material: MaterialKind) -> int:
        """Return the stored quantity for *material*."""
        return getattr(self, material.field_name)

    def as_mapping(self) -> dict[MaterialKind, int]:
        """Return holdings keyed by material kind."""
        return {material: self.quantity(material) for material in ALL_MATERIALS}

    @classmethod
    def from_mapping(cls, quantities: Mapping[MaterialKind, int]) -> InventoryLedger:
        """Build a ledger from a partial mapping; absent materials are zero."""
        return cls(**{m.field_name: quantities.get(m, 0) for m in ALL_MATERIALS})


class MaterialValues(WireModel):
    """Currency amount per material kind (valuations and cost breakdowns)."""

    patty: Currency = ZERO
    cheese: Currency = ZERO
    bun: Currency = ZERO
    potato: Currency = ZERO
    finished_goods: Currency = ZERO

    def value(self, material: MaterialKind) -> Decimal:
        """Return the amount recorded for *material*."""
        return getattr(self, material.field_name)

    def total(self) -> Decimal:
        """Return the sum across all materials."""
        return sum((self.value(m) for m in ALL_MATERIALS), start=ZERO)

    def as_mapping(self) -> dict[MaterialKind, Decimal]:
        """Return amounts keyed by material kind."""
        return {material: self.value(material) for material in ALL_MATERIALS}

    @classmethod
    def from_mapping(cls, amounts: Mapping[MaterialKind, Decimal]) -> MaterialValues:
        """Build a breakdown from a partial mapping; absent materials are zero."""
        return cls(**{m.field_name: amounts.get(m, ZERO) for m in ALL_MATERIALS})


class SupplierPendingOrder(WireModel):
    """Raw material shipment in transit from a supplier."""

    supplier_id: int
    supplier_name: str | None = None
    material: MaterialKind
    quantity: int = Field(gt=0)
    days_remaining: int = Field(ge=1)
    lead_time: int = Field(ge=1)
    placed_on_day: int = Field(ge=1)
    material_cost: Currency
    transport_cost: Currency
    total_cost: Currency
    delivery_option_id: int | None = None


class CustomerPendingOrder(WireModel):
    """Finished-goods shipment travelling to a customer.

    Revenue figures are frozen when the order is placed.
    """

    customer_id: int
    customer_name: str | None = None
    quantity: int = Field(gt=0)
    days_remaining: int = Field(ge=1)
    lead_time: int = Field(ge=1)
    placed_on_day: int = Field(ge=1)
    gross_revenue: Currency
    transport_cost: Currency
    net_revenue: Currency


class CostBreakdown(WireModel):
    """Cost components booked for a single day."""

    purchases: Currency = ZERO
    transport: Currency = ZERO
    production: Currency = ZERO
    holding: Currency = ZERO
    overstock: Currency = ZERO
    lateness: Currency = ZERO
    total: Currency = ZERO

    @classmethod
    def build(
        cls,
        *,
        purchases: Decimal = ZERO,
        transport: Decimal = ZERO,
        production: Decimal = ZERO,
        holding: Decimal = ZERO,
        overstock: Decimal = ZERO,
        lateness: Decimal = ZERO,
    ) -> CostBreakdown:
        """Return a breakdown whose ``total`` is the sum of the components."""
        parts = {
            "purchases": quantize_currency(purchases),
            "transport": quantize_currency(transport),
            "production": quantize_currency(production),
            "holding": quantize_currency(holding),
            "overstock": quantize_currency(overstock),
            "lateness": quantize_currency(lateness),
        }
        return cls(**parts, total=sum(parts.values(), start=ZERO))

    @model_validator(mode="after")
    def _validate_total(self) -> CostBreakdown:
        """Ensure ``total`` equals the sum of the components."""
        components = (
            self.purchases
            + self.transport
            + self.production
            + self.holding
            + self.overstock
            + self.lateness
        )
        if self.total != components:
            msg = f"Cost total {self.total} does not match components {components}."
            raise ValueError(msg)
        return self


class LatenessPenalty(WireModel):
    """Penalty charged for units missing at a customer delivery milestone."""

    customer_id: int
    customer_name: str
    day: int = Field(ge=1)
    missed_amount: int = Field(ge=0)
    penalty_amount: Currency


class CustomerDelivery(WireModel):
    """Units and net revenue realised for one customer on one day."""

    customer_id: int
    quantity: int = Field(ge=0)
    revenue: Currency


class SkippedOrder(WireModel):
    """Customer order that could not be honoured when the day was processed."""

    customer_id: int
    quantity: int
    reason: Literal["insufficient_inventory"] = "insufficient_inventory"


class DailyResult(WireModel):
    """Immutable record of one processed day."""

    day: int = Field(ge=1)
    cash: Currency
    inventory: InventoryLedger
    inventory_value: MaterialValues
    holding_costs: MaterialValues
    overstock_costs: MaterialValues
    materials_purchased: InventoryLedger
    arrivals: InventoryLedger = Field(default_factory=InventoryLedger)
    production: int = Field(ge=0)
    production_requested: int = Field(default=0, ge=0)
    sales: int = Field(ge=0)
    revenue: Currency
    costs: CostBreakdown
    profit: Currency
    cumulative_profit: Currency
    score: int
    customer_deliveries: tuple[CustomerDelivery, ...] = ()
    lateness_penalties: tuple[LatenessPenalty, ...] = ()
    skipped_orders: tuple[SkippedOrder, ...] = ()
    safety_stock_shortfalls: dict[MaterialKind, int] = Field(default_factory=dict)
    delivery_option_id: int | None = None


class GameState(WireModel):
    """Aggregate container capturing a team's progress through a level."""

    day: int = Field(default=1, ge=1)
    cash: Currency = Field(ge=0)
    inventory: InventoryLedger
    inventory_value: MaterialValues = Field(default_factory=MaterialValues)
    pending_supplier_orders: tuple[SupplierPendingOrder, ...] = ()
    pending_customer_orders: tuple[CustomerPendingOrder, ...] = ()
    customer_deliveries: dict[int, int] = Field(default_factory=dict)
    supplier_purchases: dict[int, dict[MaterialKind, int]] = Field(
        default_factory=dict
    )
    cumulative_profit: Currency = ZERO
    score: int = 0
    history: tuple[DailyResult, ...] = ()
    game_over: bool = False
    lateness_penalties: tuple[LatenessPenalty, ...] = ()
    rng_seed: int = 0

    @model_validator(mode="before")
    @classmethod
    def _default_missing_inventory_keys(cls, data: Any) -> Any:
        """Fill absent inventory keys with zero, warning about each one."""
        if not isinstance(data, Mapping):
            return data
        for key in ("inventory", "inventoryValue", "inventory_value"):
            section = data.get(key)
            if not isinstance(section, Mapping):
                continue
            missing = [
                material.value
                for material in ALL_MATERIALS
                if material.value not in section and material.field_name not in section
            ]
            if missing:
                logger.warning(
                    "Game state %s is missing %s; defaulting to 0", key, missing
                )
        return data

    @model_validator(mode="after")
    def _validate_history(self) -> GameState:
        """Ensure cumulative profit reconciles with the recorded history."""
        total = sum((entry.profit for entry in self.history), start=ZERO)
        if quantize_currency(total) != self.cumulative_profit:
            msg = (
                f"Cumulative profit {self.cumulative_profit} does not match "
                f"history total {total}."
            )
            raise ValueError(msg)
        return self

    @property
    def days_processed(self) -> int:
        """Return how many days have been processed so far."""
        return len(self.history)

    def purchased_so_far(self, supplier_id: int, material: MaterialKind) -> int:
        """Return units of *material* already bought from *supplier_id*."""
        return self.supplier_purchases.get(supplier_id, {}).get(material, 0)


class GameResult(WireModel):
    """Terminal summary handed to the persistence collaborator."""

    level_id: int
    user_id: str
    final_day: int
    days_played: int
    final_cash: Currency
    final_inventory: InventoryLedger
    final_inventory_value: MaterialValues
    cumulative_profit: Currency
    score: int
    history: tuple[DailyResult, ...]


__all__ = [
    "CostBreakdown",
    "CustomerDelivery",
    "CustomerPendingOrder",
    "DailyResult",
    "GameResult",
    "GameState",
    "InventoryLedger",
    "LatenessPenalty",
    "MaterialValues",
    "SkippedOrder",
    "SupplierPendingOrder",
]
