"""Static per-level configuration objects for the supply-chain game."""

from __future__ import annotations

from decimal import Decimal
from enum import StrEnum

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from supplychain_backend.game_logic.state import InventoryLedger
from supplychain_backend.shared.value_objects import (
    RAW_MATERIALS,
    ZERO,
    Currency,
    MaterialKind,
    Rate,
    WireModel,
)

PriceTable = dict[int, Rate]
"""Quantity threshold mapped to a price (unit price or shipment cost)."""


class TierPolicy(StrEnum):
    """How a requested quantity is matched against tier thresholds."""

    COVERING = "covering"
    FLOOR = "floor"


class MaterialRates(WireModel):
    """Exhaustive per-material table of decimal rates."""

    patty: Rate = ZERO
    cheese: Rate = ZERO
    bun: Rate = ZERO
    potato: Rate = ZERO
    finished_goods: Rate = ZERO

    def rate(self, material: MaterialKind) -> Decimal:
        """Return the rate configured for *material*."""
        return getattr(self, material.field_name)


class OverstockRule(WireModel):
    """Penalty charged per unit held above ``threshold`` (``None`` = unlimited)."""

    threshold: int | None = Field(default=None, ge=0)
    penalty_per_unit: Rate = ZERO

    def excess(self, quantity: int) -> int:
        """Return how many units of *quantity* sit above the threshold."""
        if self.threshold is None:
            return 0
        return max(0, quantity - self.threshold)


class OverstockTable(WireModel):
    """Overstock rules for every material kind."""

    patty: OverstockRule = Field(default_factory=OverstockRule)
    cheese: OverstockRule = Field(default_factory=OverstockRule)
    bun: OverstockRule = Field(default_factory=OverstockRule)
    potato: OverstockRule = Field(default_factory=OverstockRule)
    finished_goods: OverstockRule = Field(default_factory=OverstockRule)

    def rule(self, material: MaterialKind) -> OverstockRule:
        """Return the overstock rule for *material*."""
        return getattr(self, material.field_name)


class SafetyStockTable(WireModel):
    """Informational minimum stock levels; never enforced by the engine."""

    patty: int = Field(default=0, ge=0)
    cheese: int = Field(default=0, ge=0)
    bun: int = Field(default=0, ge=0)
    potato: int = Field(default=0, ge=0)
    finished_goods: int = Field(default=0, ge=0)

    def threshold(self, material: MaterialKind) -> int:
        """Return the safety-stock threshold for *material*."""
        return getattr(self, material.field_name)

    def shortfalls(self, inventory: InventoryLedger) -> dict[MaterialKind, int]:
        """Return materials currently below their safety stock and by how much."""
        result: dict[MaterialKind, int] = {}
        for material in RAW_MATERIALS:
            missing = self.threshold(material) - inventory.quantity(material)
            if missing > 0:
                result[material] = missing
        return result


class Recipe(WireModel):
    """Raw material units consumed to produce one finished good."""

    patty: int = Field(default=1, ge=0)
    cheese: int = Field(default=3, ge=0)
    bun: int = Field(default=2, ge=0)
    potato: int = Field(default=4, ge=0)

    def units(self, material: MaterialKind) -> int:
        """Return units of *material* needed per finished good."""
        if not material.is_raw:
            msg = "Finished goods are not a recipe ingredient."
            raise ValueError(msg)
        return getattr(self, material.field_name)

    def max_producible(self, inventory: InventoryLedger) -> int | None:
        """Return how many finished goods *inventory* can yield.

        ``None`` means the recipe consumes nothing and output is unbounded.
        """
        limits = [
            inventory.quantity(material) // self.units(material)
            for material in RAW_MATERIALS
            if self.units(material) > 0
        ]
        return min(limits) if limits else None


class Supplier(WireModel):
    """Raw material vendor with lead time, capacity and tiered prices."""

    id: int
    name: str
    description: str | None = None
    lead_time: int = Field(default=0, ge=0)
    lead_time_range: tuple[int, ...] | None = None
    materials: tuple[MaterialKind, ...] = RAW_MATERIALS
    capacity_per_game: dict[MaterialKind, int] = Field(default_factory=dict)
    material_prices: dict[MaterialKind, Rate] = Field(default_factory=dict)
    price_tiers: dict[MaterialKind, PriceTable] = Field(default_factory=dict)
    shipment_prices: dict[MaterialKind, PriceTable] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _validate_materials(self) -> Supplier:
        """Ensure only raw materials are sold and lead-time ranges are sane."""
        if any(not material.is_raw for material in self.materials):
            msg = f"Supplier {self.id} cannot sell finished goods."
            raise ValueError(msg)
        if self.lead_time_range is not None and (
            not self.lead_time_range or min(self.lead_time_range) < 0
        ):
            msg = f"Supplier {self.id} has an invalid lead time range."
            raise ValueError(msg)
        return self

    def offers(self, material: MaterialKind) -> bool:
        """Return ``True`` when *material* can be ordered from this supplier."""
        if material not in self.materials:
            return False
        return self.capacity_per_game.get(material) != 0

    def capacity(self, material: MaterialKind) -> int | None:
        """Return the per-game capacity for *material* (``None`` = unlimited)."""
        return self.capacity_per_game.get(material)


class DeliveryMilestone(WireModel):
    """Cumulative delivery requirement due on a given day."""

    day: int = Field(ge=1)
    required_amount: int = Field(ge=0)


class Customer(WireModel):
    """Restaurant buying finished goods at a fixed unit price."""

    id: int
    name: str
    description: str | None = None
    lead_time: int = Field(default=0, ge=0)
    lead_time_range: tuple[int, ...] | None = None
    price_per_unit: Rate
    transport_costs: PriceTable = Field(default_factory=dict)
    default_transport_cost: Rate = ZERO
    allowed_shipment_sizes: tuple[int, ...] = ()
    total_requirement: int = Field(default=0, ge=0)
    delivery_schedule: tuple[DeliveryMilestone, ...] = ()

    def accepts(self, quantity: int) -> bool:
        """Return ``True`` when *quantity* is an allowed shipment size."""
        if not self.allowed_shipment_sizes:
            return quantity > 0
        return quantity in self.allowed_shipment_sizes

    def required_by(self, day: int) -> int:
        """Return the cumulative units owed to this customer by *day*."""
        return sum(
            milestone.required_amount
            for milestone in self.delivery_schedule
            if milestone.day <= day
        )

    def has_milestone_on(self, day: int) -> bool:
        """Return ``True`` when a schedule milestone falls due on *day*."""
        return any(milestone.day == day for milestone in self.delivery_schedule)


class DeliveryOption(WireModel):
    """Inbound shipping mode overriding supplier lead time and transport cost."""

    id: int
    name: str
    lead_time: int = Field(ge=0)
    cost_per_unit: Rate = ZERO
    description: str | None = None


class LevelConfig(WireModel):
    """Immutable representation of a level's static parameters."""

    id: int = Field(ge=0)
    name: str
    description: str = ""
    days_to_complete: int = Field(ge=1)
    initial_cash: Currency = Field(ge=0)
    initial_inventory: InventoryLedger = Field(default_factory=InventoryLedger)
    material_base_prices: MaterialRates = Field(default_factory=MaterialRates)
    holding_costs: MaterialRates = Field(default_factory=MaterialRates)
    overstock: OverstockTable = Field(default_factory=OverstockTable)
    safetystock: SafetyStockTable = Field(default_factory=SafetyStockTable)
    production_cost_per_unit: Rate = Field(ge=0)
    recipe: Recipe = Field(default_factory=Recipe)
    max_score: int = Field(ge=0)
    suppliers: tuple[Supplier, ...] = ()
    customers: tuple[Customer, ...] = ()
    delivery_options: tuple[DeliveryOption, ...] = ()
    tier_policy: TierPolicy = TierPolicy.COVERING
    lateness_penalty_rate: Rate = Field(default=Decimal("0.4"), ge=0)
    score_divisor: Rate = Field(default=Decimal(100), gt=0)
    inventory_salvage_rate: Rate = Field(default=Decimal("0.5"), ge=0)

    @model_validator(mode="after")
    def _validate_unique_ids(self) -> LevelConfig:
        """Ensure supplier, customer and delivery option ids are unique."""
        for label, items in (
            ("supplier", self.suppliers),
            ("customer", self.customers),
            ("delivery option", self.delivery_options),
        ):
            ids = [item.id for item in items]
            if len(ids) != len(set(ids)):
                msg = f"Duplicate {label} ids in level {self.id}."
                raise ValueError(msg)
        return self

    def supplier(self, supplier_id: int) -> Supplier | None:
        """Return the supplier with *supplier_id* if configured."""
        return next((s for s in self.suppliers if s.id == supplier_id), None)

    def customer(self, customer_id: int) -> Customer | None:
        """Return the customer with *customer_id* if configured."""
        return next((c for c in self.customers if c.id == customer_id), None)

    def delivery_option(self, option_id: int) -> DeliveryOption | None:
        """Return the delivery option with *option_id* if configured."""
        return next((o for o in self.delivery_options if o.id == option_id), None)


class LevelOverrides(WireModel):
    """Optional deployment-specific overrides for a level."""

    days_to_complete: int | None = Field(default=None, ge=1)
    initial_cash: Currency | None = Field(default=None, ge=0)
    production_cost_per_unit: Rate | None = Field(default=None, ge=0)
    max_score: int | None = Field(default=None, ge=0)
    tier_policy: TierPolicy | None = None

    def apply(self, config: LevelConfig) -> LevelConfig:
        """Return a copy of *config* with overrides applied."""
        updates = self.model_dump(exclude_none=True)
        if not updates:
            return config
        return LevelConfig.model_validate({**config.model_dump(), **updates})


class LevelDefaults(BaseSettings):
    """Load level overrides shared by every level from the environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SUPPLYCHAIN_LEVEL_",
        extra="ignore",
    )

    days_to_complete: int | None = Field(default=None, ge=1)
    initial_cash: Decimal | None = Field(default=None, ge=0)
    production_cost_per_unit: Decimal | None = Field(default=None, ge=0)
    max_score: int | None = Field(default=None, ge=0)
    tier_policy: TierPolicy | None = None

    def to_overrides(self) -> LevelOverrides:
        """Convert environment defaults into a :class:`LevelOverrides` object."""
        return LevelOverrides(
            days_to_complete=self.days_to_complete,
            initial_cash=self.initial_cash,
            production_cost_per_unit=self.production_cost_per_unit,
            max_score=self.max_score,
            tier_policy=self.tier_policy,
        )


__all__ = [
    "Customer",
    "DeliveryMilestone",
    "DeliveryOption",
    "LevelConfig",
    "LevelDefaults",
    "LevelOverrides",
    "MaterialRates",
    "OverstockRule",
    "OverstockTable",
    "PriceTable",
    "Recipe",
    "SafetyStockTable",
    "Supplier",
    "TierPolicy",
]
