"""Daily decisions submitted by a team and their structural validation."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from pydantic import Field, NonNegativeInt, model_validator

from supplychain_backend.game_logic.errors import (
    ActionValidationError,
    GameOverError,
)
from supplychain_backend.shared.value_objects import (
    RAW_MATERIALS,
    MaterialKind,
    WireModel,
)

if TYPE_CHECKING:
    from supplychain_backend.game_logic.configuration import LevelConfig
    from supplychain_backend.game_logic.state import GameState

_LEGACY_PURCHASE_KEYS = {
    f"{material.value}Purchase": material for material in RAW_MATERIALS
}


class SupplierOrder(WireModel):
    """Raw material quantities ordered from one supplier."""

    supplier_id: int
    purchases: dict[MaterialKind, NonNegativeInt] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _accept_flat_purchase_fields(cls, data: Any) -> Any:
        """Fold ``pattyPurchase``-style fields into ``purchases``."""
        if not isinstance(data, Mapping):
            return data
        legacy = {
            material.value: data[key]
            for key, material in _LEGACY_PURCHASE_KEYS.items()
            if key in data
        }
        if not legacy:
            return data
        payload = {k: v for k, v in data.items() if k not in _LEGACY_PURCHASE_KEYS}
        payload["purchases"] = {**legacy, **dict(payload.get("purchases") or {})}
        return payload

    @model_validator(mode="after")
    def _validate_materials(self) -> SupplierOrder:
        """Reject purchases of finished goods."""
        if MaterialKind.FINISHED_GOODS in self.purchases:
            msg = "Finished goods cannot be purchased from suppliers."
            raise ValueError(msg)
        return self

    def quantity(self, material: MaterialKind) -> int:
        """Return the ordered quantity of *material*."""
        return self.purchases.get(material, 0)

    def is_empty(self) -> bool:
        """Return ``True`` when nothing is ordered."""
        return all(quantity == 0 for quantity in self.purchases.values())


class CustomerOrderRequest(WireModel):
    """Finished goods shipment offered to one customer."""

    customer_id: int
    quantity: NonNegativeInt


class GameAction(WireModel):
    """Decisions for the current day only."""

    supplier_orders: tuple[SupplierOrder, ...] = ()
    production: NonNegativeInt = 0
    customer_orders: tuple[CustomerOrderRequest, ...] = ()
    delivery_option_id: int | None = None

    def purchase_totals(self) -> dict[tuple[int, MaterialKind], int]:
        """Return purchased units keyed by ``(supplier_id, material)``."""
        totals: dict[tuple[int, MaterialKind], int] = defaultdict(int)
        for order in self.supplier_orders:
            for material, quantity in order.purchases.items():
                totals[(order.supplier_id, material)] += quantity
        return dict(totals)

    def has_purchases(self) -> bool:
        """Return ``True`` when any supplier order has a positive quantity."""
        return any(not order.is_empty() for order in self.supplier_orders)

    def has_sales(self) -> bool:
        """Return ``True`` when at least one customer order ships units."""
        return any(order.quantity > 0 for order in self.customer_orders)

    def is_sales_only(self) -> bool:
        """Return ``True`` when the action only sells existing stock."""
        return not self.has_purchases() and self.production == 0 and self.has_sales()


def validate_action(state: GameState, action: GameAction, config: LevelConfig) -> None:
    """Reject actions that cannot be applied to *state* under *config*.

    Raises :class:`GameOverError` once the attempt is finished and
    :class:`ActionValidationError` listing every rule the action breaks.
    """
    if (
        state.game_over
        or state.days_processed >= config.days_to_complete
        or state.day > config.days_to_complete
    ):
        msg = f"Level {config.id} is already over; no further days can be processed."
        raise GameOverError(msg, detail={"day": state.day})

    problems: list[str] = []

    if (
        action.delivery_option_id is not None
        and config.delivery_option(action.delivery_option_id) is None
    ):
        problems.append(f"Unknown delivery option {action.delivery_option_id}.")

    for (supplier_id, material), quantity in action.purchase_totals().items():
        if quantity == 0:
            continue
        supplier = config.supplier(supplier_id)
        if supplier is None:
            problems.append(f"Unknown supplier {supplier_id}.")
            continue
        if not supplier.offers(material):
            problems.append(f"{supplier.name} does not sell {material.value}.")
            continue
        capacity = supplier.capacity(material)
        already = state.purchased_so_far(supplier_id, material)
        if capacity is not None and already + quantity > capacity:
            problems.append(
                f"{supplier.name} can supply {capacity - already} more "
                f"{material.value}; {quantity} requested."
            )

    for order in action.customer_orders:
        customer = config.customer(order.customer_id)
        if customer is None:
            problems.append(f"Unknown customer {order.customer_id}.")
            continue
        if order.quantity and not customer.accepts(order.quantity):
            sizes = ", ".join(str(size) for size in customer.allowed_shipment_sizes)
            problems.append(
                f"{customer.name} accepts shipments of {sizes}; "
                f"{order.quantity} requested."
            )

    if problems:
        raise ActionValidationError(
            "; ".join(dict.fromkeys(problems)), detail={"problems": problems}
        )


__all__ = [
    "CustomerOrderRequest",
    "GameAction",
    "SupplierOrder",
    "validate_action",
]
