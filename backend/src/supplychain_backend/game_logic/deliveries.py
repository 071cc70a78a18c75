"""In-transit order queues for supplier and customer deliveries.

Every queued order carries ``days_remaining >= 1``. Advancing a queue by one
day resolves the orders whose counter would reach zero and decrements the
rest, so an order placed on day ``D`` with lead time ``L`` resolves while day
``D + L`` is being processed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, TypeVar

from supplychain_backend.game_logic.configuration import Customer
from supplychain_backend.game_logic.state import (
    CustomerPendingOrder,
    SupplierPendingOrder,
)
from supplychain_backend.shared.rng import DeterministicRandomService

if TYPE_CHECKING:
    from collections.abc import Iterable

    from supplychain_backend.game_logic.configuration import (
        DeliveryOption,
        Supplier,
    )
    from supplychain_backend.shared.value_objects import MaterialKind

_OrderT = TypeVar("_OrderT", SupplierPendingOrder, CustomerPendingOrder)


@dataclass(frozen=True, slots=True)
class QueueAdvance(Generic[_OrderT]):
    """Outcome of advancing a delivery queue by one day."""

    resolved: tuple[_OrderT, ...]
    remaining: tuple[_OrderT, ...]


def advance_queue(orders: Iterable[_OrderT]) -> QueueAdvance[_OrderT]:
    """Resolve orders due today and decrement the others by exactly one day."""
    resolved: list[_OrderT] = []
    remaining: list[_OrderT] = []
    for order in orders:
        if order.days_remaining <= 1:
            resolved.append(order)
        else:
            remaining.append(
                order.model_copy(update={"days_remaining": order.days_remaining - 1})
            )
    return QueueAdvance(resolved=tuple(resolved), remaining=tuple(remaining))


def draw_lead_time(
    entity: Supplier | Customer,
    *,
    rng_seed: int,
    day: int,
    material: MaterialKind | None = None,
) -> int:
    """Return the lead time for an order placed with *entity* on *day*.

    Entities with a ``lead_time_range`` draw from it deterministically, keyed
    by the state's seed, the day, the entity and the material.
    """
    if not entity.lead_time_range:
        return entity.lead_time
    kind = "customer" if isinstance(entity, Customer) else "supplier"
    rng = DeterministicRandomService.for_draw(
        rng_seed, kind, entity.id, day, material.value if material else "-"
    )
    return rng.choice(entity.lead_time_range)


def supplier_lead_time(
    supplier: Supplier,
    *,
    rng_seed: int,
    day: int,
    material: MaterialKind,
    delivery_option: DeliveryOption | None = None,
) -> int:
    """Return the inbound lead time, honouring a selected delivery option."""
    if delivery_option is not None:
        return delivery_option.lead_time
    return draw_lead_time(supplier, rng_seed=rng_seed, day=day, material=material)


__all__ = [
    "QueueAdvance",
    "advance_queue",
    "draw_lead_time",
    "supplier_lead_time",
]
