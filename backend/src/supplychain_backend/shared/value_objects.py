"""Immutable value objects shared across the domain layer."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from enum import StrEnum
from typing import Annotated

from pydantic import AfterValidator, BaseModel, PlainSerializer
from pydantic.alias_generators import to_camel
from pydantic.config import ConfigDict

_CURRENCY_QUANTIZE = Decimal("0.01")

ZERO = Decimal("0.00")


def quantize_currency(value: Decimal | int | float | str) -> Decimal:
    """Round *value* to two decimal places using commercial rounding."""
    decimal_value = value if isinstance(value, Decimal) else Decimal(str(value))
    return decimal_value.quantize(_CURRENCY_QUANTIZE, rounding=ROUND_HALF_UP)


Currency = Annotated[
    Decimal,
    AfterValidator(quantize_currency),
    PlainSerializer(float, return_type=float, when_used="json"),
]
"""Monetary amount with two decimal places, emitted as a JSON number."""

Rate = Annotated[
    Decimal,
    PlainSerializer(float, return_type=float, when_used="json"),
]
"""Unrounded decimal factor (unit prices, rates), emitted as a JSON number."""


class WireModel(BaseModel):
    """Frozen model exposed over the wire with camelCase field aliases."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class MaterialKind(StrEnum):
    """Enumeration of every inventory slot tracked by the engine."""

    PATTY = "patty"
    CHEESE = "cheese"
    BUN = "bun"
    POTATO = "potato"
    FINISHED_GOODS = "finishedGoods"

    @property
    def is_raw(self) -> bool:
        """Return ``True`` for purchasable raw materials."""
        return self is not MaterialKind.FINISHED_GOODS

    @property
    def field_name(self) -> str:
        """Return the snake_case attribute name used on ledger models."""
        if self is MaterialKind.FINISHED_GOODS:
            return "finished_goods"
        return self.value


RAW_MATERIALS: tuple[MaterialKind, ...] = (
    MaterialKind.PATTY,
    MaterialKind.CHEESE,
    MaterialKind.BUN,
    MaterialKind.POTATO,
)

ALL_MATERIALS: tuple[MaterialKind, ...] = (*RAW_MATERIALS, MaterialKind.FINISHED_GOODS)


__all__ = [
    "ALL_MATERIALS",
    "RAW_MATERIALS",
    "ZERO",
    "Currency",
    "MaterialKind",
    "Rate",
    "WireModel",
    "quantize_currency",
]
