"""Test configuration and fixtures for the backend test suite."""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Any

import pytest

from supplychain_backend.game_logic.configuration import (
    Customer,
    LevelConfig,
    Supplier,
)
from supplychain_backend.game_logic.engine import initialize_game_state
from supplychain_backend.game_logic.levels import get_level_configuration
from supplychain_backend.game_logic.state import GameState, InventoryLedger
from supplychain_backend.settings import get_settings
from supplychain_backend.shared.value_objects import MaterialKind

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


@pytest.fixture(autouse=True)
def _mock_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Ensure settings are loaded with predictable values during tests."""
    monkeypatch.setenv("SESSION_BACKEND", "memory")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    get_settings.cache_clear()
    get_level_configuration.cache_clear()
    yield
    get_settings.cache_clear()
    get_level_configuration.cache_clear()


def _build_supplier(**overrides: Any) -> Supplier:
    fields: dict[str, Any] = {
        "id": 1,
        "name": "Test Supplier",
        "lead_time": 1,
        "price_tiers": {
            MaterialKind.PATTY: {
                10: Decimal("5.0"),
                50: Decimal("4.5"),
                100: Decimal("4.0"),
            },
            MaterialKind.CHEESE: {10: Decimal(6), 50: Decimal("5.5"), 100: Decimal(5)},
            MaterialKind.BUN: {10: Decimal(3), 50: Decimal("2.5"), 100: Decimal(2)},
            MaterialKind.POTATO: {10: Decimal(4), 50: Decimal("3.5"), 100: Decimal(3)},
        },
    }
    fields.update(overrides)
    return Supplier(**fields)


def _build_customers(
    *, delayed_price: Decimal = Decimal(30), delayed_lead_time: int = 2
) -> tuple[Customer, ...]:
    return (
        Customer(
            id=1,
            name="Immediate Diner",
            lead_time=0,
            price_per_unit=Decimal(25),
            transport_costs={5: Decimal(10), 10: Decimal(15)},
            allowed_shipment_sizes=(5, 10),
        ),
        Customer(
            id=2,
            name="Distant Diner",
            lead_time=delayed_lead_time,
            price_per_unit=delayed_price,
            transport_costs={5: Decimal(15), 10: Decimal(20)},
            allowed_shipment_sizes=(5, 10),
        ),
    )


def _build_level(
    *,
    supplier: dict[str, Any] | None = None,
    delayed_price: Decimal = Decimal(30),
    delayed_lead_time: int = 2,
    **overrides: Any,
) -> LevelConfig:
    fields: dict[str, Any] = {
        "id": 9,
        "name": "Test Level",
        "days_to_complete": 5,
        "initial_cash": Decimal(5000),
        "initial_inventory": InventoryLedger(
            patty=50, cheese=100, bun=100, potato=100, finished_goods=20
        ),
        "production_cost_per_unit": Decimal(10),
        "max_score": 1000,
        "suppliers": (_build_supplier(**(supplier or {})),),
        "customers": _build_customers(
            delayed_price=delayed_price, delayed_lead_time=delayed_lead_time
        ),
    }
    fields.update(overrides)
    return LevelConfig(**fields)


@pytest.fixture
def make_level() -> Callable[..., LevelConfig]:
    """Return a builder for the five-day test level.

    One supplier (id 1, lead time 1, tiered prices, no shipment cost), an
    immediate customer (id 1) and a delayed customer (id 2, lead time 2).
    No holding, overstock or milestone costs unless overridden.
    """
    return _build_level


@pytest.fixture
def level() -> LevelConfig:
    return _build_level()


@pytest.fixture
def opening_state(level: LevelConfig) -> GameState:
    return initialize_game_state(level)
