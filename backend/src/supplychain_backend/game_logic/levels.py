"""Static level definitions and helpers to build per-deployment configurations."""

from __future__ import annotations

from functools import cache
from typing import Any

from supplychain_backend.game_logic.configuration import (
    LevelConfig,
    LevelDefaults,
    LevelOverrides,
)

LEVEL_IDS: tuple[int, ...] = (0, 1, 2, 3)

_INITIAL_INVENTORY = {
    "patty": 100,
    "cheese": 250,
    "bun": 150,
    "potato": 300,
    "finishedGoods": 0,
}

_HOLDING_COSTS = {
    "patty": "1.0",
    "cheese": "0.5",
    "bun": "0.3",
    "potato": "0.2",
    "finishedGoods": "2.0",
}

_SUPPLIERS: tuple[dict[str, Any], ...] = (
    {
        "id": 1,
        "name": "Pink Patty",
        "capacityPerGame": {"patty": 150, "cheese": 500, "bun": 200, "potato": 0},
        "materialPrices": {"patty": "10", "cheese": "1.5", "bun": "3", "potato": "0"},
        "shipmentPrices": {
            "patty": {50: "116", 100: "134"},
            "bun": {50: "89", 100: "98", 200: "134"},
            "cheese": {50: "65", 100: "89", 200: "116"},
            "potato": {50: "98", 100: "134", 200: "134"},
        },
    },
    {
        "id": 2,
        "name": "Brown Sauce",
        "capacityPerGame": {"patty": 200, "cheese": 0, "bun": 200, "potato": 850},
        "materialPrices": {"patty": "13", "cheese": "0", "bun": "2.7", "potato": "1.6"},
        "shipmentPrices": {
            "patty": {50: "121", 100: "139", 200: "186"},
            "bun": {50: "92", 100: "102", 200: "139"},
            "cheese": {50: "68", 100: "92", 200: "121"},
            "potato": {50: "102", 100: "139", 200: "139"},
        },
    },
    {
        "id": 3,
        "name": "Firehouse Foods",
        "capacityPerGame": {"patty": 0, "cheese": 500, "bun": 250, "potato": 700},
        "materialPrices": {
            "patty": "0",
            "cheese": "1.8",
            "bun": "3.4",
            "potato": "1.2",
        },
        "shipmentPrices": {
            "patty": {50: "126", 100: "145", 150: "175"},
            "bun": {50: "96", 100: "106", 150: "126"},
            "cheese": {50: "71", 100: "96", 150: "106"},
            "potato": {50: "106", 100: "145", 150: "145"},
        },
    },
)

_CUSTOMERS: tuple[dict[str, Any], ...] = (
    {
        "id": 1,
        "name": "Yummy Zone",
        "description": "A local restaurant chain with specific delivery requirements.",
        "pricePerUnit": "49",
        "transportCosts": {20: "134", 40: "179", 100: "204"},
        "allowedShipmentSizes": (20, 40, 100),
    },
    {
        "id": 2,
        "name": "Toast-to-go",
        "description": "A quick-service restaurant requiring regular deliveries.",
        "pricePerUnit": "46",
        "transportCosts": {20: "139", 40: "186", 100: "213"},
        "allowedShipmentSizes": (20, 40, 100),
    },
    {
        "id": 3,
        "name": "StudyFuel",
        "description": "A campus food service catering to university students.",
        "pricePerUnit": "47",
        "transportCosts": {20: "145", 40: "194", 100: "222"},
        "allowedShipmentSizes": (20, 40, 100),
    },
)

_OVERSTOCK_FLAT = {
    "patty": {"threshold": 100, "penaltyPerUnit": "2.5"},
    "bun": {"threshold": None, "penaltyPerUnit": "2.5"},
    "cheese": {"threshold": 250, "penaltyPerUnit": "2.5"},
    "potato": {"threshold": 300, "penaltyPerUnit": "2.5"},
    "finishedGoods": {"threshold": 50, "penaltyPerUnit": "2.5"},
}

_OVERSTOCK_TIERED = {
    "patty": {"threshold": 100, "penaltyPerUnit": "2"},
    "bun": {"threshold": None, "penaltyPerUnit": "1"},
    "cheese": {"threshold": 250, "penaltyPerUnit": "1"},
    "potato": {"threshold": 300, "penaltyPerUnit": "0.5"},
    "finishedGoods": {"threshold": 50, "penaltyPerUnit": "3"},
}


def _schedule(*milestones: tuple[int, int]) -> list[dict[str, int]]:
    return [{"day": day, "requiredAmount": amount} for day, amount in milestones]


def _suppliers(
    lead_times: tuple[int, int, int],
    lead_time_ranges: dict[int, tuple[int, ...]] | None = None,
) -> list[dict[str, Any]]:
    ranges = lead_time_ranges or {}
    return [
        {**supplier, "leadTime": lead, "leadTimeRange": ranges.get(supplier["id"])}
        for supplier, lead in zip(_SUPPLIERS, lead_times, strict=True)
    ]


def _customers(
    lead_times: tuple[int, int, int],
    schedules: tuple[list[dict[str, int]], ...],
    *,
    transport_costs: tuple[dict[int, str], ...] | None = None,
    lead_time_ranges: dict[int, tuple[int, ...]] | None = None,
) -> list[dict[str, Any]]:
    ranges = lead_time_ranges or {}
    customers = []
    for index, base in enumerate(_CUSTOMERS):
        schedule = schedules[index]
        customer = {
            **base,
            "leadTime": lead_times[index],
            "leadTimeRange": ranges.get(base["id"]),
            "deliverySchedule": schedule,
            "totalRequirement": sum(item["requiredAmount"] for item in schedule),
        }
        if transport_costs is not None:
            customer["transportCosts"] = transport_costs[index]
        customers.append(customer)
    return customers


def _level(**fields: Any) -> dict[str, Any]:
    return {
        "daysToComplete": 20,
        "initialCash": "2500",
        "initialInventory": _INITIAL_INVENTORY,
        "holdingCosts": _HOLDING_COSTS,
        "productionCostPerUnit": "4",
        "overstock": _OVERSTOCK_TIERED,
        **fields,
    }


_LEVEL_DATA: dict[int, dict[str, Any]] = {
    0: _level(
        id=0,
        name="The First Spark",
        description="Learn the fundamentals of inventory management and supply chain",
        maxScore=1000,
        suppliers=_suppliers((0, 0, 0)),
        customers=_customers(
            (0, 0, 0),
            (
                _schedule((3, 20), (20, 60)),
                _schedule((6, 40), (20, 80)),
                _schedule((8, 60), (20, 40)),
            ),
        ),
        deliveryOptions=[
            {
                "id": 1,
                "name": "Instant Delivery",
                "leadTime": 0,
                "description": "Immediate delivery with no waiting time",
            }
        ],
        overstock=_OVERSTOCK_FLAT,
    ),
    1: _level(
        id=1,
        name="Timing is Everything",
        description=(
            "Manage your burger restaurant supply chain with fixed delivery times"
        ),
        maxScore=1200,
        suppliers=_suppliers((1, 2, 3)),
        customers=_customers(
            (2, 3, 1),
            (
                _schedule((3, 20), (30, 60)),
                _schedule((6, 40), (30, 80)),
                _schedule((8, 60), (30, 40)),
            ),
        ),
    ),
    2: _level(
        id=2,
        name="Advanced Supply Chain",
        description=(
            "Manage your restaurant with multiple suppliers, longer lead times, "
            "and more demand variation."
        ),
        maxScore=1500,
        suppliers=_suppliers((0, 0, 0)),
        customers=_customers(
            (2, 2, 2),
            (
                _schedule((3, 20), (11, 60), (20, 120)),
                _schedule((6, 40), (20, 160)),
                _schedule((8, 60), (12, 100), (20, 140)),
            ),
            transport_costs=(
                {20: "140", 40: "185", 100: "210"},
                {20: "145", 40: "192", 100: "220"},
                {20: "150", 40: "200", 100: "225"},
            ),
        ),
        deliveryOptions=[
            {
                "id": 1,
                "name": "Standard Delivery",
                "leadTime": 3,
                "description": "Standard delivery (3 days)",
            },
            {
                "id": 2,
                "name": "Express Delivery",
                "leadTime": 1,
                "description": "Faster delivery at a higher cost (1 day)",
            },
        ],
    ),
    3: _level(
        id=3,
        name="Uncertainty Unleashed",
        description="Navigate complex supply chains with variable market conditions.",
        daysToComplete=30,
        maxScore=1400,
        suppliers=_suppliers((1, 2, 3), {2: (1, 2, 3)}),
        customers=_customers(
            (2, 3, 1),
            (
                _schedule((3, 20), (11, 60), (20, 0)),
                _schedule((6, 40), (20, 120)),
                _schedule((8, 60), (12, 100), (20, 100)),
            ),
            lead_time_ranges={1: (1, 2, 3)},
        ),
        safetystock={"patty": 20, "bun": 40, "cheese": 60, "potato": 80},
    ),
}


def build_level_configuration(
    level_id: int, overrides: LevelOverrides | None = None
) -> LevelConfig:
    """Return the configuration for *level_id* with optional *overrides* applied."""
    data = _LEVEL_DATA.get(level_id)
    if data is None:
        msg = f"Unknown level {level_id}; expected one of {LEVEL_IDS}."
        raise KeyError(msg)
    config = LevelConfig.model_validate(data)
    if overrides is None:
        return config
    return overrides.apply(config)


@cache
def get_level_configuration(level_id: int) -> LevelConfig:
    """Return the level configuration with environment defaults applied."""
    return build_level_configuration(level_id, LevelDefaults().to_overrides())


__all__ = [
    "LEVEL_IDS",
    "build_level_configuration",
    "get_level_configuration",
]
