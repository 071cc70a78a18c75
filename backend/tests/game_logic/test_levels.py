from __future__ import annotations

from decimal import Decimal

import pytest

from supplychain_backend.game_logic.configuration import LevelOverrides, TierPolicy
from supplychain_backend.game_logic.engine import initialize_game_state
from supplychain_backend.game_logic.levels import (
    LEVEL_IDS,
    build_level_configuration,
    get_level_configuration,
)
from supplychain_backend.shared.value_objects import MaterialKind


@pytest.mark.parametrize("level_id", LEVEL_IDS)
def test_every_level_builds(level_id: int) -> None:
    config = build_level_configuration(level_id)

    assert config.id == level_id
    assert [supplier.id for supplier in config.suppliers] == [1, 2, 3]
    assert [customer.id for customer in config.customers] == [1, 2, 3]
    assert config.initial_cash == Decimal("2500.00")
    assert config.tier_policy is TierPolicy.COVERING
    for customer in config.customers:
        assert customer.total_requirement == sum(
            milestone.required_amount for milestone in customer.delivery_schedule
        )


def test_first_level_uses_instant_delivery() -> None:
    config = build_level_configuration(0)

    assert config.days_to_complete == 20
    assert all(supplier.lead_time == 0 for supplier in config.suppliers)
    (option,) = config.delivery_options
    assert option.lead_time == 0
    assert config.customer(1).total_requirement == 80


def test_last_level_has_random_lead_times() -> None:
    config = build_level_configuration(3)

    assert config.days_to_complete == 30
    assert config.supplier(2).lead_time_range == (1, 2, 3)
    assert config.supplier(1).lead_time_range is None
    assert config.customer(1).lead_time_range == (1, 2, 3)
    assert config.safetystock.threshold(MaterialKind.POTATO) == 80


def test_supplier_capacity_marks_unsold_materials() -> None:
    config = build_level_configuration(1)

    assert not config.supplier(1).offers(MaterialKind.POTATO)
    assert config.supplier(2).capacity(MaterialKind.POTATO) == 850
    assert not config.supplier(3).offers(MaterialKind.PATTY)


def test_unknown_level_raises_key_error() -> None:
    with pytest.raises(KeyError, match="Unknown level 42"):
        build_level_configuration(42)


def test_overrides_are_applied() -> None:
    config = build_level_configuration(
        1, LevelOverrides(days_to_complete=10, tier_policy=TierPolicy.FLOOR)
    )

    assert config.days_to_complete == 10
    assert config.tier_policy is TierPolicy.FLOOR
    assert config.max_score == 1200


def test_environment_defaults_reach_cached_levels(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("SUPPLYCHAIN_LEVEL_INITIAL_CASH", "9000")

    config = get_level_configuration(2)

    assert config.initial_cash == Decimal("9000.00")
    assert get_level_configuration(2) is config
    assert initialize_game_state(config).cash == Decimal("9000.00")
