from __future__ import annotations

from decimal import Decimal

import pytest

from supplychain_backend.game_logic.actions import (
    CustomerOrderRequest,
    GameAction,
)
from supplychain_backend.game_logic.engine import initialize_game_state
from supplychain_backend.game_logic.errors import (
    ActionValidationError,
    AffordabilityError,
    StaleStateError,
)
from supplychain_backend.game_logic.orchestration import GameSessionService
from supplychain_backend.game_logic.persistence import (
    InMemoryGameSessionStore,
    InMemoryPerformanceStore,
)


@pytest.fixture
def short_level(make_level):
    return make_level(days_to_complete=2)


@pytest.fixture
def service(short_level) -> GameSessionService:
    return GameSessionService(
        InMemoryGameSessionStore(),
        InMemoryPerformanceStore(),
        level_provider=lambda _level_id: short_level,
    )


def test_load_state_defaults_to_opening_state(service, short_level) -> None:
    assert service.load_state("team-1", short_level.id) == initialize_game_state(
        short_level
    )


def test_processed_day_is_persisted(service, short_level) -> None:
    state = service.load_state("team-1", short_level.id)

    transition = service.process_day(
        "team-1", short_level.id, state, GameAction(production=5)
    )

    assert not transition.game_over
    assert transition.state.day == 2
    assert service.load_state("team-1", short_level.id) == transition.state
    assert service.results("team-1", short_level.id) == ()


def test_final_day_records_result(service, short_level) -> None:
    state = service.load_state("team-1", short_level.id)
    sale = GameAction(
        customer_orders=(CustomerOrderRequest(customer_id=1, quantity=5),)
    )

    state = service.process_day("team-1", short_level.id, state, sale).state
    transition = service.process_day("team-1", short_level.id, state, sale)

    assert transition.game_over
    (result,) = service.results("team-1", short_level.id)
    assert result == transition.result
    assert result.final_day == 2
    assert service.load_state("team-1", short_level.id).game_over


def test_failed_checks_persist_nothing(service, short_level) -> None:
    opening = service.load_state("team-1", short_level.id)
    poor = opening.model_copy(update={"cash": Decimal("5.00")})

    with pytest.raises(AffordabilityError):
        service.process_day("team-1", short_level.id, poor, GameAction(production=5))
    unknown_customer = GameAction(
        customer_orders=(CustomerOrderRequest(customer_id=5, quantity=5),)
    )
    with pytest.raises(ActionValidationError):
        service.process_day("team-1", short_level.id, opening, unknown_customer)

    assert service.load_state("team-1", short_level.id) == opening


def test_delete_resets_to_opening_state(service, short_level) -> None:
    opening = service.load_state("team-1", short_level.id)
    service.save_state(
        "team-1", short_level.id, opening.model_copy(update={"cash": Decimal(1)})
    )

    reset = service.delete_state("team-1", short_level.id)

    assert reset == opening
    assert service.load_state("team-1", short_level.id) == opening


def test_sessions_are_keyed_by_user(service, short_level) -> None:
    state = service.load_state("team-1", short_level.id)
    service.process_day("team-1", short_level.id, state, GameAction())

    assert service.load_state("team-2", short_level.id).day == 1


def test_unknown_level_is_rejected() -> None:
    service = GameSessionService(InMemoryGameSessionStore(), InMemoryPerformanceStore())

    with pytest.raises(KeyError):
        service.load_state("team-1", 42)


def test_stale_state_is_rejected(service, short_level) -> None:
    opening = service.load_state("team-1", short_level.id)
    first = service.process_day(
        "team-1", short_level.id, opening, GameAction(production=5)
    )

    with pytest.raises(StaleStateError) as exc_info:
        service.process_day("team-1", short_level.id, opening, GameAction(production=5))

    assert exc_info.value.detail == {"submittedDay": 1, "storedDay": 2}
    assert service.load_state("team-1", short_level.id) == first.state


def test_session_locks_are_released(service, short_level) -> None:
    state = service.load_state("team-1", short_level.id)
    service.process_day("team-1", short_level.id, state, GameAction())
    service.load_state("team-2", short_level.id)

    assert service._locks == {}
