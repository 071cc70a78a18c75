"""Database-backed persistence adapter tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from supplychain_backend.database import (
    BaseSchema,
    DatabaseGameSessionStore,
    DatabasePerformanceStore,
    DatabaseService,
    GameSessionRepository,
)
from supplychain_backend.game_logic.actions import (
    CustomerOrderRequest,
    GameAction,
)
from supplychain_backend.game_logic.engine import initialize_game_state, process_day
from supplychain_backend.game_logic.orchestration import GameSessionService
from supplychain_backend.game_logic.scoring import calculate_game_result
from supplychain_backend.game_logic.state import GameResult  # noqa: TC001

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def database(tmp_path: Path) -> DatabaseService:
    service = DatabaseService(f"sqlite:///{tmp_path / 'supplychain.sqlite'}")
    BaseSchema.metadata.create_all(service.engine)
    return service


def test_session_store_upserts_and_deletes(database, level, opening_state) -> None:
    store = DatabaseGameSessionStore(database)
    advanced = process_day(
        opening_state,
        GameAction(customer_orders=(CustomerOrderRequest(customer_id=2, quantity=5),)),
        level,
    )

    assert store.load_state("team-1", level.id) is None
    store.save_state("team-1", level.id, opening_state)
    store.save_state("team-1", level.id, advanced)

    loaded = store.load_state("team-1", level.id)
    assert loaded is not None
    assert loaded.day == advanced.day
    assert loaded.cash == advanced.cash
    assert loaded.inventory == advanced.inventory
    assert loaded.pending_customer_orders == advanced.pending_customer_orders
    assert loaded.cumulative_profit == advanced.cumulative_profit
    with database.session() as session:
        assert GameSessionRepository(session).get("team-1", level.id) is not None

    assert store.delete_state("team-1", level.id)
    assert not store.delete_state("team-1", level.id)
    assert store.load_state("team-1", level.id) is None


def test_performance_store_keeps_history(database, make_level) -> None:
    level = make_level(days_to_complete=1)
    store = DatabasePerformanceStore(database)
    state = process_day(initialize_game_state(level), GameAction(production=5), level)
    result = calculate_game_result(state, level, "team-1")

    store.record_result(result)
    store.record_result(result)

    stored = store.fetch_results("team-1", level.id)
    assert len(stored) == 2
    assert stored[0].score == result.score
    assert stored[0].final_cash == result.final_cash
    assert stored[0].final_inventory == result.final_inventory
    assert len(stored[0].history) == 1
    assert stored[0].history[0].production == 5
    assert store.fetch_results("team-2", level.id) == ()


def test_session_scope_rolls_back_on_error(database, opening_state) -> None:
    payload = opening_state.model_dump(mode="json", by_alias=True)

    with pytest.raises(RuntimeError), database.session() as session:
        GameSessionRepository(session).upsert("team-1", 0, payload)
        msg = "boom"
        raise RuntimeError(msg)

    with database.session() as session:
        assert GameSessionRepository(session).get("team-1", 0) is None


class _FailingPerformanceStore(DatabasePerformanceStore):
    def record_result(self, result: GameResult) -> None:
        super().record_result(result)
        msg = "performance table unavailable"
        raise RuntimeError(msg)


def _service(database, level, performance_store) -> GameSessionService:
    return GameSessionService(
        DatabaseGameSessionStore(database),
        performance_store,
        level_provider=lambda _level_id: level,
        unit_of_work=database.session,
    )


def test_final_day_effects_commit_together(database, make_level) -> None:
    level = make_level(days_to_complete=1)
    service = _service(database, level, DatabasePerformanceStore(database))

    transition = service.process_day(
        "team-1", level.id, initialize_game_state(level), GameAction()
    )

    assert service.load_state("team-1", level.id).game_over
    (stored,) = service.results("team-1", level.id)
    assert stored.score == transition.result.score


def test_failed_result_insert_discards_terminal_state(database, make_level) -> None:
    level = make_level(days_to_complete=1)
    service = _service(database, level, _FailingPerformanceStore(database))

    with pytest.raises(RuntimeError):
        service.process_day(
            "team-1", level.id, initialize_game_state(level), GameAction()
        )

    assert DatabaseGameSessionStore(database).load_state("team-1", level.id) is None
    assert DatabasePerformanceStore(database).fetch_results("team-1", level.id) == ()
