from __future__ import annotations

from supplychain_backend.game_logic.actions import GameAction
from supplychain_backend.game_logic.engine import process_day
from supplychain_backend.game_logic.persistence import (
    ClearSessionEffect,
    InMemoryGameSessionStore,
    InMemoryPerformanceStore,
    RecordResultEffect,
    SaveSessionEffect,
    apply_effects,
)
from supplychain_backend.game_logic.scoring import calculate_game_result


def test_in_memory_session_store_round_trip(opening_state) -> None:
    store = InMemoryGameSessionStore()

    assert store.load_state("team-1", 9) is None
    store.save_state("team-1", 9, opening_state)

    assert store.load_state("team-1", 9) == opening_state
    assert store.load_state("team-1", 1) is None
    assert store.delete_state("team-1", 9)
    assert not store.delete_state("team-1", 9)


def test_effects_are_applied_in_order(level, opening_state) -> None:
    sessions = InMemoryGameSessionStore()
    results = InMemoryPerformanceStore()
    state = process_day(opening_state, GameAction(), level)
    result = calculate_game_result(state, level, "team-1")

    apply_effects(
        (
            SaveSessionEffect(state=state),
            RecordResultEffect(result=result),
            ClearSessionEffect(),
        ),
        user_id="team-1",
        level_id=level.id,
        session_store=sessions,
        performance_store=results,
    )

    assert sessions.load_state("team-1", level.id) is None
    assert results.fetch_results("team-1", level.id) == (result,)
    assert results.fetch_results("team-2", level.id) == ()
