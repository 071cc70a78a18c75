"""Core rules and mechanics that drive the supply-chain game."""

from supplychain_backend.game_logic.actions import (
    CustomerOrderRequest,
    GameAction,
    SupplierOrder,
    validate_action,
)
from supplychain_backend.game_logic.affordability import (
    AffordabilityBreakdown,
    AffordabilityReport,
    require_affordable,
    validate_affordability,
)
from supplychain_backend.game_logic.configuration import (
    Customer,
    DeliveryMilestone,
    DeliveryOption,
    LevelConfig,
    LevelDefaults,
    LevelOverrides,
    Supplier,
    TierPolicy,
)
from supplychain_backend.game_logic.engine import (
    DayContext,
    DayProcessor,
    DayTransition,
    initialize_game_state,
    process_day,
)
from supplychain_backend.game_logic.errors import (
    ActionValidationError,
    AffordabilityError,
    EngineError,
    GameOverError,
    ProcessingError,
    StaleStateError,
    ValidationError,
)
from supplychain_backend.game_logic.levels import (
    LEVEL_IDS,
    build_level_configuration,
    get_level_configuration,
)
from supplychain_backend.game_logic.orchestration import GameSessionService
from supplychain_backend.game_logic.persistence import (
    ClearSessionEffect,
    GameSessionStore,
    InMemoryGameSessionStore,
    InMemoryPerformanceStore,
    PerformanceStore,
    RecordResultEffect,
    SaveSessionEffect,
)
from supplychain_backend.game_logic.scoring import (
    calculate_game_result,
    calculate_score,
)
from supplychain_backend.game_logic.state import (
    DailyResult,
    GameResult,
    GameState,
    InventoryLedger,
    MaterialValues,
)

__all__ = [
    "LEVEL_IDS",
    "ActionValidationError",
    "AffordabilityBreakdown",
    "AffordabilityError",
    "AffordabilityReport",
    "ClearSessionEffect",
    "Customer",
    "CustomerOrderRequest",
    "DailyResult",
    "DayContext",
    "DayProcessor",
    "DayTransition",
    "DeliveryMilestone",
    "DeliveryOption",
    "EngineError",
    "GameAction",
    "GameOverError",
    "GameResult",
    "GameSessionService",
    "GameSessionStore",
    "GameState",
    "InMemoryGameSessionStore",
    "InMemoryPerformanceStore",
    "InventoryLedger",
    "LevelConfig",
    "LevelDefaults",
    "LevelOverrides",
    "MaterialValues",
    "PerformanceStore",
    "ProcessingError",
    "RecordResultEffect",
    "SaveSessionEffect",
    "StaleStateError",
    "Supplier",
    "SupplierOrder",
    "TierPolicy",
    "ValidationError",
    "build_level_configuration",
    "calculate_game_result",
    "calculate_score",
    "get_level_configuration",
    "initialize_game_state",
    "process_day",
    "require_affordable",
    "validate_action",
    "validate_affordability",
]
