"""Day-advancement engine turning ``(state, action, level)`` into the next state."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from decimal import Decimal

from pydantic import BaseModel, Field, model_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.config import ConfigDict

from supplychain_backend.game_logic.actions import GameAction, validate_action
from supplychain_backend.game_logic.configuration import LevelConfig
from supplychain_backend.game_logic.deliveries import (
    advance_queue,
    draw_lead_time,
    supplier_lead_time,
)
from supplychain_backend.game_logic.errors import ProcessingError
from supplychain_backend.game_logic.persistence import (
    PersistenceEffect,
    RecordResultEffect,
    SaveSessionEffect,
)
from supplychain_backend.game_logic.pricing import (
    resolve_customer_revenue,
    resolve_supplier_material_cost,
    resolve_supplier_transport_cost,
)
from supplychain_backend.game_logic.scoring import calculate_game_result, compute_score
from supplychain_backend.game_logic.state import (
    CostBreakdown,
    CustomerDelivery,
    CustomerPendingOrder,
    DailyResult,
    GameResult,
    GameState,
    InventoryLedger,
    LatenessPenalty,
    MaterialValues,
    SkippedOrder,
    SupplierPendingOrder,
)
from supplychain_backend.shared.logger import get_logger
from supplychain_backend.shared.value_objects import (
    ALL_MATERIALS,
    RAW_MATERIALS,
    ZERO,
    MaterialKind,
    quantize_currency,
)

logger = get_logger(__name__)

CASH_TOLERANCE = Decimal("0.001")


@dataclass(slots=True)
class _DayWorkspace:
    """Mutable scratch copy of a state while one day is being processed."""

    day: int
    cash: Decimal
    inventory: dict[MaterialKind, int]
    values: dict[MaterialKind, Decimal]
    pending_supplier: list[SupplierPendingOrder]
    pending_customer: list[CustomerPendingOrder]
    customer_deliveries: dict[int, int]
    supplier_purchases: dict[int, dict[MaterialKind, int]]
    revenue: Decimal = ZERO
    purchases: Decimal = ZERO
    transport: Decimal = ZERO
    production_cost: Decimal = ZERO
    customer_transport: Decimal = ZERO
    lateness: Decimal = ZERO
    produced: int = 0
    sold: int = 0
    arrivals: dict[MaterialKind, int] = field(default_factory=lambda: defaultdict(int))
    purchased: dict[MaterialKind, int] = field(
        default_factory=lambda: defaultdict(int)
    )
    realised: dict[int, list] = field(default_factory=dict)
    penalties: list[LatenessPenalty] = field(default_factory=list)
    skipped: list[SkippedOrder] = field(default_factory=list)

    @classmethod
    def from_state(cls, state: GameState) -> _DayWorkspace:
        return cls(
            day=state.day,
            cash=state.cash,
            inventory=state.inventory.as_mapping(),
            values=state.inventory_value.as_mapping(),
            pending_supplier=list(state.pending_supplier_orders),
            pending_customer=list(state.pending_customer_orders),
            customer_deliveries=dict(state.customer_deliveries),
            supplier_purchases={
                supplier_id: dict(materials)
                for supplier_id, materials in state.supplier_purchases.items()
            },
        )

    def receive(self, material: MaterialKind, quantity: int, value: Decimal) -> None:
        self.inventory[material] += quantity
        self.values[material] += value

    def withdraw(self, material: MaterialKind, quantity: int) -> Decimal:
        """Remove *quantity* units at average cost and return the value removed."""
        on_hand = self.inventory[material]
        if quantity > on_hand:
            msg = f"Cannot withdraw {quantity} {material.value}; only {on_hand} held."
            raise ValueError(msg)
        if quantity == on_hand:
            removed = self.values[material]
        else:
            removed = quantize_currency(self.values[material] * quantity / on_hand)
        self.inventory[material] -= quantity
        self.values[material] -= removed
        return removed

    def realise(self, customer_id: int, quantity: int, net_revenue: Decimal) -> None:
        self.cash += net_revenue
        self.revenue += net_revenue
        self.customer_deliveries[customer_id] = (
            self.customer_deliveries.get(customer_id, 0) + quantity
        )
        entry = self.realised.setdefault(customer_id, [0, ZERO])
        entry[0] += quantity
        entry[1] += net_revenue


@dataclass(frozen=True, slots=True)
class DayProjection:
    """Costs and closing balances of a day before invariants are enforced."""

    workspace: _DayWorkspace
    costs: CostBreakdown
    holding_costs: MaterialValues
    overstock_costs: MaterialValues
    production_requested: int

    @property
    def revenue(self) -> Decimal:
        return self.workspace.revenue

    @property
    def profit(self) -> Decimal:
        return self.workspace.revenue - self.costs.total

    @property
    def closing_cash(self) -> Decimal:
        return self.workspace.cash

    @property
    def customer_transport_cost(self) -> Decimal:
        return self.workspace.customer_transport


def _resolve_deliveries(ws: _DayWorkspace) -> None:
    inbound = advance_queue(ws.pending_supplier)
    for order in inbound.resolved:
        ws.receive(order.material, order.quantity, order.total_cost)
        ws.arrivals[order.material] += order.quantity
    ws.pending_supplier = list(inbound.remaining)

    outbound = advance_queue(ws.pending_customer)
    for order in outbound.resolved:
        ws.realise(order.customer_id, order.quantity, order.net_revenue)
    ws.pending_customer = list(outbound.remaining)

    if inbound.resolved or outbound.resolved:
        logger.debug(
            "Day %s: %s supplier and %s customer deliveries resolved",
            ws.day,
            len(inbound.resolved),
            len(outbound.resolved),
        )


def _apply_purchases(
    ws: _DayWorkspace, action: GameAction, config: LevelConfig, rng_seed: int
) -> None:
    delivery_option = (
        config.delivery_option(action.delivery_option_id)
        if action.delivery_option_id is not None
        else None
    )
    for (supplier_id, material), quantity in action.purchase_totals().items():
        if quantity == 0:
            continue
        supplier = config.supplier(supplier_id)
        if supplier is None:
            msg = f"Unknown supplier {supplier_id}."
            raise ValueError(msg)
        material_cost = resolve_supplier_material_cost(
            supplier, material, quantity, level=config
        )
        transport_cost = resolve_supplier_transport_cost(
            supplier,
            material,
            quantity,
            level=config,
            delivery_option=delivery_option,
        )
        total_cost = material_cost + transport_cost
        ws.cash -= total_cost
        ws.purchases += material_cost
        ws.transport += transport_cost
        ws.purchased[material] += quantity
        bought = ws.supplier_purchases.setdefault(supplier_id, {})
        bought[material] = bought.get(material, 0) + quantity

        lead_time = supplier_lead_time(
            supplier,
            rng_seed=rng_seed,
            day=ws.day,
            material=material,
            delivery_option=delivery_option,
        )
        if lead_time == 0:
            ws.receive(material, quantity, total_cost)
            ws.arrivals[material] += quantity
            continue
        ws.pending_supplier.append(
            SupplierPendingOrder(
                supplier_id=supplier.id,
                supplier_name=supplier.name,
                material=material,
                quantity=quantity,
                days_remaining=lead_time,
                lead_time=lead_time,
                placed_on_day=ws.day,
                material_cost=material_cost,
                transport_cost=transport_cost,
                total_cost=total_cost,
                delivery_option_id=action.delivery_option_id,
            )
        )


def _apply_production(ws: _DayWorkspace, requested: int, config: LevelConfig) -> None:
    if requested <= 0:
        return
    limit = config.recipe.max_producible(InventoryLedger.from_mapping(ws.inventory))
    quantity = requested if limit is None else min(requested, limit)
    if quantity < requested:
        logger.warning(
            "Day %s: production capped at %s of %s requested by raw materials",
            ws.day,
            quantity,
            requested,
        )
    if quantity <= 0:
        return
    consumed_value = sum(
        (
            ws.withdraw(material, quantity * config.recipe.units(material))
            for material in RAW_MATERIALS
        ),
        start=ZERO,
    )
    cost = quantize_currency(config.production_cost_per_unit * quantity)
    ws.receive(MaterialKind.FINISHED_GOODS, quantity, consumed_value + cost)
    ws.cash -= cost
    ws.production_cost += cost
    ws.produced = quantity


def _apply_sales(
    ws: _DayWorkspace, action: GameAction, config: LevelConfig, rng_seed: int
) -> None:
    for request in action.customer_orders:
        if request.quantity == 0:
            continue
        customer = config.customer(request.customer_id)
        if customer is None:
            msg = f"Unknown customer {request.customer_id}."
            raise ValueError(msg)
        if request.quantity > ws.inventory[MaterialKind.FINISHED_GOODS]:
            logger.warning(
                "Day %s: skipping order of %s units for customer %s; %s in stock",
                ws.day,
                request.quantity,
                customer.id,
                ws.inventory[MaterialKind.FINISHED_GOODS],
            )
            ws.skipped.append(
                SkippedOrder(customer_id=customer.id, quantity=request.quantity)
            )
            continue

        ws.withdraw(MaterialKind.FINISHED_GOODS, request.quantity)
        gross, transport, net = resolve_customer_revenue(
            customer, request.quantity, level=config
        )
        ws.customer_transport += transport
        ws.sold += request.quantity
        lead_time = draw_lead_time(customer, rng_seed=rng_seed, day=ws.day)
        if lead_time == 0:
            ws.realise(customer.id, request.quantity, net)
            continue
        ws.pending_customer.append(
            CustomerPendingOrder(
                customer_id=customer.id,
                customer_name=customer.name,
                quantity=request.quantity,
                days_remaining=lead_time,
                lead_time=lead_time,
                placed_on_day=ws.day,
                gross_revenue=gross,
                transport_cost=transport,
                net_revenue=net,
            )
        )


def _apply_lateness_penalties(ws: _DayWorkspace, config: LevelConfig) -> None:
    for customer in config.customers:
        if not customer.has_milestone_on(ws.day):
            continue
        required = customer.required_by(ws.day)
        delivered = ws.customer_deliveries.get(customer.id, 0)
        if delivered >= required:
            continue
        missed = required - delivered
        amount = quantize_currency(
            config.lateness_penalty_rate * missed * customer.price_per_unit
        )
        ws.cash -= amount
        ws.lateness += amount
        ws.penalties.append(
            LatenessPenalty(
                customer_id=customer.id,
                customer_name=customer.name,
                day=ws.day,
                missed_amount=missed,
                penalty_amount=amount,
            )
        )


def _stock_costs(
    ws: _DayWorkspace, config: LevelConfig
) -> tuple[MaterialValues, MaterialValues]:
    holding: dict[MaterialKind, Decimal] = {}
    overstock: dict[MaterialKind, Decimal] = {}
    for material in ALL_MATERIALS:
        quantity = ws.inventory[material]
        holding[material] = quantize_currency(
            config.holding_costs.rate(material) * quantity
        )
        rule = config.overstock.rule(material)
        overstock[material] = quantize_currency(
            rule.excess(quantity) * rule.penalty_per_unit
        )
    return MaterialValues.from_mapping(holding), MaterialValues.from_mapping(overstock)


def simulate_day(
    state: GameState, action: GameAction, config: LevelConfig
) -> DayProjection:
    """Run the day pipeline for *state* without enforcing the cash invariant.

    Deliveries due today are resolved before any new order is applied.
    """
    validate_action(state, action, config)
    ws = _DayWorkspace.from_state(state)
    try:
        _resolve_deliveries(ws)
        _apply_purchases(ws, action, config, state.rng_seed)
        _apply_production(ws, action.production, config)
        _apply_sales(ws, action, config, state.rng_seed)
        _apply_lateness_penalties(ws, config)
    except ValueError as exc:
        msg = f"Day {state.day} could not be processed: {exc}"
        raise ProcessingError(msg, original_state=state) from exc

    holding, overstock = _stock_costs(ws, config)
    ws.cash -= holding.total() + overstock.total()
    costs = CostBreakdown.build(
        purchases=ws.purchases,
        transport=ws.transport,
        production=ws.production_cost,
        holding=holding.total(),
        overstock=overstock.total(),
        lateness=ws.lateness,
    )
    return DayProjection(
        workspace=ws,
        costs=costs,
        holding_costs=holding,
        overstock_costs=overstock,
        production_requested=action.production,
    )


def _settle_cash(projection: DayProjection, state: GameState) -> Decimal:
    cash = projection.closing_cash
    if cash >= 0:
        return cash
    if cash >= -CASH_TOLERANCE:
        return ZERO
    logger.error(
        "Day %s would end with negative cash %s; transition rejected", state.day, cash
    )
    msg = "Processing resulted in negative cash balance."
    raise ProcessingError(
        msg,
        original_state=state,
        detail={"cash": float(cash), "costs": projection.costs.model_dump(mode="json")},
    )


def _is_bankrupt(state: GameState) -> bool:
    return (
        state.cash == ZERO
        and state.inventory.finished_goods == 0
        and not state.pending_customer_orders
    )


def process_day(state: GameState, action: GameAction, config: LevelConfig) -> GameState:
    """Return the state that follows *state* after applying *action* for one day.

    Raises :class:`~supplychain_backend.game_logic.errors.ValidationError` for
    actions that break level rules and
    :class:`~supplychain_backend.game_logic.errors.ProcessingError` when the
    day would leave a genuinely negative balance. *state* is never modified.
    """
    projection = simulate_day(state, action, config)
    ws = projection.workspace
    cash = _settle_cash(projection, state)

    profit = projection.profit
    cumulative_profit = state.cumulative_profit + profit
    days_processed = state.days_processed + 1
    inventory = InventoryLedger.from_mapping(ws.inventory)
    inventory_value = MaterialValues.from_mapping(ws.values)
    score = compute_score(
        cumulative_profit=cumulative_profit,
        inventory_value=inventory_value.total(),
        days_processed=days_processed,
        config=config,
    )

    try:
        daily = DailyResult(
            day=state.day,
            cash=cash,
            inventory=inventory,
            inventory_value=inventory_value,
            holding_costs=projection.holding_costs,
            overstock_costs=projection.overstock_costs,
            materials_purchased=InventoryLedger.from_mapping(ws.purchased),
            arrivals=InventoryLedger.from_mapping(ws.arrivals),
            production=ws.produced,
            production_requested=projection.production_requested,
            sales=ws.sold,
            revenue=projection.revenue,
            costs=projection.costs,
            profit=profit,
            cumulative_profit=cumulative_profit,
            score=score,
            customer_deliveries=tuple(
                CustomerDelivery(customer_id=cid, quantity=qty, revenue=revenue)
                for cid, (qty, revenue) in ws.realised.items()
            ),
            lateness_penalties=tuple(ws.penalties),
            skipped_orders=tuple(ws.skipped),
            safety_stock_shortfalls=config.safetystock.shortfalls(inventory),
            delivery_option_id=action.delivery_option_id,
        )
        candidate = GameState(
            day=state.day,
            cash=cash,
            inventory=inventory,
            inventory_value=inventory_value,
            pending_supplier_orders=tuple(ws.pending_supplier),
            pending_customer_orders=tuple(ws.pending_customer),
            customer_deliveries=ws.customer_deliveries,
            supplier_purchases=ws.supplier_purchases,
            cumulative_profit=cumulative_profit,
            score=score,
            history=(*state.history, daily),
            game_over=False,
            lateness_penalties=(*state.lateness_penalties, *ws.penalties),
            rng_seed=state.rng_seed,
        )
    except PydanticValidationError as exc:
        msg = f"Day {state.day} produced an invalid state."
        raise ProcessingError(msg, original_state=state) from exc

    game_over = days_processed >= config.days_to_complete or _is_bankrupt(candidate)
    if game_over:
        logger.info(
            "Level %s finished after day %s with score %s",
            config.id,
            state.day,
            score,
        )
        return candidate.model_copy(update={"game_over": True})
    return candidate.model_copy(update={"day": state.day + 1})


def initialize_game_state(config: LevelConfig, *, rng_seed: int = 0) -> GameState:
    """Return the opening state for *config*."""
    return GameState(
        day=1,
        cash=config.initial_cash,
        inventory=config.initial_inventory,
        rng_seed=rng_seed,
    )


class DayContext(BaseModel):
    """Immutable payload describing the inputs required to process a day."""

    model_config = ConfigDict(frozen=True)

    user_id: str = Field(..., min_length=1)
    configuration: LevelConfig
    state: GameState
    action: GameAction = Field(default_factory=GameAction)

    @model_validator(mode="after")
    def _validate_state(self) -> DayContext:
        """Ensure the state has not already finished."""
        if self.state.game_over:
            msg = "Cannot build a DayContext for a finished game."
            raise ValueError(msg)
        return self


class DayTransition(BaseModel):
    """Outcome returned after processing a day, plus the effects to persist."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    previous_state: GameState
    state: GameState
    daily_result: DailyResult
    result: GameResult | None = None
    effects: tuple[PersistenceEffect, ...] = ()

    @property
    def game_over(self) -> bool:
        """Return ``True`` when the transition ended the level attempt."""
        return self.state.game_over


class DayProcessor:
    """Process single days and describe what the caller must persist."""

    def advance(self, context: DayContext) -> DayTransition:
        """Process *context* and return the resulting transition."""
        new_state = process_day(context.state, context.action, context.configuration)
        effects: list[PersistenceEffect] = [SaveSessionEffect(state=new_state)]
        result = None
        if new_state.game_over:
            result = calculate_game_result(
                new_state, context.configuration, context.user_id
            )
            effects.append(RecordResultEffect(result=result))
        return DayTransition(
            previous_state=context.state,
            state=new_state,
            daily_result=new_state.history[-1],
            result=result,
            effects=tuple(effects),
        )


__all__ = [
    "CASH_TOLERANCE",
    "DayContext",
    "DayProcessor",
    "DayProjection",
    "DayTransition",
    "initialize_game_state",
    "process_day",
    "simulate_day",
]
