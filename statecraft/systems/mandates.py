"""
Mandate executor.

Each minister with an assigned strategy nudges the budget categories that
strategy cares about toward its target percentage, in proportion to the
minister's competence.  After every minister has acted the whole
allocation is renormalised to exactly 100.  A manual override switches the
automation off.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Dict, Sequence

from ..core.enums import BudgetCategory, Strategy
from ..core.errors import Outcome
from ..core.invariants import clamp_percent, normalize_allocation
from ..core.params import DEFAULT_PARAMS, EngineParams
from ..core.state import BudgetAllocation, GameState, Minister
from .political_capital import spend_political_capital

logger = logging.getLogger("statecraft.systems.mandates")

STRATEGY_TARGETS: Dict[Strategy, Dict[BudgetCategory, float]] = {
    Strategy.GROWTH: {
        BudgetCategory.RESEARCH: 15.0,
        BudgetCategory.INFRASTRUCTURE: 18.0,
    },
    Strategy.AUSTERITY: {
        BudgetCategory.SOCIAL_WELFARE: 10.0,
        BudgetCategory.DEFENSE: 8.0,
    },
    Strategy.WELFARE: {
        BudgetCategory.SOCIAL_WELFARE: 30.0,
        BudgetCategory.HEALTH: 22.0,
        BudgetCategory.EDUCATION: 22.0,
    },
    Strategy.GREED: {
        BudgetCategory.DEFENSE: 18.0,
        BudgetCategory.RESEARCH: 8.0,
    },
}


def drift_allocation(
    allocation: BudgetAllocation,
    ministers: Sequence[Minister],
    params: EngineParams = DEFAULT_PARAMS,
) -> BudgetAllocation:
    """Apply every minister's strategy, then renormalise to 100.

    Args:
        allocation: Current allocation.
        ministers:  Cabinet, in order; ministers without a strategy are skipped.
        params:     Engine parameters (drift rate).

    Returns:
        New allocation summing to 100.
    """
    values: Dict[BudgetCategory, float] = allocation.as_dict()
    for minister in ministers:
        if minister.strategy is None:
            continue
        competence = minister.stats.competence / 100.0
        for category, target in STRATEGY_TARGETS[minister.strategy].items():
            current = values[category]
            values[category] = clamp_percent(
                current + (target - current) * competence * params.mandate_drift_rate
            )
    return normalize_allocation(values)


def execute_mandates(state: GameState, params: EngineParams = DEFAULT_PARAMS) -> GameState:
    """Run automatic budget drift unless the manual override is active."""
    if state.manual_override:
        return state
    if not any(m.strategy is not None for m in state.ministers):
        return state
    allocation = drift_allocation(state.economy.budget_allocation, state.ministers, params)
    logger.debug("mandate allocation %s", allocation.to_dict())
    return replace(state, economy=state.economy.copy_with(budget_allocation=allocation))


def toggle_manual_override(
    state: GameState, enable: bool, params: EngineParams = DEFAULT_PARAMS
) -> Outcome:
    """Switch micromanagement on (costs political capital) or off (free)."""
    if enable == state.manual_override:
        return Outcome.success(state, "override unchanged")
    if not enable:
        return Outcome.success(
            replace(state, manual_override=False).with_log("Ministers resume their mandates."),
            "override disabled",
        )
    outcome = spend_political_capital(state, params.cost_manual_override, "Manual budget override")
    if not outcome.ok:
        return outcome
    return Outcome.success(replace(outcome.state, manual_override=True), "override enabled")


def assign_strategy(state: GameState, minister_id: str, strategy: Strategy) -> GameState:
    minister = state.government.minister(minister_id)
    if minister is None:
        return state
    return replace(
        state,
        government=state.government.with_minister(minister.copy_with(strategy=strategy)),
    ).with_log(f"{minister.name} assigned the {strategy.value} mandate.")

