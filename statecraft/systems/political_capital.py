"""
Political-capital ledger.

Capital regenerates every month from popularity and governing-party
cohesion and gates every costed action.  Spending more than the balance
never raises: the unchanged state comes back inside an Outcome carrying an
InsufficientResourceError.
"""

from __future__ import annotations

import logging
from typing import Dict

from ..core.effects import RemoveMinister
from ..core.errors import InsufficientResourceError, Outcome
from ..core.evaluator import apply_effect
from ..core.invariants import clamp
from ..core.params import DEFAULT_PARAMS, EngineParams
from ..core.state import GameState

logger = logging.getLogger("statecraft.systems.political_capital")

POLITICAL_COSTS: Dict[str, float] = {
    "VETO_LAW": DEFAULT_PARAMS.cost_veto_law,
    "FIRE_MINISTER": DEFAULT_PARAMS.cost_fire_minister,
    "MANUAL_OVERRIDE": DEFAULT_PARAMS.cost_manual_override,
    "EMERGENCY_DECREE": DEFAULT_PARAMS.cost_emergency_decree,
}

PARALYSIS_MESSAGE = "Government paralyzed: no political capital left."


def capital_regeneration(state: GameState, params: EngineParams = DEFAULT_PARAMS) -> float:
    """Monthly capital gain before clamping."""
    return (
        state.stats.popularity * params.capital_popularity_rate
        + state.parliament.party_cohesion * params.capital_cohesion_rate
    )


def regen_political_capital(
    state: GameState, params: EngineParams = DEFAULT_PARAMS
) -> GameState:
    """Add the monthly regeneration, clamped to [0, max_political_capital].

    Logs the paralysis condition when the balance is still zero.
    """
    gain = capital_regeneration(state, params)
    new_capital = clamp(
        state.resources.political_capital + gain, 0.0, params.max_political_capital
    )
    new_state = state.with_resources(political_capital=new_capital)
    if new_capital <= 0.0:
        logger.info("political capital exhausted at month %d", state.months_elapsed)
        new_state = new_state.with_log(PARALYSIS_MESSAGE)
    return new_state


def can_afford(state: GameState, amount: float) -> bool:
    return amount <= state.resources.political_capital


def spend_political_capital(state: GameState, amount: float, reason: str = "") -> Outcome:
    """Deduct capital if the balance covers it.

    Args:
        state:  Current state.
        amount: Capital to spend (>= 0).
        reason: Optional text for the game log.

    Returns:
        Outcome with the debited state, or the unchanged state and an
        InsufficientResourceError.

    Raises:
        ValueError: If ``amount`` is negative.
    """
    if amount < 0:
        raise ValueError(f"amount must be >= 0, got {amount}")
    available = state.resources.political_capital
    if amount > available:
        return Outcome.failure(
            state, InsufficientResourceError("political_capital", amount, available)
        )
    new_state = state.with_resources(political_capital=clamp(available - amount, 0.0, 100.0))
    if reason:
        new_state = new_state.with_log(f"{reason} (-{amount:g} political capital)")
    return Outcome.success(new_state, reason)


def fire_minister(
    state: GameState, minister_id: str, params: EngineParams = DEFAULT_PARAMS
) -> Outcome:
    """Dismiss a minister for the fire-minister capital cost.

    An unknown minister is a no-op success.
    """
    minister = state.government.minister(minister_id)
    if minister is None:
        return Outcome.success(state, f"no minister '{minister_id}'")
    outcome = spend_political_capital(
        state, params.cost_fire_minister, f"Dismissed {minister.name}"
    )
    if not outcome.ok:
        return outcome
    return Outcome.success(
        apply_effect(outcome.state, RemoveMinister(minister_id, reason="dismissed")),
        f"{minister.name} dismissed",
    )
