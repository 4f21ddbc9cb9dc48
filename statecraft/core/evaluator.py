"""
Central effect evaluator.

``apply_effect`` is the only place where effect descriptors turn into state
changes.  Every write it performs goes through the clamp helpers, so no
effect can push a value out of range.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional

from .effects import (
    SCANDAL_PENALTIES,
    AdjustMinister,
    Compound,
    Cost,
    DecisionOption,
    Effect,
    EndAdministration,
    PolicyEffect,
    RecordScandal,
    RemoveMinister,
    SetFactionStance,
)
from .errors import InsufficientResourceError, Outcome
from .invariants import clamp, clamp_minister_stats, clamp_non_negative, clamp_percent
from .state import GameState

logger = logging.getLogger("statecraft.core.evaluator")


def apply_effect(state: GameState, effect: Effect) -> GameState:
    """Apply one effect descriptor and return the new state.

    Effects that reference a minister or faction no longer present leave
    the state unchanged.

    Raises:
        TypeError: If ``effect`` is not a known descriptor.
    """
    if isinstance(effect, Compound):
        for sub in effect.effects:
            state = apply_effect(state, sub)
        return state
    if isinstance(effect, PolicyEffect):
        return _apply_policy(state, effect)
    if isinstance(effect, AdjustMinister):
        return _adjust_minister(state, effect)
    if isinstance(effect, RemoveMinister):
        minister = state.government.minister(effect.minister_id)
        if minister is None:
            return state
        reason = f" ({effect.reason})" if effect.reason else ""
        return replace(
            state, government=state.government.without_minister(effect.minister_id)
        ).with_log(f"{minister.name} has left the cabinet{reason}.")
    if isinstance(effect, RecordScandal):
        return _record_scandal(state, effect)
    if isinstance(effect, SetFactionStance):
        faction = state.parliament.faction(effect.faction_id)
        if faction is None:
            return state
        return state.with_parliament(
            state.parliament.with_faction(faction.copy_with(stance=effect.stance))
        )
    if isinstance(effect, EndAdministration):
        return replace(state, administration_ended=True, is_campaign_mode=False).with_log(
            effect.reason or "The administration has ended."
        )
    raise TypeError(f"Unknown effect descriptor: {effect!r}")


def _apply_policy(state: GameState, eff: PolicyEffect) -> GameState:
    if eff.is_empty:
        return state
    stats = state.stats.copy_with(
        popularity=clamp_percent(state.stats.popularity + eff.popularity),
        gdp=clamp_non_negative(state.stats.gdp * (1.0 + eff.gdp)),
        gdp_growth=state.stats.gdp_growth + eff.gdp_growth,
        unemployment=clamp(state.stats.unemployment + eff.unemployment, 0.0, 1.0),
        inflation=state.stats.inflation + eff.inflation,
    )
    res = state.resources.copy_with(
        budget=clamp_non_negative(state.resources.budget + eff.budget),
        political_capital=clamp_percent(
            state.resources.political_capital + eff.political_capital
        ),
        stability=clamp_percent(state.resources.stability + eff.stability),
    )
    economy = state.economy
    # National GDP and unemployment are aggregates of the regions, so the
    # regions carry the change too or the next growth pass would undo it.
    if economy.regions and (eff.gdp or eff.unemployment):
        economy = economy.copy_with(
            regions=tuple(
                r.copy_with(
                    gdp_contribution=clamp_non_negative(r.gdp_contribution * (1.0 + eff.gdp)),
                    unemployment=clamp(r.unemployment + eff.unemployment, 0.0, 1.0),
                )
                for r in economy.regions
            )
        )
    for key, delta in eff.policy_changes:
        if key == "tax_rate":
            economy = economy.copy_with(tax_rate=clamp(economy.tax_rate + delta, 0.0, 1.0))
        elif key == "technology_level":
            economy = economy.copy_with(
                technology_level=clamp_percent(economy.technology_level + delta)
            )
        else:
            logger.warning("Ignoring unsupported policy change '%s'", key)
    return replace(state, stats=stats, resources=res, economy=economy)


def _adjust_minister(state: GameState, eff: AdjustMinister) -> GameState:
    minister = state.government.minister(eff.minister_id)
    if minister is None:
        return state
    current = minister.stats.to_dict()
    for name in current:
        current[name] += getattr(eff, name)
    psyche = minister.psyche
    pressure = 0.0 if eff.reset_corruption_pressure else psyche.corruption_pressure
    pressure = clamp_percent(pressure + eff.corruption_pressure)
    updated = minister.copy_with(
        stats=clamp_minister_stats(current),
        psychology=psyche.copy_with(corruption_pressure=pressure),
    )
    return replace(state, government=state.government.with_minister(updated))


def _record_scandal(state: GameState, eff: RecordScandal) -> GameState:
    minister = state.government.minister(eff.minister_id)
    if minister is None:
        return state
    approval_loss, stability_loss, capital_loss = SCANDAL_PENALTIES[eff.severity]
    updated = minister.copy_with(
        scandals_count=minister.scandals_count + 1,
        psychology=minister.psyche.copy_with(corruption_pressure=0.0),
    )
    state = replace(state, government=state.government.with_minister(updated))
    state = _apply_policy(
        state,
        PolicyEffect(
            popularity=-approval_loss,
            stability=-stability_loss,
            political_capital=-capital_loss,
        ),
    )
    return state.with_log(
        f"{eff.severity.name.lower()} scandal involving {minister.name} "
        f"({minister.ministry.value})."
    )


# --------------------------------------------------------------------------- #
# Costed options                                                               #
# --------------------------------------------------------------------------- #


def check_cost(state: GameState, cost: Optional[Cost]) -> Optional[InsufficientResourceError]:
    """Return the error an unaffordable cost would produce, or None."""
    if cost is None:
        return None
    if cost.political_capital > state.resources.political_capital:
        return InsufficientResourceError(
            "political_capital", cost.political_capital, state.resources.political_capital
        )
    if cost.budget > state.resources.budget:
        return InsufficientResourceError("budget", cost.budget, state.resources.budget)
    return None


def pay_cost(state: GameState, cost: Optional[Cost]) -> GameState:
    if cost is None:
        return state
    return state.with_resources(
        budget=clamp_non_negative(state.resources.budget - cost.budget),
        political_capital=clamp_percent(
            state.resources.political_capital - cost.political_capital
        ),
    )


def apply_option(state: GameState, option: DecisionOption) -> Outcome:
    """Pay an option's cost and apply its effect.

    Returns:
        Outcome carrying the new state, or the unchanged state and an
        InsufficientResourceError when the option is unaffordable.
    """
    error = check_cost(state, option.cost)
    if error is not None:
        return Outcome.failure(state, error)
    new_state = apply_effect(pay_cost(state, option.cost), option.effect)
    if option.message:
        new_state = new_state.with_log(option.message)
    return Outcome.success(new_state, option.message or option.label)
