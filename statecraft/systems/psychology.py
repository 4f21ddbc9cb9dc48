"""
Minister psychology.

Hidden minister attributes (loyalty, corruption pressure, ambition) turn
into presidential decisions and rivalries.  Nothing is generated during
the first months of a government.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from ..core.effects import (
    AdjustMinister,
    Cost,
    DecisionOption,
    PresidentialDecision,
    RecordScandal,
    RemoveMinister,
)
from ..core.enums import HiddenAgenda, ScandalSeverity, Urgency
from ..core.invariants import clamp_percent
from ..core.params import DEFAULT_PARAMS, EngineParams
from ..core.state import GameState, Minister

logger = logging.getLogger("statecraft.systems.psychology")

# Monthly corruption-pressure drift contributed by each hidden agenda.
AGENDA_PRESSURE: Dict[HiddenAgenda, float] = {
    HiddenAgenda.WEALTH_ACCUMULATION: 3.0,
    HiddenAgenda.COUP_PLOTTER: 1.5,
    HiddenAgenda.RIVAL_SABOTAGE: 1.0,
    HiddenAgenda.IDEOLOGICAL_ZEALOT: 0.0,
    HiddenAgenda.STATUS_QUO: 0.0,
    HiddenAgenda.REFORMER: -1.0,
    HiddenAgenda.LOYALIST: -2.0,
}


def _resignation_threat(minister: Minister, state: GameState,
                        params: EngineParams) -> PresidentialDecision:
    return PresidentialDecision(
        id=f"resignation_threat_{minister.id}_{state.months_elapsed}",
        source=minister.name,
        title="Threat of Resignation",
        description=(
            f"{minister.name} is disillusioned with your leadership and threatens "
            "to resign unless demands are met."
        ),
        urgency=Urgency.HIGH,
        options=(
            DecisionOption(
                id="accept_resignation",
                label="Accept Resignation",
                effect=RemoveMinister(minister.id, reason="resigned"),
            ),
            DecisionOption(
                id="bribe",
                label=f"Offer Bonus (Budget -{params.loyalty_bonus_budget_cost:g})",
                cost=Cost(budget=params.loyalty_bonus_budget_cost),
                effect=AdjustMinister(minister.id, loyalty=params.loyalty_bonus_amount),
                message=f"{minister.name} accepts the bonus and stays.",
            ),
        ),
    )


def _corruption_scheme(minister: Minister, state: GameState,
                       params: EngineParams) -> PresidentialDecision:
    severity = ScandalSeverity.MAJOR if minister.stats.corruption > 70 else ScandalSeverity.MINOR
    return PresidentialDecision(
        id=f"corruption_scheme_{minister.id}_{state.months_elapsed}",
        source="Intelligence",
        title="Suspicious Financial Activity",
        description=f"Intelligence reports indicate {minister.name} might be diverting funds.",
        urgency=Urgency.MEDIUM,
        options=(
            DecisionOption(
                id="investigate",
                label="Launch Investigation",
                effect=RecordScandal(minister.id, severity),
                message=f"An investigation into {minister.name} goes public.",
            ),
            DecisionOption(
                id="ignore",
                label=f"Look the other way (Loyalty +{params.ignore_scheme_loyalty_bonus:g})",
                effect=AdjustMinister(minister.id, loyalty=params.ignore_scheme_loyalty_bonus),
            ),
        ),
    )


def evaluate_minister_behavior(
    minister: Minister, state: GameState, params: EngineParams = DEFAULT_PARAMS
) -> Optional[PresidentialDecision]:
    """Return the decision a minister forces on the president, if any.

    Suppressed while ``months_elapsed`` is below the grace period.  A
    resignation threat takes precedence over a corruption scheme.
    """
    if state.months_elapsed < params.psychology_grace_months:
        return None
    if minister.stats.loyalty < params.resignation_threat_loyalty:
        return _resignation_threat(minister, state, params)
    if (minister.psyche.corruption_pressure > params.corruption_pressure_threshold
            and minister.stats.corruption > params.corruption_scheme_threshold):
        return _corruption_scheme(minister, state, params)
    return None


def generate_minister_decisions(
    state: GameState, params: EngineParams = DEFAULT_PARAMS
) -> List[PresidentialDecision]:
    decisions = []
    for minister in state.ministers:
        decision = evaluate_minister_behavior(minister, state, params)
        if decision is not None:
            decisions.append(decision)
    return decisions


def update_rivalries(
    ministers: Sequence[Minister], params: EngineParams = DEFAULT_PARAMS
) -> List[Minister]:
    """Ambitious ministers grow to hate each other by one point a month."""
    threshold = params.rivalry_ambition_threshold
    updated = []
    for minister in ministers:
        if minister.stats.ambition <= threshold:
            updated.append(minister)
            continue
        rivalries = minister.psyche.rivalry_map()
        changed = False
        for other in ministers:
            if other.id == minister.id or other.stats.ambition <= threshold:
                continue
            rivalries[other.id] = min(100.0, rivalries.get(other.id, 0.0) + 1.0)
            changed = True
        if not changed:
            updated.append(minister)
            continue
        psyche = minister.psyche.copy_with(rivalries=tuple(sorted(rivalries.items())))
        updated.append(minister.copy_with(psychology=psyche))
    return updated


def update_corruption_pressure(ministers: Sequence[Minister]) -> List[Minister]:
    """Monthly drift of corruption pressure.

    Pressure moves by (corruption − 50)/25 plus the hidden agenda's push.
    """
    updated = []
    for minister in ministers:
        psyche = minister.psyche
        drift = (minister.stats.corruption - 50.0) / 25.0 + AGENDA_PRESSURE[psyche.hidden_agenda]
        pressure = clamp_percent(psyche.corruption_pressure + drift)
        if pressure == psyche.corruption_pressure:
            updated.append(minister)
        else:
            updated.append(
                minister.copy_with(psychology=psyche.copy_with(corruption_pressure=pressure))
            )
    return updated
