"""
Minister scandal and resignation rolls.

One Bernoulli trial per minister per month for each.  Scandal odds come
from corruption, resignation odds from disloyalty, accumulated scandals
and national unpopularity; both are scaled by trait multipliers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Sequence

import numpy as np

from ..core.effects import RecordScandal, RemoveMinister
from ..core.enums import ScandalSeverity
from ..core.evaluator import apply_effect
from ..core.state import GameState, Minister
from ..core.traits import resignation_multiplier, scandal_multiplier

logger = logging.getLogger("statecraft.systems.minister_events")

RESIGNATION_REASONS = ("disloyalty", "scandal_pressure", "ambition")

_RESIGNATION_MESSAGES = {
    "disloyalty": "{name} resigned over disagreements with the government.",
    "scandal_pressure": "{name} resigned under pressure from scandals.",
    "ambition": "{name} resigned to launch a presidential campaign.",
}


@dataclass(frozen=True)
class Scandal:
    minister_id: str
    minister_name: str
    ministry: str
    severity: ScandalSeverity


@dataclass(frozen=True)
class Resignation:
    """A minister leaving the cabinet.

    Attributes:
        reason: One of RESIGNATION_REASONS.
    """

    minister_id: str
    minister_name: str
    ministry: str
    reason: str


def scandal_probability(minister: Minister) -> float:
    return minister.stats.corruption / 10000.0 * scandal_multiplier(minister.trait_ids)


def _severity(corruption: float, rng: np.random.Generator) -> ScandalSeverity:
    roll = rng.random()
    if corruption > 70:
        return ScandalSeverity.CRITICAL if roll < 0.5 else ScandalSeverity.MAJOR
    if corruption > 40:
        return ScandalSeverity.MAJOR if roll < 0.3 else ScandalSeverity.MINOR
    return ScandalSeverity.MINOR


def check_minister_scandals(
    ministers: Sequence[Minister], rng: np.random.Generator
) -> List[Scandal]:
    scandals = []
    for minister in ministers:
        if rng.random() < scandal_probability(minister):
            scandals.append(
                Scandal(
                    minister_id=minister.id,
                    minister_name=minister.name,
                    ministry=minister.ministry.value,
                    severity=_severity(minister.stats.corruption, rng),
                )
            )
    return scandals


def resignation_probability(minister: Minister, popularity: float) -> float:
    """(100 − loyalty)/2000 + 0.02 per scandal + 0.01 when unpopular, × traits."""
    chance = (100.0 - minister.stats.loyalty) / 2000.0
    chance += minister.scandals_count * 0.02
    if popularity < 30.0:
        chance += 0.01
    return chance * resignation_multiplier(minister.trait_ids)


def check_minister_resignations(
    ministers: Sequence[Minister], popularity: float, rng: np.random.Generator
) -> List[Resignation]:
    """Roll monthly resignations.

    Ministers who survive the main roll may still leave out of ambition
    (0.5 % when ambition > 70 and internal support > 60).
    """
    resignations = []
    for minister in ministers:
        ambition_chance = 0.0
        if minister.stats.ambition > 70.0 and minister.stats.internal_support > 60.0:
            ambition_chance = 0.005

        if rng.random() < resignation_probability(minister, popularity):
            reason = "scandal_pressure" if minister.scandals_count > 2 else "disloyalty"
        elif rng.random() < ambition_chance:
            reason = "ambition"
        else:
            continue
        resignations.append(
            Resignation(
                minister_id=minister.id,
                minister_name=minister.name,
                ministry=minister.ministry.value,
                reason=reason,
            )
        )
    return resignations


def apply_scandal(state: GameState, minister_id: str, severity: ScandalSeverity) -> GameState:
    """Book a scandal: popularity, stability and capital penalties plus a log line."""
    return apply_effect(state, RecordScandal(minister_id, severity))


def apply_resignation(state: GameState, resignation: Resignation) -> GameState:
    new_state = apply_effect(state, RemoveMinister(resignation.minister_id, resignation.reason))
    if new_state is state:
        return state
    logger.info("%s resigned (%s)", resignation.minister_id, resignation.reason)
    return new_state.with_log(
        _RESIGNATION_MESSAGES[resignation.reason].format(name=resignation.minister_name)
    )


def run_minister_events(state: GameState, rng: np.random.Generator) -> GameState:
    """Roll and apply this month's scandals, then resignations."""
    for scandal in check_minister_scandals(state.ministers, rng):
        logger.info("%s scandal for %s", scandal.severity.name.lower(), scandal.minister_id)
        state = apply_scandal(state, scandal.minister_id, scandal.severity)
    for resignation in check_minister_resignations(state.ministers, state.stats.popularity, rng):
        state = apply_resignation(state, resignation)
    return state
