"""
Judiciary review.

The supreme court can veto an approved bill before its effects apply.
Every judge scores the bill by ideological alignment, discounted by the
judge's corruption and scaled by integrity; a score under 0.5 is a vote
against.  A majority against vetoes the bill and costs the government an
emergency decree's worth of political capital.

Once per judicial year the court ages: judges retire at 80 or by a small
random chance.  Vacancies are reported, never filled automatically.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, List, Optional, Sequence, Tuple

import numpy as np

from ..core.enums import ElectionSystem, Ideology
from ..core.errors import InsufficientResourceError, Outcome
from ..core.invariants import clamp_non_negative, clamp_percent
from ..core.params import DEFAULT_PARAMS, EngineParams
from ..core.state import Bill, Constitution, GameState, Judge
from .ministers import random_name

logger = logging.getLogger("statecraft.systems.judiciary")

JUDGE_IDEOLOGIES = (
    Ideology.CAPITALIST,
    Ideology.SOCIALIST,
    Ideology.CENTRIST,
    Ideology.AUTHORITARIAN,
)


@dataclass(frozen=True)
class ReviewResult:
    """Outcome of a constitutionality check.

    Attributes:
        state:         State after the review (capital spent on a veto).
        vetoed:        True when a majority of judges voted against.
        votes_against: Number of judges scoring the bill under 0.5.
    """

    state: GameState
    vetoed: bool
    votes_against: int = 0


def judge_score(judge: Judge, ideology: Optional[Ideology]) -> float:
    """alignment × (1 − corruption/200) × integrity/100."""
    if ideology is not None and judge.ideology == ideology:
        alignment = 1.0
    elif ideology is not None and judge.ideology == Ideology.CENTRIST:
        alignment = 0.6
    else:
        alignment = 0.4
    return alignment * (1.0 - judge.corruption / 200.0) * (judge.integrity / 100.0)


def check_constitutionality(
    state: GameState, bill: Bill, params: EngineParams = DEFAULT_PARAMS
) -> ReviewResult:
    """Let the supreme court review a bill.

    Args:
        state:  Current state.
        bill:   Bill under review.
        params: Engine parameters (veto cost).

    Returns:
        ReviewResult.  With an empty court the bill always passes.
    """
    court = state.judiciary.supreme_court
    if not court:
        return ReviewResult(state=state, vetoed=False)

    against = sum(1 for judge in court if judge_score(judge, bill.ideology) < 0.5)
    if against <= len(court) / 2:
        return ReviewResult(state=state, vetoed=False, votes_against=against)

    capital = clamp_non_negative(
        state.resources.political_capital - params.cost_emergency_decree
    )
    logger.info("bill %s vetoed by %d of %d judges", bill.id, against, len(court))
    new_state = state.with_resources(political_capital=capital).with_log(
        f"The Supreme Court vetoed bill {bill.id}. Political capital reduced."
    )
    return ReviewResult(state=new_state, vetoed=True, votes_against=against)


def age_and_refresh_judiciary(
    court: Sequence[Judge],
    rng: np.random.Generator,
    params: EngineParams = DEFAULT_PARAMS,
) -> Tuple[Tuple[Judge, ...], bool]:
    """Retire judges at the retirement age or by chance, age the rest by a year.

    Returns:
        (remaining court in order, whether a vacancy opened).
    """
    remaining: List[Judge] = []
    vacancy = False
    for judge in court:
        if judge.age >= params.judge_retirement_age or rng.random() < params.judge_retirement_chance:
            vacancy = True
            continue
        remaining.append(judge.copy_with(age=judge.age + 1))
    return tuple(remaining), vacancy


def run_judicial_year(
    state: GameState, rng: np.random.Generator, params: EngineParams = DEFAULT_PARAMS
) -> GameState:
    """Apply court aging to the state and log retirements."""
    before = state.judiciary.supreme_court
    court, vacancy = age_and_refresh_judiciary(before, rng, params)
    new_state = replace(state, judiciary=state.judiciary.copy_with(supreme_court=court))
    if vacancy:
        retired = [j.name for j in before if j.id not in {k.id for k in court}]
        new_state = new_state.with_log(
            f"Supreme Court vacancy: {', '.join(retired)} retired."
        )
    return new_state


def pack_court(
    state: GameState, new_judges: Sequence[Judge], params: EngineParams = DEFAULT_PARAMS
) -> Outcome:
    """Enlarge the court with loyal judges.

    Costs the emergency-decree political capital and
    ``10 + 2 × len(new_judges)`` stability.
    """
    capital = state.resources.political_capital
    if capital < params.cost_emergency_decree:
        return Outcome.failure(
            state,
            InsufficientResourceError("political_capital", params.cost_emergency_decree, capital),
        )
    hit = params.pack_court_base_stability_cost + params.pack_court_per_judge_stability_cost * len(
        new_judges
    )
    new_state = replace(
        state,
        judiciary=state.judiciary.copy_with(
            supreme_court=state.judiciary.supreme_court + tuple(new_judges)
        ),
        resources=state.resources.copy_with(
            political_capital=clamp_percent(capital - params.cost_emergency_decree),
            stability=clamp_percent(state.resources.stability - hit),
        ),
    )
    message = f"Court enlarged with {len(new_judges)} loyal judges. Stability -{hit:g}."
    logger.info(message)
    return Outcome.success(new_state.with_log(message), message)


def appoint_judge(
    state: GameState, judge: Judge, params: EngineParams = DEFAULT_PARAMS
) -> Outcome:
    """Fill a vacancy.  Appointing beyond the nominal size is court packing."""
    if len(state.judiciary.supreme_court) >= params.nominal_court_size:
        return pack_court(state, [judge], params)
    new_state = replace(
        state,
        judiciary=state.judiciary.copy_with(
            supreme_court=state.judiciary.supreme_court + (judge,)
        ),
    ).with_log(f"{judge.name} appointed to the Supreme Court.")
    return Outcome.success(new_state, f"{judge.name} appointed")


def force_retirement(state: GameState, judge_id: str) -> GameState:
    target = state.judiciary.judge(judge_id)
    if target is None:
        return state
    court = tuple(j for j in state.judiciary.supreme_court if j.id != judge_id)
    return replace(state, judiciary=state.judiciary.copy_with(supreme_court=court)).with_log(
        f"Judge {target.name} forced into retirement."
    )


def update_constitution(state: GameState, **changes: Any) -> GameState:
    """Amend the constitution by referendum.

    Raises:
        TypeError:  On an unknown constitutional field.
        ValueError: On an invalid value (e.g. a term length of 3).
    """
    if "election_system" in changes and not isinstance(changes["election_system"], ElectionSystem):
        changes["election_system"] = ElectionSystem(changes["election_system"])
    constitution: Constitution = replace(state.judiciary.constitution, **changes)
    return replace(
        state, judiciary=state.judiciary.copy_with(constitution=constitution)
    ).with_log("Constitution amended by referendum.")


def generate_judge(
    rng: np.random.Generator,
    ideology: Optional[Ideology] = None,
    judge_id: Optional[str] = None,
) -> Judge:
    if ideology is None:
        ideology = JUDGE_IDEOLOGIES[int(rng.integers(len(JUDGE_IDEOLOGIES)))]
    return Judge(
        id=judge_id or f"judge-{rng.integers(16 ** 8):08x}",
        name=random_name(rng),
        ideology=ideology,
        age=int(rng.integers(50, 76)),
        loyalty=float(rng.uniform(20.0, 80.0)),
        corruption=float(rng.uniform(0.0, 40.0)),
        integrity=float(rng.uniform(40.0, 100.0)),
    )


def generate_court(
    size: int, rng: np.random.Generator
) -> Tuple[Judge, ...]:
    return tuple(generate_judge(rng, judge_id=f"judge-{i}") for i in range(size))
