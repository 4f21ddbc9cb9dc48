"""
Invariant enforcement.

All range clamping and percentage renormalisation happens here so the
subsystems never duplicate min/max logic.  ``normalize_state`` is the
reducer run at the end of every tick: it re-establishes every numeric
invariant of the state tree in one place.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Dict, List, Mapping, Sequence

import numpy as np

from .enums import BudgetCategory
from .state import BudgetAllocation, GameState, Industry, MinisterStats

ALLOCATION_TOLERANCE = 0.01


def clamp(value: float, lo: float, hi: float) -> float:
    """Clip a scalar into [lo, hi] and return a Python float."""
    return float(np.clip(value, lo, hi))


def clamp_percent(value: float) -> float:
    return clamp(value, 0.0, 100.0)


def clamp_non_negative(value: float) -> float:
    return float(max(0.0, value))


def renormalize(values: Sequence[float], total: float) -> List[float]:
    """Scale non-negative values so they sum to ``total``.

    The floating-point residual is folded into the largest entry so the
    returned values sum to ``total`` as closely as float arithmetic allows.
    A zero vector is spread evenly.

    Args:
        values: Non-negative weights.
        total:  Target sum.

    Returns:
        List of floats summing to ``total``.
    """
    if len(values) == 0:
        return []
    arr = np.clip(np.asarray(values, dtype=np.float64), 0.0, None)
    s = arr.sum()
    if s <= 0.0:
        arr = np.full(len(arr), total / len(arr))
    else:
        arr = arr * (total / s)
    residual = total - arr.sum()
    arr[int(np.argmax(arr))] += residual
    return [float(v) for v in arr]


def apportion(weights: Sequence[float], total: int) -> List[int]:
    """Split an integer total proportionally (largest-remainder method).

    The result always sums to ``total`` exactly.
    """
    if len(weights) == 0:
        return []
    shares = np.asarray(renormalize(weights, float(total)), dtype=np.float64)
    floors = np.floor(shares).astype(np.int64)
    remainder = int(total - floors.sum())
    if remainder > 0:
        order = np.argsort(-(shares - floors), kind="stable")
        floors[order[:remainder]] += 1
    return [int(v) for v in floors]


def normalize_allocation(values: Mapping[BudgetCategory, float]) -> BudgetAllocation:
    """Clamp categories to [0, 100] and rescale them to sum to 100."""
    cats = list(BudgetCategory)
    raw = [clamp_percent(values.get(cat, 0.0)) for cat in cats]
    scaled = renormalize(raw, 100.0)
    return BudgetAllocation.from_mapping(
        {cat: clamp_percent(v) for cat, v in zip(cats, scaled)}
    )


def allocation_is_valid(values: Mapping[BudgetCategory, float]) -> bool:
    total = sum(values.get(cat, 0.0) for cat in BudgetCategory)
    return abs(total - 100.0) <= ALLOCATION_TOLERANCE and all(
        0.0 <= values.get(cat, 0.0) <= 100.0 for cat in BudgetCategory
    )


def clamp_minister_stats(values: Mapping[str, float]) -> MinisterStats:
    return MinisterStats(**{k: clamp_percent(v) for k, v in values.items()})


def normalize_industries(industries: Sequence[Industry]) -> List[Industry]:
    """Rescale industry GDP contributions to sum to 100."""
    shares = renormalize([ind.gdp_contribution for ind in industries], 100.0)
    return [
        ind.copy_with(gdp_contribution=clamp_percent(share))
        for ind, share in zip(industries, shares)
    ]


def normalize_state(state: GameState) -> GameState:
    """Re-establish the percentage-sum invariants of a state.

    Resource and stat ranges are already guaranteed by construction; this
    pass repairs the sums that individual updates may drift: budget
    allocation (100), industry contributions (100) and region populations
    (national total).
    """
    economy = state.economy
    changes: Dict[str, object] = {}

    alloc = economy.budget_allocation
    if abs(alloc.total - 100.0) > 1e-9:
        changes["budget_allocation"] = normalize_allocation(alloc.as_dict())

    if economy.industries:
        total = sum(ind.gdp_contribution for ind in economy.industries)
        if abs(total - 100.0) > 1e-9:
            changes["industries"] = tuple(normalize_industries(economy.industries))

    if economy.regions:
        pops = [r.population for r in economy.regions]
        if sum(pops) != economy.total_population:
            fixed = apportion(pops, economy.total_population)
            changes["regions"] = tuple(
                r.copy_with(population=p) for r, p in zip(economy.regions, fixed)
            )

    if not changes:
        return state
    return replace(state, economy=economy.copy_with(**changes))
