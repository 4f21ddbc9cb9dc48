"""
Game metrics.

Summary statistics over a trajectory of GameState objects.  All metric
functions accept a list of GameState and return scalar or dict values.
No side effects.
"""

from __future__ import annotations

from typing import Dict, List

import numpy as np

from ..core.state import GameState


def mean_popularity(trajectory: List[GameState]) -> float:
    """Mean popularity averaged over a trajectory.

    Args:
        trajectory: Ordered list of GameState objects.

    Returns:
        Mean popularity ∈ [0, 100].
    """
    if not trajectory:
        return 0.0
    return float(np.mean([s.stats.popularity for s in trajectory]))


def mean_stability(trajectory: List[GameState]) -> float:
    """Mean stability averaged over a trajectory.

    Args:
        trajectory: Ordered list of GameState objects.

    Returns:
        Mean stability ∈ [0, 100].
    """
    if not trajectory:
        return 0.0
    return float(np.mean([s.resources.stability for s in trajectory]))


def mean_unemployment(trajectory: List[GameState]) -> float:
    if not trajectory:
        return 0.0
    return float(np.mean([s.stats.unemployment for s in trajectory]))


def mean_government_support(trajectory: List[GameState]) -> float:
    if not trajectory:
        return 0.0
    return float(np.mean([s.parliament.government_support for s in trajectory]))


def max_class_struggle(trajectory: List[GameState]) -> float:
    """Highest class-struggle value seen in the trajectory."""
    if not trajectory:
        return 0.0
    return float(max(s.social.class_struggle for s in trajectory))


def gdp_growth(trajectory: List[GameState]) -> float:
    """Relative GDP change between the first and the last state.

    Args:
        trajectory: Ordered list of GameState objects.

    Returns:
        (gdp_last − gdp_first) / gdp_first, or 0.0 when undefined.
    """
    if len(trajectory) < 2 or trajectory[0].stats.gdp <= 0:
        return 0.0
    first = trajectory[0].stats.gdp
    return (trajectory[-1].stats.gdp - first) / first


def low_popularity_fraction(trajectory: List[GameState], threshold: float = 30.0) -> float:
    """Fraction of months with popularity below ``threshold``.

    Args:
        trajectory: Ordered list of GameState objects.
        threshold:  Popularity line.

    Returns:
        Fraction ∈ [0, 1].
    """
    if not trajectory:
        return 0.0
    count = sum(1 for s in trajectory if s.stats.popularity < threshold)
    return count / len(trajectory)


def summary_statistics(trajectory: List[GameState]) -> Dict[str, float]:
    """Compute a comprehensive summary over a trajectory.

    Args:
        trajectory: Ordered list of GameState objects.

    Returns:
        Dictionary of metric name → scalar value.
    """
    last = trajectory[-1] if trajectory else None
    return {
        "n_steps": float(len(trajectory)),
        "mean_popularity": mean_popularity(trajectory),
        "mean_stability": mean_stability(trajectory),
        "mean_unemployment": mean_unemployment(trajectory),
        "mean_government_support": mean_government_support(trajectory),
        "max_class_struggle": max_class_struggle(trajectory),
        "gdp_growth": gdp_growth(trajectory),
        "low_popularity_fraction": low_popularity_fraction(trajectory),
        "final_popularity": last.stats.popularity if last else 0.0,
        "final_political_capital": last.resources.political_capital if last else 0.0,
        "administration_ended": float(last.administration_ended) if last else 0.0,
    }
