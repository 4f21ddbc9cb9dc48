"""
Minister trait catalog.

A trait shifts a minister's generated stats and scales how likely the
minister is to cause a scandal or resign.  Trait selection is weighted by
the country context (corruption, military spending, freedom, ideology).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

import numpy as np

from .enums import Ideology


@dataclass(frozen=True)
class MinisterTrait:
    """Static trait definition.

    Attributes:
        ideology_bias:         "left", "right", "authoritarian" or None.
        scandal_multiplier:    Scales monthly scandal probability.
        resignation_multiplier: Scales monthly resignation probability.
    """

    id: str
    name: str
    competence_bonus: float = 0.0
    loyalty_bonus: float = 0.0
    corruption_bonus: float = 0.0
    popularity_bonus: float = 0.0
    ambition_bonus: float = 0.0
    ideology_bias: Optional[str] = None
    scandal_multiplier: float = 1.0
    resignation_multiplier: float = 1.0


def _t(tid: str, name: str, **kw) -> MinisterTrait:
    return MinisterTrait(id=tid, name=name, **kw)


TRAITS: Dict[str, MinisterTrait] = {
    t.id: t
    for t in (
        _t("technocrat", "Technocrat", competence_bonus=20, popularity_bonus=-10,
           scandal_multiplier=0.5),
        _t("incompetent", "Incompetent", competence_bonus=-25, loyalty_bonus=10,
           scandal_multiplier=1.5, resignation_multiplier=0.8),
        _t("loyal", "Loyal", loyalty_bonus=25, ambition_bonus=-15,
           resignation_multiplier=0.3),
        _t("opportunist", "Opportunist", loyalty_bonus=-20, ambition_bonus=30,
           scandal_multiplier=1.2, resignation_multiplier=2.0),
        _t("ambitious", "Ambitious", ambition_bonus=25, popularity_bonus=10,
           loyalty_bonus=-10, resignation_multiplier=1.5),
        _t("corrupt", "Corrupt", corruption_bonus=40, competence_bonus=-10,
           scandal_multiplier=3.0, resignation_multiplier=1.2),
        _t("honest", "Honest", corruption_bonus=-30, popularity_bonus=15,
           scandal_multiplier=0.2),
        _t("dogmatic", "Dogmatic", loyalty_bonus=15, competence_bonus=-10,
           resignation_multiplier=0.9),
        _t("pragmatic", "Pragmatic", competence_bonus=10, popularity_bonus=5),
        _t("military", "Military", ideology_bias="authoritarian", loyalty_bonus=15,
           competence_bonus=5, popularity_bonus=-5, resignation_multiplier=0.7),
        _t("unionist", "Unionist", ideology_bias="left", popularity_bonus=15,
           competence_bonus=-5, scandal_multiplier=0.8),
        _t("businessman", "Businessman", ideology_bias="right", competence_bonus=15,
           corruption_bonus=10, scandal_multiplier=1.3),
        _t("academic", "Academic", competence_bonus=15, popularity_bonus=-5,
           scandal_multiplier=0.6),
        _t("populist", "Populist", popularity_bonus=25, competence_bonus=-10,
           scandal_multiplier=1.2),
        _t("charismatic", "Charismatic", popularity_bonus=20, ambition_bonus=15),
        _t("reserved", "Reserved", popularity_bonus=-15, loyalty_bonus=10,
           scandal_multiplier=0.7, resignation_multiplier=0.8),
        _t("diplomat", "Diplomat", competence_bonus=10, popularity_bonus=10,
           scandal_multiplier=0.8),
        _t("confrontational", "Confrontational", popularity_bonus=-10, loyalty_bonus=-5,
           scandal_multiplier=1.3, resignation_multiplier=1.5),
        _t("reformer", "Reformer", competence_bonus=10, loyalty_bonus=-10,
           popularity_bonus=5, resignation_multiplier=1.2),
        _t("conservative", "Conservative", loyalty_bonus=15, competence_bonus=-5,
           scandal_multiplier=0.8, resignation_multiplier=0.7),
        _t("visionary", "Visionary", competence_bonus=15, popularity_bonus=5),
        _t("improviser", "Improviser", competence_bonus=-5, loyalty_bonus=5,
           scandal_multiplier=1.2),
    )
}


@dataclass(frozen=True)
class CountryContext:
    """Country attributes that bias trait selection.

    Attributes:
        corruption:        0..100.
        military_spending: Percentage of GDP.
        freedom:           0..100.
    """

    ideology: Ideology = Ideology.CENTRIST
    corruption: float = 40.0
    military_spending: float = 2.0
    freedom: float = 70.0


def get_trait(trait_id: str) -> Optional[MinisterTrait]:
    return TRAITS.get(trait_id)


def traits_for(trait_ids: Iterable[str]) -> List[MinisterTrait]:
    """Resolve trait ids, silently skipping unknown ones."""
    return [TRAITS[t] for t in trait_ids if t in TRAITS]


def scandal_multiplier(trait_ids: Iterable[str]) -> float:
    return float(np.prod([t.scandal_multiplier for t in traits_for(trait_ids)] or [1.0]))


def resignation_multiplier(trait_ids: Iterable[str]) -> float:
    return float(np.prod([t.resignation_multiplier for t in traits_for(trait_ids)] or [1.0]))


def trait_weight(trait: MinisterTrait, context: CountryContext) -> float:
    """Selection weight of a trait in a given country."""
    weight = 1.0
    if context.corruption > 60:
        if trait.id == "corrupt":
            weight *= 3.0
        if trait.id == "honest":
            weight *= 0.3
    elif context.corruption < 30:
        if trait.id == "corrupt":
            weight *= 0.3
        if trait.id == "honest":
            weight *= 2.0

    if context.military_spending > 3.0 and trait.id == "military":
        weight *= 2.5

    if context.freedom < 40:
        if trait.ideology_bias == "authoritarian":
            weight *= 1.8
        if trait.id == "loyal":
            weight *= 1.5

    if context.ideology == Ideology.SOCIALIST:
        if trait.ideology_bias == "left":
            weight *= 1.8
        if trait.id == "unionist":
            weight *= 2.0
    elif context.ideology in (Ideology.CAPITALIST, Ideology.LIBERAL):
        if trait.ideology_bias == "right":
            weight *= 1.8
        if trait.id == "businessman":
            weight *= 2.0
    elif context.ideology == Ideology.AUTHORITARIAN:
        if trait.ideology_bias == "authoritarian":
            weight *= 2.0
        if trait.id == "military":
            weight *= 2.5
    return weight


def select_traits(
    context: CountryContext,
    count: int,
    rng: np.random.Generator,
) -> List[MinisterTrait]:
    """Weighted random selection of distinct traits.

    Args:
        context: Country attributes biasing the weights.
        count:   Number of traits wanted (capped at the catalog size).
        rng:     Random source.

    Returns:
        Selected traits, in selection order.
    """
    catalog = list(TRAITS.values())
    count = max(0, min(count, len(catalog)))
    if count == 0:
        return []
    weights = np.array([trait_weight(t, context) for t in catalog], dtype=np.float64)
    idx = rng.choice(len(catalog), size=count, replace=False, p=weights / weights.sum())
    return [catalog[int(i)] for i in idx]
