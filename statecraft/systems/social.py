"""
Social dynamics.

Population slices ("pops") react monthly to the macro indicators: growth
lifts everyone (elites most), recession hits the lower class hardest,
unemployment hurts lower and middle classes, deficits annoy elites, and
the happiness of a pop's region pulls its satisfaction.  Low satisfaction
radicalises, and unhappy radical pops take to the streets.  The
class-struggle metric is the satisfaction gap between elites and the
lower class.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from ..core.enums import PopType, ProtestAction, RegionType, SocialClass
from ..core.errors import ActionRejectedError, InsufficientResourceError, Outcome
from ..core.invariants import apportion, clamp_percent
from ..core.params import DEFAULT_PARAMS, EngineParams
from ..core.state import GameState, Protest, Region, SocialGroup

logger = logging.getLogger("statecraft.systems.social")

EMPTY_CLASS_SATISFACTION = 50.0

# Class struggle above this costs stability every month.
STRUGGLE_STABILITY_THRESHOLD = 40.0


# --------------------------------------------------------------------------- #
# Metrics                                                                      #
# --------------------------------------------------------------------------- #


def _mean_satisfaction(pops: Sequence[SocialGroup], social_class: SocialClass) -> float:
    values = [p.satisfaction for p in pops if p.social_class == social_class]
    if not values:
        return EMPTY_CLASS_SATISFACTION
    return float(np.mean(values))


def calculate_class_struggle(pops: Sequence[SocialGroup]) -> float:
    """|mean elite satisfaction − mean lower-class satisfaction|.

    An empty class counts as satisfaction 50.
    """
    return abs(
        _mean_satisfaction(pops, SocialClass.ELITE)
        - _mean_satisfaction(pops, SocialClass.LOWER)
    )


def weighted_satisfaction(pops: Sequence[SocialGroup]) -> float:
    """Influence-weighted mean satisfaction (50 for no pops)."""
    if not pops:
        return EMPTY_CLASS_SATISFACTION
    weights = np.array([p.political_influence for p in pops], dtype=np.float64)
    values = np.array([p.satisfaction for p in pops], dtype=np.float64)
    if weights.sum() <= 0:
        return float(values.mean())
    return float(np.average(values, weights=weights))


# --------------------------------------------------------------------------- #
# Monthly update                                                               #
# --------------------------------------------------------------------------- #


def update_pop_satisfaction(
    pops: Sequence[SocialGroup], state: GameState
) -> List[SocialGroup]:
    """Apply one month of macro-driven satisfaction and radicalization change."""
    growth = state.stats.gdp_growth
    unemployment = state.stats.unemployment
    deficit = state.economy.budget_balance < 0
    happiness = {r.id: r.happiness for r in state.economy.regions}

    updated = []
    for pop in pops:
        change = 0.0
        if growth > 0.02:
            change += 2.0 if pop.social_class == SocialClass.ELITE else 1.0
        elif growth < 0.0:
            change -= 3.0 if pop.social_class == SocialClass.LOWER else 1.0

        if unemployment > 0.10 and pop.social_class in (SocialClass.LOWER, SocialClass.MIDDLE):
            change -= 2.0

        if deficit and pop.social_class == SocialClass.ELITE:
            change -= 1.0

        region_happiness = happiness.get(pop.region_id)
        if region_happiness is not None:
            if region_happiness > 60.0:
                change += 1.0
            elif region_happiness < 40.0:
                change -= 1.0

        # Radicalization reacts to the satisfaction held at the start of the month.
        radicalization = pop.radicalization
        if pop.satisfaction < 30.0:
            radicalization += 1.0
        elif pop.satisfaction > 70.0:
            radicalization -= 1.0

        updated.append(
            pop.copy_with(
                satisfaction=clamp_percent(pop.satisfaction + change),
                radicalization=clamp_percent(radicalization),
            )
        )
    return updated


def calculate_popularity(
    state: GameState,
    pops: Sequence[SocialGroup],
    params: EngineParams = DEFAULT_PARAMS,
) -> float:
    """Move popularity toward weighted pop satisfaction and apply indicator nudges."""
    popularity = state.stats.popularity
    if pops:
        target = weighted_satisfaction(pops)
        popularity += (target - popularity) * params.popularity_blend

    if state.stats.inflation > 0.10:
        popularity -= 1.0
    if state.stats.unemployment > 0.10:
        popularity -= 1.0
    if state.stats.gdp_growth > 0.03:
        popularity += 0.5

    regions = state.economy.regions
    if regions:
        total_pop = sum(r.population for r in regions)
        if total_pop > 0:
            avg_happiness = float(
                np.average([r.happiness for r in regions], weights=[r.population for r in regions])
            )
            popularity += (avg_happiness - 60.0) / 20.0
    return clamp_percent(popularity)


def apply_social_update(state: GameState, params: EngineParams = DEFAULT_PARAMS) -> GameState:
    """Run the monthly social step.

    Writes pops, class struggle and popularity; struggle above
    STRUGGLE_STABILITY_THRESHOLD erodes stability by one point per 20.
    """
    pops = update_pop_satisfaction(state.social.pops, state)
    struggle = calculate_class_struggle(pops) if pops else state.social.class_struggle
    popularity = calculate_popularity(state, pops, params)
    stability = state.resources.stability
    if struggle > STRUGGLE_STABILITY_THRESHOLD:
        stability = clamp_percent(stability - (struggle - STRUGGLE_STABILITY_THRESHOLD) / 20.0)
    logger.debug("class struggle %.1f, popularity %.1f", struggle, popularity)
    return replace(
        state,
        social=state.social.copy_with(pops=tuple(pops), class_struggle=struggle),
        stats=state.stats.copy_with(popularity=popularity),
        resources=state.resources.copy_with(stability=stability),
    )


# --------------------------------------------------------------------------- #
# Generation                                                                   #
# --------------------------------------------------------------------------- #

# (pop type, class, population share, satisfaction, radicalization)
_PopTemplate = Tuple[PopType, SocialClass, float, float, float]

_HIGH_INCOME: Tuple[_PopTemplate, ...] = (
    (PopType.URBAN_MIDDLE_CLASS, SocialClass.MIDDLE, 0.35, 65, 10),
    (PopType.INTELLECTUALS, SocialClass.ELITE, 0.18, 70, 12),
    (PopType.BUSINESS_ELITE, SocialClass.ELITE, 0.12, 68, 15),
    (PopType.INDUSTRIAL_WORKERS, SocialClass.LOWER, 0.20, 50, 25),
    (PopType.RURAL_CONSERVATIVES, SocialClass.LOWER, 0.15, 55, 20),
)
_MID_INCOME: Tuple[_PopTemplate, ...] = (
    (PopType.URBAN_MIDDLE_CLASS, SocialClass.MIDDLE, 0.28, 55, 18),
    (PopType.INDUSTRIAL_WORKERS, SocialClass.LOWER, 0.30, 48, 30),
    (PopType.RURAL_CONSERVATIVES, SocialClass.LOWER, 0.25, 52, 22),
    (PopType.BUSINESS_ELITE, SocialClass.ELITE, 0.08, 60, 18),
    (PopType.MINORITIES, SocialClass.LOWER, 0.09, 45, 28),
)
_LOW_INCOME: Tuple[_PopTemplate, ...] = (
    (PopType.INDUSTRIAL_WORKERS, SocialClass.LOWER, 0.35, 45, 35),
    (PopType.RURAL_CONSERVATIVES, SocialClass.LOWER, 0.32, 50, 28),
    (PopType.URBAN_MIDDLE_CLASS, SocialClass.MIDDLE, 0.15, 48, 22),
    (PopType.MINORITIES, SocialClass.LOWER, 0.10, 40, 35),
    (PopType.ARMY_LOYALISTS, SocialClass.MIDDLE, 0.08, 60, 18),
)

# Relative presence of each pop type by region archetype.
_REGION_AFFINITY: Dict[RegionType, Dict[PopType, float]] = {
    RegionType.URBAN: {PopType.URBAN_MIDDLE_CLASS: 1.6, PopType.INTELLECTUALS: 1.8,
                       PopType.BUSINESS_ELITE: 2.0, PopType.RURAL_CONSERVATIVES: 0.2},
    RegionType.COASTAL: {PopType.BUSINESS_ELITE: 1.3, PopType.URBAN_MIDDLE_CLASS: 1.2},
    RegionType.PLAINS: {PopType.RURAL_CONSERVATIVES: 1.6, PopType.INTELLECTUALS: 0.5},
    RegionType.MOUNTAIN: {PopType.INDUSTRIAL_WORKERS: 1.4, PopType.MINORITIES: 1.5,
                          PopType.BUSINESS_ELITE: 0.4},
    RegionType.RURAL: {PopType.RURAL_CONSERVATIVES: 2.0, PopType.ARMY_LOYALISTS: 1.4,
                       PopType.INTELLECTUALS: 0.3, PopType.BUSINESS_ELITE: 0.3},
}

_KEY_ISSUES: Dict[PopType, Tuple[str, ...]] = {
    PopType.BUSINESS_ELITE: ("Taxes", "Growth"),
    PopType.URBAN_MIDDLE_CLASS: ("Education", "Health"),
    PopType.INDUSTRIAL_WORKERS: ("Unemployment", "Wages"),
    PopType.RURAL_CONSERVATIVES: ("Agriculture", "Security"),
    PopType.MINORITIES: ("Rights", "Unemployment"),
    PopType.INTELLECTUALS: ("Rights", "Research"),
    PopType.ARMY_LOYALISTS: ("Security", "Defense"),
}


def _template_for(gdp_per_capita: float) -> Tuple[_PopTemplate, ...]:
    if gdp_per_capita > 40000:
        return _HIGH_INCOME
    if gdp_per_capita > 18000:
        return _MID_INCOME
    return _LOW_INCOME


def generate_pops(
    regions: Sequence[Region],
    gdp_per_capita: float,
    rng: np.random.Generator,
) -> List[SocialGroup]:
    """Create population slices for every region.

    The national income tier picks the pop mix; each region's archetype
    skews it.  Slice populations sum exactly to their region's population.

    Args:
        regions:        Generated regions.
        gdp_per_capita: National GDP per inhabitant (selects the tier).
        rng:            Random source.

    Returns:
        List of SocialGroup records.
    """
    template = _template_for(gdp_per_capita)
    national = sum(r.population for r in regions)
    pops: List[SocialGroup] = []
    for region in regions:
        affinity = _REGION_AFFINITY.get(region.type, {})
        weights = [share * affinity.get(ptype, 1.0) for ptype, _, share, _, _ in template]
        sizes = apportion(weights, region.population)
        mood = (region.happiness - 50.0) * 0.2
        for (ptype, pclass, _, sat, rad), size in zip(template, sizes):
            influence = 1.0 if national <= 0 else max(1.0, 100.0 * size / national)
            pops.append(
                SocialGroup(
                    id=f"{region.id}_{ptype.value.lower()}",
                    type=ptype,
                    social_class=pclass,
                    region_id=region.id,
                    population_size=int(size),
                    satisfaction=clamp_percent(sat + mood + rng.uniform(-5.0, 5.0)),
                    radicalization=clamp_percent(rad + rng.uniform(-3.0, 3.0)),
                    political_influence=float(influence),
                    key_issues=_KEY_ISSUES[ptype],
                )
            )
    return pops


# --------------------------------------------------------------------------- #
# Protests                                                                     #
# --------------------------------------------------------------------------- #

# (satisfaction below, base monthly protest chance); scaled by radicalization.
_PROTEST_CHANCE: Tuple[Tuple[float, float], ...] = ((20.0, 0.8), (30.0, 0.4), (40.0, 0.1))
MIN_PROTEST_INTENSITY = 30.0


def protest_chance(pop: SocialGroup) -> float:
    """Monthly chance that a pop takes to the streets."""
    for below, chance in _PROTEST_CHANCE:
        if pop.satisfaction < below:
            return chance * pop.radicalization / 100.0
    return 0.0


def _participants(pop: SocialGroup, intensity: float) -> int:
    return int(pop.population_size * intensity / 200.0)


def protest_stability_impact(protest: Protest, pop: Optional[SocialGroup]) -> float:
    """Monthly stability lost to a protest (up to 10 points)."""
    radicalization = pop.radicalization if pop is not None else 50.0
    return protest.intensity * radicalization / 1000.0


def check_for_protests(
    pops: Sequence[SocialGroup],
    protests: Sequence[Protest],
    months_elapsed: int,
    rng: np.random.Generator,
) -> List[Protest]:
    """Return the active protests plus any new ones; one protest per pop."""
    protesting = {p.pop_id for p in protests}
    result = list(protests)
    for pop in pops:
        if pop.id in protesting:
            continue
        chance = protest_chance(pop)
        if chance <= 0.0 or rng.random() >= chance:
            continue
        intensity = max(MIN_PROTEST_INTENSITY, 100.0 - pop.satisfaction)
        result.append(
            Protest(
                id=f"protest_{pop.id}_{months_elapsed}",
                pop_id=pop.id,
                region_id=pop.region_id,
                started_month=months_elapsed,
                intensity=intensity,
                participants=_participants(pop, intensity),
                demands=pop.key_issues,
            )
        )
    return result


def update_protests(
    protests: Sequence[Protest],
    pops: Sequence[SocialGroup],
    rng: np.random.Generator,
    params: EngineParams = DEFAULT_PARAMS,
) -> List[Protest]:
    """Age protests by one month.

    Bitter protests (satisfaction < 25 after two months) may start
    escalating, gaining 10 intensity a month.  A pop above 60 satisfaction
    calms down by 20 intensity a month.  Protests at intensity 0, or whose
    pop no longer exists, end.
    """
    by_id = {p.id: p for p in pops}
    result = []
    for protest in protests:
        pop = by_id.get(protest.pop_id)
        if pop is None:
            continue
        duration = protest.duration + 1
        escalating = protest.escalating
        if not escalating and duration > 2 and pop.satisfaction < 25.0:
            escalating = bool(rng.random() < params.protest_escalation_chance)
        intensity = protest.intensity
        if escalating:
            intensity = min(100.0, intensity + 10.0)
        if pop.satisfaction > 60.0:
            updated = protest.copy_with(duration=duration, intensity=max(0.0, intensity - 20.0))
        else:
            updated = protest.copy_with(
                duration=duration,
                intensity=intensity,
                escalating=escalating,
                participants=_participants(pop, intensity),
            )
        if updated.intensity > 0.0:
            result.append(updated)
    return result


def run_protests(
    state: GameState,
    rng: np.random.Generator,
    params: EngineParams = DEFAULT_PARAMS,
) -> GameState:
    """Monthly protest step: age, start, and charge stability and regional output."""
    pops = state.social.pops
    ongoing = update_protests(state.social.protests, pops, rng, params)
    protests = check_for_protests(pops, ongoing, state.months_elapsed, rng)
    if not protests and not state.social.protests:
        return state

    by_id = {p.id: p for p in pops}
    stability = state.resources.stability
    output_loss: Dict[str, float] = {}
    for protest in protests:
        pop = by_id.get(protest.pop_id)
        impact = protest_stability_impact(protest, pop)
        stability -= impact
        output_loss[protest.region_id] = output_loss.get(protest.region_id, 0.0) + impact / 1000.0
    regions = tuple(
        r.copy_with(gdp_contribution=r.gdp_contribution * max(0.0, 1.0 - output_loss[r.id]))
        if r.id in output_loss else r
        for r in state.economy.regions
    )

    messages = []
    before = {p.id for p in state.social.protests}
    after = {p.id for p in protests}
    for protest in protests:
        if protest.id not in before:
            messages.append(
                f"Protests erupt in {protest.region_id}: {protest.participants} marchers "
                f"from {protest.pop_id}."
            )
    for protest in state.social.protests:
        if protest.id not in after:
            messages.append(f"The {protest.pop_id} protest has ended.")
    if messages:
        logger.info("protests: %d active, %d changes", len(protests), len(messages))

    new_state = replace(
        state,
        social=state.social.copy_with(protests=tuple(protests)),
        economy=state.economy.copy_with(regions=regions),
        resources=state.resources.copy_with(stability=clamp_percent(stability)),
    )
    return new_state.with_log(*messages) if messages else new_state


def _settle(
    state: GameState,
    protest: Protest,
    satisfaction: float,
    stability: float,
    ended: bool,
    message: str,
    updated: Optional[Protest] = None,
) -> Outcome:
    pops = tuple(
        p.copy_with(satisfaction=clamp_percent(p.satisfaction + satisfaction))
        if p.id == protest.pop_id else p
        for p in state.social.pops
    )
    if ended:
        protests = tuple(p for p in state.social.protests if p.id != protest.id)
    else:
        replacement = updated if updated is not None else protest
        protests = tuple(replacement if p.id == protest.id else p for p in state.social.protests)
    new_state = replace(
        state,
        social=state.social.copy_with(pops=pops, protests=protests),
        resources=state.resources.copy_with(
            stability=clamp_percent(state.resources.stability + stability)
        ),
    )
    logger.info("protest %s: %s", protest.id, message)
    return Outcome.success(new_state.with_log(message), message)


def resolve_protest(
    state: GameState,
    protest_id: str,
    action: ProtestAction,
    rng: np.random.Generator,
    params: EngineParams = DEFAULT_PARAMS,
) -> Outcome:
    """Answer a protest.

    negotiate: political capital; success (60-90% with the pop's mood)
               ends it with +15 satisfaction and +5 stability, failure
               costs 5 satisfaction and 2 stability.
    suppress:  political capital; always ends it, -25 satisfaction and
               -10 stability.
    concede:   budget scaled by intensity plus political capital; ends it
               with +30 satisfaction and +3 stability.
    ignore:    free; may escalate (-10 satisfaction, -5 stability) or
               simmer on (-3, -1).

    Returns:
        Outcome with the new state, or the unchanged state with an
        ActionRejectedError (unknown protest) or InsufficientResourceError.
    """
    action = ProtestAction(action)
    protest = state.social.protest(protest_id)
    if protest is None:
        return Outcome.failure(state, ActionRejectedError(f"no protest '{protest_id}'"))
    pop = state.social.pop(protest.pop_id)
    mood = pop.satisfaction if pop is not None else 50.0
    res = state.resources

    def _short(resource: str, required: float, available: float) -> Optional[Outcome]:
        if available < required:
            return Outcome.failure(state, InsufficientResourceError(resource, required, available))
        return None

    if action == ProtestAction.NEGOTIATE:
        cost = params.protest_negotiate_cost
        short = _short("political_capital", cost, res.political_capital)
        if short is not None:
            return short
        paid = state.with_resources(political_capital=clamp_percent(res.political_capital - cost))
        if rng.random() < 0.6 + mood / 200.0:
            return _settle(paid, protest, 15.0, 5.0, True, "Talks with the protesters succeeded.")
        return _settle(paid, protest, -5.0, -2.0, False, "Talks with the protesters failed.")

    if action == ProtestAction.SUPPRESS:
        cost = params.protest_suppress_cost
        short = _short("political_capital", cost, res.political_capital)
        if short is not None:
            return short
        paid = state.with_resources(political_capital=clamp_percent(res.political_capital - cost))
        return _settle(paid, protest, -25.0, -10.0, True, "Police dispersed the protest by force.")

    if action == ProtestAction.CONCEDE:
        budget_cost = protest.intensity * params.protest_concede_budget_per_intensity
        capital_cost = params.protest_concede_capital_cost
        short = _short("budget", budget_cost, res.budget) or _short(
            "political_capital", capital_cost, res.political_capital
        )
        if short is not None:
            return short
        paid = state.with_resources(
            budget=res.budget - budget_cost,
            political_capital=clamp_percent(res.political_capital - capital_cost),
        )
        return _settle(paid, protest, 30.0, 3.0, True, "The government gave in to the protesters.")

    if rng.random() < params.protest_ignore_escalation_chance:
        escalated = protest.copy_with(
            escalating=True, intensity=min(100.0, protest.intensity + 10.0)
        )
        return _settle(state, protest, -10.0, -5.0, False,
                       "The ignored protest is spreading.", updated=escalated)
    return _settle(state, protest, -3.0, -1.0, False, "The protest was ignored.")
