"""
Regional economy model.

Regions own population and a slice of national GDP; industries own a
percentage share of GDP.  Industry growth rates are annual and regions
compound one month of their dominant industry's growth per tick.  Budget
categories above their baseline (Infrastructure, Education and Health 15 %,
SocialWelfare 10 %) push development, unemployment and happiness.

Generation and every growth pass renormalise:
    sum(region.population)        == national population  (exact, integers)
    sum(region.gdp_contribution)  == national GDP
    sum(industry.gdp_contribution) == 100
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Dict, List, Mapping, Sequence, Tuple

import numpy as np

from ..core.enums import BudgetCategory, IndustryType, RegionType
from ..core.errors import (
    ActionRejectedError,
    InsufficientResourceError,
    InvalidAllocationError,
    Outcome,
)
from ..core.invariants import (
    allocation_is_valid,
    apportion,
    clamp,
    clamp_non_negative,
    clamp_percent,
    renormalize,
)
from ..core.params import DEFAULT_PARAMS, EngineParams
from ..core.state import (
    BudgetAllocation,
    GameState,
    Industry,
    Region,
    TradeAgreement,
)

logger = logging.getLogger("statecraft.systems.economy")

MONTHS_PER_YEAR = 12

REGION_NAMES: Dict[RegionType, Tuple[str, ...]] = {
    RegionType.COASTAL: ("North Coast", "South Shore", "Central Port", "East Bay", "West Coast"),
    RegionType.MOUNTAIN: ("Central Sierra", "Northern Mountains", "South Range", "Highlands", "Upper Valley"),
    RegionType.PLAINS: ("Central Plain", "Great Pampa", "Fertile Valley", "North Flats", "Southern Fields"),
    RegionType.URBAN: ("Capital District", "Central Metropolis", "Great City", "Metro Area", "Urban Core"),
    RegionType.RURAL: ("Rural Province", "Farm County", "Interior Region", "Rural District", "Open Country"),
}

REGION_INDUSTRY_MAP: Dict[RegionType, Tuple[IndustryType, ...]] = {
    RegionType.COASTAL: (IndustryType.SERVICES, IndustryType.INDUSTRY, IndustryType.TECHNOLOGY),
    RegionType.MOUNTAIN: (IndustryType.MINING, IndustryType.AGRICULTURE, IndustryType.INDUSTRY),
    RegionType.PLAINS: (IndustryType.AGRICULTURE, IndustryType.INDUSTRY),
    RegionType.URBAN: (IndustryType.SERVICES, IndustryType.TECHNOLOGY, IndustryType.INDUSTRY),
    RegionType.RURAL: (IndustryType.AGRICULTURE, IndustryType.MINING),
}

DEFAULT_INDUSTRY_GROWTH = 0.02

TRADE_INDUSTRY_EFFECTS: Tuple[Tuple[IndustryType, float], ...] = (
    (IndustryType.SERVICES, 0.01),
    (IndustryType.TECHNOLOGY, 0.015),
    (IndustryType.INDUSTRY, -0.005),
)
TRADE_MIN_RELATION = 60.0


# --------------------------------------------------------------------------- #
# Result containers                                                            #
# --------------------------------------------------------------------------- #


@dataclass(frozen=True)
class BudgetEffects:
    """Monthly side effects of the budget allocation.

    Attributes:
        health_growth:        Annual population growth rate.
        education_bonus:      Technology points (÷100 per month).
        stability_bonus:      Stability points (÷10 per month).
        infrastructure_bonus: Development potential.
        research_progress:    Research points per month.
        happiness_bonus:      Social-welfare happiness potential.
    """

    health_growth: float
    education_bonus: float
    stability_bonus: float
    infrastructure_bonus: float
    research_progress: float
    happiness_bonus: float


@dataclass(frozen=True)
class EconomyResult:
    """Output of one regional growth pass.

    Attributes:
        gdp_growth_rate:       Annualised national growth.
        national_unemployment: Population-weighted unemployment fraction.
        average_happiness:     Population-weighted regional happiness.
    """

    total_gdp: float
    gdp_growth_rate: float
    national_unemployment: float
    average_happiness: float
    total_population: int
    regions: Tuple[Region, ...]
    industries: Tuple[Industry, ...]
    budget_effects: BudgetEffects


# --------------------------------------------------------------------------- #
# Generation                                                                   #
# --------------------------------------------------------------------------- #


def _pick_region_type(used: List[RegionType], rng: np.random.Generator) -> RegionType:
    # Unused archetypes are always eligible, used ones with 30 % chance each.
    candidates = [t for t in RegionType if t not in used or rng.random() > 0.7]
    if not candidates:
        candidates = list(RegionType)
    return candidates[int(rng.integers(len(candidates)))]


def generate_regions(
    total_population: int,
    total_gdp: float,
    rng: np.random.Generator,
) -> List[Region]:
    """Generate 3–5 regions; the first is always the urban capital.

    Args:
        total_population: National population to distribute exactly.
        total_gdp:        National GDP to distribute exactly.
        rng:              Random source.

    Returns:
        Regions whose populations sum to ``total_population`` and whose GDP
        contributions sum to ``total_gdp``.
    """
    count = int(rng.integers(3, 6))
    used: List[RegionType] = [RegionType.URBAN]
    drafts = []
    for i in range(count):
        rtype = RegionType.URBAN if i == 0 else _pick_region_type(used, rng)
        if i > 0:
            used.append(rtype)
        urban = rtype == RegionType.URBAN
        pop_share = rng.uniform(0.3, 0.5) if urban else rng.uniform(0.1, 0.25)
        gdp_share = rng.uniform(0.35, 0.5) if urban else rng.uniform(0.1, 0.3)
        industries = REGION_INDUSTRY_MAP[rtype]
        unemployment = rng.uniform(0.05, 0.10) if urban else rng.uniform(0.08, 0.15)
        development = rng.uniform(70.0, 90.0) if urban else rng.uniform(40.0, 70.0)
        infrastructure = development * rng.uniform(0.8, 1.0)
        happiness = 50.0 + (development - 50.0) * 0.3 + rng.random() * 20.0
        names = REGION_NAMES[rtype]
        drafts.append(
            dict(
                id=f"region-{i}",
                name=names[int(rng.integers(len(names)))],
                type=rtype,
                pop_share=pop_share,
                gdp_share=gdp_share,
                dominant_industry=industries[int(rng.integers(len(industries)))],
                unemployment=float(unemployment),
                development=float(round(development)),
                infrastructure=float(round(infrastructure)),
                happiness=clamp(happiness, 30.0, 90.0),
            )
        )

    populations = apportion([d["pop_share"] for d in drafts], int(total_population))
    gdps = renormalize([d["gdp_share"] for d in drafts], float(total_gdp))
    return [
        Region(
            id=d["id"],
            name=d["name"],
            type=d["type"],
            population=pop,
            gdp_contribution=clamp_non_negative(gdp),
            dominant_industry=d["dominant_industry"],
            unemployment=d["unemployment"],
            development=d["development"],
            infrastructure=d["infrastructure"],
            happiness=d["happiness"],
        )
        for d, pop, gdp in zip(drafts, populations, gdps)
    ]


def generate_industries(regions: Sequence[Region], rng: np.random.Generator) -> List[Industry]:
    """Generate the five national industries with contributions summing to 100.

    Industries that dominate more regions get a proportionally larger share.
    """
    n_regions = max(1, len(regions))
    drafts = []
    for itype in IndustryType:
        if itype == IndustryType.SERVICES:
            contribution = rng.uniform(40.0, 55.0)
        elif itype == IndustryType.INDUSTRY:
            contribution = rng.uniform(25.0, 35.0)
        else:
            contribution = rng.uniform(5.0, 20.0)
        dominance = sum(1 for r in regions if r.dominant_industry == itype) / n_regions
        contribution *= 1.0 + 0.5 * dominance
        drafts.append(
            (itype, contribution, rng.uniform(0.02, 0.05), contribution * rng.uniform(0.8, 1.2))
        )
    shares = renormalize([d[1] for d in drafts], 100.0)
    return [
        Industry(
            type=itype,
            gdp_contribution=clamp_percent(share),
            growth_rate=float(growth),
            employment=clamp_percent(employment),
        )
        for (itype, _, growth, employment), share in zip(drafts, shares)
    ]


def default_budget_allocation() -> BudgetAllocation:
    return BudgetAllocation()


def validate_budget_allocation(allocation: Mapping[BudgetCategory, float]) -> bool:
    """True when every category is in [0, 100] and the total is 100 ± 0.01."""
    return allocation_is_valid(allocation)


# --------------------------------------------------------------------------- #
# Monthly growth pass                                                          #
# --------------------------------------------------------------------------- #


def calculate_budget_effects(allocation: BudgetAllocation, total_budget: float) -> BudgetEffects:
    return BudgetEffects(
        health_growth=allocation.health / 100.0 * 0.005,
        education_bonus=allocation.education / 100.0 * 10.0,
        stability_bonus=allocation.defense / 100.0 * 15.0,
        infrastructure_bonus=allocation.infrastructure / 100.0 * 8.0,
        research_progress=allocation.research / 100.0 * total_budget * 0.001,
        happiness_bonus=allocation.social_welfare / 100.0 * 5.0,
    )


def industry_growth_rates(
    industries: Sequence[Industry],
    trade_agreements: Sequence[TradeAgreement],
    params: EngineParams = DEFAULT_PARAMS,
) -> Dict[IndustryType, float]:
    """Annual growth per industry after subsidies, taxes and trade deltas."""
    rates: Dict[IndustryType, float] = {}
    for ind in industries:
        growth = ind.growth_rate
        growth += ind.subsidy_level / 100.0 * params.subsidy_growth_bonus
        growth -= ind.tax_rate / 100.0 * params.tax_growth_penalty
        growth += sum(a.effect_on(ind.type) for a in trade_agreements)
        rates[ind.type] = growth
    return rates


def _update_region(
    region: Region,
    growth: float,
    allocation: BudgetAllocation,
    params: EngineParams,
) -> Region:
    unemployment = region.unemployment
    happiness = region.happiness
    development = region.development
    infrastructure = region.infrastructure

    if allocation.infrastructure > 15.0:
        infrastructure += (allocation.infrastructure - 15.0) / 100.0 * 2.0
        development += (allocation.infrastructure - 15.0) / 100.0
    if allocation.education > 15.0:
        unemployment -= (allocation.education - 15.0) / 1000.0
    if allocation.health > 15.0:
        happiness += (allocation.health - 15.0) / 100.0 * 2.0
    if allocation.social_welfare > 10.0:
        unemployment -= (allocation.social_welfare - 10.0) / 800.0
        happiness += (allocation.social_welfare - 10.0) / 100.0 * 1.5

    development = clamp_percent(development)
    happiness += (development - region.development) * 0.5

    return region.copy_with(
        gdp_contribution=clamp_non_negative(
            region.gdp_contribution * (1.0 + growth / MONTHS_PER_YEAR)
        ),
        unemployment=clamp(unemployment, params.unemployment_floor, params.unemployment_ceiling),
        happiness=clamp(happiness, params.happiness_floor, 100.0),
        development=development,
        infrastructure=clamp_percent(infrastructure),
    )


def calculate_regional_economy(
    regions: Sequence[Region],
    industries: Sequence[Industry],
    allocation: BudgetAllocation,
    total_budget: float,
    trade_agreements: Sequence[TradeAgreement] = (),
    params: EngineParams = DEFAULT_PARAMS,
) -> EconomyResult:
    """Advance the regional economy by one month.

    Pure: inputs are not modified.  Empty region lists produce a zero
    economy rather than an error.

    Args:
        regions:          Current regions.
        industries:       Current industries.
        allocation:       Budget allocation in percent.
        total_budget:     Treasury (scales research progress).
        trade_agreements: Active agreements.
        params:           Engine parameters.

    Returns:
        EconomyResult with renormalised regions and industries and the
        national aggregates.
    """
    effects = calculate_budget_effects(allocation, total_budget)
    rates = industry_growth_rates(industries, trade_agreements, params)

    updated = [
        _update_region(r, rates.get(r.dominant_industry, DEFAULT_INDUSTRY_GROWTH), allocation, params)
        for r in regions
    ]

    # Population growth from health spending, redistributed exactly.
    old_population = sum(r.population for r in regions)
    new_population = int(round(old_population * (1.0 + effects.health_growth / MONTHS_PER_YEAR)))
    if updated:
        populations = apportion([r.population for r in updated], new_population)
        updated = [r.copy_with(population=p) for r, p in zip(updated, populations)]

    total_gdp = float(sum(r.gdp_contribution for r in updated))
    if updated:
        gdps = renormalize([r.gdp_contribution for r in updated], total_gdp)
        updated = [r.copy_with(gdp_contribution=clamp_non_negative(g)) for r, g in zip(updated, gdps)]
    previous_gdp = float(sum(r.gdp_contribution for r in regions))
    monthly = (total_gdp - previous_gdp) / previous_gdp if previous_gdp > 0 else 0.0
    growth_rate = (1.0 + monthly) ** MONTHS_PER_YEAR - 1.0

    new_industries = []
    for ind in industries:
        growth = rates[ind.type]
        employment = ind.employment
        if growth > 0.03:
            employment += 0.1
        elif growth < 0.01:
            employment -= 0.15
        new_industries.append(
            ind.copy_with(
                gdp_contribution=clamp_percent(
                    ind.gdp_contribution * (1.0 + growth / MONTHS_PER_YEAR)
                ),
                employment=clamp_percent(employment),
            )
        )
    if new_industries:
        shares = renormalize([i.gdp_contribution for i in new_industries], 100.0)
        new_industries = [
            i.copy_with(gdp_contribution=clamp_percent(s)) for i, s in zip(new_industries, shares)
        ]

    total_pop = sum(r.population for r in updated)
    if total_pop > 0:
        weights = [r.population for r in updated]
        unemployment = float(np.average([r.unemployment for r in updated], weights=weights))
        happiness = float(np.average([r.happiness for r in updated], weights=weights))
    else:
        unemployment = float(np.mean([r.unemployment for r in updated])) if updated else 0.0
        happiness = float(np.mean([r.happiness for r in updated])) if updated else 50.0

    return EconomyResult(
        total_gdp=total_gdp,
        gdp_growth_rate=float(growth_rate),
        national_unemployment=unemployment,
        average_happiness=happiness,
        total_population=total_pop,
        regions=tuple(updated),
        industries=tuple(new_industries),
        budget_effects=effects,
    )


def apply_economy_result(
    state: GameState,
    result: EconomyResult,
    params: EngineParams = DEFAULT_PARAMS,
) -> GameState:
    """Write a growth pass into the state together with its fiscal effects.

    Revenue is GDP × tax rate; the treasury moves a twelfth of the gap
    between revenue and spending each month.
    """
    if not result.regions:
        return state
    economy = state.economy
    spending = state.resources.budget * economy.budget_allocation.total / 100.0
    revenue = result.total_gdp * economy.tax_rate
    balance = (revenue - spending) / MONTHS_PER_YEAR

    inflation = 0.02 + result.gdp_growth_rate * 0.5
    if result.total_gdp > 0 and spending / result.total_gdp > 0.4:
        inflation += 0.02

    effects = result.budget_effects
    new_economy = economy.copy_with(
        regions=result.regions,
        industries=result.industries,
        total_population=result.total_population,
        technology_level=clamp_percent(economy.technology_level + effects.education_bonus / 100.0),
        research_points=economy.research_points + effects.research_progress,
        budget_balance=balance,
    )
    stats = state.stats.copy_with(
        gdp=clamp_non_negative(result.total_gdp),
        gdp_growth=result.gdp_growth_rate,
        unemployment=clamp(result.national_unemployment, 0.0, 1.0),
        inflation=inflation,
    )
    resources = state.resources.copy_with(
        budget=clamp_non_negative(state.resources.budget + balance),
        stability=clamp_percent(state.resources.stability + effects.stability_bonus / 10.0),
    )
    return replace(state, economy=new_economy, stats=stats, resources=resources)


def run_economy_tick(state: GameState, params: EngineParams = DEFAULT_PARAMS) -> GameState:
    economy = state.economy
    result = calculate_regional_economy(
        economy.regions,
        economy.industries,
        economy.budget_allocation,
        state.resources.budget,
        economy.trade_agreements,
        params,
    )
    logger.debug(
        "economy: gdp %.1f growth %.4f unemployment %.3f",
        result.total_gdp, result.gdp_growth_rate, result.national_unemployment,
    )
    return apply_economy_result(state, result, params)


# --------------------------------------------------------------------------- #
# On-demand actions                                                            #
# --------------------------------------------------------------------------- #


def update_budget_allocation(
    state: GameState, allocation: Mapping[BudgetCategory, float]
) -> Outcome:
    """Replace the budget allocation; rejected unless it sums to 100 ± 0.01."""
    full = {cat: float(allocation.get(cat, 0.0)) for cat in BudgetCategory}
    if not validate_budget_allocation(full):
        total = sum(full.values())
        return Outcome.failure(
            state, InvalidAllocationError(f"allocation sums to {total:.2f}, expected 100")
        )
    new_economy = state.economy.copy_with(budget_allocation=BudgetAllocation.from_mapping(full))
    return Outcome.success(
        replace(state, economy=new_economy).with_log("National budget reallocated."),
        "budget reallocated",
    )


def _replace_industry(state: GameState, industry: Industry) -> GameState:
    industries = tuple(industry if i.type == industry.type else i for i in state.economy.industries)
    return replace(state, economy=state.economy.copy_with(industries=industries))


def subsidize_industry(state: GameState, industry_type: IndustryType, amount: float) -> Outcome:
    """Spend treasury to raise an industry's subsidy level.

    The subsidy level rises by the amount as a percentage of the treasury.
    """
    industry = state.economy.industry(industry_type)
    if industry is None or amount <= 0:
        return Outcome.success(state, "nothing to subsidize")
    budget = state.resources.budget
    if budget < amount:
        return Outcome.failure(state, InsufficientResourceError("budget", amount, budget))
    level = clamp_percent(industry.subsidy_level + amount / budget * 100.0)
    new_state = _replace_industry(state, industry.copy_with(subsidy_level=level))
    new_state = new_state.with_resources(budget=clamp_non_negative(budget - amount))
    return Outcome.success(
        new_state.with_log(f"Subsidy granted to {industry_type.value}."),
        f"{industry_type.value} subsidy at {level:.1f}%",
    )


def tax_industry(state: GameState, industry_type: IndustryType, tax_rate: float) -> Outcome:
    """Set an industry's sector tax (percent, clamped to [0, 100])."""
    industry = state.economy.industry(industry_type)
    if industry is None:
        return Outcome.success(state, "no such industry")
    rate = clamp_percent(tax_rate)
    new_state = _replace_industry(state, industry.copy_with(tax_rate=rate))
    return Outcome.success(
        new_state.with_log(f"Tax on {industry_type.value} set to {rate:g}%."),
        f"{industry_type.value} tax {rate:g}%",
    )


def sign_trade_agreement(
    state: GameState,
    partner: str,
    rng: np.random.Generator,
    relation: float = 100.0,
    params: EngineParams = DEFAULT_PARAMS,
) -> Outcome:
    """Sign a free-trade agreement with a partner country.

    Requires a relation of at least 60 and no existing agreement with the
    same partner, and costs political capital.
    """
    if relation < TRADE_MIN_RELATION:
        return Outcome.failure(
            state, ActionRejectedError(f"relation with {partner} too low ({relation:g})")
        )
    if any(a.partner == partner for a in state.economy.trade_agreements):
        return Outcome.failure(
            state, ActionRejectedError(f"agreement with {partner} already exists")
        )
    capital = state.resources.political_capital
    if capital < params.cost_trade_agreement:
        return Outcome.failure(
            state,
            InsufficientResourceError("political_capital", params.cost_trade_agreement, capital),
        )
    agreement = TradeAgreement(
        id=f"trade_{partner.lower().replace(' ', '_')}",
        partner=partner,
        industry_effects=TRADE_INDUSTRY_EFFECTS,
        gdp_bonus=float(rng.uniform(0.02, 0.05)),
    )
    new_state = replace(
        state,
        economy=state.economy.copy_with(
            trade_agreements=state.economy.trade_agreements + (agreement,)
        ),
    ).with_resources(political_capital=clamp_percent(capital - params.cost_trade_agreement))
    return Outcome.success(
        new_state.with_log(f"Trade agreement signed with {partner}."),
        f"trade agreement with {partner}",
    )
