"""
New-game bootstrap.

Builds a complete opening GameState from a handful of national figures:
regions and industries, pops, a three-party parliament with factions, a
full cabinet and a supreme court.
"""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from ..core.enums import Ideology
from ..core.state import (
    Economy,
    GameState,
    Government,
    Judiciary,
    NationalStats,
    Resources,
    Social,
)
from ..core.traits import CountryContext
from ..systems.economy import default_budget_allocation, generate_industries, generate_regions
from ..systems.judiciary import generate_court
from ..systems.ministers import generate_cabinet
from ..systems.parliament import generate_parliament
from ..systems.social import calculate_class_struggle, generate_pops

logger = logging.getLogger("statecraft.simulation.bootstrap")

GOVERNMENT_PARTY_ID = "party-gov"


def new_game(
    rng: Optional[np.random.Generator] = None,
    country_name: str = "Republic",
    population: int = 10_000_000,
    gdp: float = 500_000.0,
    total_seats: int = 300,
    budget: float = 10_000.0,
    political_capital: float = 50.0,
    stability: float = 60.0,
    popularity: float = 50.0,
    court_size: int = 9,
    ideology: Ideology = Ideology.CENTRIST,
    context: Optional[CountryContext] = None,
) -> GameState:
    """Create the opening state of a new administration.

    Args:
        rng:               Random source (fresh generator when None).
        country_name:      Display name.
        population:        National population, split exactly across regions.
        gdp:               National GDP, split across regions.
        total_seats:       Size of parliament.
        budget:            Opening treasury.
        political_capital: Opening capital in [0, 100].
        stability:         Opening stability in [0, 100].
        popularity:        Opening popularity in [0, 100].
        court_size:        Number of supreme court judges.
        ideology:          Ideology of the governing party.
        context:           Country attributes biasing minister traits;
                           defaults to the governing ideology.

    Returns:
        GameState on turn 1, month 0.

    Raises:
        ValueError: If population or seats are not positive.
    """
    if population <= 0:
        raise ValueError(f"population must be > 0, got {population}")
    if total_seats <= 0:
        raise ValueError(f"total_seats must be > 0, got {total_seats}")
    if rng is None:
        rng = np.random.default_rng()
    if context is None:
        context = CountryContext(ideology=ideology)

    regions = generate_regions(population, gdp, rng)
    industries = generate_industries(regions, rng)
    pops = generate_pops(regions, gdp / population, rng)

    parliament = generate_parliament(total_seats, rng, government_ideology=ideology)
    ministers = generate_cabinet(context, rng, party_id=GOVERNMENT_PARTY_ID)
    court = generate_court(court_size, rng)

    state = GameState(
        resources=Resources(
            budget=budget, political_capital=political_capital, stability=stability
        ),
        stats=NationalStats(popularity=popularity, gdp=gdp),
        government=Government(ministers=tuple(ministers), parliament=parliament),
        judiciary=Judiciary(supreme_court=court),
        economy=Economy(
            regions=tuple(regions),
            industries=tuple(industries),
            budget_allocation=default_budget_allocation(),
            total_population=population,
        ),
        social=Social(pops=tuple(pops), class_struggle=calculate_class_struggle(pops)),
        country_name=country_name,
    )
    logger.info(
        "new game: %s, %d regions, %d ministers, %d judges, %d seats",
        country_name, len(regions), len(ministers), len(court), total_seats,
    )
    return state.with_log(f"A new administration takes office in {country_name}.")
