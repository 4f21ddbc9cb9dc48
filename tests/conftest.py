"""Shared fixtures: small hand-built states and seeded random sources."""

from typing import Any

import numpy as np
import pytest

from statecraft.core.enums import FactionType, Ideology, Ministry, PolicyArea, Stance
from statecraft.core.state import (
    GameState,
    Government,
    Minister,
    MinisterPsychology,
    MinisterStats,
    NationalStats,
    Parliament,
    PartyFaction,
    PoliticalParty,
    Resources,
)
from statecraft.simulation.bootstrap import new_game


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def make_minister():
    def _make(minister_id: str = "minister-economy", **stat_overrides: Any) -> Minister:
        psychology = stat_overrides.pop("psychology", MinisterPsychology())
        trait_ids = stat_overrides.pop("trait_ids", ())
        scandals = stat_overrides.pop("scandals_count", 0)
        strategy = stat_overrides.pop("strategy", None)
        stats = dict(competence=50.0, loyalty=50.0, popularity=40.0, corruption=10.0,
                     ambition=30.0, internal_support=50.0)
        stats.update(stat_overrides)
        return Minister(
            id=minister_id,
            name=f"Name {minister_id}",
            age=50,
            ministry=Ministry.ECONOMY,
            party_id="party-gov",
            ideology=Ideology.CENTRIST,
            stats=MinisterStats(**stats),
            trait_ids=tuple(trait_ids),
            scandals_count=scandals,
            psychology=psychology,
            strategy=strategy,
        )
    return _make


@pytest.fixture
def make_faction():
    def _make(
        faction_id: str = "faction-a",
        party_id: str = "party-gov",
        stance: Stance = Stance.SUPPORTIVE,
        size: float = 60.0,
        ftype: FactionType = FactionType.MODERATE,
        priorities=(PolicyArea.ECONOMY,),
        loyalty: float = 70.0,
        influence: float = 50.0,
    ) -> PartyFaction:
        return PartyFaction(
            id=faction_id,
            name=f"Faction {faction_id}",
            party_id=party_id,
            type=ftype,
            ideology=Ideology.CENTRIST,
            size=size,
            influence=influence,
            priorities=tuple(priorities),
            stance=stance,
            loyalty_to_leader=loyalty,
        )
    return _make


@pytest.fixture
def bare_state():
    """State with resources and stats only: empty cabinet, chamber and economy."""
    return GameState(
        resources=Resources(budget=1000.0, political_capital=50.0, stability=60.0),
        stats=NationalStats(popularity=50.0, gdp=1000.0),
    )


@pytest.fixture
def chamber_state(bare_state, make_faction):
    """100-seat chamber: government party 60 seats, opposition 40."""
    factions = (
        make_faction("faction-gov-0", "party-gov", Stance.SUPPORTIVE, 60.0),
        make_faction("faction-gov-1", "party-gov", Stance.NEUTRAL, 40.0,
                     ftype=FactionType.HARDLINER, priorities=(PolicyArea.SECURITY,)),
        make_faction("faction-opp-0", "party-opp", Stance.HOSTILE, 100.0,
                     priorities=(PolicyArea.SOCIAL,), loyalty=50.0),
    )
    parties = (
        PoliticalParty(id="party-gov", name="Gov", ideology=Ideology.CENTRIST, seats=60,
                       is_government=True, faction_ids=("faction-gov-0", "faction-gov-1")),
        PoliticalParty(id="party-opp", name="Opp", ideology=Ideology.SOCIALIST, seats=40,
                       is_government=False, faction_ids=("faction-opp-0",)),
    )
    parliament = Parliament(total_seats=100, parties=parties, factions=factions)
    return bare_state.copy_with(government=Government(parliament=parliament))


@pytest.fixture
def game():
    """Fully generated opening state."""
    return new_game(np.random.default_rng(42))
