"""Tests for new-game generation."""

import numpy as np
import pytest

from statecraft.core.enums import Ideology, Ministry
from statecraft.simulation.bootstrap import GOVERNMENT_PARTY_ID, new_game


def test_new_game_layout(game):
    assert game.turn == 1
    assert game.months_elapsed == 0
    assert sum(r.population for r in game.economy.regions) == 10_000_000
    assert game.economy.total_population == 10_000_000
    assert sum(r.gdp_contribution for r in game.economy.regions) == pytest.approx(500_000.0)
    assert sum(i.gdp_contribution for i in game.economy.industries) == pytest.approx(100.0)
    assert len(game.ministers) == len(Ministry)
    assert all(m.party_id == GOVERNMENT_PARTY_ID for m in game.ministers)
    assert len(game.judiciary.supreme_court) == 9
    assert game.parliament.total_seats == 300
    assert game.logs[-1] == "A new administration takes office in Republic."


def test_new_game_pops_cover_the_population(game):
    assert sum(p.population_size for p in game.social.pops) == 10_000_000
    assert 0.0 <= game.social.class_struggle <= 100.0


def test_new_game_is_seeded():
    assert new_game(np.random.default_rng(3)) == new_game(np.random.default_rng(3))


def test_new_game_options():
    state = new_game(np.random.default_rng(1), country_name="Karsk", total_seats=101,
                     court_size=5, ideology=Ideology.SOCIALIST, popularity=30.0)
    assert state.country_name == "Karsk"
    assert state.parliament.total_seats == 101
    assert sum(p.seats for p in state.parliament.parties) == 101
    assert len(state.judiciary.supreme_court) == 5
    assert state.parliament.party(GOVERNMENT_PARTY_ID).ideology == Ideology.SOCIALIST
    assert state.stats.popularity == 30.0


@pytest.mark.parametrize("kwargs", [{"population": 0}, {"total_seats": 0}])
def test_new_game_rejects_empty_country(kwargs):
    with pytest.raises(ValueError):
        new_game(np.random.default_rng(0), **kwargs)
