"""Tests for political capital regeneration and spending."""

import pytest

from statecraft.core.errors import InsufficientResourceError
from statecraft.core.params import EngineParams
from statecraft.systems.political_capital import (
    PARALYSIS_MESSAGE,
    can_afford,
    capital_regeneration,
    fire_minister,
    regen_political_capital,
    spend_political_capital,
)


def test_regeneration_formula(bare_state):
    # popularity 50 and default cohesion 50: 50*0.05 + 50*0.05
    assert capital_regeneration(bare_state) == pytest.approx(5.0)
    state = regen_political_capital(bare_state)
    assert state.resources.political_capital == pytest.approx(55.0)


def test_regeneration_is_capped(bare_state):
    state = bare_state.with_resources(political_capital=98.0)
    assert regen_political_capital(state).resources.political_capital == 100.0
    params = EngineParams(max_political_capital=60.0)
    assert regen_political_capital(bare_state, params).resources.political_capital == 55.0
    state = bare_state.with_resources(political_capital=59.0)
    assert regen_political_capital(state, params).resources.political_capital == 60.0


def test_paralysis_logged_when_nothing_regenerates(bare_state):
    params = EngineParams(capital_popularity_rate=0.0, capital_cohesion_rate=0.0)
    state = bare_state.with_resources(political_capital=0.0)
    state = regen_political_capital(state, params)
    assert state.resources.political_capital == 0.0
    assert state.logs[-1] == PARALYSIS_MESSAGE


def test_spend_success(bare_state):
    outcome = spend_political_capital(bare_state, 20.0, "Veto")
    assert outcome.ok
    assert outcome.state.resources.political_capital == pytest.approx(30.0)
    assert "Veto" in outcome.state.logs[-1]


def test_spend_insufficient(bare_state):
    outcome = spend_political_capital(bare_state, 80.0)
    assert not outcome.ok
    assert outcome.state is bare_state
    assert isinstance(outcome.error, InsufficientResourceError)


def test_spend_negative_raises(bare_state):
    with pytest.raises(ValueError):
        spend_political_capital(bare_state, -1.0)


def test_can_afford(bare_state):
    assert can_afford(bare_state, 50.0)
    assert not can_afford(bare_state, 50.1)


def test_fire_minister(bare_state, make_minister):
    state = bare_state.with_ministers([make_minister("m1")])
    outcome = fire_minister(state, "m1")
    assert outcome.ok
    assert outcome.state.ministers == ()
    assert outcome.state.resources.political_capital == pytest.approx(25.0)


def test_fire_minister_without_capital(bare_state, make_minister):
    state = bare_state.with_ministers([make_minister("m1")]).with_resources(political_capital=10.0)
    outcome = fire_minister(state, "m1")
    assert not outcome.ok
    assert outcome.state is state


def test_fire_unknown_minister_is_noop(bare_state):
    outcome = fire_minister(bare_state, "ghost")
    assert outcome.ok
    assert outcome.state is bare_state
