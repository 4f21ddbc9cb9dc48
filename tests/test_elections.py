"""Tests for the campaign window and election outcome."""

import pytest

import numpy as np

from statecraft.core.enums import IndustryType, PopType, RegionType, SocialClass
from statecraft.core.errors import ActionRejectedError, InsufficientResourceError
from statecraft.core.params import EngineParams
from statecraft.core.state import Economy, ElectoralCampaign, Region, Social, SocialGroup
from statecraft.systems.elections import (
    calculate_election_results,
    handle_election_if_needed,
    hold_election,
    hold_rally,
    is_campaign_turn,
    launch_smear_campaign,
    update_campaign,
    update_campaign_mode,
)


def _pop(pop_id, region_id, satisfaction, influence=1.0):
    return SocialGroup(id=pop_id, type=PopType.URBAN_MIDDLE_CLASS, social_class=SocialClass.MIDDLE,
                       region_id=region_id, population_size=1000, satisfaction=satisfaction,
                       radicalization=10.0, political_influence=influence)


def _with_pops(state, pops):
    return state.copy_with(social=Social(pops=tuple(pops)))


@pytest.mark.parametrize("satisfaction, expected", [(100.0, 100.0), (0.0, 0.0)])
def test_uniform_satisfaction(bare_state, satisfaction, expected):
    pops = [_pop(f"p{i}", f"r{i % 3}", satisfaction) for i in range(9)]
    result = calculate_election_results(_with_pops(bare_state, pops))
    assert result.support == pytest.approx(expected)
    assert result.won == (result.support >= 50.0)


def test_regions_are_averaged_with_influence_weights(bare_state):
    pops = [
        _pop("a", "r1", 80.0, influence=3.0),
        _pop("b", "r1", 40.0, influence=1.0),
        _pop("c", "r2", 30.0),
    ]
    result = calculate_election_results(_with_pops(bare_state, pops))
    # r1: (240 + 40) / 4 = 70, r2: 30
    assert result.support == pytest.approx(50.0)
    assert result.won


def test_no_pops_means_no_support(bare_state):
    result = calculate_election_results(bare_state)
    assert result.support == 0.0
    assert not result.won


def test_victory_resets_the_term(bare_state):
    state = _with_pops(bare_state, [_pop("a", "r1", 70.0)]).copy_with(turn=48, is_campaign_mode=True)
    state = hold_election(state)
    assert state.turn == 1
    assert state.resources.political_capital == 100.0
    assert not state.is_campaign_mode
    assert not state.administration_ended


def test_defeat_ends_administration(bare_state):
    state = _with_pops(bare_state, [_pop("a", "r1", 20.0)])
    state = hold_election(state)
    assert state.administration_ended
    assert "Electoral defeat" in state.logs[-1]


def test_campaign_window():
    assert not is_campaign_turn(44)
    assert is_campaign_turn(45)
    assert is_campaign_turn(48)
    params = EngineParams(campaign_start_turn=21, election_turn=24)
    assert is_campaign_turn(22, params)


def test_campaign_mode_toggles_and_logs(bare_state):
    state = update_campaign_mode(bare_state.copy_with(turn=45))
    assert state.is_campaign_mode
    assert state.logs[-1] == "The election campaign has begun."
    assert update_campaign_mode(state) is state


def test_election_only_on_election_turn(bare_state):
    early = bare_state.copy_with(turn=47)
    assert handle_election_if_needed(early) is early
    due = bare_state.copy_with(turn=48)
    assert handle_election_if_needed(due).administration_ended


def test_ended_administration_holds_no_election(bare_state):
    ended = bare_state.copy_with(turn=48, administration_ended=True)
    assert handle_election_if_needed(ended) is ended


def _region(region_id):
    return Region(id=region_id, name=region_id, type=RegionType.PLAINS, population=1000,
                  gdp_contribution=100.0, dominant_industry=IndustryType.AGRICULTURE,
                  unemployment=0.05, development=50.0, infrastructure=50.0, happiness=50.0)


def test_region_without_pops_counts_as_zero(bare_state):
    state = _with_pops(bare_state, [_pop("a", "r1", 80.0)]).copy_with(
        economy=Economy(regions=(_region("r1"), _region("r2")))
    )
    result = calculate_election_results(state)
    assert result.support == pytest.approx(40.0)
    assert not result.won


def _campaigning(state, momentum=0.0):
    campaign = ElectoralCampaign(months_until_election=3, momentum=momentum)
    return state.copy_with(is_campaign_mode=True,
                           social=state.social.copy_with(campaign=campaign))


def test_momentum_shifts_support(bare_state):
    state = _campaigning(_with_pops(bare_state, [_pop("a", "r1", 45.0)]), momentum=60.0)
    result = calculate_election_results(state)
    assert result.support == pytest.approx(51.0)
    assert result.won


def test_campaign_opens_and_closes_with_the_window(bare_state):
    state = update_campaign_mode(bare_state.copy_with(turn=45))
    assert state.social.campaign.months_until_election == 3
    assert state.social.campaign.momentum == 0.0
    closed = update_campaign_mode(state.copy_with(turn=1))
    assert not closed.is_campaign_mode
    assert closed.social.campaign is None


def test_election_clears_the_campaign(bare_state):
    state = _campaigning(_with_pops(bare_state, [_pop("a", "r1", 70.0)]))
    state = hold_election(state)
    assert state.social.campaign is None


def test_momentum_decays_to_floor(bare_state):
    state = _campaigning(bare_state, momentum=-49.0)
    state = update_campaign(state)
    assert state.social.campaign.momentum == -50.0
    assert state.social.campaign.months_until_election == 2
    assert update_campaign(state).social.campaign.momentum == -50.0
    assert update_campaign(bare_state) is bare_state


def test_rally_needs_a_campaign(bare_state):
    state = _with_pops(bare_state, [_pop("a", "r1", 40.0)])
    outcome = hold_rally(state)
    assert isinstance(outcome.error, ActionRejectedError)
    assert outcome.state is state


def test_rally_lifts_the_audience(bare_state):
    pops = [_pop("a", "r1", 40.0),
            SocialGroup(id="b", type=PopType.MINORITIES, social_class=SocialClass.LOWER,
                        region_id="r1", population_size=500, satisfaction=40.0,
                        radicalization=30.0)]
    state = _campaigning(_with_pops(bare_state, pops))
    outcome = hold_rally(state, target=PopType.MINORITIES)
    assert outcome.ok
    new = outcome.state
    assert new.resources.budget == pytest.approx(950.0)
    assert new.social.pop("a").satisfaction == 40.0
    assert new.social.pop("b").satisfaction == pytest.approx(50.0)
    assert new.social.campaign.momentum == 5.0
    assert new.social.campaign.rallies_held == 1


def test_rally_gated_by_budget_and_audience(bare_state):
    state = _campaigning(_with_pops(bare_state, [_pop("a", "r1", 40.0)]))
    broke = state.with_resources(budget=10.0)
    outcome = hold_rally(broke)
    assert isinstance(outcome.error, InsufficientResourceError)
    assert outcome.state is broke
    assert isinstance(hold_rally(state, region_id="nowhere").error, ActionRejectedError)


def test_smear_costs_capital_and_budget(bare_state):
    state = _campaigning(bare_state)
    outcome = launch_smear_campaign(state, np.random.default_rng(0),
                                    EngineParams(smear_backfire_chance=0.0))
    assert outcome.ok
    assert outcome.state.resources.political_capital == pytest.approx(25.0)
    assert outcome.state.resources.budget == pytest.approx(900.0)
    assert outcome.state.social.campaign.momentum == 10.0


def test_smear_backfire_costs_popularity(bare_state):
    state = _campaigning(bare_state)
    outcome = launch_smear_campaign(state, np.random.default_rng(0),
                                    EngineParams(smear_backfire_chance=1.0))
    assert outcome.state.stats.popularity == pytest.approx(35.0)
    assert outcome.state.social.campaign.momentum == 0.0
    assert outcome.state.social.campaign.smear_campaigns == 1


def test_smear_backfires_about_thirty_percent(bare_state):
    state = _campaigning(bare_state)
    rng = np.random.default_rng(7)
    backfires = sum(
        launch_smear_campaign(state, rng).state.stats.popularity < 50.0 for _ in range(4000)
    )
    assert backfires / 4000 == pytest.approx(0.3, abs=0.03)


def test_smear_without_capital(bare_state):
    state = _campaigning(bare_state).with_resources(political_capital=10.0)
    outcome = launch_smear_campaign(state, np.random.default_rng(0))
    assert isinstance(outcome.error, InsufficientResourceError)
    assert outcome.error.resource == "political_capital"
