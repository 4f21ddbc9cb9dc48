"""Tests for the monthly tick and the stateful orchestrator."""

import numpy as np
import pytest

from statecraft.core.effects import DecisionOption
from statecraft.core.enums import BillType, PolicyArea, Urgency
from statecraft.core.errors import UnknownOptionError
from statecraft.core.params import EngineParams
from statecraft.core.state import Bill
from statecraft.simulation.orchestrator import (
    TurnOrchestrator,
    evaluate_turn,
    resolve_decision,
    unemployment_crisis_decision,
)
from statecraft.systems.parliament_events import check_parliamentary_events

QUIET = EngineParams(parliament_event_chance=0.0)


def _cheapest(decision):
    def cost(option: DecisionOption) -> float:
        if option.cost is None:
            return 0.0
        return option.cost.budget / 100.0 + option.cost.political_capital
    return min(decision.options, key=cost)


def _assert_in_range(state):
    assert 0.0 <= state.stats.popularity <= 100.0
    assert 0.0 <= state.resources.stability <= 100.0
    assert 0.0 <= state.resources.political_capital <= 100.0
    assert state.resources.budget >= 0.0
    assert 0.0 <= state.stats.unemployment <= 1.0
    assert state.economy.budget_allocation.total == pytest.approx(100.0, abs=0.01)
    assert sum(i.gdp_contribution for i in state.economy.industries) == pytest.approx(100.0)
    assert sum(r.population for r in state.economy.regions) == state.economy.total_population
    for minister in state.ministers:
        assert all(0.0 <= v <= 100.0 for v in minister.stats.to_dict().values())
    for faction in state.parliament.factions:
        assert 0.0 <= faction.loyalty_to_leader <= 100.0


def test_invariants_hold_over_a_term(game):
    orchestrator = TurnOrchestrator(rng=np.random.default_rng(5))
    orchestrator.initialise(game)
    for _ in range(48):
        orchestrator.tick()
        for decision in orchestrator.pending_decisions:
            orchestrator.resolve(decision.id, _cheapest(decision).id)
        _assert_in_range(orchestrator.state)
        if orchestrator.state.administration_ended:
            break


def test_tick_is_reproducible(game):
    def run(seed):
        rng = np.random.default_rng(seed)
        state = game
        for _ in range(12):
            state = evaluate_turn(state, rng).new_state
        return state

    assert run(9) == run(9)


def test_evaluate_turn_does_not_modify_input(game, rng):
    snapshot = game.to_dict()
    result = evaluate_turn(game, rng)
    assert game.to_dict() == snapshot
    assert result.new_state.months_elapsed == 1
    assert result.new_state.turn == 2
    assert result.new_state.failed_bills_this_month == 0


def test_ended_administration_is_unchanged(game, rng):
    ended = game.copy_with(administration_ended=True)
    result = evaluate_turn(ended, rng)
    assert result.new_state is ended
    assert result.new_decisions == ()


def test_court_ages_once_a_year(game):
    state = game
    rng = np.random.default_rng(2)
    ages = {j.id: j.age for j in game.judiciary.supreme_court}
    for _ in range(11):
        state = evaluate_turn(state, rng, QUIET).new_state
    assert {j.id: j.age for j in state.judiciary.supreme_court} == ages
    state = evaluate_turn(state, rng, QUIET).new_state
    for judge in state.judiciary.supreme_court:
        assert judge.age == ages[judge.id] + 1


def test_short_term_reaches_an_election(game):
    params = EngineParams(campaign_start_turn=2, election_turn=3, parliament_event_chance=0.0)
    rng = np.random.default_rng(4)
    state = evaluate_turn(game, rng, params).new_state
    assert state.is_campaign_mode
    assert state.social.campaign is not None
    state = evaluate_turn(state, rng, params).new_state
    assert not state.is_campaign_mode
    assert state.social.campaign is None
    if not state.administration_ended:
        assert state.turn == 1
        assert state.resources.political_capital == 100.0


def test_unemployment_crisis_decision(bare_state):
    assert unemployment_crisis_decision(bare_state.with_stats(unemployment=0.20)) is None
    decision = unemployment_crisis_decision(bare_state.with_stats(unemployment=0.3))
    assert decision.urgency == Urgency.CRISIS
    assert decision.option("public_works").cost.budget == 500.0

    outcome = resolve_decision(bare_state.with_stats(unemployment=0.3), decision, "public_works")
    assert outcome.state.resources.budget == pytest.approx(500.0)
    assert outcome.state.stats.unemployment == pytest.approx(0.28)


def test_resolve_decision_unknown_option(bare_state):
    decision = unemployment_crisis_decision(bare_state.with_stats(unemployment=0.3))
    outcome = resolve_decision(bare_state, decision, "panic")
    assert isinstance(outcome.error, UnknownOptionError)


def test_resolve_decision_clears_pending_event(chamber_state, rng):
    parliament = chamber_state.parliament.copy_with(government_support=20.0)
    state = chamber_state.with_parliament(parliament).with_stats(popularity=20.0)
    event = check_parliamentary_events(state, rng)
    state = state.copy_with(pending_event=event)
    outcome = resolve_decision(state, event.to_decision(), "call_snap_election")
    assert outcome.state.pending_event is None


def test_orchestrator_requires_initialise():
    orchestrator = TurnOrchestrator()
    with pytest.raises(RuntimeError):
        orchestrator.tick()
    with pytest.raises(RuntimeError):
        orchestrator.state


def test_orchestrator_decision_lifecycle(bare_state):
    orchestrator = TurnOrchestrator(params=QUIET, rng=np.random.default_rng(0))
    orchestrator.initialise(bare_state.with_stats(unemployment=0.3))
    orchestrator.tick()
    assert [d.id for d in orchestrator.pending_decisions] == ["unemployment_crisis_1"]

    outcome = orchestrator.resolve("unemployment_crisis_1", "public_works")
    assert outcome.ok
    assert orchestrator.state.resources.budget == pytest.approx(500.0)
    assert orchestrator.pending_decisions == ()

    again = orchestrator.resolve("unemployment_crisis_1", "public_works")
    assert isinstance(again.error, UnknownOptionError)


def test_unanswered_decisions_lapse(bare_state):
    orchestrator = TurnOrchestrator(params=QUIET, rng=np.random.default_rng(0))
    orchestrator.initialise(bare_state.with_stats(unemployment=0.3))
    orchestrator.tick()
    orchestrator.tick()
    assert [d.id for d in orchestrator.pending_decisions] == ["unemployment_crisis_2"]


def test_failed_action_keeps_state(bare_state):
    orchestrator = TurnOrchestrator(params=QUIET, rng=np.random.default_rng(0))
    orchestrator.initialise(bare_state.with_stats(unemployment=0.3).with_resources(budget=100.0))
    orchestrator.tick()
    before = orchestrator.state
    outcome = orchestrator.resolve("unemployment_crisis_1", "public_works")
    assert not outcome.ok
    assert orchestrator.state is before
    assert len(orchestrator.pending_decisions) == 1


def test_hooks_receive_before_and_after(game):
    calls = []
    orchestrator = TurnOrchestrator(
        rng=np.random.default_rng(1),
        pre_step_hooks=[lambda before, after: calls.append(("pre", before.months_elapsed))],
    )
    orchestrator.register_post_hook(
        lambda before, after: calls.append(("post", before.months_elapsed, after.months_elapsed))
    )
    orchestrator.initialise(game)
    orchestrator.tick()
    orchestrator.tick()
    assert calls == [("pre", 0), ("post", 0, 1), ("pre", 1), ("post", 1, 2)]


def test_orchestrator_bill_and_actions(chamber_state):
    orchestrator = TurnOrchestrator(rng=np.random.default_rng(0))
    orchestrator.initialise(chamber_state)
    bill = Bill(id="bill-1", title="Budget Act", type=BillType.BUDGET,
                policy_area=PolicyArea.ECONOMY, required_majority=100.0)
    outcome = orchestrator.propose_bill(bill)
    assert outcome.ok
    assert orchestrator.state.active_bill.id == "bill-1"
    assert orchestrator.state.failed_bills_this_month == 1

    outcome = orchestrator.apply(lambda s: resolve_decision(
        s, unemployment_crisis_decision(s.with_stats(unemployment=0.5)), "ignore"))
    assert outcome.ok
    assert orchestrator.state.resources.stability == pytest.approx(50.0)


def test_unrest_turns_into_protests(game):
    pops = tuple(p.copy_with(satisfaction=5.0, radicalization=100.0) for p in game.social.pops)
    state = game.copy_with(social=game.social.copy_with(pops=pops))
    rng = np.random.default_rng(2)
    new_state = evaluate_turn(state, rng, QUIET).new_state
    assert new_state.social.protests
    assert new_state.resources.stability < state.resources.stability
    assert any("Protests erupt" in line for line in new_state.logs)
