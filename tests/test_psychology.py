"""Tests for minister psychology: decisions, rivalries and corruption pressure."""

import pytest

from statecraft.core.effects import AdjustMinister, RecordScandal, RemoveMinister
from statecraft.core.enums import HiddenAgenda, ScandalSeverity, Urgency
from statecraft.core.evaluator import apply_option
from statecraft.core.state import MinisterPsychology
from statecraft.systems.psychology import (
    evaluate_minister_behavior,
    generate_minister_decisions,
    update_corruption_pressure,
    update_rivalries,
)


def test_disloyal_minister_threatens_resignation(bare_state, make_minister):
    minister = make_minister("minister-health", loyalty=10.0)
    state = bare_state.copy_with(months_elapsed=3).with_ministers([minister])
    decision = evaluate_minister_behavior(minister, state)
    assert decision.id.startswith("resignation_threat_")
    assert decision.urgency == Urgency.HIGH
    assert isinstance(decision.option("accept_resignation").effect, RemoveMinister)
    assert decision.option("bribe").cost.budget == 100.0


def test_grace_period_suppresses_decisions(bare_state, make_minister):
    minister = make_minister(loyalty=10.0)
    state = bare_state.copy_with(months_elapsed=2)
    assert evaluate_minister_behavior(minister, state) is None


def test_corruption_scheme(bare_state, make_minister):
    psyche = MinisterPsychology(corruption_pressure=80.0)
    minister = make_minister("m1", corruption=75.0, psychology=psyche)
    state = bare_state.copy_with(months_elapsed=6)
    decision = evaluate_minister_behavior(minister, state)
    assert decision.id == "corruption_scheme_m1_6"
    investigate = decision.option("investigate").effect
    assert investigate == RecordScandal("m1", ScandalSeverity.MAJOR)
    assert isinstance(decision.option("ignore").effect, AdjustMinister)


def test_resignation_threat_outranks_scheme(bare_state, make_minister):
    psyche = MinisterPsychology(corruption_pressure=90.0)
    minister = make_minister(loyalty=5.0, corruption=90.0, psychology=psyche)
    decision = evaluate_minister_behavior(minister, bare_state.copy_with(months_elapsed=5))
    assert decision.id.startswith("resignation_threat_")


def test_bribe_keeps_minister(bare_state, make_minister):
    minister = make_minister("m1", loyalty=10.0)
    state = bare_state.copy_with(months_elapsed=4).with_ministers([minister])
    (decision,) = generate_minister_decisions(state)
    outcome = apply_option(state, decision.option("bribe"))
    assert outcome.state.government.minister("m1").stats.loyalty == 30.0
    assert outcome.state.resources.budget == pytest.approx(900.0)


def test_accepting_resignation_removes_minister(bare_state, make_minister):
    state = bare_state.copy_with(months_elapsed=4).with_ministers([make_minister("m1", loyalty=10.0)])
    (decision,) = generate_minister_decisions(state)
    outcome = apply_option(state, decision.option("accept_resignation"))
    assert outcome.state.ministers == ()


def test_loyal_cabinet_raises_nothing(bare_state, make_minister):
    state = bare_state.copy_with(months_elapsed=10).with_ministers(
        [make_minister("a"), make_minister("b")]
    )
    assert generate_minister_decisions(state) == []


def test_rivalries_grow_between_ambitious_ministers(make_minister):
    ministers = [make_minister("a", ambition=80.0), make_minister("b", ambition=70.0),
                 make_minister("c", ambition=20.0)]
    for _ in range(3):
        ministers = update_rivalries(ministers)
    a, b, c = ministers
    assert a.psyche.rivalry_with("b") == 3.0
    assert b.psyche.rivalry_with("a") == 3.0
    assert a.psyche.rivalry_with("c") == 0.0
    assert c.psyche.rivalries == ()


def test_rivalry_is_capped(make_minister):
    psyche = MinisterPsychology(rivalries=(("b", 100.0),))
    ministers = [make_minister("a", ambition=80.0, psychology=psyche), make_minister("b", ambition=80.0)]
    assert update_rivalries(ministers)[0].psyche.rivalry_with("b") == 100.0


def test_corruption_pressure_drift(make_minister):
    greedy = make_minister(
        "g", corruption=75.0,
        psychology=MinisterPsychology(hidden_agenda=HiddenAgenda.WEALTH_ACCUMULATION),
    )
    loyal = make_minister(
        "l", corruption=0.0,
        psychology=MinisterPsychology(hidden_agenda=HiddenAgenda.LOYALIST, corruption_pressure=3.0),
    )
    g, l = update_corruption_pressure([greedy, loyal])
    # (75 - 50) / 25 + 3 for wealth accumulation
    assert g.psyche.corruption_pressure == pytest.approx(4.0)
    assert l.psyche.corruption_pressure == 0.0
