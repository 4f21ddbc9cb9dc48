"""Tests for effect descriptors and the central evaluator."""

import pytest

from statecraft.core.effects import (
    NO_EFFECT,
    AdjustMinister,
    Compound,
    Cost,
    DecisionOption,
    EndAdministration,
    PolicyEffect,
    RecordScandal,
    RemoveMinister,
    SetFactionStance,
    compound,
    effect_from_dict,
    effect_to_dict,
)
from statecraft.core.enums import ScandalSeverity, Stance
from statecraft.core.errors import InsufficientResourceError
from statecraft.core.evaluator import apply_effect, apply_option


def test_policy_effect_is_clamped(bare_state):
    state = apply_effect(bare_state, PolicyEffect(popularity=500.0, stability=-500.0))
    assert state.stats.popularity == 100.0
    assert state.resources.stability == 0.0


def test_policy_effect_relative_gdp(bare_state):
    state = apply_effect(bare_state, PolicyEffect(gdp=0.1))
    assert state.stats.gdp == pytest.approx(1100.0)


def test_policy_change_tax_rate(bare_state):
    state = apply_effect(bare_state, PolicyEffect(policy_changes=(("tax_rate", 0.05),)))
    assert state.economy.tax_rate == pytest.approx(0.30)


def test_empty_policy_is_noop(bare_state):
    assert apply_effect(bare_state, NO_EFFECT) is bare_state


def test_adjust_minister_clamps_stats(bare_state, make_minister):
    state = bare_state.with_ministers([make_minister("m1", loyalty=95.0)])
    state = apply_effect(state, AdjustMinister("m1", loyalty=20.0, corruption_pressure=30.0))
    minister = state.government.minister("m1")
    assert minister.stats.loyalty == 100.0
    assert minister.psyche.corruption_pressure == 30.0


def test_effects_on_missing_targets_are_noops(bare_state):
    assert apply_effect(bare_state, AdjustMinister("ghost", loyalty=10.0)) is bare_state
    assert apply_effect(bare_state, RemoveMinister("ghost")) is bare_state
    assert apply_effect(bare_state, SetFactionStance("ghost", Stance.HOSTILE)) is bare_state


def test_record_scandal_applies_penalties(bare_state, make_minister):
    state = bare_state.with_ministers([make_minister("m1")])
    state = apply_effect(state, RecordScandal("m1", ScandalSeverity.MAJOR))
    assert state.government.minister("m1").scandals_count == 1
    assert state.stats.popularity == pytest.approx(45.0)
    assert state.resources.stability == pytest.approx(57.0)
    assert state.resources.political_capital == pytest.approx(40.0)
    assert "scandal" in state.logs[-1]


def test_remove_minister_logs(bare_state, make_minister):
    state = bare_state.with_ministers([make_minister("m1"), make_minister("m2")])
    state = apply_effect(state, RemoveMinister("m1", reason="resigned"))
    assert [m.id for m in state.ministers] == ["m2"]
    assert "resigned" in state.logs[-1]


def test_end_administration(bare_state):
    state = apply_effect(bare_state, EndAdministration("Voted out."))
    assert state.administration_ended
    assert state.logs[-1] == "Voted out."


def test_compound_flattens_and_drops_noops():
    inner = compound(PolicyEffect(popularity=1.0), PolicyEffect(stability=1.0))
    combined = compound(inner, NO_EFFECT, EndAdministration())
    assert isinstance(combined, Compound)
    assert len(combined.effects) == 3
    assert compound(PolicyEffect(popularity=2.0)) == PolicyEffect(popularity=2.0)


def test_effect_dict_serialisation():
    effect = compound(
        PolicyEffect(popularity=-3.0, policy_changes=(("technology_level", 2.0),)),
        SetFactionStance("faction-a", Stance.SUPPORTIVE),
        RecordScandal("m1", ScandalSeverity.CRITICAL),
    )
    data = effect_to_dict(effect)
    assert data["kind"] == "compound"
    assert data["effects"][1]["stance"] == "SUPPORTIVE"
    assert effect_from_dict(data) == effect


def test_effect_from_dict_unknown_kind():
    with pytest.raises(ValueError):
        effect_from_dict({"kind": "teleport"})


def test_apply_effect_rejects_unknown_descriptor(bare_state):
    with pytest.raises(TypeError):
        apply_effect(bare_state, "popularity+1")


def test_cost_rejects_negative():
    with pytest.raises(ValueError):
        Cost(budget=-5.0)


def test_apply_option_pays_and_applies(bare_state):
    option = DecisionOption(
        id="spend", label="Spend", cost=Cost(budget=100.0, political_capital=10.0),
        effect=PolicyEffect(popularity=5.0), message="Money well spent.",
    )
    outcome = apply_option(bare_state, option)
    assert outcome.ok
    assert outcome.state.resources.budget == pytest.approx(900.0)
    assert outcome.state.resources.political_capital == pytest.approx(40.0)
    assert outcome.state.stats.popularity == pytest.approx(55.0)
    assert outcome.state.logs[-1] == "Money well spent."


def test_apply_option_insufficient_returns_same_state(bare_state):
    option = DecisionOption(id="big", label="Big", cost=Cost(budget=5000.0))
    outcome = apply_option(bare_state, option)
    assert not outcome.ok
    assert outcome.state is bare_state
    assert isinstance(outcome.error, InsufficientResourceError)
    assert outcome.error.resource == "budget"
    with pytest.raises(InsufficientResourceError):
        outcome.unwrap()
