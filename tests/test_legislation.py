"""Tests for the bill lifecycle: proposal, vote, judicial review."""

import pytest

from statecraft.core.effects import PolicyEffect, SetFactionStance
from statecraft.core.enums import BillStatus, BillType, Ideology, PolicyArea, Stance
from statecraft.core.errors import ActionRejectedError
from statecraft.core.evaluator import apply_effect
from statecraft.core.state import Bill, Judge, Judiciary
from statecraft.systems.legislation import (
    needs_judicial_review,
    pass_bill,
    propose_bill,
    vote_on_bill,
)


def _bill(**kwargs):
    defaults = dict(id="bill-1", title="Growth Act", type=BillType.POLICY_CHANGE,
                    policy_area=PolicyArea.ECONOMY, effects=PolicyEffect(popularity=5.0))
    defaults.update(kwargs)
    return Bill(**defaults)


@pytest.fixture
def majority_state(chamber_state):
    """Both government factions supportive: 60 certain yes seats."""
    return apply_effect(chamber_state, SetFactionStance("faction-gov-1", Stance.SUPPORTIVE))


def test_needs_judicial_review():
    assert not needs_judicial_review(_bill())
    assert needs_judicial_review(_bill(ideology=Ideology.LIBERAL))
    assert needs_judicial_review(_bill(type=BillType.CONSTITUTIONAL))


def test_propose_puts_bill_in_vote(chamber_state):
    outcome = propose_bill(chamber_state, _bill())
    assert outcome.ok
    assert outcome.state.active_bill.status == BillStatus.IN_VOTE


def test_only_one_bill_in_vote(chamber_state):
    state = propose_bill(chamber_state, _bill()).state
    outcome = propose_bill(state, _bill(id="bill-2"))
    assert isinstance(outcome.error, ActionRejectedError)
    assert outcome.state is state


def test_only_pending_bills_can_be_proposed(chamber_state):
    outcome = propose_bill(chamber_state, _bill(status=BillStatus.APPROVED))
    assert isinstance(outcome.error, ActionRejectedError)


def test_vote_without_bill(chamber_state, rng):
    assert not vote_on_bill(chamber_state, rng).ok


def test_approved_bill_applies_effects(majority_state, rng):
    outcome = pass_bill(majority_state, _bill(), rng)
    state = outcome.state
    assert state.active_bill.status == BillStatus.APPROVED
    assert state.last_vote.approved
    assert state.last_vote.yes_percentage == pytest.approx(60.0)
    assert state.stats.popularity == pytest.approx(55.0)
    assert state.failed_bills_this_month == 0


def test_rejected_bill_counts_as_failure(majority_state, rng):
    outcome = pass_bill(majority_state, _bill(required_majority=100.0), rng)
    state = outcome.state
    assert state.active_bill.status == BillStatus.REJECTED
    assert state.failed_bills_this_month == 1
    assert state.stats.popularity == majority_state.stats.popularity


def test_vetoed_bill_does_not_apply(majority_state, rng):
    court = tuple(
        Judge(id=f"judge-{i}", name=f"Justice {i}", ideology=Ideology.SOCIALIST, age=60,
              loyalty=50.0, corruption=0.0, integrity=100.0)
        for i in range(3)
    )
    state = majority_state.copy_with(judiciary=Judiciary(supreme_court=court))
    outcome = pass_bill(state, _bill(ideology=Ideology.CAPITALIST), rng)
    assert outcome.state.active_bill.status == BillStatus.VETOED
    assert outcome.state.stats.popularity == state.stats.popularity
    assert outcome.state.resources.political_capital == 0.0


def test_a_new_bill_can_follow_a_finished_one(majority_state, rng):
    state = pass_bill(majority_state, _bill(), rng).state
    outcome = pass_bill(state, _bill(id="bill-2"), rng)
    assert outcome.ok
    assert outcome.state.active_bill.id == "bill-2"
