"""Tests for faction voting, negotiation and monthly chamber dynamics."""

import itertools

import numpy as np
import pytest

from statecraft.core.enums import (
    BillType,
    FactionType,
    PolicyArea,
    Stance,
    Urgency,
    Vote,
)
from statecraft.core.errors import InsufficientResourceError
from statecraft.core.params import EngineParams
from statecraft.core.state import Bill
from statecraft.systems.parliament import (
    NegotiationOffer,
    calculate_faction_base_support,
    calculate_government_support,
    calculate_party_cohesion,
    drift_faction_loyalty,
    faction_seats,
    generate_parliament,
    negotiate,
    simulate_bill_vote,
    update_faction_stances,
    update_parliament_monthly,
)


def _bill(**kwargs):
    defaults = dict(id="bill-1", title="Economic Recovery Act", type=BillType.POLICY_CHANGE,
                    policy_area=PolicyArea.ECONOMY)
    defaults.update(kwargs)
    return Bill(**defaults)


@pytest.fixture
def two_factions(make_faction):
    return [
        make_faction("f-sup", "party-gov", Stance.SUPPORTIVE, 60.0, priorities=(PolicyArea.ECONOMY,)),
        make_faction("f-hos", "party-gov", Stance.HOSTILE, 40.0, priorities=(PolicyArea.SOCIAL,)),
    ]


def test_supportive_and_hostile_split_vote(two_factions, rng):
    result = simulate_bill_vote(_bill(), two_factions, 100, True, rng,
                                party_seats={"party-gov": 100})
    by_id = {v.faction_id: v for v in result.faction_votes}
    assert by_id["f-sup"].base_support == 95.0
    assert by_id["f-sup"].vote == Vote.YES
    assert by_id["f-hos"].base_support == 20.0
    assert by_id["f-hos"].vote == Vote.NO
    assert result.tally.yes == pytest.approx(60.0)
    assert result.tally.no == pytest.approx(40.0)
    assert result.yes_percentage == pytest.approx(60.0)
    assert result.approved == (result.yes_percentage >= 50.0)
    assert result.approved


def test_legacy_seat_share_changes_outcome(two_factions, rng):
    params = EngineParams(legacy_faction_seat_share=0.1)
    result = simulate_bill_vote(_bill(), two_factions, 100, True, rng,
                                party_seats={"party-gov": 100}, params=params)
    assert result.tally.yes == 6.0
    assert result.yes_percentage == pytest.approx(6.0)
    assert not result.approved


def test_empty_chamber_never_approves(rng):
    result = simulate_bill_vote(_bill(), [], 0, True, rng)
    assert not result.approved
    assert result.yes_percentage == 0.0


def test_base_support_always_in_range(make_faction):
    for stance, ftype, btype, urgency, gov in itertools.product(
        Stance, FactionType, BillType, Urgency, (True, False)
    ):
        faction = make_faction(stance=stance, ftype=ftype, priorities=(PolicyArea.ECONOMY,))
        support = calculate_faction_base_support(
            faction, _bill(type=btype, urgency=urgency), gov
        )
        assert 0.0 <= support <= 100.0


def test_opposition_bill_reverses_stance_bonus(make_faction):
    hostile = make_faction(stance=Stance.HOSTILE, priorities=())
    assert calculate_faction_base_support(hostile, _bill(), False) == 70.0
    assert calculate_faction_base_support(hostile, _bill(), True) == 20.0


def test_reform_splits_reformists_and_hardliners(make_faction):
    reform = _bill(type=BillType.REFORM)
    reformist = make_faction(stance=Stance.NEUTRAL, ftype=FactionType.REFORMIST, priorities=())
    hardliner = make_faction(stance=Stance.NEUTRAL, ftype=FactionType.HARDLINER, priorities=())
    assert calculate_faction_base_support(reformist, reform, True) == 65.0
    assert calculate_faction_base_support(hardliner, reform, True) == 35.0


def test_faction_seats(make_faction):
    faction = make_faction(size=40.0)
    assert faction_seats(faction, 300, {"party-gov": 150}) == pytest.approx(60.0)
    assert faction_seats(faction, 300) == 12.0


def test_government_support_and_cohesion(chamber_state):
    parliament = chamber_state.parliament
    support = calculate_government_support(
        parliament.factions, parliament.total_seats, parliament.party_seats()
    )
    # 36 supportive seats plus half of 24 neutral seats
    assert support == 48.0
    assert calculate_party_cohesion(parliament.factions, parliament.parties) == pytest.approx(70.0)


def test_cohesion_without_government_party(make_faction):
    assert calculate_party_cohesion([make_faction()], []) == 50.0


def test_generate_parliament_layout(rng):
    parliament = generate_parliament(300, rng)
    assert sum(p.seats for p in parliament.parties) == 300
    assert parliament.government_party_ids() == ("party-gov",)
    for party in parliament.parties:
        sizes = [parliament.faction(fid).size for fid in party.faction_ids]
        assert sum(sizes) == pytest.approx(100.0)
    assert 0.0 <= parliament.government_support <= 100.0


def test_negotiation_success_improves_stance(chamber_state, rng):
    offer = NegotiationOffer("policy_concession", political_capital_cost=20.0, success_chance=100.0)
    outcome = negotiate(chamber_state, "faction-gov-1", offer, rng)
    assert outcome.ok
    faction = outcome.state.parliament.faction("faction-gov-1")
    assert faction.stance == Stance.SUPPORTIVE
    assert faction.influence > 50.0
    assert outcome.state.resources.political_capital == pytest.approx(30.0)
    assert outcome.state.parliament.government_support == 60.0


def test_failed_negotiation_still_costs(chamber_state, rng):
    offer = NegotiationOffer("committee_position", political_capital_cost=15.0, success_chance=0.0)
    outcome = negotiate(chamber_state, "faction-opp-0", offer, rng)
    assert outcome.ok
    assert outcome.state.parliament.faction("faction-opp-0").stance == Stance.HOSTILE
    assert outcome.state.resources.political_capital == pytest.approx(35.0)


def test_unaffordable_negotiation(chamber_state, rng):
    offer = NegotiationOffer("ministry_position", political_capital_cost=80.0, success_chance=100.0)
    outcome = negotiate(chamber_state, "faction-gov-1", offer, rng)
    assert isinstance(outcome.error, InsufficientResourceError)
    assert outcome.state is chamber_state


def test_negotiation_with_unknown_faction(chamber_state, rng):
    offer = NegotiationOffer("political_support", political_capital_cost=5.0, success_chance=50.0)
    outcome = negotiate(chamber_state, "nobody", offer, rng)
    assert outcome.ok
    assert outcome.state is chamber_state


def test_offer_validation():
    with pytest.raises(ValueError):
        NegotiationOffer("bribe", political_capital_cost=5.0, success_chance=50.0)
    with pytest.raises(ValueError):
        NegotiationOffer("policy_concession", political_capital_cost=5.0, success_chance=150.0)


def test_stances_move_one_step_at_a_time(make_faction):
    factions = [make_faction("a", stance=Stance.HOSTILE), make_faction("b", stance=Stance.SUPPORTIVE)]
    for seed in range(50):
        rng = np.random.default_rng(seed)
        for popularity in (10.0, 90.0):
            updated = update_faction_stances(factions, popularity, 3, rng)
            assert updated[0].stance != Stance.SUPPORTIVE
            assert updated[1].stance != Stance.HOSTILE


def test_stances_hold_at_middling_popularity(make_faction, rng):
    factions = [make_faction(stance=s) for s in Stance]
    assert update_faction_stances(factions, 50.0, 0, rng) == factions


def test_loyalty_drift_stays_in_range(make_faction, rng):
    factions = [make_faction("a", loyalty=99.0), make_faction("b", "party-opp", loyalty=1.0)]
    for _ in range(200):
        factions = drift_faction_loyalty(factions, 100.0, rng, ("party-gov",))
        assert all(0.0 <= f.loyalty_to_leader <= 100.0 for f in factions)


def test_monthly_update_refreshes_metrics(chamber_state, rng):
    state = update_parliament_monthly(chamber_state, rng)
    parliament = state.parliament
    assert parliament.government_support == calculate_government_support(
        parliament.factions, parliament.total_seats, parliament.party_seats()
    )


def test_monthly_update_without_factions(bare_state, rng):
    assert update_parliament_monthly(bare_state, rng) is bare_state
