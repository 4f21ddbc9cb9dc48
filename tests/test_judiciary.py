"""Tests for judicial review and the court lifecycle."""

import numpy as np
import pytest

from statecraft.core.enums import BillType, ElectionSystem, Ideology, PolicyArea
from statecraft.core.errors import InsufficientResourceError
from statecraft.core.state import Bill, Judge, Judiciary
from statecraft.systems.judiciary import (
    age_and_refresh_judiciary,
    appoint_judge,
    check_constitutionality,
    force_retirement,
    generate_court,
    judge_score,
    pack_court,
    run_judicial_year,
    update_constitution,
)


def _judge(judge_id="judge-0", ideology=Ideology.CENTRIST, age=60, corruption=0.0, integrity=100.0):
    return Judge(id=judge_id, name=f"Justice {judge_id}", ideology=ideology, age=age,
                 loyalty=50.0, corruption=corruption, integrity=integrity)


def _bill(ideology=Ideology.CAPITALIST):
    return Bill(id="bill-7", title="Market Freedom Act", type=BillType.REFORM,
                policy_area=PolicyArea.ECONOMY, ideology=ideology)


def _with_court(state, judges):
    return state.copy_with(judiciary=Judiciary(supreme_court=tuple(judges)))


def test_judge_score():
    assert judge_score(_judge(ideology=Ideology.CAPITALIST), Ideology.CAPITALIST) == 1.0
    assert judge_score(_judge(ideology=Ideology.CENTRIST), Ideology.CAPITALIST) == pytest.approx(0.6)
    assert judge_score(_judge(ideology=Ideology.SOCIALIST), Ideology.CAPITALIST) == pytest.approx(0.4)
    corrupt = _judge(ideology=Ideology.CAPITALIST, corruption=100.0, integrity=50.0)
    assert judge_score(corrupt, Ideology.CAPITALIST) == pytest.approx(0.25)


def test_aligned_court_never_vetoes(bare_state):
    judges = [_judge(f"judge-{i}", ideology=Ideology.CAPITALIST) for i in range(9)]
    state = _with_court(bare_state, judges)
    review = check_constitutionality(state, _bill())
    assert not review.vetoed
    assert review.votes_against == 0
    assert review.state is state


def test_hostile_court_vetoes_and_costs_capital(bare_state):
    judges = [_judge(f"judge-{i}", ideology=Ideology.SOCIALIST) for i in range(5)]
    state = _with_court(bare_state, judges)
    review = check_constitutionality(state, _bill())
    assert review.vetoed
    assert review.votes_against == 5
    assert review.state.resources.political_capital == 0.0
    assert "vetoed" in review.state.logs[-1]


def test_half_court_against_is_not_a_veto(bare_state):
    judges = [_judge("a", Ideology.SOCIALIST), _judge("b", Ideology.CAPITALIST)]
    review = check_constitutionality(_with_court(bare_state, judges), _bill())
    assert review.votes_against == 1
    assert not review.vetoed


def test_empty_court_never_vetoes(bare_state):
    assert not check_constitutionality(bare_state, _bill()).vetoed


def test_judge_at_retirement_age_always_retires():
    for seed in range(100):
        court, vacancy = age_and_refresh_judiciary([_judge(age=80)], np.random.default_rng(seed))
        assert court == ()
        assert vacancy


def test_judge_below_retirement_age_rarely_retires():
    rng = np.random.default_rng(7)
    trials = 20000
    retired = sum(
        1 for _ in range(trials) if not age_and_refresh_judiciary([_judge(age=79)], rng)[0]
    )
    assert retired / trials == pytest.approx(0.02, abs=0.006)


def test_surviving_judges_age_one_year(rng):
    court, _ = age_and_refresh_judiciary([_judge("a", age=60), _judge("b", age=80)], rng)
    ages = {j.id: j.age for j in court}
    assert "b" not in ages
    if "a" in ages:
        assert ages["a"] == 61


def test_run_judicial_year_logs_vacancy(bare_state, rng):
    state = _with_court(bare_state, [_judge("old", age=85)])
    state = run_judicial_year(state, rng)
    assert state.judiciary.supreme_court == ()
    assert "Justice old" in state.logs[-1]


def test_pack_court(bare_state):
    state = bare_state.with_resources(political_capital=60.0)
    outcome = pack_court(state, [_judge("x"), _judge("y")])
    assert outcome.ok
    assert len(outcome.state.judiciary.supreme_court) == 2
    assert outcome.state.resources.political_capital == pytest.approx(10.0)
    assert outcome.state.resources.stability == pytest.approx(46.0)


def test_pack_court_without_capital(bare_state):
    state = bare_state.with_resources(political_capital=40.0)
    outcome = pack_court(state, [_judge("x")])
    assert isinstance(outcome.error, InsufficientResourceError)
    assert outcome.state is state


def test_appoint_fills_vacancy_for_free(bare_state):
    outcome = appoint_judge(bare_state, _judge("new"))
    assert outcome.ok
    assert outcome.state.judiciary.judge("new") is not None
    assert outcome.state.resources == bare_state.resources


def test_appoint_beyond_nominal_size_is_packing(bare_state, rng):
    state = _with_court(bare_state, generate_court(9, rng))
    outcome = appoint_judge(state, _judge("tenth"))
    assert outcome.ok
    assert outcome.state.resources.political_capital == pytest.approx(0.0)
    assert outcome.state.resources.stability == pytest.approx(48.0)


def test_force_retirement(bare_state):
    state = _with_court(bare_state, [_judge("a"), _judge("b")])
    state = force_retirement(state, "a")
    assert [j.id for j in state.judiciary.supreme_court] == ["b"]
    assert force_retirement(state, "ghost") is state


def test_update_constitution(bare_state):
    state = update_constitution(bare_state, term_length=5, election_system="DISTRICTS")
    assert state.judiciary.constitution.term_length == 5
    assert state.judiciary.constitution.election_system == ElectionSystem.DISTRICTS
    with pytest.raises(ValueError):
        update_constitution(bare_state, term_length=3)
    with pytest.raises(TypeError):
        update_constitution(bare_state, monarchy=True)


def test_generate_court(rng):
    court = generate_court(9, rng)
    assert [j.id for j in court] == [f"judge-{i}" for i in range(9)]
    assert all(50 <= j.age < 76 for j in court)
