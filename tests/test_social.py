"""Tests for pops, class struggle and popularity."""

import pytest

from statecraft.core.enums import PopType, SocialClass
from statecraft.core.state import Social, SocialGroup
from statecraft.systems.economy import generate_regions
from statecraft.systems.social import (
    apply_social_update,
    calculate_class_struggle,
    calculate_popularity,
    generate_pops,
    update_pop_satisfaction,
    weighted_satisfaction,
)


def _pop(pop_id, social_class, satisfaction, radicalization=20.0, influence=1.0):
    return SocialGroup(id=pop_id, type=PopType.INDUSTRIAL_WORKERS, social_class=social_class,
                       region_id="r0", population_size=100, satisfaction=satisfaction,
                       radicalization=radicalization, political_influence=influence)


def test_class_struggle_is_elite_lower_gap():
    pops = [_pop("e", SocialClass.ELITE, 80.0), _pop("l1", SocialClass.LOWER, 30.0),
            _pop("l2", SocialClass.LOWER, 50.0), _pop("m", SocialClass.MIDDLE, 0.0)]
    assert calculate_class_struggle(pops) == pytest.approx(40.0)


def test_class_struggle_with_missing_class():
    assert calculate_class_struggle([_pop("e", SocialClass.ELITE, 90.0)]) == pytest.approx(40.0)
    assert calculate_class_struggle([]) == 0.0


def test_weighted_satisfaction():
    pops = [_pop("a", SocialClass.MIDDLE, 90.0, influence=3.0), _pop("b", SocialClass.MIDDLE, 50.0)]
    assert weighted_satisfaction(pops) == pytest.approx(80.0)
    assert weighted_satisfaction([]) == 50.0


def test_recession_hits_lower_class_hardest(bare_state):
    pops = [_pop("e", SocialClass.ELITE, 50.0), _pop("l", SocialClass.LOWER, 50.0)]
    state = bare_state.with_stats(gdp_growth=-0.01, unemployment=0.05)
    elite, lower = update_pop_satisfaction(pops, state)
    assert elite.satisfaction == 49.0
    assert lower.satisfaction == 47.0


def test_unemployment_hurts_workers(bare_state):
    pops = [_pop("m", SocialClass.MIDDLE, 50.0), _pop("e", SocialClass.ELITE, 50.0)]
    state = bare_state.with_stats(unemployment=0.15)
    middle, elite = update_pop_satisfaction(pops, state)
    assert middle.satisfaction == 48.0
    assert elite.satisfaction == 50.0


def test_radicalization_follows_starting_satisfaction(bare_state):
    pops = [_pop("a", SocialClass.MIDDLE, 20.0), _pop("b", SocialClass.MIDDLE, 80.0)]
    angry, content = update_pop_satisfaction(pops, bare_state)
    assert angry.radicalization == 21.0
    assert content.radicalization == 19.0


def test_popularity_moves_toward_satisfaction(bare_state):
    pops = [_pop("a", SocialClass.MIDDLE, 100.0)]
    state = bare_state.with_stats(inflation=0.02, unemployment=0.05, gdp_growth=0.0)
    assert calculate_popularity(state, pops) == pytest.approx(60.0)
    assert calculate_popularity(state, []) == pytest.approx(50.0)


def test_high_struggle_costs_stability(bare_state):
    pops = (_pop("e", SocialClass.ELITE, 100.0), _pop("l", SocialClass.LOWER, 0.0))
    state = bare_state.copy_with(social=Social(pops=pops)).with_stats(unemployment=0.05)
    state = apply_social_update(state)
    assert state.social.class_struggle == pytest.approx(100.0)
    assert state.resources.stability == pytest.approx(57.0)


def test_generated_pops_fill_their_regions(rng):
    regions = generate_regions(2_000_000, 100_000.0, rng)
    pops = generate_pops(regions, 50_000.0, rng)
    for region in regions:
        members = [p for p in pops if p.region_id == region.id]
        assert sum(p.population_size for p in members) == region.population
    assert all(0.0 <= p.satisfaction <= 100.0 for p in pops)
    assert all(p.political_influence >= 1.0 for p in pops)
