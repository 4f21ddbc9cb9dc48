"""
Minister generator.

Candidates get base stats, one to three traits weighted by the country
context, the traits' stat bonuses, an ideology pulled from the country or
from a trait's bias, a hidden agenda and a short biography.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

import numpy as np

from ..core.enums import HiddenAgenda, Ideology, Ministry
from ..core.invariants import clamp_minister_stats, clamp_percent
from ..core.state import Minister, MinisterPsychology
from ..core.traits import CountryContext, MinisterTrait, select_traits

FIRST_NAMES = (
    "John", "Charles", "Louis", "Peter", "Michael", "Joseph", "Fernando", "Richard",
    "Diego", "Andrew", "Raphael", "George", "Albert", "Francis", "Anthony", "Manuel",
    "Robert", "Edward", "Mario", "Paul", "Maria", "Anna", "Elena", "Sophia", "Lucia",
    "Carmen", "Laura", "Isabel", "Patricia", "Monica", "Gabriela", "Andrea",
    "Christine", "Veronica", "Beatrice", "Claudia", "Sylvia", "Teresa", "Rose", "Julia",
)

LAST_NAMES = (
    "Garcia", "Rodriguez", "Martinez", "Hernandez", "Lopez", "Gonzalez", "Perez",
    "Sanchez", "Ramirez", "Torres", "Flores", "Rivera", "Gomez", "Diaz", "Cruz",
    "Morales", "Reyes", "Gutierrez", "Ortiz", "Mendoza", "Silva", "Castro", "Vargas",
    "Romero", "Medina", "Jimenez", "Moreno", "Alvarez", "Ruiz", "Castillo",
)

_IDEOLOGY_POOL = (
    Ideology.SOCIALIST,
    Ideology.LIBERAL,
    Ideology.CONSERVATIVE,
    Ideology.NATIONALIST,
    Ideology.CENTRIST,
    Ideology.AUTHORITARIAN,
)

_DEGREES = (
    "Economics", "Law", "Political Science", "Public Administration", "Engineering",
    "Sociology", "International Relations", "Philosophy", "History", "Medicine",
)

_CAREERS = (
    "consulted for international organisations",
    "served as a career civil servant for fifteen years",
    "ran a successful private company",
    "led several civil-society organisations",
    "taught at the national university",
    "held office in previous governments",
    "worked in international finance",
    "led a trade union",
)

_MINISTRY_NOTES = {
    Ministry.ECONOMY: "Known for fiscal expertise and structural reform.",
    Ministry.FOREIGN: "Brings a wide network of international contacts.",
    Ministry.INTERIOR: "Understands regional politics and mediation.",
    Ministry.DEFENSE: "Keeps close ties with the armed forces.",
    Ministry.HEALTH: "Managed health services through past crises.",
    Ministry.EDUCATION: "Champions a complete overhaul of schooling.",
    Ministry.INFRASTRUCTURE: "Has a record of delivering large projects.",
    Ministry.ENVIRONMENT: "Balances development with conservation.",
}


def random_name(rng: np.random.Generator) -> str:
    first = FIRST_NAMES[int(rng.integers(len(FIRST_NAMES)))]
    last = LAST_NAMES[int(rng.integers(len(LAST_NAMES)))]
    return f"{first} {last}"


def _trait_count(rng: np.random.Generator) -> int:
    if rng.random() < 0.3:
        return 1
    return 2 if rng.random() < 0.7 else 3


def _select_ideology(
    context: CountryContext, traits: Sequence[MinisterTrait], rng: np.random.Generator
) -> Ideology:
    bias = next((t.ideology_bias for t in traits if t.ideology_bias), None)
    if bias == "left":
        return Ideology.SOCIALIST
    if bias == "right":
        return Ideology.LIBERAL if rng.random() < 0.5 else Ideology.CONSERVATIVE
    if bias == "authoritarian":
        return Ideology.AUTHORITARIAN
    if rng.random() < 0.3:
        return _IDEOLOGY_POOL[int(rng.integers(len(_IDEOLOGY_POOL)))]
    return context.ideology


def _hidden_agenda(corruption: float, loyalty: float, ambition: float,
                   rng: np.random.Generator) -> HiddenAgenda:
    if corruption > 50 and rng.random() < 0.6:
        return HiddenAgenda.WEALTH_ACCUMULATION
    if ambition > 70 and loyalty < 40 and rng.random() < 0.3:
        return HiddenAgenda.COUP_PLOTTER
    if loyalty > 70:
        return HiddenAgenda.LOYALIST
    agendas = list(HiddenAgenda)
    return agendas[int(rng.integers(len(agendas)))]


def _biography(name: str, age: int, ministry: Ministry, traits: Sequence[MinisterTrait],
               rng: np.random.Generator) -> str:
    degree = _DEGREES[int(rng.integers(len(_DEGREES)))]
    career = _CAREERS[int(rng.integers(len(_CAREERS)))]
    first = name.split()[0]
    bio = f"{first}, {age}. Graduated in {degree} and {career}."
    if traits:
        bio += " Described as " + ", ".join(t.name.lower() for t in traits) + "."
    return f"{bio} {_MINISTRY_NOTES[ministry]}"


def generate_minister(
    ministry: Ministry,
    context: CountryContext,
    rng: np.random.Generator,
    minister_id: Optional[str] = None,
    party_id: str = "independent",
) -> Minister:
    """Generate one minister candidate.

    Args:
        ministry:    Portfolio.
        context:     Country attributes biasing trait selection.
        rng:         Random source.
        minister_id: Id to use; a random hex id by default.
        party_id:    Party affiliation.

    Returns:
        Minister with clamped stats and generated psychology.
    """
    name = random_name(rng)
    age = int(rng.integers(35, 71))
    stats = {
        "competence": 30.0 + rng.integers(40),
        "loyalty": 30.0 + rng.integers(40),
        "popularity": 20.0 + rng.integers(30),
        "corruption": float(rng.integers(30)),
        "ambition": 20.0 + rng.integers(40),
        "internal_support": 30.0 + rng.integers(40),
    }
    traits = select_traits(context, _trait_count(rng), rng)
    for trait in traits:
        stats["competence"] += trait.competence_bonus
        stats["loyalty"] += trait.loyalty_bonus
        stats["popularity"] += trait.popularity_bonus
        stats["corruption"] += trait.corruption_bonus
        stats["ambition"] += trait.ambition_bonus
    final = clamp_minister_stats({k: float(v) for k, v in stats.items()})

    psychology = MinisterPsychology(
        hidden_agenda=_hidden_agenda(final.corruption, final.loyalty, final.ambition, rng),
        corruption_pressure=clamp_percent(final.corruption * 0.5),
        paranoia=float(rng.integers(0, 60)),
    )
    return Minister(
        id=minister_id or f"minister-{rng.integers(16 ** 8):08x}",
        name=name,
        age=age,
        ministry=ministry,
        party_id=party_id,
        ideology=_select_ideology(context, traits, rng),
        stats=final,
        trait_ids=tuple(t.id for t in traits),
        biography=_biography(name, age, ministry, traits, rng),
        psychology=psychology,
    )


def generate_minister_candidates(
    ministry: Ministry,
    count: int,
    context: CountryContext,
    rng: np.random.Generator,
) -> List[Minister]:
    """``count`` candidates for a ministry, most competent first."""
    candidates = [
        generate_minister(ministry, context, rng, minister_id=f"{ministry.value.lower()}-candidate-{i}")
        for i in range(count)
    ]
    return sorted(candidates, key=lambda m: m.stats.competence, reverse=True)


def generate_cabinet(
    context: CountryContext,
    rng: np.random.Generator,
    party_id: str = "independent",
    ministries: Sequence[Ministry] = tuple(Ministry),
) -> List[Minister]:
    """One minister per ministry, ids ``minister-<ministry>``."""
    return [
        generate_minister(
            ministry, context, rng,
            minister_id=f"minister-{ministry.value.lower()}",
            party_id=party_id,
        )
        for ministry in ministries
    ]
