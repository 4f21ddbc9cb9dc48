"""
Parliament engine.

Factions are the voting unit of the chamber.  Each faction holds a share
of its party's seats and decides bills from a base-support score built out
of its stance toward the government, its policy priorities, its type and
the bill's urgency.  Stances and loyalty drift monthly with the
government's popularity; government support and party cohesion are
derived from them.

Crisis events (no-confidence motions, rebellions, ...) live in
``parliament_events``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from ..core.enums import BillType, FactionType, Ideology, PolicyArea, Stance, Urgency, Vote
from ..core.errors import InsufficientResourceError, Outcome
from ..core.invariants import clamp_percent
from ..core.params import DEFAULT_PARAMS, EngineParams
from ..core.state import (
    Bill,
    FactionVote,
    GameState,
    Parliament,
    PartyFaction,
    PoliticalParty,
    VoteResult,
    VoteTally,
)

logger = logging.getLogger("statecraft.systems.parliament")


# --------------------------------------------------------------------------- #
# Catalogs                                                                     #
# --------------------------------------------------------------------------- #

FACTION_NAMES: Dict[FactionType, Dict[Ideology, Tuple[str, ...]]] = {
    FactionType.HARDLINER: {
        Ideology.SOCIALIST: ("Revolutionary Wing", "Radical Left", "Socialist Vanguard"),
        Ideology.LIBERAL: ("Pure Liberals", "Progressive Vanguard", "Libertarians"),
        Ideology.CONSERVATIVE: ("Conservative Hard Right", "Traditionalists", "National Conservatives"),
        Ideology.NATIONALIST: ("Ultra-Nationalists", "Radical Patriots", "Hard Sovereigntists"),
        Ideology.CENTRIST: ("Principled Centrists", "Firm Moderates", "Independents"),
        Ideology.AUTHORITARIAN: ("Hard Line", "Authoritarian Bloc", "Iron Hand"),
        Ideology.CAPITALIST: ("Free-Market Radicals", "Laissez-Faire Caucus", "Pure Capitalists"),
    },
    FactionType.MODERATE: {
        Ideology.SOCIALIST: ("Social Democrats", "Centre-Left", "Social Reformers"),
        Ideology.LIBERAL: ("Moderate Liberals", "Progressive Centre", "Social Liberals"),
        Ideology.CONSERVATIVE: ("Moderate Conservatives", "Centre-Right", "Conservative Reformers"),
        Ideology.NATIONALIST: ("Moderate Nationalists", "Pragmatic Patriots", "Sovereigntists"),
        Ideology.CENTRIST: ("Centrists", "Third Way", "Pragmatists"),
        Ideology.AUTHORITARIAN: ("Moderate Bloc", "Order and Progress", "Disciplinarians"),
        Ideology.CAPITALIST: ("Market Liberals", "Pro-Business Caucus", "Economic Centre"),
    },
    FactionType.REFORMIST: {
        Ideology.SOCIALIST: ("Socialist Renewal", "New Left", "Twenty-First Century Socialists"),
        Ideology.LIBERAL: ("Neo-Liberals", "Innovators", "Liberal Renewal"),
        Ideology.CONSERVATIVE: ("Conservative Renewal", "New Right", "Modernisers"),
        Ideology.NATIONALIST: ("Reformist Nationalists", "Modern Patriots", "New Sovereignty"),
        Ideology.CENTRIST: ("Reformist Centrists", "Innovators", "New Politics"),
        Ideology.AUTHORITARIAN: ("Renewers", "Reformists of Order", "Modernisers"),
        Ideology.CAPITALIST: ("Responsible Capitalism", "Economic Innovators", "Entrepreneurs"),
    },
    FactionType.PRAGMATIST: {
        Ideology.SOCIALIST: ("Pragmatic Left", "Social Realists", "Practical Left"),
        Ideology.LIBERAL: ("Pragmatic Liberals", "Realists", "Liberal Centrists"),
        Ideology.CONSERVATIVE: ("Pragmatic Conservatives", "Realists", "Practical Right"),
        Ideology.NATIONALIST: ("Pragmatic Nationalists", "Patriotic Realists", "Effective Sovereignty"),
        Ideology.CENTRIST: ("Pragmatists", "Realists", "Practical Solutions"),
        Ideology.AUTHORITARIAN: ("Pragmatists of Order", "Efficiency Caucus", "Realists"),
        Ideology.CAPITALIST: ("Pragmatic Capitalists", "Business Realists", "Regulated Market"),
    },
}

POLICY_PRIORITIES: Dict[Ideology, Tuple[PolicyArea, ...]] = {
    Ideology.SOCIALIST: (PolicyArea.SOCIAL, PolicyArea.HEALTH, PolicyArea.EDUCATION, PolicyArea.ECONOMY),
    Ideology.LIBERAL: (PolicyArea.SOCIAL, PolicyArea.EDUCATION, PolicyArea.ENVIRONMENT, PolicyArea.FOREIGN),
    Ideology.CONSERVATIVE: (PolicyArea.SECURITY, PolicyArea.ECONOMY, PolicyArea.FOREIGN,
                            PolicyArea.INFRASTRUCTURE),
    Ideology.NATIONALIST: (PolicyArea.SECURITY, PolicyArea.FOREIGN, PolicyArea.ECONOMY,
                           PolicyArea.INFRASTRUCTURE),
    Ideology.CENTRIST: (PolicyArea.ECONOMY, PolicyArea.EDUCATION, PolicyArea.HEALTH,
                        PolicyArea.INFRASTRUCTURE),
    Ideology.AUTHORITARIAN: (PolicyArea.SECURITY, PolicyArea.ECONOMY, PolicyArea.INFRASTRUCTURE,
                             PolicyArea.FOREIGN),
    Ideology.CAPITALIST: (PolicyArea.ECONOMY, PolicyArea.INFRASTRUCTURE, PolicyArea.FOREIGN,
                          PolicyArea.EDUCATION),
}

_DESCRIPTIONS: Dict[FactionType, Tuple[str, ...]] = {
    FactionType.HARDLINER: (
        "The party's most radical wing; defends {ideology} positions without concessions.",
        "Hard wing that rejects any softening of its {ideology} principles.",
        "Uncompromising group guarding {ideology} ideological purity.",
    ),
    FactionType.MODERATE: (
        "Centrist faction seeking balance and consensus.",
        "Moderate wing open to dialogue and gradual measures.",
        "Pragmatic group that puts governability ahead of ideology.",
    ),
    FactionType.REFORMIST: (
        "Innovating faction that wants to modernise {ideology} positions.",
        "Renewal wing proposing to update the party agenda.",
        "Reformist group adapting {ideology} thought to a new century.",
    ),
    FactionType.PRAGMATIST: (
        "Faction oriented to results rather than ideological principle.",
        "Practical wing that prioritises effective solutions.",
        "Realist group looking for policies that work.",
    ),
}


def _pick(options: Sequence[str], rng: np.random.Generator) -> str:
    return options[int(rng.integers(len(options)))]


# --------------------------------------------------------------------------- #
# Generation                                                                   #
# --------------------------------------------------------------------------- #


def _initial_stance(ftype: FactionType, is_government: bool, rng: np.random.Generator) -> Stance:
    if is_government:
        if ftype == FactionType.HARDLINER:
            return Stance.SUPPORTIVE if rng.random() > 0.3 else Stance.NEUTRAL
        if ftype == FactionType.MODERATE:
            return Stance.SUPPORTIVE
        return Stance.NEUTRAL if rng.random() > 0.6 else Stance.SUPPORTIVE
    if ftype == FactionType.HARDLINER:
        return Stance.HOSTILE
    if ftype == FactionType.MODERATE:
        return Stance.NEUTRAL if rng.random() > 0.5 else Stance.HOSTILE
    return Stance.NEUTRAL


def generate_factions_for_party(
    party: PoliticalParty, rng: np.random.Generator
) -> List[PartyFaction]:
    """Split a party into two or three factions.

    70 % of parties get two factions (60/40: moderate plus hardliner or
    pragmatist), the rest three (50/30/20: moderate, hardliner, plus
    reformist or pragmatist).  Sizes always sum to 100.

    Args:
        party: Party to split.
        rng:   Random source.

    Returns:
        Factions with ids ``faction-<party>-<i>``.
    """
    count = 3 if rng.random() > 0.7 else 2
    if count == 2:
        sizes = (60.0, 40.0)
        types = (
            FactionType.MODERATE,
            FactionType.HARDLINER if rng.random() > 0.5 else FactionType.PRAGMATIST,
        )
    else:
        sizes = (50.0, 30.0, 20.0)
        types = (
            FactionType.MODERATE,
            FactionType.HARDLINER,
            FactionType.REFORMIST if rng.random() > 0.5 else FactionType.PRAGMATIST,
        )

    priorities = POLICY_PRIORITIES[party.ideology][:3]
    factions = []
    for i, (ftype, size) in enumerate(zip(types, sizes)):
        name = f"{party.name} - {_pick(FACTION_NAMES[ftype][party.ideology], rng)}"
        stance = _initial_stance(ftype, party.is_government, rng)
        if party.is_government:
            loyalty = 60.0 + rng.random() * 30.0
        else:
            loyalty = 40.0 + rng.random() * 40.0
        description = _pick(_DESCRIPTIONS[ftype], rng).format(
            ideology=party.ideology.value.lower()
        )
        factions.append(
            PartyFaction(
                id=f"faction-{party.id}-{i}",
                name=name,
                party_id=party.id,
                type=ftype,
                ideology=party.ideology,
                size=size,
                influence=float(40.0 + rng.random() * 40.0),
                priorities=priorities,
                stance=stance,
                loyalty_to_leader=float(loyalty),
                description=description,
            )
        )
    return factions


def generate_parliament(
    total_seats: int,
    rng: np.random.Generator,
    government_ideology: Ideology = Ideology.CENTRIST,
) -> Parliament:
    """Build a three-party chamber with factions.

    The governing party holds 55 % of the seats, a conservative opposition
    30 % and a socialist opposition the remainder.  A centrist or
    conservative government swaps the main opposition for liberals.
    """
    main_opposition = Ideology.CONSERVATIVE
    if government_ideology == Ideology.CONSERVATIVE:
        main_opposition = Ideology.LIBERAL
    minor_opposition = Ideology.SOCIALIST
    if government_ideology == Ideology.SOCIALIST:
        minor_opposition = Ideology.NATIONALIST

    gov_seats = int(round(total_seats * 0.55))
    main_seats = int(round(total_seats * 0.30))
    minor_seats = max(0, total_seats - gov_seats - main_seats)
    layout = (
        ("party-gov", f"{government_ideology.value} Party", government_ideology, gov_seats, True),
        ("party-opp-1", f"{main_opposition.value} Alliance", main_opposition, main_seats, False),
        ("party-opp-2", f"{minor_opposition.value} Front", minor_opposition, minor_seats, False),
    )

    parties = []
    factions: List[PartyFaction] = []
    for pid, name, ideology, seats, is_gov in layout:
        party = PoliticalParty(id=pid, name=name, ideology=ideology, seats=seats,
                               is_government=is_gov)
        party_factions = generate_factions_for_party(party, rng)
        factions.extend(party_factions)
        parties.append(party.copy_with(faction_ids=tuple(f.id for f in party_factions)))

    parliament = Parliament(
        total_seats=total_seats, parties=tuple(parties), factions=tuple(factions)
    )
    return refresh_parliament_metrics(parliament)


# --------------------------------------------------------------------------- #
# Seats                                                                        #
# --------------------------------------------------------------------------- #


def faction_seats(
    faction: PartyFaction,
    total_seats: int,
    party_seats: Optional[Mapping[str, int]] = None,
    params: EngineParams = DEFAULT_PARAMS,
) -> float:
    """Seats held by a faction.

    By default a faction holds ``size`` percent of its party's seats.  When
    ``params.legacy_faction_seat_share`` is set, or the party is unknown,
    the fixed-share estimate ``round(size/100 × total_seats × share)`` is
    used instead (share 0.1 when unset).
    """
    share = params.legacy_faction_seat_share
    if share is None and party_seats is not None and faction.party_id in party_seats:
        return party_seats[faction.party_id] * faction.size / 100.0
    return float(round(faction.size / 100.0 * total_seats * (share or 0.1)))


# --------------------------------------------------------------------------- #
# Voting                                                                       #
# --------------------------------------------------------------------------- #


def calculate_faction_base_support(
    faction: PartyFaction, bill: Bill, is_government_bill: bool
) -> float:
    """Natural support of a faction for a bill, in [0, 100]."""
    support = 50.0

    if is_government_bill:
        if faction.stance == Stance.SUPPORTIVE:
            support += 30.0
        elif faction.stance == Stance.HOSTILE:
            support -= 30.0
    else:
        if faction.stance == Stance.HOSTILE:
            support += 20.0
        elif faction.stance == Stance.SUPPORTIVE:
            support -= 20.0

    if bill.policy_area in faction.priorities:
        support += 15.0

    if bill.type == BillType.REFORM:
        if faction.type == FactionType.REFORMIST:
            support += 15.0
        elif faction.type == FactionType.HARDLINER:
            support -= 15.0

    if bill.urgency == Urgency.CRISIS:
        support += 10.0

    return clamp_percent(support)


def _vote_reason(faction: PartyFaction, vote: Vote, bill: Bill) -> str:
    if vote == Vote.YES:
        if faction.stance == Stance.SUPPORTIVE:
            return f"{faction.name} backs the government on this measure."
        if bill.policy_area in faction.priorities:
            return f"{faction.name} considers this policy area a priority."
        return f"{faction.name} sees benefits in this proposal."
    if vote == Vote.NO:
        if faction.stance == Stance.HOSTILE:
            return f"{faction.name} systematically opposes the government."
        if faction.type == FactionType.HARDLINER:
            return f"{faction.name} rejects ideological concessions."
        return f"{faction.name} considers this measure counterproductive."
    return f"{faction.name} abstains for lack of internal consensus."


def _decide_vote(support: float, rng: np.random.Generator, params: EngineParams) -> Vote:
    if support >= params.vote_yes_threshold:
        return Vote.YES
    if support <= params.vote_no_threshold:
        return Vote.NO
    if rng.random() > 0.5:
        return Vote.ABSTAIN
    return Vote.YES if rng.random() > 0.5 else Vote.NO


def simulate_bill_vote(
    bill: Bill,
    factions: Sequence[PartyFaction],
    total_seats: int,
    is_government_bill: bool,
    rng: np.random.Generator,
    party_seats: Optional[Mapping[str, int]] = None,
    params: EngineParams = DEFAULT_PARAMS,
) -> VoteResult:
    """Let every faction vote on a bill.

    Factions vote as a bloc: yes at base support >= 60, no at <= 40, and
    a coin toss in between (half abstain, the rest split yes/no).

    Args:
        bill:               Bill under vote.
        factions:           Voting factions.
        total_seats:        Chamber size (denominator of the yes share).
        is_government_bill: Whether the government proposed the bill.
        rng:                Random source for undecided factions.
        party_seats:        Party id -> seats; enables real faction seats.
        params:             Engine parameters.

    Returns:
        VoteResult; approved iff yes seats / total seats × 100 reaches
        ``bill.required_majority``.
    """
    yes = no = abstain = 0.0
    votes: List[FactionVote] = []
    for faction in factions:
        support = calculate_faction_base_support(faction, bill, is_government_bill)
        vote = _decide_vote(support, rng, params)
        seats = faction_seats(faction, total_seats, party_seats, params)
        if vote == Vote.YES:
            yes += seats
        elif vote == Vote.NO:
            no += seats
        else:
            abstain += seats
        votes.append(
            FactionVote(
                faction_id=faction.id,
                vote=vote,
                reason=_vote_reason(faction, vote, bill),
                base_support=support,
                seats=seats,
            )
        )

    yes_pct = 0.0 if total_seats <= 0 else yes / total_seats * 100.0
    return VoteResult(
        approved=total_seats > 0 and yes_pct >= bill.required_majority,
        tally=VoteTally(yes=yes, no=no, abstain=abstain),
        yes_percentage=yes_pct,
        faction_votes=tuple(votes),
    )


# --------------------------------------------------------------------------- #
# Negotiation                                                                  #
# --------------------------------------------------------------------------- #

OFFER_TYPES = (
    "ministry_position",
    "budget_allocation",
    "policy_concession",
    "political_support",
    "committee_position",
)


@dataclass(frozen=True)
class NegotiationOffer:
    """What the government puts on the table.

    Attributes:
        offer_type:             One of OFFER_TYPES.
        political_capital_cost: Capital paid whether or not the offer lands.
        success_chance:         Acceptance probability, 0..100.
    """

    offer_type: str
    political_capital_cost: float
    success_chance: float
    details: str = ""

    def __post_init__(self) -> None:
        if self.offer_type not in OFFER_TYPES:
            raise ValueError(f"offer_type must be one of {OFFER_TYPES}, got {self.offer_type!r}")
        if self.political_capital_cost < 0:
            raise ValueError(
                f"political_capital_cost must be >= 0, got {self.political_capital_cost}"
            )
        if not (0.0 <= self.success_chance <= 100.0):
            raise ValueError(f"success_chance must be in [0, 100], got {self.success_chance}")


@dataclass(frozen=True)
class NegotiationResult:
    success: bool
    faction_id: str
    influence_gained: float
    message: str
    cost_paid: float
    new_stance: Optional[Stance] = None


def negotiate_with_faction(
    faction: PartyFaction,
    offer: NegotiationOffer,
    political_capital: float,
    rng: np.random.Generator,
) -> NegotiationResult:
    """Roll a negotiation.

    An unaffordable offer costs nothing and fails.  Otherwise the cost is
    always paid; on success the stance improves one step and the faction
    gains 15-35 influence.
    """
    if political_capital < offer.political_capital_cost:
        return NegotiationResult(
            success=False,
            faction_id=faction.id,
            influence_gained=0.0,
            message="Not enough political capital for this negotiation.",
            cost_paid=0.0,
        )
    if rng.random() * 100.0 < offer.success_chance:
        return NegotiationResult(
            success=True,
            faction_id=faction.id,
            influence_gained=float(15.0 + rng.random() * 20.0),
            message=f"{faction.name} accepts the offer. Their stance improves.",
            cost_paid=offer.political_capital_cost,
            new_stance=faction.stance.improved(),
        )
    return NegotiationResult(
        success=False,
        faction_id=faction.id,
        influence_gained=0.0,
        message=f"{faction.name} rejects the offer. Political capital spent for nothing.",
        cost_paid=offer.political_capital_cost,
    )


def negotiate(
    state: GameState,
    faction_id: str,
    offer: NegotiationOffer,
    rng: np.random.Generator,
) -> Outcome:
    """Negotiate with a faction of the live parliament.

    Returns:
        Outcome with the faction updated and the cost paid, or the
        unchanged state with an InsufficientResourceError.  An unknown
        faction is a no-op success.
    """
    faction = state.parliament.faction(faction_id)
    if faction is None:
        return Outcome.success(state, f"no faction '{faction_id}'")
    available = state.resources.political_capital
    if available < offer.political_capital_cost:
        return Outcome.failure(
            state,
            InsufficientResourceError("political_capital", offer.political_capital_cost, available),
        )

    result = negotiate_with_faction(faction, offer, available, rng)
    new_state = state.with_resources(
        political_capital=clamp_percent(available - result.cost_paid)
    )
    if result.success and result.new_stance is not None:
        updated = faction.copy_with(
            stance=result.new_stance,
            influence=clamp_percent(faction.influence + result.influence_gained),
        )
        parliament = refresh_parliament_metrics(new_state.parliament.with_faction(updated))
        new_state = new_state.with_parliament(parliament)
    logger.info("negotiation with %s: %s", faction_id, "accepted" if result.success else "refused")
    return Outcome.success(new_state.with_log(result.message), result.message)


# --------------------------------------------------------------------------- #
# Monthly dynamics                                                             #
# --------------------------------------------------------------------------- #


def update_faction_stances(
    factions: Sequence[PartyFaction],
    popularity: float,
    failed_bills: int,
    rng: np.random.Generator,
) -> List[PartyFaction]:
    """Monthly stance drift driven by popularity and legislative failure."""
    updated = []
    for faction in factions:
        stance = faction.stance
        if stance == Stance.SUPPORTIVE:
            if (popularity < 30.0 or failed_bills >= 2) and rng.random() < 0.3:
                stance = Stance.NEUTRAL
        elif stance == Stance.NEUTRAL:
            if popularity > 60.0:
                if rng.random() < 0.2:
                    stance = Stance.SUPPORTIVE
            elif popularity < 35.0:
                if rng.random() < 0.2:
                    stance = Stance.HOSTILE
        elif stance == Stance.HOSTILE and popularity > 70.0:
            if rng.random() < 0.1:
                stance = Stance.NEUTRAL
        updated.append(faction if stance == faction.stance else faction.copy_with(stance=stance))
    return updated


def drift_faction_loyalty(
    factions: Sequence[PartyFaction],
    popularity: float,
    rng: np.random.Generator,
    government_party_ids: Sequence[str] = (),
    params: EngineParams = DEFAULT_PARAMS,
) -> List[PartyFaction]:
    """Random walk of loyalty-to-leader.

    Government factions are additionally pulled toward the government's
    popularity.
    """
    noise = rng.normal(0.0, params.loyalty_drift_sigma, size=len(factions))
    updated = []
    for faction, eps in zip(factions, noise):
        loyalty = faction.loyalty_to_leader + float(eps)
        if faction.party_id in government_party_ids:
            loyalty += (popularity - faction.loyalty_to_leader) * params.loyalty_popularity_pull
        updated.append(faction.copy_with(loyalty_to_leader=clamp_percent(loyalty)))
    return updated


def calculate_government_support(
    factions: Sequence[PartyFaction],
    total_seats: int,
    party_seats: Optional[Mapping[str, int]] = None,
    params: EngineParams = DEFAULT_PARAMS,
) -> float:
    """Supportive seats plus half the neutral seats, as a rounded percentage."""
    if total_seats <= 0:
        return 0.0
    support = 0.0
    for faction in factions:
        seats = faction_seats(faction, total_seats, party_seats, params)
        if faction.stance == Stance.SUPPORTIVE:
            support += seats
        elif faction.stance == Stance.NEUTRAL:
            support += seats * 0.5
    return clamp_percent(round(support / total_seats * 100.0))


def calculate_party_cohesion(
    factions: Sequence[PartyFaction], parties: Sequence[PoliticalParty]
) -> float:
    """Size-weighted mean loyalty of governing-party factions (50 if none)."""
    gov_ids = {p.id for p in parties if p.is_government}
    members = [f for f in factions if f.party_id in gov_ids]
    if not members:
        return 50.0
    weights = np.array([f.size for f in members], dtype=np.float64)
    loyalty = np.array([f.loyalty_to_leader for f in members], dtype=np.float64)
    if weights.sum() <= 0:
        return float(loyalty.mean())
    return clamp_percent(float(np.average(loyalty, weights=weights)))


def refresh_parliament_metrics(
    parliament: Parliament, params: EngineParams = DEFAULT_PARAMS
) -> Parliament:
    """Recompute government support and party cohesion from the factions."""
    return parliament.copy_with(
        government_support=calculate_government_support(
            parliament.factions, parliament.total_seats, parliament.party_seats(), params
        ),
        party_cohesion=calculate_party_cohesion(parliament.factions, parliament.parties),
    )


def update_parliament_monthly(
    state: GameState,
    rng: np.random.Generator,
    params: EngineParams = DEFAULT_PARAMS,
) -> GameState:
    """Loyalty drift, stance drift and derived metrics for one month."""
    parliament = state.parliament
    if not parliament.factions:
        return state
    popularity = state.stats.popularity
    factions = drift_faction_loyalty(
        parliament.factions, popularity, rng, parliament.government_party_ids(), params
    )
    factions = update_faction_stances(factions, popularity, state.failed_bills_this_month, rng)

    changed = [
        f for old, f in zip(parliament.factions, factions) if old.stance != f.stance
    ]
    parliament = refresh_parliament_metrics(
        replace(parliament, factions=tuple(factions)), params
    )
    new_state = state.with_parliament(parliament)
    for faction in changed:
        logger.debug("%s is now %s", faction.id, faction.stance.label)
        new_state = new_state.with_log(f"{faction.name} is now {faction.stance.label}.")
    return new_state

