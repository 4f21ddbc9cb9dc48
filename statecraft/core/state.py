"""
State containers for the statecraft engine.

One immutable tree describes a running game:

  - GameState   : root aggregate (resources, national stats, government,
                  judiciary, economy, society, calendar and the game log)
  - Government  : cabinet of Minister records + Parliament
  - Parliament  : PoliticalParty and PartyFaction records
  - Judiciary   : ordered supreme court of Judge records + Constitution
  - Economy     : Region, Industry, TradeAgreement and BudgetAllocation
  - Social      : SocialGroup (pop) records, the class-struggle metric,
                  active protests and the electoral campaign

Every container is a frozen dataclass that rejects out-of-range values at
construction time.  Updates go through ``copy_with`` / ``dataclasses.replace``
and produce new snapshots; unchanged sub-trees are shared.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from .effects import ParliamentaryEvent, PolicyEffect, effect_to_dict
from .enums import (
    BillStatus,
    BillType,
    BudgetCategory,
    ElectionSystem,
    FactionType,
    HiddenAgenda,
    IndustryType,
    Ideology,
    Ministry,
    PolicyArea,
    PopType,
    RegionType,
    SocialClass,
    Stance,
    Strategy,
    Urgency,
    Vote,
)

MAX_LOG_ENTRIES = 500


def _check_range(owner: str, values: Mapping[str, float], lo: float, hi: float) -> None:
    for name, value in values.items():
        if not (lo <= value <= hi):
            raise ValueError(f"{owner}.{name} must be in [{lo}, {hi}], got {value}")


def _check_non_negative(owner: str, values: Mapping[str, float]) -> None:
    for name, value in values.items():
        if value < 0:
            raise ValueError(f"{owner}.{name} must be >= 0, got {value}")


# --------------------------------------------------------------------------- #
# Resources and national statistics                                            #
# --------------------------------------------------------------------------- #


@dataclass(frozen=True)
class Resources:
    """Globally shared, spendable resources.

    Attributes:
        budget:            Treasury, >= 0.
        political_capital: Capital for costed actions, in [0, 100].
        stability:         Regime stability, in [0, 100].
    """

    budget: float
    political_capital: float
    stability: float

    def __post_init__(self) -> None:
        _check_non_negative("Resources", {"budget": self.budget})
        _check_range(
            "Resources",
            {"political_capital": self.political_capital, "stability": self.stability},
            0.0,
            100.0,
        )

    def copy_with(self, **kwargs: float) -> "Resources":
        return replace(self, **kwargs)

    def to_dict(self) -> Dict[str, float]:
        return {
            "budget": self.budget,
            "political_capital": self.political_capital,
            "stability": self.stability,
        }


@dataclass(frozen=True)
class NationalStats:
    """National indicators.  Unemployment and growth are fractions (0.05 = 5 %)."""

    popularity: float
    gdp: float
    gdp_growth: float = 0.0
    unemployment: float = 0.05
    inflation: float = 0.02

    def __post_init__(self) -> None:
        _check_range("NationalStats", {"popularity": self.popularity}, 0.0, 100.0)
        _check_range("NationalStats", {"unemployment": self.unemployment}, 0.0, 1.0)
        _check_non_negative("NationalStats", {"gdp": self.gdp})

    def copy_with(self, **kwargs: float) -> "NationalStats":
        return replace(self, **kwargs)

    def to_dict(self) -> Dict[str, float]:
        return {
            "popularity": self.popularity,
            "gdp": self.gdp,
            "gdp_growth": self.gdp_growth,
            "unemployment": self.unemployment,
            "inflation": self.inflation,
        }


# --------------------------------------------------------------------------- #
# Cabinet                                                                      #
# --------------------------------------------------------------------------- #


@dataclass(frozen=True)
class MinisterStats:
    competence: float
    loyalty: float
    popularity: float
    corruption: float
    ambition: float
    internal_support: float

    def __post_init__(self) -> None:
        _check_range("MinisterStats", self.to_dict(), 0.0, 100.0)

    def copy_with(self, **kwargs: float) -> "MinisterStats":
        return replace(self, **kwargs)

    def to_dict(self) -> Dict[str, float]:
        return {
            "competence": self.competence,
            "loyalty": self.loyalty,
            "popularity": self.popularity,
            "corruption": self.corruption,
            "ambition": self.ambition,
            "internal_support": self.internal_support,
        }


@dataclass(frozen=True)
class MinisterPsychology:
    """Hidden attributes of a minister.

    Attributes:
        hidden_agenda:       Private goal driving corruption pressure.
        rivalries:           (minister_id, hatred 0..100) pairs.
        corruption_pressure: Temptation to divert funds, 0..100.
        paranoia:            0..100.
    """

    hidden_agenda: HiddenAgenda = HiddenAgenda.STATUS_QUO
    rivalries: Tuple[Tuple[str, float], ...] = ()
    corruption_pressure: float = 0.0
    paranoia: float = 0.0

    def __post_init__(self) -> None:
        _check_range(
            "MinisterPsychology",
            {"corruption_pressure": self.corruption_pressure, "paranoia": self.paranoia},
            0.0,
            100.0,
        )
        for other_id, level in self.rivalries:
            if not (0.0 <= level <= 100.0):
                raise ValueError(
                    f"MinisterPsychology.rivalries[{other_id!r}] must be in [0, 100], got {level}"
                )

    def rivalry_with(self, other_id: str) -> float:
        for rid, level in self.rivalries:
            if rid == other_id:
                return level
        return 0.0

    def rivalry_map(self) -> Dict[str, float]:
        return dict(self.rivalries)

    def copy_with(self, **kwargs: Any) -> "MinisterPsychology":
        return replace(self, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hidden_agenda": self.hidden_agenda.value,
            "rivalries": self.rivalry_map(),
            "corruption_pressure": self.corruption_pressure,
            "paranoia": self.paranoia,
        }


DEFAULT_PSYCHOLOGY = MinisterPsychology()


@dataclass(frozen=True)
class Minister:
    id: str
    name: str
    age: int
    ministry: Ministry
    party_id: str
    ideology: Ideology
    stats: MinisterStats
    trait_ids: Tuple[str, ...] = ()
    biography: str = ""
    scandals_count: int = 0
    psychology: Optional[MinisterPsychology] = None
    strategy: Optional[Strategy] = None

    def __post_init__(self) -> None:
        if self.scandals_count < 0:
            raise ValueError(f"Minister.scandals_count must be >= 0, got {self.scandals_count}")

    @property
    def psyche(self) -> MinisterPsychology:
        """Psychology, or the neutral default when none was generated."""
        return self.psychology if self.psychology is not None else DEFAULT_PSYCHOLOGY

    def copy_with(self, **kwargs: Any) -> "Minister":
        return replace(self, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "age": self.age,
            "ministry": self.ministry.value,
            "party_id": self.party_id,
            "ideology": self.ideology.value,
            "stats": self.stats.to_dict(),
            "trait_ids": list(self.trait_ids),
            "scandals_count": self.scandals_count,
            "psychology": None if self.psychology is None else self.psychology.to_dict(),
            "strategy": None if self.strategy is None else self.strategy.value,
        }


# --------------------------------------------------------------------------- #
# Parliament                                                                   #
# --------------------------------------------------------------------------- #


@dataclass(frozen=True)
class PartyFaction:
    """Sub-group of a party.

    Attributes:
        size:              Share of the party's seats, in [0, 100].
        influence:         Weight inside the party, in [0, 100].
        priorities:        Two or three policy areas the faction cares about.
        loyalty_to_leader: In [0, 100].
    """

    id: str
    name: str
    party_id: str
    type: FactionType
    ideology: Ideology
    size: float
    influence: float
    priorities: Tuple[PolicyArea, ...]
    stance: Stance
    loyalty_to_leader: float
    description: str = ""

    def __post_init__(self) -> None:
        _check_range(
            "PartyFaction",
            {"size": self.size, "influence": self.influence,
             "loyalty_to_leader": self.loyalty_to_leader},
            0.0,
            100.0,
        )

    def copy_with(self, **kwargs: Any) -> "PartyFaction":
        return replace(self, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "party_id": self.party_id,
            "type": self.type.value,
            "ideology": self.ideology.value,
            "size": self.size,
            "influence": self.influence,
            "priorities": [p.value for p in self.priorities],
            "stance": self.stance.label,
            "loyalty_to_leader": self.loyalty_to_leader,
        }


@dataclass(frozen=True)
class PoliticalParty:
    id: str
    name: str
    ideology: Ideology
    seats: int
    is_government: bool
    faction_ids: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.seats < 0:
            raise ValueError(f"PoliticalParty.seats must be >= 0, got {self.seats}")

    def copy_with(self, **kwargs: Any) -> "PoliticalParty":
        return replace(self, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "ideology": self.ideology.value,
            "seats": self.seats,
            "is_government": self.is_government,
            "faction_ids": list(self.faction_ids),
        }


@dataclass(frozen=True)
class Parliament:
    total_seats: int
    parties: Tuple[PoliticalParty, ...] = ()
    factions: Tuple[PartyFaction, ...] = ()
    government_support: float = 50.0
    party_cohesion: float = 50.0

    def __post_init__(self) -> None:
        if self.total_seats < 0:
            raise ValueError(f"Parliament.total_seats must be >= 0, got {self.total_seats}")
        _check_range(
            "Parliament",
            {"government_support": self.government_support,
             "party_cohesion": self.party_cohesion},
            0.0,
            100.0,
        )

    def party(self, party_id: str) -> Optional[PoliticalParty]:
        for p in self.parties:
            if p.id == party_id:
                return p
        return None

    def faction(self, faction_id: str) -> Optional[PartyFaction]:
        for f in self.factions:
            if f.id == faction_id:
                return f
        return None

    def party_seats(self) -> Dict[str, int]:
        return {p.id: p.seats for p in self.parties}

    def government_party_ids(self) -> Tuple[str, ...]:
        return tuple(p.id for p in self.parties if p.is_government)

    def with_faction(self, faction: PartyFaction) -> "Parliament":
        """Return a copy with one faction replaced (matched by id)."""
        return replace(
            self,
            factions=tuple(faction if f.id == faction.id else f for f in self.factions),
        )

    def copy_with(self, **kwargs: Any) -> "Parliament":
        return replace(self, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_seats": self.total_seats,
            "parties": [p.to_dict() for p in self.parties],
            "factions": [f.to_dict() for f in self.factions],
            "government_support": self.government_support,
            "party_cohesion": self.party_cohesion,
        }


@dataclass(frozen=True)
class Government:
    ministers: Tuple[Minister, ...] = ()
    parliament: Parliament = field(default_factory=lambda: Parliament(total_seats=0))

    def minister(self, minister_id: str) -> Optional[Minister]:
        for m in self.ministers:
            if m.id == minister_id:
                return m
        return None

    def with_minister(self, minister: Minister) -> "Government":
        return replace(
            self,
            ministers=tuple(minister if m.id == minister.id else m for m in self.ministers),
        )

    def without_minister(self, minister_id: str) -> "Government":
        return replace(
            self, ministers=tuple(m for m in self.ministers if m.id != minister_id)
        )

    def copy_with(self, **kwargs: Any) -> "Government":
        return replace(self, **kwargs)


# --------------------------------------------------------------------------- #
# Legislation                                                                  #
# --------------------------------------------------------------------------- #


@dataclass(frozen=True)
class VoteTally:
    yes: float = 0.0
    no: float = 0.0
    abstain: float = 0.0

    @property
    def total(self) -> float:
        return self.yes + self.no + self.abstain


@dataclass(frozen=True)
class FactionVote:
    faction_id: str
    vote: Vote
    reason: str
    base_support: float
    seats: float
    influenced: bool = False


@dataclass(frozen=True)
class VoteResult:
    """Aggregated outcome of a parliamentary vote.

    Attributes:
        yes_percentage: Yes seats as a percentage of the chamber.
    """

    approved: bool
    tally: VoteTally
    yes_percentage: float
    faction_votes: Tuple[FactionVote, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "approved": self.approved,
            "yes": self.tally.yes,
            "no": self.tally.no,
            "abstain": self.tally.abstain,
            "yes_percentage": self.yes_percentage,
            "faction_votes": [
                {"faction_id": fv.faction_id, "vote": fv.vote.value,
                 "reason": fv.reason, "base_support": fv.base_support}
                for fv in self.faction_votes
            ],
        }


@dataclass(frozen=True)
class Bill:
    """Proposed legislation.

    Status moves pending → in_vote → {approved, rejected}; an approved bill
    may end as vetoed after judicial review.

    Attributes:
        proposed_by:       "government" or "opposition".
        ideology:          Ideological colour used by judicial review; None
                           for bills the court does not examine.
        required_majority: Percentage of the chamber that must vote yes.
    """

    id: str
    title: str
    type: BillType
    policy_area: PolicyArea
    effects: PolicyEffect = field(default_factory=PolicyEffect)
    description: str = ""
    proposed_by: str = "government"
    ideology: Optional[Ideology] = None
    status: BillStatus = BillStatus.PENDING
    votes: VoteTally = field(default_factory=VoteTally)
    required_majority: float = 50.0
    urgency: Urgency = Urgency.MEDIUM
    faction_votes: Tuple[FactionVote, ...] = ()

    def __post_init__(self) -> None:
        if self.proposed_by not in ("government", "opposition"):
            raise ValueError(
                f"Bill.proposed_by must be 'government' or 'opposition', got {self.proposed_by!r}"
            )
        _check_range("Bill", {"required_majority": self.required_majority}, 0.0, 100.0)

    @property
    def is_government_bill(self) -> bool:
        return self.proposed_by == "government"

    def copy_with(self, **kwargs: Any) -> "Bill":
        return replace(self, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "type": self.type.value,
            "policy_area": self.policy_area.value,
            "effects": effect_to_dict(self.effects),
            "proposed_by": self.proposed_by,
            "ideology": None if self.ideology is None else self.ideology.value,
            "status": self.status.value,
            "required_majority": self.required_majority,
            "urgency": self.urgency.name,
        }


# --------------------------------------------------------------------------- #
# Judiciary                                                                    #
# --------------------------------------------------------------------------- #


@dataclass(frozen=True)
class Judge:
    id: str
    name: str
    ideology: Ideology
    age: int
    loyalty: float
    corruption: float
    integrity: float

    def __post_init__(self) -> None:
        _check_range(
            "Judge",
            {"loyalty": self.loyalty, "corruption": self.corruption,
             "integrity": self.integrity},
            0.0,
            100.0,
        )
        if self.age < 0:
            raise ValueError(f"Judge.age must be >= 0, got {self.age}")

    def copy_with(self, **kwargs: Any) -> "Judge":
        return replace(self, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "ideology": self.ideology.value,
            "age": self.age,
            "loyalty": self.loyalty,
            "corruption": self.corruption,
            "integrity": self.integrity,
        }


@dataclass(frozen=True)
class Constitution:
    """Constitutional settings.

    Attributes:
        term_length: Presidential term in years; None means indefinite.
    """

    term_length: Optional[int] = 4
    election_system: ElectionSystem = ElectionSystem.PROPORTIONAL
    judicial_independence: bool = True
    free_speech: bool = True
    assembly: bool = True
    strike: bool = True

    def __post_init__(self) -> None:
        if self.term_length is not None and self.term_length not in (4, 5, 6):
            raise ValueError(
                f"Constitution.term_length must be 4, 5, 6 or None, got {self.term_length}"
            )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "term_length": self.term_length,
            "election_system": self.election_system.value,
            "judicial_independence": self.judicial_independence,
            "free_speech": self.free_speech,
            "assembly": self.assembly,
            "strike": self.strike,
        }


@dataclass(frozen=True)
class Judiciary:
    supreme_court: Tuple[Judge, ...] = ()
    constitution: Constitution = field(default_factory=Constitution)

    def judge(self, judge_id: str) -> Optional[Judge]:
        for j in self.supreme_court:
            if j.id == judge_id:
                return j
        return None

    def copy_with(self, **kwargs: Any) -> "Judiciary":
        return replace(self, **kwargs)


# --------------------------------------------------------------------------- #
# Economy                                                                      #
# --------------------------------------------------------------------------- #


@dataclass(frozen=True)
class BudgetAllocation:
    """Percentage of spending per category.  Categories sum to 100."""

    health: float = 18.0
    education: float = 20.0
    defense: float = 12.0
    infrastructure: float = 15.0
    research: float = 10.0
    social_welfare: float = 25.0

    def __post_init__(self) -> None:
        _check_range("BudgetAllocation", self._fields(), 0.0, 100.0)

    def _fields(self) -> Dict[str, float]:
        return {
            "health": self.health,
            "education": self.education,
            "defense": self.defense,
            "infrastructure": self.infrastructure,
            "research": self.research,
            "social_welfare": self.social_welfare,
        }

    def get(self, category: BudgetCategory) -> float:
        return getattr(self, _CATEGORY_FIELDS[category])

    def as_dict(self) -> Dict[BudgetCategory, float]:
        return {cat: getattr(self, name) for cat, name in _CATEGORY_FIELDS.items()}

    @classmethod
    def from_mapping(cls, values: Mapping[BudgetCategory, float]) -> "BudgetAllocation":
        defaults = cls().as_dict()
        defaults.update(values)
        return cls(**{_CATEGORY_FIELDS[cat]: float(v) for cat, v in defaults.items()})

    @property
    def total(self) -> float:
        return float(sum(self._fields().values()))

    def to_dict(self) -> Dict[str, float]:
        return {cat.value: v for cat, v in self.as_dict().items()}


_CATEGORY_FIELDS: Dict[BudgetCategory, str] = {
    BudgetCategory.HEALTH: "health",
    BudgetCategory.EDUCATION: "education",
    BudgetCategory.DEFENSE: "defense",
    BudgetCategory.INFRASTRUCTURE: "infrastructure",
    BudgetCategory.RESEARCH: "research",
    BudgetCategory.SOCIAL_WELFARE: "social_welfare",
}


@dataclass(frozen=True)
class Region:
    """Sub-national region.

    Attributes:
        population:       Inhabitants (exact integer share of the nation).
        gdp_contribution: Region output in national GDP units.
        unemployment:     Fraction of the labour force.
        development:      0..100.
        infrastructure:   0..100.
        happiness:        0..100.
    """

    id: str
    name: str
    type: RegionType
    population: int
    gdp_contribution: float
    dominant_industry: IndustryType
    unemployment: float
    development: float
    infrastructure: float
    happiness: float

    def __post_init__(self) -> None:
        if self.population < 0:
            raise ValueError(f"Region.population must be >= 0, got {self.population}")
        _check_non_negative("Region", {"gdp_contribution": self.gdp_contribution})
        _check_range("Region", {"unemployment": self.unemployment}, 0.0, 1.0)
        _check_range(
            "Region",
            {"development": self.development, "infrastructure": self.infrastructure,
             "happiness": self.happiness},
            0.0,
            100.0,
        )

    def copy_with(self, **kwargs: Any) -> "Region":
        return replace(self, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type.value,
            "population": self.population,
            "gdp_contribution": self.gdp_contribution,
            "dominant_industry": self.dominant_industry.value,
            "unemployment": self.unemployment,
            "development": self.development,
            "infrastructure": self.infrastructure,
            "happiness": self.happiness,
        }


@dataclass(frozen=True)
class Industry:
    """National industry sector.

    Attributes:
        gdp_contribution: Percentage share of national GDP (all sum to 100).
        growth_rate:      Base monthly growth rate.
        subsidy_level:    0..100 (% of budget subsidy intensity).
        tax_rate:         0..100 (% sector-specific tax).
    """

    type: IndustryType
    gdp_contribution: float
    growth_rate: float
    employment: float
    subsidy_level: float = 0.0
    tax_rate: float = 0.0

    def __post_init__(self) -> None:
        _check_range(
            "Industry",
            {"gdp_contribution": self.gdp_contribution, "employment": self.employment,
             "subsidy_level": self.subsidy_level, "tax_rate": self.tax_rate},
            0.0,
            100.0,
        )

    def copy_with(self, **kwargs: Any) -> "Industry":
        return replace(self, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "gdp_contribution": self.gdp_contribution,
            "growth_rate": self.growth_rate,
            "employment": self.employment,
            "subsidy_level": self.subsidy_level,
            "tax_rate": self.tax_rate,
        }


@dataclass(frozen=True)
class TradeAgreement:
    id: str
    partner: str
    industry_effects: Tuple[Tuple[IndustryType, float], ...] = ()
    gdp_bonus: float = 0.0

    def effect_on(self, industry: IndustryType) -> float:
        return sum(delta for ind, delta in self.industry_effects if ind == industry)


@dataclass(frozen=True)
class Economy:
    """Regional economy and fiscal policy.

    Attributes:
        total_population: National population; regions sum to it exactly.
        tax_rate:         National revenue as a fraction of GDP.
        technology_level: 0..100.
        research_points:  Accumulated research.
        budget_balance:   Last monthly revenue minus spending (negative
                          means a deficit).
    """

    regions: Tuple[Region, ...] = ()
    industries: Tuple[Industry, ...] = ()
    budget_allocation: BudgetAllocation = field(default_factory=BudgetAllocation)
    trade_agreements: Tuple[TradeAgreement, ...] = ()
    total_population: int = 0
    tax_rate: float = 0.25
    technology_level: float = 50.0
    research_points: float = 0.0
    budget_balance: float = 0.0

    def __post_init__(self) -> None:
        _check_range("Economy", {"tax_rate": self.tax_rate}, 0.0, 1.0)
        _check_range("Economy", {"technology_level": self.technology_level}, 0.0, 100.0)

    def region(self, region_id: str) -> Optional[Region]:
        for r in self.regions:
            if r.id == region_id:
                return r
        return None

    def industry(self, industry_type: IndustryType) -> Optional[Industry]:
        for ind in self.industries:
            if ind.type == industry_type:
                return ind
        return None

    def copy_with(self, **kwargs: Any) -> "Economy":
        return replace(self, **kwargs)


# --------------------------------------------------------------------------- #
# Society                                                                      #
# --------------------------------------------------------------------------- #


@dataclass(frozen=True)
class SocialGroup:
    """Population slice ("pop") attached to a region."""

    id: str
    type: PopType
    social_class: SocialClass
    region_id: str
    population_size: int
    satisfaction: float
    radicalization: float
    political_influence: float = 1.0
    key_issues: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        _check_range(
            "SocialGroup",
            {"satisfaction": self.satisfaction, "radicalization": self.radicalization},
            0.0,
            100.0,
        )
        _check_non_negative("SocialGroup", {"political_influence": self.political_influence})

    def copy_with(self, **kwargs: Any) -> "SocialGroup":
        return replace(self, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "social_class": self.social_class.value,
            "region_id": self.region_id,
            "population_size": self.population_size,
            "satisfaction": self.satisfaction,
            "radicalization": self.radicalization,
            "political_influence": self.political_influence,
        }


@dataclass(frozen=True)
class Protest:
    """Street protest staged by one pop.

    Attributes:
        intensity:     0..100; the protest ends when it reaches 0.
        participants:  Marchers, a share of the pop's population.
        duration:      Months since the protest started.
        escalating:    Escalating protests gain intensity every month.
        demands:       Issues the protesters raise.
    """

    id: str
    pop_id: str
    region_id: str
    started_month: int
    intensity: float
    participants: int
    duration: int = 0
    escalating: bool = False
    demands: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        _check_range("Protest", {"intensity": self.intensity}, 0.0, 100.0)
        if self.participants < 0 or self.duration < 0:
            raise ValueError(
                f"Protest participants and duration must be >= 0, got "
                f"{self.participants}, {self.duration}"
            )

    def copy_with(self, **kwargs: Any) -> "Protest":
        return replace(self, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "pop_id": self.pop_id,
            "region_id": self.region_id,
            "started_month": self.started_month,
            "intensity": self.intensity,
            "participants": self.participants,
            "duration": self.duration,
            "escalating": self.escalating,
            "demands": list(self.demands),
        }


@dataclass(frozen=True)
class ElectoralCampaign:
    """Government campaign running through the campaign window.

    Attributes:
        months_until_election: Months left before the vote.
        spending:              Budget spent on rallies and smear campaigns.
        momentum:              -100..100, added to election support
                               scaled by EngineParams.campaign_momentum_weight.
    """

    months_until_election: int
    spending: float = 0.0
    rallies_held: int = 0
    smear_campaigns: int = 0
    momentum: float = 0.0

    def __post_init__(self) -> None:
        _check_range("ElectoralCampaign", {"momentum": self.momentum}, -100.0, 100.0)

    def copy_with(self, **kwargs: Any) -> "ElectoralCampaign":
        return replace(self, **kwargs)


@dataclass(frozen=True)
class Social:
    pops: Tuple[SocialGroup, ...] = ()
    class_struggle: float = 0.0
    protests: Tuple[Protest, ...] = ()
    campaign: Optional[ElectoralCampaign] = None

    def pop(self, pop_id: str) -> Optional[SocialGroup]:
        for p in self.pops:
            if p.id == pop_id:
                return p
        return None

    def protest(self, protest_id: str) -> Optional[Protest]:
        for p in self.protests:
            if p.id == protest_id:
                return p
        return None

    def copy_with(self, **kwargs: Any) -> "Social":
        return replace(self, **kwargs)


# --------------------------------------------------------------------------- #
# Root                                                                         #
# --------------------------------------------------------------------------- #


@dataclass(frozen=True)
class GameState:
    """Root aggregate of a running game.

    Attributes:
        turn:                    Turn within the current term (1-based).
        months_elapsed:          Months simulated since the game started.
        is_campaign_mode:        True inside the campaign window.
        administration_ended:    Terminal flag set by an electoral defeat or
                                 a fallen government.
        manual_override:         Disables automatic mandate execution.
        failed_bills_this_month: Rejected bills since the last tick.
        pending_event:           Parliamentary crisis awaiting resolution.
        active_bill:             Bill currently before parliament.
        last_vote:               Result of the most recent vote.
        logs:                    Game log, oldest first.
    """

    resources: Resources
    stats: NationalStats
    government: Government = field(default_factory=Government)
    judiciary: Judiciary = field(default_factory=Judiciary)
    economy: Economy = field(default_factory=Economy)
    social: Social = field(default_factory=Social)
    country_name: str = "Republic"
    turn: int = 1
    months_elapsed: int = 0
    is_campaign_mode: bool = False
    administration_ended: bool = False
    manual_override: bool = False
    failed_bills_this_month: int = 0
    pending_event: Optional[ParliamentaryEvent] = None
    active_bill: Optional[Bill] = None
    last_vote: Optional[VoteResult] = None
    logs: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.turn < 0 or self.months_elapsed < 0:
            raise ValueError(
                f"GameState calendar must be >= 0, got turn={self.turn}, "
                f"months_elapsed={self.months_elapsed}"
            )

    @property
    def parliament(self) -> Parliament:
        return self.government.parliament

    @property
    def ministers(self) -> Tuple[Minister, ...]:
        return self.government.ministers

    def copy_with(self, **kwargs: Any) -> "GameState":
        return replace(self, **kwargs)

    def with_resources(self, **kwargs: float) -> "GameState":
        return replace(self, resources=self.resources.copy_with(**kwargs))

    def with_stats(self, **kwargs: float) -> "GameState":
        return replace(self, stats=self.stats.copy_with(**kwargs))

    def with_parliament(self, parliament: Parliament) -> "GameState":
        return replace(self, government=self.government.copy_with(parliament=parliament))

    def with_ministers(self, ministers: Iterable[Minister]) -> "GameState":
        return replace(self, government=self.government.copy_with(ministers=tuple(ministers)))

    def with_log(self, *messages: str) -> "GameState":
        """Append log lines, keeping the newest MAX_LOG_ENTRIES."""
        logs: List[str] = list(self.logs) + list(messages)
        return replace(self, logs=tuple(logs[-MAX_LOG_ENTRIES:]))

    def to_dict(self) -> Dict[str, Any]:
        """Serialise the observable summary of the state (not the full tree)."""
        return {
            "turn": self.turn,
            "months_elapsed": self.months_elapsed,
            "resources": self.resources.to_dict(),
            "stats": self.stats.to_dict(),
            "government_support": self.parliament.government_support,
            "party_cohesion": self.parliament.party_cohesion,
            "n_ministers": len(self.ministers),
            "n_judges": len(self.judiciary.supreme_court),
            "class_struggle": self.social.class_struggle,
            "n_protests": len(self.social.protests),
            "campaign_momentum": (
                self.social.campaign.momentum if self.social.campaign is not None else None
            ),
            "budget_allocation": self.economy.budget_allocation.to_dict(),
            "is_campaign_mode": self.is_campaign_mode,
            "administration_ended": self.administration_ended,
        }
