"""Enumerations shared by the state tree, the effect descriptors and the systems."""

from __future__ import annotations

from enum import Enum, IntEnum


class Ideology(str, Enum):
    SOCIALIST = "Socialist"
    LIBERAL = "Liberal"
    CONSERVATIVE = "Conservative"
    NATIONALIST = "Nationalist"
    CENTRIST = "Centrist"
    AUTHORITARIAN = "Authoritarian"
    CAPITALIST = "Capitalist"


class Ministry(str, Enum):
    ECONOMY = "Economy"
    FOREIGN = "Foreign"
    INTERIOR = "Interior"
    DEFENSE = "Defense"
    HEALTH = "Health"
    EDUCATION = "Education"
    INFRASTRUCTURE = "Infrastructure"
    ENVIRONMENT = "Environment"


class PolicyArea(str, Enum):
    ECONOMY = "economy"
    SOCIAL = "social"
    SECURITY = "security"
    ENVIRONMENT = "environment"
    EDUCATION = "education"
    HEALTH = "health"
    INFRASTRUCTURE = "infrastructure"
    FOREIGN = "foreign"


class FactionType(str, Enum):
    HARDLINER = "hardliner"
    MODERATE = "moderate"
    REFORMIST = "reformist"
    PRAGMATIST = "pragmatist"


class Stance(IntEnum):
    """Faction disposition toward the government, ordered worst to best."""

    HOSTILE = 0
    NEUTRAL = 1
    SUPPORTIVE = 2

    @property
    def label(self) -> str:
        return self.name.lower()

    def improved(self) -> "Stance":
        """One step toward supportive (saturating)."""
        return Stance(min(self.value + 1, Stance.SUPPORTIVE.value))

    def worsened(self) -> "Stance":
        """One step toward hostile (saturating)."""
        return Stance(max(self.value - 1, Stance.HOSTILE.value))


class BillType(str, Enum):
    POLICY_CHANGE = "policy_change"
    BUDGET = "budget"
    REFORM = "reform"
    CRISIS_RESPONSE = "crisis_response"
    CONSTITUTIONAL = "constitutional"


class BillStatus(str, Enum):
    PENDING = "pending"
    IN_VOTE = "in_vote"
    APPROVED = "approved"
    REJECTED = "rejected"
    VETOED = "vetoed"


class Urgency(IntEnum):
    LOW = 0
    MEDIUM = 1
    HIGH = 2
    CRISIS = 3


class Vote(str, Enum):
    YES = "yes"
    NO = "no"
    ABSTAIN = "abstain"


class Strategy(str, Enum):
    GROWTH = "GROWTH"
    AUSTERITY = "AUSTERITY"
    WELFARE = "WELFARE"
    GREED = "GREED"


class HiddenAgenda(str, Enum):
    LOYALIST = "LOYALIST"
    COUP_PLOTTER = "COUP_PLOTTER"
    WEALTH_ACCUMULATION = "WEALTH_ACCUMULATION"
    IDEOLOGICAL_ZEALOT = "IDEOLOGICAL_ZEALOT"
    RIVAL_SABOTAGE = "RIVAL_SABOTAGE"
    REFORMER = "REFORMER"
    STATUS_QUO = "STATUS_QUO"


class ScandalSeverity(IntEnum):
    MINOR = 0
    MAJOR = 1
    CRITICAL = 2


class SocialClass(str, Enum):
    ELITE = "Elite"
    MIDDLE = "Middle"
    LOWER = "Lower"


class PopType(str, Enum):
    BUSINESS_ELITE = "Business_Elite"
    URBAN_MIDDLE_CLASS = "Urban_Middle_Class"
    INDUSTRIAL_WORKERS = "Industrial_Workers"
    RURAL_CONSERVATIVES = "Rural_Conservatives"
    MINORITIES = "Minorities"
    INTELLECTUALS = "Intellectuals"
    ARMY_LOYALISTS = "Army_Loyalists"


class RegionType(str, Enum):
    URBAN = "urban"
    COASTAL = "coastal"
    PLAINS = "plains"
    MOUNTAIN = "mountain"
    RURAL = "rural"


class IndustryType(str, Enum):
    AGRICULTURE = "Agriculture"
    INDUSTRY = "Industry"
    SERVICES = "Services"
    TECHNOLOGY = "Technology"
    MINING = "Mining"


class BudgetCategory(str, Enum):
    HEALTH = "Health"
    EDUCATION = "Education"
    DEFENSE = "Defense"
    INFRASTRUCTURE = "Infrastructure"
    RESEARCH = "Research"
    SOCIAL_WELFARE = "SocialWelfare"


class ElectionSystem(str, Enum):
    PROPORTIONAL = "PROPORTIONAL"
    DISTRICTS = "DISTRICTS"
    ELECTORAL_COLLEGE = "ELECTORAL_COLLEGE"


class ParliamentaryEventType(str, Enum):
    NO_CONFIDENCE_MOTION = "no_confidence_motion"
    PARTY_REBELLION = "party_rebellion"
    COALITION_BREAKDOWN = "coalition_breakdown"
    FACTION_SPLIT = "faction_split"
    SNAP_ELECTION = "snap_election"


class ProtestAction(str, Enum):
    NEGOTIATE = "negotiate"
    SUPPRESS = "suppress"
    CONCEDE = "concede"
    IGNORE = "ignore"
