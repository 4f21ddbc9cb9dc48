"""Core: state tree, parameters, effect descriptors, invariants and errors."""
from .enums import (
    BillStatus,
    BillType,
    BudgetCategory,
    FactionType,
    HiddenAgenda,
    Ideology,
    IndustryType,
    Ministry,
    PolicyArea,
    PopType,
    ProtestAction,
    RegionType,
    ScandalSeverity,
    SocialClass,
    Stance,
    Strategy,
    Urgency,
    Vote,
)
from .errors import (
    ConfigError,
    InsufficientResourceError,
    InvalidAllocationError,
    Outcome,
    StatecraftError,
    UnknownOptionError,
)
from .params import DEFAULT_PARAMS, EngineParams
from .state import (
    Bill,
    BudgetAllocation,
    Economy,
    ElectoralCampaign,
    GameState,
    Government,
    Judge,
    Judiciary,
    Minister,
    MinisterPsychology,
    MinisterStats,
    NationalStats,
    Parliament,
    PartyFaction,
    PoliticalParty,
    Protest,
    Region,
    Resources,
    Social,
    SocialGroup,
)
from .effects import (
    AdjustMinister,
    Compound,
    Cost,
    DecisionOption,
    EndAdministration,
    ParliamentaryEvent,
    PolicyEffect,
    PresidentialDecision,
    RecordScandal,
    RemoveMinister,
    SetFactionStance,
    effect_from_dict,
    effect_to_dict,
)
from .evaluator import apply_effect, apply_option

__all__ = [
    "BillStatus",
    "BillType",
    "BudgetCategory",
    "FactionType",
    "HiddenAgenda",
    "Ideology",
    "IndustryType",
    "Ministry",
    "PolicyArea",
    "PopType",
    "ProtestAction",
    "RegionType",
    "ScandalSeverity",
    "SocialClass",
    "Stance",
    "Strategy",
    "Urgency",
    "Vote",
    "ConfigError",
    "InsufficientResourceError",
    "InvalidAllocationError",
    "Outcome",
    "StatecraftError",
    "UnknownOptionError",
    "DEFAULT_PARAMS",
    "EngineParams",
    "Bill",
    "BudgetAllocation",
    "Economy",
    "ElectoralCampaign",
    "GameState",
    "Government",
    "Judge",
    "Judiciary",
    "Minister",
    "MinisterPsychology",
    "MinisterStats",
    "NationalStats",
    "Parliament",
    "Protest",
    "PartyFaction",
    "PoliticalParty",
    "Region",
    "Resources",
    "Social",
    "SocialGroup",
    "AdjustMinister",
    "Compound",
    "Cost",
    "DecisionOption",
    "EndAdministration",
    "ParliamentaryEvent",
    "PolicyEffect",
    "PresidentialDecision",
    "RecordScandal",
    "RemoveMinister",
    "SetFactionStance",
    "effect_from_dict",
    "effect_to_dict",
    "apply_effect",
    "apply_option",
]
