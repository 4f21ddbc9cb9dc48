"""
Effect descriptors and decision containers.

Decision options, parliamentary choices and bills never carry code.  Each
one carries an effect *descriptor*: a small frozen dataclass naming what
should change.  One evaluator (``statecraft.core.evaluator.apply_effect``)
interprets every descriptor, so effects stay serialisable, loggable and
testable on their own.

Descriptor kinds:
    PolicyEffect     - additive deltas on national stats and resources
    AdjustMinister   - additive deltas on one minister's stats/psychology
    RemoveMinister   - drop a minister from the cabinet
    RecordScandal    - book a scandal against a minister with its penalties
    SetFactionStance - overwrite one faction's stance
    EndAdministration - terminal defeat
    Compound         - ordered sequence of the above
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Optional, Tuple, Type, Union

from .enums import ParliamentaryEventType, ScandalSeverity, Stance, Urgency


# --------------------------------------------------------------------------- #
# Descriptors                                                                  #
# --------------------------------------------------------------------------- #


@dataclass(frozen=True)
class PolicyEffect:
    """Additive changes to national stats and shared resources.

    Attributes:
        popularity:        Points added to popularity.
        stability:         Points added to stability.
        gdp:               Relative GDP change (0.03 = +3 %).
        gdp_growth:        Added to the reported growth rate.
        unemployment:      Added to the national unemployment fraction.
        inflation:         Added to the inflation rate.
        budget:            Added to the treasury.
        political_capital: Added to political capital.
        policy_changes:    (key, delta) pairs on economy policy knobs;
                           supported keys are ``tax_rate`` and
                           ``technology_level``.
    """

    kind: ClassVar[str] = "policy"

    popularity: float = 0.0
    stability: float = 0.0
    gdp: float = 0.0
    gdp_growth: float = 0.0
    unemployment: float = 0.0
    inflation: float = 0.0
    budget: float = 0.0
    political_capital: float = 0.0
    policy_changes: Tuple[Tuple[str, float], ...] = ()

    @property
    def is_empty(self) -> bool:
        return self == PolicyEffect()


@dataclass(frozen=True)
class AdjustMinister:
    kind: ClassVar[str] = "adjust_minister"

    minister_id: str
    competence: float = 0.0
    loyalty: float = 0.0
    popularity: float = 0.0
    corruption: float = 0.0
    ambition: float = 0.0
    internal_support: float = 0.0
    corruption_pressure: float = 0.0
    reset_corruption_pressure: bool = False


@dataclass(frozen=True)
class RemoveMinister:
    kind: ClassVar[str] = "remove_minister"

    minister_id: str
    reason: str = ""


@dataclass(frozen=True)
class RecordScandal:
    """Scandal against a minister: counter +1, pressure reset, national penalties."""

    kind: ClassVar[str] = "record_scandal"

    minister_id: str
    severity: ScandalSeverity = ScandalSeverity.MINOR


@dataclass(frozen=True)
class SetFactionStance:
    kind: ClassVar[str] = "set_faction_stance"

    faction_id: str
    stance: Stance


@dataclass(frozen=True)
class EndAdministration:
    kind: ClassVar[str] = "end_administration"

    reason: str = ""


@dataclass(frozen=True)
class Compound:
    kind: ClassVar[str] = "compound"

    effects: Tuple["Effect", ...] = ()


Effect = Union[
    PolicyEffect,
    AdjustMinister,
    RemoveMinister,
    RecordScandal,
    SetFactionStance,
    EndAdministration,
    Compound,
]

NO_EFFECT = PolicyEffect()

# Popularity, stability and political-capital loss per scandal tier.
SCANDAL_PENALTIES: Dict[ScandalSeverity, Tuple[float, float, float]] = {
    ScandalSeverity.MINOR: (2.0, 1.0, 10.0),
    ScandalSeverity.MAJOR: (5.0, 3.0, 10.0),
    ScandalSeverity.CRITICAL: (10.0, 5.0, 10.0),
}


def compound(*effects: Effect) -> Effect:
    """Combine effects, flattening nested compounds and dropping no-ops."""
    flat = []
    for eff in effects:
        if isinstance(eff, Compound):
            flat.extend(eff.effects)
        elif isinstance(eff, PolicyEffect) and eff.is_empty:
            continue
        else:
            flat.append(eff)
    if len(flat) == 1:
        return flat[0]
    return Compound(effects=tuple(flat))


# --------------------------------------------------------------------------- #
# Serialisation                                                                #
# --------------------------------------------------------------------------- #

_KINDS: Dict[str, Type[Any]] = {
    cls.kind: cls
    for cls in (
        PolicyEffect,
        AdjustMinister,
        RemoveMinister,
        RecordScandal,
        SetFactionStance,
        EndAdministration,
        Compound,
    )
}


def effect_to_dict(effect: Effect) -> Dict[str, Any]:
    """Serialise an effect descriptor to a plain dictionary."""
    if isinstance(effect, Compound):
        return {"kind": effect.kind, "effects": [effect_to_dict(e) for e in effect.effects]}
    data: Dict[str, Any] = {"kind": effect.kind}
    for name in effect.__dataclass_fields__:
        value = getattr(effect, name)
        if isinstance(value, (Stance, ScandalSeverity)):
            value = value.name
        elif name == "policy_changes":
            value = [list(pair) for pair in value]
        data[name] = value
    return data


def effect_from_dict(data: Dict[str, Any]) -> Effect:
    """Deserialise an effect descriptor produced by effect_to_dict().

    Raises:
        ValueError: If the kind is unknown.
    """
    kind = data.get("kind")
    if kind not in _KINDS:
        raise ValueError(f"Unknown effect kind '{kind}'. Known: {sorted(_KINDS)}")
    if kind == Compound.kind:
        return Compound(effects=tuple(effect_from_dict(e) for e in data.get("effects", [])))
    cls = _KINDS[kind]
    kwargs = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
    if "stance" in kwargs:
        kwargs["stance"] = Stance[kwargs["stance"]]
    if "severity" in kwargs:
        kwargs["severity"] = ScandalSeverity[kwargs["severity"]]
    if "policy_changes" in kwargs:
        kwargs["policy_changes"] = tuple((str(k), float(v)) for k, v in kwargs["policy_changes"])
    return cls(**kwargs)


# --------------------------------------------------------------------------- #
# Decisions                                                                    #
# --------------------------------------------------------------------------- #


@dataclass(frozen=True)
class Cost:
    """Resources an option needs and consumes."""

    budget: float = 0.0
    political_capital: float = 0.0

    def __post_init__(self) -> None:
        if self.budget < 0 or self.political_capital < 0:
            raise ValueError(
                f"Cost values must be >= 0, got budget={self.budget}, "
                f"political_capital={self.political_capital}"
            )


@dataclass(frozen=True)
class DecisionOption:
    id: str
    label: str
    effect: Effect = NO_EFFECT
    cost: Optional[Cost] = None
    message: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "effect": effect_to_dict(self.effect),
            "cost": None if self.cost is None else {
                "budget": self.cost.budget,
                "political_capital": self.cost.political_capital,
            },
            "message": self.message,
        }


@dataclass(frozen=True)
class PresidentialDecision:
    """An event awaiting the player's choice among labelled options."""

    id: str
    source: str
    title: str
    description: str
    urgency: Urgency
    options: Tuple[DecisionOption, ...]

    def option(self, option_id: str) -> Optional[DecisionOption]:
        for opt in self.options:
            if opt.id == option_id:
                return opt
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "source": self.source,
            "title": self.title,
            "description": self.description,
            "urgency": self.urgency.name,
            "options": [o.to_dict() for o in self.options],
        }


@dataclass(frozen=True)
class ParliamentaryEvent:
    """A parliamentary crisis with branching choices.

    Attributes:
        consequences: Standing effect describing what the crisis threatens;
                      shown to the player, not applied automatically.
    """

    id: str
    type: ParliamentaryEventType
    title: str
    description: str
    faction_ids: Tuple[str, ...]
    choices: Tuple[DecisionOption, ...]
    consequences: PolicyEffect = field(default_factory=PolicyEffect)

    def choice(self, choice_id: str) -> Optional[DecisionOption]:
        for opt in self.choices:
            if opt.id == choice_id:
                return opt
        return None

    def to_decision(self) -> PresidentialDecision:
        return PresidentialDecision(
            id=self.id,
            source="Parliament",
            title=self.title,
            description=self.description,
            urgency=Urgency.CRISIS if self.type in (
                ParliamentaryEventType.NO_CONFIDENCE_MOTION,
                ParliamentaryEventType.SNAP_ELECTION,
            ) else Urgency.HIGH,
            options=self.choices,
        )
