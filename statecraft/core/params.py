"""
EngineParams - Immutable parameter pack for the statecraft engine.

Every threshold, cost and rate used by the subsystems lives here, so a
scenario file can retune the game without touching code.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class EngineParams:
    """
    Complete parameter specification for the engine.

    Organized by subsystem:
      - Calendar / electoral cycle
      - Political capital
      - Parliament
      - Judiciary
      - Cabinet psychology
      - Economy
      - Society and protests
      - Campaign
    """

    # ── Calendar / elections ──────────────────────────────────────────── #
    campaign_start_turn: int = 45
    """First turn of the campaign window."""
    election_turn: int = 48
    """Turn on which the election is held (last turn of the window)."""
    election_victory_threshold: float = 50.0
    """Average regional support needed to win re-election."""
    victory_political_capital: float = 100.0
    """Political capital granted by a re-election."""

    # ── Political capital ─────────────────────────────────────────────── #
    max_political_capital: float = 100.0
    capital_popularity_rate: float = 0.05
    """Monthly capital regained per point of popularity."""
    capital_cohesion_rate: float = 0.05
    """Monthly capital regained per point of governing-party cohesion."""
    cost_veto_law: float = 10.0
    cost_fire_minister: float = 25.0
    cost_manual_override: float = 5.0
    cost_emergency_decree: float = 50.0
    """Paid on every constitutional veto and on court packing."""
    cost_trade_agreement: float = 10.0

    # ── Parliament ────────────────────────────────────────────────────── #
    vote_yes_threshold: float = 60.0
    """Base support at or above which a faction votes yes."""
    vote_no_threshold: float = 40.0
    """Base support at or below which a faction votes no."""
    parliament_event_chance: float = 0.25
    """Monthly probability that the crisis-event check runs at all."""
    loyalty_drift_sigma: float = 1.5
    """Std-dev of the monthly random walk of faction loyalty to the leader."""
    loyalty_popularity_pull: float = 0.02
    """Pull of government-faction loyalty toward popularity per month."""
    legacy_faction_seat_share: Optional[float] = None
    """If set, a faction's seats are size/100 × total_seats × this share
    (the old fixed-share estimate).  None uses the party's real seats."""

    # ── Judiciary ─────────────────────────────────────────────────────── #
    judge_retirement_age: int = 80
    judge_retirement_chance: float = 0.02
    court_aging_interval_months: int = 12
    """Months between two court-aging cycles (one judicial year)."""
    nominal_court_size: int = 9
    pack_court_base_stability_cost: float = 10.0
    pack_court_per_judge_stability_cost: float = 2.0

    # ── Cabinet psychology ────────────────────────────────────────────── #
    psychology_grace_months: int = 3
    """No minister decisions are generated before this many months."""
    resignation_threat_loyalty: float = 15.0
    corruption_pressure_threshold: float = 70.0
    corruption_scheme_threshold: float = 50.0
    loyalty_bonus_budget_cost: float = 100.0
    loyalty_bonus_amount: float = 20.0
    ignore_scheme_loyalty_bonus: float = 10.0
    rivalry_ambition_threshold: float = 60.0

    # ── Economy ───────────────────────────────────────────────────────── #
    mandate_drift_rate: float = 0.5
    """Fraction of the gap to a strategy target closed per month at
    competence 100."""
    subsidy_growth_bonus: float = 0.02
    """Industry growth added at 100 % subsidy."""
    tax_growth_penalty: float = 0.015
    """Industry growth removed at 100 % industry tax."""
    unemployment_floor: float = 0.02
    unemployment_ceiling: float = 0.25
    happiness_floor: float = 20.0
    unemployment_crisis_threshold: float = 0.20
    public_works_budget_cost: float = 500.0

    # ── Society ───────────────────────────────────────────────────────── #
    popularity_blend: float = 0.2
    """Monthly fraction of the gap between popularity and weighted pop
    satisfaction that is closed."""
    protest_negotiate_cost: float = 20.0
    """Political capital spent on talks with protesters."""
    protest_suppress_cost: float = 30.0
    protest_concede_capital_cost: float = 10.0
    protest_concede_budget_per_intensity: float = 5.0
    """Budget paid per point of protest intensity when conceding."""
    protest_ignore_escalation_chance: float = 0.4
    protest_escalation_chance: float = 0.3
    """Monthly chance that a long, bitter protest starts escalating."""

    # ── Campaign ──────────────────────────────────────────────────────── #
    rally_budget_cost: float = 50.0
    rally_momentum_gain: float = 5.0
    smear_budget_cost: float = 100.0
    smear_political_capital_cost: float = 25.0
    smear_backfire_chance: float = 0.3
    smear_backfire_popularity_loss: float = 15.0
    smear_momentum_gain: float = 10.0
    campaign_momentum_decay: float = 2.0
    """Momentum lost every campaign month without activity."""
    campaign_momentum_floor: float = -50.0
    """Decay never pushes momentum below this."""
    campaign_momentum_weight: float = 0.1
    """Election support added per point of campaign momentum."""

    def __post_init__(self) -> None:
        if self.campaign_start_turn > self.election_turn:
            raise ValueError(
                "campaign_start_turn must be <= election_turn, got "
                f"{self.campaign_start_turn} > {self.election_turn}"
            )
        if not (0.0 <= self.vote_no_threshold < self.vote_yes_threshold <= 100.0):
            raise ValueError(
                "vote thresholds must satisfy 0 <= no < yes <= 100, got "
                f"no={self.vote_no_threshold}, yes={self.vote_yes_threshold}"
            )
        for name in ("parliament_event_chance", "judge_retirement_chance",
                     "popularity_blend", "mandate_drift_rate",
                     "protest_ignore_escalation_chance", "protest_escalation_chance",
                     "smear_backfire_chance"):
            value = getattr(self, name)
            if not (0.0 <= value <= 1.0):
                raise ValueError(f"{name} must be in [0, 1], got {value}")
        if self.court_aging_interval_months < 1:
            raise ValueError(
                f"court_aging_interval_months must be >= 1, got "
                f"{self.court_aging_interval_months}"
            )
        if self.legacy_faction_seat_share is not None and self.legacy_faction_seat_share <= 0:
            raise ValueError(
                f"legacy_faction_seat_share must be > 0 or None, got "
                f"{self.legacy_faction_seat_share}"
            )
        if not (0.0 <= self.unemployment_floor < self.unemployment_ceiling <= 1.0):
            raise ValueError("unemployment bounds must satisfy 0 <= floor < ceiling <= 1")

    def to_dict(self) -> Dict[str, Any]:
        return {f: getattr(self, f) for f in self.__dataclass_fields__}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "EngineParams":
        return cls(**{k: v for k, v in d.items() if k in cls.__dataclass_fields__})

    def copy_with(self, **kwargs: Any) -> "EngineParams":
        current = self.to_dict()
        current.update(kwargs)
        return EngineParams(**current)


DEFAULT_PARAMS = EngineParams()
