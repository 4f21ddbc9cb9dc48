"""
Electoral cycle.

The last turns of a term form the campaign window.  Entering it opens an
ElectoralCampaign whose momentum the government builds with rallies and
smear campaigns; momentum decays every month.  On the election turn every
region's influence-weighted pop satisfaction is averaged into the
government's support (a region without pops counts as 0), momentum is
added on top, and at 50 or more the government is re-elected (full
political capital, new term); otherwise the administration ends.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Dict, List, Optional

import numpy as np

from ..core.enums import PopType
from ..core.errors import ActionRejectedError, InsufficientResourceError, Outcome
from ..core.invariants import clamp, clamp_percent
from ..core.params import DEFAULT_PARAMS, EngineParams
from ..core.state import ElectoralCampaign, GameState, SocialGroup

logger = logging.getLogger("statecraft.systems.elections")

MAX_RALLY_SATISFACTION = 10.0


@dataclass(frozen=True)
class ElectionResult:
    won: bool
    support: float


def is_campaign_turn(turn: int, params: EngineParams = DEFAULT_PARAMS) -> bool:
    return params.campaign_start_turn <= turn <= params.election_turn


def _region_support(pops: List[SocialGroup]) -> float:
    if not pops:
        return 0.0
    weights = np.array([p.political_influence for p in pops], dtype=np.float64)
    values = np.array([p.satisfaction for p in pops], dtype=np.float64)
    total = weights.sum()
    if total <= 0:
        return float(values.mean())
    return float((values * weights).sum() / total)


def calculate_election_results(
    state: GameState, params: EngineParams = DEFAULT_PARAMS
) -> ElectionResult:
    """Average of per-region influence-weighted pop satisfaction.

    Every region votes; one without pops contributes 0.  Pop region ids
    stand in for the regions only when the economy has none.  Campaign
    momentum shifts the result by ``campaign_momentum_weight`` per point.
    """
    by_region: Dict[str, List[SocialGroup]] = {}
    for pop in state.social.pops:
        by_region.setdefault(pop.region_id, []).append(pop)
    region_ids = [r.id for r in state.economy.regions] or list(by_region)

    supports = [_region_support(by_region.get(rid, [])) for rid in region_ids]
    support = float(np.mean(supports)) if supports else 0.0
    campaign = state.social.campaign
    if campaign is not None:
        support = clamp_percent(support + campaign.momentum * params.campaign_momentum_weight)
    return ElectionResult(won=support >= params.election_victory_threshold, support=support)


def _end_campaign(state: GameState) -> GameState:
    return replace(state, is_campaign_mode=False, social=state.social.copy_with(campaign=None))


def hold_election(state: GameState, params: EngineParams = DEFAULT_PARAMS) -> GameState:
    """Run the election now, regardless of the calendar."""
    result = calculate_election_results(state, params)
    logger.info(
        "election at month %d: support %.1f (%s)",
        state.months_elapsed, result.support, "won" if result.won else "lost",
    )
    state = _end_campaign(state)
    if result.won:
        return replace(
            state,
            resources=state.resources.copy_with(
                political_capital=params.victory_political_capital
            ),
            turn=1,
        ).with_log(f"Re-elected with {result.support:.1f}% support.")
    return replace(state, administration_ended=True).with_log(
        f"Electoral defeat with {result.support:.1f}% support. The administration ends."
    )


def start_electoral_campaign(
    state: GameState, params: EngineParams = DEFAULT_PARAMS
) -> ElectoralCampaign:
    return ElectoralCampaign(months_until_election=max(0, params.election_turn - state.turn))


def update_campaign_mode(state: GameState, params: EngineParams = DEFAULT_PARAMS) -> GameState:
    """Open the campaign on entering the window and close it on leaving."""
    campaign = is_campaign_turn(state.turn, params)
    if campaign == state.is_campaign_mode:
        return state
    if not campaign:
        return _end_campaign(state)
    new_state = replace(
        state,
        is_campaign_mode=True,
        social=state.social.copy_with(campaign=start_electoral_campaign(state, params)),
    )
    return new_state.with_log("The election campaign has begun.")


def update_campaign(state: GameState, params: EngineParams = DEFAULT_PARAMS) -> GameState:
    """Monthly campaign upkeep: one month closer, momentum decays."""
    campaign = state.social.campaign
    if campaign is None:
        return state
    momentum = campaign.momentum
    if momentum > params.campaign_momentum_floor:
        momentum = max(params.campaign_momentum_floor, momentum - params.campaign_momentum_decay)
    updated = campaign.copy_with(
        months_until_election=max(0, campaign.months_until_election - 1),
        momentum=momentum,
    )
    return replace(state, social=state.social.copy_with(campaign=updated))


def _require_campaign(state: GameState) -> Optional[Outcome]:
    if state.social.campaign is None:
        return Outcome.failure(state, ActionRejectedError("no election campaign is running"))
    return None


def hold_rally(
    state: GameState,
    target: Optional[PopType] = None,
    region_id: Optional[str] = None,
    params: EngineParams = DEFAULT_PARAMS,
) -> Outcome:
    """Hold a campaign rally.

    Pops matching ``target`` and ``region_id`` (None matches any) gain up
    to MAX_RALLY_SATISFACTION satisfaction, scaled by how comfortably the
    treasury covers the rally.  The campaign gains momentum.

    Returns:
        Outcome with the rally paid for, or the unchanged state with an
        ActionRejectedError (no campaign, nobody to address) or an
        InsufficientResourceError (budget).
    """
    rejected = _require_campaign(state)
    if rejected is not None:
        return rejected
    budget = state.resources.budget
    cost = params.rally_budget_cost
    if budget < cost:
        return Outcome.failure(state, InsufficientResourceError("budget", cost, budget))

    def _addressed(pop: SocialGroup) -> bool:
        return (target is None or pop.type == target) and (
            region_id is None or pop.region_id == region_id
        )

    if not any(_addressed(p) for p in state.social.pops):
        return Outcome.failure(state, ActionRejectedError("no pops match the rally audience"))

    effectiveness = MAX_RALLY_SATISFACTION if cost <= 0 else min(
        MAX_RALLY_SATISFACTION, 2.5 * budget / cost
    )
    pops = tuple(
        p.copy_with(satisfaction=clamp_percent(p.satisfaction + effectiveness))
        if _addressed(p) else p
        for p in state.social.pops
    )
    campaign = state.social.campaign
    campaign = campaign.copy_with(
        rallies_held=campaign.rallies_held + 1,
        spending=campaign.spending + cost,
        momentum=clamp(campaign.momentum + params.rally_momentum_gain, -100.0, 100.0),
    )
    audience = target.value if target is not None else "all voters"
    where = region_id if region_id is not None else "nationwide"
    message = f"Campaign rally for {audience} ({where})."
    new_state = replace(
        state.with_resources(budget=budget - cost),
        social=state.social.copy_with(pops=pops, campaign=campaign),
    )
    logger.info("rally: %s, +%.1f satisfaction", message, effectiveness)
    return Outcome.success(new_state.with_log(message), message)


def launch_smear_campaign(
    state: GameState,
    rng: np.random.Generator,
    params: EngineParams = DEFAULT_PARAMS,
) -> Outcome:
    """Attack the opposition.

    Costs budget and political capital.  With ``smear_backfire_chance``
    the smear is exposed and costs popularity; otherwise the campaign
    gains momentum.
    """
    rejected = _require_campaign(state)
    if rejected is not None:
        return rejected
    res = state.resources
    if res.budget < params.smear_budget_cost:
        return Outcome.failure(
            state, InsufficientResourceError("budget", params.smear_budget_cost, res.budget)
        )
    if res.political_capital < params.smear_political_capital_cost:
        return Outcome.failure(
            state,
            InsufficientResourceError(
                "political_capital", params.smear_political_capital_cost, res.political_capital
            ),
        )

    new_state = state.with_resources(
        budget=res.budget - params.smear_budget_cost,
        political_capital=clamp_percent(res.political_capital - params.smear_political_capital_cost),
    )
    campaign = new_state.social.campaign.copy_with(
        smear_campaigns=new_state.social.campaign.smear_campaigns + 1,
        spending=new_state.social.campaign.spending + params.smear_budget_cost,
    )
    if rng.random() < params.smear_backfire_chance:
        message = "The smear campaign was exposed and backfired."
        new_state = new_state.with_stats(
            popularity=clamp_percent(
                new_state.stats.popularity - params.smear_backfire_popularity_loss
            )
        )
    else:
        message = "The smear campaign put the opposition on the defensive."
        campaign = campaign.copy_with(
            momentum=clamp(campaign.momentum + params.smear_momentum_gain, -100.0, 100.0)
        )
    new_state = replace(new_state, social=new_state.social.copy_with(campaign=campaign))
    logger.info("smear campaign: %s", message)
    return Outcome.success(new_state.with_log(message), message)


def handle_election_if_needed(
    state: GameState, params: EngineParams = DEFAULT_PARAMS
) -> GameState:
    """Hold the election once the term reaches the election turn."""
    if state.administration_ended or state.turn < params.election_turn:
        return state
    return hold_election(state, params)
