"""
Parliamentary crisis events.

At most one crisis is raised per check, in a fixed priority order:

  1. no-confidence motion   support < 30 and popularity < 35
  2. party rebellion        disloyal, influential, hostile faction
  3. coalition breakdown    disloyal supportive faction, popularity < 30 (15 %)
  4. faction split          disloyal large hardliner faction (10 %)
  5. snap election          support < 20, stability < 25, popularity < 25

Every choice is a DecisionOption: the capital a choice requires is its
Cost, everything else is its effect descriptor.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional

import numpy as np

from ..core.effects import (
    Cost,
    DecisionOption,
    EndAdministration,
    ParliamentaryEvent,
    PolicyEffect,
    SetFactionStance,
    compound,
)
from ..core.enums import FactionType, ParliamentaryEventType, Stance
from ..core.errors import Outcome, UnknownOptionError
from ..core.evaluator import apply_option
from ..core.params import DEFAULT_PARAMS, EngineParams
from ..core.state import GameState, PartyFaction
from .elections import hold_election
from .parliament import refresh_parliament_metrics

logger = logging.getLogger("statecraft.systems.parliament_events")

# Choices that send the country to the polls immediately after their effect.
ELECTION_CHOICES = frozenset({"call_snap_election"})


# --------------------------------------------------------------------------- #
# Event builders                                                               #
# --------------------------------------------------------------------------- #


def _no_confidence_motion(state: GameState, support: float) -> ParliamentaryEvent:
    return ParliamentaryEvent(
        id=f"no_confidence_{state.months_elapsed}",
        type=ParliamentaryEventType.NO_CONFIDENCE_MOTION,
        title="Motion of No Confidence",
        description=(
            "The opposition has tabled a motion of no confidence. Your parliamentary "
            f"support stands at only {support:.1f}%. If it passes, the government falls."
        ),
        faction_ids=(),
        choices=(
            DecisionOption(
                id="negotiate_survival",
                label="Negotiate with the factions to survive (-50 political capital)",
                cost=Cost(political_capital=50.0),
                effect=PolicyEffect(popularity=-3.0, stability=-5.0),
                message="You secured just enough votes. The motion fails by a narrow margin.",
            ),
            DecisionOption(
                id="call_snap_election",
                label="Call a snap election",
                effect=PolicyEffect(popularity=-10.0, stability=-15.0),
                message="You called a snap election. The country goes to the polls.",
            ),
            DecisionOption(
                id="face_vote",
                label="Face the vote without negotiating",
                effect=compound(
                    PolicyEffect(popularity=-15.0, stability=-20.0),
                    EndAdministration("The motion of no confidence passed. The government falls."),
                ),
                message="The motion of no confidence passes.",
            ),
        ),
        consequences=PolicyEffect(popularity=-10.0),
    )


def _party_rebellion(state: GameState, faction: PartyFaction) -> ParliamentaryEvent:
    return ParliamentaryEvent(
        id=f"rebellion_{faction.id}_{state.months_elapsed}",
        type=ParliamentaryEventType.PARTY_REBELLION,
        title="Party Rebellion",
        description=(
            f"{faction.name} has rebelled against the leadership. They demand immediate "
            "changes or they will leave the party."
        ),
        faction_ids=(faction.id,),
        choices=(
            DecisionOption(
                id="make_concessions",
                label="Concede to their demands (-30 political capital)",
                cost=Cost(political_capital=30.0),
                effect=compound(
                    PolicyEffect(popularity=-2.0),
                    SetFactionStance(faction.id, Stance.NEUTRAL),
                ),
                message=f"{faction.name} accepts the concessions and stays, still wary.",
            ),
            DecisionOption(
                id="purge_faction",
                label="Expel the rebels from the party",
                effect=PolicyEffect(popularity=-5.0, stability=-8.0, political_capital=-20.0),
                message=f"You expelled {faction.name}, losing seats and parliamentary support.",
            ),
            DecisionOption(
                id="ignore_rebellion",
                label="Ignore their demands",
                effect=compound(
                    PolicyEffect(popularity=-7.0, stability=-10.0),
                    SetFactionStance(faction.id, Stance.HOSTILE),
                ),
                message=f"{faction.name} walks out and forms an opposition bloc.",
            ),
        ),
        consequences=PolicyEffect(popularity=-3.0),
    )


def _coalition_breakdown(state: GameState, faction: PartyFaction) -> ParliamentaryEvent:
    return ParliamentaryEvent(
        id=f"coalition_breakdown_{faction.id}_{state.months_elapsed}",
        type=ParliamentaryEventType.COALITION_BREAKDOWN,
        title="Coalition Breakdown",
        description=(
            f"{faction.name} threatens to leave the governing coalition. Without them "
            "you lose your majority."
        ),
        faction_ids=(faction.id,),
        choices=(
            DecisionOption(
                id="offer_ministries",
                label="Offer key ministries (-40 political capital)",
                cost=Cost(political_capital=40.0),
                effect=SetFactionStance(faction.id, Stance.SUPPORTIVE),
                message=f"{faction.name} stays in the coalition in exchange for more power.",
            ),
            DecisionOption(
                id="policy_concessions",
                label="Give ground on key policies",
                effect=compound(
                    PolicyEffect(popularity=-4.0, political_capital=-25.0),
                    SetFactionStance(faction.id, Stance.SUPPORTIVE),
                ),
                message="You gave ground on policy to hold the coalition together.",
            ),
            DecisionOption(
                id="let_them_leave",
                label="Let them go and govern as a minority",
                effect=compound(
                    PolicyEffect(popularity=-8.0, stability=-12.0),
                    SetFactionStance(faction.id, Stance.NEUTRAL),
                ),
                message=f"{faction.name} leaves the coalition. You now govern as a minority.",
            ),
        ),
        consequences=PolicyEffect(stability=-5.0),
    )


def _faction_split(state: GameState, faction: PartyFaction) -> ParliamentaryEvent:
    return ParliamentaryEvent(
        id=f"faction_split_{faction.id}_{state.months_elapsed}",
        type=ParliamentaryEventType.FACTION_SPLIT,
        title="Parliamentary Split",
        description=(
            f"{faction.name} ({faction.size:g}% of the party) announces it will break "
            "away to form a new party."
        ),
        faction_ids=(faction.id,),
        choices=(
            DecisionOption(
                id="prevent_split",
                label="Try to prevent the split (-35 political capital)",
                cost=Cost(political_capital=35.0),
                message=f"{faction.name} agrees to stay, but its loyalty is fragile.",
            ),
            DecisionOption(
                id="accept_split",
                label="Accept the split",
                effect=compound(
                    PolicyEffect(popularity=-3.0, stability=-5.0, political_capital=10.0),
                    SetFactionStance(faction.id, Stance.HOSTILE),
                ),
                message=f"{faction.name} splits off. You lose seats but gain internal cohesion.",
            ),
        ),
        consequences=PolicyEffect(popularity=-2.0),
    )


def _snap_election(state: GameState, support: float) -> ParliamentaryEvent:
    popularity = state.stats.popularity
    return ParliamentaryEvent(
        id=f"snap_election_{state.months_elapsed}",
        type=ParliamentaryEventType.SNAP_ELECTION,
        title="Total Political Crisis",
        description=(
            f"With {support:.1f}% parliamentary support and {popularity:.1f}% popularity, "
            "the pressure for early elections is unbearable."
        ),
        faction_ids=(),
        choices=(
            DecisionOption(
                id="resign",
                label="Resign with dignity",
                effect=compound(
                    PolicyEffect(popularity=5.0),
                    EndAdministration("You resigned. Your term ends early."),
                ),
                message="You have tendered your resignation.",
            ),
            DecisionOption(
                id="fight_on",
                label="Hold on to the end",
                effect=PolicyEffect(popularity=-10.0, stability=-25.0),
                message="Your government carries on amid total chaos.",
            ),
        ),
        consequences=PolicyEffect(popularity=-15.0, stability=-20.0),
    )


# --------------------------------------------------------------------------- #
# Detection and resolution                                                     #
# --------------------------------------------------------------------------- #


def check_parliamentary_events(
    state: GameState, rng: np.random.Generator
) -> Optional[ParliamentaryEvent]:
    """Return the highest-priority crisis the state triggers, or None."""
    factions = state.parliament.factions
    support = state.parliament.government_support
    popularity = state.stats.popularity

    if support < 30.0 and popularity < 35.0:
        return _no_confidence_motion(state, support)

    for faction in factions:
        if (faction.loyalty_to_leader < 30.0 and faction.influence > 60.0
                and faction.stance == Stance.HOSTILE):
            return _party_rebellion(state, faction)

    breaking = next(
        (f for f in factions
         if f.stance == Stance.SUPPORTIVE and popularity < 30.0 and f.loyalty_to_leader < 40.0),
        None,
    )
    if breaking is not None and rng.random() < 0.15:
        return _coalition_breakdown(state, breaking)

    splitting = next(
        (f for f in factions
         if f.loyalty_to_leader < 25.0 and f.size > 20.0 and f.type == FactionType.HARDLINER),
        None,
    )
    if splitting is not None and rng.random() < 0.1:
        return _faction_split(state, splitting)

    if support < 20.0 and state.resources.stability < 25.0 and popularity < 25.0:
        return _snap_election(state, support)

    return None


def resolve_parliamentary_event(
    state: GameState,
    event: ParliamentaryEvent,
    choice_id: str,
    params: EngineParams = DEFAULT_PARAMS,
) -> Outcome:
    """Apply one choice of a crisis event.

    The choice's cost is checked and paid, its effect applied through the
    central evaluator, the pending event cleared and the outcome logged.

    Returns:
        Outcome with the new state; on an unknown choice or an unaffordable
        one the unchanged state and the error.
    """
    choice = event.choice(choice_id)
    if choice is None:
        return Outcome.failure(state, UnknownOptionError(event.id, choice_id))

    outcome = apply_option(state, choice)
    if not outcome.ok:
        return outcome

    new_state = outcome.state
    if new_state.pending_event is not None and new_state.pending_event.id == event.id:
        new_state = replace(new_state, pending_event=None)
    new_state = new_state.with_parliament(
        refresh_parliament_metrics(new_state.parliament, params)
    )
    logger.info("parliamentary event %s resolved with %s", event.id, choice_id)
    if choice_id in ELECTION_CHOICES and not new_state.administration_ended:
        new_state = hold_election(new_state, params)
    return Outcome.success(new_state, choice.message)
