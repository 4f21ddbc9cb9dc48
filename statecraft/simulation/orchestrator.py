"""
Turn orchestrator.

``evaluate_turn`` advances a GameState by one simulated month.  It is a
pure function of (state, rng, params): the input snapshot is never
modified and the whole new snapshot is returned at once.

Tick order:
    1.  calendar            turn and months_elapsed +1
    2.  mandates            ministers drift the budget allocation
    3.  economy             regional growth pass and fiscal effects
    4.  society             pop satisfaction, popularity, class struggle, protests
    5.  parliament          loyalty and stance drift, optional crisis event
    6.  cabinet             rivalries, corruption pressure, scandals, resignations
    7.  judiciary           court aging once per judicial year
    8.  political capital   monthly regeneration
    9.  elections           campaign upkeep and window, election on the last turn
    10. decisions           minister decisions and the unemployment crisis
    11. invariants          percentage sums repaired, failed-bill counter reset

TurnOrchestrator owns a live state for hosts that call the engine from
several entry points; every mutating call is serialised by one lock.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, replace
from typing import Callable, Dict, List, Optional, Tuple

import numpy as np

from ..core.effects import Cost, DecisionOption, PolicyEffect, PresidentialDecision
from ..core.enums import Urgency
from ..core.errors import Outcome, UnknownOptionError
from ..core.evaluator import apply_option
from ..core.invariants import normalize_state
from ..core.params import DEFAULT_PARAMS, EngineParams
from ..core.state import Bill, GameState
from ..systems.economy import run_economy_tick
from ..systems.elections import handle_election_if_needed, update_campaign, update_campaign_mode
from ..systems.judiciary import run_judicial_year
from ..systems.legislation import pass_bill
from ..systems.mandates import execute_mandates
from ..systems.minister_events import run_minister_events
from ..systems.parliament import NegotiationOffer, negotiate, update_parliament_monthly
from ..systems.parliament_events import check_parliamentary_events, resolve_parliamentary_event
from ..systems.political_capital import regen_political_capital
from ..systems.psychology import (
    generate_minister_decisions,
    update_corruption_pressure,
    update_rivalries,
)
from ..systems.social import apply_social_update, run_protests

logger = logging.getLogger("statecraft.simulation.orchestrator")

# hook(state_before, state_after) -> None
StepHook = Callable[[GameState, GameState], None]


@dataclass(frozen=True)
class TurnResult:
    new_state: GameState
    new_decisions: Tuple[PresidentialDecision, ...] = ()


# --------------------------------------------------------------------------- #
# Pure tick                                                                    #
# --------------------------------------------------------------------------- #


def unemployment_crisis_decision(
    state: GameState, params: EngineParams = DEFAULT_PARAMS
) -> Optional[PresidentialDecision]:
    """Emergency decision raised while unemployment is above the crisis line."""
    if state.stats.unemployment <= params.unemployment_crisis_threshold:
        return None
    return PresidentialDecision(
        id=f"unemployment_crisis_{state.months_elapsed}",
        source="Labour Ministry",
        title="Unemployment Crisis",
        description="Unemployment has reached critical levels. Immediate action is required.",
        urgency=Urgency.CRISIS,
        options=(
            DecisionOption(
                id="public_works",
                label=f"Launch Public Works Program (Budget -{params.public_works_budget_cost:g})",
                cost=Cost(budget=params.public_works_budget_cost),
                effect=PolicyEffect(unemployment=-0.02),
                message="A public works program is under way.",
            ),
            DecisionOption(
                id="ignore",
                label="Do Nothing (Stability -10)",
                effect=PolicyEffect(stability=-10.0),
            ),
        ),
    )


def _advance_calendar(state: GameState) -> GameState:
    return replace(state, turn=state.turn + 1, months_elapsed=state.months_elapsed + 1)


def _parliament_step(
    state: GameState, rng: np.random.Generator, params: EngineParams
) -> Tuple[GameState, Optional[PresidentialDecision]]:
    state = update_parliament_monthly(state, rng, params)
    if state.pending_event is not None or rng.random() >= params.parliament_event_chance:
        return state, None
    event = check_parliamentary_events(state, rng)
    if event is None:
        return state, None
    logger.info("parliamentary event %s raised", event.id)
    state = replace(state, pending_event=event).with_log(f"Parliament: {event.title}.")
    return state, event.to_decision()


def _cabinet_step(state: GameState, rng: np.random.Generator, params: EngineParams) -> GameState:
    if not state.ministers:
        return state
    ministers = update_corruption_pressure(update_rivalries(state.ministers, params))
    return run_minister_events(state.with_ministers(ministers), rng)


def evaluate_turn(
    state: GameState,
    rng: Optional[np.random.Generator] = None,
    params: EngineParams = DEFAULT_PARAMS,
) -> TurnResult:
    """Advance the game by one month.

    Args:
        state:  Current snapshot (never modified).
        rng:    Random source; a fresh unseeded generator when None.
        params: Engine parameters.

    Returns:
        TurnResult with the new snapshot and the decisions raised this
        month.  An ended administration is returned unchanged.
    """
    if state.administration_ended:
        return TurnResult(new_state=state)
    if rng is None:
        rng = np.random.default_rng()

    decisions: List[PresidentialDecision] = []

    new_state = _advance_calendar(state)
    new_state = execute_mandates(new_state, params)
    new_state = run_economy_tick(new_state, params)
    new_state = apply_social_update(new_state, params)
    new_state = run_protests(new_state, rng, params)

    new_state, event_decision = _parliament_step(new_state, rng, params)
    if event_decision is not None:
        decisions.append(event_decision)

    new_state = _cabinet_step(new_state, rng, params)

    if new_state.months_elapsed % params.court_aging_interval_months == 0:
        new_state = run_judicial_year(new_state, rng, params)

    new_state = regen_political_capital(new_state, params)

    new_state = update_campaign(new_state, params)
    new_state = update_campaign_mode(new_state, params)
    new_state = handle_election_if_needed(new_state, params)

    if not new_state.administration_ended:
        decisions.extend(generate_minister_decisions(new_state, params))
        crisis = unemployment_crisis_decision(new_state, params)
        if crisis is not None:
            decisions.append(crisis)
    else:
        decisions = []

    new_state = replace(normalize_state(new_state), failed_bills_this_month=0)
    logger.debug(
        "month %d: popularity %.1f, capital %.1f, %d decisions",
        new_state.months_elapsed, new_state.stats.popularity,
        new_state.resources.political_capital, len(decisions),
    )
    return TurnResult(new_state=new_state, new_decisions=tuple(decisions))


def resolve_decision(
    state: GameState,
    decision: PresidentialDecision,
    option_id: str,
    params: EngineParams = DEFAULT_PARAMS,
) -> Outcome:
    """Apply the chosen option of a decision.

    The decision of the pending parliamentary event is routed through the
    event resolver so the event is cleared.

    Returns:
        Outcome with the new state; the unchanged state and an
        UnknownOptionError or InsufficientResourceError otherwise.
    """
    event = state.pending_event
    if event is not None and event.id == decision.id:
        return resolve_parliamentary_event(state, event, option_id, params)
    option = decision.option(option_id)
    if option is None:
        return Outcome.failure(state, UnknownOptionError(decision.id, option_id))
    return apply_option(state, option)


# --------------------------------------------------------------------------- #
# Stateful owner                                                               #
# --------------------------------------------------------------------------- #


class TurnOrchestrator:
    """Single owner of a live game state.

    Attributes:
        params: Engine parameters used for every call.
    """

    def __init__(
        self,
        params: EngineParams = DEFAULT_PARAMS,
        rng: Optional[np.random.Generator] = None,
        pre_step_hooks: Optional[List[StepHook]] = None,
        post_step_hooks: Optional[List[StepHook]] = None,
    ) -> None:
        """Initialise the orchestrator.

        Args:
            params:          Engine parameters.
            rng:             Random source shared by every call.
            pre_step_hooks:  Callables invoked with (state, state) before a tick.
            post_step_hooks: Callables invoked with (state_before, state_after)
                             after a tick.
        """
        self.params: EngineParams = params
        self._rng: np.random.Generator = rng if rng is not None else np.random.default_rng()
        self._pre_hooks: List[StepHook] = list(pre_step_hooks or [])
        self._post_hooks: List[StepHook] = list(post_step_hooks or [])
        self._lock = threading.Lock()
        self._current_state: Optional[GameState] = None
        self._pending: Dict[str, PresidentialDecision] = {}

    def initialise(self, state: GameState) -> None:
        with self._lock:
            self._current_state = normalize_state(state)
            self._pending = {}

    def _require_state(self) -> GameState:
        if self._current_state is None:
            raise RuntimeError(
                "TurnOrchestrator not initialised. Call initialise(state) first."
            )
        return self._current_state

    # ------------------------------------------------------------------ #
    # Tick                                                                 #
    # ------------------------------------------------------------------ #

    def tick(self) -> TurnResult:
        """Advance the live state by one month.

        Decisions left unanswered from the previous month lapse, except the
        pending parliamentary event which stays open until resolved.

        Raises:
            RuntimeError: If the orchestrator has not been initialised.
        """
        with self._lock:
            state_before = self._require_state()
            for hook in self._pre_hooks:
                hook(state_before, state_before)

            result = evaluate_turn(state_before, self._rng, self.params)
            state_after = result.new_state

            pending = {d.id: d for d in result.new_decisions}
            event = state_after.pending_event
            if event is not None and event.id not in pending:
                pending[event.id] = event.to_decision()
            self._pending = pending

            for hook in self._post_hooks:
                hook(state_before, state_after)

            self._current_state = state_after
            return result

    # ------------------------------------------------------------------ #
    # Player actions                                                       #
    # ------------------------------------------------------------------ #

    def _commit(self, outcome: Outcome) -> Outcome:
        if outcome.ok:
            self._current_state = outcome.state
        return outcome

    def resolve(self, decision_id: str, option_id: str) -> Outcome:
        """Answer a pending decision.

        An unknown decision id yields an UnknownOptionError outcome.
        """
        with self._lock:
            state = self._require_state()
            decision = self._pending.get(decision_id)
            if decision is None:
                return Outcome.failure(state, UnknownOptionError(decision_id, option_id))
            outcome = self._commit(resolve_decision(state, decision, option_id, self.params))
            if outcome.ok:
                del self._pending[decision_id]
            return outcome

    def propose_bill(self, bill: Bill) -> Outcome:
        """Put a bill to an immediate vote (with judicial review)."""
        with self._lock:
            return self._commit(pass_bill(self._require_state(), bill, self._rng, self.params))

    def negotiate(self, faction_id: str, offer: NegotiationOffer) -> Outcome:
        with self._lock:
            return self._commit(negotiate(self._require_state(), faction_id, offer, self._rng))

    def apply(self, action: Callable[[GameState], Outcome]) -> Outcome:
        """Run any state -> Outcome action under the lock.

        Example:
            orchestrator.apply(lambda s: fire_minister(s, "minister-economy"))
        """
        with self._lock:
            return self._commit(action(self._require_state()))

    # ------------------------------------------------------------------ #
    # Access                                                               #
    # ------------------------------------------------------------------ #

    @property
    def state(self) -> GameState:
        """Current state.

        Raises:
            RuntimeError: If the orchestrator has not been initialised.
        """
        with self._lock:
            return self._require_state()

    @property
    def pending_decisions(self) -> Tuple[PresidentialDecision, ...]:
        with self._lock:
            return tuple(self._pending.values())

    def register_pre_hook(self, hook: StepHook) -> None:
        self._pre_hooks.append(hook)

    def register_post_hook(self, hook: StepHook) -> None:
        self._post_hooks.append(hook)
