"""
Legislative pipeline.

    propose_bill  pending -> in_vote, bill becomes the active bill
    vote_on_bill  parliament votes; an approved bill with an ideology (or
                  any constitutional bill) goes to the supreme court; a
                  bill that survives review applies its effects.
"""

from __future__ import annotations

import logging
from dataclasses import replace

import numpy as np

from ..core.enums import BillStatus, BillType
from ..core.errors import ActionRejectedError, Outcome
from ..core.evaluator import apply_effect
from ..core.params import DEFAULT_PARAMS, EngineParams
from ..core.state import Bill, GameState
from .judiciary import check_constitutionality
from .parliament import refresh_parliament_metrics, simulate_bill_vote

logger = logging.getLogger("statecraft.systems.legislation")


def needs_judicial_review(bill: Bill) -> bool:
    return bill.ideology is not None or bill.type == BillType.CONSTITUTIONAL


def propose_bill(state: GameState, bill: Bill) -> Outcome:
    """Put a pending bill before parliament.

    Rejected when another bill is already in vote or the bill is not
    pending.
    """
    if state.active_bill is not None and state.active_bill.status == BillStatus.IN_VOTE:
        return Outcome.failure(
            state, ActionRejectedError(f"bill '{state.active_bill.id}' is already in vote")
        )
    if bill.status != BillStatus.PENDING:
        return Outcome.failure(
            state, ActionRejectedError(f"bill '{bill.id}' is {bill.status.value}, not pending")
        )
    active = bill.copy_with(status=BillStatus.IN_VOTE)
    new_state = replace(state, active_bill=active).with_log(f"Bill proposed: {bill.title}.")
    return Outcome.success(new_state, f"{bill.title} is in vote")


def vote_on_bill(
    state: GameState,
    rng: np.random.Generator,
    params: EngineParams = DEFAULT_PARAMS,
) -> Outcome:
    """Vote on the active bill and carry out the result.

    Returns:
        Outcome with the bill in its final status (approved, rejected or
        vetoed) stored as ``active_bill`` and the VoteResult as
        ``last_vote``.
    """
    bill = state.active_bill
    if bill is None or bill.status != BillStatus.IN_VOTE:
        return Outcome.failure(state, ActionRejectedError("no bill is in vote"))

    parliament = state.parliament
    result = simulate_bill_vote(
        bill,
        parliament.factions,
        parliament.total_seats,
        bill.is_government_bill,
        rng,
        party_seats=parliament.party_seats(),
        params=params,
    )
    voted = bill.copy_with(votes=result.tally, faction_votes=result.faction_votes)
    new_state = replace(state, last_vote=result)
    logger.info("bill %s: %.1f%% yes (%s)", bill.id, result.yes_percentage,
                "approved" if result.approved else "rejected")

    if not result.approved:
        new_state = replace(
            new_state,
            active_bill=voted.copy_with(status=BillStatus.REJECTED),
            failed_bills_this_month=state.failed_bills_this_month + 1,
        ).with_log(f"Parliament rejected {bill.title} ({result.yes_percentage:.1f}% yes).")
        return Outcome.success(new_state, "rejected")

    if needs_judicial_review(bill):
        review = check_constitutionality(new_state, voted, params)
        if review.vetoed:
            new_state = replace(review.state, active_bill=voted.copy_with(status=BillStatus.VETOED))
            return Outcome.success(new_state, "vetoed")

    new_state = apply_effect(new_state, bill.effects)
    new_state = replace(
        new_state, active_bill=voted.copy_with(status=BillStatus.APPROVED)
    ).with_log(f"Parliament approved {bill.title} ({result.yes_percentage:.1f}% yes).")
    new_state = new_state.with_parliament(refresh_parliament_metrics(new_state.parliament, params))
    return Outcome.success(new_state, "approved")


def pass_bill(
    state: GameState,
    bill: Bill,
    rng: np.random.Generator,
    params: EngineParams = DEFAULT_PARAMS,
) -> Outcome:
    """Propose a bill and vote on it immediately."""
    proposed = propose_bill(state, bill)
    if not proposed.ok:
        return proposed
    return vote_on_bill(proposed.state, rng, params)
