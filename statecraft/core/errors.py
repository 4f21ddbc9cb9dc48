"""
Error types and the Outcome result container.

Business-rule failures (not enough political capital, an unknown decision
option, a malformed budget allocation) are never raised from the engine.
They travel back to the caller inside an Outcome next to the unchanged
state, so a host can branch on ``outcome.ok`` instead of comparing
snapshots.  ``Outcome.unwrap()`` converts the carried error back into an
exception for callers that prefer that style.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .state import GameState


class StatecraftError(Exception):
    """Base class for all engine errors."""


class InsufficientResourceError(StatecraftError):
    """An action needed more of a resource than the state holds.

    Attributes:
        resource:  Resource name ("political_capital", "budget", ...).
        required:  Amount the action needed.
        available: Amount the state held.
    """

    def __init__(self, resource: str, required: float, available: float) -> None:
        self.resource = resource
        self.required = float(required)
        self.available = float(available)
        super().__init__(
            f"insufficient {resource}: required {self.required:.2f}, "
            f"available {self.available:.2f}"
        )


class UnknownOptionError(StatecraftError):
    """A decision or event was resolved with an option id it does not offer."""

    def __init__(self, source_id: str, option_id: str) -> None:
        self.source_id = source_id
        self.option_id = option_id
        super().__init__(f"'{source_id}' has no option '{option_id}'")


class InvalidAllocationError(StatecraftError):
    """A budget allocation does not sum to 100."""


class ActionRejectedError(StatecraftError):
    """An action is not allowed in the current state (duplicate treaty, ...)."""


class ConfigError(StatecraftError, ValueError):
    """A scenario file or parameter override is malformed."""


@dataclass(frozen=True)
class Outcome:
    """Result of a state-mutating action.

    Attributes:
        state:   Resulting state.  Identical to the input state on failure.
        error:   Error describing why the action did not apply, or None.
        message: Human-readable summary of what happened.
    """

    state: "GameState"
    error: Optional[StatecraftError] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> "GameState":
        """Return the state, raising the carried error if there is one."""
        if self.error is not None:
            raise self.error
        return self.state

    @classmethod
    def success(cls, state: "GameState", message: str = "") -> "Outcome":
        return cls(state=state, error=None, message=message)

    @classmethod
    def failure(cls, state: "GameState", error: StatecraftError) -> "Outcome":
        return cls(state=state, error=error, message=str(error))
