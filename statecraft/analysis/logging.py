"""
Trajectory recorder.

StateLogger keeps the GameState snapshots of a run in memory, newest last,
optionally bounded to the most recent N months.  Snapshots are immutable,
so recording one is a reference append with no copying.
"""

from __future__ import annotations

from collections import deque
from typing import Any, Deque, Dict, List, Optional

from ..core.state import GameState

MACRO_VARIABLES = (
    "popularity",
    "stability",
    "political_capital",
    "budget",
    "gdp",
    "unemployment",
    "government_support",
    "class_struggle",
)


def _macro_value(state: GameState, name: str) -> float:
    if name in ("stability", "political_capital", "budget"):
        return getattr(state.resources, name)
    if name in ("popularity", "gdp", "unemployment"):
        return getattr(state.stats, name)
    if name == "government_support":
        return state.parliament.government_support
    return state.social.class_struggle


class StateLogger:
    """Month-by-month record of a game.

    Hook it after each tick:

        recorder = StateLogger()
        orchestrator.register_post_hook(lambda before, after: recorder.record(after))

    ``max_records`` bounds the history to the latest snapshots; None keeps
    the whole game.
    """

    def __init__(self, max_records: Optional[int] = None) -> None:
        if max_records is not None and max_records <= 0:
            raise ValueError(f"max_records must be > 0 or None, got {max_records}")
        self.max_records = max_records
        self._records: Deque[GameState] = deque(maxlen=max_records)

    def record(self, state: GameState) -> None:
        self._records.append(state)

    def records(self) -> List[GameState]:
        return list(self._records)

    def clear(self) -> None:
        self._records.clear()

    def __len__(self) -> int:
        return len(self._records)

    def to_dicts(self) -> List[Dict[str, Any]]:
        """One GameState.to_dict() summary per recorded month."""
        return [s.to_dict() for s in self._records]

    def macro_series(self) -> Dict[str, List[float]]:
        """National indicators over time, keyed by MACRO_VARIABLES name."""
        return {
            name: [_macro_value(s, name) for s in self._records]
            for name in MACRO_VARIABLES
        }

    def faction_series(self, faction_id: str) -> Dict[str, List[Any]]:
        """Return stance and loyalty over time for one faction.

        Args:
            faction_id: Id of a parliamentary faction.

        Returns:
            Dictionary with ``stance`` (stance labels) and ``loyalty``.

        Raises:
            IndexError: If the faction is not in the first recorded state.
        """
        if not self._records:
            return {"stance": [], "loyalty": []}
        if self._records[0].parliament.faction(faction_id) is None:
            raise IndexError(f"unknown faction '{faction_id}'")
        stances: List[Any] = []
        loyalty: List[Any] = []
        for state in self._records:
            faction = state.parliament.faction(faction_id)
            stances.append(None if faction is None else faction.stance.label)
            loyalty.append(None if faction is None else faction.loyalty_to_leader)
        return {"stance": stances, "loyalty": loyalty}
