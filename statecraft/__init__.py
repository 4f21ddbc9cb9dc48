"""
Statecraft engine.

A turn-based nation-management simulation: one simulated month per tick,
with a factional parliament, a reviewing supreme court, a regional
economy, a scheming cabinet, a reacting population and an electoral cycle.

Public API:
    GameState           - immutable root of a running game
    EngineParams        - immutable parameter pack
    new_game            - opening state from national figures
    evaluate_turn       - pure one-month tick
    resolve_decision    - apply a chosen decision option
    TurnOrchestrator    - locked owner of a live state
    StateLogger         - trajectory recorder
"""

from .core.params import DEFAULT_PARAMS, EngineParams
from .core.state import Bill, GameState
from .core.errors import InsufficientResourceError, Outcome, StatecraftError, UnknownOptionError
from .core.effects import DecisionOption, PresidentialDecision
from .core.evaluator import apply_effect
from .simulation.bootstrap import new_game
from .simulation.orchestrator import TurnOrchestrator, TurnResult, evaluate_turn, resolve_decision
from .analysis.logging import StateLogger
from .analysis.metrics import summary_statistics

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_PARAMS",
    "EngineParams",
    "Bill",
    "GameState",
    "InsufficientResourceError",
    "Outcome",
    "StatecraftError",
    "UnknownOptionError",
    "DecisionOption",
    "PresidentialDecision",
    "apply_effect",
    "new_game",
    "TurnOrchestrator",
    "TurnResult",
    "evaluate_turn",
    "resolve_decision",
    "StateLogger",
    "summary_statistics",
]
