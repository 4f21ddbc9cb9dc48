"""Simulation: turn orchestrator and new-game bootstrap."""
from .bootstrap import new_game
from .orchestrator import StepHook, TurnOrchestrator, TurnResult, evaluate_turn, resolve_decision

__all__ = [
    "new_game",
    "StepHook",
    "TurnOrchestrator",
    "TurnResult",
    "evaluate_turn",
    "resolve_decision",
]
