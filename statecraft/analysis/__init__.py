"""Analysis: trajectory recorder and summary metrics."""
from .logging import StateLogger
from .metrics import summary_statistics

__all__ = ["StateLogger", "summary_statistics"]
