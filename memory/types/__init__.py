"""Typed memory payload models."""

from memory.types.goals import Goal, GoalScope
from memory.types.patterns import Pattern

__all__ = [
    "Goal",
    "GoalScope",
    "Pattern",
]
