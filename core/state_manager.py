"""Owned state for a reasoning session."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta

from pydantic import BaseModel

from cognition.signals import DEFAULT_MAX_AGE, DecayingSignal, prune_signals, utc_now
from memory.types.goals import Goal
from memory.types.patterns import Pattern


@dataclass
class ReasoningState:
    """Mutable in-memory state for a single reasoning session."""

    context: dict[str, float] = field(default_factory=dict)
    goals: list[Goal] = field(default_factory=list)
    signals: list[DecayingSignal] = field(default_factory=list)


class SignalView(BaseModel):
    """A live signal together with its decayed weight at snapshot time."""

    topic: str
    note: str
    magnitude: float
    positive: bool
    current_weight: float


class SystemSnapshot(BaseModel):
    """Read-only diagnostic view handed to reporting sinks."""

    taken_at: datetime
    context: dict[str, float]
    goals: list[Goal]
    signals: list[SignalView]
    patterns: list[Pattern]


class StateManager:
    """Wraps reasoning state and provides convenience update methods."""

    def __init__(self, max_signal_age: timedelta = DEFAULT_MAX_AGE) -> None:
        self.state = ReasoningState()
        self.max_signal_age = max_signal_age

    def set_context(self, key: str, value: float) -> None:
        self.state.context[key] = float(value)

    def get_context(self, key: str) -> float:
        return self.state.context.get(key, 0.0)

    def add_goal(self, goal: Goal) -> None:
        self.state.goals.append(goal)

    def replace_goal(self, name: str, goal: Goal) -> bool:
        """Swap the first goal with the given name; False when absent."""
        for index, existing in enumerate(self.state.goals):
            if existing.name == name:
                self.state.goals[index] = goal
                return True
        return False

    def add_signal(self, signal: DecayingSignal) -> None:
        self.state.signals.append(signal)

    def prune(self, now: datetime | None = None) -> int:
        """Drop expired signals; return how many were removed."""
        before = len(self.state.signals)
        self.state.signals = prune_signals(self.state.signals, now or utc_now(), self.max_signal_age)
        return before - len(self.state.signals)
