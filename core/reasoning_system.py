"""In-process API surface of the conflict resolution engine."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from datetime import datetime
from typing import Protocol

from cognition.conditions import Condition, ConditionEvaluator, ConditionSpec
from cognition.signals import DEFAULT_DECAY_MINUTES, DecayingSignal, utc_now
from core.conflict_resolver import ConflictResolver, Resolution
from core.state_manager import SignalView, StateManager, SystemSnapshot
from memory.types.goals import Goal

logger = logging.getLogger("cre.reasoning_system")

Clock = Callable[[], datetime]


class ReportingSink(Protocol):
    """Receives read-only diagnostic snapshots."""

    def report(self, snapshot: SystemSnapshot) -> None: ...


class ReasoningSystem:
    """Session owning context, goals, live signals and the resolver's pattern store."""

    def __init__(
        self,
        resolver: ConflictResolver | None = None,
        state_manager: StateManager | None = None,
        decay_minutes: float = DEFAULT_DECAY_MINUTES,
        clock: Clock = utc_now,
    ) -> None:
        self.resolver = resolver if resolver is not None else ConflictResolver()
        self.state_manager = state_manager if state_manager is not None else StateManager()
        self.decay_minutes = decay_minutes
        self.clock = clock

    @property
    def evaluator(self) -> ConditionEvaluator:
        return self.resolver.evaluator

    def set_context(self, key: str, value: float) -> None:
        self.state_manager.set_context(key, value)

    def get_context(self, key: str) -> float:
        return self.state_manager.get_context(key)

    @property
    def context(self) -> dict[str, float]:
        return dict(self.state_manager.state.context)

    def add_goal(self, goal: Goal) -> None:
        self.state_manager.add_goal(goal)

    @property
    def goals(self) -> list[Goal]:
        return list(self.state_manager.state.goals)

    def replace_goal(self, name: str, goal: Goal) -> bool:
        return self.state_manager.replace_goal(name, goal)

    def add_fresh_inference(
        self,
        topic: str,
        magnitude: float,
        positive: bool = True,
        note: str = "",
    ) -> DecayingSignal:
        """Record a fresh inference, then prune signals past their expiry."""
        now = self.clock()
        signal = DecayingSignal(
            topic=topic,
            magnitude=magnitude,
            positive=positive,
            note=note,
            created_at=now,
        )
        self.state_manager.add_signal(signal)
        self.state_manager.prune(now)
        logger.debug("Fresh inference on '%s' (magnitude=%.2f)", topic, magnitude)
        return signal

    def live_signals(self, now: datetime | None = None) -> list[DecayingSignal]:
        self.state_manager.prune(now or self.clock())
        return list(self.state_manager.state.signals)

    def evaluate_condition(
        self,
        spec: ConditionSpec,
        signals: Sequence[DecayingSignal] | None = None,
    ) -> Condition:
        now = self.clock()
        live = self.live_signals(now) if signals is None else signals
        return self.evaluator.evaluate(spec, self.state_manager.state.context, live, now)

    def resolve(
        self,
        action: str,
        conditions: Iterable[Condition | ConditionSpec],
        goals: Sequence[Goal] | None = None,
        context: dict[str, float] | None = None,
        signals: Sequence[DecayingSignal] | None = None,
    ) -> Resolution:
        """Resolve against the session's goals, context and live signals unless given."""
        now = self.clock()
        return self.resolver.resolve(
            action,
            conditions,
            goals=self.goals if goals is None else goals,
            context=self.context if context is None else context,
            signals=self.live_signals(now) if signals is None else signals,
            now=now,
        )

    def snapshot(self) -> SystemSnapshot:
        now = self.clock()
        return SystemSnapshot(
            taken_at=now,
            context=self.context,
            goals=self.goals,
            signals=[
                SignalView(
                    topic=signal.topic,
                    note=signal.note,
                    magnitude=signal.magnitude,
                    positive=signal.positive,
                    current_weight=signal.current_weight(now, self.decay_minutes),
                )
                for signal in self.live_signals(now)
            ],
            patterns=self.resolver.pattern_store.patterns(),
        )

    def report(self, sink: ReportingSink) -> SystemSnapshot:
        snapshot = self.snapshot()
        sink.report(snapshot)
        return snapshot
