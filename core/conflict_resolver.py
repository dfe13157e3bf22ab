"""Conflict resolution: conditions, pattern recall and cost/benefit into one decision.

The resolver keeps no state between calls other than the pattern store it
owns. Each ``resolve`` reads the store once (prediction) and writes it once
(recording the outcome) as its final step, under a lock, so concurrent
callers never see a half-finished resolution.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Mapping, Sequence
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from cognition.conditions import Condition, ConditionEvaluator, ConditionSpec
from cognition.signals import DecayingSignal, utc_now
from governance.audit_logger import DecisionAuditLogger
from governance.cost_benefit import CostBenefitAnalyzer, CostBenefitResult
from memory.pattern_store import PatternStore
from memory.scoring import final_score, mean
from memory.types.goals import Goal

logger = logging.getLogger("cre.conflict_resolver")

EXECUTED_PREFIX = "executed_"
SKIPPED_PREFIX = "skipped_"


class Resolution(BaseModel):
    """Outcome of one resolve call."""

    model_config = ConfigDict(frozen=True)

    action: str
    should_execute: bool
    confidence: float
    reasoning: str
    analysis: CostBenefitResult
    threshold: float
    predictions: list[str] = Field(default_factory=list)
    signature: list[str] = Field(default_factory=list)

    @property
    def outcome(self) -> str:
        """Outcome label recorded into the pattern store."""
        prefix = EXECUTED_PREFIX if self.should_execute else SKIPPED_PREFIX
        return prefix + self.action


def goal_alignment(analysis: CostBenefitResult, goals: Sequence[Goal]) -> float:
    """Mean priority-weighted benefit, local or global by goal scope."""
    if not goals:
        return 0.0
    total = 0.0
    for goal in goals:
        benefit = analysis.local_benefit if goal.is_local else analysis.global_benefit
        total += benefit * goal.priority
    return total / len(goals)


class ConflictResolver:
    """Decides whether to execute an action and records the outcome as a pattern."""

    def __init__(
        self,
        pattern_store: PatternStore | None = None,
        analyzer: CostBenefitAnalyzer | None = None,
        evaluator: ConditionEvaluator | None = None,
        base_threshold: float = 0.6,
        pattern_bonus: float = 0.1,
        condition_weight: float = 0.4,
        benefit_weight: float = 0.4,
        alignment_weight: float = 0.2,
        audit_logger: DecisionAuditLogger | None = None,
    ) -> None:
        self.pattern_store = pattern_store if pattern_store is not None else PatternStore()
        self.analyzer = analyzer if analyzer is not None else CostBenefitAnalyzer()
        self.evaluator = evaluator if evaluator is not None else ConditionEvaluator()
        self.base_threshold = base_threshold
        self.pattern_bonus = pattern_bonus
        self.condition_weight = condition_weight
        self.benefit_weight = benefit_weight
        self.alignment_weight = alignment_weight
        self.audit_logger = audit_logger
        self._lock = threading.Lock()

    def _evaluated(
        self,
        conditions: Iterable[Condition | ConditionSpec],
        context: Mapping[str, float],
        signals: Sequence[DecayingSignal],
        now: datetime,
    ) -> list[Condition]:
        evaluated: list[Condition] = []
        for cond in conditions:
            if isinstance(cond, ConditionSpec):
                cond = self.evaluator.evaluate(cond, context, signals, now)
            evaluated.append(cond)
        return evaluated

    def resolve(
        self,
        action: str,
        conditions: Iterable[Condition | ConditionSpec],
        goals: Sequence[Goal] = (),
        context: Mapping[str, float] | None = None,
        signals: Sequence[DecayingSignal] = (),
        now: datetime | None = None,
    ) -> Resolution:
        """Score an action, decide, and record the outcome."""
        context = context or {}
        current = now or utc_now()
        evaluated = self._evaluated(conditions, context, signals, current)

        relevant = [cond for cond in evaluated if cond.relevant]
        weights = [cond.weighted_value for cond in relevant]
        # Order matters: the signature is part of the pattern identity.
        signature = [cond.signature_entry for cond in relevant]

        with self._lock:
            predictions = self.pattern_store.predict(signature)
            analysis = self.analyzer.analyze(action, goals, context)

            avg_weight = mean(weights)
            net_benefit = analysis.net_benefit
            threshold = self.base_threshold
            if predictions:
                threshold -= self.pattern_bonus
            alignment = goal_alignment(analysis, goals)
            score = final_score(
                avg_weight,
                net_benefit,
                alignment,
                condition_weight=self.condition_weight,
                benefit_weight=self.benefit_weight,
                alignment_weight=self.alignment_weight,
            )
            should_execute = score > threshold

            reasoning = (
                f"avg_weight: {avg_weight:.3f}, net_benefit: {net_benefit:.3f}, "
                f"goal_alignment: {alignment:.3f}, final_score: {score:.3f}, "
                f"threshold: {threshold:.3f}"
            )
            if predictions:
                reasoning += "\nPattern predictions: " + "; ".join(predictions)

            resolution = Resolution(
                action=action,
                should_execute=should_execute,
                confidence=score,
                reasoning=reasoning,
                analysis=analysis,
                threshold=threshold,
                predictions=predictions,
                signature=signature,
            )
            self.pattern_store.record(signature, resolution.outcome, now=current)

        logger.info(
            "Resolved '%s': execute=%s score=%.3f threshold=%.3f predictions=%d",
            action,
            should_execute,
            score,
            threshold,
            len(predictions),
        )
        if self.audit_logger is not None:
            self.audit_logger.log(
                action=action,
                should_execute=should_execute,
                score=score,
                threshold=threshold,
                inputs={
                    "signature": signature,
                    "weights": weights,
                    "goals": [goal.model_dump(mode="json") for goal in goals],
                    "context": dict(context),
                },
                reasoning=reasoning,
            )
        return resolution
