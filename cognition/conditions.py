"""Weighted, uncertain conditions and their evaluation against live signals.

A condition couples a named predicate with a relevance check and a confidence
source. Evaluating it against the current state and the live fresh-inference
signals yields an immutable ``Condition`` snapshot whose ``weighted_value``
feeds the conflict resolver.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, model_validator

from cognition.signals import DEFAULT_DECAY_MINUTES, DecayingSignal, modifier_for, utc_now
from cognition.uncertainty import adjusted_confidence
from core.errors import ContractViolationError

State = Mapping[str, float]

NEUTRAL_VALUE = 0.5
WEIGHT_GAIN = 0.2
OVERRIDE_THRESHOLD = 0.7


@runtime_checkable
class Predicate(Protocol):
    """Boolean test against a context state."""

    def evaluate(self, state: State) -> bool: ...


@dataclass(frozen=True)
class ContextAbove:
    """True when ``state[key]`` is strictly greater than ``threshold``."""

    key: str
    threshold: float

    def evaluate(self, state: State) -> bool:
        return float(state.get(self.key, 0.0)) > self.threshold


@dataclass(frozen=True)
class ContextBelow:
    """True when ``state[key]`` is strictly lower than ``threshold``."""

    key: str
    threshold: float

    def evaluate(self, state: State) -> bool:
        return float(state.get(self.key, 0.0)) < self.threshold


@dataclass(frozen=True)
class ContextBetween:
    """True when ``low <= state[key] <= high``."""

    key: str
    low: float
    high: float

    def evaluate(self, state: State) -> bool:
        value = float(state.get(self.key, 0.0))
        return self.low <= value <= self.high


@dataclass(frozen=True)
class CallablePredicate:
    """Adapts a plain ``fn(state) -> bool`` to the predicate protocol."""

    fn: Callable[[State], bool]

    def evaluate(self, state: State) -> bool:
        return bool(self.fn(state))


def _check_confidence(name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ContractViolationError(f"Condition '{name}' confidence must be a number, got {value!r}.")
    confidence = float(value)
    if math.isnan(confidence) or not 0.0 <= confidence <= 1.0:
        raise ContractViolationError(f"Condition '{name}' confidence {confidence} outside [0, 1].")
    return confidence


@dataclass(frozen=True)
class ConditionSpec:
    """Definition of a named condition, evaluated on demand."""

    name: str
    predicate: Predicate
    relevance: Callable[[], bool] | None = None
    confidence: float | Callable[[], float] = 1.0

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ContractViolationError("Condition name must be non-empty.")
        if callable(self.predicate) and not isinstance(self.predicate, Predicate):
            object.__setattr__(self, "predicate", CallablePredicate(self.predicate))
        if self.predicate is None or not isinstance(self.predicate, Predicate):
            raise ContractViolationError(f"Condition '{self.name}' needs a predicate with evaluate(state).")
        if not callable(self.confidence):
            _check_confidence(self.name, self.confidence)

    def is_relevant(self) -> bool:
        if self.relevance is None:
            return True
        return bool(self.relevance())

    def base_confidence(self) -> float:
        raw = self.confidence() if callable(self.confidence) else self.confidence
        return _check_confidence(self.name, raw)


def compute_weighted_value(
    relevant: bool,
    raw_value: bool,
    confidence: float,
    emotional_modifier: float,
    weight_gain: float = WEIGHT_GAIN,
    neutral_value: float = NEUTRAL_VALUE,
) -> float:
    """Unclamped contribution of a condition to the average weight."""
    if not relevant:
        return neutral_value
    base = 1.0 if raw_value else 0.0
    return base * confidence + emotional_modifier * weight_gain


class Condition(BaseModel):
    """Evaluated state of a condition.

    Construction enforces the evaluation rules: a modifier beyond the override
    threshold decides ``raw_value``, and ``weighted_value`` is always derived
    from the other fields. Evaluators with non-default gains pass them through
    the validation context (``override_threshold``, ``weight_gain``,
    ``neutral_value``).
    """

    model_config = ConfigDict(frozen=True)

    name: str
    relevant: bool = True
    raw_value: bool = False
    confidence: float = Field(default=1.0, ge=0.0, le=1.0)
    emotional_modifier: float = 0.0
    display_confidence: float = Field(default=1.0, ge=0.0, le=1.0)
    weighted_value: float = 0.0

    @model_validator(mode="before")
    @classmethod
    def _derive(cls, data: Any, info: ValidationInfo) -> Any:
        if not isinstance(data, dict):
            return data
        options = info.context or {}
        data = dict(data)
        relevant = bool(data.get("relevant", True))
        confidence = float(data.get("confidence", 1.0))
        modifier = float(data.get("emotional_modifier", 0.0))
        if relevant and abs(modifier) > options.get("override_threshold", OVERRIDE_THRESHOLD):
            data["raw_value"] = modifier > 0
        data.setdefault("display_confidence", confidence)

        expected = compute_weighted_value(
            relevant=relevant,
            raw_value=bool(data.get("raw_value", False)),
            confidence=confidence,
            emotional_modifier=modifier,
            weight_gain=options.get("weight_gain", WEIGHT_GAIN),
            neutral_value=options.get("neutral_value", NEUTRAL_VALUE),
        )
        supplied = data.get("weighted_value")
        if supplied is not None and not math.isclose(float(supplied), expected, abs_tol=1e-9):
            raise ValueError(f"weighted_value {supplied} does not match derived value {expected}")
        data["weighted_value"] = expected
        return data

    @property
    def signature_entry(self) -> str:
        """``name=true`` / ``name=false`` key used for pattern signatures."""
        return f"{self.name}={'true' if self.raw_value else 'false'}"


class ConditionEvaluator:
    """Evaluates condition specs with emotional modulation from fresh signals."""

    def __init__(
        self,
        override_threshold: float = 0.7,
        display_gain: float = 0.3,
        weight_gain: float = WEIGHT_GAIN,
        neutral_value: float = NEUTRAL_VALUE,
        decay_minutes: float = DEFAULT_DECAY_MINUTES,
    ) -> None:
        self.override_threshold = override_threshold
        self.display_gain = display_gain
        self.weight_gain = weight_gain
        self.neutral_value = neutral_value
        self.decay_minutes = decay_minutes

    def evaluate(
        self,
        spec: ConditionSpec,
        state: State,
        signals: Iterable[DecayingSignal] = (),
        now: datetime | None = None,
    ) -> Condition:
        """Return the condition's new state; no side effects."""
        current = now or utc_now()
        relevant = spec.is_relevant()
        confidence = spec.base_confidence()
        modifier = modifier_for(spec.name, signals, current, self.decay_minutes)

        raw_value = False
        display = confidence
        if relevant:
            raw_value = bool(spec.predicate.evaluate(state))
            display = adjusted_confidence(confidence, modifier, self.display_gain)

        # Override and weighting are applied by the model itself.
        return Condition.model_validate(
            {
                "name": spec.name,
                "relevant": relevant,
                "raw_value": raw_value,
                "confidence": confidence,
                "emotional_modifier": modifier,
                "display_confidence": display,
            },
            context={
                "override_threshold": self.override_threshold,
                "weight_gain": self.weight_gain,
                "neutral_value": self.neutral_value,
            },
        )
