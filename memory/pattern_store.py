"""Frequency-based pattern memory with similarity recall."""

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence
from datetime import datetime

from cognition.signals import utc_now
from memory.scoring import signature_similarity
from memory.types.patterns import Pattern

logger = logging.getLogger("cre.pattern_store")


class PatternStore:
    """Records signature → outcome observations and predicts outcomes for new signatures.

    ``record`` requires an exact (signature, outcome) match to reinforce a
    pattern; ``predict`` recalls any pattern whose conditions mostly appear in
    the current signature.
    """

    def __init__(
        self,
        initial_confidence: float = 0.5,
        confidence_step: float = 0.1,
        similarity_threshold: float = 0.7,
        confidence_threshold: float = 0.6,
    ) -> None:
        self.initial_confidence = initial_confidence
        self.confidence_step = confidence_step
        self.similarity_threshold = similarity_threshold
        self.confidence_threshold = confidence_threshold
        self._patterns: list[Pattern] = []
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._patterns)

    def record(
        self,
        signature: Sequence[str],
        outcome: str,
        now: datetime | None = None,
    ) -> Pattern:
        """Reinforce the exact (signature, outcome) pattern or insert a new one."""
        key = (tuple(signature), outcome)
        seen_at = now or utc_now()
        with self._lock:
            for pattern in self._patterns:
                if pattern.key() == key:
                    pattern.frequency += 1
                    pattern.confidence = min(1.0, round(pattern.confidence + self.confidence_step, 10))
                    pattern.last_seen = seen_at
                    logger.debug(
                        "Reinforced pattern -> %s (frequency=%d, confidence=%.2f)",
                        outcome,
                        pattern.frequency,
                        pattern.confidence,
                    )
                    return pattern.model_copy(deep=True)

            pattern = Pattern(
                conditions=list(signature),
                outcome=outcome,
                frequency=1,
                confidence=self.initial_confidence,
                last_seen=seen_at,
            )
            self._patterns.append(pattern)
            logger.debug("New pattern %s -> %s", list(signature), outcome)
            return pattern.model_copy(deep=True)

    def matches(self, signature: Sequence[str]) -> list[Pattern]:
        """Patterns similar and confident enough to count as a prediction."""
        with self._lock:
            return [
                pattern.model_copy(deep=True)
                for pattern in self._patterns
                if signature_similarity(pattern.conditions, signature) > self.similarity_threshold
                and pattern.confidence > self.confidence_threshold
            ]

    def predict(self, signature: Sequence[str]) -> list[str]:
        """Return ``"<outcome> (confidence: <c>)"`` for every matching pattern, in insertion order."""
        return [
            f"{pattern.outcome} (confidence: {pattern.confidence:.2f})"
            for pattern in self.matches(signature)
        ]

    def patterns(self) -> list[Pattern]:
        """Copy of the full pattern table."""
        with self._lock:
            return [pattern.model_copy(deep=True) for pattern in self._patterns]
