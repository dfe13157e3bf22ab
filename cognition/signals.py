"""Time-decaying fresh inference signals."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from datetime import UTC, datetime, timedelta

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger("cre.signals")

DEFAULT_DECAY_MINUTES = 60.0
DEFAULT_MAX_AGE = timedelta(hours=2)


def utc_now() -> datetime:
    """Return UTC datetime for default timestamps."""
    return datetime.now(UTC)


def _as_utc(timestamp: datetime) -> datetime:
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=UTC)
    return timestamp


class DecayingSignal(BaseModel):
    """Emotion-like observation about a topic whose weight fades with age."""

    model_config = ConfigDict(frozen=True)

    topic: str = Field(min_length=1)
    magnitude: float = Field(ge=-1.0, le=1.0)
    positive: bool = True
    note: str = ""
    created_at: datetime = Field(default_factory=utc_now)

    def age(self, now: datetime | None = None) -> timedelta:
        """Elapsed time since creation, never negative."""
        current = _as_utc(now or utc_now())
        elapsed = current - _as_utc(self.created_at)
        return max(elapsed, timedelta(0))

    def age_minutes(self, now: datetime | None = None) -> float:
        return self.age(now).total_seconds() / 60.0

    def current_weight(
        self,
        now: datetime | None = None,
        decay_minutes: float = DEFAULT_DECAY_MINUTES,
    ) -> float:
        """Return magnitude * exp(-age_minutes / decay_minutes)."""
        return self.magnitude * math.exp(-self.age_minutes(now) / decay_minutes)

    def is_expired(self, now: datetime | None = None, max_age: timedelta = DEFAULT_MAX_AGE) -> bool:
        return self.age(now) > max_age


def prune_signals(
    signals: Iterable[DecayingSignal],
    now: datetime | None = None,
    max_age: timedelta = DEFAULT_MAX_AGE,
) -> list[DecayingSignal]:
    """Drop every signal older than max_age, keeping order."""
    current = now or utc_now()
    kept: list[DecayingSignal] = []
    dropped = 0
    for signal in signals:
        if signal.is_expired(current, max_age):
            dropped += 1
            continue
        kept.append(signal)
    if dropped:
        logger.debug("Pruned %d expired signal(s); %d live", dropped, len(kept))
    return kept


def modifier_for(
    topic: str,
    signals: Iterable[DecayingSignal],
    now: datetime | None = None,
    decay_minutes: float = DEFAULT_DECAY_MINUTES,
) -> float:
    """Sum the current weight of all signals about a topic."""
    current = now or utc_now()
    return sum(
        signal.current_weight(current, decay_minutes)
        for signal in signals
        if signal.topic == topic
    )
