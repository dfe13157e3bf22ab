"""Pattern memory models."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from cognition.signals import utc_now


class Pattern(BaseModel):
    """Observed association between a condition signature and an outcome."""

    model_config = ConfigDict(validate_assignment=True)

    conditions: list[str] = Field(default_factory=list)
    outcome: str
    frequency: int = Field(default=1, ge=1)
    confidence: float = Field(default=0.5, ge=0.0, le=1.0)
    last_seen: datetime = Field(default_factory=utc_now)

    def key(self) -> tuple[tuple[str, ...], str]:
        """Exact identity: ordered conditions plus outcome."""
        return tuple(self.conditions), self.outcome
