"""Goal memory models."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class GoalScope(StrEnum):
    """Whether a goal cares about immediate or long-term effects."""

    LOCAL = "local"
    GLOBAL = "global"


class Goal(BaseModel):
    """Competing objective weighed by the conflict resolver.

    Frozen except for ``metrics``, which callers may update in place.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    priority: float = Field(allow_inf_nan=False)
    scope: GoalScope = GoalScope.LOCAL
    metrics: dict[str, float] = Field(default_factory=dict)

    @property
    def is_local(self) -> bool:
        return self.scope is GoalScope.LOCAL
