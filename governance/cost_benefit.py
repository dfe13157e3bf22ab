"""Cost/benefit analysis of candidate actions driven by a policy table."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from memory.types.goals import Goal

DEFAULT_CONFIDENCE = 0.8


class CostBenefitResult(BaseModel):
    """Four-quantity breakdown of an action plus risk."""

    model_config = ConfigDict(frozen=True)

    local_benefit: float = 0.0
    global_benefit: float = 0.0
    local_cost: float = 0.0
    global_cost: float = 0.0
    risk: float = 0.0
    confidence: float = DEFAULT_CONFIDENCE
    reasoning: str = ""

    @property
    def net_benefit(self) -> float:
        return (self.local_benefit + self.global_benefit) - (self.local_cost + self.global_cost) - self.risk


class ActionPolicy(BaseModel):
    """Heuristic cost/benefit profile for a family of actions."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    actions: list[str] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)
    local_benefit: float = Field(default=0.0, ge=0.0)
    global_benefit: float = Field(default=0.0, ge=0.0)
    local_cost: float = Field(default=0.0, ge=0.0)
    global_cost: float = Field(default=0.0, ge=0.0)
    risk: float = Field(default=0.0, ge=0.0)
    confidence: float = Field(default=DEFAULT_CONFIDENCE, ge=0.0, le=1.0)

    def matches_exactly(self, action: str) -> bool:
        return action in self.actions

    def matches_keyword(self, action: str) -> bool:
        action_l = action.lower()
        return any(keyword.lower() in action_l for keyword in self.keywords)


def default_policies() -> list[ActionPolicy]:
    """Built-in table: climate control and energy saving."""
    return [
        ActionPolicy(
            name="climate_control",
            actions=["turn_on_cooling", "turn_on_climate_control"],
            keywords=["cooling", "climate-control", "climate_control", "air_conditioning"],
            local_benefit=0.8,
            local_cost=0.3,
            global_benefit=0.1,
            global_cost=0.6,
            risk=0.2,
        ),
        ActionPolicy(
            name="energy_saving",
            actions=["enable_energy_saving"],
            keywords=["energy-saving", "energy_saving"],
            local_benefit=0.2,
            local_cost=0.5,
            global_benefit=0.9,
            global_cost=0.1,
            risk=0.1,
        ),
    ]


def policies_from_config(entries: Iterable[Mapping[str, Any]]) -> list[ActionPolicy]:
    """Validate raw config entries into policies, keeping their order."""
    return [ActionPolicy.model_validate(dict(entry)) for entry in entries]


class CostBenefitAnalyzer:
    """Pure mapping from (action, goals, context) to a cost/benefit breakdown."""

    def __init__(self, policies: Sequence[ActionPolicy] | None = None) -> None:
        self.policies: list[ActionPolicy] = list(default_policies() if policies is None else policies)

    def find_policy(self, action: str) -> ActionPolicy | None:
        """Exact action identifier first, then the first keyword hit in table order."""
        for policy in self.policies:
            if policy.matches_exactly(action):
                return policy
        for policy in self.policies:
            if policy.matches_keyword(action):
                return policy
        return None

    def analyze(
        self,
        action: str,
        goals: Sequence[Goal] = (),
        context: Mapping[str, float] | None = None,
    ) -> CostBenefitResult:
        """Return the breakdown for an action; unknown actions score zero."""
        _ = goals, context
        policy = self.find_policy(action)
        if policy is None:
            return CostBenefitResult(
                confidence=DEFAULT_CONFIDENCE,
                reasoning=f"Analysis for: {action} (no matching policy)",
            )
        return CostBenefitResult(
            local_benefit=policy.local_benefit,
            global_benefit=policy.global_benefit,
            local_cost=policy.local_cost,
            global_cost=policy.global_cost,
            risk=policy.risk,
            confidence=policy.confidence,
            reasoning=f"Analysis for: {action} (policy: {policy.name})",
        )
