"""Scripted context evolution: apply suggested updates to a reasoning session."""

from __future__ import annotations

import logging
from typing import Literal

from pydantic import BaseModel, ConfigDict

from core.reasoning_system import ReasoningSystem

logger = logging.getLogger("cre.context_evolution")

SuggestionKind = Literal["context", "inference", "goal_priority", "pattern"]


class ContextSuggestion(BaseModel):
    """One proposed change to the session."""

    model_config = ConfigDict(frozen=True)

    kind: SuggestionKind
    text: str
    key: str = ""
    value: float = 0.0
    topic: str = ""
    magnitude: float = 0.0
    note: str = ""


class AppliedSuggestion(BaseModel):
    """Suggestion plus what happened to it."""

    suggestion: ContextSuggestion
    applied: bool
    detail: str


def scripted_suggestions() -> list[ContextSuggestion]:
    """Fixed suggestion script used by the demo."""
    return [
        ContextSuggestion(
            kind="context",
            text="Add context: weather_tomorrow = sunny",
            key="weather_tomorrow_sunny",
            value=1.0,
        ),
        ContextSuggestion(
            kind="goal_priority",
            text="Adjust weight: energy_saving += 0.2",
            key="energy_saving",
            value=0.2,
        ),
        ContextSuggestion(
            kind="pattern",
            text="New pattern: evening + weekend -> relax_mode",
        ),
        ContextSuggestion(
            kind="inference",
            text="Fresh inference: high_bills -> against temp_high",
            topic="temp_high",
            magnitude=-0.6,
            note="high bills",
        ),
    ]


class ContextEvolver:
    """Applies suggestions through the session's public API."""

    def apply(
        self,
        system: ReasoningSystem,
        suggestions: list[ContextSuggestion],
    ) -> list[AppliedSuggestion]:
        results: list[AppliedSuggestion] = []
        for suggestion in suggestions:
            applied, detail = self._apply_one(system, suggestion)
            if not applied:
                logger.warning("Suggestion not applied: %s (%s)", suggestion.text, detail)
            results.append(AppliedSuggestion(suggestion=suggestion, applied=applied, detail=detail))
        return results

    @staticmethod
    def _apply_one(system: ReasoningSystem, suggestion: ContextSuggestion) -> tuple[bool, str]:
        if suggestion.kind == "context":
            system.set_context(suggestion.key, suggestion.value)
            return True, f"context {suggestion.key} = {suggestion.value}"

        if suggestion.kind == "inference":
            system.add_fresh_inference(
                suggestion.topic,
                suggestion.magnitude,
                positive=suggestion.magnitude >= 0,
                note=suggestion.note,
            )
            return True, f"inference on {suggestion.topic} ({suggestion.magnitude:+.2f})"

        if suggestion.kind == "goal_priority":
            current = next((goal for goal in system.goals if goal.name == suggestion.key), None)
            if current is None:
                return False, f"unknown goal '{suggestion.key}'"
            updated = current.model_copy(update={"priority": current.priority + suggestion.value}, deep=True)
            system.replace_goal(current.name, updated)
            return True, f"goal {current.name} priority {current.priority:.2f} -> {updated.priority:.2f}"

        # Patterns are only learned from resolutions.
        return False, "patterns are learned from resolutions only"
