"""Scoring helpers for pattern recall and decision aggregation."""

from __future__ import annotations

from collections.abc import Sequence


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean, 0.0 for an empty sequence."""
    if not values:
        return 0.0
    return sum(values) / len(values)


def signature_similarity(pattern_conditions: Sequence[str], current: Sequence[str]) -> float:
    """Share of the pattern's conditions present anywhere in the current signature."""
    if not pattern_conditions:
        return 0.0
    present = set(current)
    matches = sum(1 for cond in pattern_conditions if cond in present)
    return matches / len(pattern_conditions)


def final_score(
    avg_weight: float,
    net_benefit: float,
    goal_alignment: float,
    condition_weight: float = 0.4,
    benefit_weight: float = 0.4,
    alignment_weight: float = 0.2,
) -> float:
    """Weighted decision score."""
    return (
        condition_weight * avg_weight
        + benefit_weight * net_benefit
        + alignment_weight * goal_alignment
    )
