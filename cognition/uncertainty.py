"""Uncertainty reasoning helpers."""

from __future__ import annotations


def clamp_unit(value: float) -> float:
    """Clamp a value into [0, 1]."""
    return max(0.0, min(1.0, value))


def adjusted_confidence(confidence: float, emotional_modifier: float, gain: float = 0.3) -> float:
    """Shift confidence by an emotional modifier, clamped to [0, 1]."""
    if emotional_modifier == 0.0:
        return confidence
    return clamp_unit(confidence + emotional_modifier * gain)
