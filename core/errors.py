"""Engine error types."""

from __future__ import annotations


class ContractViolationError(ValueError):
    """Raised when a caller breaks an engine contract (missing predicate, bad confidence)."""


__all__ = ["ContractViolationError"]
