"""Structured JSONL decision audit logger."""

from __future__ import annotations

import hashlib
import json
import logging
from pathlib import Path
from typing import Any

from cognition.signals import utc_now


class DecisionAuditLogger:
    """Writes one JSON line per conflict resolution."""

    def __init__(self, log_path: Path) -> None:
        self.log_path = log_path
        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        self.logger = logging.getLogger("cre.audit")
        self.logger.setLevel(logging.INFO)

    @staticmethod
    def _hash_inputs(inputs: dict[str, Any]) -> str:
        payload = json.dumps(inputs, sort_keys=True, default=str).encode("utf-8")
        return hashlib.sha256(payload).hexdigest()

    def log(
        self,
        action: str,
        should_execute: bool,
        score: float,
        threshold: float,
        inputs: dict[str, Any],
        reasoning: str = "",
    ) -> dict[str, Any]:
        """Append one JSONL audit event and return it."""
        event = {
            "timestamp": utc_now().isoformat(),
            "action": action,
            "decision": "execute" if should_execute else "skip",
            "score": round(score, 6),
            "threshold": round(threshold, 6),
            "inputs_hash": self._hash_inputs(inputs),
            "reasoning": reasoning,
        }
        with self.log_path.open("a", encoding="utf-8") as fh:
            fh.write(json.dumps(event, ensure_ascii=True) + "\n")
        self.logger.info(json.dumps(event, ensure_ascii=True))
        return event
