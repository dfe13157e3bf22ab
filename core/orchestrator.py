"""Top-level application orchestrator."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from cognition.conditions import ConditionEvaluator
from core.conflict_resolver import ConflictResolver
from core.policy_runtime import EngineSettings, load_effective_config
from core.reasoning_system import ReasoningSystem
from core.state_manager import StateManager
from governance.audit_logger import DecisionAuditLogger
from governance.cost_benefit import CostBenefitAnalyzer, default_policies, policies_from_config
from memory.pattern_store import PatternStore

logger = logging.getLogger("cre.orchestrator")


@dataclass
class RuntimeBundle:
    """Holds initialized runtime components."""

    config: dict[str, Any]
    settings: EngineSettings
    analyzer: CostBenefitAnalyzer
    resolver: ConflictResolver
    system: ReasoningSystem
    audit_logger: DecisionAuditLogger | None


class Orchestrator:
    """Creates and wires engine components from configuration."""

    def __init__(self, root: Path | None = None, config_path: Path | None = None) -> None:
        default_root = Path(__file__).resolve().parents[1]
        self.root = (root or default_root).resolve()
        self.config_path = config_path

    def build(self) -> RuntimeBundle:
        config = load_effective_config(self.root, self.config_path)
        settings = EngineSettings.from_config(config)

        analyzer = self._analyzer(config)
        pattern_store = PatternStore(
            initial_confidence=settings.patterns.initial_confidence,
            confidence_step=settings.patterns.confidence_step,
            similarity_threshold=settings.patterns.similarity_threshold,
            confidence_threshold=settings.patterns.confidence_threshold,
        )
        evaluator = ConditionEvaluator(
            override_threshold=settings.conditions.override_threshold,
            display_gain=settings.conditions.display_gain,
            weight_gain=settings.conditions.weight_gain,
            neutral_value=settings.conditions.neutral_value,
            decay_minutes=settings.signals.decay_minutes,
        )

        audit_logger = None
        if settings.audit.enabled:
            audit_logger = DecisionAuditLogger((self.root / settings.audit.log_path).resolve())

        resolver = ConflictResolver(
            pattern_store=pattern_store,
            analyzer=analyzer,
            evaluator=evaluator,
            base_threshold=settings.decision.base_threshold,
            pattern_bonus=settings.decision.pattern_bonus,
            condition_weight=settings.decision.condition_weight,
            benefit_weight=settings.decision.benefit_weight,
            alignment_weight=settings.decision.alignment_weight,
            audit_logger=audit_logger,
        )
        system = ReasoningSystem(
            resolver=resolver,
            state_manager=StateManager(max_signal_age=settings.signals.max_age),
            decay_minutes=settings.signals.decay_minutes,
        )

        return RuntimeBundle(
            config=config,
            settings=settings,
            analyzer=analyzer,
            resolver=resolver,
            system=system,
            audit_logger=audit_logger,
        )

    @staticmethod
    def _analyzer(config: dict[str, Any]) -> CostBenefitAnalyzer:
        entries = config.get("action_policies")
        if entries is None:
            logger.warning("No action_policies in config; using built-in policy table")
            return CostBenefitAnalyzer(policies=default_policies())
        if not isinstance(entries, list):
            raise ValueError("action_policies must be a list.")
        return CostBenefitAnalyzer(policies=policies_from_config(entries))
