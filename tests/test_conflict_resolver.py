"""Conflict resolver tests."""

from __future__ import annotations

import json
import threading
from datetime import UTC, datetime
from pathlib import Path

import pytest

from cognition.conditions import Condition, ConditionEvaluator, ConditionSpec, ContextAbove
from cognition.signals import DecayingSignal
from core.conflict_resolver import ConflictResolver, goal_alignment
from governance.audit_logger import DecisionAuditLogger
from governance.cost_benefit import CostBenefitAnalyzer
from memory.pattern_store import PatternStore
from memory.types.goals import Goal, GoalScope

T0 = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)
CONTEXT = {"temperature": 28.0, "battery": 45.0}
GOALS = [
    Goal(name="comfort", priority=0.7, scope=GoalScope.LOCAL),
    Goal(name="energy_saving", priority=0.9, scope=GoalScope.GLOBAL),
]


def specs() -> list[ConditionSpec]:
    return [
        ConditionSpec("temp_high", ContextAbove("temperature", 25), confidence=0.9),
        ConditionSpec("battery_ok", ContextAbove("battery", 50), confidence=0.7),
    ]


def evaluated(signals: list[DecayingSignal] | None = None) -> list[Condition]:
    evaluator = ConditionEvaluator()
    return [evaluator.evaluate(spec, CONTEXT, signals or [], now=T0) for spec in specs()]


def test_cooling_scenario_is_skipped() -> None:
    resolver = ConflictResolver()

    resolution = resolver.resolve("turn_on_cooling", evaluated(), GOALS, CONTEXT, now=T0)

    assert resolution.analysis.net_benefit == pytest.approx(-0.2)
    assert resolution.confidence == pytest.approx(0.165)
    assert resolution.threshold == pytest.approx(0.6)
    assert resolution.should_execute is False
    assert resolution.predictions == []
    assert resolution.signature == ["temp_high=true", "battery_ok=false"]
    assert "avg_weight: 0.450" in resolution.reasoning
    assert "net_benefit: -0.200" in resolution.reasoning
    assert "goal_alignment: 0.325" in resolution.reasoning
    assert "final_score: 0.165" in resolution.reasoning


def test_resolution_records_exactly_one_pattern() -> None:
    store = PatternStore()
    resolver = ConflictResolver(pattern_store=store)

    resolver.resolve("turn_on_cooling", evaluated(), GOALS, CONTEXT, now=T0)

    patterns = store.patterns()
    assert len(patterns) == 1
    assert patterns[0].conditions == ["temp_high=true", "battery_ok=false"]
    assert patterns[0].outcome == "skipped_turn_on_cooling"
    assert patterns[0].frequency == 1
    assert patterns[0].confidence == 0.5


def test_injected_empty_collaborators_are_kept() -> None:
    store = PatternStore(initial_confidence=0.65)
    analyzer = CostBenefitAnalyzer(policies=[])
    resolver = ConflictResolver(pattern_store=store, analyzer=analyzer)

    assert resolver.pattern_store is store
    assert resolver.analyzer is analyzer

    resolver.resolve("turn_on_cooling", evaluated(), GOALS, CONTEXT, now=T0)

    assert len(store) == 1
    assert store.patterns()[0].confidence == 0.65


def test_fresh_inference_raises_average_weight() -> None:
    resolver = ConflictResolver()
    signals = [DecayingSignal(topic="temp_high", magnitude=0.8, created_at=T0)]

    conditions = evaluated(signals)
    resolution = resolver.resolve("turn_on_cooling", conditions, GOALS, CONTEXT, now=T0)

    assert conditions[0].raw_value is True
    assert conditions[0].weighted_value == pytest.approx(1.06)
    assert "avg_weight: 0.530" in resolution.reasoning
    assert resolution.confidence == pytest.approx(0.4 * 0.53 - 0.08 + 0.065)


def test_specs_are_evaluated_with_given_signals() -> None:
    resolver = ConflictResolver()
    signals = [DecayingSignal(topic="battery_ok", magnitude=0.75, created_at=T0)]

    resolution = resolver.resolve("turn_on_cooling", specs(), GOALS, CONTEXT, signals, now=T0)

    assert resolution.signature == ["temp_high=true", "battery_ok=true"]


def test_repeated_outcome_lowers_threshold() -> None:
    resolver = ConflictResolver()
    for _ in range(3):
        first = resolver.resolve("turn_on_cooling", evaluated(), GOALS, CONTEXT, now=T0)
        assert first.predictions == []

    resolution = resolver.resolve("turn_on_cooling", evaluated(), GOALS, CONTEXT, now=T0)

    assert resolution.predictions == ["skipped_turn_on_cooling (confidence: 0.70)"]
    assert resolution.threshold == pytest.approx(0.5)
    assert "Pattern predictions: skipped_turn_on_cooling" in resolution.reasoning
    assert resolution.should_execute is False


def test_beneficial_action_is_executed() -> None:
    store = PatternStore()
    resolver = ConflictResolver(pattern_store=store)
    goals = [Goal(name="energy_saving", priority=0.9, scope=GoalScope.GLOBAL)]
    conditions = [Condition(name="battery_low", relevant=True, raw_value=True, confidence=1.0)]

    resolution = resolver.resolve("enable_energy_saving", conditions, goals, CONTEXT, now=T0)

    assert resolution.analysis.net_benefit == pytest.approx(0.4)
    assert resolution.confidence == pytest.approx(0.4 + 0.16 + 0.2 * 0.81)
    assert resolution.should_execute is True
    assert resolution.outcome == "executed_enable_energy_saving"
    assert store.patterns()[0].outcome == "executed_enable_energy_saving"


def test_empty_inputs_use_defined_defaults() -> None:
    store = PatternStore()
    resolver = ConflictResolver(pattern_store=store)

    resolution = resolver.resolve("open_window", [], [], {}, now=T0)

    assert resolution.confidence == 0.0
    assert resolution.should_execute is False
    assert resolution.signature == []
    assert store.patterns()[0].conditions == []
    assert store.patterns()[0].outcome == "skipped_open_window"


def test_irrelevant_conditions_are_left_out() -> None:
    resolver = ConflictResolver()
    conditions = [
        Condition(name="temp_high", relevant=True, raw_value=True, confidence=0.9),
        Condition(name="working_hours", relevant=False),
    ]

    resolution = resolver.resolve("turn_on_cooling", conditions, GOALS, CONTEXT, now=T0)

    assert resolution.signature == ["temp_high=true"]
    assert "avg_weight: 0.900" in resolution.reasoning


def test_goal_alignment_mean_over_scopes() -> None:
    analysis = CostBenefitAnalyzer().analyze("turn_on_cooling")

    assert goal_alignment(analysis, GOALS) == pytest.approx(0.325)
    assert goal_alignment(analysis, []) == 0.0


def test_custom_weights_and_threshold() -> None:
    resolver = ConflictResolver(base_threshold=0.1, condition_weight=1.0, benefit_weight=0.0, alignment_weight=0.0)

    resolution = resolver.resolve("turn_on_cooling", evaluated(), GOALS, CONTEXT, now=T0)

    assert resolution.confidence == pytest.approx(0.45)
    assert resolution.should_execute is True


def test_concurrent_resolves_serialize_store_updates() -> None:
    store = PatternStore()
    resolver = ConflictResolver(pattern_store=store)
    conditions = evaluated()

    def worker() -> None:
        for _ in range(25):
            resolver.resolve("turn_on_cooling", conditions, GOALS, CONTEXT, now=T0)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    patterns = store.patterns()
    assert len(patterns) == 1
    assert patterns[0].frequency == 200
    assert patterns[0].confidence == 1.0


def test_audit_logger_writes_one_line_per_resolution(tmp_path: Path) -> None:
    audit = DecisionAuditLogger(tmp_path / "logs" / "decisions.jsonl")
    resolver = ConflictResolver(audit_logger=audit)

    resolver.resolve("turn_on_cooling", evaluated(), GOALS, CONTEXT, now=T0)
    resolver.resolve("turn_on_cooling", evaluated(), GOALS, CONTEXT, now=T0)

    lines = (tmp_path / "logs" / "decisions.jsonl").read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    event = json.loads(lines[0])
    assert event["action"] == "turn_on_cooling"
    assert event["decision"] == "skip"
    assert event["score"] == pytest.approx(0.165)
    assert event["inputs_hash"] == json.loads(lines[1])["inputs_hash"]
