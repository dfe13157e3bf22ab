"""Configuration and wiring tests."""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path

import pytest
from pydantic import ValidationError

from cognition.conditions import ConditionSpec, ContextAbove
from core.orchestrator import Orchestrator
from core.policy_runtime import EngineSettings, load_effective_config, load_yaml, merge_dicts


def write_config(root: Path, default: str = "", policies: str = "") -> None:
    config_dir = root / "config"
    config_dir.mkdir(parents=True, exist_ok=True)
    (config_dir / "default.yaml").write_text(default, encoding="utf-8")
    (config_dir / "policies.yaml").write_text(policies, encoding="utf-8")


def test_load_yaml_missing_and_invalid(tmp_path: Path) -> None:
    assert load_yaml(tmp_path / "absent.yaml") == {}

    bad = tmp_path / "bad.yaml"
    bad.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_yaml(bad)


def test_merge_dicts_is_recursive() -> None:
    merged = merge_dicts(
        {"decision": {"base_threshold": 0.6, "pattern_bonus": 0.1}, "audit": {"enabled": False}},
        {"decision": {"base_threshold": 0.5}},
    )

    assert merged == {"decision": {"base_threshold": 0.5, "pattern_bonus": 0.1}, "audit": {"enabled": False}}


def test_effective_config_applies_override(tmp_path: Path) -> None:
    write_config(tmp_path, default="decision:\n  base_threshold: 0.6\n")
    override = tmp_path / "override.yaml"
    override.write_text("decision:\n  base_threshold: 0.3\n", encoding="utf-8")

    config = load_effective_config(tmp_path, override)

    assert config["decision"]["base_threshold"] == 0.3
    with pytest.raises(ValueError):
        load_effective_config(tmp_path, tmp_path / "nope.yaml")


def test_settings_defaults_and_validation() -> None:
    settings = EngineSettings.from_config({"unrelated": 1})

    assert settings.decision.base_threshold == 0.6
    assert settings.patterns.similarity_threshold == 0.7
    assert settings.signals.max_age == timedelta(hours=2)
    with pytest.raises(ValidationError):
        EngineSettings.from_config({"signals": {"decay_minutes": 0}})


def test_repository_config_matches_defaults() -> None:
    bundle = Orchestrator().build()

    assert bundle.settings == EngineSettings()
    assert [p.name for p in bundle.analyzer.policies] == ["climate_control", "energy_saving"]
    assert bundle.audit_logger is None


def test_orchestrator_wires_configured_components(tmp_path: Path) -> None:
    write_config(
        tmp_path,
        default=(
            "decision:\n  base_threshold: 0.1\n"
            "patterns:\n  initial_confidence: 0.65\n"
            "audit:\n  enabled: true\n  log_path: logs/audit.jsonl\n"
        ),
        policies=(
            "action_policies:\n"
            "  - name: lights\n"
            "    actions: [dim_lights]\n"
            "    local_benefit: 0.5\n"
        ),
    )

    bundle = Orchestrator(root=tmp_path).build()
    system = bundle.system
    system.set_context("lux", 900)
    spec = ConditionSpec("bright", ContextAbove("lux", 500), confidence=1.0)

    first = system.resolve("dim_lights", [spec])
    second = system.resolve("dim_lights", [spec])

    assert first.should_execute is True
    assert first.confidence == pytest.approx(0.4 + 0.4 * 0.5)
    assert second.predictions == ["executed_dim_lights (confidence: 0.65)"]
    assert (tmp_path / "logs" / "audit.jsonl").read_text(encoding="utf-8").count("\n") == 2


def test_orchestrator_rejects_malformed_policy_table(tmp_path: Path) -> None:
    write_config(tmp_path, policies="action_policies: not-a-list\n")

    with pytest.raises(ValueError):
        Orchestrator(root=tmp_path).build()
