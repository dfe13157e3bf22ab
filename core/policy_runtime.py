"""Configuration loading and engine settings."""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


def load_yaml(path: Path) -> dict[str, Any]:
    """Load YAML from file, returning empty mapping when missing."""
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {path}")
    return data


def merge_dicts(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge dictionaries."""
    merged: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_dicts(merged[key], value)
        else:
            merged[key] = value
    return merged


class SignalSettings(BaseModel):
    decay_minutes: float = Field(default=60.0, gt=0.0)
    max_age_hours: float = Field(default=2.0, ge=0.0)

    @property
    def max_age(self) -> timedelta:
        return timedelta(hours=self.max_age_hours)


class ConditionSettings(BaseModel):
    override_threshold: float = Field(default=0.7, ge=0.0)
    display_gain: float = 0.3
    weight_gain: float = 0.2
    neutral_value: float = 0.5


class PatternSettings(BaseModel):
    initial_confidence: float = Field(default=0.5, ge=0.0, le=1.0)
    confidence_step: float = Field(default=0.1, ge=0.0)
    similarity_threshold: float = Field(default=0.7, ge=0.0, le=1.0)
    confidence_threshold: float = Field(default=0.6, ge=0.0, le=1.0)


class DecisionSettings(BaseModel):
    base_threshold: float = 0.6
    pattern_bonus: float = 0.1
    condition_weight: float = 0.4
    benefit_weight: float = 0.4
    alignment_weight: float = 0.2


class AuditSettings(BaseModel):
    enabled: bool = False
    log_path: str = "logs/decisions.jsonl"


class LoggingSettings(BaseModel):
    level: str = "WARNING"


class EngineSettings(BaseModel):
    """Validated view over the merged config mapping."""

    signals: SignalSettings = Field(default_factory=SignalSettings)
    conditions: ConditionSettings = Field(default_factory=ConditionSettings)
    patterns: PatternSettings = Field(default_factory=PatternSettings)
    decision: DecisionSettings = Field(default_factory=DecisionSettings)
    audit: AuditSettings = Field(default_factory=AuditSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> EngineSettings:
        known = {name: config[name] for name in cls.model_fields if name in config}
        return cls.model_validate(known)


def load_effective_config(root: Path, override_path: Path | None = None) -> dict[str, Any]:
    """Load and merge all runtime configuration files."""
    config_dir = root / "config"
    default_cfg = load_yaml(config_dir / "default.yaml")
    policies_cfg = load_yaml(config_dir / "policies.yaml")

    merged = merge_dicts(default_cfg, policies_cfg)
    if override_path is not None:
        if not override_path.exists():
            raise ValueError(f"Config override not found: {override_path}")
        merged = merge_dicts(merged, load_yaml(override_path))
    return merged
