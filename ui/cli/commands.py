"""Typer command handlers."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import typer
from pydantic import ValidationError

from cognition.conditions import ConditionSpec, ContextAbove, ContextBelow, ContextBetween
from cognition.context_evolution import ContextEvolver, scripted_suggestions
from core.errors import ContractViolationError
from core.orchestrator import Orchestrator, RuntimeBundle
from memory.types.goals import Goal, GoalScope
from ui.cli.report import ConsoleReporter


def _runtime(config_path: Path | None = None) -> RuntimeBundle:
    try:
        bundle = Orchestrator(config_path=config_path).build()
    except ValueError as exc:
        typer.echo(f"Invalid configuration: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    # No-op when --log-level already configured the root logger.
    logging.basicConfig(level=bundle.settings.logging.level.upper())
    return bundle


def demo_conditions() -> list[ConditionSpec]:
    """Conditions of the scripted cooling scenario."""
    return [
        ConditionSpec("temp_high", ContextAbove("temperature", 25), confidence=0.9),
        ConditionSpec("battery_ok", ContextAbove("battery", 50), confidence=0.7),
        ConditionSpec("working_hours", ContextBetween("time_of_day", 9, 17), confidence=0.8),
    ]


def demo(evolve: bool = True, config_path: Path | None = None) -> None:
    """Run the scripted cooling scenario."""
    bundle = _runtime(config_path)
    system = bundle.system
    reporter = ConsoleReporter()

    typer.echo("=== CONFLICT RESOLUTION ENGINE ===")
    system.set_context("temperature", 28)
    system.set_context("humidity", 75)
    system.set_context("battery", 45)
    system.set_context("time_of_day", 16)

    system.add_goal(Goal(name="comfort", priority=0.7, scope=GoalScope.LOCAL))
    system.add_goal(Goal(name="energy_saving", priority=0.9, scope=GoalScope.GLOBAL))
    system.add_goal(Goal(name="productivity", priority=0.6, scope=GoalScope.LOCAL))

    system.add_fresh_inference("temp_high", 0.8, positive=False, note="too hot today")
    system.add_fresh_inference("battery_ok", -0.5, positive=False, note="low battery is stressful")

    system.report(reporter)

    typer.echo("\n=== EVALUATED CONDITIONS ===")
    conditions = [system.evaluate_condition(spec) for spec in demo_conditions()]
    for cond in conditions:
        reporter.condition(cond)

    resolution = system.resolve("turn_on_cooling", conditions)
    reporter.resolution(resolution)

    if evolve:
        typer.echo("\n=== CONTEXT EVOLUTION ===")
        for result in ContextEvolver().apply(system, scripted_suggestions()):
            status = "applied" if result.applied else "skipped"
            typer.echo(f"Suggestion: {result.suggestion.text} [{status}: {result.detail}]")
        typer.echo("\n=== FINAL STATE ===")
        system.report(reporter)


def parse_context(raw: str) -> tuple[str, float]:
    key, sep, value = raw.partition("=")
    if not sep or not key:
        raise typer.BadParameter(f"Expected key=value, got '{raw}'.")
    try:
        return key.strip(), float(value)
    except ValueError as exc:
        raise typer.BadParameter(f"Context value for '{key}' must be a number.") from exc


def parse_goal(raw: str) -> Goal:
    parts = raw.split(":")
    if len(parts) not in (2, 3):
        raise typer.BadParameter(f"Expected name:priority[:local|global], got '{raw}'.")
    scope = parts[2].strip().lower() if len(parts) == 3 else GoalScope.LOCAL.value
    try:
        return Goal(name=parts[0].strip(), priority=float(parts[1]), scope=GoalScope(scope))
    except ValueError as exc:
        raise typer.BadParameter(f"Invalid goal '{raw}': {exc}") from exc


def parse_condition(raw: str) -> ConditionSpec:
    """``name:key:gt|lt|between:value[:confidence]``; between takes ``low..high``."""
    parts = raw.split(":")
    if len(parts) not in (4, 5):
        raise typer.BadParameter(f"Expected name:key:op:value[:confidence], got '{raw}'.")
    name, key, op, value = (part.strip() for part in parts[:4])
    try:
        confidence = float(parts[4]) if len(parts) == 5 else 1.0
        if op == "gt":
            predicate = ContextAbove(key, float(value))
        elif op == "lt":
            predicate = ContextBelow(key, float(value))
        elif op == "between":
            low, _, high = value.partition("..")
            predicate = ContextBetween(key, float(low), float(high))
        else:
            raise typer.BadParameter(f"Unknown operator '{op}' (use gt, lt or between).")
    except ValueError as exc:
        raise typer.BadParameter(f"Invalid condition '{raw}': {exc}") from exc
    return ConditionSpec(name, predicate, confidence=confidence)


def parse_inference(raw: str) -> tuple[str, float, str]:
    topic, _, rest = raw.partition(":")
    magnitude, _, note = rest.partition(":")
    try:
        return topic.strip(), float(magnitude), note.strip()
    except ValueError as exc:
        raise typer.BadParameter(f"Expected topic:magnitude[:note], got '{raw}'.") from exc


def resolve(
    action: str,
    contexts: list[str],
    goals: list[str],
    conditions: list[str],
    inferences: list[str],
    repeat: int = 1,
    config_path: Path | None = None,
) -> None:
    """Resolve one action built from command-line definitions."""
    bundle = _runtime(config_path)
    system = bundle.system
    reporter = ConsoleReporter()
    try:
        for raw in contexts:
            system.set_context(*parse_context(raw))
        for raw in goals:
            system.add_goal(parse_goal(raw))
        for raw in inferences:
            topic, magnitude, note = parse_inference(raw)
            system.add_fresh_inference(topic, magnitude, positive=magnitude >= 0, note=note)
        specs = [parse_condition(raw) for raw in conditions]

        for _ in range(repeat):
            evaluated = [system.evaluate_condition(spec) for spec in specs]
            reporter.resolution(system.resolve(action, evaluated))
    except ContractViolationError as exc:
        typer.echo(f"Contract violation: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    except ValidationError as exc:
        typer.echo(f"Invalid input: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    system.report(reporter)


def config_show(config_path: Path | None = None) -> None:
    """Show effective runtime config."""
    bundle = _runtime(config_path)
    payload = {
        "settings": bundle.settings.model_dump(mode="json"),
        "action_policies": [policy.model_dump(mode="json") for policy in bundle.analyzer.policies],
    }
    typer.echo(json.dumps(payload, indent=2))


def policies_list(config_path: Path | None = None) -> None:
    """List action policies in match order."""
    bundle = _runtime(config_path)
    for policy in bundle.analyzer.policies:
        keywords = ", ".join(policy.keywords) or "-"
        typer.echo(
            f"{policy.name}: actions=[{', '.join(policy.actions)}] keywords=[{keywords}] "
            f"LB={policy.local_benefit:.2f} GB={policy.global_benefit:.2f} "
            f"LC={policy.local_cost:.2f} GC={policy.global_cost:.2f} risk={policy.risk:.2f}"
        )
