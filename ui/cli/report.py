"""Human-readable reporting of engine state and resolutions."""

from __future__ import annotations

import typer

from cognition.conditions import Condition
from core.conflict_resolver import Resolution
from core.state_manager import SystemSnapshot


class ConsoleReporter:
    """Reporting sink writing through ``typer.echo``."""

    def report(self, snapshot: SystemSnapshot) -> None:
        typer.echo("\n=== SYSTEM STATE ===")

        typer.echo("\nContext:")
        for key, value in snapshot.context.items():
            typer.echo(f"  {key} = {value:g}")

        typer.echo("\nGoals:")
        for goal in snapshot.goals:
            typer.echo(f"  {goal.name} (priority: {goal.priority:.2f}, {goal.scope.value})")

        typer.echo("\nFresh inferences:")
        for signal in snapshot.signals:
            label = f"{signal.topic} -> {signal.note}" if signal.note else signal.topic
            typer.echo(f"  {label} (weight: {signal.current_weight:+.3f})")

        typer.echo("\n=== DETECTED PATTERNS ===")
        for pattern in snapshot.patterns:
            typer.echo(
                f"Conditions: {' '.join(pattern.conditions)} -> {pattern.outcome} "
                f"(frequency: {pattern.frequency}, confidence: {pattern.confidence:.2f})"
            )

    def condition(self, cond: Condition) -> None:
        if not cond.relevant:
            typer.echo(f"  {cond.name}: NOT RELEVANT")
            return
        line = f"  {cond.name}: {'TRUE' if cond.raw_value else 'FALSE'} (confidence: {cond.display_confidence:.2f}"
        if cond.emotional_modifier != 0.0:
            line += f", emotion: {cond.emotional_modifier:+.3f}"
        typer.echo(line + ")")

    def resolution(self, resolution: Resolution) -> None:
        analysis = resolution.analysis
        typer.echo("\n=== CONFLICT RESOLUTION ===")
        typer.echo(f"Action: {resolution.action}")
        typer.echo(f"Execute: {'YES' if resolution.should_execute else 'NO'}")
        typer.echo(f"Confidence: {resolution.confidence:.3f}")
        typer.echo(f"Reasoning: {resolution.reasoning}")
        typer.echo("\nCost/benefit analysis:")
        typer.echo(f"  Local benefit: {analysis.local_benefit:.2f}")
        typer.echo(f"  Global benefit: {analysis.global_benefit:.2f}")
        typer.echo(f"  Local cost: {analysis.local_cost:.2f}")
        typer.echo(f"  Global cost: {analysis.global_cost:.2f}")
        typer.echo(f"  Risk: {analysis.risk:.2f}")
        typer.echo(f"  Net benefit: {analysis.net_benefit:.2f}")
