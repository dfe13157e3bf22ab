"""CLI entrypoint for the conflict resolution engine."""

from __future__ import annotations

import logging
from pathlib import Path

import typer

from ui.cli import commands

app = typer.Typer(help="Conflict Resolution Engine")
config_app = typer.Typer(help="Configuration commands")
policies_app = typer.Typer(help="Action policy commands")


@app.callback()
def main_callback(
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level, e.g. INFO"),
) -> None:
    """Configure logging before any command runs."""
    if log_level:
        logging.basicConfig(level=log_level.upper())


@app.command("demo")
def demo_cmd(
    evolve: bool = typer.Option(True, "--evolve/--no-evolve", help="Apply scripted context evolution"),
    config: Path | None = typer.Option(None, "--config", help="Extra YAML config merged over config/"),
) -> None:
    """Run the scripted cooling scenario."""
    commands.demo(evolve=evolve, config_path=config)


@app.command("resolve")
def resolve_cmd(
    action: str = typer.Argument(..., help="Candidate action identifier"),
    context: list[str] = typer.Option([], "--context", "-x", help="key=value"),
    goal: list[str] = typer.Option([], "--goal", "-g", help="name:priority[:local|global]"),
    condition: list[str] = typer.Option(
        [], "--condition", "-c", help="name:key:gt|lt|between:value[:confidence]"
    ),
    inference: list[str] = typer.Option([], "--inference", "-i", help="topic:magnitude[:note]"),
    repeat: int = typer.Option(1, min=1, max=50, help="Resolve repeatedly to build patterns"),
    config: Path | None = typer.Option(None, "--config", help="Extra YAML config merged over config/"),
) -> None:
    """Resolve one action from command-line definitions."""
    commands.resolve(
        action=action,
        contexts=context,
        goals=goal,
        conditions=condition,
        inferences=inference,
        repeat=repeat,
        config_path=config,
    )


@config_app.command("show")
def config_show_cmd(
    config: Path | None = typer.Option(None, "--config", help="Extra YAML config merged over config/"),
) -> None:
    """Show effective configuration."""
    commands.config_show(config_path=config)


@policies_app.command("list")
def policies_list_cmd(
    config: Path | None = typer.Option(None, "--config", help="Extra YAML config merged over config/"),
) -> None:
    """List action policies."""
    commands.policies_list(config_path=config)


app.add_typer(config_app, name="config")
app.add_typer(policies_app, name="policies")


def main() -> None:
    """Console script entrypoint."""
    app()


if __name__ == "__main__":
    main()
