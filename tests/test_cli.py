"""CLI tests."""

from __future__ import annotations

import json

from typer.testing import CliRunner

from ui.cli.cli import app

runner = CliRunner()

COOLING_ARGS = [
    "resolve",
    "turn_on_cooling",
    "-x", "temperature=28",
    "-x", "battery=45",
    "-g", "comfort:0.7:local",
    "-g", "energy_saving:0.9:global",
    "-c", "temp_high:temperature:gt:25:0.9",
    "-c", "battery_ok:battery:gt:50:0.7",
]


def test_resolve_command_prints_decision() -> None:
    result = runner.invoke(app, COOLING_ARGS)

    assert result.exit_code == 0, result.output
    assert "Execute: NO" in result.output
    assert "Confidence: 0.165" in result.output
    assert "Net benefit: -0.20" in result.output


def test_resolve_repeat_shows_pattern_recall() -> None:
    result = runner.invoke(app, [*COOLING_ARGS, "--repeat", "4"])

    assert result.exit_code == 0, result.output
    assert "Pattern predictions: skipped_turn_on_cooling (confidence: 0.70)" in result.output
    assert "frequency: 4" in result.output


def test_resolve_rejects_bad_definitions() -> None:
    bad_confidence = runner.invoke(app, ["resolve", "x", "-c", "a:temperature:gt:25:1.5"])
    bad_op = runner.invoke(app, ["resolve", "x", "-c", "a:temperature:eq:25"])
    bad_context = runner.invoke(app, ["resolve", "x", "-x", "temperature"])

    assert bad_confidence.exit_code != 0
    assert bad_op.exit_code != 0
    assert bad_context.exit_code != 0


def test_resolve_rejects_invalid_inferences() -> None:
    too_strong = runner.invoke(app, ["resolve", "x", "-i", "temp_high:1.5"])
    no_topic = runner.invoke(app, ["resolve", "x", "-i", ":0.5"])

    for result in (too_strong, no_topic):
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "Invalid input" in result.output


def test_demo_runs_with_evolution() -> None:
    result = runner.invoke(app, ["demo"])

    assert result.exit_code == 0, result.output
    assert "Action: turn_on_cooling" in result.output
    assert "CONTEXT EVOLUTION" in result.output
    assert "weather_tomorrow_sunny = 1" in result.output


def test_demo_without_evolution() -> None:
    result = runner.invoke(app, ["demo", "--no-evolve"])

    assert result.exit_code == 0, result.output
    assert "CONTEXT EVOLUTION" not in result.output


def test_config_show_and_policies_list() -> None:
    shown = runner.invoke(app, ["config", "show"])
    listed = runner.invoke(app, ["policies", "list"])

    assert shown.exit_code == 0, shown.output
    payload = json.loads(shown.output)
    assert payload["settings"]["decision"]["base_threshold"] == 0.6
    assert listed.exit_code == 0, listed.output
    assert listed.output.splitlines()[0].startswith("climate_control:")
