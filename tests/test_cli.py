#!/usr/bin/env python3
"""
Tests for the command-line interface.
"""

import json
import logging
import tempfile
from pathlib import Path

import pytest
from typer.testing import CliRunner

from pump_core.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def restore_logging():
    """The CLI reconfigures root logging; put it back afterwards."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def data_dir():
    """A temporary data directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


def invoke(data_dir: Path, *args, input=None):
    return runner.invoke(
        app,
        ["--data-dir", str(data_dir), "--config-file", str(data_dir / "config.yaml"), *args],
        input=input,
    )


def push_session_input(bench_first_set=("8", "20")) -> str:
    """Answers for a push day: one filled bench set, everything else blank."""
    lines = list(bench_first_set) + ["", ""] * 3 + ["n", ""]
    for _ in range(4):
        lines += ["", ""] * 3 + ["n", ""]
    lines += ["", "y"]
    return "\n".join(lines) + "\n"


def test_app_exists():
    """Test that the app exists."""
    assert app is not None
    assert callable(app)


def test_templates_lists_programme(data_dir):
    result = invoke(data_dir, "templates")
    assert result.exit_code == 0
    assert "Day 1 · Push" in result.output
    assert "Goblet Squat" in result.output
    assert "n/a" in result.output


def test_templates_unknown_id(data_dir):
    result = invoke(data_dir, "templates", "arms")
    assert result.exit_code == 1
    assert "No workout template" in result.output


def test_log_saves_workout_and_carries_weight(data_dir):
    """An interactive session is saved and its weight carried over."""
    result = invoke(data_dir, "log", "push", input=push_session_input())
    assert result.exit_code == 0, result.output
    assert "Saved workout" in result.output
    assert "Volume: 160" in result.output

    logs = json.loads((data_dir / "logs.json").read_text(encoding="utf-8"))
    assert len(logs) == 1
    assert logs[0]["templateId"] == "push"
    first_set = logs[0]["entries"][0]["sets"][0]
    assert first_set == {"reps": 8, "weight": 20, "done": True}
    assert logs[0]["entries"][0]["sets"][1] == {"reps": "", "weight": "", "done": False}

    profile = json.loads((data_dir / "profile.json").read_text(encoding="utf-8"))
    assert profile == {"db-bench": {"lastWeight": 20}}

    # Next session: an empty weight answer keeps the pre-filled 20 kg
    result = invoke(data_dir, "log", "push", input=push_session_input(("10", "")))
    assert result.exit_code == 0, result.output
    assert "Volume: 200" in result.output

    result = invoke(data_dir, "templates", "push")
    assert "20 kg" in result.output


def test_log_cancel_leaves_no_trace(data_dir):
    """Declining to save discards the workout."""
    answers = push_session_input().rsplit("y\n", 1)[0] + "n\n"
    result = invoke(data_dir, "log", "push", input=answers)
    assert result.exit_code == 0, result.output
    assert "Workout discarded." in result.output
    assert not (data_dir / "logs.json").exists()
    assert not (data_dir / "profile.json").exists()


def test_history_and_stats(data_dir):
    invoke(data_dir, "log", "push", input=push_session_input())

    result = invoke(data_dir, "history")
    assert result.exit_code == 0
    assert "Day 1 · Push" in result.output
    assert "160" in result.output

    result = invoke(data_dir, "stats")
    assert result.exit_code == 0
    assert "1 of 12 sessions (8%)" in result.output
    assert "160" in result.output


def test_stats_without_data(data_dir):
    result = invoke(data_dir, "stats")
    assert result.exit_code == 0
    assert "0 of 12 sessions (0%)" in result.output
    assert "No data yet. Log a workout to see the chart." in result.output

    result = invoke(data_dir, "history")
    assert "No workouts logged yet." in result.output


def test_export_and_import(data_dir):
    invoke(data_dir, "log", "push", input=push_session_input())
    export_path = data_dir / "export.json"

    result = invoke(data_dir, "export", "--output", str(export_path))
    assert result.exit_code == 0
    exported = json.loads(export_path.read_text(encoding="utf-8"))
    assert len(exported) == 1

    other_dir = data_dir / "other"
    result = invoke(other_dir, "import", str(export_path))
    assert result.exit_code == 0
    assert "Imported successfully" in result.output
    assert json.loads((other_dir / "logs.json").read_text(encoding="utf-8")) == exported


def test_import_rejects_object(data_dir):
    bad = data_dir / "bad.json"
    bad.write_text("{}", encoding="utf-8")
    result = invoke(data_dir, "import", str(bad))
    assert result.exit_code == 1
    assert "Import failed: Invalid format" in result.output
    assert not (data_dir / "logs.json").exists()


def test_import_from_stdin(data_dir):
    result = invoke(data_dir, "import", "-", input='[{"id": "x"}]')
    assert result.exit_code == 0
    assert json.loads((data_dir / "logs.json").read_text(encoding="utf-8")) == [{"id": "x"}]


def test_import_missing_file(data_dir):
    result = invoke(data_dir, "import", str(data_dir / "nope.json"))
    assert result.exit_code == 1
    assert "Import failed" in result.output


def test_clear_asks_for_confirmation(data_dir):
    invoke(data_dir, "log", "push", input=push_session_input())

    result = invoke(data_dir, "clear", input="n\n")
    assert "Are you sure?" in result.output
    assert "Nothing deleted." in result.output
    assert len(json.loads((data_dir / "logs.json").read_text(encoding="utf-8"))) == 1

    result = invoke(data_dir, "clear", input="y\n")
    assert "All workouts deleted." in result.output
    assert json.loads((data_dir / "logs.json").read_text(encoding="utf-8")) == []
    assert json.loads((data_dir / "profile.json").read_text(encoding="utf-8")) == {"db-bench": {"lastWeight": 20}}


def test_clear_with_profile(data_dir):
    invoke(data_dir, "log", "push", input=push_session_input())
    result = invoke(data_dir, "clear", "--yes", "--include-profile")
    assert result.exit_code == 0
    assert json.loads((data_dir / "profile.json").read_text(encoding="utf-8")) == {}


def test_timer(data_dir):
    result = invoke(data_dir, "timer", "2", "--interval", "0.01")
    assert result.exit_code == 0
    assert "00:01" in result.output
    assert "Rest over." in result.output

    result = invoke(data_dir, "timer", "0")
    assert result.exit_code == 1
