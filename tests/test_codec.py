#!/usr/bin/env python3
"""
Tests for import and export of the workout history.
"""

import json
import os
import sys
import tempfile
from pathlib import Path

import pytest

from pump_core.analytics import log_volume, volume_series
from pump_core.codec import export_logs, export_to_file, find_invalid_logs, import_logs, parse_import
from pump_core.errors import ImportFormatError
from pump_core.models import SetEntry, WorkoutLog, WorkoutLogEntry
from pump_core.storage import LogStore, MemoryStore


@pytest.fixture
def store():
    """A log store with two saved workouts."""
    store = LogStore(MemoryStore())
    store.append(WorkoutLog(
        id="aaaa1111", date="2026-10-15T18:00:00.000Z", template_id="push",
        entries=[WorkoutLogEntry("db-bench", [SetEntry(8, 22, True), SetEntry(None, 22)], "")],
    ))
    store.append(WorkoutLog(
        id="bbbb2222", date="2026-10-17T18:00:00.000Z", template_id="pull", notes="tired",
        entries=[WorkoutLogEntry("db-row", [SetEntry(10, None)], "strap")],
    ))
    return store


def test_export_is_pretty_printed_array(store):
    """Export is the store as an indented JSON array, newest first."""
    text = export_logs(store)
    assert text.startswith("[\n  {")
    data = json.loads(text)
    assert [log["id"] for log in data] == ["bbbb2222", "aaaa1111"]
    assert data[1]["entries"][0]["sets"][1] == {"reps": "", "weight": 22, "done": False}


def test_export_then_import_is_idempotent(store):
    """Importing an export reproduces the same history."""
    before = store.records()
    result = import_logs(export_logs(store), store)
    assert result.ok
    assert result.count == 2
    assert store.records() == before


def test_import_into_another_store(store):
    """An export moves the full history to a fresh store."""
    fresh = LogStore(MemoryStore())
    import_logs(export_logs(store), fresh)
    assert fresh.records() == store.records()


def test_import_rejects_object(store):
    """A JSON object is not a history."""
    before = store.records()
    result = import_logs("{}", store)
    assert not result.ok
    assert result.message == "Import failed: Invalid format"
    assert store.records() == before


def test_import_rejects_malformed_json(store):
    """Text that is not JSON leaves the store unchanged."""
    before = store.records()
    result = import_logs("[{", store)
    assert not result.ok
    assert result.message.startswith("Import failed: ")
    assert store.records() == before


def test_import_accepts_any_array_by_default(store):
    """Elements are not checked unless strict mode is on."""
    result = import_logs('[1, "two", {"id": "x"}]', store)
    assert result.ok
    assert result.message == "Imported successfully"
    assert store.records() == [1, "two", {"id": "x"}]


def test_import_replaces_without_merging(store):
    """Import is a wholesale replacement."""
    import_logs('[{"id": "aaaa1111"}]', store)
    assert store.records() == [{"id": "aaaa1111"}]
    import_logs("[]", store)
    assert store.records() == []


def test_strict_import_reports_rejected_records(store):
    """Strict mode applies nothing when any record is invalid."""
    before = store.records()
    good = json.loads(export_logs(store))[0]
    text = json.dumps([good, {"id": "x"}, 5])
    result = import_logs(text, store, strict=True)

    assert not result.ok
    assert result.rejected == [1, 2]
    assert "1, 2" in result.message
    assert store.records() == before


def test_strict_import_accepts_valid_export(store):
    """A real export passes strict validation."""
    result = import_logs(export_logs(store), store, strict=True)
    assert result.ok
    assert find_invalid_logs(store.records()) == []


def test_parse_import():
    assert parse_import("[]") == []
    with pytest.raises(ImportFormatError):
        parse_import('"text"')
    with pytest.raises(ImportFormatError):
        parse_import("")


def test_export_to_file(store):
    """The export file holds the same text as export_logs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = export_to_file(store, os.path.join(tmpdir, "out.json"))
        assert path == Path(tmpdir) / "out.json"
        assert path.read_text(encoding="utf-8") == export_logs(store)


def test_export_to_file_default_name(store, monkeypatch):
    """Without a path the export goes to dumbbell-tracker-data.json."""
    with tempfile.TemporaryDirectory() as tmpdir:
        monkeypatch.chdir(tmpdir)
        path = export_to_file(store)
        assert path.name == "dumbbell-tracker-data.json"
        assert (Path(tmpdir) / "dumbbell-tracker-data.json").exists()


def test_import_rejects_deeply_nested_array(store):
    """Nesting too deep to decode is reported, not raised."""
    before = store.records()
    result = import_logs("[" * 100000 + "]" * 100000, store)
    assert not result.ok
    assert result.message.startswith("Import failed: ")
    assert store.records() == before


@pytest.mark.skipif(not hasattr(sys, "set_int_max_str_digits"), reason="no integer digit limit")
def test_import_rejects_oversized_integer_literal(store):
    """An integer literal past the interpreter's digit limit is reported."""
    before = store.records()
    result = import_logs("[" + "1" * 5000 + "]", store)
    assert not result.ok
    assert result.message.startswith("Import failed: ")
    assert store.records() == before


def test_history_with_huge_numbers_stays_readable(store):
    """Lax import keeps huge numbers; reading them back does not fail."""
    record = {
        "id": "cccc3333", "date": "2026-10-18T18:00:00.000Z", "templateId": "legs", "notes": "",
        "entries": [{"exerciseId": "goblet-squat", "notes": "",
                     "sets": [{"reps": int("9" * 400), "weight": 20, "done": True},
                              {"reps": 10, "weight": 20, "done": True}]}],
    }
    result = import_logs(json.dumps([record]), store)
    assert result.ok

    log = store.logs()[0]
    assert log.entries[0].sets[0].reps is None
    assert log_volume(log) == 200
    assert [p.volume for p in volume_series(store.logs())] == [200]
