"""
Minimal smoke tests for the workout-log CLI.

Tests basic functionality:
- App runs without errors
- Entries file is created
- Entries can be added, edited, listed and deleted
- Charts and catalog render
- Backup export / import round-trips
"""

import json
import tempfile
from pathlib import Path

import pytest
from typer.testing import CliRunner

from workout_log.cli.main import app


runner = CliRunner()


@pytest.fixture
def temp_data_dir(monkeypatch):
    """Create a temporary directory for test files and isolate HOME."""
    with tempfile.TemporaryDirectory() as tmpdir:
        monkeypatch.setenv("HOME", tmpdir)
        monkeypatch.delenv("WORKOUT_LOG_DATA", raising=False)
        yield Path(tmpdir)


def _init(data_path: Path) -> None:
    result = runner.invoke(app, ["init", "--data-path", str(data_path)])
    assert result.exit_code == 0


def _add(data_path: Path, *args: str, input: str | None = None):
    return runner.invoke(app, ["add", "--data-path", str(data_path), *args], input=input)


def _list_json(data_path: Path, *args: str) -> list[dict]:
    result = runner.invoke(app, ["list", "--data-path", str(data_path), "--json", *args])
    assert result.exit_code == 0
    return json.loads(result.output)


class TestCLISmoke:
    """Basic smoke tests for CLI commands."""

    def test_app_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "workout" in result.output.lower()

    def test_init_creates_file(self, temp_data_dir):
        data_path = temp_data_dir / "log" / "entries.jsonl"
        _init(data_path)
        assert data_path.exists()

    def test_commands_require_init(self, temp_data_dir):
        result = runner.invoke(app, ["list", "--data-path", str(temp_data_dir / "missing.jsonl")])
        assert result.exit_code == 1
        assert "init" in result.output

    def test_add_then_list(self, temp_data_dir):
        data_path = temp_data_dir / "entries.jsonl"
        _init(data_path)

        result = _add(data_path, "--date", "2024-01-01", "--exercise", "Squat",
                      "--weight", "100", "--reps", "5", "--sets", "3")
        assert result.exit_code == 0
        assert "Saved entry #1" in result.output

        (record,) = _list_json(data_path)
        assert record["exercise"] == "Squat"
        assert record["volume"] == 1500.0
        assert record["estimatedOneRepMax"] == pytest.approx(116.67)

    def test_add_rejects_invalid_values(self, temp_data_dir):
        data_path = temp_data_dir / "entries.jsonl"
        _init(data_path)

        result = _add(data_path, "--date", "2024-01-01", "--exercise", "Squat",
                      "--weight", "100", "--reps", "0", "--sets", "3")
        assert result.exit_code == 1
        assert _list_json(data_path) == []

    def test_add_interactive(self, temp_data_dir):
        data_path = temp_data_dir / "entries.jsonl"
        _init(data_path)

        result = runner.invoke(
            app,
            ["add", "--data-path", str(data_path)],
            input="2024-01-05\nDeadlift\nheavy\n140\n3\n2\n\n",
        )
        assert result.exit_code == 0
        (record,) = _list_json(data_path)
        assert record["exercise"] == "Deadlift"
        assert record["weightKg"] == 140.0
        assert record["reps"] == 3

    def test_list_filter_sorted_newest_first(self, temp_data_dir):
        data_path = temp_data_dir / "entries.jsonl"
        _init(data_path)
        _add(data_path, "-d", "2024-01-01", "-e", "Back Squat", "-w", "100", "-r", "5", "-s", "3")
        _add(data_path, "-d", "2024-01-03", "-e", "Bench", "-w", "80", "-r", "5", "-s", "3")
        _add(data_path, "-d", "2024-01-03", "-e", "front SQUAT", "-w", "70", "-r", "5", "-s", "3")
        _add(data_path, "-d", "2024-01-03", "-e", "squat", "-w", "90", "-r", "5", "-s", "3")

        records = _list_json(data_path, "--filter", "squat")
        assert [r["id"] for r in records] == [3, 4, 1]

    def test_edit_keeps_unspecified_fields(self, temp_data_dir):
        data_path = temp_data_dir / "entries.jsonl"
        _init(data_path)
        _add(data_path, "-d", "2024-01-01", "-e", "Squat", "-w", "100", "-r", "5", "-s", "3",
             "-n", "felt good")

        result = runner.invoke(app, ["edit", "1", "--data-path", str(data_path), "--weight", "105"])
        assert result.exit_code == 0

        (record,) = _list_json(data_path)
        assert record["weightKg"] == 105.0
        assert record["reps"] == 5
        assert record["notes"] == "felt good"

    def test_edit_unknown_id_fails(self, temp_data_dir):
        data_path = temp_data_dir / "entries.jsonl"
        _init(data_path)
        result = runner.invoke(app, ["edit", "9", "--data-path", str(data_path), "--reps", "3"])
        assert result.exit_code == 1

    def test_delete_is_idempotent(self, temp_data_dir):
        data_path = temp_data_dir / "entries.jsonl"
        _init(data_path)
        _add(data_path, "-d", "2024-01-01", "-e", "Squat", "-w", "100", "-r", "5", "-s", "3")

        first = runner.invoke(app, ["delete", "1", "--data-path", str(data_path), "--force"])
        second = runner.invoke(app, ["delete", "1", "--data-path", str(data_path), "--force"])

        assert first.exit_code == 0
        assert second.exit_code == 0
        assert _list_json(data_path) == []

    def test_delete_asks_for_confirmation(self, temp_data_dir):
        data_path = temp_data_dir / "entries.jsonl"
        _init(data_path)
        _add(data_path, "-d", "2024-01-01", "-e", "Squat", "-w", "100", "-r", "5", "-s", "3")

        result = runner.invoke(app, ["delete", "1", "--data-path", str(data_path)], input="n\n")
        assert "Cancelled" in result.output
        assert len(_list_json(data_path)) == 1

    def test_exercises_and_chart_json(self, temp_data_dir):
        data_path = temp_data_dir / "entries.jsonl"
        _init(data_path)
        _add(data_path, "-d", "2024-01-01", "-e", "Squat", "-w", "100", "-r", "5", "-s", "3")
        _add(data_path, "-d", "2024-01-01", "-e", "Bench", "-w", "80", "-r", "5", "-s", "3")

        result = runner.invoke(app, ["exercises", "--data-path", str(data_path), "--json"])
        assert json.loads(result.output) == ["Bench", "Squat"]

        result = runner.invoke(app, ["chart", "--data-path", str(data_path), "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["dailyVolume"] == {"2024-01-01": 2700.0}
        assert data["perExercise"]["Squat"]["maxWeightByDate"] == {"2024-01-01": 100.0}

    def test_chart_renders_bars(self, temp_data_dir):
        data_path = temp_data_dir / "entries.jsonl"
        _init(data_path)
        _add(data_path, "-d", "2024-01-01", "-e", "Squat", "-w", "100", "-r", "5", "-s", "3")

        result = runner.invoke(app, ["chart", "--data-path", str(data_path), "-e", "squat"])
        assert result.exit_code == 0
        assert "Daily Volume" in result.output
        assert "Max Weight" in result.output

    def test_chart_unknown_exercise(self, temp_data_dir):
        data_path = temp_data_dir / "entries.jsonl"
        _init(data_path)
        _add(data_path, "-d", "2024-01-01", "-e", "Squat", "-w", "100", "-r", "5", "-s", "3")

        result = runner.invoke(app, ["chart", "--data-path", str(data_path), "-e", "Curl"])
        assert result.exit_code == 1

    def test_export_import_round_trip(self, temp_data_dir):
        source = temp_data_dir / "a.jsonl"
        target = temp_data_dir / "b.jsonl"
        backup = temp_data_dir / "backup.json"
        _init(source)
        _add(source, "-d", "2024-01-01", "-e", "Squat", "-w", "100", "-r", "5", "-s", "3")
        _add(source, "-d", "2024-01-02", "-e", "Bench", "-w", "80", "-r", "5", "-s", "3")

        result = runner.invoke(app, ["export", "--data-path", str(source), "-o", str(backup)])
        assert result.exit_code == 0
        assert backup.exists()

        result = runner.invoke(app, ["import", str(backup), "--data-path", str(target)])
        assert result.exit_code == 0
        assert "2 new" in result.output

        assert _list_json(target) == _list_json(source)

    def test_export_to_stdout(self, temp_data_dir):
        data_path = temp_data_dir / "entries.jsonl"
        _init(data_path)
        _add(data_path, "-d", "2024-01-01", "-e", "Squat", "-w", "100", "-r", "5", "-s", "3")

        result = runner.invoke(app, ["export", "--data-path", str(data_path), "-o", "-"])
        assert result.exit_code == 0
        assert json.loads(result.output)[0]["id"] == 1

    def test_import_malformed_changes_nothing(self, temp_data_dir):
        data_path = temp_data_dir / "entries.jsonl"
        _init(data_path)
        _add(data_path, "-d", "2024-01-01", "-e", "Squat", "-w", "100", "-r", "5", "-s", "3")
        before = data_path.read_text()

        backup = temp_data_dir / "bad.json"
        backup.write_text(json.dumps([
            {"id": 1, "date": "2024-02-01", "exercise": "Bench", "weightKg": 80, "reps": 5, "sets": 3},
            {"date": "2024-02-02", "exercise": "Row", "weightKg": "abc", "reps": 5, "sets": 3},
        ]))

        result = runner.invoke(app, ["import", str(backup), "--data-path", str(data_path)])
        assert result.exit_code == 1
        assert "no changes" in result.output
        assert data_path.read_text() == before

    def test_add_prompts_only_for_missing_fields(self, temp_data_dir):
        data_path = temp_data_dir / "entries.jsonl"
        _init(data_path)

        result = _add(data_path, "-d", "2024-01-01", "-e", "Squat", "-r", "5",
                      input="100\n3\n")
        assert result.exit_code == 0
        assert "Weight kg" in result.output
        assert "Reps" not in result.output

        (record,) = _list_json(data_path)
        assert record["exercise"] == "Squat"
        assert record["weightKg"] == 100.0
        assert record["reps"] == 5
        assert record["sets"] == 3

    def test_markup_like_exercise_names_are_printed_verbatim(self, temp_data_dir):
        data_path = temp_data_dir / "entries.jsonl"
        _init(data_path)

        result = _add(data_path, "-d", "2024-01-01", "-e", "Curl [/red]",
                      "-w", "10", "-r", "5", "-s", "3")
        assert result.exit_code == 0
        assert "Curl [/red]" in result.output

        _add(data_path, "-d", "2024-01-01", "-e", "[DB] Press", "-w", "20", "-r", "5", "-s", "3")
        result = runner.invoke(app, ["exercises", "--data-path", str(data_path)])
        assert result.exit_code == 0
        assert "[DB] Press" in result.output
        assert "Curl [/red]" in result.output

    def test_markup_like_filter_is_printed_verbatim(self, temp_data_dir):
        data_path = temp_data_dir / "entries.jsonl"
        _init(data_path)

        result = runner.invoke(app, ["list", "--data-path", str(data_path), "--filter", "[/x]"])
        assert result.exit_code == 0
        assert "[/x]" in result.output

    def test_list_rejects_non_positive_limit(self, temp_data_dir):
        data_path = temp_data_dir / "entries.jsonl"
        _init(data_path)
        _add(data_path, "-d", "2024-01-01", "-e", "Squat", "-w", "100", "-r", "5", "-s", "3")

        result = runner.invoke(app, ["list", "--data-path", str(data_path), "--limit", "0"])
        assert result.exit_code == 2
