"""
Minimal smoke tests for the gym-tracker CLI.

Tests basic functionality:
- App runs without errors
- Data file is created by init
- Days, series and exercises can be added, edited and deleted
- Completing the last round of a series moves on to the next one
- Catalog can be listed and cloned from
"""

import json
import tempfile
from pathlib import Path

import pytest
from typer.testing import CliRunner

from gym_tracker.cli.main import app
from gym_tracker.core.config import STORAGE_KEY

runner = CliRunner()


@pytest.fixture
def temp_data_dir():
    """Create a temporary directory with a zero-dwell settings.yaml."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir)
        (path / "settings.yaml").write_text("dwell_seconds: 0\n", encoding="utf-8")
        yield path


@pytest.fixture
def data_path(temp_data_dir):
    """Initialized data file holding the sample day."""
    path = temp_data_dir / "data.json"
    result = runner.invoke(app, ["init", "--data-path", str(path)])
    assert result.exit_code == 0
    return path


def _invoke(data_path, *args, **kwargs):
    return runner.invoke(app, [*args, "--data-path", str(data_path)], **kwargs)


def _slot(data_path) -> dict:
    return json.loads(data_path.read_text(encoding="utf-8"))[STORAGE_KEY]


class TestCLISmoke:
    """Basic smoke tests for CLI commands."""

    def test_app_help(self):
        """Test that app runs and shows help."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "complete" in result.output

    def test_init_creates_data_file(self, temp_data_dir):
        """Test init writes the sample day."""
        path = temp_data_dir / "data.json"
        result = runner.invoke(app, ["init", "--data-path", str(path)])

        assert result.exit_code == 0
        assert path.exists()
        assert "Upper Body Day" in result.output
        assert [d["id"] for d in _slot(path)["days"]] == ["day-1"]

    def test_init_refuses_to_overwrite(self, data_path):
        """Test init without --force keeps existing data."""
        result = runner.invoke(app, ["init", "--data-path", str(data_path)])
        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_init_empty_force(self, data_path):
        """Test init --empty --force starts over."""
        result = runner.invoke(app, ["init", "--empty", "--force", "--data-path", str(data_path)])
        assert result.exit_code == 0
        assert _slot(data_path)["days"] == []

    def test_commands_need_init(self, temp_data_dir):
        """Test commands explain that init must run first."""
        result = _invoke(temp_data_dir / "missing.json", "days")
        assert result.exit_code == 1
        assert "init" in result.output

    def test_days_lists_days(self, data_path):
        result = _invoke(data_path, "days")
        assert result.exit_code == 0
        assert "Upper Body Day" in result.output

    def test_day_shows_series(self, data_path):
        result = _invoke(data_path, "day", "day-1")
        assert result.exit_code == 0
        assert "Warm-up" in result.output
        assert "Main Workout" in result.output

    def test_unknown_ref(self, data_path):
        result = _invoke(data_path, "day", "nope")
        assert result.exit_code == 1
        assert "No day matches" in result.output


class TestStructureCommands:
    """add/edit/delete for days, series and exercises."""

    def test_add_day(self, data_path):
        result = _invoke(data_path, "add-day", "--name", "Leg Day", "--date", "2026-03-04")
        assert result.exit_code == 0
        assert "Added Leg Day" in result.output

        days = _slot(data_path)["days"]
        assert days[-1]["name"] == "Leg Day"
        assert days[-1]["date"] == "2026-03-04"

    def test_add_day_bad_date(self, data_path):
        result = _invoke(data_path, "add-day", "--date", "03/04/2026")
        assert result.exit_code == 1
        assert "Error" in result.output
        assert len(_slot(data_path)["days"]) == 1

    def test_edit_day(self, data_path):
        result = _invoke(data_path, "edit-day", "day-1", "--name", "Push Day")
        assert result.exit_code == 0
        assert _slot(data_path)["days"][0]["name"] == "Push Day"

    def test_add_series(self, data_path):
        result = _invoke(data_path, "add-series", "day-1", "--name", "Finisher", "--rounds", "4")
        assert result.exit_code == 0
        assert "4 rounds" in result.output
        assert len(_slot(data_path)["days"][0]["seriesIds"]) == 3

    def test_add_series_rejects_zero_rounds(self, data_path):
        result = _invoke(data_path, "add-series", "day-1", "--rounds", "0")
        assert result.exit_code == 1

    def test_edit_series_rounds(self, data_path):
        result = _invoke(data_path, "edit-series", "series-2", "--rounds", "5", "--icon", "flame")
        assert result.exit_code == 0

        series = _slot(data_path)["series"][1]
        assert series["rounds"] == 5
        assert series["icon"] == "flame"

    def test_edit_series_bad_icon(self, data_path):
        result = _invoke(data_path, "edit-series", "series-2", "--icon", "rocket")
        assert result.exit_code == 1
        assert "Invalid icon" in result.output

    def test_add_exercise_from_catalog(self, data_path):
        result = _invoke(data_path, "add-exercise", "series-2", "--from-catalog", "push_up")
        assert result.exit_code == 0
        assert "Added Push-up" in result.output
        assert len(_slot(data_path)["series"][1]["exerciseIds"]) == 2

    def test_add_exercise_unknown_template(self, data_path):
        result = _invoke(data_path, "add-exercise", "series-2", "--from-catalog", "nope")
        assert result.exit_code == 1
        assert len(_slot(data_path)["exercises"]) == 3

    def test_rejected_add_exercise_saves_nothing(self, data_path):
        result = _invoke(data_path, "add-exercise", "series-1", "--reps", "-1")
        assert result.exit_code == 1
        assert "Error" in result.output
        assert len(_slot(data_path)["exercises"]) == 3
        assert _slot(data_path)["series"][0]["exerciseIds"] == ["exercise-1", "exercise-2"]

    def test_rejected_catalog_clone_saves_nothing(self, data_path):
        result = _invoke(
            data_path, "add-exercise", "series-2", "--from-catalog", "push_up", "--load", "-5"
        )
        assert result.exit_code == 1
        assert len(_slot(data_path)["exercises"]) == 3

    def test_add_exercise_from_scratch(self, data_path):
        result = _invoke(
            data_path, "add-exercise", "series-1", "--name", "Jumping Jacks", "--duration", "40"
        )
        assert result.exit_code == 0

        exercise = _slot(data_path)["exercises"][-1]
        assert exercise["name"] == "Jumping Jacks"
        assert exercise["duration"] == 40

    def test_delete_exercise(self, data_path):
        result = _invoke(data_path, "delete-exercise", "exercise-2", "--yes")
        assert result.exit_code == 0
        assert _slot(data_path)["series"][0]["exerciseIds"] == ["exercise-1"]

    def test_delete_series_cascades(self, data_path):
        result = _invoke(data_path, "delete-series", "series-1", "--yes")
        assert result.exit_code == 0

        slot = _slot(data_path)
        assert [s["id"] for s in slot["series"]] == ["series-2"]
        assert [e["id"] for e in slot["exercises"]] == ["exercise-3"]

    def test_delete_day_cancelled(self, data_path):
        result = _invoke(data_path, "delete-day", "day-1", input="n\n")
        assert "Cancelled." in result.output
        assert len(_slot(data_path)["days"]) == 1

    def test_delete_day(self, data_path):
        result = _invoke(data_path, "delete-day", "day-1", "--yes")
        assert result.exit_code == 0
        assert "Deleted Upper Body Day" in result.output
        assert _slot(data_path) == {"days": [], "series": [], "exercises": []}


class TestProgressCommands:
    def test_complete_round(self, data_path):
        result = _invoke(data_path, "complete", "exercise-1")
        assert result.exit_code == 0
        assert "Push-ups: round 1/2" in result.output
        assert "25%" in result.output

    def test_completing_series_moves_on(self, data_path):
        for ex_id in ("exercise-1", "exercise-2", "exercise-1"):
            assert _invoke(data_path, "complete", ex_id).exit_code == 0

        result = _invoke(data_path, "complete", "exercise-2")
        assert result.exit_code == 0
        assert "Series complete: Warm-up" in result.output
        assert "Next series: Main Workout" in result.output

    def test_completing_last_series_returns_to_day(self, data_path):
        for _ in range(2):
            _invoke(data_path, "complete", "exercise-3")
        result = _invoke(data_path, "complete", "exercise-3")

        assert "Series complete: Main Workout" in result.output
        assert "All series of the day are done." in result.output

    def test_reset_series(self, data_path):
        _invoke(data_path, "complete", "exercise-3")
        result = _invoke(data_path, "reset-series", "series-2")

        assert result.exit_code == 0
        assert _slot(data_path)["exercises"][2]["completedReps"] == 0

    def test_rate(self, data_path):
        result = _invoke(data_path, "rate", "exercise-1", "4")
        assert result.exit_code == 0
        assert "Rated Push-ups: 4/5" in result.output
        assert _slot(data_path)["exercises"][0]["rating"] == 4

    def test_rate_out_of_range(self, data_path):
        result = _invoke(data_path, "rate", "exercise-1", "9")
        assert result.exit_code == 1

    def test_rating_required_before_moving_on(self, data_path, temp_data_dir):
        (temp_data_dir / "settings.yaml").write_text(
            "dwell_seconds: 0\nrequire_rating: true\n", encoding="utf-8"
        )
        for _ in range(2):
            _invoke(data_path, "complete", "exercise-3")

        result = _invoke(data_path, "complete", "exercise-3")
        assert "Rate it with" in result.output
        assert "Series complete" not in result.output

        result = _invoke(data_path, "rate", "exercise-3", "5")
        assert result.exit_code == 0
        assert "Series complete: Main Workout" in result.output

    def test_rated_series_celebrates_once(self, data_path, temp_data_dir):
        (temp_data_dir / "settings.yaml").write_text(
            "dwell_seconds: 0\nrequire_rating: true\n", encoding="utf-8"
        )
        for ex_id in ("exercise-1", "exercise-2", "exercise-1", "exercise-2"):
            assert _invoke(data_path, "complete", ex_id).exit_code == 0

        first = _invoke(data_path, "rate", "exercise-2", "4")
        assert first.exit_code == 0
        assert "Series complete" not in first.output
        assert "rate exercise-1" in first.output

        second = _invoke(data_path, "rate", "exercise-1", "3")
        assert "Series complete: Warm-up" in second.output

        again = _invoke(data_path, "rate", "exercise-1", "5")
        assert again.exit_code == 0
        assert "Series complete" not in again.output

    def test_complete_with_rating(self, data_path, temp_data_dir):
        (temp_data_dir / "settings.yaml").write_text(
            "dwell_seconds: 0\nrequire_rating: true\n", encoding="utf-8"
        )
        for _ in range(2):
            _invoke(data_path, "complete", "exercise-3")

        result = _invoke(data_path, "complete", "exercise-3", "--rating", "4")
        assert result.exit_code == 0
        assert "Rated Dumbbell Bench Press: 4/5" in result.output
        assert "Series complete: Main Workout" in result.output
        assert _slot(data_path)["exercises"][2]["rating"] == 4


class TestCatalogCommand:
    def test_catalog_without_data(self, temp_data_dir):
        result = _invoke(temp_data_dir / "missing.json", "catalog")
        assert result.exit_code == 0
        assert "Exercise Catalog" in result.output
        assert "push_up" in result.output

    def test_catalog_filter(self, data_path):
        result = _invoke(data_path, "catalog", "--muscle-group", "legs")
        assert result.exit_code == 0
        assert "goblet_squat" in result.output
        assert "push_up" not in result.output
