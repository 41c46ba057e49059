"""Tests for the click command line interface."""

from __future__ import annotations

import csv
import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from streaksage.cli import cli

ENTRIES = """
habit_id,occurred_on,status,mood
1,2024-03-01,completed,4
1,2024-03-02,completed,5
1,2024-03-03,missed,
1,2024-03-04,completed,3
1,2024-03-05,completed,
2,2024-03-04,completed,
2,2024-03-05,completed,
3,2024-03-01,completed,
3,2024-03-02,completed,
3,2024-03-03,completed,
"""

HABITS = """
id,workspace_id,name,frequency,custom_days,created_on,archived_at
1,1,Read,daily,,2024-03-01,
2,1,Stretch,daily,,2024-03-01,
3,1,Old habit,daily,,2024-03-01,2024-03-04
"""


@pytest.fixture
def runner(tmp_path, monkeypatch):
    monkeypatch.setenv("STREAKSAGE_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("STREAKSAGE_DEV_MODE", "false")
    monkeypatch.delenv("STREAKSAGE_DATABASE_URL", raising=False)
    return CliRunner()


@pytest.fixture
def entries_csv(tmp_path) -> Path:
    path = tmp_path / "entries.csv"
    path.write_text(ENTRIES.strip() + "\n", encoding="utf-8")
    return path


@pytest.fixture
def habits_csv(tmp_path) -> Path:
    path = tmp_path / "habits.csv"
    path.write_text(HABITS.strip() + "\n", encoding="utf-8")
    return path


def test_streaks_command(runner, entries_csv):
    result = runner.invoke(
        cli, ["streaks", str(entries_csv), "--habit-id", "1", "--as-of", "2024-03-05"]
    )

    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["current_streak"] == 2
    assert data["longest_streak"] == 2
    assert data["runs"][0]["reason"] == "missed"
    assert data["runs"][0]["broken_at"] == "2024-03-03"


def test_bad_cadence_is_a_usage_error(runner, entries_csv):
    result = runner.invoke(cli, ["streaks", str(entries_csv), "--cadence", "fortnightly"])

    assert result.exit_code == 2
    assert "cadence" in result.output.lower()


def test_scores_command(runner, entries_csv):
    result = runner.invoke(
        cli,
        ["scores", str(entries_csv), "--habit-id", "1", "--as-of", "2024-03-05", "--window", "5"],
    )

    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["consistency"]["window_days"] == 5
    assert data["consistency"]["completion_rate"] == 80.0
    assert data["momentum"]["window_days"] == 7
    assert data["momentum_direction"] in {"building", "stable", "declining"}


def test_scores_invalid_window(runner, entries_csv):
    result = runner.invoke(cli, ["scores", str(entries_csv), "--short", "10", "--baseline", "5"])

    assert result.exit_code == 2
    assert "baseline_window_days" in result.output


def test_trend_prints_json(runner, entries_csv):
    result = runner.invoke(
        cli,
        ["trend", str(entries_csv), "--habit-id", "1", "--as-of", "2024-03-07", "--lookback", "7"],
    )

    assert result.exit_code == 0, result.output
    points = json.loads(result.output)
    assert [p["period_label"] for p in points][:2] == ["2024-03-01", "2024-03-02"]
    assert points[0]["average_mood"] == 4.0
    assert points[-1]["completion_rate"] is None


@pytest.mark.parametrize("suffix", [".csv", ".png", ".json"])
def test_trend_output_formats(runner, entries_csv, tmp_path, suffix):
    output = tmp_path / f"trend{suffix}"

    result = runner.invoke(
        cli,
        [
            "trend", str(entries_csv), "--mode", "dayOfWeek",
            "--as-of", "2024-03-07", "--lookback", "7", "--output", str(output),
        ],
    )

    assert result.exit_code == 0, result.output
    assert output.exists()
    assert "Trend written" in result.output


def test_trend_rejects_unknown_mode(runner, entries_csv):
    result = runner.invoke(cli, ["trend", str(entries_csv), "--mode", "monthly"])

    assert result.exit_code == 2


def test_leaderboard_prints_ranked_lines(runner, habits_csv, entries_csv):
    result = runner.invoke(
        cli, ["leaderboard", str(habits_csv), str(entries_csv), "--as-of", "2024-03-05"]
    )

    assert result.exit_code == 0, result.output
    lines = [line for line in result.output.splitlines() if line.strip()]
    assert len(lines) == 2
    assert lines[0].strip().startswith("1. Read")
    assert lines[1].strip().startswith("2. Stretch")
    assert "Old habit" not in result.output


def test_leaderboard_csv_output(runner, habits_csv, entries_csv, tmp_path):
    output = tmp_path / "board.csv"

    result = runner.invoke(
        cli,
        [
            "leaderboard", str(habits_csv), str(entries_csv),
            "--as-of", "2024-03-05", "--limit", "1", "--output", str(output),
        ],
    )

    assert result.exit_code == 0, result.output
    with output.open(newline="", encoding="utf-8") as fh:
        rows = list(csv.DictReader(fh))
    assert [row["habit_name"] for row in rows] == ["Read"]
    assert rows[0]["rank"] == "1"


def test_import_then_analyze(runner, habits_csv, entries_csv):
    imported = runner.invoke(cli, ["import", str(habits_csv), str(entries_csv)])

    assert imported.exit_code == 0, imported.output
    assert "Imported 3 habits and 10 entries" in imported.output

    result = runner.invoke(
        cli, ["analyze", "1", "--as-of", "2024-03-05", "--lookback", "7"]
    )

    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["habit"]["name"] == "Read"
    assert data["streaks"]["current_streak"] == 2
    assert len(data["trend"]) == 7
    assert data["difficulty"] in {"too_easy", "optimal", "too_hard"}
    assert data["target_progress"] is None


def test_import_twice_keeps_one_entry_per_day(runner, habits_csv, entries_csv):
    runner.invoke(cli, ["import", str(habits_csv), str(entries_csv)])

    again = runner.invoke(cli, ["import", str(habits_csv), str(entries_csv)])

    assert again.exit_code == 0, again.output
    assert "Imported 0 habits and 10 entries" in again.output


def test_analyze_unknown_habit(runner):
    result = runner.invoke(cli, ["analyze", "99"])

    assert result.exit_code == 1
    assert "Habit 99 not found" in result.output
