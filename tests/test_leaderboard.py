"""Tests for leaderboard ranking."""

from __future__ import annotations

from datetime import datetime, timezone

from streaksage.models import Habit, HabitScorecard, ScoreResult, StreakSummary
from streaksage.services.leaderboard import rank_leaderboard


def card(habit_id: int, streak: int, rate: float, *, workspace_id: int = 1, archived: bool = False, window: int = 30):
    habit = Habit(
        id=habit_id,
        name=f"Habit {habit_id}",
        workspace_id=workspace_id,
        archived_at=datetime(2024, 2, 1, tzinfo=timezone.utc) if archived else None,
    )
    return HabitScorecard(
        habit=habit,
        streaks=StreakSummary(current_streak=streak, longest_streak=streak + 2),
        consistency=ScoreResult(value=int(rate), window_days=window, sample_size=20, completion_rate=rate),
    )


def names(entries):
    return [entry.habit.name for entry in entries]


def test_streak_ties_broken_by_completion_rate():
    a = card(1, 10, 80.0)
    b = card(2, 10, 90.0)
    c = card(3, 5, 100.0)

    ranked = rank_leaderboard([a, b, c])

    assert [entry.habit for entry in ranked] == [b.habit, a.habit, c.habit]
    assert [entry.rank for entry in ranked] == [1, 2, 3]
    assert ranked[0].current_streak == 10
    assert ranked[0].longest_streak == 12
    assert ranked[0].completion_rate == 90.0


def test_exact_ties_get_strict_ranks_by_id():
    ranked = rank_leaderboard([card(7, 3, 50.0), card(2, 3, 50.0), card(5, 3, 50.0)])

    assert [entry.habit.id for entry in ranked] == [2, 5, 7]
    assert [entry.rank for entry in ranked] == [1, 2, 3]


def test_archived_habits_are_excluded():
    ranked = rank_leaderboard([card(1, 1, 10.0), card(2, 99, 100.0, archived=True)])

    assert names(ranked) == ["Habit 1"]
    assert ranked[0].rank == 1


def test_workspace_scope_and_limit():
    cards = [card(1, 4, 50.0), card(2, 8, 50.0, workspace_id=2), card(3, 2, 50.0), card(4, 1, 50.0)]

    ranked = rank_leaderboard(cards, workspace_id=1, limit=2)

    assert names(ranked) == ["Habit 1", "Habit 3"]


def test_empty_input():
    assert rank_leaderboard([]) == []


def test_unexpected_window_is_logged(caplog):
    with caplog.at_level("WARNING", logger="streaksage"):
        ranked = rank_leaderboard([card(1, 1, 10.0, window=7)])

    assert len(ranked) == 1
    assert "30-day consistency window" in caplog.text
