"""Repository-backed habit analytics."""

from __future__ import annotations

from datetime import date
from typing import Optional

from ..config import BaseConfig
from ..domain.repositories.habit import HabitRepository
from ..logging_config import get_logger
from ..models.analytics import LeaderboardEntry
from .analytics import HabitAnalytics, analyze_habit, build_scorecard
from .leaderboard import rank_leaderboard

logger = get_logger("services.habits")


# Streaks depend on the whole history, not just the scoring windows.
HISTORY_START = date.min


def load_habit_analytics(
    repository: HabitRepository,
    habit_id: int,
    *,
    workspace_id: int,
    as_of: Optional[date] = None,
    config: Optional[BaseConfig] = None,
    trend_mode: str = "daily",
    lookback_days: Optional[int] = None,
) -> Optional[HabitAnalytics]:
    """Fetch one habit and its entries, then compute its analytics."""

    as_of = as_of or date.today()
    habit = repository.get_by_id(habit_id, workspace_id=workspace_id)
    if habit is None:
        logger.info("Habit not found", extra={"habit_id": habit_id, "workspace_id": workspace_id})
        return None
    entries = repository.get_entries_for_habit(
        habit_id, HISTORY_START, as_of, workspace_id=workspace_id
    )
    return analyze_habit(
        habit,
        entries,
        as_of=as_of,
        config=config,
        trend_mode=trend_mode,
        lookback_days=lookback_days,
    )


def workspace_leaderboard(
    repository: HabitRepository,
    *,
    workspace_id: int,
    as_of: Optional[date] = None,
    config: Optional[BaseConfig] = None,
    limit: Optional[int] = None,
) -> list[LeaderboardEntry]:
    """Rank the active habits of a workspace."""

    as_of = as_of or date.today()
    scorecards = []
    for habit in repository.list_for_workspace(workspace_id=workspace_id):
        entries = repository.get_entries_for_habit(
            habit.id, HISTORY_START, as_of, workspace_id=workspace_id
        )
        scorecards.append(build_scorecard(habit, entries, as_of=as_of, config=config))
    return rank_leaderboard(scorecards, workspace_id=workspace_id, limit=limit)
