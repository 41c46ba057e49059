"""Cross-habit leaderboard ranking."""

from __future__ import annotations

from typing import Iterable, Optional

from ..logging_config import get_logger
from ..models.analytics import HabitScorecard, LeaderboardEntry

logger = get_logger("services.leaderboard")

LEADERBOARD_WINDOW_DAYS = 30


def _sort_key(card: HabitScorecard):
    habit_id = getattr(card.habit, "id", None)
    return (
        -card.streaks.current_streak,
        -card.consistency.completion_rate,
        # Unsaved habits (no id) sort after saved ones.
        habit_id is None,
        habit_id if habit_id is not None else 0,
    )


def rank_leaderboard(
    scorecards: Iterable[HabitScorecard],
    *,
    workspace_id: Optional[int] = None,
    limit: Optional[int] = None,
) -> list[LeaderboardEntry]:
    """Rank habits by current streak, then 30-day completion rate, then id.

    Archived habits are left out, and so are habits from other workspaces
    when ``workspace_id`` is given. Ranks are strictly sequential from 1;
    the id tie-break means no two rows share a rank.
    """

    eligible = []
    for card in scorecards:
        if getattr(card.habit, "archived_at", None) is not None:
            continue
        if workspace_id is not None and getattr(card.habit, "workspace_id", None) != workspace_id:
            continue
        if card.consistency.window_days != LEADERBOARD_WINDOW_DAYS:
            logger.warning(
                "Leaderboard expects a 30-day consistency window",
                extra={
                    "habit_id": getattr(card.habit, "id", None),
                    "window_days": card.consistency.window_days,
                },
            )
        eligible.append(card)

    ordered = sorted(eligible, key=_sort_key)
    if limit is not None:
        ordered = ordered[:limit]
    return [
        LeaderboardEntry(
            habit=card.habit,
            rank=position,
            current_streak=card.streaks.current_streak,
            longest_streak=card.streaks.longest_streak,
            completion_rate=card.consistency.completion_rate,
        )
        for position, card in enumerate(ordered, start=1)
    ]
