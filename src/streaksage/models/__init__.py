"""Entity tables and analytics value objects."""

from .analytics import (
    HabitScorecard,
    LeaderboardEntry,
    ScoreResult,
    StreakRun,
    StreakSummary,
    TrendPoint,
)
from .cadence import Cadence, CadenceChange
from .habit import Habit, HabitEntry, HabitStatus

__all__ = [
    "Cadence",
    "CadenceChange",
    "Habit",
    "HabitEntry",
    "HabitScorecard",
    "HabitStatus",
    "LeaderboardEntry",
    "ScoreResult",
    "StreakRun",
    "StreakSummary",
    "TrendPoint",
]
