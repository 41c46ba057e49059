"""Plain value objects produced by the analytics services."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional

MISSED = "missed"
ARCHIVED = "archived"
FREQUENCY_GAP = "frequency-gap"


@dataclass(frozen=True, slots=True)
class StreakRun:
    """A maximal run of satisfied cadence periods."""

    habit_id: Optional[int]
    start_date: date
    length: int
    broken_at: Optional[date] = None
    reason: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.broken_at is None


@dataclass(frozen=True, slots=True)
class StreakSummary:
    """Streak counters and run history for one habit."""

    current_streak: int = 0
    longest_streak: int = 0
    runs: tuple[StreakRun, ...] = ()
    # Entries that fell on days the cadence does not allow.
    ignored_entries: int = 0

    @property
    def average_streak(self) -> float:
        if not self.runs:
            return 0.0
        return round(sum(run.length for run in self.runs) / len(self.runs), 1)


@dataclass(frozen=True, slots=True)
class ScoreResult:
    """A 0-100 score over a trailing window.

    ``sample_size`` is the number of entries that contributed; zero means the
    score reflects missing data rather than poor performance.
    ``completion_rate`` is the unblended rate (0-100) behind the score.
    """

    value: int
    window_days: int
    sample_size: int
    completion_rate: float = 0.0


@dataclass(frozen=True, slots=True)
class TrendPoint:
    """One chart bucket; ``completion_rate`` is None when nothing was logged."""

    period_label: str
    completion_rate: Optional[float]
    streak_value: int
    average_mood: Optional[float] = None
    observed: int = 0


@dataclass(frozen=True, slots=True)
class LeaderboardEntry:
    """A ranked habit row."""

    habit: Any
    rank: int
    current_streak: int
    longest_streak: int
    completion_rate: float


@dataclass(frozen=True, slots=True)
class HabitScorecard:
    """A habit paired with the outputs the leaderboard ranks on."""

    habit: Any
    streaks: StreakSummary = field(default_factory=StreakSummary)
    consistency: ScoreResult = field(default_factory=lambda: ScoreResult(0, 30, 0))
