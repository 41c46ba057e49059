"""Per-habit analytics bundles and workspace summaries.

Combines the streak, score and trend services for one habit and applies the
error policy for dashboards: a malformed cadence raises in dev mode and is
logged and replaced with an empty result otherwise, so one bad habit cannot
take down a whole dashboard.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Iterable, Optional

from ..config import BaseConfig
from ..errors import InvalidCadenceError
from ..logging_config import get_logger
from ..models.analytics import HabitScorecard, ScoreResult, StreakSummary, TrendPoint
from ..models.cadence import Cadence
from .leaderboard import LEADERBOARD_WINDOW_DAYS
from .scoring import BUILDING, DECLINING, STABLE, classify_momentum, compute_consistency, compute_momentum
from .streaks import compute_streaks
from .trends import TrendMode, compute_trend

logger = get_logger("services.analytics")

TOO_EASY = "too_easy"
OPTIMAL = "optimal"
TOO_HARD = "too_hard"

MAINTAIN = "maintain"
INCREASE = "increase"
DECREASE = "decrease"
REDESIGN = "redesign"


def assess_difficulty(consistency: ScoreResult, current_streak: int) -> str:
    """Judge whether a habit's target is too easy, about right or too hard.

    A habit with no data in the window is reported as optimal.
    """

    if consistency.sample_size == 0:
        return OPTIMAL
    rate = consistency.completion_rate
    score = consistency.value
    if rate > 90 and score > 90 and current_streak > 14:
        return TOO_EASY
    if rate < 30 or score < 30:
        return TOO_HARD
    return OPTIMAL


def recommend(consistency: ScoreResult, difficulty: str) -> str:
    """Suggest how to adjust a habit given its difficulty."""

    if difficulty == TOO_EASY:
        return INCREASE
    if difficulty == TOO_HARD:
        return DECREASE
    if consistency.sample_size and consistency.completion_rate < 50 and consistency.value < 50:
        return REDESIGN
    return MAINTAIN


@dataclass(slots=True)
class HabitAnalytics:
    """Everything a habit dashboard card shows."""

    habit: Any
    streaks: StreakSummary
    consistency: ScoreResult
    momentum: ScoreResult
    momentum_direction: str = STABLE
    trend: list[TrendPoint] = field(default_factory=list)

    @property
    def target_progress(self) -> Optional[float]:
        """Percent of ``target_streak`` reached by the current streak, capped at 100."""

        target = getattr(self.habit, "target_streak", None)
        if not target or target <= 0:
            return None
        return round(min(100.0, 100 * self.streaks.current_streak / target), 1)

    @property
    def difficulty(self) -> str:
        return assess_difficulty(self.consistency, self.streaks.current_streak)

    @property
    def recommendation(self) -> str:
        return recommend(self.consistency, self.difficulty)

    def scorecard(self) -> HabitScorecard:
        return HabitScorecard(habit=self.habit, streaks=self.streaks, consistency=self.consistency)

    @classmethod
    def empty(cls, habit: Any, config: BaseConfig) -> "HabitAnalytics":
        return cls(
            habit=habit,
            streaks=StreakSummary(),
            consistency=ScoreResult(0, config.CONSISTENCY_WINDOW_DAYS, 0),
            momentum=ScoreResult(0, config.MOMENTUM_SHORT_WINDOW_DAYS, 0),
        )


@dataclass(slots=True)
class AnalyticsSummary:
    """Workspace-level rollup of habit analytics."""

    habit_count: int
    average_completion_rate: float
    building_count: int
    declining_count: int
    high_consistency_count: int


def _archived_on(habit: Any) -> Optional[date]:
    archived_at = getattr(habit, "archived_at", None)
    if archived_at is None:
        return None
    return archived_at.date() if hasattr(archived_at, "date") else archived_at


def _guard(habit: Any, config: BaseConfig, exc: InvalidCadenceError) -> None:
    if config.DEV_MODE:
        raise exc
    logger.error(
        "Malformed cadence; serving empty analytics",
        exc_info=exc,
        extra={"habit_id": getattr(habit, "id", None), "frequency": getattr(habit, "frequency", None)},
    )


def build_scorecard(
    habit: Any,
    entries: Iterable[Any],
    *,
    as_of: Optional[date] = None,
    config: Optional[BaseConfig] = None,
) -> HabitScorecard:
    """Compute the streaks and 30-day consistency the leaderboard ranks on."""

    config = config or BaseConfig()
    entries = list(entries)
    try:
        cadence = Cadence.for_habit(habit)
    except InvalidCadenceError as exc:
        _guard(habit, config, exc)
        return HabitScorecard(habit=habit, consistency=ScoreResult(0, LEADERBOARD_WINDOW_DAYS, 0))
    return HabitScorecard(
        habit=habit,
        streaks=compute_streaks(
            entries, cadence, as_of, habit_id=getattr(habit, "id", None), archived_on=_archived_on(habit)
        ),
        consistency=compute_consistency(
            entries,
            cadence,
            LEADERBOARD_WINDOW_DAYS,
            as_of=as_of,
            started_on=getattr(habit, "created_on", None),
        ),
    )


def analyze_habit(
    habit: Any,
    entries: Iterable[Any],
    *,
    as_of: Optional[date] = None,
    config: Optional[BaseConfig] = None,
    trend_mode: TrendMode | str = TrendMode.DAILY,
    lookback_days: Optional[int] = None,
) -> HabitAnalytics:
    """Run every analytics service for one habit."""

    config = config or BaseConfig()
    as_of = as_of or date.today()
    entries = list(entries)
    try:
        cadence = Cadence.for_habit(habit)
    except InvalidCadenceError as exc:
        _guard(habit, config, exc)
        return HabitAnalytics.empty(habit, config)

    short_window = config.MOMENTUM_SHORT_WINDOW_DAYS
    baseline_window = config.MOMENTUM_BASELINE_WINDOW_DAYS
    result = HabitAnalytics(
        habit=habit,
        streaks=compute_streaks(
            entries, cadence, as_of, habit_id=getattr(habit, "id", None), archived_on=_archived_on(habit)
        ),
        consistency=compute_consistency(
            entries,
            cadence,
            config.CONSISTENCY_WINDOW_DAYS,
            as_of=as_of,
            started_on=getattr(habit, "created_on", None),
        ),
        momentum=compute_momentum(entries, cadence, short_window, baseline_window, as_of=as_of),
        momentum_direction=classify_momentum(entries, cadence, short_window, baseline_window, as_of=as_of),
        trend=compute_trend(
            entries,
            trend_mode,
            lookback_days or config.TREND_LOOKBACK_DAYS,
            as_of=as_of,
            cadence=cadence,
            week_start=config.WEEK_START,
        ),
    )
    logger.debug(
        "Habit analytics computed",
        extra={
            "habit_id": getattr(habit, "id", None),
            "current_streak": result.streaks.current_streak,
            "consistency": result.consistency.value,
            "momentum": result.momentum.value,
        },
    )
    return result


def summarize_analytics(
    results: Iterable[HabitAnalytics], *, config: Optional[BaseConfig] = None
) -> AnalyticsSummary:
    """Roll habit analytics up into workspace-level counts."""

    threshold = (config or BaseConfig).HIGH_CONSISTENCY_THRESHOLD
    results = list(results)
    if not results:
        return AnalyticsSummary(0, 0.0, 0, 0, 0)
    return AnalyticsSummary(
        habit_count=len(results),
        average_completion_rate=round(
            sum(r.consistency.completion_rate for r in results) / len(results), 1
        ),
        building_count=sum(1 for r in results if r.momentum_direction == BUILDING),
        declining_count=sum(1 for r in results if r.momentum_direction == DECLINING),
        high_consistency_count=sum(1 for r in results if r.consistency.value > threshold),
    )
