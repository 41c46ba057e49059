"""Chart series: completion rate, streak and mood per day, week or weekday."""

from __future__ import annotations

from collections import OrderedDict
from datetime import date, timedelta
from enum import Enum
from typing import Any, Iterable, Optional, Sequence

from ..errors import require_window
from ..models.analytics import TrendPoint
from ..models.cadence import Cadence, CadenceChange
from ..models.habit import HabitStatus
from .periods import CheckIn, normalize_entries
from .streaks import compute_streaks

WEEKDAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
SUNDAY = 6


class TrendMode(str, Enum):
    """How entries are bucketed."""

    DAILY = "daily"
    WEEKLY = "weekly"
    DAY_OF_WEEK = "dayOfWeek"


def _bucket_stats(check_ins: list[CheckIn]) -> tuple[Optional[float], Optional[float]]:
    if not check_ins:
        return None, None
    completed = sum(1 for c in check_ins if c.status is HabitStatus.COMPLETED)
    moods = [c.mood for c in check_ins if c.mood is not None]
    mood = round(sum(moods) / len(moods), 2) if moods else None
    return round(100 * completed / len(check_ins), 1), mood


def _weekday_streak(check_ins: dict[date, CheckIn], days: list[date], as_of: date) -> int:
    """Count consecutive most recent weeks in which this weekday was completed."""

    streak = 0
    for day in reversed(days):
        check_in = check_ins.get(day)
        if check_in is None:
            if day == as_of:
                continue
            break
        if check_in.status is HabitStatus.COMPLETED:
            streak += 1
        elif check_in.status is HabitStatus.MISSED:
            break
    return streak


def compute_trend(
    entries: Iterable[Any],
    mode: TrendMode | str,
    lookback_days: int,
    *,
    as_of: Optional[date] = None,
    cadence: Cadence | str | Sequence[CadenceChange] = "daily",
    week_start: int = SUNDAY,
) -> list[TrendPoint]:
    """Bucket the last ``lookback_days`` of entries into trend points.

    ``daily`` and ``weekly`` buckets come back in chronological order; weekly
    buckets are ISO weeks clipped to the lookback window. ``dayOfWeek``
    groups every entry in the window by weekday, ordered from ``week_start``
    (Python weekday numbers, Sunday by default). ``completion_rate`` is
    completions over entries observed in the bucket, or None when the bucket
    is empty. Every entry counts here regardless of cadence.
    """

    require_window(lookback_days, "lookback_days")
    mode = TrendMode(mode)
    if week_start not in range(7):
        raise ValueError(f"week_start must be a weekday number 0-6, got {week_start!r}")
    as_of = as_of or date.today()
    start = as_of - timedelta(days=lookback_days - 1)

    all_entries = list(entries)
    window = normalize_entries(all_entries, since=start, until=as_of)
    days = [start + timedelta(days=offset) for offset in range(lookback_days)]

    if mode is TrendMode.DAY_OF_WEEK:
        by_day = {c.occurred_on: c for c in window}
        points = []
        for offset in range(7):
            weekday = (week_start + offset) % 7
            weekday_days = [day for day in days if day.weekday() == weekday]
            bucket = [by_day[day] for day in weekday_days if day in by_day]
            rate, mood = _bucket_stats(bucket)
            points.append(
                TrendPoint(
                    period_label=WEEKDAY_LABELS[weekday],
                    completion_rate=rate,
                    streak_value=_weekday_streak(by_day, weekday_days, as_of),
                    average_mood=mood,
                    observed=len(bucket),
                )
            )
        return points

    buckets: "OrderedDict[str, list[date]]" = OrderedDict()
    for day in days:
        if mode is TrendMode.WEEKLY:
            iso_year, iso_week, _ = day.isocalendar()
            label = f"{iso_year}-W{iso_week:02d}"
        else:
            label = day.isoformat()
        buckets.setdefault(label, []).append(day)

    by_day = {c.occurred_on: c for c in window}
    points = []
    for label, bucket_days in buckets.items():
        bucket = [by_day[day] for day in bucket_days if day in by_day]
        rate, mood = _bucket_stats(bucket)
        streak = compute_streaks(all_entries, cadence, as_of=bucket_days[-1]).current_streak
        points.append(
            TrendPoint(
                period_label=label,
                completion_rate=rate,
                streak_value=streak,
                average_mood=mood,
                observed=len(bucket),
            )
        )
    return points


def best_days(points: Iterable[TrendPoint], *, top: int = 2) -> list[str]:
    """Return labels of the strongest buckets, skipping buckets without data."""

    ranked = sorted(
        (point for point in points if point.completion_rate is not None),
        key=lambda point: (-point.completion_rate, -point.observed),
    )
    return [point.period_label for point in ranked[:top]]
