"""Cadence period math shared by the streak, score and trend services."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Iterable, Iterator, Optional

from ..logging_config import get_logger
from ..models.cadence import WEEKLY, Cadence
from ..models.habit import HabitStatus

logger = get_logger("services.periods")

ONE_DAY = timedelta(days=1)


@dataclass(frozen=True, slots=True)
class CheckIn:
    """Normalized view of a habit entry."""

    habit_id: Optional[int]
    occurred_on: date
    status: HabitStatus
    mood: Optional[int] = None


def _coerce_day(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError:
            return None
    return None


def _coerce_status(value: Any) -> Optional[HabitStatus]:
    if isinstance(value, HabitStatus):
        return value
    if isinstance(value, str):
        try:
            return HabitStatus(value.strip().lower())
        except ValueError:
            return None
    return None


def normalize_entries(
    entries: Iterable[Any],
    *,
    since: Optional[date] = None,
    until: Optional[date] = None,
) -> list[CheckIn]:
    """Return entries as ``CheckIn`` rows sorted by date.

    Rows with an unreadable date or status are dropped with a warning. Rows
    outside ``since``..``until`` are dropped silently. When two rows share a
    date the later one in input order wins; the entry store is expected to
    prevent that.
    """

    by_day: dict[date, CheckIn] = {}
    for entry in entries:
        day = _coerce_day(getattr(entry, "occurred_on", None))
        status = _coerce_status(getattr(entry, "status", None))
        if day is None or status is None:
            logger.warning(
                "Dropping unreadable habit entry",
                extra={
                    "habit_id": getattr(entry, "habit_id", None),
                    "occurred_on": getattr(entry, "occurred_on", None),
                    "status": getattr(entry, "status", None),
                },
            )
            continue
        if (since is not None and day < since) or (until is not None and day > until):
            continue
        if day in by_day:
            logger.warning(
                "Duplicate habit entry for one day; keeping the last",
                extra={"habit_id": getattr(entry, "habit_id", None), "occurred_on": day},
            )
        by_day[day] = CheckIn(
            habit_id=getattr(entry, "habit_id", None),
            occurred_on=day,
            status=status,
            mood=getattr(entry, "mood", None),
        )
    return [by_day[day] for day in sorted(by_day)]


def period_key(cadence: Cadence, day: date) -> Optional[date]:
    """Return the date identifying the cadence period containing ``day``.

    Weekly periods are ISO weeks keyed by their Monday. Custom cadences return
    None for weekdays outside the allowed set.
    """

    if cadence.kind == WEEKLY:
        return day - timedelta(days=day.weekday())
    if not cadence.allows(day):
        return None
    return day


def period_end(cadence: Cadence, key: date) -> date:
    if cadence.kind == WEEKLY:
        return key + timedelta(days=6)
    return key


def window_floor(cadence: Cadence, start: date) -> date:
    """Return the first day of the period that ``start`` falls in.

    A window opening mid-week still has to see the whole week's entries, or
    a week completed before the window opened reads as a gap.
    """

    key = period_key(cadence, start)
    return start if key is None else min(key, start)


def next_period(cadence: Cadence, key: date) -> date:
    if cadence.kind == WEEKLY:
        return key + timedelta(days=7)
    candidate = key + ONE_DAY
    while not cadence.allows(candidate):
        candidate += ONE_DAY
    return candidate


def iter_periods(cadence: Cadence, start: date, end: date) -> Iterator[date]:
    """Yield the keys of every period touching ``start``..``end`` in order."""

    key = period_key(cadence, start)
    if key is None:
        key = next_period(cadence, start)
    while key <= end:
        yield key
        key = next_period(cadence, key)


@dataclass(slots=True)
class PeriodStatus:
    """What was logged inside one cadence period."""

    completed_on: Optional[date] = None
    missed_on: Optional[date] = None
    skipped: int = 0

    @property
    def satisfied(self) -> bool:
        return self.completed_on is not None

    @property
    def neutral(self) -> bool:
        # Skip-only periods neither extend nor break a run.
        return self.completed_on is None and self.missed_on is None


class PeriodLedger:
    """Per-period outcome of a habit's check-ins under one cadence."""

    def __init__(self, cadence: Cadence, check_ins: Iterable[CheckIn]):
        self.cadence = cadence
        self.periods: dict[date, PeriodStatus] = {}
        self.ignored = 0
        self.observed = 0
        for check_in in check_ins:
            key = period_key(cadence, check_in.occurred_on)
            if key is None:
                self.ignored += 1
                logger.debug(
                    "Entry outside cadence excluded from period satisfaction",
                    extra={
                        "habit_id": check_in.habit_id,
                        "occurred_on": check_in.occurred_on,
                        "cadence": str(cadence),
                    },
                )
                continue
            self.observed += 1
            status = self.periods.setdefault(key, PeriodStatus())
            day = check_in.occurred_on
            if check_in.status is HabitStatus.COMPLETED:
                if status.completed_on is None or day < status.completed_on:
                    status.completed_on = day
            elif check_in.status is HabitStatus.MISSED:
                if status.missed_on is None or day < status.missed_on:
                    status.missed_on = day
            else:
                status.skipped += 1

    def get(self, key: date) -> Optional[PeriodStatus]:
        return self.periods.get(key)

    def satisfied(self, key: date) -> bool:
        status = self.periods.get(key)
        return status is not None and status.satisfied

    def first_satisfied(self) -> Optional[date]:
        keys = [key for key, status in self.periods.items() if status.satisfied]
        return min(keys) if keys else None

    def required_periods(self, start: date, end: date) -> list[date]:
        """Return periods in ``start``..``end`` that count toward a rate.

        Skip-only periods are left out, as is a final period still in
        progress at ``end`` when nothing has been logged in it yet.
        """

        required: list[date] = []
        for key in iter_periods(self.cadence, start, end):
            status = self.periods.get(key)
            if status is None:
                if period_end(self.cadence, key) >= end:
                    continue
            elif status.neutral:
                continue
            required.append(key)
        return required
