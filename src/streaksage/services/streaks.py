"""Streak calculation over a habit's check-in history."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Iterable, Optional, Sequence

from ..logging_config import get_logger
from ..models.analytics import ARCHIVED, FREQUENCY_GAP, MISSED, StreakRun, StreakSummary
from ..models.cadence import Cadence, CadenceChange, cadence_schedule
from .periods import PeriodLedger, iter_periods, normalize_entries, period_end

logger = get_logger("services.streaks")


@dataclass(slots=True)
class _OpenRun:
    start_date: date
    length: int = 0

    def close(self, habit_id, broken_at: date, reason: str) -> StreakRun:
        return StreakRun(
            habit_id=habit_id,
            start_date=self.start_date,
            length=self.length,
            broken_at=broken_at,
            reason=reason,
        )


def _as_date(value: date | datetime | None) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    return value


def compute_streaks(
    entries: Iterable[Any],
    cadence: Cadence | str | Sequence[CadenceChange],
    as_of: Optional[date] = None,
    *,
    habit_id: Optional[int] = None,
    archived_on: date | datetime | None = None,
) -> StreakSummary:
    """Return current/longest streaks and the run history for one habit.

    A period is satisfied by a completed entry. Skipped entries are neutral.
    A missed entry, or an elapsed period with no entry, closes the open run.
    The period containing ``as_of`` is still in progress, so having no entry
    there yet does not break anything. A cadence change in ``cadence``
    closes the open run as a frequency gap, and ``archived_on`` closes it as
    archived.
    """

    as_of = as_of or date.today()
    archived_on = _as_date(archived_on)
    archived = archived_on is not None and archived_on <= as_of
    limit = archived_on if archived else as_of

    schedule = cadence_schedule(cadence)
    check_ins = normalize_entries(entries, until=limit)
    if habit_id is None and check_ins:
        habit_id = check_ins[0].habit_id

    runs: list[StreakRun] = []
    open_run: Optional[_OpenRun] = None
    ignored = 0

    for index, change in enumerate(schedule):
        if change.effective_from > limit:
            break
        if index > 0 and open_run is not None:
            runs.append(open_run.close(habit_id, change.effective_from, FREQUENCY_GAP))
            open_run = None

        if index + 1 < len(schedule):
            segment_end = min(limit, schedule[index + 1].effective_from - timedelta(days=1))
        else:
            segment_end = limit
        segment = [c for c in check_ins if change.effective_from <= c.occurred_on <= segment_end]
        ledger = PeriodLedger(change.cadence, segment)
        ignored += ledger.ignored

        first = ledger.first_satisfied()
        if first is None:
            continue

        for key in iter_periods(change.cadence, first, segment_end):
            status = ledger.get(key)
            if status is not None and status.satisfied:
                if open_run is None:
                    open_run = _OpenRun(start_date=status.completed_on)
                open_run.length += 1
                continue
            if status is not None and status.neutral:
                continue
            if status is None and period_end(change.cadence, key) >= segment_end:
                # Still in progress at the segment's end.
                continue
            if open_run is not None:
                runs.append(open_run.close(habit_id, key, MISSED))
                open_run = None

    current = 0
    if open_run is not None:
        if archived:
            runs.append(open_run.close(habit_id, archived_on, ARCHIVED))
        else:
            runs.append(
                StreakRun(habit_id=habit_id, start_date=open_run.start_date, length=open_run.length)
            )
            current = open_run.length

    longest = max((run.length for run in runs), default=0)
    if ignored:
        logger.debug(
            "Entries outside cadence ignored for streaks",
            extra={"habit_id": habit_id, "ignored": ignored},
        )
    return StreakSummary(
        current_streak=current,
        longest_streak=longest,
        runs=tuple(runs),
        ignored_entries=ignored,
    )
