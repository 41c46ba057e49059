"""CSV ingestion for habit metadata and entry logs."""

from __future__ import annotations

from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional

import pandas as pd

from ..logging_config import get_logger
from ..models.habit import Habit, HabitEntry, HabitStatus

logger = get_logger("services.import_csv")

# Accepted header spellings, lower-cased.
ENTRY_DATE_COLUMNS = ("occurred_on", "date")
STATUS_VALUES = {status.value for status in HabitStatus}


def normalize_frame(*, file_path: Path, encoding: str = "utf-8") -> pd.DataFrame:
    """Load a CSV file into a DataFrame with consistent column casing."""

    frame = pd.read_csv(file_path, encoding=encoding, dtype=str, keep_default_na=False)
    frame.columns = [c.strip().lower() for c in frame.columns]
    return frame


def _optional_int(value: Any, *, low: int | None = None, high: int | None = None) -> Optional[int]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        parsed = int(float(value))
    except (TypeError, ValueError):
        return None
    if (low is not None and parsed < low) or (high is not None and parsed > high):
        return None
    return parsed


def _parse_day(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        return None


def parse_entry_rows(rows: Iterable[Mapping], *, habit_id: Optional[int] = None) -> list[HabitEntry]:
    """Convert dict-like rows into ``HabitEntry`` objects.

    Rows without a readable habit id, date or status are skipped. Mood
    outside 1-5 and energy outside 1-10 are dropped from the row rather than
    rejecting it.
    """

    entries: list[HabitEntry] = []
    skipped = 0
    for row in rows:
        row_habit = habit_id if habit_id is not None else _optional_int(row.get("habit_id"))
        day = None
        for column in ENTRY_DATE_COLUMNS:
            day = _parse_day(row.get(column))
            if day is not None:
                break
        status = str(row.get("status") or HabitStatus.COMPLETED.value).strip().lower()
        if row_habit is None or day is None or status not in STATUS_VALUES:
            skipped += 1
            continue
        notes = row.get("notes")
        entries.append(
            HabitEntry(
                habit_id=row_habit,
                occurred_on=day,
                status=status,
                duration_minutes=_optional_int(row.get("duration_minutes"), low=0),
                mood=_optional_int(row.get("mood"), low=1, high=5),
                energy_level=_optional_int(row.get("energy_level"), low=1, high=10),
                notes=notes.strip() if isinstance(notes, str) and notes.strip() else None,
            )
        )
    if skipped:
        logger.warning("Skipped malformed entry rows", extra={"skipped": skipped})
    return entries


def parse_habit_rows(rows: Iterable[Mapping]) -> list[Habit]:
    """Convert dict-like rows into ``Habit`` objects, skipping rows without an id."""

    habits: list[Habit] = []
    for row in rows:
        habit_id = _optional_int(row.get("id"))
        if habit_id is None:
            continue
        archived_on = _parse_day(row.get("archived_at"))
        created_on = _parse_day(row.get("created_on"))
        habits.append(
            Habit(
                id=habit_id,
                workspace_id=_optional_int(row.get("workspace_id")) or 1,
                name=(row.get("name") or f"Habit {habit_id}").strip(),
                frequency=(row.get("frequency") or "daily").strip().lower(),
                custom_days=(row.get("custom_days") or "").strip().lower(),
                target_streak=_optional_int(row.get("target_streak"), low=1),
                created_on=created_on or date.min,
                archived_at=(
                    datetime.combine(archived_on, datetime.min.time(), tzinfo=timezone.utc)
                    if archived_on
                    else None
                ),
            )
        )
    return habits


def load_entries_csv(file_path: Path, *, habit_id: Optional[int] = None) -> list[HabitEntry]:
    """Read an entry log CSV (habit_id, occurred_on/date, status, mood, ...)."""

    frame = normalize_frame(file_path=file_path)
    return parse_entry_rows(frame.to_dict(orient="records"), habit_id=habit_id)


def load_habits_csv(file_path: Path) -> list[Habit]:
    """Read habit metadata CSV (id, name, frequency, custom_days, archived_at, ...)."""

    frame = normalize_frame(file_path=file_path)
    return parse_habit_rows(frame.to_dict(orient="records"))
