"""Builders for entry logs used across tests."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable

from streaksage.models import HabitEntry


def entry(day: date, status: str = "completed", *, habit_id: int = 1, mood: int | None = None) -> HabitEntry:
    """Build an unsaved entry."""

    return HabitEntry(habit_id=habit_id, occurred_on=day, status=status, mood=mood)


def entry_log(start: date, statuses: Iterable[str | None], *, habit_id: int = 1) -> list[HabitEntry]:
    """Build consecutive daily entries from ``start``; ``None`` leaves a day empty."""

    return [
        entry(start + timedelta(days=offset), status, habit_id=habit_id)
        for offset, status in enumerate(statuses)
        if status is not None
    ]
