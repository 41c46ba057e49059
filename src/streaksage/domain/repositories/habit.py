"""Habit repository protocol."""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol

from ...models.habit import Habit, HabitEntry


class HabitRepository(Protocol):
    """Source of habit metadata and entry logs for the analytics services."""

    def get_by_id(self, habit_id: int, *, workspace_id: int) -> Optional[Habit]:
        """Retrieve a habit by ID."""
        ...

    def list_for_workspace(self, *, workspace_id: int, include_archived: bool = False) -> list[Habit]:
        """List habits in a workspace, optionally including archived ones."""
        ...

    def create(self, habit: Habit, *, workspace_id: int) -> Habit:
        """Create a new habit."""
        ...

    def archive(self, habit_id: int, *, workspace_id: int, when: Optional[datetime] = None) -> Optional[Habit]:
        """Soft-delete a habit by stamping ``archived_at``."""
        ...

    def get_entries_for_habit(
        self, habit_id: int, start_date: date, end_date: date, *, workspace_id: int
    ) -> list[HabitEntry]:
        """Get entries for a habit within a date range, oldest first."""
        ...

    def upsert_entry(self, entry: HabitEntry, *, workspace_id: int) -> HabitEntry:
        """Insert an entry or correct the existing one for the same day."""
        ...
