"""SQLModel implementation of Habit repository."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Callable, Optional

from sqlmodel import Session, select

from ...logging_config import get_logger
from ...models.habit import Habit, HabitEntry

logger = get_logger("infra.repositories.habit")


class SQLModelHabitRepository:
    """SQLModel-based habit repository implementation."""

    def __init__(self, session_factory: Callable[[], Session]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_by_id(self, habit_id: int, *, workspace_id: int) -> Optional[Habit]:
        """Retrieve a habit by ID."""
        with self.session_factory() as session:
            obj = session.exec(
                select(Habit).where(Habit.id == habit_id, Habit.workspace_id == workspace_id)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_for_workspace(self, *, workspace_id: int, include_archived: bool = False) -> list[Habit]:
        """List habits in a workspace, optionally including archived ones."""
        with self.session_factory() as session:
            statement = (
                select(Habit).where(Habit.workspace_id == workspace_id).order_by(Habit.id)  # type: ignore
            )
            if not include_archived:
                statement = statement.where(Habit.archived_at == None)  # noqa: E711

            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create(self, habit: Habit, *, workspace_id: int) -> Habit:
        """Create a new habit."""
        with self.session_factory() as session:
            habit.workspace_id = workspace_id
            session.add(habit)
            session.commit()
            session.refresh(habit)
            session.expunge(habit)
            return habit

    def archive(
        self, habit_id: int, *, workspace_id: int, when: Optional[datetime] = None
    ) -> Optional[Habit]:
        """Soft-delete a habit; its entries stay for historical analytics."""
        with self.session_factory() as session:
            habit = session.exec(
                select(Habit).where(Habit.id == habit_id, Habit.workspace_id == workspace_id)
            ).first()
            if habit is None:
                return None
            if habit.archived_at is None:
                when = when or datetime.now(timezone.utc)
                # Stored timestamps must carry a timezone; naive values are taken as UTC.
                habit.archived_at = when if when.tzinfo else when.replace(tzinfo=timezone.utc)
                session.add(habit)
                session.commit()
                session.refresh(habit)
                logger.info("Habit archived", extra={"habit_id": habit_id, "workspace_id": workspace_id})
            session.expunge(habit)
            return habit

    def get_entries_for_habit(
        self, habit_id: int, start_date: date, end_date: date, *, workspace_id: int
    ) -> list[HabitEntry]:
        """Get entries for a habit within a date range."""
        with self.session_factory() as session:
            statement = (
                select(HabitEntry)
                .where(HabitEntry.workspace_id == workspace_id)
                .where(HabitEntry.habit_id == habit_id)
                .where(HabitEntry.occurred_on >= start_date)
                .where(HabitEntry.occurred_on <= end_date)
                .order_by(HabitEntry.occurred_on)  # type: ignore
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def upsert_entry(self, entry: HabitEntry, *, workspace_id: int) -> HabitEntry:
        """Insert or update the single entry for (habit, day)."""
        with self.session_factory() as session:
            entry.workspace_id = workspace_id
            existing = session.exec(
                select(HabitEntry)
                .where(HabitEntry.workspace_id == workspace_id)
                .where(HabitEntry.habit_id == entry.habit_id)
                .where(HabitEntry.occurred_on == entry.occurred_on)
            ).first()

            if existing:
                existing.status = entry.status
                existing.duration_minutes = entry.duration_minutes
                existing.mood = entry.mood
                existing.energy_level = entry.energy_level
                existing.notes = entry.notes
                session.add(existing)
                session.commit()
                session.refresh(existing)
                session.expunge(existing)
                return existing

            session.add(entry)
            session.commit()
            session.refresh(entry)
            session.expunge(entry)
            return entry
