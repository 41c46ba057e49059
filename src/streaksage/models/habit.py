"""Habit tracking data structures."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel


class HabitStatus(str, Enum):
    """Outcome recorded for a habit on a calendar day."""

    COMPLETED = "completed"
    SKIPPED = "skipped"
    MISSED = "missed"


class Habit(SQLModel, table=True):
    """A recurring activity a workspace tracks."""

    __tablename__: ClassVar[str] = "habit"

    id: Optional[int] = Field(default=None, primary_key=True)
    workspace_id: int = Field(default=1, nullable=False, index=True)
    name: str = Field(nullable=False, max_length=80, index=True)
    description: str = Field(default="", max_length=255)
    frequency: str = Field(default="daily", max_length=16)
    # Weekday abbreviations ("mon,wed,fri") used when frequency is "custom".
    custom_days: str = Field(default="", max_length=32)
    target_streak: Optional[int] = Field(default=None)
    created_on: date = Field(default_factory=date.today, nullable=False)
    archived_at: Optional[datetime] = Field(default=None, index=True)

    entries: list["HabitEntry"] = Relationship(
        back_populates="habit",
        sa_relationship=relationship("HabitEntry", back_populates="habit"),
    )


class HabitEntry(SQLModel, table=True):
    """One check-in for a habit on a calendar day."""

    __tablename__: ClassVar[str] = "habit_entry"

    habit_id: int = Field(foreign_key="habit.id", primary_key=True)
    occurred_on: date = Field(primary_key=True, index=True)
    workspace_id: int = Field(default=1, nullable=False, index=True)
    status: str = Field(default=HabitStatus.COMPLETED.value, max_length=16, nullable=False)
    duration_minutes: Optional[int] = Field(default=None)
    mood: Optional[int] = Field(default=None)
    energy_level: Optional[int] = Field(default=None)
    notes: Optional[str] = Field(default=None, max_length=500)

    habit: "Habit" = Relationship(
        back_populates="entries",
        sa_relationship=relationship("Habit", back_populates="entries"),
    )
