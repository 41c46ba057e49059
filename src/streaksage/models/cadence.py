"""Cadence value objects describing when a habit is due."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Sequence

from ..errors import InvalidCadenceError

DAILY = "daily"
WEEKLY = "weekly"
CUSTOM = "custom"

DAY_ABBREVIATIONS = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")


@dataclass(frozen=True, slots=True)
class Cadence:
    """How often a habit is due.

    ``days`` holds Python weekday numbers (Monday=0) and is only meaningful
    for custom cadences.
    """

    kind: str
    days: frozenset[int] = frozenset()

    def __post_init__(self) -> None:
        if self.kind not in (DAILY, WEEKLY, CUSTOM):
            raise InvalidCadenceError(f"Unknown cadence kind: {self.kind!r}")
        if self.kind == CUSTOM:
            if not self.days:
                raise InvalidCadenceError("Custom cadence needs at least one weekday")
            if any(day not in range(7) for day in self.days):
                raise InvalidCadenceError(f"Custom cadence weekdays out of range: {sorted(self.days)}")
        elif self.days:
            raise InvalidCadenceError(f"{self.kind} cadence does not take weekdays")

    @classmethod
    def daily(cls) -> "Cadence":
        return cls(DAILY)

    @classmethod
    def weekly(cls) -> "Cadence":
        return cls(WEEKLY)

    @classmethod
    def custom(cls, days: Iterable[int | str]) -> "Cadence":
        return cls(CUSTOM, frozenset(_parse_day(day) for day in days))

    @classmethod
    def parse(cls, value: "Cadence | str") -> "Cadence":
        """Build a cadence from ``"daily"``, ``"weekly"`` or ``"custom:mon,wed"``."""

        if isinstance(value, Cadence):
            return value
        if not isinstance(value, str):
            raise InvalidCadenceError(f"Cadence must be a string or Cadence, got {type(value).__name__}")
        kind, _, days = value.strip().lower().partition(":")
        if kind == CUSTOM:
            return cls.custom(part for part in days.split(",") if part.strip())
        if days:
            raise InvalidCadenceError(f"Malformed cadence: {value!r}")
        return cls(kind)

    @classmethod
    def for_habit(cls, habit) -> "Cadence":
        """Return the cadence stored on a ``Habit`` row."""

        frequency = (getattr(habit, "frequency", None) or "").strip().lower()
        if frequency == CUSTOM:
            raw_days = getattr(habit, "custom_days", "") or ""
            return cls.custom(part for part in raw_days.split(",") if part.strip())
        return cls.parse(frequency)

    def allows(self, day: date) -> bool:
        """Return True when ``day`` can satisfy this cadence."""

        return self.kind != CUSTOM or day.weekday() in self.days

    def __str__(self) -> str:
        if self.kind == CUSTOM:
            return "custom:" + ",".join(DAY_ABBREVIATIONS[day] for day in sorted(self.days))
        return self.kind


@dataclass(frozen=True, slots=True)
class CadenceChange:
    """A cadence that applies from ``effective_from`` until the next change."""

    effective_from: date
    cadence: Cadence


def _parse_day(value: int | str) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        key = value.strip().lower()[:3]
        if key in DAY_ABBREVIATIONS:
            return DAY_ABBREVIATIONS.index(key)
    raise InvalidCadenceError(f"Unknown weekday: {value!r}")


def cadence_schedule(
    cadence: "Cadence | str | Sequence[CadenceChange]",
) -> list[CadenceChange]:
    """Normalize a cadence or a cadence history into an ordered schedule.

    The first change applies to all history before it as well, so a single
    cadence becomes a one-item schedule starting at ``date.min``.
    """

    if isinstance(cadence, (Cadence, str)):
        return [CadenceChange(date.min, Cadence.parse(cadence))]
    changes = sorted(cadence, key=lambda change: change.effective_from)
    if not changes:
        raise InvalidCadenceError("Cadence history must contain at least one cadence")
    schedule = [CadenceChange(date.min, Cadence.parse(changes[0].cadence))]
    for change in changes[1:]:
        current = Cadence.parse(change.cadence)
        if current == schedule[-1].cadence:
            continue
        schedule.append(CadenceChange(change.effective_from, current))
    return schedule


def cadence_on(cadence: "Cadence | str | Sequence[CadenceChange]", day: date) -> Cadence:
    """Return the cadence in effect on ``day``."""

    schedule = cadence_schedule(cadence)
    effective = schedule[0].cadence
    for change in schedule[1:]:
        if change.effective_from <= day:
            effective = change.cadence
    return effective
