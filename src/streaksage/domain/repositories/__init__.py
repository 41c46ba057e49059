"""Repository protocols."""

from .habit import HabitRepository

__all__ = ["HabitRepository"]
