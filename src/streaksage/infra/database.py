"""Opening the SQLite/SQLModel entry store."""

from __future__ import annotations

from functools import partial
from typing import Iterable, Optional

from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from ..config import BaseConfig
from ..logging_config import get_logger
from ..models.habit import Habit, HabitEntry
from .repositories.habit import SQLModelHabitRepository

logger = get_logger("infra.database")


def open_store(config: Optional[BaseConfig] = None) -> tuple[Engine, SQLModelHabitRepository]:
    """Connect to ``config.DATABASE_URL``, create missing tables and wrap it in a repository.

    The caller owns the engine and should ``dispose()`` it when done.
    """

    config = config or BaseConfig()
    engine = create_engine(config.DATABASE_URL, **config.sqlalchemy_engine_options())
    SQLModel.metadata.create_all(engine, tables=[Habit.__table__, HabitEntry.__table__])
    logger.debug("Entry store ready", extra={"database_url": config.DATABASE_URL})
    return engine, SQLModelHabitRepository(partial(Session, engine, expire_on_commit=False))


def load_into_store(
    repository: SQLModelHabitRepository,
    habits: Iterable[Habit],
    entries: Iterable[HabitEntry],
    *,
    workspace_id: Optional[int] = None,
) -> tuple[int, int]:
    """Save imported habits and entries, correcting entries already stored for a day.

    Habits that already exist keep their stored row. Entries whose habit is
    unknown are skipped. Returns ``(habits_added, entries_saved)``.
    """

    added = 0
    known: dict[int, int] = {}
    for habit in habits:
        target = workspace_id if workspace_id is not None else habit.workspace_id
        existing = repository.get_by_id(habit.id, workspace_id=target)
        if existing is None:
            repository.create(habit, workspace_id=target)
            added += 1
        known[habit.id] = target

    saved = 0
    orphans = 0
    for entry in entries:
        target = known.get(entry.habit_id)
        if target is None:
            orphans += 1
            continue
        repository.upsert_entry(entry, workspace_id=target)
        saved += 1
    if orphans:
        logger.warning("Skipped entries for unknown habits", extra={"skipped": orphans})
    logger.info("Import stored", extra={"habits_added": added, "entries_saved": saved})
    return added, saved
