"""Pytest configuration and shared fixtures for StreakSage tests.

Provides configuration rooted in a temporary directory, an isolated SQLite
database for repository tests, and habit/entry factories.
"""

from __future__ import annotations

import logging
import tempfile
from datetime import date
from pathlib import Path

import pytest
from sqlmodel import Session, SQLModel, create_engine

# Import all models to ensure they're registered with SQLModel metadata
from streaksage.config import BaseConfig
from streaksage.models import Habit, HabitEntry

# =============================================================================
# Configuration
# =============================================================================


@pytest.fixture
def config(tmp_path, monkeypatch) -> BaseConfig:
    """Configuration rooted in a temporary data directory."""

    monkeypatch.setenv("STREAKSAGE_DATA_DIR", str(tmp_path))
    monkeypatch.delenv("STREAKSAGE_DATABASE_URL", raising=False)
    monkeypatch.setenv("STREAKSAGE_DEV_MODE", "true")
    return BaseConfig()


@pytest.fixture
def prod_config(tmp_path, monkeypatch) -> BaseConfig:
    """Production-mode configuration (errors are logged, not raised)."""

    monkeypatch.setenv("STREAKSAGE_DATA_DIR", str(tmp_path))
    monkeypatch.delenv("STREAKSAGE_DATABASE_URL", raising=False)
    monkeypatch.setenv("STREAKSAGE_DEV_MODE", "false")
    return BaseConfig()


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database for each test.

    Yields:
        Engine: SQLModel engine connected to test database
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def db_session(db_engine):
    """Create a database session for a single test."""
    session = Session(db_engine, expire_on_commit=False)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory for repositories that expect Callable[[], Session]."""

    def factory():
        return Session(db_engine, expire_on_commit=False)

    return factory


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def habit_factory(db_session):
    """Factory for creating persisted test habits.

    Returns:
        Callable: Function that creates and persists Habit instances
    """

    def _create_habit(
        name: str = "Test Habit",
        frequency: str = "daily",
        custom_days: str = "",
        workspace_id: int = 1,
        target_streak: int | None = None,
        created_on: date = date(2024, 1, 1),
    ) -> Habit:
        habit = Habit(
            workspace_id=workspace_id,
            name=name,
            frequency=frequency,
            custom_days=custom_days,
            target_streak=target_streak,
            created_on=created_on,
        )
        db_session.add(habit)
        db_session.commit()
        db_session.refresh(habit)
        return habit

    return _create_habit


@pytest.fixture
def entry_factory(db_session):
    """Factory for creating persisted habit entries."""

    def _create_entry(
        habit: Habit,
        occurred_on: date,
        status: str = "completed",
        mood: int | None = None,
    ) -> HabitEntry:
        entry = HabitEntry(
            habit_id=habit.id,
            workspace_id=habit.workspace_id,
            occurred_on=occurred_on,
            status=status,
            mood=mood,
        )
        db_session.add(entry)
        db_session.commit()
        return entry

    return _create_entry



@pytest.fixture(autouse=True)
def reset_streaksage_logger():
    """Drop handlers installed by setup_logging so log files in tmp dirs are closed."""

    yield
    logger = logging.getLogger("streaksage")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
