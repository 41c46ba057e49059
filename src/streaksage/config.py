"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv()

WEEKDAY_NAMES = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    """Read a positive integer from the environment, falling back to ``default``."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        parsed = int(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc
    if parsed <= 0:
        raise ValueError(f"{name} must be positive, got {parsed}")
    return parsed


def _env_weekday(name: str, default: str) -> int:
    """Return the Python weekday index (Monday=0) named by ``name``."""

    value = (os.getenv(name) or default).strip().lower()
    for index, weekday in enumerate(WEEKDAY_NAMES):
        if len(value) >= 3 and weekday.startswith(value):
            return index
    raise ValueError(f"{name} must name a weekday, got {value!r}")


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "StreakSage"
    DB_FILENAME = "streaksage.db"
    LEADERBOARD_WINDOW_DAYS = 30
    HIGH_CONSISTENCY_THRESHOLD = 80

    def __init__(self) -> None:
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("STREAKSAGE_DEV_MODE", default=True)
        self.DATABASE_URL = os.getenv("STREAKSAGE_DATABASE_URL", self._build_sqlite_url())
        self.CONSISTENCY_WINDOW_DAYS = _env_int("STREAKSAGE_CONSISTENCY_WINDOW", 30)
        self.MOMENTUM_SHORT_WINDOW_DAYS = _env_int("STREAKSAGE_MOMENTUM_SHORT_WINDOW", 7)
        self.MOMENTUM_BASELINE_WINDOW_DAYS = _env_int("STREAKSAGE_MOMENTUM_BASELINE_WINDOW", 30)
        self.TREND_LOOKBACK_DAYS = _env_int("STREAKSAGE_TREND_LOOKBACK", 30)
        self.WEEK_START = _env_weekday("STREAKSAGE_WEEK_START", "sunday")
        if self.MOMENTUM_BASELINE_WINDOW_DAYS < self.MOMENTUM_SHORT_WINDOW_DAYS:
            raise ValueError("Momentum baseline window must not be shorter than the short window.")

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the database and logs live."""

        data_root = os.getenv("STREAKSAGE_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _build_sqlite_url(self) -> str:
        """Construct the default SQLite URL inside ``DATA_DIR``."""

        return f"sqlite:///{self.DATA_DIR / self.DB_FILENAME}"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        if self.DATABASE_URL.startswith("sqlite"):
            return {"connect_args": {"check_same_thread": False}}
        return {}

