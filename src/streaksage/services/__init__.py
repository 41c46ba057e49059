"""Service module exports."""

from . import (
    analytics,
    export_csv,
    habits,
    import_csv,
    leaderboard,
    periods,
    reports,
    scoring,
    streaks,
    trends,
)

__all__ = [
    "analytics",
    "export_csv",
    "habits",
    "import_csv",
    "leaderboard",
    "periods",
    "reports",
    "scoring",
    "streaks",
    "trends",
]
