"""StreakSage habit analytics package."""

from __future__ import annotations

from .config import BaseConfig
from .services.leaderboard import rank_leaderboard
from .services.scoring import compute_consistency, compute_momentum
from .services.streaks import compute_streaks
from .services.trends import compute_trend

__all__ = [
    "BaseConfig",
    "compute_consistency",
    "compute_momentum",
    "compute_streaks",
    "compute_trend",
    "rank_leaderboard",
]
