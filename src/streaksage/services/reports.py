"""Chart rendering for trend series."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.figure import Figure

from ..models.analytics import TrendPoint


def build_trend_chart(points: Sequence[TrendPoint], *, title: str = "Completion trend") -> Figure:
    """Plot completion rate per bucket with the streak value on a second axis.

    Weekday series (seven buckets labelled by day name) render as bars,
    chronological series as lines. Buckets without data are left as gaps.
    """

    fig, ax = plt.subplots(figsize=(10, 5))
    if not points or all(point.completion_rate is None for point in points):
        ax.text(0.5, 0.5, "No habit data yet", ha="center", va="center", fontsize=14, color="#666")
        ax.axis("off")
        return fig

    labels = [point.period_label for point in points]
    rates = [point.completion_rate if point.completion_rate is not None else float("nan") for point in points]
    positions = range(len(points))

    weekday_series = len(points) == 7 and all(len(label) == 3 for label in labels)
    if weekday_series:
        ax.bar(positions, [0 if r != r else r for r in rates], color="#4F46E5", alpha=0.85)
    else:
        ax.plot(positions, rates, marker="o", linewidth=2, color="#4F46E5", label="Completion %")
        streak_ax = ax.twinx()
        streak_ax.step(
            positions,
            [point.streak_value for point in points],
            where="mid",
            color="#F59E0B",
            label="Streak",
        )
        streak_ax.set_ylabel("Streak", color="#F59E0B")

    ax.set_ylim(0, 105)
    ax.set_ylabel("Completion %")
    ax.set_title(title, fontsize=14, fontweight="bold")
    step = max(1, len(labels) // 12)
    ax.set_xticks(list(positions)[::step])
    ax.set_xticklabels(labels[::step], rotation=45 if not weekday_series else 0, ha="right")
    ax.grid(axis="y", alpha=0.3)
    fig.tight_layout()
    return fig


def export_trend_png(
    *, points: Sequence[TrendPoint], output_path: Path, title: str = "Completion trend"
) -> Path:
    """Render ``points`` and save them as a PNG."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    fig = build_trend_chart(points, title=title)
    try:
        fig.savefig(output_path, bbox_inches="tight", dpi=100)
    finally:
        plt.close(fig)
    return output_path
