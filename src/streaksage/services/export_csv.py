"""CSV and JSON export helpers for trend series and leaderboards."""

from __future__ import annotations

import csv
import json
from dataclasses import asdict, fields, is_dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Any, Iterable

from ..models.analytics import LeaderboardEntry, TrendPoint

TREND_HEADERS = ["period_label", "completion_rate", "streak_value", "average_mood", "observed"]
LEADERBOARD_HEADERS = [
    "rank",
    "habit_id",
    "habit_name",
    "current_streak",
    "longest_streak",
    "completion_rate",
]


def _serialize_value(value):
    if value is None:
        return ""
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def _write_rows(output_path: Path, headers: list[str], rows: Iterable[dict]) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    # Use newline='' for csv on Windows
    with output_path.open("w", newline="", encoding="utf-8") as fh:
        writer = csv.DictWriter(
            fh, fieldnames=headers, extrasaction="ignore", quoting=csv.QUOTE_MINIMAL
        )
        writer.writeheader()
        for row in rows:
            writer.writerow({key: _serialize_value(row.get(key)) for key in headers})
    return output_path


def export_trend_csv(*, points: Iterable[TrendPoint], output_path: Path) -> Path:
    """Write trend points to CSV; empty buckets leave completion_rate blank."""

    return _write_rows(output_path, TREND_HEADERS, (asdict(point) for point in points))


def leaderboard_row(entry: LeaderboardEntry) -> dict[str, Any]:
    return {
        "rank": entry.rank,
        "habit_id": getattr(entry.habit, "id", None),
        "habit_name": getattr(entry.habit, "name", None),
        "current_streak": entry.current_streak,
        "longest_streak": entry.longest_streak,
        "completion_rate": entry.completion_rate,
    }


def export_leaderboard_csv(*, entries: Iterable[LeaderboardEntry], output_path: Path) -> Path:
    """Write leaderboard rows to CSV in rank order."""

    return _write_rows(output_path, LEADERBOARD_HEADERS, (leaderboard_row(e) for e in entries))


def to_jsonable(item: Any) -> Any:
    """Convert analytics value objects into JSON-friendly structures."""

    if isinstance(item, LeaderboardEntry):
        return leaderboard_row(item)
    if is_dataclass(item) and not isinstance(item, type):
        return {f.name: to_jsonable(getattr(item, f.name)) for f in fields(item)}
    if hasattr(item, "model_dump"):
        return to_jsonable(item.model_dump())
    if isinstance(item, (list, tuple)):
        return [to_jsonable(value) for value in item]
    if isinstance(item, dict):
        return {key: to_jsonable(value) for key, value in item.items()}
    if isinstance(item, (date, datetime)):
        return item.isoformat()
    return item


def export_json(*, items: Any, output_path: Path) -> Path:
    """Write analytics results as indented JSON."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(to_jsonable(items), indent=2), encoding="utf-8")
    return output_path
