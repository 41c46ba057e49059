"""Command line interface for StreakSage."""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path

import click

from .config import BaseConfig
from .errors import InvalidCadenceError
from .infra.database import load_into_store, open_store
from .logging_config import setup_logging
from .models.cadence import Cadence
from .services.analytics import build_scorecard
from .services.habits import load_habit_analytics
from .services.export_csv import (
    export_json,
    export_leaderboard_csv,
    export_trend_csv,
    leaderboard_row,
    to_jsonable,
)
from .services.import_csv import load_entries_csv, load_habits_csv
from .services.leaderboard import rank_leaderboard
from .services.reports import export_trend_png
from .services.scoring import classify_momentum, compute_consistency, compute_momentum
from .services.streaks import compute_streaks
from .services.trends import TrendMode, compute_trend


def _parse_cadence(ctx, param, value):
    try:
        return Cadence.parse(value)
    except InvalidCadenceError as exc:
        raise click.BadParameter(str(exc)) from exc


def _as_of(value) -> date:
    return value.date() if value is not None else date.today()


entries_argument = click.argument(
    "entries", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
as_of_option = click.option(
    "--as-of", type=click.DateTime(formats=["%Y-%m-%d"]), default=None, help="Evaluation day (default today)"
)
cadence_option = click.option(
    "--cadence",
    default="daily",
    show_default=True,
    callback=_parse_cadence,
    help='"daily", "weekly" or "custom:mon,wed,fri"',
)
habit_option = click.option("--habit-id", type=int, default=None, help="Only use entries for this habit")


def _load(entries: Path, habit_id):
    rows = load_entries_csv(entries)
    if habit_id is not None:
        rows = [row for row in rows if row.habit_id == habit_id]
    return rows


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Habit streak and analytics tools."""

    config = BaseConfig()
    setup_logging(config)
    ctx.obj = config


@cli.command("streaks")
@entries_argument
@cadence_option
@as_of_option
@habit_option
def streaks_command(entries: Path, cadence: Cadence, as_of, habit_id) -> None:
    """Print current/longest streak and run history."""

    summary = compute_streaks(_load(entries, habit_id), cadence, _as_of(as_of), habit_id=habit_id)
    click.echo(json.dumps(to_jsonable(summary), indent=2))


@cli.command("scores")
@entries_argument
@cadence_option
@as_of_option
@habit_option
@click.option("--window", "window_days", type=int, default=None, help="Consistency window in days")
@click.option("--short", "short_window", type=int, default=None, help="Momentum short window in days")
@click.option("--baseline", "baseline_window", type=int, default=None, help="Momentum baseline in days")
@click.pass_obj
def scores_command(
    config: BaseConfig, entries: Path, cadence: Cadence, as_of, habit_id, window_days, short_window, baseline_window
) -> None:
    """Print consistency and momentum scores."""

    rows = _load(entries, habit_id)
    day = _as_of(as_of)
    window_days = window_days or config.CONSISTENCY_WINDOW_DAYS
    short_window = short_window or config.MOMENTUM_SHORT_WINDOW_DAYS
    baseline_window = baseline_window or config.MOMENTUM_BASELINE_WINDOW_DAYS
    try:
        result = {
            "consistency": compute_consistency(rows, cadence, window_days, as_of=day),
            "momentum": compute_momentum(rows, cadence, short_window, baseline_window, as_of=day),
            "momentum_direction": classify_momentum(rows, cadence, short_window, baseline_window, as_of=day),
        }
    except ValueError as exc:
        raise click.UsageError(str(exc)) from exc
    click.echo(json.dumps(to_jsonable(result), indent=2))


@cli.command("trend")
@entries_argument
@cadence_option
@as_of_option
@habit_option
@click.option(
    "--mode",
    type=click.Choice([mode.value for mode in TrendMode]),
    default=TrendMode.DAILY.value,
    show_default=True,
)
@click.option("--lookback", "lookback_days", type=int, default=None, help="Lookback in days (7/30/90)")
@click.option(
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write .csv, .json or .png instead of printing",
)
@click.pass_obj
def trend_command(
    config: BaseConfig, entries: Path, cadence: Cadence, as_of, habit_id, mode, lookback_days, output
) -> None:
    """Bucket entries into a completion trend."""

    try:
        points = compute_trend(
            _load(entries, habit_id),
            mode,
            lookback_days or config.TREND_LOOKBACK_DAYS,
            as_of=_as_of(as_of),
            cadence=cadence,
            week_start=config.WEEK_START,
        )
    except ValueError as exc:
        raise click.UsageError(str(exc)) from exc

    if output is None:
        click.echo(json.dumps(to_jsonable(points), indent=2))
        return
    suffix = output.suffix.lower()
    if suffix == ".csv":
        export_trend_csv(points=points, output_path=output)
    elif suffix == ".png":
        export_trend_png(points=points, output_path=output)
    else:
        export_json(items=points, output_path=output)
    click.echo(f"Trend written: {output}")


@cli.command("leaderboard")
@click.argument("habits", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@entries_argument
@as_of_option
@click.option("--workspace", "workspace_id", type=int, default=None, help="Workspace to rank")
@click.option("--limit", type=int, default=None)
@click.option("--output", type=click.Path(dir_okay=False, path_type=Path), default=None)
@click.pass_obj
def leaderboard_command(config: BaseConfig, habits: Path, entries: Path, as_of, workspace_id, limit, output) -> None:
    """Rank habits by current streak and 30-day completion rate."""

    day = _as_of(as_of)
    all_entries = load_entries_csv(entries)
    by_habit: dict[int, list] = {}
    for entry in all_entries:
        by_habit.setdefault(entry.habit_id, []).append(entry)
    scorecards = [
        build_scorecard(habit, by_habit.get(habit.id, []), as_of=day, config=config)
        for habit in load_habits_csv(habits)
    ]
    ranked = rank_leaderboard(scorecards, workspace_id=workspace_id, limit=limit)

    if output is None:
        for entry in ranked:
            row = leaderboard_row(entry)
            click.echo(
                f"{row['rank']:>3}. {row['habit_name']:<24} streak {row['current_streak']:>4} "
                f"best {row['longest_streak']:>4} rate {row['completion_rate']:>5.1f}%"
            )
        return
    if output.suffix.lower() == ".csv":
        export_leaderboard_csv(entries=ranked, output_path=output)
    else:
        export_json(items=ranked, output_path=output)
    click.echo(f"Leaderboard written: {output}")


@cli.command("import")
@click.argument("habits", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@entries_argument
@click.option("--workspace", "workspace_id", type=int, default=None, help="Store everything in this workspace")
@click.pass_obj
def import_command(config: BaseConfig, habits: Path, entries: Path, workspace_id) -> None:
    """Load habit and entry CSV files into the database."""

    engine, repository = open_store(config)
    try:
        added, saved = load_into_store(
            repository, load_habits_csv(habits), load_entries_csv(entries), workspace_id=workspace_id
        )
    finally:
        engine.dispose()
    click.echo(f"Imported {added} habits and {saved} entries")


@cli.command("analyze")
@click.argument("habit_id", type=int)
@click.option("--workspace", "workspace_id", type=int, default=1, show_default=True)
@as_of_option
@click.option(
    "--mode",
    type=click.Choice([mode.value for mode in TrendMode]),
    default=TrendMode.DAILY.value,
    show_default=True,
)
@click.option("--lookback", "lookback_days", type=int, default=None, help="Trend lookback in days")
@click.pass_obj
def analyze_command(config: BaseConfig, habit_id: int, workspace_id: int, as_of, mode, lookback_days) -> None:
    """Print the full analytics bundle for a stored habit."""

    engine, repository = open_store(config)
    try:
        result = load_habit_analytics(
            repository,
            habit_id,
            workspace_id=workspace_id,
            as_of=_as_of(as_of),
            config=config,
            trend_mode=mode,
            lookback_days=lookback_days,
        )
    except ValueError as exc:
        raise click.UsageError(str(exc)) from exc
    finally:
        engine.dispose()
    if result is None:
        raise click.ClickException(f"Habit {habit_id} not found in workspace {workspace_id}")
    payload = to_jsonable(result)
    payload.update(
        target_progress=result.target_progress,
        difficulty=result.difficulty,
        recommendation=result.recommendation,
    )
    click.echo(json.dumps(payload, indent=2))


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
