"""Consistency and momentum scores."""

from __future__ import annotations

from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from statistics import fmean, pstdev
from typing import Any, Iterable, Optional

from ..errors import InvalidWindowError, require_window
from ..logging_config import get_logger
from ..models.analytics import ScoreResult
from ..models.cadence import Cadence
from .periods import PeriodLedger, normalize_entries, period_end, window_floor

logger = get_logger("services.scoring")

COMPLETION_WEIGHT = 0.7
STABILITY_WEIGHT = 0.3

BUILDING = "building"
STABLE = "stable"
DECLINING = "declining"


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (2.5 -> 3)."""

    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _clamp(value: int) -> int:
    return max(0, min(100, value))


def stability(positions: list[int], total: int) -> float:
    """Return 0-1 evenness of completions across ``total`` periods.

    Gaps are measured between consecutive completions plus the silence before
    the first and after the last, so a burst followed by nothing scores low.
    Fewer than two completions cannot show a distribution and score 0.
    """

    if len(positions) < 2 or total <= 0:
        return 0.0
    edges = [-1, *positions, total]
    gaps = [after - before for before, after in zip(edges, edges[1:])]
    mean = fmean(gaps)
    variation = pstdev(gaps) / mean
    return 1.0 / (1.0 + variation)


def compute_consistency(
    entries: Iterable[Any],
    cadence: Cadence | str,
    window_days: int = 30,
    *,
    as_of: Optional[date] = None,
    started_on: Optional[date] = None,
) -> ScoreResult:
    """Score how reliably a habit was done over the trailing ``window_days``.

    ``started_on`` trims the window to the habit's creation date so a new
    habit is not penalized for days before it existed.
    """

    require_window(window_days, "window_days")
    cadence = Cadence.parse(cadence)
    as_of = as_of or date.today()
    start = as_of - timedelta(days=window_days - 1)
    if started_on is not None and started_on > start:
        start = started_on
    if start > as_of:
        return ScoreResult(value=0, window_days=window_days, sample_size=0)

    ledger = PeriodLedger(
        cadence, normalize_entries(entries, since=window_floor(cadence, start), until=as_of)
    )
    required = ledger.required_periods(start, as_of)
    if not required or ledger.observed == 0:
        logger.debug(
            "Consistency window has no data",
            extra={"window_days": window_days, "required_periods": len(required)},
        )
        return ScoreResult(value=0, window_days=window_days, sample_size=0)

    positions = [index for index, key in enumerate(required) if ledger.satisfied(key)]
    rate = len(positions) / len(required)
    score = COMPLETION_WEIGHT * rate + STABILITY_WEIGHT * stability(positions, len(required))
    return ScoreResult(
        value=_clamp(round_half_up(100 * score)),
        window_days=window_days,
        sample_size=ledger.observed,
        completion_rate=round(100 * rate, 1),
    )


def _recency_weight(anchor: date, start: date, window_days: int) -> float:
    if window_days == 1:
        return 2.0
    return 1.0 + (anchor - start).days / (window_days - 1)


def compute_momentum(
    entries: Iterable[Any],
    cadence: Cadence | str,
    short_window_days: int = 7,
    baseline_window_days: int = 30,
    *,
    as_of: Optional[date] = None,
) -> ScoreResult:
    """Score the recency-weighted completion rate of the last few days.

    Each required period in the short window is weighted linearly from 1 at
    the window's first day to 2 at ``as_of``. The baseline window only gates
    the result: with nothing logged in it, ``sample_size`` is 0.
    """

    require_window(short_window_days, "short_window_days")
    require_window(baseline_window_days, "baseline_window_days")
    if baseline_window_days < short_window_days:
        raise InvalidWindowError(
            f"baseline_window_days ({baseline_window_days}) is shorter than "
            f"short_window_days ({short_window_days})"
        )
    cadence = Cadence.parse(cadence)
    as_of = as_of or date.today()

    baseline_start = as_of - timedelta(days=baseline_window_days - 1)
    entries = list(entries)
    if not normalize_entries(entries, since=baseline_start, until=as_of):
        return ScoreResult(value=0, window_days=short_window_days, sample_size=0)

    start = as_of - timedelta(days=short_window_days - 1)
    ledger = PeriodLedger(
        cadence, normalize_entries(entries, since=window_floor(cadence, start), until=as_of)
    )
    required = ledger.required_periods(start, as_of)
    if not required:
        return ScoreResult(value=0, window_days=short_window_days, sample_size=0)

    total = 0.0
    achieved = 0.0
    for key in required:
        anchor = min(max(period_end(cadence, key), start), as_of)
        weight = _recency_weight(anchor, start, short_window_days)
        total += weight
        if ledger.satisfied(key):
            achieved += weight
    rate = achieved / total
    return ScoreResult(
        value=_clamp(round_half_up(100 * rate)),
        window_days=short_window_days,
        sample_size=ledger.observed,
        completion_rate=round(100 * rate, 1),
    )


def classify_momentum(
    entries: Iterable[Any],
    cadence: Cadence | str,
    short_window_days: int = 7,
    baseline_window_days: int = 30,
    *,
    as_of: Optional[date] = None,
) -> str:
    """Label momentum as building, stable or declining against the baseline.

    Building means the weighted short-window rate beats the baseline rate by
    more than 20%, declining means it trails by more than 20%.
    """

    entries = list(entries)
    recent = compute_momentum(
        entries, cadence, short_window_days, baseline_window_days, as_of=as_of
    )
    if recent.sample_size == 0:
        return STABLE
    baseline = compute_consistency(entries, cadence, baseline_window_days, as_of=as_of)
    if recent.completion_rate > baseline.completion_rate * 1.2:
        return BUILDING
    if recent.completion_rate < baseline.completion_rate * 0.8:
        return DECLINING
    return STABLE
