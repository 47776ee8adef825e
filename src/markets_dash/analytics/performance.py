"""Percent-change metrics over trading-day lookbacks."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from enum import Enum

from ..domain import LOOKBACKS, HistoricalPoint, Lookback, PerformanceResult
from ..utils import DataError

logger = logging.getLogger(__name__)


class ShortSeriesPolicy(str, Enum):
    """What to do when a lookback reaches past the oldest available session.

    ``CLAMP`` compares against the oldest sample instead, so a 1y lookback on a
    200-session series reports the 200-session change. ``OMIT`` leaves the
    lookback out of the result.
    """

    CLAMP = "clamp"
    OMIT = "omit"


def reference_index(days: int, length: int, policy: ShortSeriesPolicy = ShortSeriesPolicy.CLAMP) -> int | None:
    """Index of the close to compare against, or None when the lookback is omitted."""
    if length <= 0:
        raise DataError("No historical data")
    if days < length:
        return days
    if policy is ShortSeriesPolicy.OMIT:
        return None
    return length - 1


def percent_change(latest: float, old: float) -> float:
    """Signed percent change from ``old`` to ``latest``, rounded to two places."""
    if old == 0:
        raise DataError("Reference close is zero; percent change is undefined")
    return round((latest - old) / old * 100, 2)


def compute_performance(
    series: Sequence[HistoricalPoint],
    lookbacks: Iterable[Lookback] = LOOKBACKS,
    policy: ShortSeriesPolicy = ShortSeriesPolicy.CLAMP,
) -> PerformanceResult:
    """Compute lookback changes for a most-recent-first series of closes."""
    if not series:
        raise DataError("No historical data")

    latest = series[0].close
    values: dict[str, float] = {}
    for lookback in lookbacks:
        idx = reference_index(lookback.days, len(series), policy)
        if idx is None:
            continue
        old = series[idx].close
        if old == 0:
            # percent change undefined; leave the lookback out
            logger.debug("Skipping %s: reference close on %s is zero", lookback.key, series[idx].date)
            continue
        values[lookback.key] = percent_change(latest, old)

    return PerformanceResult(latest=latest, values=values, last_date=series[0].date)
