"""Normalize FMP payloads into a canonical series."""

from __future__ import annotations

import math
from collections.abc import Iterable
from typing import Any

from ..domain import HistoricalPoint, HistoricalSeries
from ..utils import DataError


def parse_historical_payload(payload: Any, ticker: str) -> HistoricalSeries:
    """Convert a ``historical-price-full`` body into a most-recent-first series.

    Entries without a date or a finite numeric close are skipped. Order is kept
    as delivered by the API, which lists the latest session first.
    """
    if not isinstance(payload, dict):
        raise DataError(f"Unexpected response for {ticker}: expected a JSON object")

    raw = payload.get("historical")
    if not raw or not isinstance(raw, list):
        raise DataError(f"No historical data for {ticker}")

    series = tuple(_iter_points(raw))
    if not series:
        raise DataError(f"No usable historical data for {ticker}")
    return series


def _iter_points(entries: Iterable[Any]) -> Iterable[HistoricalPoint]:
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        date = entry.get("date")
        close = entry.get("close")
        if not date or isinstance(close, bool) or not isinstance(close, (int, float)):
            continue
        if not math.isfinite(close):
            continue
        yield HistoricalPoint(date=str(date), close=float(close))

