"""Shared fakes and builders for the test suite."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping, Sequence

from markets_dash.domain import HistoricalPoint, HistoricalSeries


def make_series(closes: Sequence[float], start_day: int = 28) -> HistoricalSeries:
    """Most-recent-first series with descending synthetic dates."""
    return tuple(
        HistoricalPoint(date=f"2024-01-{max(start_day - offset, 1):02d}", close=float(close))
        for offset, close in enumerate(closes)
    )


class FakeProvider:
    """In-memory HistoryProvider; values are a series or an exception to raise."""

    def __init__(self, responses: Mapping[str, object], delays: Mapping[str, float] | None = None) -> None:
        self.responses = dict(responses)
        self.delays = dict(delays or {})
        self.calls: list[str] = []

    async def fetch_history(self, ticker: str) -> HistoricalSeries:
        self.calls.append(ticker)
        await asyncio.sleep(self.delays.get(ticker, 0))
        response = self.responses[ticker]
        if isinstance(response, Exception):
            raise response
        return response
