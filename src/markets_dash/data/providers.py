"""Provider protocol for fetching price history."""

from __future__ import annotations

from typing import Protocol

from ..domain import HistoricalSeries


class HistoryProvider(Protocol):
    """Abstraction for historical price sources."""

    async def fetch_history(self, ticker: str) -> HistoricalSeries:
        """Fetch daily closes for one ticker, most recent first."""
        raise NotImplementedError
