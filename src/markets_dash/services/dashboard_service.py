"""Batch fetch orchestration that UI layers call."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

import httpx

from ..analytics.performance import ShortSeriesPolicy, compute_performance
from ..config import MISSING_KEY_MESSAGE, MarketsConfig
from ..data import FMPHistoryProvider, HistoryProvider
from ..domain import LOOKBACKS, Lookback, Outcome, PerformanceResult, ViewName, WatchItem
from ..utils import describe_error
from ..viz.cards import Card, build_cards

logger = logging.getLogger(__name__)

UiState = Literal["idle", "loading"]


async def fetch_ticker_performance(
    provider: HistoryProvider,
    ticker: str,
    lookbacks: Sequence[Lookback] = LOOKBACKS,
    policy: ShortSeriesPolicy = ShortSeriesPolicy.CLAMP,
) -> PerformanceResult:
    """Fetch one ticker's history and compute its lookback changes."""
    series = await provider.fetch_history(ticker)
    return compute_performance(series, lookbacks, policy)


async def fetch_batch(
    provider: HistoryProvider,
    items: Sequence[WatchItem],
    lookbacks: Sequence[Lookback] = LOOKBACKS,
    policy: ShortSeriesPolicy = ShortSeriesPolicy.CLAMP,
    force_refresh: bool = False,
) -> list[Outcome]:
    """Fetch every item concurrently and wait for all of them to settle.

    Outcomes line up with ``items``; a failed fetch yields its exception in
    place of a result and never cancels the others. ``force_refresh`` is
    accepted for callers but there is no cache to bypass.
    """
    logger.info("Fetching %d tickers (force_refresh=%s)", len(items), force_refresh)
    settled = await asyncio.gather(
        *(fetch_ticker_performance(provider, item.ticker, lookbacks, policy) for item in items),
        return_exceptions=True,
    )

    outcomes: list[Outcome] = []
    for item, outcome in zip(items, settled):
        if isinstance(outcome, Exception):
            logger.warning("Fetch failed for %s: %s", item.ticker, describe_error(outcome))
        elif isinstance(outcome, BaseException):
            raise outcome
        outcomes.append(outcome)

    failures = sum(1 for outcome in outcomes if isinstance(outcome, Exception))
    logger.info("Batch settled: %d ok, %d failed", len(outcomes) - failures, failures)
    return outcomes


@dataclass(slots=True)
class BatchReport:
    view: ViewName
    items: tuple[WatchItem, ...] = ()
    outcomes: tuple[Outcome, ...] = ()
    cards: tuple[Card, ...] = ()
    status: str = ""
    generation: int = 0
    updated_at: datetime | None = None

    @property
    def ok(self) -> bool:
        return self.updated_at is not None


class RefreshCoordinator:
    """Keeps only the newest refresh on screen.

    Each refresh takes a generation id from ``begin``. A finished batch is
    applied only if no newer refresh has started since; older batches that
    finish late are dropped.
    """

    def __init__(self) -> None:
        self._generation = 0
        self._applied_generation = 0
        self.current: BatchReport | None = None

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def state(self) -> UiState:
        return "loading" if self._applied_generation < self._generation else "idle"

    def begin(self) -> int:
        self._generation += 1
        return self._generation

    def is_current(self, generation: int) -> bool:
        return generation == self._generation

    def apply(self, generation: int, report: BatchReport) -> bool:
        if not self.is_current(generation):
            logger.info("Dropping stale refresh %d (current is %d)", generation, self._generation)
            return False
        self.current = report
        self._applied_generation = generation
        return True


ProviderFactory = Callable[[MarketsConfig, httpx.AsyncClient], HistoryProvider]


@dataclass(slots=True)
class DashboardService:
    config: MarketsConfig
    lookbacks: tuple[Lookback, ...] = LOOKBACKS
    policy: ShortSeriesPolicy = ShortSeriesPolicy.CLAMP
    provider_factory: ProviderFactory = FMPHistoryProvider
    coordinator: RefreshCoordinator = field(default_factory=RefreshCoordinator)

    def startup_message(self) -> str | None:
        """Message to show before any fetch when the credential is missing."""
        return None if self.config.has_credential else MISSING_KEY_MESSAGE

    async def load(self, view: ViewName, force_refresh: bool = False, generation: int = 0) -> BatchReport:
        """Run one batch for ``view``; failures in the orchestration itself become a status message."""
        items = self.config.watch_list(view)
        try:
            async with httpx.AsyncClient(timeout=self.config.timeout) as client:
                provider = self.provider_factory(self.config, client)
                outcomes = await fetch_batch(provider, items, self.lookbacks, self.policy, force_refresh)
            cards = build_cards(items, outcomes, self.lookbacks)
        except Exception as err:
            logger.exception("Refresh of %s failed", view)
            return BatchReport(view=view, items=items, status=f"Error: {describe_error(err)}", generation=generation)

        updated_at = datetime.now()
        return BatchReport(
            view=view,
            items=items,
            outcomes=tuple(outcomes),
            cards=tuple(cards),
            status=f"Updated: {updated_at:%Y-%m-%d %H:%M:%S}",
            generation=generation,
            updated_at=updated_at,
        )

    async def refresh(self, view: ViewName, force_refresh: bool = False) -> BatchReport | None:
        """Start a new generation, load it, and apply it if still current.

        Returns the applied report, or None when a newer refresh superseded it.
        """
        generation = self.coordinator.begin()
        report = await self.load(view, force_refresh, generation)
        return report if self.coordinator.apply(generation, report) else None
