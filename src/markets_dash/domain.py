"""Domain models for the markets dashboard."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Mapping, Union

ViewName = Literal["sectors", "factors"]
VIEWS: tuple[ViewName, ...] = ("sectors", "factors")


@dataclass(frozen=True, slots=True)
class WatchItem:
    name: str
    ticker: str


@dataclass(frozen=True, slots=True)
class Lookback:
    key: str
    days: int
    label: str

    def __post_init__(self) -> None:
        if self.days < 0:
            raise ValueError(f"Lookback {self.key!r} must have days >= 0, got {self.days}")


# Trading sessions, not calendar days
LOOKBACKS: tuple[Lookback, ...] = (
    Lookback("1d", 1, "1 Day"),
    Lookback("1w", 5, "1 Week"),
    Lookback("1m", 21, "1 Month"),
    Lookback("1y", 252, "1 Year"),
)


@dataclass(frozen=True, slots=True)
class HistoricalPoint:
    date: str
    close: float


# Most-recent-first
HistoricalSeries = tuple[HistoricalPoint, ...]


@dataclass(frozen=True, slots=True)
class PerformanceResult:
    latest: float
    values: Mapping[str, float] = field(default_factory=dict)
    last_date: str = ""


Outcome = Union[PerformanceResult, Exception]
