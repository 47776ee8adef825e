"""markets_dash package with UI-agnostic logic for the markets dashboard."""

from .config import MarketsConfig, load_config
from .domain import LOOKBACKS, HistoricalPoint, Lookback, PerformanceResult, ViewName, WatchItem

__all__ = [
    "LOOKBACKS",
    "HistoricalPoint",
    "Lookback",
    "MarketsConfig",
    "PerformanceResult",
    "ViewName",
    "WatchItem",
    "load_config",
]
