"""Data access layer."""

from .fmp_provider import FMPHistoryProvider
from .normalization import parse_historical_payload
from .providers import HistoryProvider

__all__ = ["FMPHistoryProvider", "HistoryProvider", "parse_historical_payload"]
