"""Calculations over fetched price history."""

from .performance import ShortSeriesPolicy, compute_performance, percent_change, reference_index
from .summary import build_summary, long_form

__all__ = [
    "ShortSeriesPolicy",
    "build_summary",
    "compute_performance",
    "long_form",
    "percent_change",
    "reference_index",
]
