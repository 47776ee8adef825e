"""Summary table helpers for lookback performance."""

from __future__ import annotations

from collections.abc import Sequence

import pandas as pd

from ..domain import LOOKBACKS, Lookback, Outcome, PerformanceResult, WatchItem
from ..utils import describe_error

BASE_COLUMNS = ["name", "ticker", "last_date", "latest"]


def summary_columns(lookbacks: Sequence[Lookback] = LOOKBACKS) -> list[str]:
    return BASE_COLUMNS + [lb.key for lb in lookbacks] + ["error"]


def build_summary(
    items: Sequence[WatchItem],
    outcomes: Sequence[Outcome],
    lookbacks: Sequence[Lookback] = LOOKBACKS,
) -> pd.DataFrame:
    """One row per watch item, in watch-list order; failed rows carry the error text."""
    columns = summary_columns(lookbacks)
    if not items:
        return pd.DataFrame(columns=columns)

    rows = []
    for item, outcome in zip(items, outcomes, strict=True):
        row = {"name": item.name, "ticker": item.ticker, "last_date": None, "latest": None, "error": None}
        if isinstance(outcome, PerformanceResult):
            row["last_date"] = outcome.last_date
            row["latest"] = outcome.latest
            for lb in lookbacks:
                row[lb.key] = outcome.values.get(lb.key)
        else:
            row["error"] = describe_error(outcome)
        rows.append(row)

    summary = pd.DataFrame(rows, columns=columns)
    for lb in lookbacks:
        summary[lb.key] = pd.to_numeric(summary[lb.key], errors="coerce")
    return summary


def long_form(summary: pd.DataFrame, lookbacks: Sequence[Lookback] = LOOKBACKS) -> pd.DataFrame:
    """Melt the lookback columns into ``(name, ticker, lookback, change_pct)`` rows for charting."""
    keys = [lb.key for lb in lookbacks]
    if summary.empty:
        return pd.DataFrame(columns=["name", "ticker", "lookback", "change_pct"])

    labels = {lb.key: lb.label for lb in lookbacks}
    melted = summary.melt(id_vars=["name", "ticker"], value_vars=keys, var_name="lookback", value_name="change_pct")
    melted = melted.dropna(subset=["change_pct"])
    melted["lookback"] = melted["lookback"].map(labels)
    return melted.reset_index(drop=True)
