"""Card view-models for the performance grid.

``build_cards`` is a pure mapping from watch items and their outcomes to
presentation data; ``card_html`` draws one card as an HTML fragment for the
Streamlit layer.
"""

from __future__ import annotations

import html
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal, Union

from ..domain import LOOKBACKS, Lookback, Outcome, PerformanceResult, WatchItem
from ..utils import describe_error

Tone = Literal["positive", "negative", "neutral"]

MISSING_VALUE = "n/a"


@dataclass(frozen=True, slots=True)
class MetricView:
    key: str
    label: str
    text: str
    tone: Tone


@dataclass(frozen=True, slots=True)
class PerformanceCard:
    name: str
    ticker: str
    last_date: str
    latest: float
    metrics: tuple[MetricView, ...]


@dataclass(frozen=True, slots=True)
class ErrorCard:
    name: str
    ticker: str
    message: str


Card = Union[PerformanceCard, ErrorCard]


def format_change(value: float | None) -> tuple[str, Tone]:
    if value is None:
        return MISSING_VALUE, "neutral"
    if value >= 0:
        return f"+{abs(value):.2f}%", "positive"
    return f"{value:.2f}%", "negative"


def performance_card(item: WatchItem, result: PerformanceResult, lookbacks: Sequence[Lookback] = LOOKBACKS) -> PerformanceCard:
    metrics = []
    for lb in lookbacks:
        text, tone = format_change(result.values.get(lb.key))
        metrics.append(MetricView(key=lb.key, label=lb.label, text=text, tone=tone))
    return PerformanceCard(
        name=item.name,
        ticker=item.ticker,
        last_date=result.last_date,
        latest=result.latest,
        metrics=tuple(metrics),
    )


def error_card(item: WatchItem, reason: BaseException) -> ErrorCard:
    return ErrorCard(name=item.name, ticker=item.ticker, message=f"Error: {describe_error(reason)}")


def build_cards(
    items: Sequence[WatchItem],
    outcomes: Sequence[Outcome],
    lookbacks: Sequence[Lookback] = LOOKBACKS,
) -> list[Card]:
    """One card per item, in item order."""
    if len(items) != len(outcomes):
        raise ValueError(f"Expected one outcome per item, got {len(outcomes)} for {len(items)} items")

    cards: list[Card] = []
    for item, outcome in zip(items, outcomes):
        if isinstance(outcome, PerformanceResult):
            cards.append(performance_card(item, outcome, lookbacks))
        else:
            cards.append(error_card(item, outcome))
    return cards


def _head_html(card: Card, aside: str = "") -> str:
    title = f'<div class="title">{html.escape(card.name)}</div><div class="ticker">{html.escape(card.ticker)}</div>'
    return f'<div class="head"><div>{title}</div>{aside}</div>'


def card_html(card: Card) -> str:
    if isinstance(card, ErrorCard):
        return f'<article class="card">{_head_html(card)}<div class="error">{html.escape(card.message)}</div></article>'

    date = f'<div class="date">{html.escape(card.last_date)}</div>'
    blocks = "".join(
        f'<div class="metric"><div class="label">{html.escape(m.label)}</div>'
        f'<div class="value {m.tone}">{html.escape(m.text)}</div></div>'
        for m in card.metrics
    )
    return f'<article class="card">{_head_html(card, date)}<div class="metrics">{blocks}</div></article>'


CARD_CSS = """
<style>
.grid { display: grid; grid-template-columns: repeat(auto-fill, minmax(260px, 1fr)); gap: 1rem; }
.card { border: 1px solid rgba(128, 128, 128, 0.3); border-radius: 10px; padding: 0.9rem 1rem; }
.card .head { display: flex; justify-content: space-between; align-items: flex-start; margin-bottom: 0.6rem; }
.card .title { font-weight: 600; }
.card .ticker, .card .date, .card .error { color: #8a8f98; font-size: 0.85rem; }
.card .metrics { display: grid; grid-template-columns: repeat(2, 1fr); gap: 0.5rem; }
.card .label { color: #8a8f98; font-size: 0.75rem; }
.card .value { font-size: 1.1rem; font-weight: 600; }
.card .positive { color: #16a34a; }
.card .negative { color: #dc2626; }
</style>
"""


def grid_html(cards: Sequence[Card]) -> str:
    return CARD_CSS + '<div class="grid">' + "".join(card_html(card) for card in cards) + "</div>"
