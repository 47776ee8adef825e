"""Presentation helpers that stay independent of the UI toolkit."""

from .cards import Card, ErrorCard, MetricView, PerformanceCard, build_cards, card_html, format_change, grid_html
from .performance_chart import make_performance_chart

__all__ = [
    "Card",
    "ErrorCard",
    "MetricView",
    "PerformanceCard",
    "build_cards",
    "card_html",
    "format_change",
    "grid_html",
    "make_performance_chart",
]
