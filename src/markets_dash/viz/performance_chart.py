"""Plotly figure builders for lookback performance."""

from __future__ import annotations

import pandas as pd
import plotly.graph_objects as go


def make_performance_chart(changes_long: pd.DataFrame, title: str) -> go.Figure:
    """Grouped bars of percent change per ticker, one trace per lookback."""
    fig = go.Figure()

    if changes_long.empty:
        fig.add_annotation(text="No data to display", showarrow=False, x=0.5, y=0.5, xref="paper", yref="paper")
        fig.update_layout(title=title, template="plotly_white")
        return fig

    for lookback, group in changes_long.groupby("lookback", sort=False):
        fig.add_trace(
            go.Bar(
                x=group["ticker"],
                y=group["change_pct"],
                name=str(lookback),
                customdata=group["name"],
                hovertemplate="%{customdata} (%{x})<br>%{y:+.2f}%<extra>" + str(lookback) + "</extra>",
            )
        )

    fig.update_layout(
        title=title,
        barmode="group",
        xaxis_title="Ticker",
        yaxis_title="Change (%)",
        hovermode="closest",
        template="plotly_white",
        legend_title="Lookback",
    )
    fig.add_hline(y=0, line_width=1, line_color="gray")

    return fig
