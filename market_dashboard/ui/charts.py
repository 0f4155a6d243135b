"""Plotly figures and value formatting for indicator updates."""

import numpy as np
import plotly.graph_objects as go

from market_dashboard.indicators.labels import format_tooltip_date
from market_dashboard.models.market_data import Category, ChangeType, IndicatorUpdate


CHANGE_COLORS = {
    ChangeType.POSITIVE: "#10b981",
    ChangeType.NEGATIVE: "#ef4444",
    ChangeType.NEUTRAL: "#6b7280",
}

# Tooltip value style per category
CATEGORY_VALUE_KIND = {
    Category.ECONOMIC: "decimal",
    Category.RATE: "rate",
    Category.SPREAD: "rate",
    Category.BANKING: "currencyTrillions",
    Category.MARKET: "currency",
}


def format_value(value: float | None, kind: str = "currency") -> str:
    """Format a number for tooltips and cards."""
    if value is None or not np.isfinite(value):
        return "N/A"

    if kind == "currency":
        return f"${value:.2f}"
    if kind == "currencyBillions":
        return f"${value:.1f}B"
    if kind == "currencyTrillions":
        return f"${value:.2f}T"
    if kind == "percentage":
        return f"{value:.2f}%"
    if kind == "basisPoints":
        return f"{value:.0f} bps"
    if kind == "rate":
        return f"{value:.3f}%"
    if kind == "index":
        return f"{value:.0f}"
    if kind == "volume":
        for threshold, suffix in ((1e9, "B"), (1e6, "M"), (1e3, "K")):
            if value >= threshold:
                return f"{value / threshold:.1f}{suffix}"
        return f"{value:.0f}"
    return f"{value:.2f}"


def format_change(update: IndicatorUpdate) -> str:
    """Signed change with its unit, e.g. "+3 bps 1D" or "-0.12 MoM"."""
    if update.category in (Category.RATE, Category.SPREAD):
        return f"{update.change:+.0f} bps {update.change_label}"
    if update.category in (Category.MARKET, Category.BANKING):
        return f"{update.change:+.2f}% {update.change_label}"
    return f"{update.change:+.2f} {update.change_label}"


def build_figure(update: IndicatorUpdate, title: str = "", height: int = 260) -> go.Figure:
    """
    Line chart for one indicator.

    The x-axis is positional; tick text comes from the sparse display labels
    and hover text from the full-resolution dates.
    """
    fig = go.Figure()
    if not update.historical_data:
        fig.add_annotation(text="Data unavailable", showarrow=False, font=dict(color="#94a3b8"))
        fig.update_layout(height=height, paper_bgcolor="rgba(0,0,0,0)", plot_bgcolor="rgba(0,0,0,0)")
        return fig

    x = list(range(len(update.historical_data)))
    kind = CATEGORY_VALUE_KIND[update.category]
    hover = [
        f"{format_tooltip_date(d)}: {format_value(v, kind)}"
        for d, v in zip(update.original_dates, update.historical_data)
    ]
    tick_positions = [i for i, label in enumerate(update.dates) if label]
    color = CHANGE_COLORS[update.change_type]

    fig.add_trace(go.Scatter(
        x=x, y=list(update.historical_data),
        mode="lines", line=dict(color=color, width=2),
        text=hover, hovertemplate="%{text}<extra></extra>",
        name=title or update.key,
    ))

    fig.update_layout(
        height=height, margin=dict(l=0, r=10, t=30, b=0),
        paper_bgcolor="rgba(0,0,0,0)", plot_bgcolor="rgba(0,0,0,0)",
        showlegend=False,
        title=dict(text=title, font=dict(size=12, color="#94a3b8"), x=0),
        xaxis=dict(
            tickmode="array",
            tickvals=tick_positions,
            ticktext=[update.dates[i] for i in tick_positions],
            tickfont=dict(color="#64748b", size=10),
            showgrid=False,
        ),
        yaxis=dict(showgrid=True, gridcolor="#1e293b", tickfont=dict(color="#64748b", size=10)),
        hovermode="x unified",
    )
    return fig
