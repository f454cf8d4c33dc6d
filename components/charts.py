"""Plotly chart builders for the Hybrid Seat Booking platform."""

import plotly.express as px
import plotly.graph_objects as go
import pandas as pd
from typing import List


def weekly_utilization_bar(
    outlook: List[dict],
    title: str = "Seat Utilization Outlook",
) -> go.Figure:
    """Stacked bar of regular vs buffer bookings per day, capped by total seats."""
    df = pd.DataFrame(outlook)
    df["label"] = df["day_name"].str[:3] + " " + df["date"].astype(str)
    fig = px.bar(
        df, x="label", y=["regular_bookings", "buffer_bookings"],
        labels={"value": "Seats", "label": "Day", "variable": ""},
        title=title,
        color_discrete_map={"regular_bookings": "#4A90D9", "buffer_bookings": "#E8734A"},
    )
    if not df.empty:
        fig.add_hline(
            y=int(df["total_seats"].max()), line_dash="dash", line_color="#888888",
            annotation_text="Total seats", annotation_position="top left",
        )
    fig.update_layout(legend_title_text="", height=400, barmode="stack")
    return fig


def utilization_donut(used: int, total: int, title: str = "Today's Utilization") -> go.Figure:
    """Donut chart showing seat utilization for a day."""
    available = max(total - used, 0)
    fig = go.Figure(data=[go.Pie(
        labels=["Booked", "Available"],
        values=[used, available],
        hole=0.6,
        marker_colors=["#E8734A", "#4A90D9"],
        textinfo="percent+label",
    )])
    fig.update_layout(
        title=title,
        height=350,
        showlegend=True,
        annotations=[dict(text=f"{used}/{total}", x=0.5, y=0.5, font_size=16, showarrow=False)],
    )
    return fig


def squad_bookings_bar(squad_stats: List[dict], title: str = "Bookings by Squad (last 7 days)") -> go.Figure:
    """Horizontal bar of recent bookings per squad, coloured by batch."""
    df = pd.DataFrame(squad_stats)
    fig = px.bar(
        df, x="bookings_last_period", y="squad_name",
        orientation="h",
        color="batch",
        title=title,
        labels={"bookings_last_period": "Bookings", "squad_name": "Squad", "batch": "Batch"},
        color_discrete_map={"BATCH_1": "#4A90D9", "BATCH_2": "#E8734A"},
    )
    fig.update_layout(height=max(300, len(df) * 35), yaxis_type="category")
    return fig


def buffer_quota_waterfall(base: int, released: int, used: int) -> go.Figure:
    """Waterfall from base buffer seats to what is still open."""
    fig = go.Figure(go.Waterfall(
        x=["Base", "Released", "Used", "Available"],
        measure=["absolute", "relative", "relative", "total"],
        y=[base, released, -used, 0],
        connector={"line": {"color": "#888888"}},
        increasing={"marker": {"color": "#4A90D9"}},
        decreasing={"marker": {"color": "#E8734A"}},
        totals={"marker": {"color": "#F5C542"}},
    ))
    fig.update_layout(title="Buffer Seat Pool", height=320, showlegend=False)
    return fig
