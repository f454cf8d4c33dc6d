"""Styled dataframe display helpers."""

import streamlit as st
import pandas as pd
from typing import Optional

STATUS_STYLES = {
    "active": "background-color: #d4edda; color: #155724; font-weight: bold",
    "released": "background-color: #fff3cd; color: #856404",
    "cancelled": "background-color: #ffcccc; color: #cc0000",
}

UTILIZATION_STYLES = {
    "Saturated": "background-color: #ffcccc; color: #cc0000; font-weight: bold",
    "Healthy": "background-color: #d4edda; color: #155724",
    "Surplus": "background-color: #fff3cd; color: #856404",
}


def render_styled_table(
    df: pd.DataFrame,
    title: Optional[str] = None,
    height: Optional[int] = None,
    use_container_width: bool = True,
):
    """Render a styled, non-editable dataframe."""
    if title:
        st.subheader(title)
    st.dataframe(df, height=height, use_container_width=use_container_width)


def _render_mapped(df: pd.DataFrame, column: str, styles: dict):
    if column in df.columns and not df.empty:
        styled = df.style.map(lambda val: styles.get(val, ""), subset=[column])
        st.dataframe(styled, use_container_width=True)
    else:
        st.dataframe(df, use_container_width=True)


def render_booking_table(df: pd.DataFrame, status_column: str = "Status"):
    """Render bookings with color-coded status."""
    _render_mapped(df, status_column, STATUS_STYLES)


def render_outlook_table(df: pd.DataFrame, status_column: str = "status"):
    """Render the daily outlook with color-coded utilization status."""
    _render_mapped(df, status_column, UTILIZATION_STYLES)
