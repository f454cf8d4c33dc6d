"""Clickable seat grid for a SeatMapView."""

import streamlit as st
from typing import Optional

from models.seat_map import SeatMapView, SeatStatus

SEAT_ICONS = {
    SeatStatus.YOUR_BOOKING: "🟦",
    SeatStatus.FULL: "⬛",
    SeatStatus.BUFFER: "🟨",
    SeatStatus.AVAILABLE: "🟩",
}

SEATS_PER_ROW = 10


def render_seat_legend():
    cols = st.columns(len(SEAT_ICONS))
    labels = {
        SeatStatus.YOUR_BOOKING: "Your booking",
        SeatStatus.FULL: "Taken / unavailable",
        SeatStatus.BUFFER: "Open for buffer",
        SeatStatus.AVAILABLE: "Available",
    }
    for col, (status, icon) in zip(cols, SEAT_ICONS.items()):
        col.caption(f"{icon} {labels[status]}")


def render_seat_grid(view: SeatMapView, key_prefix: str = "seat") -> Optional[int]:
    """Draw the grid; returns the seat clicked this run, if any."""
    clicked = None
    for start in range(0, len(view.seats), SEATS_PER_ROW):
        row = view.seats[start:start + SEATS_PER_ROW]
        cols = st.columns(SEATS_PER_ROW)
        for col, cell in zip(cols, row):
            with col:
                if st.button(
                    f"{SEAT_ICONS[cell.status]} {cell.seat_number}",
                    key=f"{key_prefix}_{view.date}_{cell.seat_number}",
                    disabled=not cell.is_selectable,
                    use_container_width=True,
                ):
                    clicked = cell.seat_number
    return clicked
