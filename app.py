"""Hybrid Seat Rotation & Booking Platform — Streamlit entry point."""

import streamlit as st
import sys
import os

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from config.logger_config import configure_logging
from components.sidebar import render_sidebar
from data.session_store import initialize_session_state
from tabs import (
    tab_schedule,
    tab_book_seat,
    tab_my_bookings,
    tab_analytics,
    tab_admin,
)


@st.cache_resource
def _init_logging():
    configure_logging()


def main():
    st.set_page_config(
        page_title="Hybrid Seat Booking",
        page_icon="🪑",
        layout="wide",
        initial_sidebar_state="expanded",
    )

    _init_logging()
    initialize_session_state()
    sidebar_state = render_sidebar()

    tab1, tab2, tab3, tab4, tab5 = st.tabs([
        "📅 My Schedule",
        "🪑 Book a Seat",
        "📋 My Bookings",
        "📊 Analytics",
        "⚙️ Admin",
    ])

    with tab1:
        tab_schedule.render(sidebar_state)
    with tab2:
        tab_book_seat.render(sidebar_state)
    with tab3:
        tab_my_bookings.render(sidebar_state)
    with tab4:
        tab_analytics.render(sidebar_state)
    with tab5:
        tab_admin.render(sidebar_state)


if __name__ == "__main__":
    main()
