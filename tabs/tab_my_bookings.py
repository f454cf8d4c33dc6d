"""Tab 3: My Bookings — upcoming seats, releases and personal history."""

import streamlit as st
from datetime import timedelta

from data.session_store import get_booking_store, get_rule_config, get_roster, is_data_loaded
from engine.admission import release, release_by_date
from engine.analytics import bookings_to_frame, upcoming_bookings, user_bookings, user_stats
from engine.rotation import multi_week_schedule
from components.metrics_cards import render_metric_row, render_rejection
from components.tables import render_booking_table
from models.booking import BookingStatus


def render(sidebar_state):
    """Render the My Bookings tab."""
    st.header("My Bookings")

    if not is_data_loaded():
        st.info("No roster loaded. Please upload squads and employees in the Admin tab.")
        return
    if sidebar_state.employee_id is None:
        st.info("Select who you are acting as in the sidebar.")
        return

    store = get_booking_store()
    config = get_rule_config()
    now = sidebar_state.now
    user_id = sidebar_state.employee_id

    # --- Stats ---
    stats = user_stats(store, user_id, now)
    render_metric_row([
        {"label": f"Bookings ({stats['period']})", "value": stats["total_bookings"]},
        {"label": "Regular", "value": stats["regular_bookings"]},
        {"label": "Buffer", "value": stats["buffer_bookings"]},
        {"label": "Released", "value": stats["released_bookings"]},
        {"label": "Upcoming", "value": stats["upcoming_bookings"]},
    ])

    st.divider()

    # --- Upcoming ---
    st.subheader("Upcoming")
    upcoming = upcoming_bookings(store, user_id, now.date())
    if not upcoming:
        st.caption("No upcoming bookings.")
    for booking in upcoming:
        col_info, col_action = st.columns([4, 1])
        kind = "buffer" if booking.is_buffer_booking else "regular"
        col_info.write(f"**{booking.booking_date:%a %d %b}** — seat {booking.seat_number} ({kind})")
        if col_action.button("Release", key=f"release_{booking.booking_id}"):
            result = release(store, booking.booking_id, user_id, now)
            if result.ok:
                st.success(f"Released seat {booking.seat_number} on {booking.booking_date:%a %d %b}.")
                st.rerun()
            else:
                render_rejection(result.rejection)

    # --- Release a scheduled day without a booking ---
    if sidebar_state.user_batch is not None:
        st.divider()
        st.subheader("Not coming in?")
        st.caption("Give back your guaranteed seat on a scheduled day so a buffer colleague can use it.")
        horizon = multi_week_schedule(sidebar_state.user_batch, 2, now.date())
        options = [
            d.date for week in horizon for d in week.schedule
            if d.is_user_scheduled and d.date >= now.date()
        ]
        if options:
            day = st.selectbox("Scheduled day", options, format_func=lambda d: f"{d:%a %d %b}", key="release_day")
            if st.button("Release this day", key="btn_release_day"):
                result = release_by_date(store, user_id, sidebar_state.user_batch, day, now, config)
                if result.ok:
                    st.success(f"Your seat on {day:%a %d %b} is now in the buffer pool.")
                else:
                    render_rejection(result.rejection)

    # --- History ---
    st.divider()
    st.subheader("History")
    col1, col2 = st.columns(2)
    with col1:
        status_label = st.selectbox(
            "Status", ["All"] + [s.value for s in BookingStatus], key="my_history_status",
        )
    with col2:
        lookback = st.selectbox("Since", [7, 30, 90], index=1, format_func=lambda d: f"Last {d} days",
                                key="my_history_lookback")
    status = BookingStatus(status_label) if status_label != "All" else None
    history = user_bookings(store, user_id, status=status, start=now.date() - timedelta(days=lookback))
    render_booking_table(bookings_to_frame(history, get_roster()))
