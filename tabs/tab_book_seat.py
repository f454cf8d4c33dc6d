"""Tab 2: Book a Seat — seat map for a chosen date and the booking action."""

import streamlit as st
from datetime import timedelta

from data.session_store import get_booking_store, get_rule_config, is_data_loaded
from engine.admission import submit
from engine.explainer import explain_buffer_quota
from engine.seat_map import render_seat_map
from components.charts import buffer_quota_waterfall
from components.metrics_cards import render_metric_row, render_rejection
from components.seat_grid import render_seat_grid, render_seat_legend
from config.defaults import MEMBERS_PER_BATCH, TOTAL_SEATS


def render(sidebar_state):
    """Render the Book a Seat tab."""
    st.header("Book a Seat")

    if not is_data_loaded():
        st.info("No roster loaded. Please upload squads and employees in the Admin tab.")
        return
    if sidebar_state.employee_id is None:
        st.info("Select who you are acting as in the sidebar.")
        return

    store = get_booking_store()
    config = get_rule_config()
    now = sidebar_state.now

    default_day = now.date() + timedelta(days=1)
    day = st.date_input("Date", value=default_day, min_value=now.date(), key="book_date")

    view = render_seat_map(store, day, sidebar_state.employee_id, sidebar_state.user_batch, now, config)

    render_metric_row([
        {"label": "Total Seats", "value": view.total_seats},
        {"label": "Booked", "value": view.booked_seats},
        {"label": "Available", "value": view.available_seats},
        {"label": "Buffer Seats Left", "value": view.buffer_quota.available},
    ])

    sched = view.scheduled_batch
    if sched is None:
        st.info("The office is closed at weekends.")
    elif view.is_user_scheduled:
        st.success(f"{sched.label} is scheduled on {day:%A}: you have a guaranteed seat.")
    else:
        st.info(f"{sched.label} is scheduled on {day:%A}. You can only take a buffer seat.")
        if view.buffer_reason:
            st.caption(view.buffer_reason)

    st.divider()
    render_seat_legend()
    clicked = render_seat_grid(view, key_prefix="book")

    col_any, _ = st.columns([1, 3])
    with col_any:
        book_any = st.button("Book any free seat", type="primary", disabled=not view.can_book, key="book_any")

    if clicked is not None or book_any:
        result = submit(store, sidebar_state.employee_id, sidebar_state.user_batch, day, clicked, now, config)
        if result.ok:
            kind = "Buffer seat" if result.booking.is_buffer_booking else "Seat"
            st.success(f"{kind} {result.booking.seat_number} booked for {day:%a %d %b}.")
            st.rerun()
        else:
            render_rejection(result.rejection)

    if sched is not None and not view.is_user_scheduled:
        with st.expander("How buffer seats are counted", expanded=False):
            for step in explain_buffer_quota(
                view.buffer_quota,
                config.get("total_seats", TOTAL_SEATS),
                config.get("members_per_batch", MEMBERS_PER_BATCH),
                sched.label,
            ):
                st.markdown(f"- {step}")
            q = view.buffer_quota
            st.plotly_chart(buffer_quota_waterfall(q.base, q.released, q.used), use_container_width=True)
