"""Tab 4: Analytics — utilization outlook, squad activity and booking history."""

import streamlit as st
from datetime import timedelta

from data.session_store import get_booking_store, get_rule_config, get_roster, is_data_loaded
from engine.analytics import (
    booking_history, bookings_to_frame, outlook_frame, squad_analytics,
    system_overview, utilization_status, weekly_outlook,
)
from components.charts import squad_bookings_bar, utilization_donut, weekly_utilization_bar
from components.metrics_cards import render_alert_card, render_metric_row
from components.tables import render_booking_table, render_outlook_table
from models.booking import Batch, BookingStatus
from config.defaults import DAY_SATURATION_THRESHOLD


def render(sidebar_state):
    """Render the Analytics tab."""
    st.header("Analytics")

    if not is_data_loaded():
        st.info("No roster loaded. Please upload squads and employees in the Admin tab.")
        return

    store = get_booking_store()
    config = get_rule_config()
    roster = get_roster()
    today = sidebar_state.now.date()

    overview = system_overview(store, roster, today, config)
    system = overview["system"]
    today_stats = overview["today"]

    render_metric_row([
        {"label": "Seats", "value": system["total_seats"]},
        {"label": "Squads", "value": system["total_squads"]},
        {"label": "Employees", "value": system["total_employees"]},
        {"label": "Unassigned", "value": system["unassigned_employees"]},
        {"label": "Booked Today", "value": today_stats["booked_seats"]},
    ])

    st.divider()

    # --- Outlook ---
    outlook = weekly_outlook(store, today, rule_config=config)
    col1, col2 = st.columns([3, 2])
    with col1:
        st.plotly_chart(weekly_utilization_bar(outlook), use_container_width=True)
    with col2:
        st.plotly_chart(
            utilization_donut(today_stats["booked_seats"], today_stats["total_seats"]),
            use_container_width=True,
        )

    saturated = [d for d in outlook if utilization_status(d["utilization_pct"]) == "Saturated"]
    for d in saturated:
        render_alert_card(
            f"{d['day_name']} {d['date']}: {d['utilization_pct']:.0%} of seats booked "
            f"(above {DAY_SATURATION_THRESHOLD:.0%}).",
            level="warning",
        )

    df = outlook_frame(outlook)
    if not df.empty:
        df = df[["date", "day_name", "scheduled_batch", "booked_seats", "buffer_bookings",
                 "released_seats", "available_seats", "utilization_pct", "status"]]
        df["utilization_pct"] = df["utilization_pct"].map(lambda v: f"{v:.0%}")
        render_outlook_table(df)

    st.divider()

    # --- Batches and squads ---
    st.subheader("Squads")
    batch_cols = st.columns(len(overview["batches"]))
    for col, (batch_value, stats) in zip(batch_cols, overview["batches"].items()):
        col.metric(
            Batch(batch_value).label,
            f"{stats['members']} members",
            delta=f"{stats['squads']} squads",
            delta_color="off",
        )
    squads = squad_analytics(store, roster, today)
    if squads:
        st.plotly_chart(squad_bookings_bar(squads), use_container_width=True)

    st.divider()

    # --- Booking history ---
    st.subheader("Booking History")
    col1, col2, col3 = st.columns(3)
    with col1:
        picked = st.date_input(
            "Date range", value=(today - timedelta(days=7), today + timedelta(days=7)),
            key="history_range",
        )
        # Mid-selection the widget holds a single date
        start, end = (picked[0], picked[-1]) if picked else (None, None)
    with col2:
        batch_label = st.selectbox("Batch", ["All"] + [b.value for b in Batch], key="history_batch")
    with col3:
        status_label = st.selectbox("Status", ["All"] + [s.value for s in BookingStatus], key="history_status")

    history = booking_history(
        store,
        start=start,
        end=end,
        batch=Batch(batch_label) if batch_label != "All" else None,
        status=BookingStatus(status_label) if status_label != "All" else None,
    )
    render_booking_table(bookings_to_frame(history, roster))
