"""Tab 1: My Schedule — the acting employee's rotation over the coming weeks."""

import streamlit as st
import pandas as pd

from data.session_store import get_rule_config, is_data_loaded
from engine.rotation import multi_week_schedule, rotation_info
from config.defaults import DEFAULT_SCHEDULE_WEEKS


def render(sidebar_state):
    """Render the My Schedule tab."""
    st.header("My Schedule")

    config = get_rule_config()
    info = rotation_info(sidebar_state.now, config)

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Rotation Week", info["rotation_week"])
    today_batch = info["scheduled_batch_today"]
    col2.metric("In Office Today", today_batch.label if today_batch else "Weekend")
    col3.metric("Buffer Window", "Open" if info["can_book_buffer_now"] else f"Opens {info['buffer_booking_time']}")
    col4.metric("Advance Booking", f"{info['max_advance_booking_weeks']} weeks")

    if not is_data_loaded():
        st.info("No roster loaded. Please upload squads and employees in the Admin tab.")
        return

    if sidebar_state.user_batch is None:
        st.warning("You are not assigned to a squad, so you have no scheduled office days.")
        return

    st.divider()

    weeks = st.slider("Weeks to show", 1, 6, DEFAULT_SCHEDULE_WEEKS, key="schedule_weeks")
    schedule = multi_week_schedule(sidebar_state.user_batch, weeks, sidebar_state.now.date())

    for week in schedule:
        st.subheader(f"Week {week.week_number} (rotation week {week.rotation_week})")
        st.caption(f"{week.scheduled_days} office days for {sidebar_state.user_batch.label}")
        rows = [{
            "Date": d.date,
            "Day": d.day_name,
            "In Office": d.scheduled_batch.label if d.scheduled_batch else "—",
            "You": "Scheduled" if d.is_user_scheduled else "Buffer only",
        } for d in week.schedule]
        st.dataframe(pd.DataFrame(rows), use_container_width=True, hide_index=True)

    st.caption(
        f"On days you are not scheduled you may take a buffer seat for the next day "
        f"once the window opens at {info['buffer_booking_time']}."
    )
