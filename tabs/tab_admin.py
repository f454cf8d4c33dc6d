"""Tab 5: Admin — roster upload, rule configuration and booking cancellation."""

import streamlit as st
import pandas as pd
from loguru import logger

from data.loader import load_file, load_multi_sheet_excel, roster_from_frames
from data.validator import validate_squads, validate_employees, validate_cross_file
from data.sample_data import generate_squads_df, generate_employees_df
from data.session_store import (
    get_booking_store, get_roster, get_rule_config, is_data_loaded,
    reset_rule_config, set_data_loaded, set_roster, set_rule_config,
)
from engine.admission import cancel
from engine.analytics import bookings_to_frame, daily_utilization
from engine.rotation import format_hour
from components.metrics_cards import render_rejection
from components.tables import render_booking_table
from models.booking import Batch
from config.defaults import DEFAULT_RULE_CONFIG, TOTAL_SEATS


def _load_and_validate(squads_df, employees_df):
    """Validate and store an uploaded roster."""
    errors = []
    warnings = []

    for r in [validate_squads(squads_df), validate_employees(employees_df)]:
        errors.extend(r.errors)
        warnings.extend(r.warnings)

    if not errors:
        cross = validate_cross_file(squads_df, employees_df)
        errors.extend(cross.errors)
        warnings.extend(cross.warnings)

    if errors:
        for e in errors:
            st.error(e)
        return False

    for w in warnings:
        st.warning(w)

    roster = roster_from_frames(squads_df, employees_df)
    set_roster(roster)
    set_data_loaded(True)
    logger.info(f"Roster loaded: {len(roster.squads)} squads, {len(roster.employees)} people")

    st.success(f"Roster loaded: {len(roster.squads)} squads, {len(roster.employees)} people")

    # --- Seat supply health check ---
    config = get_rule_config()
    total_seats = config.get("total_seats", TOTAL_SEATS)
    st.divider()
    st.subheader("Roster Health Check")
    cols = st.columns(len(Batch))
    for col, batch in zip(cols, Batch):
        members = roster.members_in_batch(batch)
        col.metric(f"{batch.label} members", members)
        if members > total_seats:
            st.error(
                f"RISK: {batch.label} has {members} members but only {total_seats} seats. "
                f"Scheduled members cannot all be seated."
            )
    return True


def render(sidebar_state):
    """Render the Admin tab."""
    st.header("Admin")

    # --- Roster Upload ---
    st.subheader("Roster Upload")

    upload_mode = st.radio(
        "Upload mode",
        ["Single Excel file (2 tabs)", "Two separate files"],
        horizontal=True,
        key="upload_mode",
    )

    if upload_mode == "Single Excel file (2 tabs)":
        st.caption(
            "Upload one `.xlsx` file with two sheets named **Squads** and **Employees** "
            "(also accepts aliases like 'Teams', 'Users', 'Members')."
        )
        single_file = st.file_uploader("Excel workbook with 2 tabs", type=["xlsx"], key="upload_single")

        col_upload, col_sample = st.columns(2)
        with col_upload:
            if st.button("Upload & Validate", type="primary", key="btn_upload_single"):
                if single_file:
                    try:
                        s_df, e_df = load_multi_sheet_excel(single_file)
                        _load_and_validate(s_df, e_df)
                    except ValueError as e:
                        st.error(f"Error loading file: {e}")
                else:
                    st.warning("Please upload an Excel file.")
        with col_sample:
            if st.button("Load Sample Roster", key="btn_sample_single"):
                _load_and_validate(generate_squads_df(), generate_employees_df())

    else:
        col1, col2 = st.columns(2)
        with col1:
            squads_file = st.file_uploader("Squads", type=["csv", "xlsx"], key="upload_squads")
        with col2:
            employees_file = st.file_uploader("Employees", type=["csv", "xlsx"], key="upload_employees")

        col_upload, col_sample = st.columns(2)
        with col_upload:
            if st.button("Upload & Validate", type="primary", key="btn_upload_multi"):
                if squads_file and employees_file:
                    try:
                        _load_and_validate(load_file(squads_file), load_file(employees_file))
                    except ValueError as e:
                        st.error(f"Error loading files: {e}")
                else:
                    st.warning("Please upload both files.")
        with col_sample:
            if st.button("Load Sample Roster", key="btn_sample_multi"):
                _load_and_validate(generate_squads_df(), generate_employees_df())

    if is_data_loaded():
        roster = get_roster()
        with st.expander("Current roster", expanded=False):
            rows = [{
                "Squad": s.name,
                "Batch": s.batch.label,
                "Members": s.member_count,
                "Max": s.max_members,
                "Full": s.is_full(),
            } for s in sorted(roster.squads.values(), key=lambda s: s.name)]
            st.dataframe(pd.DataFrame(rows), use_container_width=True, hide_index=True)

    st.divider()

    # --- Rule Configuration ---
    st.subheader("Rule Configuration")
    st.caption("Rules apply to every user of this server.")
    config = get_rule_config()

    col1, col2 = st.columns(2)
    with col1:
        total_seats = st.number_input(
            "Total Seats", min_value=1, max_value=TOTAL_SEATS,
            value=config.get("total_seats", TOTAL_SEATS), key="cfg_total_seats",
            help="Seats above the configured floor size cannot be stored.",
        )
        members_per_batch = st.number_input(
            "Guaranteed seats for the scheduled batch", min_value=0, max_value=500,
            value=config.get("members_per_batch", DEFAULT_RULE_CONFIG["members_per_batch"]),
            key="cfg_members_per_batch",
        )
    with col2:
        buffer_hour = st.slider(
            "Buffer window opens at", 0, 23,
            config.get("buffer_window_start_hour", DEFAULT_RULE_CONFIG["buffer_window_start_hour"]),
            format="%d:00", key="cfg_buffer_hour",
        )
        max_weeks = st.slider(
            "Max advance booking (weeks)", 0, 8,
            config.get("max_advance_weeks", DEFAULT_RULE_CONFIG["max_advance_weeks"]),
            key="cfg_max_weeks",
        )

    st.caption(
        f"Buffer pool: {max(int(total_seats) - int(members_per_batch), 0)} base seats, "
        f"bookable from {format_hour(buffer_hour)} for the next day."
    )

    col_save, col_reset = st.columns(2)
    with col_save:
        if st.button("Save Rule Configuration", key="btn_save_rules"):
            new_config = {
                "total_seats": int(total_seats),
                "members_per_batch": int(members_per_batch),
                "buffer_window_start_hour": int(buffer_hour),
                "max_advance_weeks": int(max_weeks),
            }
            set_rule_config(new_config)
            st.success("Rule configuration saved.")
    with col_reset:
        if st.button("Reset to Defaults", key="btn_reset_rules"):
            reset_rule_config()
            st.rerun()

    st.divider()

    # --- Bookings for a day ---
    st.subheader("Manage Bookings")
    store = get_booking_store()
    day = st.date_input("Date", value=sidebar_state.now.date(), key="admin_day")
    stats = daily_utilization(store, day, get_rule_config())
    st.caption(
        f"{stats['booked_seats']} of {stats['total_seats']} seats booked "
        f"({stats['buffer_bookings']} buffer, {stats['released_seats']} released)."
    )
    active = stats["bookings"]
    render_booking_table(bookings_to_frame(active, get_roster()))

    if active:
        labels = {b.booking_id: f"#{b.booking_id} seat {b.seat_number} ({b.user_id})" for b in active}
        booking_id = st.selectbox("Booking", list(labels.keys()), format_func=labels.get, key="admin_cancel_id")
        if st.button("Cancel booking", key="btn_admin_cancel"):
            result = cancel(store, booking_id, sidebar_state.now)
            if result.ok:
                st.success(f"Booking #{booking_id} cancelled.")
                st.rerun()
            else:
                render_rejection(result.rejection)
