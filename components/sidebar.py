"""Global sidebar controls for the acting employee and the simulated clock."""

import streamlit as st
from dataclasses import dataclass
from datetime import datetime, time
from typing import Optional
from data.session_store import get_roster, get_clock_override, set_clock_override, is_data_loaded
from engine.rotation import rotation_week, scheduled_batch
from models.booking import Batch


@dataclass
class SidebarState:
    employee_id: Optional[str]
    user_batch: Optional[Batch]
    now: datetime
    is_admin: bool = False


def render_sidebar() -> SidebarState:
    """Render the global sidebar controls and return current state."""
    roster = get_roster()
    with st.sidebar:
        st.title("Hybrid Seat Booking")
        st.divider()

        # Acting employee (no authentication; whoever is selected books)
        employees = sorted(roster.employees.values(), key=lambda e: e.employee_id)
        employee_id = None
        if employees:
            labels = {e.employee_id: f"{e.name} ({e.employee_id})" for e in employees}
            employee_id = st.selectbox(
                "Acting as",
                options=list(labels.keys()),
                format_func=lambda x: labels.get(x, x),
                key="sidebar_employee",
            )

        user_batch = roster.batch_for(employee_id) if employee_id else None
        employee = roster.employees.get(employee_id) if employee_id else None
        if employee:
            st.caption(f"Squad: {employee.squad_name or 'Unassigned'}")
            st.caption(f"Batch: {user_batch.label if user_batch else '—'}")

        st.divider()

        # Simulated clock
        simulate = st.toggle("Simulate clock", value=get_clock_override() is not None, key="sidebar_simulate")
        if simulate:
            current = get_clock_override() or datetime.now().replace(second=0, microsecond=0)
            sim_date = st.date_input("Date", value=current.date(), key="sidebar_sim_date")
            sim_time = st.time_input("Time", value=time(current.hour, current.minute), key="sidebar_sim_time")
            set_clock_override(datetime.combine(sim_date, sim_time))
        else:
            set_clock_override(None)

        now = get_clock_override() or datetime.now()
        today_batch = scheduled_batch(now.date())
        st.caption(f"Now: {now:%a %d %b %Y, %H:%M}")
        st.caption(f"Rotation week {rotation_week(now.date())}, in office: {today_batch.label if today_batch else 'nobody'}")

        st.divider()

        # Data status indicator
        if is_data_loaded():
            st.success("Roster loaded")
        else:
            st.warning("No roster loaded — go to Admin tab")

    return SidebarState(
        employee_id=employee_id,
        user_batch=user_batch,
        now=now,
        is_admin=bool(employee and employee.role == "admin"),
    )
