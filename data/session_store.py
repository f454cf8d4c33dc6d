"""Typed wrapper around st.session_state for application data."""

import streamlit as st
from typing import Optional
from datetime import datetime
from loguru import logger
from data.booking_store import BookingStore, InMemoryBookingStore
from data.sql_store import SqlBookingStore
from data.rule_config import RuleConfigStore
from models.squad import Roster
from config.defaults import BOOKING_STORE, DATABASE_URL, DEFAULT_RULE_CONFIG


def initialize_session_state():
    """Initialize all session state keys with defaults."""
    defaults = {
        "roster": Roster(),
        "data_loaded": False,
        "clock_override": None,
        "sidebar_state": {
            "employee_id": None,
            "simulate_clock": False,
        },
    }
    for key, default in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = default


@st.cache_resource
def get_booking_store() -> BookingStore:
    """One booking store shared by every session of this server process."""
    if BOOKING_STORE == "sql":
        logger.info(f"Using SQL booking store at {DATABASE_URL}")
        return SqlBookingStore(database_url=DATABASE_URL)
    logger.info("Using in-memory booking store")
    return InMemoryBookingStore(total_seats=DEFAULT_RULE_CONFIG["total_seats"])


@st.cache_resource
def get_rule_store() -> RuleConfigStore:
    """Admission rules shared by every session, alongside the booking store."""
    return RuleConfigStore()


# --- Getters ---

def get_roster() -> Roster:
    return st.session_state.get("roster", Roster())


def get_rule_config() -> dict:
    return get_rule_store().get()


def is_data_loaded() -> bool:
    return st.session_state.get("data_loaded", False)


def get_clock_override() -> Optional[datetime]:
    return st.session_state.get("clock_override")


def get_now() -> datetime:
    """Wall clock, or the simulated time chosen in the sidebar."""
    return get_clock_override() or datetime.now()


# --- Setters ---

def set_roster(roster: Roster):
    st.session_state["roster"] = roster


def set_data_loaded(loaded: bool):
    st.session_state["data_loaded"] = loaded


def set_rule_config(config: dict):
    get_rule_store().update(config)


def reset_rule_config():
    get_rule_store().reset()


def set_clock_override(now: Optional[datetime]):
    st.session_state["clock_override"] = now
