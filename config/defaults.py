"""Default configuration constants for the Hybrid Seat Booking platform."""

import os
from datetime import date
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


def _env_int(name: str, default: int, minimum: Optional[int] = None, maximum: Optional[int] = None) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")
    if minimum is not None and value < minimum:
        raise ValueError(f"{name} must be at least {minimum}, got {value}")
    if maximum is not None and value > maximum:
        raise ValueError(f"{name} must be at most {maximum}, got {value}")
    return value


# Seat supply
TOTAL_SEATS = _env_int("TOTAL_SEATS", 50, minimum=1)

# Squad structure (squads are split evenly between the two batches)
TOTAL_SQUADS = _env_int("TOTAL_SQUADS", 10, minimum=1)
MEMBERS_PER_SQUAD = _env_int("MEMBERS_PER_SQUAD", 8, minimum=1)
SQUADS_PER_BATCH = _env_int("SQUADS_PER_BATCH", 5, minimum=1)
MEMBERS_PER_BATCH = MEMBERS_PER_SQUAD * SQUADS_PER_BATCH

# Booking windows
BUFFER_WINDOW_START_HOUR = _env_int("BUFFER_BOOKING_TIME", 15, minimum=0, maximum=23)  # 3:00 PM
MAX_ADVANCE_BOOKING_WEEKS = _env_int("MAX_ADVANCE_BOOKING_WEEKS", 2, minimum=0)

# Rotation epoch: a Monday, first day of rotation week 1
ROTATION_EPOCH = date(2024, 1, 1)

# Schedule / analytics horizons
DEFAULT_SCHEDULE_WEEKS = 2
OUTLOOK_DAYS = 7
STATS_LOOKBACK_DAYS = 30
SQUAD_LOOKBACK_DAYS = 7
HISTORY_LIMIT = 100
UPCOMING_LIMIT = 20

# Utilization alert thresholds
DAY_SATURATION_THRESHOLD = 0.90
DAY_SURPLUS_THRESHOLD = 0.50

# Record store: "memory" or "sql"
BOOKING_STORE = os.environ.get("BOOKING_STORE", "memory")
DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite:///seat_booking.db")

# Logging
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
LOG_FILE = os.environ.get("LOG_FILE", "")

# Roles
ROLE_ADMIN = "admin"
ROLE_EMPLOYEE = "employee"
ROLES = [ROLE_ADMIN, ROLE_EMPLOYEE]

# Rule configuration keys consumed by the engine
DEFAULT_RULE_CONFIG = {
    "total_seats": TOTAL_SEATS,
    "members_per_batch": MEMBERS_PER_BATCH,
    "buffer_window_start_hour": BUFFER_WINDOW_START_HOUR,
    "max_advance_weeks": MAX_ADVANCE_BOOKING_WEEKS,
}
