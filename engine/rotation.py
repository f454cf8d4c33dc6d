"""Two-week batch rotation calendar.

Rotation pattern, repeating every two weeks from the epoch Monday:
  Week 1: BATCH_1 Mon-Wed, BATCH_2 Thu-Fri
  Week 2: BATCH_2 Mon-Wed, BATCH_1 Thu-Fri

Every function here is pure: dates in, values out. Callers pass `now` / `today`
explicitly instead of reading the clock.
"""

from datetime import date, datetime, timedelta
from typing import List, Optional, Union

from models.booking import Batch
from models.schedule import ScheduleDay, WeekSchedule
from config.defaults import (
    ROTATION_EPOCH, BUFFER_WINDOW_START_HOUR,
    MAX_ADVANCE_BOOKING_WEEKS, DEFAULT_SCHEDULE_WEEKS,
)

DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

EARLY_WEEK = (0, 1, 2)  # Mon-Wed
LATE_WEEK = (3, 4)      # Thu-Fri


def to_day(value: Union[date, datetime, str]) -> date:
    """Normalize a date, datetime or ISO string to a calendar day (time discarded)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
        # full timestamps only; anything after the time part must parse too
        return datetime.fromisoformat(text).date()
    raise ValueError(f"Cannot interpret {value!r} as a date")


def week_index(day: date, epoch: date = ROTATION_EPOCH) -> int:
    """Whole weeks between the epoch and `day` (absolute, so symmetric before the epoch)."""
    return abs((day - epoch).days) // 7


def rotation_week(day: date, epoch: date = ROTATION_EPOCH) -> int:
    return 1 if week_index(day, epoch) % 2 == 0 else 2


def is_weekday(day: date) -> bool:
    return day.weekday() < 5


def scheduled_batch(day: date, epoch: date = ROTATION_EPOCH) -> Optional[Batch]:
    """Batch on site for `day`, or None on weekends."""
    weekday = day.weekday()
    if weekday not in EARLY_WEEK and weekday not in LATE_WEEK:
        return None

    early = weekday in EARLY_WEEK
    if rotation_week(day, epoch) == 1:
        return Batch.BATCH_1 if early else Batch.BATCH_2
    return Batch.BATCH_2 if early else Batch.BATCH_1


def is_user_scheduled(user_batch: Optional[Batch], day: date) -> bool:
    return user_batch is not None and user_batch == scheduled_batch(day)


def week_start(day: date) -> date:
    """Monday of the ISO week containing `day`."""
    return day - timedelta(days=day.weekday())


def weekly_schedule(batch: Optional[Batch], anchor: date) -> List[ScheduleDay]:
    """Mon..Fri of the ISO week containing `anchor`, annotated for `batch`."""
    monday = week_start(anchor)
    schedule = []
    for offset in range(5):
        current = monday + timedelta(days=offset)
        sched = scheduled_batch(current)
        schedule.append(ScheduleDay(
            date=current,
            day_name=DAY_NAMES[current.weekday()],
            scheduled_batch=sched,
            is_user_scheduled=batch is not None and batch == sched,
        ))
    return schedule


def multi_week_schedule(
    batch: Optional[Batch],
    weeks: int = DEFAULT_SCHEDULE_WEEKS,
    today: Optional[date] = None,
) -> List[WeekSchedule]:
    """`weeks` consecutive week windows starting with the week containing `today`."""
    if today is None:
        raise ValueError("today is required")
    first_monday = week_start(today)
    schedules = []
    for i in range(max(weeks, 0)):
        monday = first_monday + timedelta(weeks=i)
        schedules.append(WeekSchedule(
            week_number=i + 1,
            rotation_week=rotation_week(monday),
            schedule=weekly_schedule(batch, monday),
        ))
    return schedules


def is_within_advance_window(day: date, max_weeks: int, today: date) -> bool:
    return today <= day <= today + timedelta(days=max_weeks * 7)


def buffer_window_open(now: datetime, start_hour: int = BUFFER_WINDOW_START_HOUR) -> bool:
    return now.hour >= start_hour


def next_buffer_date(now: datetime) -> date:
    """The only date a buffer booking may target at `now`: tomorrow."""
    return now.date() + timedelta(days=1)


def format_hour(hour: int) -> str:
    """15 -> '3:00 PM'."""
    suffix = "AM" if hour < 12 else "PM"
    display = hour % 12 or 12
    return f"{display}:00 {suffix}"


def schedule_check(day: date, user_batch: Optional[Batch], now: datetime,
                   rule_config: Optional[dict] = None) -> dict:
    """Whether `user_batch` is on site for `day`, and which booking path applies."""
    cfg = rule_config or {}
    start_hour = cfg.get("buffer_window_start_hour", BUFFER_WINDOW_START_HOUR)

    sched = scheduled_batch(day)
    is_scheduled = user_batch is not None and user_batch == sched
    return {
        "date": day,
        "day_name": DAY_NAMES[day.weekday()],
        "user_batch": user_batch,
        "scheduled_batch": sched,
        "is_scheduled": is_scheduled,
        "can_book_normally": is_scheduled,
        "can_book_buffer": not is_scheduled and buffer_window_open(now, start_hour),
    }


def rotation_info(now: datetime, rule_config: Optional[dict] = None) -> dict:
    """Snapshot of the rotation state at `now`."""
    cfg = rule_config or {}
    start_hour = cfg.get("buffer_window_start_hour", BUFFER_WINDOW_START_HOUR)
    max_weeks = cfg.get("max_advance_weeks", MAX_ADVANCE_BOOKING_WEEKS)

    today = now.date()
    return {
        "current_date": today,
        "rotation_week": rotation_week(today),
        "scheduled_batch_today": scheduled_batch(today),
        "can_book_buffer_now": buffer_window_open(now, start_hour),
        "next_buffer_date": next_buffer_date(now),
        "buffer_booking_time": format_hour(start_hour),
        "max_advance_booking_weeks": max_weeks,
    }
