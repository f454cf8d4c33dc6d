from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from models.booking import Batch


@dataclass
class ScheduleDay:
    date: date
    day_name: str
    scheduled_batch: Optional[Batch]
    is_user_scheduled: bool

    @property
    def can_book_normally(self) -> bool:
        return self.is_user_scheduled

    @property
    def can_book_buffer(self) -> bool:
        return not self.is_user_scheduled


@dataclass
class WeekSchedule:
    week_number: int       # 1-based position in the requested window
    rotation_week: int     # 1 or 2
    schedule: List[ScheduleDay] = field(default_factory=list)

    @property
    def scheduled_days(self) -> int:
        return sum(1 for d in self.schedule if d.is_user_scheduled)
