# hms/schemas/schedule.py
from datetime import datetime, time

from pydantic import model_validator

from hms.config.constants import DayOfWeek
from hms.schemas.shared import CamelModel


class ScheduleIn(CamelModel):
    doctor_id: int
    day_of_week: DayOfWeek
    start_time: time
    end_time: time
    is_available: bool = True

    @model_validator(mode="after")
    def _start_before_end(self):
        if self.start_time >= self.end_time:
            raise ValueError("startTime must be before endTime")
        return self


class ScheduleOut(ScheduleIn):
    id: int
    created_at: datetime
    updated_at: datetime
