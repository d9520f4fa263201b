import json
from datetime import datetime
from typing import Any, Optional

from pydantic import Field, field_validator

from app.models.attendance import DayOfWeek
from app.schemas.report import CamelModel


class TimeSlot(CamelModel):
    """One teaching slot and the students placed in it."""
    id: str = Field(min_length=1)
    day: DayOfWeek
    time: str = Field(min_length=1, max_length=50)
    # Student cards as the timetable board sends them (id, name, subject, colours)
    students: list[dict[str, Any]] = []


class TimetableUpdate(CamelModel):
    time_slots: list[TimeSlot]


class TimetableResponse(CamelModel):
    time_slots: list[TimeSlot] = []
    updated_at: Optional[datetime] = None

    @field_validator("time_slots", mode="before")
    @classmethod
    def parse_slots(cls, v):
        return json.loads(v) if isinstance(v, str) else v
