from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, field_validator, model_validator

from app.models.attendance import AttendanceStatus


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Stored dates are naive UTC; convert offset-aware input to match."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class RecordFilter(BaseModel):
    """Filter shared by the grade, attendance, stats and report queries.

    Every field is optional; a missing field does not constrain the query.
    The date range is inclusive on both ends.  Offset-aware bounds are
    converted to naive UTC so mixed input compares cleanly.
    """

    class Config:
        frozen = True

    student_id: Optional[str] = None
    subject: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    status: Optional[AttendanceStatus] = None

    @field_validator("start_date", "end_date")
    @classmethod
    def normalize_timezone(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(v)

    @model_validator(mode="after")
    def check_date_range(self):
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("start_date must be on or before end_date")
        return self

    def apply(self, query, model):
        """Add WHERE clauses for the set fields to a query over ``model``.

        ``status`` is only applied to models that have a status column.
        """
        if self.student_id:
            query = query.filter(model.student_id == self.student_id)
        if self.subject:
            query = query.filter(model.subject == self.subject)
        if self.start_date:
            query = query.filter(model.date >= self.start_date)
        if self.end_date:
            query = query.filter(model.date <= self.end_date)
        if self.status and hasattr(model, "status"):
            query = query.filter(model.status == self.status.value)
        return query
