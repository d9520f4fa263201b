import re
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from app.models.attendance import AttendanceStatus, DayOfWeek
from app.schemas.filters import to_naive_utc

_TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


class AttendanceCreate(BaseModel):
    student_id: str
    subject: str = Field(min_length=1, max_length=100)
    date: datetime
    status: AttendanceStatus
    remarks: Optional[str] = None

    @field_validator("date")
    @classmethod
    def normalize_date(cls, v):
        return to_naive_utc(v)


class AttendanceUpdate(BaseModel):
    subject: Optional[str] = Field(None, min_length=1, max_length=100)
    date: Optional[datetime] = None
    status: Optional[AttendanceStatus] = None
    remarks: Optional[str] = None

    @field_validator("date")
    @classmethod
    def normalize_date(cls, v):
        return to_naive_utc(v)


class AttendanceResponse(BaseModel):
    id: int
    student_id: str
    student_name: Optional[str] = None
    student_number: Optional[str] = None
    subject: str
    date: datetime
    status: str
    remarks: Optional[str]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# --- Bulk marking ---

class BulkAttendanceItem(BaseModel):
    student_id: str
    status: AttendanceStatus
    remarks: Optional[str] = None


class BulkAttendanceRequest(BaseModel):
    date: datetime
    subject: str = Field(min_length=1, max_length=100)
    records: list[BulkAttendanceItem] = Field(max_length=500)

    @field_validator("date")
    @classmethod
    def normalize_date(cls, v):
        return to_naive_utc(v)


class BulkAttendanceError(BaseModel):
    student_id: str
    error: str


class BulkAttendanceResponse(BaseModel):
    success: bool
    processed: int
    created: int
    updated: int
    errors: list[BulkAttendanceError] = []
    message: str


# --- Statistics ---

class AttendanceStatsSummary(BaseModel):
    total: int
    present: int
    absent: int
    late: int
    excused: int
    attendance_rate: float
    unique_students: int
    unique_subjects: int


class MonthlyAttendancePoint(BaseModel):
    month: str  # "Jan".."Dec"
    rate: float
    present: int
    total: int


class SubjectAttendanceStats(BaseModel):
    subject: str
    present: int
    absent: int
    late: int
    excused: int
    total: int
    rate: float


class AttendanceStatsResponse(BaseModel):
    summary: AttendanceStatsSummary
    monthly_trend: list[MonthlyAttendancePoint]
    subject_stats: list[SubjectAttendanceStats]


# --- Schedule config ---

class AttendanceConfigCreate(BaseModel):
    subject: str = Field(min_length=1, max_length=100)
    day_of_week: DayOfWeek
    start_time: str
    end_time: str

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, v: str) -> str:
        if not _TIME_RE.match(v):
            raise ValueError("Time must be in HH:MM format")
        return v

    @model_validator(mode="after")
    def check_order(self):
        if self.start_time >= self.end_time:
            raise ValueError("start_time must be before end_time")
        return self


class AttendanceConfigResponse(BaseModel):
    id: int
    subject: str
    day_of_week: str
    start_time: str
    end_time: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
