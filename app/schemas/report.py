import json
from datetime import datetime

from pydantic import BaseModel, field_validator
from pydantic.alias_generators import to_camel

from app.models.attendance import AttendanceStatus


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


# --- Records consumed by the aggregator ---

class GradeScaleEntry(CamelModel):
    letter: str
    min_score: float


def parse_grading_scale(value):
    """Normalize a grading scale into a list of (letter, min_score) entries.

    Accepts a JSON string, a mapping (declared key order is kept), or a list
    of ``[letter, min_score]`` pairs / ``{"letter", "minScore"}`` objects.
    """
    if isinstance(value, str):
        value = json.loads(value)
    if isinstance(value, dict):
        return [{"letter": letter, "min_score": score} for letter, score in value.items()]
    if isinstance(value, list):
        entries = []
        for item in value:
            if isinstance(item, (list, tuple)) and len(item) == 2:
                entries.append({"letter": item[0], "min_score": item[1]})
            else:
                entries.append(item)
        return entries
    return value


class GradeRecord(CamelModel):
    id: int | None = None
    subject: str
    assessment_type: str
    score: float
    max_score: float
    weight: float | None = 1.0
    date: datetime
    remarks: str | None = None


class GradeConfigRecord(CamelModel):
    subject: str
    grading_scale: list[GradeScaleEntry]
    passing_score: float = 60.0
    assignments_weight: float = 0.0
    quizzes_weight: float = 0.0
    projects_weight: float = 0.0
    exams_weight: float = 0.0

    @field_validator("grading_scale", mode="before")
    @classmethod
    def coerce_scale(cls, v):
        return parse_grading_scale(v)


class AttendanceRecord(CamelModel):
    id: int | None = None
    subject: str
    date: datetime
    status: AttendanceStatus
    remarks: str | None = None


# --- Aggregator output ---

class SubjectReport(CamelModel):
    subject: str
    grades: list[GradeRecord]
    grouped_by_assessment_type: dict[str, list[GradeRecord]]
    average: float
    grade_letter: str
    config: GradeConfigRecord | None = None
    total_assessments: int
    last_assessment_date: datetime | None = None


class AttendanceSummary(CamelModel):
    total: int = 0
    present: int = 0
    absent: int = 0
    late: int = 0
    excused: int = 0
    attendance_rate: float = 0.0


class OverallReport(CamelModel):
    subject_reports: list[SubjectReport]
    overall_average: float
    total_subjects: int
    total_assessments: int
    attendance_summary: AttendanceSummary


# --- HTTP response ---

class ReportStudent(CamelModel):
    id: str
    student_number: str
    first_name: str
    last_name: str
    course: str | None = None
    status: str | None = None


class StudentReportResponse(OverallReport):
    student: ReportStudent
    attendance_records: list[AttendanceRecord]
    generated_at: datetime
