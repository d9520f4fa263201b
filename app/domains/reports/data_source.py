"""Storage access for report generation.

The report service depends on the ``ReportDataSource`` protocol only, so
tests can hand it an in-memory fake instead of a database session.
"""

from datetime import datetime
from typing import Optional, Protocol, Sequence

from sqlalchemy.orm import Session

from app.models.attendance import Attendance
from app.models.grading import GradeConfig, Grading
from app.schemas.filters import RecordFilter
from app.schemas.report import AttendanceRecord, GradeConfigRecord, GradeRecord


class ReportDataSource(Protocol):
    def fetch_grades_for_student(
        self,
        student_id: str,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> Sequence[GradeRecord]:
        """Grades for the student, ordered by date ascending."""
        ...

    def fetch_attendance_for_student(
        self,
        student_id: str,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> Sequence[AttendanceRecord]:
        """Attendance rows for the student, ordered by date ascending."""
        ...

    def fetch_grade_configs(self) -> Sequence[GradeConfigRecord]:
        ...


class SqlReportDataSource:
    """ReportDataSource backed by a SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    def fetch_grades_for_student(self, student_id, start_date=None, end_date=None):
        flt = RecordFilter(student_id=student_id, start_date=start_date, end_date=end_date)
        rows = (
            flt.apply(self.db.query(Grading), Grading)
            .order_by(Grading.date.asc(), Grading.id.asc())
            .all()
        )
        return [GradeRecord.model_validate(row) for row in rows]

    def fetch_attendance_for_student(self, student_id, start_date=None, end_date=None):
        flt = RecordFilter(student_id=student_id, start_date=start_date, end_date=end_date)
        rows = (
            flt.apply(self.db.query(Attendance), Attendance)
            .order_by(Attendance.date.asc(), Attendance.id.asc())
            .all()
        )
        return [AttendanceRecord.model_validate(row) for row in rows]

    def fetch_grade_configs(self):
        rows = self.db.query(GradeConfig).order_by(GradeConfig.subject.asc()).all()
        return [GradeConfigRecord.model_validate(row) for row in rows]
