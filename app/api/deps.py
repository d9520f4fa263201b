from datetime import datetime
from typing import Optional

from fastapi import Depends, Query
from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.core.errors import INVALID_FILTER, STUDENT_NOT_FOUND, raise_with_code
from app.db.database import get_db
from app.domains.reports.data_source import SqlReportDataSource
from app.domains.reports.services import ReportService
from app.models.attendance import AttendanceStatus
from app.models.student import Student
from app.schemas.filters import RecordFilter


def _build_filter(**fields) -> RecordFilter:
    try:
        return RecordFilter(**fields)
    except ValidationError as exc:
        messages = "; ".join(err["msg"] for err in exc.errors())
        raise_with_code(400, messages, INVALID_FILTER)


def get_record_filter(
    student_id: Optional[str] = Query(None),
    subject: Optional[str] = Query(None),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
) -> RecordFilter:
    """Filter for grade listings (no status)."""
    return _build_filter(
        student_id=student_id, subject=subject, start_date=start_date, end_date=end_date,
    )


def get_attendance_filter(
    student_id: Optional[str] = Query(None),
    subject: Optional[str] = Query(None),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    status: Optional[AttendanceStatus] = Query(None),
) -> RecordFilter:
    """Filter for attendance listings and stats."""
    return _build_filter(
        student_id=student_id, subject=subject, start_date=start_date,
        end_date=end_date, status=status,
    )


def get_report_service(db: Session = Depends(get_db)) -> ReportService:
    return ReportService(SqlReportDataSource(db))


def get_student_or_404(db: Session, student_id: str) -> Student:
    student = db.query(Student).filter(Student.id == student_id).first()
    if not student:
        raise_with_code(404, "Student not found", STUDENT_NOT_FOUND)
    return student


def get_report_range(
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
) -> RecordFilter:
    """Inclusive date range for the student report."""
    return _build_filter(start_date=start_date, end_date=end_date)
