"""Report domain service - fetches a student's records and aggregates them."""

import logging
from datetime import datetime, timezone
from typing import Optional

from app.domains.reports.aggregator import compute_overall_report
from app.domains.reports.data_source import ReportDataSource
from app.schemas.report import OverallReport, ReportStudent, StudentReportResponse

logger = logging.getLogger(__name__)


class ReportService:
    """Builds student reports from an injected data source."""

    def __init__(self, source: ReportDataSource):
        self.source = source

    def build_overall_report(
        self,
        student_id: str,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> OverallReport:
        grades = self.source.fetch_grades_for_student(student_id, start_date, end_date)
        attendance = self.source.fetch_attendance_for_student(student_id, start_date, end_date)
        configs = self.source.fetch_grade_configs()
        return compute_overall_report(grades, configs, attendance)

    def build_student_report(
        self,
        student,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> StudentReportResponse:
        """Full report payload for a loaded Student row.

        Args:
            student: Student ORM object (or anything with the same attributes)
            start_date: Inclusive lower bound on grade/attendance dates
            end_date: Inclusive upper bound on grade/attendance dates
        """
        grades = self.source.fetch_grades_for_student(student.id, start_date, end_date)
        attendance = self.source.fetch_attendance_for_student(student.id, start_date, end_date)
        configs = self.source.fetch_grade_configs()

        overall = compute_overall_report(grades, configs, attendance)
        logger.info(
            "Report for student %s: %d subject(s), %d assessment(s), %d attendance row(s)",
            student.id, overall.total_subjects, overall.total_assessments, len(attendance),
        )

        return StudentReportResponse(
            **dict(overall),
            student=ReportStudent.model_validate(student),
            attendance_records=list(attendance),
            generated_at=datetime.now(timezone.utc),
        )
