from app.schemas.student import StudentCreate, StudentUpdate, StudentResponse
from app.schemas.grading import GradeCreate, GradeUpdate, GradeResponse, GradeConfigUpsert, GradeConfigResponse
from app.schemas.attendance import AttendanceCreate, AttendanceUpdate, AttendanceResponse
from app.schemas.filters import RecordFilter
from app.schemas.report import (
    GradeRecord, GradeConfigRecord, AttendanceRecord,
    SubjectReport, OverallReport, StudentReportResponse,
)

__all__ = [
    "StudentCreate", "StudentUpdate", "StudentResponse",
    "GradeCreate", "GradeUpdate", "GradeResponse", "GradeConfigUpsert", "GradeConfigResponse",
    "AttendanceCreate", "AttendanceUpdate", "AttendanceResponse",
    "RecordFilter",
    "GradeRecord", "GradeConfigRecord", "AttendanceRecord",
    "SubjectReport", "OverallReport", "StudentReportResponse",
]
