"""Attendance statistics: summary counts, monthly trend, per-subject stats.

The monthly trend buckets by calendar month only, so January of two
different years lands in the same "Jan" bucket.  Narrow the date range in
the filter to get a single-year trend.
"""

from sqlalchemy.orm import Session

from app.models.attendance import Attendance, AttendanceStatus
from app.schemas.filters import RecordFilter

MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

_STATUS_KEYS = {
    AttendanceStatus.PRESENT.value: "present",
    AttendanceStatus.ABSENT.value: "absent",
    AttendanceStatus.LATE.value: "late",
    AttendanceStatus.EXCUSED.value: "excused",
}


def _status_value(status) -> str:
    return status.value if hasattr(status, "value") else str(status)


def compute_attendance_stats(records) -> dict:
    """Aggregate attendance rows (anything with status/date/student_id/subject)."""
    total = len(records)
    counts = {key: 0 for key in _STATUS_KEYS.values()}
    students = set()
    subjects: dict[str, dict] = {}
    months: dict[int, dict] = {}

    for r in records:
        status_key = _STATUS_KEYS.get(_status_value(r.status))
        if status_key:
            counts[status_key] += 1
        students.add(r.student_id)

        if r.subject not in subjects:
            subjects[r.subject] = {"present": 0, "absent": 0, "late": 0, "excused": 0, "total": 0}
        subjects[r.subject]["total"] += 1
        if status_key:
            subjects[r.subject][status_key] += 1

        bucket = months.setdefault(r.date.month, {"present": 0, "total": 0})
        bucket["total"] += 1
        if status_key == "present":
            bucket["present"] += 1

    monthly_trend = [
        {
            "month": MONTHS[month - 1],
            "rate": data["present"] / data["total"] * 100,
            "present": data["present"],
            "total": data["total"],
        }
        for month, data in sorted(months.items())
    ]

    subject_stats = [
        {"subject": subject, **stats, "rate": stats["present"] / stats["total"] * 100}
        for subject, stats in subjects.items()
    ]

    return {
        "summary": {
            "total": total,
            **counts,
            "attendance_rate": (counts["present"] / total * 100) if total else 0.0,
            "unique_students": len(students),
            "unique_subjects": len(subjects),
        },
        "monthly_trend": monthly_trend,
        "subject_stats": subject_stats,
    }


def get_attendance_stats(db: Session, flt: RecordFilter) -> dict:
    """Load attendance rows matching ``flt`` and aggregate them."""
    rows = (
        flt.apply(
            db.query(Attendance.student_id, Attendance.subject, Attendance.date, Attendance.status),
            Attendance,
        )
        .order_by(Attendance.date.asc())
        .all()
    )
    return compute_attendance_stats(rows)
