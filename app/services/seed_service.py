"""Seed the database with a small demo school.

Only runs if the students table has no rows (idempotent).  Grade,
attendance and fee entries in the seed file reference students by
``student_number`` and carry day offsets (``days_ago``, or ``due_in_days``
for fees) instead of fixed dates, so the demo data always looks recent.
"""

import json
import logging
from datetime import date, datetime, timedelta
from pathlib import Path

from sqlalchemy.orm import Session

from app.models.attendance import Attendance
from app.models.fee import Fee
from app.models.grading import GradeConfig, Grading
from app.models.student import Student

logger = logging.getLogger(__name__)

_DATE_FIELDS = ("date_of_birth", "enrollment_date")

SEED_FILE = Path(__file__).resolve().parent.parent.parent / "data" / "seed" / "demo_school.json"


def _days_ago(now: datetime, days: int) -> datetime:
    return (now - timedelta(days=days)).replace(hour=0, minute=0, second=0, microsecond=0)


def seed_demo_data(db: Session, seed_file: Path = SEED_FILE) -> dict:
    """Import students, grade configs, grades, attendance and fees. Returns row counts."""
    counts = {"students": 0, "grade_configs": 0, "grades": 0, "attendance": 0, "fees": 0}

    existing = db.query(Student).count()
    if existing > 0:
        logger.info(f"students already has {existing} rows, skipping demo seed")
        return counts

    if not seed_file.exists():
        logger.warning(f"Demo seed file not found: {seed_file}")
        return counts

    with open(seed_file, "r", encoding="utf-8") as f:
        data = json.load(f)

    students_by_number: dict[str, Student] = {}
    for entry in data.get("students", []):
        fields = dict(entry)
        for key in _DATE_FIELDS:
            if fields.get(key):
                fields[key] = date.fromisoformat(fields[key])
        student = Student(**fields)
        db.add(student)
        students_by_number[student.student_number] = student
    db.flush()
    counts["students"] = len(students_by_number)

    for entry in data.get("grade_configs", []):
        fields = {k: v for k, v in entry.items() if k != "grading_scale"}
        scale = entry["grading_scale"]
        # Seed file uses {"A": 90, ...}; keep its declared order as pairs
        if isinstance(scale, dict):
            scale = [[letter, score] for letter, score in scale.items()]
        db.add(GradeConfig(**fields, grading_scale=json.dumps(scale)))
        counts["grade_configs"] += 1

    now = datetime.utcnow()

    for entry in data.get("grades", []):
        student = students_by_number.get(entry["student_number"])
        if not student:
            logger.warning(f"Seed grade references unknown student {entry['student_number']}")
            continue
        db.add(Grading(
            student_id=student.id,
            subject=entry["subject"],
            assessment_type=entry["assessment_type"],
            score=entry["score"],
            max_score=entry["max_score"],
            weight=entry.get("weight", 1.0),
            date=_days_ago(now, entry.get("days_ago", 0)),
        ))
        counts["grades"] += 1

    for entry in data.get("attendance", []):
        student = students_by_number.get(entry["student_number"])
        if not student:
            logger.warning(f"Seed attendance references unknown student {entry['student_number']}")
            continue
        db.add(Attendance(
            student_id=student.id,
            subject=entry["subject"],
            date=_days_ago(now, entry.get("days_ago", 0)),
            status=entry["status"],
            remarks=entry.get("remarks"),
        ))
        counts["attendance"] += 1

    today = now.date()
    for entry in data.get("fees", []):
        student = students_by_number.get(entry["student_number"])
        if not student:
            logger.warning(f"Seed fee references unknown student {entry['student_number']}")
            continue
        paid_days_ago = entry.get("paid_days_ago")
        db.add(Fee(
            student_id=student.id,
            amount=entry["amount"],
            due_date=today + timedelta(days=entry.get("due_in_days", 0)),
            status=entry.get("status", "PENDING"),
            payment_date=today - timedelta(days=paid_days_ago) if paid_days_ago is not None else None,
            description=entry.get("description"),
        ))
        counts["fees"] += 1

    db.commit()
    logger.info(
        f"Seeded {counts['students']} students, {counts['grade_configs']} grade configs, "
        f"{counts['grades']} grades, {counts['attendance']} attendance rows, {counts['fees']} fees"
    )
    return counts
