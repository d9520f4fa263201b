import logging

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from app.api.deps import get_attendance_filter, get_student_or_404
from app.core.config import settings
from app.core.errors import (
    ATTENDANCE_CONFIG_NOT_FOUND,
    ATTENDANCE_NOT_FOUND,
    DUPLICATE_ATTENDANCE,
    DUPLICATE_ATTENDANCE_CONFIG,
    raise_with_code,
)
from app.core.rate_limit import limiter
from app.core.utils import clamp_page_size
from app.db.database import get_db
from app.models.attendance import Attendance, AttendanceConfig
from app.models.student import Student
from app.schemas.attendance import (
    AttendanceConfigCreate,
    AttendanceConfigResponse,
    AttendanceCreate,
    AttendanceResponse,
    AttendanceStatsResponse,
    AttendanceUpdate,
    BulkAttendanceRequest,
    BulkAttendanceResponse,
)
from app.schemas.filters import RecordFilter
from app.services.attendance_stats_service import get_attendance_stats

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/attendance", tags=["Attendance"])

_DUPLICATE_DETAIL = "Attendance record already exists for this student, date, and subject"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _attendance_to_response(record: Attendance) -> dict:
    student = record.student
    return {
        "id": record.id,
        "student_id": record.student_id,
        "student_name": student.full_name if student else None,
        "student_number": student.student_number if student else None,
        "subject": record.subject,
        "date": record.date,
        "status": record.status,
        "remarks": record.remarks,
        "created_at": record.created_at,
        "updated_at": record.updated_at,
    }


def _get_record_or_404(db: Session, record_id: int) -> Attendance:
    record = db.query(Attendance).filter(Attendance.id == record_id).first()
    if not record:
        raise_with_code(status.HTTP_404_NOT_FOUND, "Attendance record not found", ATTENDANCE_NOT_FOUND)
    return record


def _find_existing(db: Session, student_id: str, date, subject: str, exclude_id: int | None = None):
    query = db.query(Attendance).filter(
        Attendance.student_id == student_id,
        Attendance.date == date,
        Attendance.subject == subject,
    )
    if exclude_id is not None:
        query = query.filter(Attendance.id != exclude_id)
    return query.first()


def _commit_or_duplicate(db: Session):
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise_with_code(status.HTTP_409_CONFLICT, _DUPLICATE_DETAIL, DUPLICATE_ATTENDANCE)


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

@router.get("/", response_model=list[AttendanceResponse])
def list_attendance(
    flt: RecordFilter = Depends(get_attendance_filter),
    limit: int = Query(100, ge=1),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    """List attendance records, newest first."""
    query = flt.apply(db.query(Attendance).options(selectinload(Attendance.student)), Attendance)
    records = (
        query
        .order_by(Attendance.date.desc(), Attendance.id.desc())
        .offset(offset)
        .limit(clamp_page_size(limit))
        .all()
    )
    return [_attendance_to_response(r) for r in records]


@router.post("/", response_model=AttendanceResponse, status_code=status.HTTP_201_CREATED)
def create_attendance(data: AttendanceCreate, db: Session = Depends(get_db)):
    get_student_or_404(db, data.student_id)

    if _find_existing(db, data.student_id, data.date, data.subject):
        raise_with_code(status.HTTP_409_CONFLICT, _DUPLICATE_DETAIL, DUPLICATE_ATTENDANCE)

    record = Attendance(
        student_id=data.student_id,
        subject=data.subject,
        date=data.date,
        status=data.status.value,
        remarks=data.remarks,
    )
    db.add(record)
    _commit_or_duplicate(db)
    db.refresh(record)
    return _attendance_to_response(record)


@router.put("/{record_id}", response_model=AttendanceResponse)
def update_attendance(record_id: int, update: AttendanceUpdate, db: Session = Depends(get_db)):
    record = _get_record_or_404(db, record_id)
    changes = update.model_dump(exclude_unset=True, exclude_none=True)
    if "status" in changes:
        changes["status"] = changes["status"].value

    new_date = changes.get("date", record.date)
    new_subject = changes.get("subject", record.subject)
    if ("date" in changes or "subject" in changes) and _find_existing(
        db, record.student_id, new_date, new_subject, exclude_id=record.id
    ):
        raise_with_code(status.HTTP_409_CONFLICT, _DUPLICATE_DETAIL, DUPLICATE_ATTENDANCE)

    for field, value in changes.items():
        setattr(record, field, value)

    _commit_or_duplicate(db)
    db.refresh(record)
    return _attendance_to_response(record)


@router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_attendance(record_id: int, db: Session = Depends(get_db)):
    record = _get_record_or_404(db, record_id)
    db.delete(record)
    db.commit()


@router.post("/bulk", response_model=BulkAttendanceResponse)
@limiter.limit(settings.bulk_attendance_rate_limit)
def bulk_attendance(request: Request, payload: BulkAttendanceRequest, db: Session = Depends(get_db)):
    """Mark a whole class for one date and subject.

    Existing marks for the same student/date/subject are updated in place.
    Unknown students are reported in ``errors`` and do not stop the batch.
    """
    student_ids = {item.student_id for item in payload.records}
    known = {
        r[0] for r in db.query(Student.id).filter(Student.id.in_(student_ids)).all()
    } if student_ids else set()

    created = updated = 0
    errors = []

    for item in payload.records:
        if item.student_id not in known:
            errors.append({"student_id": item.student_id, "error": "Student not found"})
            continue

        existing = _find_existing(db, item.student_id, payload.date, payload.subject)
        if existing:
            existing.status = item.status.value
            existing.remarks = item.remarks
            updated += 1
        else:
            db.add(Attendance(
                student_id=item.student_id,
                subject=payload.subject,
                date=payload.date,
                status=item.status.value,
                remarks=item.remarks,
            ))
            # Flush so a repeated student_id in the same batch updates this row
            db.flush()
            created += 1

    db.commit()

    processed = created + updated
    logger.info(
        "Bulk attendance for %s on %s: %d created, %d updated, %d error(s)",
        payload.subject, payload.date.date(), created, updated, len(errors),
    )
    return {
        "success": True,
        "processed": processed,
        "created": created,
        "updated": updated,
        "errors": errors,
        "message": f"Attendance recorded for {processed} students",
    }


# ---------------------------------------------------------------------------
# Statistics
# ---------------------------------------------------------------------------

@router.get("/stats", response_model=AttendanceStatsResponse)
def attendance_stats(
    flt: RecordFilter = Depends(get_attendance_filter),
    db: Session = Depends(get_db),
):
    """Summary counts, monthly trend and per-subject stats for the filter."""
    return get_attendance_stats(db, flt)


# ---------------------------------------------------------------------------
# Schedule configs
# ---------------------------------------------------------------------------

@router.get("/config", response_model=list[AttendanceConfigResponse])
def list_attendance_configs(db: Session = Depends(get_db)):
    return (
        db.query(AttendanceConfig)
        .order_by(AttendanceConfig.subject.asc(), AttendanceConfig.day_of_week.asc())
        .all()
    )


@router.post("/config", response_model=AttendanceConfigResponse, status_code=status.HTTP_201_CREATED)
def create_attendance_config(data: AttendanceConfigCreate, db: Session = Depends(get_db)):
    config = AttendanceConfig(
        subject=data.subject,
        day_of_week=data.day_of_week.value,
        start_time=data.start_time,
        end_time=data.end_time,
    )
    db.add(config)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise_with_code(
            status.HTTP_409_CONFLICT,
            "Configuration already exists for this subject and day",
            DUPLICATE_ATTENDANCE_CONFIG,
        )
    db.refresh(config)
    return config


@router.delete("/config/{config_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_attendance_config(config_id: int, db: Session = Depends(get_db)):
    config = db.query(AttendanceConfig).filter(AttendanceConfig.id == config_id).first()
    if not config:
        raise_with_code(
            status.HTTP_404_NOT_FOUND,
            "Attendance configuration not found",
            ATTENDANCE_CONFIG_NOT_FOUND,
        )
    db.delete(config)
    db.commit()
