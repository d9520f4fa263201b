import json
import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session, selectinload

from app.api.deps import get_record_filter, get_report_range, get_report_service, get_student_or_404
from app.core.errors import GRADE_NOT_FOUND, INVALID_GRADE, raise_with_code
from app.core.utils import clamp_page_size
from app.db.database import get_db
from app.domains.reports.aggregator import grade_percentage
from app.domains.reports.services import ReportService
from app.models.grading import GradeConfig, Grading
from app.schemas.filters import RecordFilter
from app.schemas.grading import (
    GradeConfigResponse,
    GradeConfigUpsert,
    GradeCreate,
    GradeResponse,
    GradeUpdate,
)
from app.schemas.report import StudentReportResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/grading", tags=["Grading"])

_REQUIRED_GRADE_FIELDS = ("subject", "assessment_type", "score", "max_score", "date")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _grade_to_response(grade: Grading) -> dict:
    """Convert a Grading row to a response dict with the student's name."""
    return {
        "id": grade.id,
        "student_id": grade.student_id,
        "student_name": grade.student.full_name if grade.student else None,
        "subject": grade.subject,
        "assessment_type": grade.assessment_type,
        "score": grade.score,
        "max_score": grade.max_score,
        "weight": grade.weight,
        "percentage": round(grade_percentage(grade.score, grade.max_score), 2),
        "date": grade.date,
        "remarks": grade.remarks,
        "created_at": grade.created_at,
        "updated_at": grade.updated_at,
    }


def _get_grade_or_404(db: Session, grade_id: int) -> Grading:
    grade = db.query(Grading).filter(Grading.id == grade_id).first()
    if not grade:
        raise_with_code(status.HTTP_404_NOT_FOUND, "Grade not found", GRADE_NOT_FOUND)
    return grade


def _config_to_response(config: GradeConfig) -> GradeConfigResponse:
    return GradeConfigResponse.model_validate(config)


# ---------------------------------------------------------------------------
# Grades
# ---------------------------------------------------------------------------

@router.get("/", response_model=list[GradeResponse])
def list_grades(
    flt: RecordFilter = Depends(get_record_filter),
    limit: int = Query(50, ge=1),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    """List grades, newest first, filtered by student, subject and date range."""
    query = flt.apply(db.query(Grading).options(selectinload(Grading.student)), Grading)
    grades = (
        query
        .order_by(Grading.date.desc(), Grading.id.desc())
        .offset(offset)
        .limit(clamp_page_size(limit))
        .all()
    )
    return [_grade_to_response(g) for g in grades]


@router.post("/", response_model=GradeResponse, status_code=status.HTTP_201_CREATED)
def create_grade(grade_data: GradeCreate, db: Session = Depends(get_db)):
    get_student_or_404(db, grade_data.student_id)

    grade = Grading(**grade_data.model_dump())
    db.add(grade)
    db.commit()
    db.refresh(grade)

    logger.info("Recorded %s grade %s for student %s", grade.subject, grade.id, grade.student_id)
    return _grade_to_response(grade)


@router.put("/{grade_id}", response_model=GradeResponse)
def update_grade(grade_id: int, update: GradeUpdate, db: Session = Depends(get_db)):
    grade = _get_grade_or_404(db, grade_id)
    changes = update.model_dump(exclude_unset=True)

    nulled = [f for f in _REQUIRED_GRADE_FIELDS if f in changes and changes[f] is None]
    if nulled:
        raise_with_code(
            status.HTTP_400_BAD_REQUEST,
            f"Fields cannot be null: {', '.join(nulled)}",
            INVALID_GRADE,
        )

    for field, value in changes.items():
        setattr(grade, field, value)

    db.commit()
    db.refresh(grade)
    return _grade_to_response(grade)


@router.delete("/{grade_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_grade(grade_id: int, db: Session = Depends(get_db)):
    grade = _get_grade_or_404(db, grade_id)
    db.delete(grade)
    db.commit()


# ---------------------------------------------------------------------------
# Grade configs
# ---------------------------------------------------------------------------

@router.get("/config", response_model=list[GradeConfigResponse])
def list_grade_configs(db: Session = Depends(get_db)):
    configs = db.query(GradeConfig).order_by(GradeConfig.subject.asc()).all()
    return [_config_to_response(c) for c in configs]


@router.post("/config", response_model=GradeConfigResponse)
def upsert_grade_config(config_data: GradeConfigUpsert, db: Session = Depends(get_db)):
    """Create the config for a subject, or replace the existing one."""
    data = config_data.model_dump(exclude={"grading_scale"})
    # Stored as ordered pairs; order is what letter lookup walks
    scale_json = json.dumps([[e.letter, e.min_score] for e in config_data.grading_scale])

    config = db.query(GradeConfig).filter(GradeConfig.subject == config_data.subject).first()
    if config:
        for field, value in data.items():
            setattr(config, field, value)
        config.grading_scale = scale_json
    else:
        config = GradeConfig(**data, grading_scale=scale_json)
        db.add(config)

    db.commit()
    db.refresh(config)
    logger.info("Saved grade config for subject %s", config.subject)
    return _config_to_response(config)


# ---------------------------------------------------------------------------
# Student report
# ---------------------------------------------------------------------------

@router.get("/report/{student_id}", response_model=StudentReportResponse)
def get_student_report(
    student_id: str,
    date_range: RecordFilter = Depends(get_report_range),
    db: Session = Depends(get_db),
    service: ReportService = Depends(get_report_service),
):
    """Per-subject averages, letter grades and the attendance summary."""
    student = get_student_or_404(db, student_id)
    return service.build_student_report(student, date_range.start_date, date_range.end_date)
