import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from app.api.deps import get_student_or_404
from app.core.errors import STUDENT_EXISTS, raise_with_code
from app.core.utils import clamp_page_size, escape_like
from app.db.database import get_db
from app.models.student import Gender, Student, StudentStatus
from app.schemas.student import StudentCreate, StudentResponse, StudentStatsResponse, StudentUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/students", tags=["Students"])


def _ensure_unique(db: Session, email: Optional[str], student_number: Optional[str], exclude_id: Optional[str] = None):
    """409 if another student already uses this email or student number."""
    clauses = []
    if email:
        clauses.append(Student.email == email)
    if student_number:
        clauses.append(Student.student_number == student_number)
    if not clauses:
        return

    query = db.query(Student.id).filter(or_(*clauses))
    if exclude_id:
        query = query.filter(Student.id != exclude_id)
    if query.first():
        raise_with_code(
            status.HTTP_409_CONFLICT,
            "A student with this email or student number already exists",
            STUDENT_EXISTS,
        )


def _commit_or_conflict(db: Session):
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning("Student write hit a uniqueness constraint")
        raise_with_code(
            status.HTTP_409_CONFLICT,
            "A student with this email or student number already exists",
            STUDENT_EXISTS,
        )


@router.post("/", response_model=StudentResponse, status_code=status.HTTP_201_CREATED)
def create_student(student_data: StudentCreate, db: Session = Depends(get_db)):
    """Create a student record."""
    _ensure_unique(db, student_data.email, student_data.student_number)

    data = student_data.model_dump()
    data["gender"] = student_data.gender.value
    data["status"] = student_data.status.value
    student = Student(**data)
    db.add(student)
    _commit_or_conflict(db)
    db.refresh(student)

    logger.info("Created student %s (%s)", student.id, student.student_number)
    return student


@router.get("/", response_model=list[StudentResponse])
def list_students(
    q: Optional[str] = Query(None, description="Search first/last name"),
    student_status: Optional[StudentStatus] = Query(None, alias="status"),
    limit: int = Query(50, ge=1),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
):
    """List students, newest first."""
    query = db.query(Student).options(selectinload(Student.fees))

    if q:
        pattern = f"%{escape_like(q.strip())}%"
        query = query.filter(
            or_(
                Student.first_name.ilike(pattern, escape="\\"),
                Student.last_name.ilike(pattern, escape="\\"),
            )
        )
    if student_status:
        query = query.filter(Student.status == student_status.value)

    return (
        query
        .order_by(Student.created_at.desc(), Student.last_name.asc())
        .offset(offset)
        .limit(clamp_page_size(limit))
        .all()
    )


@router.get("/stats", response_model=StudentStatsResponse)
def student_stats(db: Session = Depends(get_db)):
    """Student counts by enrollment status, gender and course.

    Every known status and gender is listed, with 0 when no student has it.
    """
    by_status = {s.value: 0 for s in StudentStatus}
    for s, n in db.query(Student.status, func.count(Student.id)).group_by(Student.status).all():
        if s:
            by_status[s] = n

    by_gender = {g.value: 0 for g in Gender}
    for g, n in db.query(Student.gender, func.count(Student.id)).group_by(Student.gender).all():
        if g:
            by_gender[g] = n

    by_course = {
        (c or "Unassigned"): n
        for c, n in db.query(Student.course, func.count(Student.id)).group_by(Student.course).all()
    }
    return {
        "total": db.query(func.count(Student.id)).scalar(),
        "male": by_gender[Gender.MALE.value],
        "female": by_gender[Gender.FEMALE.value],
        "by_status": by_status,
        "by_gender": by_gender,
        "by_course": by_course,
    }


@router.get("/{student_id}", response_model=StudentResponse)
def get_student(student_id: str, db: Session = Depends(get_db)):
    return get_student_or_404(db, student_id)


@router.patch("/{student_id}", response_model=StudentResponse)
def update_student(student_id: str, update: StudentUpdate, db: Session = Depends(get_db)):
    """Partially update a student; only fields present in the body change."""
    student = get_student_or_404(db, student_id)
    changes = update.model_dump(exclude_unset=True)

    if "email" in changes:
        _ensure_unique(db, changes["email"], None, exclude_id=student.id)

    for field, value in changes.items():
        if hasattr(value, "value"):
            value = value.value
        setattr(student, field, value)

    _commit_or_conflict(db)
    db.refresh(student)
    return student


@router.delete("/{student_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_student(student_id: str, db: Session = Depends(get_db)):
    """Delete a student together with their grades, attendance and fees."""
    student = get_student_or_404(db, student_id)
    db.delete(student)
    db.commit()
    logger.info("Deleted student %s", student_id)
