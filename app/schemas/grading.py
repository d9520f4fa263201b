from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from app.schemas.filters import to_naive_utc
from app.schemas.report import CamelModel, GradeScaleEntry, parse_grading_scale


# --- Grades ---

class GradeCreate(BaseModel):
    student_id: str
    subject: str = Field(min_length=1, max_length=100)
    assessment_type: str = Field(min_length=1, max_length=50)
    score: float = Field(ge=0)
    max_score: float = Field(gt=0)
    weight: float = Field(1.0, gt=0)
    date: datetime
    remarks: Optional[str] = None

    @field_validator("date")
    @classmethod
    def normalize_date(cls, v):
        return to_naive_utc(v)


class GradeUpdate(BaseModel):
    subject: Optional[str] = Field(None, min_length=1, max_length=100)
    assessment_type: Optional[str] = Field(None, min_length=1, max_length=50)
    score: Optional[float] = Field(None, ge=0)
    max_score: Optional[float] = Field(None, gt=0)
    weight: Optional[float] = Field(None, gt=0)
    date: Optional[datetime] = None
    remarks: Optional[str] = None

    @field_validator("date")
    @classmethod
    def normalize_date(cls, v):
        return to_naive_utc(v)


class GradeResponse(BaseModel):
    id: int
    student_id: str
    student_name: Optional[str] = None
    subject: str
    assessment_type: str
    score: float
    max_score: float
    weight: Optional[float]
    percentage: float
    date: datetime
    remarks: Optional[str]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# --- Grade configs ---

class GradeConfigUpsert(CamelModel):
    """Create or replace the grading config for a subject.

    ``grading_scale`` may be an ordered list of ``[letter, min_score]`` pairs
    or a JSON object; in both cases the declared order is what letter lookup
    walks, so list the highest threshold first.
    """
    subject: str = Field(min_length=1, max_length=100)
    assignments_weight: float = Field(0.0, ge=0, le=100)
    quizzes_weight: float = Field(0.0, ge=0, le=100)
    projects_weight: float = Field(0.0, ge=0, le=100)
    exams_weight: float = Field(0.0, ge=0, le=100)
    passing_score: float = Field(60.0, ge=0, le=100)
    grading_scale: list[GradeScaleEntry]

    @field_validator("grading_scale", mode="before")
    @classmethod
    def coerce_scale(cls, v):
        return parse_grading_scale(v)

    @field_validator("grading_scale")
    @classmethod
    def validate_scale(cls, v: list[GradeScaleEntry]) -> list[GradeScaleEntry]:
        if not v:
            raise ValueError("grading_scale must have at least one entry")
        letters = [e.letter for e in v]
        if len(set(letters)) != len(letters):
            raise ValueError("grading_scale letters must be unique")
        if not any(e.min_score <= 0 for e in v):
            raise ValueError("grading_scale must contain an entry covering 0%")
        return v


class GradeConfigResponse(CamelModel):
    id: int
    subject: str
    assignments_weight: float
    quizzes_weight: float
    projects_weight: float
    exams_weight: float
    passing_score: float
    grading_scale: list[GradeScaleEntry]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("grading_scale", mode="before")
    @classmethod
    def coerce_scale(cls, v):
        return parse_grading_scale(v)
