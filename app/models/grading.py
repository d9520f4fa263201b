from sqlalchemy import Column, Integer, Float, String, DateTime, ForeignKey, Text, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.db.database import Base


class Grading(Base):
    """One scored assessment for a student in a subject."""

    __tablename__ = "gradings"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(String(36), ForeignKey("students.id", ondelete="CASCADE"), nullable=False)

    subject = Column(String(100), nullable=False)
    assessment_type = Column(String(50), nullable=False)  # Assignment, Quiz, Project, Exam, ...
    score = Column(Float, nullable=False)
    max_score = Column(Float, nullable=False)
    weight = Column(Float, nullable=True, default=1.0)
    date = Column(DateTime(timezone=True), nullable=False)
    remarks = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    student = relationship("Student", back_populates="grades")

    __table_args__ = (
        Index("ix_gradings_student_subject", "student_id", "subject"),
        Index("ix_gradings_student_date", "student_id", "date"),
    )


class GradeConfig(Base):
    """Per-subject grading configuration.

    ``grading_scale`` holds a JSON list of ``[letter, min_score]`` pairs.
    The list order is significant: letter lookup takes the first pair whose
    threshold is met, so it is never re-sorted on the way in or out.
    """

    __tablename__ = "grade_configs"

    id = Column(Integer, primary_key=True, index=True)
    subject = Column(String(100), unique=True, nullable=False)

    assignments_weight = Column(Float, nullable=False, default=0.0)
    quizzes_weight = Column(Float, nullable=False, default=0.0)
    projects_weight = Column(Float, nullable=False, default=0.0)
    exams_weight = Column(Float, nullable=False, default=0.0)
    passing_score = Column(Float, nullable=False, default=60.0)

    grading_scale = Column(Text, nullable=False)  # JSON string (Text for SQLite compat)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
