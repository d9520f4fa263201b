import enum

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, Index, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.db.database import Base


class AttendanceStatus(str, enum.Enum):
    """Valid attendance statuses (used for validation; stored as String in DB)."""
    PRESENT = "Present"
    ABSENT = "Absent"
    LATE = "Late"
    EXCUSED = "Excused"


class DayOfWeek(str, enum.Enum):
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"


class Attendance(Base):
    __tablename__ = "attendance"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(String(36), ForeignKey("students.id", ondelete="CASCADE"), nullable=False)
    subject = Column(String(100), nullable=False)
    date = Column(DateTime(timezone=True), nullable=False)
    status = Column(String(20), nullable=False, default=AttendanceStatus.PRESENT.value)
    remarks = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    student = relationship("Student", back_populates="attendance")

    __table_args__ = (
        # One mark per student per subject per day
        UniqueConstraint("student_id", "date", "subject", name="uq_attendance_student_date_subject"),
        Index("ix_attendance_student_date", "student_id", "date"),
        Index("ix_attendance_status", "status"),
    )


class AttendanceConfig(Base):
    """Weekly class schedule for a subject (one row per subject and weekday)."""

    __tablename__ = "attendance_configs"

    id = Column(Integer, primary_key=True, index=True)
    subject = Column(String(100), nullable=False)
    day_of_week = Column(String(10), nullable=False)
    start_time = Column(String(5), nullable=False)  # "HH:MM"
    end_time = Column(String(5), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint("subject", "day_of_week", name="uq_attendance_config_subject_day"),
    )
