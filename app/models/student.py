import enum
import uuid

from sqlalchemy import Column, String, Date, DateTime, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.db.database import Base


class Gender(str, enum.Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"
    OTHER = "OTHER"


class StudentStatus(str, enum.Enum):
    """Valid enrollment statuses (used for validation; stored as String in DB)."""
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    GRADUATED = "GRADUATED"
    SUSPENDED = "SUSPENDED"


def _new_id() -> str:
    return str(uuid.uuid4())


class Student(Base):
    __tablename__ = "students"

    # Opaque string id; the school-issued number lives in student_number
    id = Column(String(36), primary_key=True, default=_new_id)
    student_number = Column(String(50), unique=True, nullable=False)

    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    gender = Column(String(10), default=Gender.MALE.value)
    date_of_birth = Column(Date, nullable=True)
    email = Column(String(255), unique=True, nullable=False)
    phone = Column(String(30), nullable=True)
    address = Column(String(200), nullable=True)
    course = Column(String(100), nullable=True)
    enrollment_date = Column(Date, nullable=True)
    status = Column(String(20), default=StudentStatus.ACTIVE.value)

    emergency_contact_name = Column(String(100), nullable=True)
    emergency_contact_phone = Column(String(30), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    grades = relationship("Grading", back_populates="student", cascade="all, delete-orphan")
    attendance = relationship("Attendance", back_populates="student", cascade="all, delete-orphan")
    fees = relationship(
        "Fee", back_populates="student", cascade="all, delete-orphan", order_by="Fee.due_date.desc()",
    )

    __table_args__ = (
        Index("ix_students_name", "last_name", "first_name"),
        Index("ix_students_status", "status"),
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
