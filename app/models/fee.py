import enum

from sqlalchemy import Column, Integer, Float, String, Date, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.db.database import Base


class FeeStatus(str, enum.Enum):
    """Valid fee statuses (used for validation; stored as String in DB)."""
    PENDING = "PENDING"
    PAID = "PAID"
    OVERDUE = "OVERDUE"
    CANCELLED = "CANCELLED"


class Fee(Base):
    """An amount a student owes, with its due date and payment state."""

    __tablename__ = "fees"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(String(36), ForeignKey("students.id", ondelete="CASCADE"), nullable=False)

    amount = Column(Float, nullable=False)
    due_date = Column(Date, nullable=False)
    status = Column(String(20), nullable=False, default=FeeStatus.PENDING.value)
    payment_date = Column(Date, nullable=True)
    description = Column(String(255), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    student = relationship("Student", back_populates="fees")

    __table_args__ = (
        Index("ix_fees_student_due", "student_id", "due_date"),
        Index("ix_fees_status", "status"),
    )
