from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.models.fee import FeeStatus


class FeeCreate(BaseModel):
    student_id: str
    amount: float = Field(gt=0)
    due_date: date
    status: FeeStatus = FeeStatus.PENDING
    payment_date: Optional[date] = None
    description: Optional[str] = Field(None, max_length=255)


class FeeUpdate(BaseModel):
    amount: Optional[float] = Field(None, gt=0)
    due_date: Optional[date] = None
    status: Optional[FeeStatus] = None
    payment_date: Optional[date] = None
    description: Optional[str] = Field(None, max_length=255)


class FeeResponse(BaseModel):
    id: int
    student_id: str
    student_name: Optional[str] = None
    amount: float
    due_date: date
    status: str
    payment_date: Optional[date] = None
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
