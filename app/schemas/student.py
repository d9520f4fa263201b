import re
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.models.student import Gender, StudentStatus
from app.schemas.fee import FeeResponse

_NAME_RE = re.compile(r"^[a-zA-Z\s]*$")
_PHONE_RE = re.compile(r"^\+?[1-9]\d{1,14}$")


def _check_name(v: str) -> str:
    if not _NAME_RE.match(v):
        raise ValueError("Name can only contain letters and spaces")
    return v


def _check_phone(v: Optional[str]) -> Optional[str]:
    if v and not _PHONE_RE.match(v):
        raise ValueError("Invalid phone number format")
    return v


class StudentBase(BaseModel):
    student_number: str = Field(min_length=1, max_length=50)
    first_name: str = Field(min_length=2, max_length=50)
    last_name: str = Field(min_length=2, max_length=50)
    gender: Gender = Gender.MALE
    date_of_birth: Optional[date] = None
    email: EmailStr
    phone: Optional[str] = None
    address: Optional[str] = Field(None, max_length=200)
    course: Optional[str] = None
    enrollment_date: Optional[date] = None
    status: StudentStatus = StudentStatus.ACTIVE
    emergency_contact_name: Optional[str] = Field(None, max_length=100)
    emergency_contact_phone: Optional[str] = None

    @field_validator("first_name", "last_name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _check_name(v)

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("phone", "emergency_contact_phone")
    @classmethod
    def validate_phone(cls, v: Optional[str]) -> Optional[str]:
        return _check_phone(v)


class StudentCreate(StudentBase):
    pass


class StudentUpdate(BaseModel):
    first_name: Optional[str] = Field(None, min_length=2, max_length=50)
    last_name: Optional[str] = Field(None, min_length=2, max_length=50)
    gender: Optional[Gender] = None
    date_of_birth: Optional[date] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    address: Optional[str] = Field(None, max_length=200)
    course: Optional[str] = None
    enrollment_date: Optional[date] = None
    status: Optional[StudentStatus] = None
    emergency_contact_name: Optional[str] = Field(None, max_length=100)
    emergency_contact_phone: Optional[str] = None

    @field_validator("first_name", "last_name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return _check_name(v)

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: Optional[str]) -> Optional[str]:
        return v.lower() if v else v

    @field_validator("phone", "emergency_contact_phone")
    @classmethod
    def validate_phone(cls, v: Optional[str]) -> Optional[str]:
        return _check_phone(v)


class StudentResponse(BaseModel):
    id: str
    student_number: str
    first_name: str
    last_name: str
    gender: Optional[str]
    date_of_birth: Optional[date]
    email: str
    phone: Optional[str]
    address: Optional[str]
    course: Optional[str]
    enrollment_date: Optional[date]
    status: Optional[str]
    emergency_contact_name: Optional[str] = None
    emergency_contact_phone: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    fees: list[FeeResponse] = []

    class Config:
        from_attributes = True


class StudentStatsResponse(BaseModel):
    total: int
    male: int
    female: int
    by_status: dict[str, int]
    by_gender: dict[str, int]
    by_course: dict[str, int]
