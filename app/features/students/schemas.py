from __future__ import annotations

from datetime import date, datetime
from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel

from .models import Course, StudentStatus

SQL_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"

_DOB_ALIASES = AliasChoices("dateOfBirth", "dateofBirth", "date_of_birth")


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def parse_timestamp(value: Any) -> Any:
    """Accept ``YYYY-MM-DD HH:MM:SS`` or ISO 8601; return naive local time."""
    value = _blank_to_none(value)
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return value  # let pydantic report it
    if isinstance(value, datetime) and value.tzinfo is not None:
        value = value.astimezone().replace(tzinfo=None)
    return value


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    return value.strftime(SQL_DATETIME_FORMAT) if value else None


# -------------------
# Write payloads
# -------------------
class StudentWrite(BaseModel):
    """Fields shared by create and update bodies."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, str_strip_whitespace=True)

    fullname: str = Field(min_length=1, max_length=255)
    id_number: str = Field(min_length=1, max_length=13)
    email: EmailStr
    password: Optional[str] = Field(default=None, max_length=128)
    date_of_birth: Optional[date] = Field(default=None, validation_alias=_DOB_ALIASES)
    course: Optional[Course] = None
    course_summary: Optional[str] = None
    enrollment_date: Optional[date] = None
    registration_timestamp: Optional[datetime] = None
    status: StudentStatus = StudentStatus.pending

    @field_validator("password", "date_of_birth", "course", "course_summary", "enrollment_date", mode="before")
    @classmethod
    def _optional_blank(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("registration_timestamp", mode="before")
    @classmethod
    def _timestamp(cls, value: Any) -> Any:
        return parse_timestamp(value)

    @field_validator("status", mode="before")
    @classmethod
    def _status_default(cls, value: Any) -> Any:
        return _blank_to_none(value) or StudentStatus.pending


class StudentCreate(StudentWrite):
    student_no: str = Field(min_length=1, max_length=64)


class StudentUpdate(StudentWrite):
    """Full replacement of the mutable fields; ``studentNo`` may only repeat the route key."""
    student_no: Optional[str] = Field(default=None, max_length=64)

    @field_validator("student_no", mode="before")
    @classmethod
    def _student_no_blank(cls, value: Any) -> Any:
        return _blank_to_none(value)


# -------------------
# Read models
# -------------------
class StudentOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    fullname: str
    id_number: str
    student_no: str
    date_of_birth: Optional[date] = None
    email: str
    course: Optional[Course] = None
    course_summary: Optional[str] = None
    enrollment_date: Optional[date] = None
    registration_timestamp: Optional[datetime] = None
    status: StudentStatus

    @field_serializer("registration_timestamp")
    def _render_timestamp(self, value: Optional[datetime]) -> Optional[str]:
        return format_timestamp(value)


class StudentWriteResponse(BaseModel):
    success: bool = True
    message: str
    student: Optional[StudentOut] = None


class DerivedFields(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    date_of_birth: Optional[date] = None
    course_summary: str = ""


class CourseInfo(BaseModel):
    name: str
    summary: str


class Catalog(BaseModel):
    courses: List[CourseInfo]
    statuses: List[str]
