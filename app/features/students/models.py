import enum

from sqlalchemy import Column, Date, DateTime, Enum, Integer, String, Text
from sqlalchemy.sql import func

from app.db.base import Base


class Course(str, enum.Enum):
    system_development = "System Development"
    it_security = "IT Security"
    networking = "Networking"
    ai_data_science = "AI & Data Science"
    full_stack_dev = "Full-Stack Dev"


class StudentStatus(str, enum.Enum):
    pending = "Pending"
    awaiting_approval = "Awaiting Approval"
    active = "Active"
    on_hold = "On-hold"
    suspended = "Suspended"
    graduated = "Graduated"


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class Student(Base):
    __tablename__ = "students"

    id = Column(Integer, primary_key=True, autoincrement=True)
    fullname = Column(String(255), nullable=False)
    id_number = Column(String(13), unique=True, nullable=False, index=True)
    student_no = Column(String(64), unique=True, nullable=False, index=True)
    date_of_birth = Column(Date, nullable=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=True)  # werkzeug hash
    course = Column(
        Enum(Course, values_callable=_enum_values, native_enum=False, length=64, validate_strings=True),
        nullable=True,
    )
    course_summary = Column(Text, nullable=True)
    enrollment_date = Column(Date, nullable=True)
    registration_timestamp = Column(DateTime, nullable=False, server_default=func.now())
    status = Column(
        Enum(StudentStatus, values_callable=_enum_values, native_enum=False, length=32, validate_strings=True),
        nullable=False,
        default=StudentStatus.pending,
    )

    def __repr__(self) -> str:
        return f"<Student student_no={self.student_no} email={self.email} status={self.status}>"
