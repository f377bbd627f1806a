"""Student record workflows (SQLAlchemy-backed).

Create and update run the uniqueness check and the write inside one
transaction. The unique constraints on ``students`` catch anything that
slips in between; the resulting ``IntegrityError`` is reported as the same
field-specific duplicate error.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.auth.passwords import hash_password
from app.auth.repository import auth_session_repository
from app.common.errors import DuplicateRecordError, RecordNotFoundError, ValidationFailed
from .derivation import derive_date_of_birth, resolve_course_summary
from .models import Student
from .repository import student_repository
from .schemas import StudentCreate, StudentUpdate, StudentWrite
from .validation import find_conflict

logger = logging.getLogger("students.service")

NOT_FOUND_MESSAGE = "Student not found"
GENERIC_DUPLICATE_MESSAGE = "Duplicate email, idNumber or studentNo belongs to another student"


def _mutable_values(data: StudentWrite, now: datetime) -> Dict[str, Any]:
    """Column values for every mutable field, with derived fields applied."""
    derived_dob = derive_date_of_birth(data.id_number, today=now.date())
    dob: Optional[date] = data.date_of_birth
    if derived_dob is not None:
        if dob is not None and dob != derived_dob:
            raise ValidationFailed(
                "Date of Birth does not match the date encoded in the ID Number.",
                field="dateOfBirth",
            )
        dob = derived_dob

    return {
        "fullname": data.fullname,
        "id_number": data.id_number,
        "email": str(data.email),
        "date_of_birth": dob,
        "course": data.course,
        "course_summary": resolve_course_summary(data.course, data.course_summary),
        "enrollment_date": data.enrollment_date,
        "registration_timestamp": data.registration_timestamp or now.replace(microsecond=0),
        "status": data.status,
    }


def _raise_duplicate(
    db: Session, email: str, id_number: str, student_no: str, exclude_student_no: Optional[str], exc: IntegrityError
) -> None:
    db.rollback()
    conflict = find_conflict(db, email, id_number, student_no, exclude_student_no)
    db.rollback()
    if conflict:
        raise DuplicateRecordError(conflict.message, field=conflict.field) from exc
    raise DuplicateRecordError(GENERIC_DUPLICATE_MESSAGE) from exc


def list_students(db: Session, q: Optional[str] = None) -> List[Student]:
    """Return students ordered by name, optionally filtered by ``q``."""
    return student_repository.list_students(db, q)


def get_student(db: Session, student_no: str) -> Student:
    student = student_repository.get_by_student_no(db, student_no)
    if student is None:
        raise RecordNotFoundError(NOT_FOUND_MESSAGE)
    return student


def create_student(db: Session, data: StudentCreate, now: Optional[datetime] = None) -> Student:
    now = now or datetime.now()
    email = str(data.email)

    conflict = find_conflict(db, email, data.id_number, data.student_no)
    if conflict:
        db.rollback()
        raise DuplicateRecordError(conflict.message, field=conflict.field)

    values = _mutable_values(data, now)
    values["student_no"] = data.student_no
    values["password"] = hash_password(data.password) if data.password else None

    try:
        student = student_repository.create(db, values)
        db.commit()
    except IntegrityError as exc:
        _raise_duplicate(db, email, data.id_number, data.student_no, None, exc)

    logger.info("student_created student_no=%s", student.student_no)
    return student


def update_student(
    db: Session, student_no: str, data: StudentUpdate, now: Optional[datetime] = None
) -> Student:
    """Replace the mutable fields of ``student_no``; the key itself never changes."""
    now = now or datetime.now()
    student = get_student(db, student_no)

    if data.student_no is not None and data.student_no != student_no:
        db.rollback()
        raise ValidationFailed("Student Number cannot be changed.", field="studentNo")

    email = str(data.email)
    conflict = find_conflict(db, email, data.id_number, student_no, exclude_student_no=student_no)
    if conflict:
        db.rollback()
        raise DuplicateRecordError(conflict.message, field=conflict.field)

    values = _mutable_values(data, now)
    if data.password:
        values["password"] = hash_password(data.password)

    try:
        student_repository.apply(db, student, values)
        db.commit()
    except IntegrityError as exc:
        _raise_duplicate(db, email, data.id_number, student_no, student_no, exc)

    logger.info("student_updated student_no=%s", student_no)
    return student


def delete_student(db: Session, student_no: str) -> None:
    student = get_student(db, student_no)
    revoked = auth_session_repository.revoke_for_subject(db, "student", student.id)
    student_repository.delete_by_student_no(db, student_no)
    db.commit()
    logger.info("student_deleted student_no=%s sessions_revoked=%d", student_no, revoked)
