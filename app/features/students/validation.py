"""Uniqueness checks for the three student business keys."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import Session

from .repository import student_repository

DUPLICATE_MESSAGES = {
    "email": "Email already exists for another student.",
    "idNumber": "ID Number already exists for another student.",
    "studentNo": "Student Number already exists.",
}


@dataclass(frozen=True)
class UniquenessConflict:
    field: str

    @property
    def message(self) -> str:
        return DUPLICATE_MESSAGES[self.field]


def find_conflict(
    db: Session,
    email: str,
    id_number: str,
    student_no: str,
    exclude_student_no: Optional[str] = None,
) -> Optional[UniquenessConflict]:
    """Return the first colliding field, or None when the candidate is unique.

    One conflicting row is fetched. When it collides on several fields the
    report order is email, idNumber, studentNo.
    """
    row = student_repository.find_first_sharing(db, email, id_number, student_no, exclude_student_no)
    if row is None:
        return None
    if row.email.strip().lower() == email.strip().lower():
        return UniquenessConflict("email")
    if row.id_number == id_number:
        return UniquenessConflict("idNumber")
    return UniquenessConflict("studentNo")
