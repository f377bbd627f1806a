from typing import Any, Dict, List, Optional

from sqlalchemy import delete, func, or_, select
from sqlalchemy.orm import Session

from .models import Student


class StudentRepository:
    """SQLAlchemy repository for the ``students`` table."""

    @staticmethod
    def get_by_student_no(db: Session, student_no: str) -> Optional[Student]:
        return db.scalar(select(Student).where(Student.student_no == student_no).limit(1))

    @staticmethod
    def get_by_id(db: Session, student_id: int) -> Optional[Student]:
        return db.get(Student, student_id)

    @staticmethod
    def get_by_email(db: Session, email: str) -> Optional[Student]:
        stmt = select(Student).where(func.lower(Student.email) == email.strip().lower()).limit(1)
        return db.scalar(stmt)

    @staticmethod
    def list_students(db: Session, q: Optional[str] = None) -> List[Student]:
        stmt = select(Student)
        term = (q or "").strip()
        if term:
            like = f"%{term.lower()}%"
            stmt = stmt.where(
                or_(
                    func.lower(Student.fullname).like(like),
                    func.lower(Student.student_no).like(like),
                    func.lower(Student.email).like(like),
                )
            )
        stmt = stmt.order_by(Student.fullname.asc(), Student.student_no.asc())
        return list(db.scalars(stmt).all())

    @staticmethod
    def find_first_sharing(
        db: Session,
        email: str,
        id_number: str,
        student_no: str,
        exclude_student_no: Optional[str] = None,
    ) -> Optional[Student]:
        """Return one row sharing any of the three unique values, or None."""
        stmt = select(Student).where(
            or_(
                func.lower(Student.email) == email.strip().lower(),
                Student.id_number == id_number,
                Student.student_no == student_no,
            )
        )
        if exclude_student_no is not None:
            stmt = stmt.where(Student.student_no != exclude_student_no)
        return db.scalar(stmt.limit(1))

    @staticmethod
    def create(db: Session, values: Dict[str, Any]) -> Student:
        student = Student(**values)
        db.add(student)
        db.flush()
        return student

    @staticmethod
    def apply(db: Session, student: Student, values: Dict[str, Any]) -> Student:
        for field, value in values.items():
            setattr(student, field, value)
        db.flush()
        return student

    @staticmethod
    def delete_by_student_no(db: Session, student_no: str) -> int:
        result = db.execute(delete(Student).where(Student.student_no == student_no))
        return result.rowcount or 0


student_repository = StudentRepository()
