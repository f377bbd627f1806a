from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from .models import Admin


class AdminRepository:
    """SQLAlchemy repository for the ``admins`` table."""

    @staticmethod
    def get_by_email(db: Session, email: str) -> Optional[Admin]:
        stmt = select(Admin).where(func.lower(Admin.email) == email.strip().lower()).limit(1)
        return db.scalar(stmt)

    @staticmethod
    def get_by_id(db: Session, admin_id: int) -> Optional[Admin]:
        return db.get(Admin, admin_id)

    @staticmethod
    def create(db: Session, fullname: str, email: str, password_hash: str) -> Admin:
        admin = Admin(fullname=fullname, email=email, password=password_hash)
        db.add(admin)
        db.flush()
        return admin


admin_repository = AdminRepository()
