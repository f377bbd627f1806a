from datetime import datetime
from typing import Optional

from sqlalchemy import update
from sqlalchemy.orm import Session

from app.common.utils import utcnow
from .models import AuthSession


class AuthSessionRepository:
    """SQLAlchemy repository for ``auth_sessions``."""

    @staticmethod
    def create(db: Session, session_id: str, role: str, subject_id: int, email: str,
               created_at: datetime, expires_at: datetime) -> AuthSession:
        record = AuthSession(
            id=session_id,
            role=role,
            subject_id=subject_id,
            email=email,
            created_at=created_at,
            expires_at=expires_at,
        )
        db.add(record)
        db.flush()
        return record

    @staticmethod
    def get(db: Session, session_id: str) -> Optional[AuthSession]:
        return db.get(AuthSession, session_id)

    @staticmethod
    def extend(db: Session, record: AuthSession, expires_at: datetime) -> AuthSession:
        record.expires_at = expires_at
        db.flush()
        return record

    @staticmethod
    def revoke(db: Session, record: AuthSession, when: datetime) -> None:
        if record.revoked_at is None:
            record.revoked_at = when
            db.flush()

    @staticmethod
    def revoke_for_subject(db: Session, role: str, subject_id: int, when: Optional[datetime] = None) -> int:
        stmt = (
            update(AuthSession)
            .where(AuthSession.role == role)
            .where(AuthSession.subject_id == subject_id)
            .where(AuthSession.revoked_at.is_(None))
            .values(revoked_at=when or utcnow())
        )
        return db.execute(stmt).rowcount or 0


auth_session_repository = AuthSessionRepository()
