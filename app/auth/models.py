from sqlalchemy import Column, DateTime, Integer, String

from app.db.base import Base


class AuthSession(Base):
    """Server-side login session; the signed token carries its id as ``sid``."""

    __tablename__ = "auth_sessions"

    id = Column(String(64), primary_key=True)
    role = Column(String(16), nullable=False, index=True)
    subject_id = Column(Integer, nullable=False, index=True)
    email = Column(String(255), nullable=False)
    created_at = Column(DateTime, nullable=False)  # naive UTC
    expires_at = Column(DateTime, nullable=False)
    revoked_at = Column(DateTime, nullable=True)

    def is_active(self, now) -> bool:
        return self.revoked_at is None and self.expires_at > now

    def __repr__(self) -> str:
        return f"<AuthSession id={self.id[:8]}... role={self.role} subject_id={self.subject_id}>"
