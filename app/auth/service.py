"""Credential verification, session records and signed access tokens.

Every login goes through ``authenticate``: one hashing scheme, one lookup
order (admins, then students), and the role is whatever table matched.
A successful login stores an ``AuthSession`` row keyed by an opaque random
id and issues an HS256 token whose ``sid`` claim points at that row, so a
token is only as good as its session (logout revokes it server-side).
"""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, Optional, Tuple

from fastapi import Response
from jose import ExpiredSignatureError, JWTError, jwt
from sqlalchemy.orm import Session

from app.common.errors import AuthenticationError
from app.common.utils import to_epoch, utcnow
from app.core.config import get_settings
from app.features.admins.repository import admin_repository
from app.features.students.repository import student_repository
from .models import AuthSession
from .passwords import verify_password
from .repository import auth_session_repository

settings = get_settings()
logger = logging.getLogger("auth.service")

ACCESS_COOKIE_NAME = "access_token"
LOGIN_FAILED_MESSAGE = "Invalid login Details"
LOGIN_OK_MESSAGE = "Logging in. Please wait..."
ROLE_LOOKUP_ORDER = ("admin", "student")


@dataclass(frozen=True)
class Identity:
    role: str
    subject_id: int
    fullname: str
    email: str
    student_no: Optional[str] = None


@dataclass(frozen=True)
class IssuedToken:
    token: str
    session_id: str
    expires_at: datetime

    @property
    def expires_in(self) -> int:
        return max(0, to_epoch(self.expires_at) - to_epoch(utcnow()))


def _identity_for(db: Session, role: str, email: str) -> Tuple[Optional[Identity], Optional[str]]:
    """Return the identity for ``email`` in ``role``'s table and its stored hash."""
    if role == "admin":
        admin = admin_repository.get_by_email(db, email)
        if admin is None:
            return None, None
        return Identity("admin", admin.id, admin.fullname, admin.email), admin.password
    student = student_repository.get_by_email(db, email)
    if student is None:
        return None, None
    return Identity("student", student.id, student.fullname, student.email, student.student_no), student.password


def authenticate(db: Session, email: str, password: str, role: Optional[str] = None) -> Identity:
    roles = (role,) if role else ROLE_LOOKUP_ORDER
    for candidate in roles:
        identity, stored_hash = _identity_for(db, candidate, email)
        if identity is not None and verify_password(stored_hash, password):
            return identity
    logger.info("login_failed email=%s role_hint=%s", email, role)
    raise AuthenticationError(LOGIN_FAILED_MESSAGE)


def encode_token(identity_role: str, subject_id: int, email: str, session_id: str,
                 issued_at: datetime, expires_at: datetime) -> str:
    claims = {
        "sub": str(subject_id),
        "sid": session_id,
        "role": identity_role,
        "email": email,
        "iat": to_epoch(issued_at),
        "exp": to_epoch(expires_at),
    }
    return jwt.encode(claims, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str, verify_exp: bool = True) -> Dict[str, Any]:
    try:
        return jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
            options={"verify_exp": verify_exp},
        )
    except ExpiredSignatureError as exc:
        raise AuthenticationError("Session expired") from exc
    except JWTError as exc:
        raise AuthenticationError("Invalid token") from exc


def issue_session(db: Session, identity: Identity, now: Optional[datetime] = None) -> IssuedToken:
    now = now or utcnow()
    expires_at = now + timedelta(seconds=settings.access_token_ttl)
    session_id = secrets.token_urlsafe(32)
    auth_session_repository.create(
        db, session_id, identity.role, identity.subject_id, identity.email, now, expires_at
    )
    db.commit()
    token = encode_token(identity.role, identity.subject_id, identity.email, session_id, now, expires_at)
    logger.info("session_issued role=%s subject_id=%s", identity.role, identity.subject_id)
    return IssuedToken(token=token, session_id=session_id, expires_at=expires_at)


def login(db: Session, email: str, password: str, role: Optional[str] = None) -> Tuple[Identity, IssuedToken]:
    identity = authenticate(db, email, password, role)
    return identity, issue_session(db, identity)


def resolve_session(db: Session, token: str, now: Optional[datetime] = None) -> Tuple[AuthSession, Identity]:
    """Validate ``token`` and its session row; return both plus the live identity."""
    claims = decode_token(token)
    now = now or utcnow()
    record = auth_session_repository.get(db, claims.get("sid") or "")
    if record is None or not record.is_active(now):
        raise AuthenticationError("Session expired or revoked")
    if record.role != claims.get("role") or str(record.subject_id) != claims.get("sub"):
        raise AuthenticationError("Invalid token")

    if record.role == "admin":
        admin = admin_repository.get_by_id(db, record.subject_id)
        if admin is None:
            raise AuthenticationError("Account no longer exists")
        identity = Identity("admin", admin.id, admin.fullname, admin.email)
    else:
        student = student_repository.get_by_id(db, record.subject_id)
        if student is None:
            raise AuthenticationError("Account no longer exists")
        identity = Identity("student", student.id, student.fullname, student.email, student.student_no)
    return record, identity


def revoke_token(db: Session, token: str) -> bool:
    """Revoke the session behind ``token``; expired tokens can still log out."""
    try:
        claims = decode_token(token, verify_exp=False)
    except AuthenticationError:
        return False
    record = auth_session_repository.get(db, claims.get("sid") or "")
    if record is None:
        return False
    auth_session_repository.revoke(db, record, utcnow())
    db.commit()
    logger.info("session_revoked role=%s subject_id=%s", record.role, record.subject_id)
    return True


def should_refresh_token(token: str, now: Optional[datetime] = None) -> bool:
    """True when an unexpired token is inside the refresh threshold."""
    try:
        exp = int(jwt.get_unverified_claims(token).get("exp", 0))
    except (JWTError, TypeError, ValueError):
        return False
    remaining = exp - to_epoch(now or utcnow())
    return 0 < remaining <= settings.refresh_threshold


def refresh_token_if_needed(db: Session, token: str, now: Optional[datetime] = None) -> Optional[IssuedToken]:
    """Extend the session and mint a new token for the same ``sid``."""
    now = now or utcnow()
    if not should_refresh_token(token, now):
        return None
    record, identity = resolve_session(db, token, now)
    expires_at = now + timedelta(seconds=settings.access_token_ttl)
    auth_session_repository.extend(db, record, expires_at)
    db.commit()
    new_token = encode_token(identity.role, identity.subject_id, identity.email, record.id, now, expires_at)
    return IssuedToken(token=new_token, session_id=record.id, expires_at=expires_at)


def set_auth_cookie(response: Response, issued: IssuedToken) -> None:
    response.set_cookie(
        key=ACCESS_COOKIE_NAME,
        value=issued.token,
        max_age=settings.access_token_ttl,
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite.lower(),
        domain=settings.cookie_domain,
        path="/",
    )


def clear_auth_cookie(response: Response) -> None:
    response.delete_cookie(
        key=ACCESS_COOKIE_NAME,
        domain=settings.cookie_domain,
        path="/",
    )
