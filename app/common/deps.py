"""Shared FastAPI dependencies for authentication, authorization, and context."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from fastapi import Depends, HTTPException, Request, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.auth.service import ACCESS_COOKIE_NAME, resolve_session
from app.common.errors import PermissionDenied
from app.db.session import get_db

logger = logging.getLogger("auth.deps")


class CurrentUser(BaseModel):
    """Minimal identity shared across endpoints."""
    id: int
    email: str
    role: str
    fullname: str
    student_no: Optional[str] = None
    session_id: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def extract_bearer_or_cookie(request: Request) -> Optional[str]:
    auth = request.headers.get("Authorization", "")
    if auth.startswith("Bearer "):
        return auth.removeprefix("Bearer ").strip() or None
    return request.cookies.get(ACCESS_COOKIE_NAME)


def get_current_user(request: Request, db: Session = Depends(get_db)) -> CurrentUser:
    """Resolve the session behind the bearer token (or cookie) into a CurrentUser."""
    cached: CurrentUser | None = getattr(request.state, "current_user", None)
    if cached is not None:
        return cached

    token = extract_bearer_or_cookie(request)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    record, identity = resolve_session(db, token)
    current = CurrentUser(
        id=identity.subject_id,
        email=identity.email,
        role=identity.role,
        fullname=identity.fullname,
        student_no=identity.student_no,
        session_id=record.id,
    )
    request.state.current_user = current

    logger.debug(
        "auth_resolved user_id=%s role=%s request_id=%s path=%s",
        current.id,
        current.role,
        getattr(request.state, "request_id", None),
        request.url.path,
    )
    return current


def require_role(*roles: str, admin_override: bool = True) -> Callable:
    """Factory returning dependency enforcing that user has one of the roles.

    Args:
      roles: Allowed roles (case-insensitive). Empty -> no restriction.
      admin_override: Admins pass every role check unless this is False.
    """
    normalized = {r.lower() for r in roles if r}

    def _checker(current: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if not normalized:
            return current
        role_l = current.role.lower()
        if role_l in normalized or (admin_override and current.is_admin):
            return current
        raise PermissionDenied("Insufficient role")

    return _checker


def require_admin() -> Callable:
    return require_role("admin")


def require_student() -> Callable:
    return require_role("student", admin_override=False)


def ensure_self_or_admin(current: CurrentUser, student_no: str) -> None:
    """A student may only touch their own record."""
    if current.is_admin or current.student_no == student_no:
        return
    raise PermissionDenied("Not authorized for this record")
