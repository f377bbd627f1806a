"""Admin registration (SQLAlchemy-backed)."""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.auth.passwords import hash_password
from app.common.errors import DuplicateRecordError
from .models import Admin
from .repository import admin_repository
from .schemas import AdminCreate

logger = logging.getLogger("admins.service")

DUPLICATE_EMAIL_MESSAGE = "Email already registered."


def register_admin(db: Session, data: AdminCreate) -> Admin:
    """Create an admin account; the e-mail must not be registered yet."""
    email = str(data.email)
    if admin_repository.get_by_email(db, email):
        raise DuplicateRecordError(DUPLICATE_EMAIL_MESSAGE, field="email")

    try:
        admin = admin_repository.create(db, data.fullname, email, hash_password(data.password))
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise DuplicateRecordError(DUPLICATE_EMAIL_MESSAGE, field="email") from exc

    logger.info("admin_registered id=%s email=%s", admin.id, admin.email)
    return admin
