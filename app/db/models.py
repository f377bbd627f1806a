# Import all models here so Alembic and create_all can discover them
from app.db.base import Base

from app.auth.models import AuthSession
from app.features.admins.models import Admin
from app.features.students.models import Student

__all__ = [
    "Base",
    "Admin",
    "AuthSession",
    "Student",
]
