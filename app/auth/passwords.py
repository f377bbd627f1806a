"""Single password hashing scheme for admins and students."""

from __future__ import annotations

from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

HASH_METHOD = "pbkdf2:sha256"


def hash_password(plain: str) -> str:
    return generate_password_hash(plain, method=HASH_METHOD)


def verify_password(stored_hash: Optional[str], plain: str) -> bool:
    if not stored_hash or not plain:
        return False
    try:
        return check_password_hash(stored_hash, plain)
    except (ValueError, TypeError):
        # Unrecognised hash format (e.g. a legacy plaintext value)
        return False
