from __future__ import annotations

import os
from functools import lru_cache
from dotenv import load_dotenv, find_dotenv

_env_path = find_dotenv(".env") or ".env"
load_dotenv(_env_path, override=False)


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


class Settings:
    """Central configuration (env driven)."""

    def __init__(self) -> None:
        # Database
        self.database_url: str = os.getenv("DATABASE_URL", "sqlite:///./student_records.db")
        self.db_pool_size: int = int(os.getenv("DB_POOL_SIZE", "5"))
        self.db_max_overflow: int = int(os.getenv("DB_MAX_OVERFLOW", "5"))
        self.db_pool_timeout: int = int(os.getenv("DB_POOL_TIMEOUT", "5"))
        self.auto_create_tables: bool = _env_bool("AUTO_CREATE_TABLES", "true")
        # Tokens / sessions
        self.secret_key: str = os.getenv("SECRET_KEY") or os.getenv("JWT_SECRET") or "devsecret"
        self.jwt_algorithm: str = os.getenv("JWT_ALGORITHM", "HS256")
        self.access_token_ttl: int = int(os.getenv("ACCESS_TOKEN_TTL_SECONDS", "3600"))
        self.refresh_threshold: int = int(os.getenv("REFRESH_THRESHOLD_SECONDS", "300"))
        self.allow_admin_registration: bool = _env_bool("ALLOW_ADMIN_REGISTRATION", "true")
        # App meta
        self.app_name: str = "Student Records API"
        self.institution_name: str = os.getenv("INSTITUTION_NAME", "Student Records Office")
        self.debug: bool = _env_bool("DEBUG", "false")
        self.log_level: str = os.getenv("LOG_LEVEL", "DEBUG" if self.debug else "INFO").upper()
        # Cookie/session configuration
        self.cookie_domain: str | None = os.getenv("COOKIE_DOMAIN") or None
        self.cookie_secure: bool = _env_bool("COOKIE_SECURE", "false")
        self.cookie_samesite: str = os.getenv("COOKIE_SAMESITE", "lax").capitalize()  # Lax|Strict|None
        # CORS
        raw_origins = os.getenv("ALLOW_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000")
        self.allow_origins: list[str] = [o.strip().rstrip("/") for o in raw_origins.split(",") if o.strip()]

    def get_database_url(self) -> str:
        return self.database_url


@lru_cache()
def get_settings() -> Settings:
    return Settings()
