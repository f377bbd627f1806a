"""Session forge."""

from __future__ import annotations

import logging
import time

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import get_settings

settings = get_settings()
logger = logging.getLogger("db.session")


def get_database_url() -> str:
    return settings.get_database_url()


runtime_url = get_database_url()
if not runtime_url:
    raise RuntimeError("DATABASE_URL not configured")


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        kwargs: dict = {"connect_args": {"check_same_thread": False}}
        # In-memory databases live inside one connection; share it across threads.
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return kwargs
    return {
        "pool_pre_ping": True,
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "pool_timeout": settings.db_pool_timeout,
        "pool_recycle": 300,
    }


engine = create_engine(runtime_url, echo=settings.debug, **_engine_kwargs(runtime_url))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def get_db():
    t0 = time.perf_counter()
    db = SessionLocal()
    acquire_ms = int((time.perf_counter() - t0) * 1000)
    if acquire_ms > 50:
        logger.warning("db_acquire_ms=%d", acquire_ms)
    try:
        yield db
    finally:
        db.close()
