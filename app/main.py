"""FastAPI Heartbeat. Student records."""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

import os
import time
import uuid
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Dict
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import get_settings
from app.auth.routes import router as auth_router
from app.common.errors import register_exception_handlers
from app.common.middleware import SessionManagementMiddleware
from app.common.schemas import HealthCheckResponse
from app.db.base import Base, list_models
from app.db.session import engine
from app.features.students.endpoints import (
    profile_router,
    reference_router,
    router as students_router,
)
import app.db.models  # noqa: F401  (registers every table on Base.metadata)

_settings = get_settings()
_START_TIME = datetime.now(timezone.utc)

logging.basicConfig(
    level=_settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("app")


@asynccontextmanager
async def lifespan(_: FastAPI):
    if _settings.auto_create_tables:
        Base.metadata.create_all(bind=engine)
        logger.info("Tables ensured: %s", ", ".join(sorted(Base.metadata.tables)))
    yield


app = FastAPI(title=_settings.app_name, lifespan=lifespan)


# ------------------------
# CORS Setup
# ------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ------------------------
# Custom Middlewares
# ------------------------
app.add_middleware(SessionManagementMiddleware, auto_refresh=True)


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    incoming = request.headers.get("X-Request-Id") or request.headers.get("X-Request-ID")
    req_id = incoming or str(uuid.uuid4())
    request.state.request_id = req_id
    request_logger = logging.getLogger("request")
    request_logger.info("request.start", extra={"request_id": req_id, "path": request.url.path, "method": request.method})
    response = await call_next(request)
    response.headers["X-Request-Id"] = req_id
    request_logger.info("request.end", extra={"request_id": req_id, "path": request.url.path, "status_code": response.status_code})
    return response


@app.middleware("http")
async def timing_middleware(request: Request, call_next):
    t0 = time.perf_counter()
    resp = await call_next(request)
    dt = int((time.perf_counter() - t0) * 1000)
    logging.getLogger("timing").info("%s %s %dms %s", request.method, request.url.path, dt, resp.status_code)
    return resp


register_exception_handlers(app)


# ------------------------
# Routers
# ------------------------
app.include_router(auth_router)
app.include_router(students_router)
app.include_router(profile_router)
app.include_router(reference_router)


# ------------------------
# Meta endpoints
# ------------------------
@app.get("/", tags=["meta"], summary="API Root")
async def root():
    return {
        "name": _settings.app_name,
        "status": "ok",
        "docs": "/docs",
        "redoc": "/redoc",
        "health": "/healthz"
    }


@app.get("/healthz", tags=["meta"], summary="Liveness / readiness probe", response_model=HealthCheckResponse)
def healthz() -> Dict[str, Any]:
    now = datetime.now(timezone.utc)
    uptime_seconds = (now - _START_TIME).total_seconds()
    db_status: str = "unknown"
    db_latency_ms: float | None = None

    try:
        start = time.perf_counter()
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        db_latency_ms = round((time.perf_counter() - start) * 1000, 2)
        db_status = "ok"
    except SQLAlchemyError as e:
        logger.warning("healthz database check failed: %s", e)
        db_status = f"error:{type(e).__name__}"

    tags = sorted({t for r in app.routes for t in getattr(r, "tags", [])})

    return {
        "status": "ok" if db_status == "ok" else "degraded",
        "time_utc": now.isoformat(),
        "uptime_seconds": round(uptime_seconds, 2),
        "version": os.getenv("APP_VERSION", "dev"),
        "environment": "debug" if _settings.debug else "prod",
        "components": {
            "database": (
                {"status": db_status, "latency_ms": db_latency_ms}
                if db_status == "ok"
                else {"status": db_status}
            ),
        },
        "counts": {"routes": len(app.routes), "models": len(list_models())},
        "tags": tags,
    }
