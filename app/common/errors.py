"""Domain errors and the handlers that render them as JSON responses."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger("app.errors")


class AppError(Exception):
    """Base for errors a service raises and the API reports verbatim."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, *, field: Optional[str] = None, fields: Optional[List[str]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field
        self.fields = fields

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"success": False, "error": self.message}
        if self.field:
            payload["field"] = self.field
        if self.fields:
            payload["fields"] = self.fields
        return payload


class ValidationFailed(AppError):
    status_code = status.HTTP_400_BAD_REQUEST


class DuplicateRecordError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST


class RecordNotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND


class AuthenticationError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED


class PermissionDenied(AppError):
    status_code = status.HTTP_403_FORBIDDEN


def _error_fields(exc: RequestValidationError) -> List[str]:
    fields: List[str] = []
    for err in exc.errors():
        loc = [part for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        name = str(loc[-1]) if loc else "body"
        if name not in fields:
            fields.append(name)
    return fields


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    logger.info("app_error status=%s path=%s error=%s", exc.status_code, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = _error_fields(exc)
    missing = [e for e in exc.errors() if e.get("type") == "missing"]
    prefix = "Missing required fields" if missing and len(missing) == len(exc.errors()) else "Invalid or missing fields"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "error": f"{prefix}: {', '.join(fields)}", "fields": fields},
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Store fault on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "error": "Server error"},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "error": "Server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(SQLAlchemyError, store_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
