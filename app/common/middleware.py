"""Middleware for sliding the login session before its cookie expires."""

import logging
from typing import Optional

from fastapi import Request, Response
from sqlalchemy.exc import SQLAlchemyError
from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from app.auth.service import (
    ACCESS_COOKIE_NAME,
    IssuedToken,
    refresh_token_if_needed,
    set_auth_cookie,
    should_refresh_token,
)
from app.common.errors import AuthenticationError
from app.db.session import SessionLocal

logger = logging.getLogger("session_middleware")


def _refresh_session(token: str) -> Optional[IssuedToken]:
    """Blocking store work for a refresh; runs in the threadpool."""
    with SessionLocal() as db:
        return refresh_token_if_needed(db, token)


class SessionManagementMiddleware(BaseHTTPMiddleware):
    """Extend the session and reissue the cookie when its token is close to expiring."""

    def __init__(self, app: ASGIApp, auto_refresh: bool = True):
        super().__init__(app)
        self.auto_refresh = auto_refresh
        self.excluded_paths = {
            "/api/login",
            "/api/logout",
            "/api/register_admin",
            "/docs",
            "/redoc",
            "/openapi.json",
            "/healthz",
            "/",
        }

    async def dispatch(self, request: Request, call_next) -> Response:
        if not self.auto_refresh or request.url.path in self.excluded_paths:
            return await call_next(request)

        token = request.cookies.get(ACCESS_COOKIE_NAME)
        if not token or not should_refresh_token(token):
            return await call_next(request)

        issued = None
        try:
            issued = await run_in_threadpool(_refresh_session, token)
        except AuthenticationError as e:
            logger.info("Skipped cookie refresh: %s", e.message)
        except SQLAlchemyError as e:
            logger.warning("Failed to auto-refresh session: %s", e)

        response = await call_next(request)
        if issued:
            set_auth_cookie(response, issued)
            logger.info("Auto-refreshed session cookie for request to %s", request.url.path)
        return response
