from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from app.common.deps import CurrentUser, extract_bearer_or_cookie, get_current_user
from app.common.errors import PermissionDenied
from app.common.schemas import ERROR_RESPONSES, MessageResponse, StatusResponse
from app.common.utils import isoformat_utc
from app.core.config import get_settings
from app.db.session import get_db
from app.features.admins.schemas import AdminCreate
from app.features.admins.service import register_admin
from .repository import auth_session_repository
from .schemas import LoginRequest, LoginResponse, SessionOut
from .service import (
    LOGIN_OK_MESSAGE,
    clear_auth_cookie,
    login as login_service,
    revoke_token,
    set_auth_cookie,
)

router = APIRouter(prefix="/api", tags=["auth"], responses=ERROR_RESPONSES)


@router.post("/login", response_model=LoginResponse)
def login(payload: LoginRequest, resp: Response, db: Session = Depends(get_db)) -> LoginResponse:
    """Authenticate an admin or student with JSON body (email, password, optional role)."""
    identity, issued = login_service(db, str(payload.email), payload.password, payload.role)
    set_auth_cookie(resp, issued)  # HttpOnly cookie for browser clients
    return LoginResponse(
        message=LOGIN_OK_MESSAGE,
        role=identity.role,
        fullname=identity.fullname,
        email=identity.email,
        student_no=identity.student_no,
        token=issued.token,
        expires_in=issued.expires_in,
    )


@router.post("/register_admin", response_model=MessageResponse)
def register_admin_account(payload: AdminCreate, db: Session = Depends(get_db)) -> MessageResponse:
    if not get_settings().allow_admin_registration:
        raise PermissionDenied("Admin registration is disabled")
    register_admin(db, payload)
    return MessageResponse(message="Successfully Registered, Please log-in.")


@router.post("/logout", response_model=StatusResponse)
def logout(request: Request, resp: Response, db: Session = Depends(get_db)) -> StatusResponse:
    token = extract_bearer_or_cookie(request)
    if token:
        revoke_token(db, token)
    clear_auth_cookie(resp)
    return StatusResponse(success=True, message="Logged out")


@router.get("/session", response_model=SessionOut)
def current_session(current: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)) -> SessionOut:
    record = auth_session_repository.get(db, current.session_id)
    return SessionOut(
        id=current.id,
        role=current.role,
        fullname=current.fullname,
        email=current.email,
        student_no=current.student_no,
        expires_at=isoformat_utc(record.expires_at) if record else None,
    )
