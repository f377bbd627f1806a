from __future__ import annotations
from pydantic import BaseModel
from typing import Optional, List, Dict, Any

# ERROR AND STATUS SCHEMAS

class ErrorResponse(BaseModel):
    """Standard error response"""
    success: bool = False
    error: str
    field: Optional[str] = None
    fields: Optional[List[str]] = None

class StatusResponse(BaseModel):
    """Generic status response"""
    success: bool = True
    message: Optional[str] = None

class MessageResponse(BaseModel):
    message: str

class HealthCheckResponse(BaseModel):
    """Health check response"""
    status: str
    time_utc: str
    uptime_seconds: float
    version: str
    environment: str
    components: Dict[str, Any]
    counts: Dict[str, int]
    tags: List[str]


# Documented on every router; the handlers in app.common.errors render this shape.
ERROR_RESPONSES: Dict[int | str, Dict[str, Any]] = {
    400: {"model": ErrorResponse, "description": "Validation failed or duplicate record"},
    401: {"model": ErrorResponse, "description": "Missing, invalid or revoked session"},
    403: {"model": ErrorResponse, "description": "Role not allowed"},
    404: {"model": ErrorResponse, "description": "Record not found"},
}
