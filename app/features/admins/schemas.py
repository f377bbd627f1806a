"""Pydantic models for admin accounts."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class AdminCreate(BaseModel):
    """Registration payload."""
    model_config = ConfigDict(str_strip_whitespace=True)

    fullname: str = Field(min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(min_length=1, max_length=128)

