from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Role = Literal["admin", "student"]


class LoginRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    # Plain string: a malformed address is just another failed login.
    email: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1, max_length=128)
    # Narrows the lookup to one table; the granted role always comes from the matched row.
    role: Optional[Role] = None


class LoginResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    message: str
    role: Role
    fullname: str
    email: str
    student_no: Optional[str] = None
    token: str
    token_type: str = "bearer"
    expires_in: int


class SessionOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    role: Role
    fullname: str
    email: str
    student_no: Optional[str] = None
    expires_at: Optional[str] = None
