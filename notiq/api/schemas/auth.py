"""
Pydantic schemas for authentication operations.

- Email is trimmed and lowercased before validation.
- Keeps the API layer apart from the business logic.
"""
from typing import Any

from pydantic import BaseModel, EmailStr, Field, field_validator

from notiq.api.schemas.user import UserPublic

PASSWORD_MIN = 6
PASSWORD_MAX = 128


def _normalize_email(v: Any) -> str:
    if v is None or (isinstance(v, str) and not v.strip()):
        raise ValueError("Email is required")
    if not isinstance(v, str):
        raise ValueError("Invalid email format")
    return v.strip().lower()


class SignupPayload(BaseModel):
    email: EmailStr = Field(default="", validate_default=True)
    password: str = Field(default="", validate_default=True)

    @field_validator("email", mode="before")
    @classmethod
    def _email(cls, v):
        return _normalize_email(v)

    @field_validator("password", mode="before")
    @classmethod
    def _password(cls, v):
        if not v:
            raise ValueError("Password is required")
        if not isinstance(v, str):
            raise ValueError("Password must be a string")
        if len(v) < PASSWORD_MIN:
            raise ValueError(f"Password must be at least {PASSWORD_MIN} characters")
        if len(v) > PASSWORD_MAX:
            raise ValueError(f"Password must be at most {PASSWORD_MAX} characters")
        return v


class LoginPayload(BaseModel):
    email: EmailStr = Field(default="", validate_default=True)
    password: str = Field(default="", validate_default=True)

    @field_validator("email", mode="before")
    @classmethod
    def _email(cls, v):
        return _normalize_email(v)

    @field_validator("password", mode="before")
    @classmethod
    def _password(cls, v):
        if not v:
            raise ValueError("Password is required")
        return v


# === Response models ===

class SignupOut(BaseModel):
    message: str
    user_id: str


class LoginOut(BaseModel):
    message: str
    token: str
    user_id: str
    email: str


class ProfileOut(BaseModel):
    message: str
    user: UserPublic
