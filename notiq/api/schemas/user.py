"""
Pydantic schemas for the `user` collection.

Key rules:
- `email` is always stored lowercase.
- At least one authentication method: `password_hash`, `google_id` or `github_id`.
- Timestamps in ISO-8601 UTC.
"""
from typing import Any, Dict, Optional

from pydantic import BaseModel, EmailStr, field_validator, model_validator


class UserBase(BaseModel):
    email: EmailStr
    password_hash: Optional[str] = None
    google_id: Optional[str] = None
    github_id: Optional[str] = None

    @field_validator("email")
    @classmethod
    def _lower_email(cls, v: EmailStr) -> str:
        return str(v).strip().lower()

    @model_validator(mode="after")
    def _validate_auth_fields(self):
        if not (self.password_hash or self.google_id or self.github_id):
            raise ValueError("A user needs a password or a linked provider account")
        return self


class UserPublic(BaseModel):
    """Public view of a user (no secrets)."""
    id: str
    email: str
    has_password: bool
    google_linked: bool
    github_linked: bool
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_doc(cls, doc: Dict[str, Any]) -> "UserPublic":
        return cls(
            id=str(doc["_id"]),
            email=doc["email"],
            has_password=bool(doc.get("password_hash")),
            google_linked=bool(doc.get("google_id")),
            github_linked=bool(doc.get("github_id")),
            created_at=doc.get("created_at"),
            updated_at=doc.get("updated_at"),
        )
