"""
Creation and verification of JWTs: bearer access tokens and OAuth `state`.
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Dict
from uuid import uuid4

import jwt

from notiq.core.config import settings


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _secret() -> str:
    if not settings.jwt_secret:
        raise RuntimeError("JWT_SECRET is not configured")
    return settings.jwt_secret


def create_access_token(*, user: Dict[str, Any]) -> str:
    """
    HS256 JWT valid for ACCESS_TOKEN_EXPIRE_MINUTES.
    Claims: sub(user_id), email, iat, exp, jti.
    """
    now = _now_utc()
    exp = now + timedelta(minutes=settings.access_token_expire_minutes)
    payload = {
        "sub": str(user["_id"]),
        "email": user.get("email"),
        "iat": int(now.timestamp()),
        "exp": int(exp.timestamp()),
        "jti": str(uuid4()),
    }
    return jwt.encode(payload, _secret(), algorithm=settings.jwt_algorithm)


def verify_access_token(token: str) -> Dict[str, Any]:
    """
    Decode and validate signature/expiry. Raises `jwt.InvalidTokenError`.
    """
    payload = jwt.decode(token, key=_secret(), algorithms=[settings.jwt_algorithm])
    if payload.get("purpose"):
        raise jwt.InvalidTokenError("Not an access token")
    return payload


def create_oauth_state(*, provider: str) -> str:
    """Short-lived signed `state` for the OAuth round trip (CSRF protection)."""
    now = _now_utc()
    exp = now + timedelta(minutes=settings.oauth_state_expire_minutes)
    payload = {
        "purpose": "oauth_state",
        "provider": provider,
        "iat": int(now.timestamp()),
        "exp": int(exp.timestamp()),
        "jti": str(uuid4()),
    }
    return jwt.encode(payload, _secret(), algorithm=settings.jwt_algorithm)


def verify_oauth_state(state: str, *, provider: str) -> None:
    payload = jwt.decode(state, key=_secret(), algorithms=[settings.jwt_algorithm])
    if payload.get("purpose") != "oauth_state" or payload.get("provider") != provider:
        raise jwt.InvalidTokenError("State does not match provider")
