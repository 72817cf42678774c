"""
Reusable router dependencies (FastAPI Depends).

- Authentication: extracts and validates the bearer token, returns the current user.
- Keep this layer thin: no business logic.
"""
from typing import Optional, Dict, Any

import jwt
from fastapi import HTTPException, Header
from starlette.status import HTTP_401_UNAUTHORIZED

from notiq.repositories import user_repo as repo
from notiq.services.token_service import verify_access_token

_BEARER = {"WWW-Authenticate": "Bearer"}


def get_current_user(authorization: Optional[str] = Header(default=None)) -> Dict[str, Any]:
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Not authorized, no token", headers=_BEARER)
    token = authorization.split(" ", 1)[1].strip()
    try:
        payload = verify_access_token(token)
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Not authorized, invalid token", headers=_BEARER)

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Not authorized, invalid token", headers=_BEARER)

    u = repo.get_user_by_id(user_id)
    if not u:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="User not found", headers=_BEARER)
    return u
