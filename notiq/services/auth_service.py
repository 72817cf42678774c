"""
Authentication logic: signup, password login and federated account resolution.
"""
import logging
from typing import Any, Dict

import bcrypt
from pymongo.errors import DuplicateKeyError

from notiq.api.schemas.auth import LoginPayload, SignupPayload
from notiq.api.schemas.user import UserBase
from notiq.core.config import settings
from notiq.core.exceptions import Conflict, Unauthorized
from notiq.repositories import user_repo as repo
from notiq.services.token_service import create_access_token

_log = logging.getLogger("notiq.auth")

# bcrypt only looks at the first 72 bytes
_BCRYPT_MAX_BYTES = 72


def _secret_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(_secret_bytes(password), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(_secret_bytes(password), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


def signup(payload: SignupPayload) -> Dict[str, Any]:
    email = str(payload.email)
    if repo.find_user_by_email(email):
        raise Conflict("User already exists")
    user = UserBase(email=email, password_hash=hash_password(payload.password))
    try:
        user_id = repo.insert_user(user.model_dump())
    except DuplicateKeyError:
        # Lost a race against a concurrent signup with the same email
        raise Conflict("User already exists")
    _log.info("User registered user_id=%s", user_id)
    return {"message": "User registered successfully", "user_id": user_id}


def login(payload: LoginPayload) -> Dict[str, Any]:
    u = repo.find_user_by_email(str(payload.email))
    # Federated-only accounts have no password to compare against
    if not u or not u.get("password_hash"):
        raise Unauthorized("Invalid Credentials")
    if not verify_password(payload.password, u["password_hash"]):
        raise Unauthorized("Invalid Credentials")
    return {
        "message": "Login successful",
        "token": create_access_token(user=u),
        "user_id": str(u["_id"]),
        "email": u["email"],
    }


def resolve_federated_user(*, provider: str, provider_id: str, email: str) -> Dict[str, Any]:
    """
    Find the user for an external identity.

    Lookup order: provider id, then email (linking the provider id to that
    account), otherwise a new user is created.
    """
    u = repo.find_user_by_provider(provider, provider_id)
    if u:
        return u

    u = repo.find_user_by_email(email)
    if u:
        _log.info("Linking %s account to user_id=%s", provider, u["_id"])
        return repo.link_provider(str(u["_id"]), provider, provider_id)

    field = repo.PROVIDER_FIELDS[provider]
    user = UserBase(email=email, **{field: provider_id})
    user_id = repo.insert_user(user.model_dump())
    _log.info("User created from %s login user_id=%s", provider, user_id)
    return repo.get_user_by_id(user_id)
