"""
Repository for the `user` collection.
"""
from typing import Any, Dict, Optional
from datetime import datetime, timezone

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ReturnDocument

from notiq.infrastructure.db.mongo import get_db

COLLECTION = "user"

# Provider name -> field holding the external account id
PROVIDER_FIELDS = {"google": "google_id", "github": "github_id"}


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def insert_user(doc: Dict[str, Any]) -> str:
    """
    Insert a user and return its id as string.
    - Normalizes `email` to lowercase.
    - Drops empty provider ids (the sparse unique indexes require absent keys).
    - Stamps `created_at` / `updated_at` in ISO-8601 UTC.
    """
    data = {k: v for k, v in doc.items() if v is not None}
    data["email"] = str(data["email"]).strip().lower()
    now = _now_iso()
    data.setdefault("created_at", now)
    data["updated_at"] = now
    res = get_db()[COLLECTION].insert_one(data)
    return str(res.inserted_id)


def find_user_by_email(email: str) -> Optional[Dict[str, Any]]:
    return get_db()[COLLECTION].find_one({"email": email.strip().lower()})


def find_user_by_provider(provider: str, provider_id: str) -> Optional[Dict[str, Any]]:
    return get_db()[COLLECTION].find_one({PROVIDER_FIELDS[provider]: provider_id})


def get_user_by_id(user_id: str) -> Optional[Dict[str, Any]]:
    try:
        oid = ObjectId(user_id)
    except (InvalidId, TypeError):
        return None
    return get_db()[COLLECTION].find_one({"_id": oid})


def link_provider(user_id: str, provider: str, provider_id: str) -> Optional[Dict[str, Any]]:
    """Attach an external account id to an existing user and return the updated doc."""
    return get_db()[COLLECTION].find_one_and_update(
        {"_id": ObjectId(user_id)},
        {"$set": {PROVIDER_FIELDS[provider]: provider_id, "updated_at": _now_iso()}},
        return_document=ReturnDocument.AFTER,
    )
