"""Repository for the `note` collection."""
from typing import Any, Dict, List, Optional
from datetime import datetime, timezone

from bson import ObjectId
from pymongo import DESCENDING, ReturnDocument

from notiq.infrastructure.db.mongo import get_db

COLLECTION = "note"

DEFAULTS: Dict[str, Any] = {
    "category": "General",
    "topic": "Miscellaneous",
    "difficulty": "Medium",
    "is_favorite": False,
    "color": "default",
}


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def insert_note(user_id: str, doc: Dict[str, Any]) -> Dict[str, Any]:
    """Insert a note owned by `user_id` with defaults; return the stored document."""
    data = {k: v for k, v in doc.items() if v is not None}
    for k, v in DEFAULTS.items():
        data.setdefault(k, v)
    data.setdefault("tags", [])
    data["attachments"] = []
    data["user_id"] = ObjectId(user_id)
    now = _now_iso()
    data["created_at"] = now
    data["updated_at"] = now
    res = get_db()[COLLECTION].insert_one(data)
    data["_id"] = res.inserted_id
    return data


def list_notes_by_user(user_id: str) -> List[Dict[str, Any]]:
    """All notes of a user, newest first."""
    cursor = get_db()[COLLECTION].find({"user_id": ObjectId(user_id)}).sort(
        [("created_at", DESCENDING), ("_id", DESCENDING)]
    )
    return list(cursor)


def get_note(note_id: ObjectId) -> Optional[Dict[str, Any]]:
    return get_db()[COLLECTION].find_one({"_id": note_id})


def update_note(note_id: ObjectId, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Set only the given fields (plus `updated_at`); return the updated document."""
    set_ops = dict(fields)
    set_ops["updated_at"] = _now_iso()
    return get_db()[COLLECTION].find_one_and_update(
        {"_id": note_id},
        {"$set": set_ops},
        return_document=ReturnDocument.AFTER,
    )


def push_attachment(note_id: ObjectId, attachment: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    return get_db()[COLLECTION].find_one_and_update(
        {"_id": note_id},
        {"$push": {"attachments": attachment}, "$set": {"updated_at": _now_iso()}},
        return_document=ReturnDocument.AFTER,
    )


def delete_note(note_id: ObjectId) -> bool:
    res = get_db()[COLLECTION].delete_one({"_id": note_id})
    return res.deleted_count == 1
