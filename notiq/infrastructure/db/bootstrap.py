"""
Mongo bootstrap: defines and applies validators (JSON Schema) and indexes.
Runs at startup to guarantee the minimal collections and their consistency.
Never brings the app down; non-critical failures only leave warnings.
"""
from __future__ import annotations

from typing import Any, Dict, List
import logging
from pymongo.errors import PyMongoError
from notiq.infrastructure.db.mongo import get_db

_log = logging.getLogger("notiq.mongo.bootstrap")

USER_VALIDATOR: Dict[str, Any] = {
    "bsonType": "object",
    "required": ["email", "created_at", "updated_at"],
    "properties": {
        "email": {"bsonType": "string", "minLength": 3, "description": "lowercase"},
        "password_hash": {"bsonType": "string"},
        "google_id": {"bsonType": "string"},
        "github_id": {"bsonType": "string"},
        "created_at": {"bsonType": "string", "minLength": 10},
        "updated_at": {"bsonType": "string", "minLength": 10},
    },
    "additionalProperties": True,
    # At least one way to authenticate
    "anyOf": [
        {"required": ["password_hash"]},
        {"required": ["google_id"]},
        {"required": ["github_id"]},
    ],
}

NOTE_VALIDATOR: Dict[str, Any] = {
    "bsonType": "object",
    "required": ["user_id", "title", "content", "created_at", "updated_at"],
    "properties": {
        "user_id": {"bsonType": "objectId"},
        "title": {"bsonType": "string", "minLength": 1},
        "content": {"bsonType": "string", "minLength": 1},
        "category": {"bsonType": "string"},
        "topic": {"bsonType": "string"},
        "difficulty": {"bsonType": "string", "enum": ["Easy", "Medium", "Hard"]},
        "tags": {"bsonType": "array", "items": {"bsonType": "string"}},
        "attachments": {
            "bsonType": "array",
            "items": {
                "bsonType": "object",
                "required": ["url", "storage_id", "type"],
                "properties": {
                    "url": {"bsonType": "string"},
                    "storage_id": {"bsonType": "string"},
                    "type": {"bsonType": "string", "enum": ["image", "pdf"]},
                },
            },
        },
        "is_favorite": {"bsonType": "bool"},
        "color": {"bsonType": "string"},
        "created_at": {"bsonType": "string", "minLength": 10},
        "updated_at": {"bsonType": "string", "minLength": 10},
    },
    "additionalProperties": True,
}


def _collmod_or_create(name: str, validator: Dict[str, Any] | None) -> None:
    db = get_db()
    try:
        if name not in db.list_collection_names():
            if validator:
                db.create_collection(name, validator={"$jsonSchema": validator})
            else:
                db.create_collection(name)
        elif validator:
            db.command({
                "collMod": name,
                "validator": {"$jsonSchema": validator},
                "validationLevel": "moderate",
            })
    except PyMongoError as e:
        # Without collMod privileges the collection keeps working unvalidated
        _log.warning("Could not apply validator on '%s': %s", name, e)


def _ensure_indexes(name: str, indexes: List[Dict[str, Any]]) -> None:
    coll = get_db()[name]
    for ix in indexes:
        options = dict(ix)
        keys = options.pop("keys")
        try:
            coll.create_index(keys, **options)
        except PyMongoError as e:
            # e.g. index already exists with other options, or duplicated legacy data
            _log.warning("Could not create index on '%s' (%s): %s", name, keys, e)


def ensure_indexes() -> None:
    _ensure_indexes(
        "user",
        [
            {"keys": [("email", 1)], "unique": True, "name": "uniq_email"},
            {"keys": [("google_id", 1)], "unique": True, "sparse": True, "name": "uniq_google_id"},
            {"keys": [("github_id", 1)], "unique": True, "sparse": True, "name": "uniq_github_id"},
        ],
    )
    _ensure_indexes(
        "note",
        [
            {"keys": [("user_id", 1), ("created_at", -1)], "name": "ix_user_created"},
        ],
    )


def ensure_collections() -> None:
    """
    Guarantee the minimal collections, validators and indexes.
    """
    _collmod_or_create("user", USER_VALIDATOR)
    _collmod_or_create("note", NOTE_VALIDATOR)
    ensure_indexes()
    _log.info("Collections and indexes ensured")
