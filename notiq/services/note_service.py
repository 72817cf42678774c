"""
Note use cases: create, list, partial update, delete, all scoped to the caller.

Every mutation goes through `get_owned_note`, which answers 404 for unknown
notes and 403 for notes owned by somebody else.
"""
import logging
from typing import Any, Dict, List

from bson import ObjectId
from bson.errors import InvalidId

from notiq.api.schemas.note import NoteCreate, NoteUpdate
from notiq.core.exceptions import Forbidden, NotFound, ValidationFailed
from notiq.repositories import note_repo as repo

_log = logging.getLogger("notiq.notes")


def parse_note_id(note_id: str) -> ObjectId:
    try:
        return ObjectId(note_id)
    except (InvalidId, TypeError):
        raise ValidationFailed(
            "Invalid note ID", errors=[{"field": "id", "message": "Invalid note ID"}]
        )


def get_owned_note(note_id: str, user: Dict[str, Any]) -> Dict[str, Any]:
    note = repo.get_note(parse_note_id(note_id))
    if not note:
        raise NotFound("Note not found")
    if str(note["user_id"]) != str(user["_id"]):
        raise Forbidden("Not authorized")
    return note


def create_note(user: Dict[str, Any], payload: NoteCreate) -> Dict[str, Any]:
    note = repo.insert_note(str(user["_id"]), payload.model_dump())
    _log.info("Note created note_id=%s user_id=%s", note["_id"], user["_id"])
    return note


def list_notes(user: Dict[str, Any]) -> List[Dict[str, Any]]:
    return repo.list_notes_by_user(str(user["_id"]))


def update_note(user: Dict[str, Any], note_id: str, payload: NoteUpdate) -> Dict[str, Any]:
    note = get_owned_note(note_id, user)
    changes = payload.changes()
    if not changes:
        return note
    updated = repo.update_note(note["_id"], changes)
    if updated is None:
        # Deleted between the ownership check and the write
        raise NotFound("Note not found")
    return updated


def delete_note(user: Dict[str, Any], note_id: str) -> None:
    note = get_owned_note(note_id, user)
    repo.delete_note(note["_id"])
    _log.info("Note deleted note_id=%s user_id=%s", note["_id"], user["_id"])
