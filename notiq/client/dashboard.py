"""
In-memory dashboard: the user's notes plus the current filter state.

Local state follows server responses. The favorite toggle is optimistic: the
flag flips locally before the request and is restored if the request fails.
"""
import logging
from datetime import datetime, tzinfo, timezone
from typing import Any, BinaryIO, Dict, List, Optional

from requests import RequestException

from notiq.client.api import ApiError, NotesApi
from notiq.client.view import NoteStats, ViewState, compute_stats, derive_view, relative_date

_log = logging.getLogger("notiq.client.dashboard")


class Dashboard:
    def __init__(self, api: NotesApi, *, tz: tzinfo = timezone.utc) -> None:
        self.api = api
        self.tz = tz
        self.notes: List[Dict[str, Any]] = []
        self.state = ViewState()

    def _index(self, note_id: str) -> int:
        for i, n in enumerate(self.notes):
            if n["id"] == note_id:
                return i
        raise KeyError(note_id)

    def _replace(self, note: Dict[str, Any]) -> None:
        self.notes[self._index(note["id"])] = note

    def refresh(self) -> List[Dict[str, Any]]:
        self.notes = self.api.list_notes()
        return self.notes

    def set_filter(self, **changes: Any) -> ViewState:
        self.state = self.state.model_copy(update=changes)
        return self.state

    def view(self) -> List[Dict[str, Any]]:
        return derive_view(self.notes, self.state)

    def stats(self, *, now: Optional[datetime] = None) -> NoteStats:
        return compute_stats(self.notes, now=now, tz=self.tz)

    def relative_date(self, note: Dict[str, Any], *, now: Optional[datetime] = None) -> str:
        return relative_date(note["created_at"], now=now, tz=self.tz)

    def create(self, title: str, content: str, **fields: Any) -> Dict[str, Any]:
        note = self.api.create_note(title, content, **fields)
        self.notes.insert(0, note)
        return note

    def update(self, note_id: str, **fields: Any) -> Dict[str, Any]:
        note = self.api.update_note(note_id, **fields)
        self._replace(note)
        return note

    def delete(self, note_id: str) -> None:
        self.api.delete_note(note_id)
        self.notes.pop(self._index(note_id))

    def attach(self, note_id: str, filename: str, fileobj: BinaryIO, content_type: str) -> Dict[str, Any]:
        note = self.api.upload_attachment(note_id, filename, fileobj, content_type)
        self._replace(note)
        return note

    def toggle_favorite(self, note_id: str) -> Dict[str, Any]:
        i = self._index(note_id)
        previous = self.notes[i]
        flipped = not previous.get("is_favorite", False)
        self.notes[i] = {**previous, "is_favorite": flipped}
        try:
            note = self.api.update_note(note_id, is_favorite=flipped)
        except (ApiError, RequestException):
            _log.warning("Favorite toggle failed for %s, rolling back", note_id)
            self.notes[self._index(note_id)] = previous
            raise
        self._replace(note)
        return note
