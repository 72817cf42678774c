from datetime import datetime, timezone
from unittest.mock import MagicMock
from zoneinfo import ZoneInfo

import pytest
import requests

from notiq.client.api import ApiError, NotesApi
from notiq.client.dashboard import Dashboard


def _resp(status=200, payload=None, reason="OK"):
    resp = MagicMock()
    resp.status_code = status
    resp.reason = reason
    resp.content = b"x" if payload is not None else b""
    resp.json.return_value = payload
    return resp


def _note(id, **fields):
    base = {"id": id, "title": f"note {id}", "content": "c", "tags": [], "category": "General",
            "topic": "Miscellaneous", "is_favorite": False,
            "created_at": "2026-03-18T10:00:00.000Z", "updated_at": "2026-03-18T10:00:00.000Z"}
    base.update(fields)
    return base


# --- NotesApi ---

def test_login_stores_token_for_next_requests():
    session = MagicMock()
    session.request.side_effect = [
        _resp(payload={"token": "tok", "user_id": "u1", "email": "a@example.com", "message": "Login successful"}),
        _resp(payload=[]),
    ]
    api = NotesApi("http://api.example.com/api/", session=session)
    api.login("a@example.com", "secret123")
    assert api.list_notes() == []

    method, url = session.request.call_args.args
    assert (method, url) == ("GET", "http://api.example.com/api/notes")
    assert session.request.call_args.kwargs["headers"]["Authorization"] == "Bearer tok"


def test_error_response_raises_api_error():
    session = MagicMock()
    session.request.return_value = _resp(
        400, {"message": "Validation error", "errors": [{"field": "title", "message": "Title is required"}]}, "Bad Request"
    )
    api = NotesApi(session=session, token="tok")
    with pytest.raises(ApiError) as ei:
        api.create_note("", "c")
    assert ei.value.status_code == 400
    assert ei.value.errors[0]["field"] == "title"


# --- Dashboard ---

@pytest.fixture
def api():
    return MagicMock(spec=NotesApi)


@pytest.fixture
def board(api):
    api.list_notes.return_value = [_note("2"), _note("1")]
    d = Dashboard(api)
    d.refresh()
    return d


def test_toggle_favorite_applies_server_note(board, api):
    server_note = _note("1", is_favorite=True, updated_at="2026-03-18T11:00:00.000Z")
    api.update_note.return_value = server_note

    out = board.toggle_favorite("1")

    api.update_note.assert_called_once_with("1", is_favorite=True)
    assert out == server_note
    assert board.notes[1] == server_note


def test_toggle_favorite_is_optimistic_and_rolls_back(board, api):
    seen = {}

    def failing_update(note_id, **fields):
        # local state already flipped while the request is in flight
        seen["flag"] = board.notes[1]["is_favorite"]
        raise ApiError(500, "Internal server error")

    api.update_note.side_effect = failing_update
    original = dict(board.notes[1])

    with pytest.raises(ApiError):
        board.toggle_favorite("1")

    assert seen["flag"] is True
    assert board.notes[1] == original


def test_toggle_favorite_rolls_back_on_network_error(board, api):
    api.update_note.side_effect = requests.ConnectionError("down")
    with pytest.raises(requests.ConnectionError):
        board.toggle_favorite("2")
    assert board.notes[0]["is_favorite"] is False


def test_create_update_delete_keep_local_state(board, api):
    api.create_note.return_value = _note("3", title="fresh")
    board.create("fresh", "c")
    assert [n["id"] for n in board.notes] == ["3", "2", "1"]

    api.update_note.return_value = _note("2", title="renamed")
    board.update("2", title="renamed")
    assert board.notes[1]["title"] == "renamed"

    board.delete("1")
    api.delete_note.assert_called_once_with("1")
    assert [n["id"] for n in board.notes] == ["3", "2"]


def test_failed_delete_keeps_note(board, api):
    api.delete_note.side_effect = ApiError(403, "Not authorized")
    with pytest.raises(ApiError):
        board.delete("1")
    assert [n["id"] for n in board.notes] == ["2", "1"]


def test_view_recomputes_from_full_list(board, api):
    board.notes[0]["tags"] = ["x", "y"]
    board.notes[1]["tags"] = ["x"]
    board.set_filter(tags=["x", "y"])
    assert [n["id"] for n in board.view()] == ["2"]
    board.set_filter(tags=[], sort="title")
    assert [n["id"] for n in board.view()] == ["1", "2"]
    assert board.stats().total == 2


def test_relative_date_follows_board_timezone(api):
    api.list_notes.return_value = [_note("1")]
    d = Dashboard(api, tz=ZoneInfo("Pacific/Kiritimati"))
    d.refresh()
    later = datetime(2026, 4, 1, tzinfo=timezone.utc)
    # 10:00 UTC on Mar 18 is already Mar 19 at UTC+14
    assert d.relative_date(d.notes[0], now=later) == "Mar 19"
