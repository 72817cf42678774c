"""
HTTP client for the Notiq API.

Attaches the bearer token to every request once logged in; non-2xx answers
raise `ApiError` with the server's message.
"""
import logging
from typing import Any, BinaryIO, Dict, List, Optional

import requests

_log = logging.getLogger("notiq.client")


class ApiError(Exception):
    def __init__(self, status_code: int, message: str, errors: Optional[List[Dict[str, Any]]] = None) -> None:
        self.status_code = status_code
        self.message = message
        self.errors = errors or []
        super().__init__(f"{status_code}: {message}")


class NotesApi:
    def __init__(
        self,
        base_url: str = "http://localhost:8000/api",
        *,
        token: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(self, method: str, path: str, **kwargs) -> Any:
        headers = kwargs.pop("headers", {})
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        resp = self.session.request(
            method, f"{self.base_url}{path}", headers=headers, timeout=self.timeout, **kwargs
        )
        try:
            data = resp.json() if resp.content else None
        except ValueError:
            data = None
        if not 200 <= resp.status_code < 300:
            body = data if isinstance(data, dict) else {}
            _log.debug("%s %s -> %s", method, path, resp.status_code)
            raise ApiError(resp.status_code, body.get("message") or resp.reason or "Request failed", body.get("errors"))
        return data

    # --- auth ---
    def signup(self, email: str, password: str) -> Dict[str, Any]:
        return self._request("POST", "/auth/signup", json={"email": email, "password": password})

    def login(self, email: str, password: str) -> Dict[str, Any]:
        data = self._request("POST", "/auth/login", json={"email": email, "password": password})
        self.token = data["token"]
        return data

    def logout(self) -> None:
        self.token = None

    def profile(self) -> Dict[str, Any]:
        return self._request("GET", "/auth/profile")

    # --- notes ---
    def list_notes(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/notes")

    def create_note(self, title: str, content: str, **fields: Any) -> Dict[str, Any]:
        return self._request("POST", "/notes", json={"title": title, "content": content, **fields})

    def update_note(self, note_id: str, **fields: Any) -> Dict[str, Any]:
        return self._request("PUT", f"/notes/{note_id}", json=fields)

    def delete_note(self, note_id: str) -> Dict[str, Any]:
        return self._request("DELETE", f"/notes/{note_id}")

    def upload_attachment(self, note_id: str, filename: str, fileobj: BinaryIO, content_type: str) -> Dict[str, Any]:
        files = {"file": (filename, fileobj, content_type)}
        return self._request("POST", f"/notes/{note_id}/upload", files=files)
