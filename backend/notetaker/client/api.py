from __future__ import annotations

from typing import Any, Optional

import httpx

from notetaker.models.notes import NoteOut


class NotesApiError(Exception):
    def __init__(self, status_code: int, message: str, details: Optional[list[dict[str, str]]] = None):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.details = details or []


def _raise_for_error(resp: httpx.Response) -> None:
    if resp.is_success:
        return
    try:
        body = resp.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}
    raise NotesApiError(resp.status_code, body.get("error") or resp.reason_phrase, body.get("details"))


class NotesApiClient:
    """Thin HTTP client for the NoteTaker API.

    Pass any ``httpx.Client`` (a FastAPI ``TestClient`` works too). After
    ``login`` the bearer token is sent on every request.
    """

    def __init__(self, http: httpx.Client, token: Optional[str] = None):
        self.http = http
        self.token = token

    @classmethod
    def connect(cls, base_url: str, timeout: float = 10.0) -> "NotesApiClient":
        return cls(httpx.Client(base_url=base_url, timeout=timeout))

    def _headers(self) -> dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        resp = self.http.request(method, url, headers=self._headers(), **kwargs)
        _raise_for_error(resp)
        return resp

    def register(self, email: str, password: str, name: Optional[str] = None) -> dict[str, Any]:
        body: dict[str, Any] = {"email": email, "password": password}
        if name is not None:
            body["name"] = name
        return self._request("POST", "/register", json=body).json()["user"]

    def login(self, email: str, password: str) -> str:
        resp = self._request("POST", "/login", json={"email": email, "password": password})
        self.token = resp.json()["access_token"]
        return self.token

    def list_notes(self, search: Optional[str] = None) -> list[NoteOut]:
        params = {"search": search} if search else None
        resp = self._request("GET", "/notes", params=params)
        return [NoteOut.model_validate(n) for n in resp.json()]

    def get_note(self, note_id: str) -> NoteOut:
        return NoteOut.model_validate(self._request("GET", f"/notes/{note_id}").json())

    def create_note(self, title: str, content: str) -> NoteOut:
        resp = self._request("POST", "/notes", json={"title": title, "content": content})
        return NoteOut.model_validate(resp.json())

    def update_note(self, note_id: str, title: Optional[str] = None, content: Optional[str] = None) -> NoteOut:
        body = {k: v for k, v in (("title", title), ("content", content)) if v is not None}
        resp = self._request("PATCH", f"/notes/{note_id}", json=body)
        return NoteOut.model_validate(resp.json())

    def delete_note(self, note_id: str) -> None:
        self._request("DELETE", f"/notes/{note_id}")
