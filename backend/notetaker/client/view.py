from __future__ import annotations

import logging
from typing import Callable, Optional, TypeVar

import httpx

from notetaker.client import store
from notetaker.client.api import NotesApiClient, NotesApiError
from notetaker.client.store import NotesState

logger = logging.getLogger(__name__)

T = TypeVar("T")

PREVIEW_CHARS = 60


def _preview(text: str) -> str:
    line = " ".join(text.split())
    if len(line) <= PREVIEW_CHARS:
        return line
    return line[: PREVIEW_CHARS - 3] + "..."


def render_list(state: NotesState) -> str:
    count = len(state.notes)
    lines = [f"{count} {'note' if count == 1 else 'notes'}"]
    if not state.notes:
        lines.append("No notes yet. Create your first note to get started!")
        return "\n".join(lines)

    for n in state.notes:
        marker = ">" if state.selected is not None and state.selected.id == n.id else " "
        lines.append(f"{marker} {n.title or 'Untitled'}  [{n.updated_at[:10]}]")
        lines.append(f"    {_preview(n.content)}")
    return "\n".join(lines)


def render_editor(state: NotesState) -> str:
    note = state.selected
    if note is None:
        return "Select a note from the list or create a new one to start writing"
    return "\n".join([
        note.title,
        "-" * min(len(note.title), 40),
        note.content,
        "",
        f"Last edited {note.updated_at[:10]}",
    ])


class NotesController:
    """Runs an API call, then the matching store transition.

    On failure the state is left untouched and a message is appended to
    ``notifications`` for the UI to show.
    """

    def __init__(self, api: NotesApiClient, state: Optional[NotesState] = None):
        self.api = api
        self.state = state or NotesState()
        self.notifications: list[str] = []

    def _call(self, what: str, fn: Callable[[], T]) -> Optional[T]:
        try:
            return fn()
        except NotesApiError as exc:
            self.notifications.append(f"Could not {what}: {exc.message}")
        except httpx.HTTPError as exc:
            logger.warning("transport error while trying to %s: %s", what, exc)
            self.notifications.append(f"Could not {what}: network error")
        return None

    def refresh(self, search: Optional[str] = None) -> bool:
        notes = self._call("load notes", lambda: self.api.list_notes(search=search))
        if notes is None:
            return False
        self.state = store.set_all(self.state, notes)
        return True

    def create(self, title: str, content: str) -> bool:
        note = self._call("create note", lambda: self.api.create_note(title, content))
        if note is None:
            return False
        self.state = store.select(store.add(self.state, note), note)
        return True

    def save(self, title: Optional[str] = None, content: Optional[str] = None) -> bool:
        current = self.state.selected
        if current is None:
            return False
        note = self._call("update note", lambda: self.api.update_note(current.id, title=title, content=content))
        if note is None:
            return False
        self.state = store.replace_by_id(self.state, note)
        return True

    def delete(self, note_id: str) -> bool:
        def _delete() -> bool:
            self.api.delete_note(note_id)
            return True

        if not self._call("delete note", _delete):
            return False
        self.state = store.remove_by_id(self.state, note_id)
        return True

    def select(self, note_id: Optional[str]) -> None:
        if note_id is None:
            self.state = store.clear_selection(self.state)
            return
        note = self.state.find(note_id)
        self.state = store.select(self.state, note)
