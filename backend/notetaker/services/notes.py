"""Note use cases.

Every operation receives the caller's user id (already resolved by the HTTP
layer) and runs: ownership lookup -> payload validation -> store call. The
ownership lookup is ``find_owned(id, user)``; a note that belongs to someone
else and a note that does not exist both come back as ``NotFound``.
"""
from __future__ import annotations

import logging
import uuid
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from notetaker.errors import InternalError, NotFound, StorageError
from notetaker.models.validation import validate_note_create, validate_note_update
from notetaker.storage.event_log import NOTE_CREATED, NOTE_DELETED, NOTE_UPDATED, Event, EventLog
from notetaker.storage.notes_store import Note, NotesStore

logger = logging.getLogger(__name__)


@contextmanager
def storage_boundary(action: str) -> Iterator[None]:
    try:
        yield
    except StorageError:
        logger.exception("storage failure during %s", action)
        raise InternalError()


def _parse_note_id(raw: Any) -> uuid.UUID:
    # a malformed id cannot name any note
    try:
        return uuid.UUID(str(raw))
    except ValueError:
        raise NotFound()


class NoteService:
    def __init__(self, store: NotesStore, events: EventLog):
        self.store = store
        self.events = events

    def _owned(self, note_id: Any, user_id: str) -> Note:
        nid = _parse_note_id(note_id)
        with storage_boundary("lookup"):
            note = self.store.find_owned(nid, user_id)
        if note is None:
            raise NotFound()
        return note

    def list_notes(self, user_id: str, search: Optional[str] = None) -> list[Note]:
        with storage_boundary("list"):
            return self.store.list_owned(user_id, search=search)

    def get_note(self, user_id: str, note_id: Any) -> Note:
        return self._owned(note_id, user_id)

    def create_note(self, user_id: str, payload: Any) -> Note:
        data = validate_note_create(payload)
        with storage_boundary("create"):
            note = self.store.create(user_id, title=data.title, content=data.content)

        logger.info("note %s created by user %s", note.id, user_id)
        self.events.emit(Event(event_type=NOTE_CREATED, user_id=user_id, note_id=str(note.id)))
        return note

    def update_note(self, user_id: str, note_id: Any, payload: Any) -> Note:
        existing = self._owned(note_id, user_id)
        changes = validate_note_update(payload).changes()

        with storage_boundary("update"):
            updated = self.store.update(existing.id, user_id, changes)
        if updated is None:
            # deleted after the lookup
            raise NotFound()

        logger.info("note %s updated by user %s (%s)", updated.id, user_id, ",".join(sorted(changes)) or "touch")
        self.events.emit(Event(
            event_type=NOTE_UPDATED,
            user_id=user_id,
            note_id=str(updated.id),
            meta={"fields": sorted(changes)},
        ))
        return updated

    def delete_note(self, user_id: str, note_id: Any) -> None:
        existing = self._owned(note_id, user_id)
        with storage_boundary("delete"):
            removed = self.store.delete(existing.id, user_id)
        if not removed:
            raise NotFound()

        logger.info("note %s deleted by user %s", existing.id, user_id)
        self.events.emit(Event(event_type=NOTE_DELETED, user_id=user_id, note_id=str(existing.id)))
