import json
import logging
import os
import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from notetaker.errors import StorageError

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("title", "content")


def _utc_now_iso() -> str:
    # fixed precision keeps every stored timestamp the same shape
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


def _safe_user_dir(base_dir: Path, user_id: str) -> Path:
    # user ids come from the identity resolver; still refuse anything path-like
    if not user_id or any(ch in user_id for ch in ("/", "\\")) or ".." in user_id:
        raise ValueError("Invalid user_id")
    return base_dir / "users" / user_id / "notes"


def _note_path(base_dir: Path, user_id: str, note_id: uuid.UUID) -> Path:
    return _safe_user_dir(base_dir, user_id) / f"{note_id}.json"


def _atomic_write_json(path: Path, data: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    with tmp_path.open("w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)
        f.flush()
        os.fsync(f.fileno())
    tmp_path.replace(path)


@dataclass(frozen=True)
class Note:
    id: uuid.UUID
    owner_user_id: str
    title: str
    content: str
    created_at: str
    updated_at: str

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "Note":
        return cls(
            id=uuid.UUID(raw["id"]),
            owner_user_id=raw["owner_user_id"],
            title=raw["title"],
            content=raw["content"],
            created_at=raw["created_at"],
            updated_at=raw["updated_at"],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "owner_user_id": self.owner_user_id,
            "title": self.title,
            "content": self.content,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    def matches(self, term: str) -> bool:
        needle = term.casefold()
        return needle in self.title.casefold() or needle in self.content.casefold()


def _recency_key(note: Note) -> tuple[datetime, datetime]:
    return datetime.fromisoformat(note.updated_at), datetime.fromisoformat(note.created_at)


class NotesStore:
    """Owner-scoped note repository.

    Notes live at ``<base_dir>/users/<owner>/notes/<id>.json``. The owner is part
    of every path, so a lookup with the wrong owner simply finds nothing.
    """

    def __init__(self, base_dir: Path):
        self.base_dir = base_dir

    def _read(self, path: Path, owner_id: str) -> Optional[Note]:
        if not path.exists():
            return None
        try:
            note = Note.from_dict(json.loads(path.read_text(encoding="utf-8")))
        except FileNotFoundError:
            # deleted between exists() and read
            return None
        except (OSError, ValueError, KeyError, TypeError) as exc:
            raise StorageError(f"Unreadable note record {path.name}") from exc
        if note.owner_user_id != owner_id:
            return None
        return note

    def _write(self, path: Path, note: Note) -> None:
        try:
            _atomic_write_json(path, note.to_dict())
        except OSError as exc:
            raise StorageError(f"Could not write note {note.id}") from exc

    def find_owned(self, note_id: uuid.UUID, owner_id: str) -> Optional[Note]:
        return self._read(_note_path(self.base_dir, owner_id, note_id), owner_id)

    def list_owned(self, owner_id: str, search: Optional[str] = None) -> list[Note]:
        """All of the owner's notes, most recently updated first.

        ``search`` keeps notes whose title or content contain the term,
        ignoring case. A blank term is the same as no term.
        """
        notes_dir = _safe_user_dir(self.base_dir, owner_id)
        if not notes_dir.exists():
            return []

        out: list[Note] = []
        for p in notes_dir.glob("*.json"):
            try:
                note = self._read(p, owner_id)
            except StorageError:
                logger.warning("skipping corrupt note file %s for user %s", p.name, owner_id)
                continue
            if note is not None:
                out.append(note)

        term = (search or "").strip()
        if term:
            out = [n for n in out if n.matches(term)]

        out.sort(key=_recency_key, reverse=True)
        return out

    def create(self, owner_id: str, title: str, content: str) -> Note:
        note_id = uuid.uuid4()
        now = _utc_now_iso()
        note = Note(
            id=note_id,
            owner_user_id=owner_id,
            title=title,
            content=content,
            created_at=now,
            updated_at=now,
        )
        self._write(_note_path(self.base_dir, owner_id, note_id), note)
        return note

    def update(self, note_id: uuid.UUID, owner_id: str, fields: dict[str, str]) -> Optional[Note]:
        """Apply ``fields`` to the note stored under ``owner_id``.

        Callers confirm ownership first; this only refuses to resurrect a note
        that disappeared in the meantime. Returns None in that case.
        """
        path = _note_path(self.base_dir, owner_id, note_id)
        current = self._read(path, owner_id)
        if current is None:
            return None

        changes = {k: v for k, v in fields.items() if k in UPDATABLE_FIELDS}
        updated = replace(current, updated_at=_utc_now_iso(), **changes)
        self._write(path, updated)
        return updated

    def delete(self, note_id: uuid.UUID, owner_id: str) -> bool:
        path = _note_path(self.base_dir, owner_id, note_id)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as exc:
            raise StorageError(f"Could not delete note {note_id}") from exc
        return True

