from __future__ import annotations

import hashlib
import json
import uuid
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from notetaker.errors import StorageError


def _safe_user_dir(base_dir: Path, user_id: str) -> Path:
    # avoid path traversal
    if not user_id or any(ch in user_id for ch in ["/", "\\"]) or ".." in user_id:
        raise ValueError("Invalid user_id")
    return base_dir / "users" / user_id


def _email_key(email: str) -> str:
    # emails are unique regardless of case
    return hashlib.sha256(email.strip().lower().encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class UserRecord:
    user_id: str
    email: str
    hashed_password: str
    name: Optional[str]
    created_at: str


class UsersStore:
    """User records plus an email index enforcing uniqueness.

    ``users/<id>/user.json`` holds the record and ``emails/<sha256>.json`` maps
    a normalized email to its user id. The index entry is claimed with an
    exclusive create, so two registrations racing on one email cannot both win.
    """

    def __init__(self, base_dir: Path):
        self.base_dir = base_dir

    def _user_path(self, user_id: str) -> Path:
        return _safe_user_dir(self.base_dir, user_id) / "user.json"

    def _email_path(self, email: str) -> Path:
        return self.base_dir / "emails" / f"{_email_key(email)}.json"

    def get(self, user_id: str) -> Optional[UserRecord]:
        p = self._user_path(user_id)
        if not p.exists():
            return None
        try:
            raw = json.loads(p.read_text(encoding="utf-8"))
            return UserRecord(
                user_id=raw["user_id"],
                email=raw["email"],
                hashed_password=raw["hashed_password"],
                name=raw.get("name"),
                created_at=raw["created_at"],
            )
        except (OSError, ValueError, KeyError) as exc:
            raise StorageError(f"Unreadable user record {user_id}") from exc

    def get_by_email(self, email: str) -> Optional[UserRecord]:
        p = self._email_path(email)
        if not p.exists():
            return None
        try:
            user_id = json.loads(p.read_text(encoding="utf-8"))["user_id"]
        except (OSError, ValueError, KeyError) as exc:
            raise StorageError("Unreadable email index entry") from exc
        return self.get(user_id)

    def create(self, email: str, hashed_password: str, name: Optional[str] = None) -> UserRecord:
        """Persist a new user. Raises FileExistsError if the email is taken."""
        rec = UserRecord(
            user_id=str(uuid.uuid4()),
            email=email,
            hashed_password=hashed_password,
            name=name,
            created_at=datetime.now(timezone.utc).isoformat(),
        )

        index = self._email_path(email)
        try:
            index.parent.mkdir(parents=True, exist_ok=True)
            with index.open("x", encoding="utf-8") as f:
                json.dump({"user_id": rec.user_id}, f)
        except FileExistsError:
            raise
        except OSError as exc:
            raise StorageError("Could not reserve email") from exc

        p = self._user_path(rec.user_id)
        try:
            p.parent.mkdir(parents=True, exist_ok=True)
            tmp = p.with_suffix(".tmp")
            tmp.write_text(json.dumps(asdict(rec), ensure_ascii=False, indent=2), encoding="utf-8")
            tmp.replace(p)
        except OSError as exc:
            # release the email so the user can try again
            index.unlink(missing_ok=True)
            raise StorageError("Could not write user record") from exc
        return rec
