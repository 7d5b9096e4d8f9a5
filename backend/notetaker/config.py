from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

# backend/notetaker/config.py -> repository_root/data
DEFAULT_DATA_DIR = Path(__file__).resolve().parents[2] / "data"

_TRUTHY = {"1", "true", "yes", "on"}


def _int_env(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _bool_env(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    jwt_secret: str
    jwt_algorithm: str
    jwt_exp_minutes: int
    bcrypt_rounds: Optional[int]
    allow_header_identity: bool
    log_level: str

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            data_dir=Path(os.getenv("APP_DATA_DIR", str(DEFAULT_DATA_DIR))),
            jwt_secret=os.getenv("JWT_SECRET", ""),
            jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
            jwt_exp_minutes=_int_env("JWT_EXP_MINUTES", 15),
            bcrypt_rounds=_int_env("BCRYPT_ROUNDS", None),
            allow_header_identity=_bool_env("NOTETAKER_ALLOW_HEADER_IDENTITY"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
