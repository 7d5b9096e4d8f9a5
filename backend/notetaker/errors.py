from __future__ import annotations

from typing import Any, Optional


class AppError(Exception):
    """Base for errors that map onto an HTTP status and a JSON error body."""

    status_code = 500
    message = "Something went wrong"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        if message:
            self.message = message

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message}


class Unauthorized(AppError):
    status_code = 401
    message = "Unauthorized"


class NotFound(AppError):
    # also used for notes owned by someone else (no existence leak)
    status_code = 404
    message = "Note not found"


class ValidationFailed(AppError):
    status_code = 400
    message = "Validation failed"

    def __init__(self, details: list[dict[str, str]], message: Optional[str] = None):
        super().__init__(message)
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message, "details": self.details}


class Conflict(AppError):
    status_code = 400
    message = "User already exists"


class InternalError(AppError):
    status_code = 500
    message = "Something went wrong"


class StorageError(Exception):
    """Raised by the file stores on I/O failures or corrupt records."""
