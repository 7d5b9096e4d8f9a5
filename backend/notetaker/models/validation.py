"""Pure validation entry points.

Each function takes an untrusted JSON value (whatever the client sent) and
either returns a fully validated model or raises ``ValidationFailed`` with one
``{field, message}`` entry per violation. Violations on different fields are
all reported together, and so is every broken rule on the email and password
fields of a registration.
"""
from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from notetaker.errors import ValidationFailed
from notetaker.models.auth import (
    LoginRequest,
    RegisterRequest,
    email_violations,
    password_violations,
)
from notetaker.models.notes import NoteCreate, NoteUpdate

M = TypeVar("M", bound=BaseModel)

_REGISTRATION_RULES = (("email", email_violations), ("password", password_violations))
_REGISTRATION_ORDER = ("email", "password", "name")


def _field_rank(detail: dict[str, str]) -> int:
    try:
        return _REGISTRATION_ORDER.index(detail["field"])
    except ValueError:
        return len(_REGISTRATION_ORDER)


def error_details(exc: ValidationError, messages: dict[tuple[str, str], str] | None = None) -> list[dict[str, str]]:
    messages = messages or {}
    details = []
    for err in exc.errors():
        field = ".".join(str(p) for p in err["loc"])
        details.append({
            "field": field,
            "message": messages.get((field, err["type"]), err["msg"]),
        })
    return details


def _validate(model: type[M], data: Any) -> M:
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise ValidationFailed(error_details(exc, getattr(model, "error_messages", None)))


def validate_registration(data: Any) -> RegisterRequest:
    details = []
    model = None
    try:
        model = RegisterRequest.model_validate(data)
    except ValidationError as exc:
        details = error_details(exc, RegisterRequest.error_messages)

    if isinstance(data, dict):
        for field, check in _REGISTRATION_RULES:
            value = data.get(field)
            if isinstance(value, str):
                details.extend({"field": field, "message": m} for m in check(value))

    if details:
        details.sort(key=_field_rank)
        raise ValidationFailed(details)
    return model


def validate_login(data: Any) -> LoginRequest:
    return _validate(LoginRequest, data)


def validate_note_create(data: Any) -> NoteCreate:
    return _validate(NoteCreate, data)


def validate_note_update(data: Any) -> NoteUpdate:
    return _validate(NoteUpdate, data)
