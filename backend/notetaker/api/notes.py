from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, Request

from notetaker.api.body import owned_json_body
from notetaker.models.notes import DeleteResult, NoteOut
from notetaker.services.notes import NoteService
from notetaker.storage.notes_store import Note
from notetaker.utils.identity import get_user_id

router = APIRouter(prefix="/notes", tags=["notes"])


def get_note_service(request: Request) -> NoteService:
    return request.app.state.note_service


def to_out(note: Note) -> NoteOut:
    return NoteOut(
        id=str(note.id),
        title=note.title,
        content=note.content,
        created_at=note.created_at,
        updated_at=note.updated_at,
    )


# bodies are read after identity and validated by the service after the
# ownership check


@router.get("", response_model=list[NoteOut])
def list_notes(
    search: Optional[str] = Query(default=None),
    user_id: str = Depends(get_user_id),
    service: NoteService = Depends(get_note_service),
) -> list[NoteOut]:
    return [to_out(n) for n in service.list_notes(user_id, search=search)]


@router.post("", response_model=NoteOut, status_code=201)
def create_note(
    payload: Any = Depends(owned_json_body),
    user_id: str = Depends(get_user_id),
    service: NoteService = Depends(get_note_service),
) -> NoteOut:
    return to_out(service.create_note(user_id, payload))


@router.get("/{note_id}", response_model=NoteOut)
def get_note(
    note_id: str,
    user_id: str = Depends(get_user_id),
    service: NoteService = Depends(get_note_service),
) -> NoteOut:
    return to_out(service.get_note(user_id, note_id))


@router.patch("/{note_id}", response_model=NoteOut)
def update_note(
    note_id: str,
    payload: Any = Depends(owned_json_body),
    user_id: str = Depends(get_user_id),
    service: NoteService = Depends(get_note_service),
) -> NoteOut:
    return to_out(service.update_note(user_id, note_id, payload))


@router.delete("/{note_id}", response_model=DeleteResult)
def delete_note(
    note_id: str,
    user_id: str = Depends(get_user_id),
    service: NoteService = Depends(get_note_service),
) -> DeleteResult:
    service.delete_note(user_id, note_id)
    return DeleteResult(success=True)
