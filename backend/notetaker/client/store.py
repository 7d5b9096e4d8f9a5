"""Client-side note state as an immutable value plus pure transitions.

Every transition returns a new ``NotesState``; nothing is mutated in place.
The selection is always either None or one of the notes in ``notes``.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, Optional

from notetaker.models.notes import NoteOut


@dataclass(frozen=True)
class NotesState:
    notes: tuple[NoteOut, ...] = ()
    selected: Optional[NoteOut] = None

    def find(self, note_id: str) -> Optional[NoteOut]:
        return next((n for n in self.notes if n.id == note_id), None)


def set_all(state: NotesState, notes: Iterable[NoteOut]) -> NotesState:
    new = NotesState(notes=tuple(notes))
    if state.selected is None:
        return new
    # keep the selection only if it survived the reload
    return replace(new, selected=new.find(state.selected.id))


def add(state: NotesState, note: NoteOut) -> NotesState:
    return replace(state, notes=state.notes + (note,))


def replace_by_id(state: NotesState, note: NoteOut) -> NotesState:
    notes = tuple(note if n.id == note.id else n for n in state.notes)
    selected = state.selected
    if selected is not None and selected.id == note.id:
        selected = note
    return NotesState(notes=notes, selected=selected)


def remove_by_id(state: NotesState, note_id: str) -> NotesState:
    notes = tuple(n for n in state.notes if n.id != note_id)
    selected = state.selected
    if selected is not None and selected.id == note_id:
        selected = None
    return NotesState(notes=notes, selected=selected)


def select(state: NotesState, note: Optional[NoteOut]) -> NotesState:
    if note is None:
        return clear_selection(state)
    # a note that is not in the list cannot be selected
    return replace(state, selected=state.find(note.id))


def clear_selection(state: NotesState) -> NotesState:
    return replace(state, selected=None)
