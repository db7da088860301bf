"""
NoteBoard — Board State Transitions
====================================

What:  The two state containers the board owns (displayed notes, form) and
       the pure function that moves them forward.
How:   transition(state, event) -> Transition(state', effects). No I/O happens
       here; effects describe the store calls the NoteBoard must run next.
Who:   Called only by NoteBoard (services/note_board.py).

Transition table:
    FieldChanged(field, value)   form.<field> = value                 → —
    ImageSelected(name, bytes)   form.image_key = name                → UploadImage
                                 (no-op when no file was chosen)
    SubmitRequested()            unchanged                            → CreateRecord
                                 (no effect when name/description empty)
    NoteCreated(record)          form reset                           → Refresh
    NotesLoaded(notes)           notes replaced wholesale             → —
    DeleteRequested(note_id)     note removed by id                   → DeleteRecord
"""

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from pydantic import BaseModel

from noteboard.exceptions import ValidationError
from noteboard.schemas.note import DisplayNote, NoteInput, NoteRecord

FORM_FIELDS = ("name", "description")


class FormState(BaseModel):
    """Transient form; `image_key` is always a raw filename, never a URL."""
    name: str = ""
    description: str = ""
    image_key: Optional[str] = None

    model_config = {"frozen": True}

    @property
    def is_complete(self) -> bool:
        return bool(self.name) and bool(self.description)

    def to_input(self) -> NoteInput:
        return NoteInput(name=self.name, description=self.description, image_key=self.image_key)


class BoardState(BaseModel):
    notes: Tuple[DisplayNote, ...] = ()
    form: FormState = FormState()

    model_config = {"frozen": True}


# ══════════════════════════════════════════════════════════════════════════
# Events
# ══════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class FieldChanged:
    field: str
    value: str


@dataclass(frozen=True)
class ImageSelected:
    filename: Optional[str]
    content: bytes = b""


@dataclass(frozen=True)
class SubmitRequested:
    pass


@dataclass(frozen=True)
class NoteCreated:
    record: NoteRecord


@dataclass(frozen=True)
class NotesLoaded:
    notes: Tuple[DisplayNote, ...]


@dataclass(frozen=True)
class DeleteRequested:
    note_id: str


Event = Union[FieldChanged, ImageSelected, SubmitRequested, NoteCreated, NotesLoaded, DeleteRequested]


# ══════════════════════════════════════════════════════════════════════════
# Effects
# ══════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class UploadImage:
    key: str
    content: bytes


@dataclass(frozen=True)
class CreateRecord:
    note: NoteInput


@dataclass(frozen=True)
class DeleteRecord:
    note_id: str


@dataclass(frozen=True)
class Refresh:
    pass


Effect = Union[UploadImage, CreateRecord, DeleteRecord, Refresh]


@dataclass(frozen=True)
class Transition:
    state: BoardState
    effects: Tuple[Effect, ...] = ()


def transition(state: BoardState, event: Event) -> Transition:
    """
    Apply one event to the board state.

    Raises:
        ValidationError: FieldChanged names a field other than name/description.
        TypeError: the event type is unknown.
    """
    if isinstance(event, FieldChanged):
        if event.field not in FORM_FIELDS:
            raise ValidationError(
                message=f"Unknown form field '{event.field}'. Allowed: {', '.join(FORM_FIELDS)}",
                field=event.field,
            )
        form = state.form.model_copy(update={event.field: event.value})
        return Transition(state.model_copy(update={"form": form}))

    if isinstance(event, ImageSelected):
        if not event.filename:
            return Transition(state)
        form = state.form.model_copy(update={"image_key": event.filename})
        return Transition(
            state.model_copy(update={"form": form}),
            (UploadImage(key=event.filename, content=event.content),),
        )

    if isinstance(event, SubmitRequested):
        if not state.form.is_complete:
            return Transition(state)
        return Transition(state, (CreateRecord(note=state.form.to_input()),))

    if isinstance(event, NoteCreated):
        return Transition(state.model_copy(update={"form": FormState()}), (Refresh(),))

    if isinstance(event, NotesLoaded):
        return Transition(state.model_copy(update={"notes": tuple(event.notes)}))

    if isinstance(event, DeleteRequested):
        remaining = tuple(note for note in state.notes if note.id != event.note_id)
        return Transition(
            state.model_copy(update={"notes": remaining}),
            (DeleteRecord(note_id=event.note_id),),
        )

    raise TypeError(f"Unknown board event: {event!r}")
