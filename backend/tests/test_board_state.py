"""
NoteBoard — Board State Transition Tests
=========================================

What:  Tests for the pure transition() function.
How:   No stores, no event loop: every test feeds one event to a state and
       checks the new state and the effects it asks for.

What we test:
    ✅ Field changes touch only the form
    ✅ Image selection records the raw filename and asks for one upload
    ✅ Submit guard: incomplete form yields no effect
    ✅ Create success resets the form and asks for a refresh
    ✅ Delete removes the note locally before the remote call is requested
    ✅ Unknown fields and events are rejected
"""

import pytest

from noteboard.exceptions import ValidationError
from noteboard.schemas.note import DisplayNote, NoteInput, NoteRecord
from noteboard.services.board_state import (
    BoardState,
    CreateRecord,
    DeleteRecord,
    DeleteRequested,
    FieldChanged,
    FormState,
    ImageSelected,
    NoteCreated,
    NotesLoaded,
    Refresh,
    SubmitRequested,
    UploadImage,
    transition,
)


def _note(note_id: str, image_url=None) -> DisplayNote:
    return DisplayNote(id=note_id, name=f"n{note_id}", description="d", image_url=image_url)


class TestFormTransitions:

    def test_field_change_updates_form_only(self):
        state = BoardState(notes=(_note("1"),))

        result = transition(state, FieldChanged(field="name", value="Groceries"))

        assert result.state.form.name == "Groceries"
        assert result.state.notes == state.notes
        assert result.effects == ()

    def test_field_change_leaves_original_state_untouched(self):
        state = BoardState()

        transition(state, FieldChanged(field="description", value="milk"))

        assert state.form.description == ""

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            transition(BoardState(), FieldChanged(field="image_key", value="x.png"))
        assert exc_info.value.context["field"] == "image_key"

    def test_image_selected_sets_key_and_requests_upload(self):
        result = transition(BoardState(), ImageSelected(filename="cat.png", content=b"meow"))

        assert result.state.form.image_key == "cat.png"
        assert result.effects == (UploadImage(key="cat.png", content=b"meow"),)

    def test_image_selected_without_file_is_noop(self):
        state = BoardState(form=FormState(name="a"))

        result = transition(state, ImageSelected(filename=None))

        assert result.state == state
        assert result.effects == ()


class TestSubmitTransitions:

    @pytest.mark.parametrize("name,description", [("", ""), ("a", ""), ("", "b")])
    def test_incomplete_form_yields_no_effect(self, name, description):
        state = BoardState(form=FormState(name=name, description=description))

        result = transition(state, SubmitRequested())

        assert result.state == state
        assert result.effects == ()

    def test_complete_form_submits_raw_key(self):
        state = BoardState(form=FormState(name="a", description="b", image_key="cat.png"))

        result = transition(state, SubmitRequested())

        assert result.effects == (
            CreateRecord(note=NoteInput(name="a", description="b", image_key="cat.png")),
        )
        # form is only reset once the create succeeded
        assert result.state.form == state.form

    def test_note_created_resets_form_and_requests_refresh(self):
        state = BoardState(form=FormState(name="a", description="b", image_key="cat.png"))
        record = NoteRecord(id="1", name="a", description="b", image_key="cat.png")

        result = transition(state, NoteCreated(record=record))

        assert result.state.form == FormState()
        assert result.effects == (Refresh(),)


class TestListTransitions:

    def test_notes_loaded_replaces_list(self):
        state = BoardState(notes=(_note("old"),))
        fresh = (_note("1", "https://x/1"), _note("2"))

        result = transition(state, NotesLoaded(notes=fresh))

        assert result.state.notes == fresh

    def test_delete_removes_locally_and_requests_remote_delete(self):
        state = BoardState(notes=(_note("1"), _note("2"), _note("3")))

        result = transition(state, DeleteRequested(note_id="2"))

        assert [n.id for n in result.state.notes] == ["1", "3"]
        assert result.effects == (DeleteRecord(note_id="2"),)

    def test_delete_of_unlisted_id_still_requests_remote_delete(self):
        state = BoardState(notes=(_note("1"),))

        result = transition(state, DeleteRequested(note_id="ghost"))

        assert result.state.notes == state.notes
        assert result.effects == (DeleteRecord(note_id="ghost"),)

    def test_unknown_event_rejected(self):
        with pytest.raises(TypeError):
            transition(BoardState(), object())
