"""
NoteBoard — Note Board Orchestrator Tests
==========================================

What:  Tests for NoteBoard against in-memory Record/Blob Store doubles.
How:   Doubles from conftest.py record every call; an asyncio.Event gates the
       remote delete so the optimistic removal can be observed mid-flight.

What we test:
    ✅ Image URLs resolved through BlobStore.get(original key)
    ✅ Empty submit makes zero Record Store calls and keeps the form
    ✅ Optimistic delete: note gone before the remote delete returns
    ✅ Form reset and refresh after a successful create
    ✅ No partially resolved list is ever committed
    ✅ Upload-then-attach: key set immediately, one put, no record call
    ✅ Failure propagation without rollback or form reset
"""

import asyncio

import pytest

from noteboard.exceptions import (
    NotFoundError,
    StorageError,
    TransientNetworkError,
    ValidationError,
)
from noteboard.services.board_state import FormState
from noteboard.services.note_board import NoteBoard
from noteboard.services.store_base import Failure, FailureKind, Ok


class TestRefresh:

    @pytest.mark.asyncio
    async def test_image_resolved_from_original_key(self, board, record_store, blob_store):
        blob_store.objects["cat.png"] = b"meow"
        record_store.seed("Cat", "Grey cat", image_key="cat.png")

        await board.refresh()

        (note,) = board.state.notes
        assert note.image_url == "https://blobs.test/cat.png?sig=1"
        assert blob_store.gets == ["cat.png"]

    @pytest.mark.asyncio
    async def test_notes_without_image_are_not_resolved(self, board, record_store, blob_store):
        record_store.seed("Plain", "No picture")

        await board.refresh()

        assert board.state.notes[0].image_url is None
        assert blob_store.gets == []

    @pytest.mark.asyncio
    async def test_resolution_failure_keeps_previous_list(self, board, record_store, blob_store):
        blob_store.objects["a.png"] = b"a"
        record_store.seed("A", "first", image_key="a.png")
        await board.refresh()
        before = board.state.notes

        record_store.seed("B", "second", image_key="missing.png")
        with pytest.raises(NotFoundError):
            await board.refresh()

        assert board.state.notes == before

    @pytest.mark.asyncio
    async def test_resolutions_run_concurrently(self, record_store):
        """Every get() is in flight before any of them returns."""
        in_flight = 0
        peak = 0
        release = asyncio.Event()

        class SlowBlobs:
            async def get(self, key):
                nonlocal in_flight, peak
                in_flight += 1
                peak = max(peak, in_flight)
                await release.wait()
                in_flight -= 1
                return Ok(f"https://blobs.test/{key}")

        for i in range(3):
            record_store.seed(f"n{i}", "d", image_key=f"{i}.png")
        board = NoteBoard(record_store, SlowBlobs())

        task = asyncio.create_task(board.refresh())
        await asyncio.sleep(0)
        await asyncio.sleep(0)
        assert board.state.notes == ()
        release.set()
        await task

        assert peak == 3
        assert len(board.state.notes) == 3

    @pytest.mark.asyncio
    async def test_first_failure_in_list_order_is_raised(self, board, record_store, blob_store):
        record_store.seed("A", "d", image_key="a.png")
        record_store.seed("B", "d", image_key="b.png")
        blob_store.fail_keys["a.png"] = Failure(FailureKind.TRANSIENT_NETWORK, "timeout")
        blob_store.fail_keys["b.png"] = Failure(FailureKind.STORAGE, "broken")

        with pytest.raises(TransientNetworkError):
            await board.refresh()

    @pytest.mark.asyncio
    async def test_list_failure_propagates(self, board, record_store):
        record_store.fail_next["list"] = Failure(FailureKind.TRANSIENT_NETWORK, "down")

        with pytest.raises(TransientNetworkError):
            await board.refresh()


class TestInitialize:

    @pytest.mark.asyncio
    async def test_initialize_refreshes_once(self, board, record_store):
        record_store.seed("A", "d")

        await board.initialize()
        await board.initialize()

        assert record_store.calls == [("list",)]
        assert len(board.state.notes) == 1

    @pytest.mark.asyncio
    async def test_failed_initialize_is_not_retried(self, board, record_store):
        record_store.fail_next["list"] = Failure(FailureKind.TRANSIENT_NETWORK, "down")

        with pytest.raises(TransientNetworkError):
            await board.initialize()
        await board.initialize()

        assert board.initialized
        assert record_store.calls == [("list",)]


class TestCreate:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name,description", [("", ""), ("Title", ""), ("", "Body")])
    async def test_empty_submit_is_guarded(self, board, record_store, name, description):
        board.on_field_change("name", name)
        board.on_field_change("description", description)
        form_before = board.state.form

        await board.create_note()

        assert record_store.calls == []
        assert board.state.form == form_before

    @pytest.mark.asyncio
    async def test_successful_create_resets_form_and_refreshes(self, board, record_store):
        board.on_field_change("name", "Groceries")
        board.on_field_change("description", "milk, eggs")

        await board.create_note()

        assert board.state.form == FormState()
        assert [call[0] for call in record_store.calls] == ["create", "list"]
        assert [n.name for n in board.state.notes] == ["Groceries"]

    @pytest.mark.asyncio
    async def test_create_submits_raw_image_key(self, board, record_store, blob_store):
        await board.on_image_selected("cat.png", b"meow")
        board.on_field_change("name", "Cat")
        board.on_field_change("description", "Grey")

        await board.create_note()

        _, submitted = record_store.calls[0]
        assert submitted.image_key == "cat.png"
        assert board.state.notes[0].image_url == "https://blobs.test/cat.png?sig=1"

    @pytest.mark.asyncio
    async def test_failed_create_keeps_form_and_skips_refresh(self, board, record_store):
        record_store.fail_next["create"] = Failure(FailureKind.VALIDATION, "name required")
        board.on_field_change("name", "A")
        board.on_field_change("description", "B")

        with pytest.raises(ValidationError):
            await board.create_note()

        assert board.state.form == FormState(name="A", description="B")
        assert [call[0] for call in record_store.calls] == ["create"]


class TestImageSelection:

    @pytest.mark.asyncio
    async def test_upload_then_attach(self, board, record_store, blob_store):
        await board.on_image_selected("cat.png", b"meow")

        assert board.state.form.image_key == "cat.png"
        assert blob_store.puts == ["cat.png"]
        assert blob_store.objects["cat.png"] == b"meow"
        assert record_store.calls == []
        assert board.state.notes == ()

    @pytest.mark.asyncio
    async def test_key_set_before_upload_completes(self, board, record_store):
        started = asyncio.Event()
        release = asyncio.Event()

        class GatedBlobs:
            async def put(self, key, content):
                started.set()
                await release.wait()
                return Ok(None)

        gated = NoteBoard(record_store, GatedBlobs())
        task = asyncio.create_task(gated.on_image_selected("cat.png", b"meow"))
        await started.wait()

        assert gated.state.form.image_key == "cat.png"
        release.set()
        await task

    @pytest.mark.asyncio
    async def test_no_file_is_noop(self, board, blob_store):
        await board.on_image_selected(None)

        assert board.state.form.image_key is None
        assert blob_store.puts == []

    @pytest.mark.asyncio
    async def test_upload_failure_keeps_key(self, board, blob_store):
        blob_store.fail_keys["cat.png"] = Failure(FailureKind.STORAGE, "disk full")

        with pytest.raises(StorageError):
            await board.on_image_selected("cat.png", b"meow")

        assert board.state.form.image_key == "cat.png"


class TestDelete:

    @pytest.mark.asyncio
    async def test_note_removed_before_remote_delete_resolves(self, record_store, blob_store):
        keep = record_store.seed("Keep", "d")
        doomed = record_store.seed("Doomed", "d")
        started = asyncio.Event()
        release = asyncio.Event()
        original_delete = record_store.delete

        async def gated_delete(note_id):
            started.set()
            await release.wait()
            return await original_delete(note_id)

        record_store.delete = gated_delete
        board = NoteBoard(record_store, blob_store)
        await board.refresh()

        task = asyncio.create_task(board.delete_note(doomed.id))
        await started.wait()

        assert [n.id for n in board.state.notes] == [keep.id]
        release.set()
        await task
        assert doomed.id not in record_store.notes

    @pytest.mark.asyncio
    async def test_failed_delete_is_not_rolled_back(self, board, record_store):
        note = record_store.seed("A", "d")
        await board.refresh()
        record_store.fail_next["delete"] = Failure(FailureKind.TRANSIENT_NETWORK, "timeout")

        with pytest.raises(TransientNetworkError):
            await board.delete_note(note.id)

        assert board.state.notes == ()
        assert note.id in record_store.notes

    @pytest.mark.asyncio
    async def test_delete_unknown_note_surfaces_not_found(self, board):
        with pytest.raises(NotFoundError) as exc_info:
            await board.delete_note("ghost")
        assert exc_info.value.context["resource_id"] == "ghost"


class TestFieldChange:

    def test_unknown_field_rejected(self, board):
        with pytest.raises(ValidationError):
            board.on_field_change("colour", "blue")
