"""
NoteBoard — Note Board Orchestrator
====================================

What:  The one component of the application: owns a BoardState, turns user
       actions into events, and runs the resulting effects against the
       Record Store and the Blob Store.
How:   Every action is `transition()` (pure, services/board_state.py) followed
       by running the returned effects. Each store result is matched at its
       call site: Ok values flow on, a Failure is logged and raised as the
       matching NoteBoardError.
Who:   One instance per browser session (services/board_registry.py); called
       by the HTML and JSON routes.

Flows:
    initialize()       → refresh() once
    refresh()          → list ─▶ get(key) for every keyed note, concurrently
                         ─▶ NotesLoaded (only after every get succeeded)
    on_image_selected  → ImageSelected (key set first) ─▶ put(key, bytes)
    create_note()      → SubmitRequested ─▶ create ─▶ NoteCreated (form reset)
                         ─▶ refresh()
    delete_note(id)    → DeleteRequested (removed locally) ─▶ delete

    No retries. A failed delete is not rolled back; a failed create leaves
    the form as it was. The next refresh() is the only resynchronisation.
"""

import asyncio
import logging
from typing import Iterable, List, Optional, Tuple

from noteboard.schemas.note import DisplayNote, NoteRecord
from noteboard.services.board_state import (
    BoardState,
    CreateRecord,
    DeleteRecord,
    DeleteRequested,
    Effect,
    Event,
    FieldChanged,
    ImageSelected,
    NoteCreated,
    NotesLoaded,
    Refresh,
    SubmitRequested,
    UploadImage,
    transition,
)
from noteboard.services.store_base import (
    BlobStore,
    Failure,
    Ok,
    RecordStore,
    Result,
    error_for_failure,
)

logger = logging.getLogger(__name__)


class NoteBoard:
    """
    Per-session note board.

    State is replaced, never mutated: `self.state` always points at the most
    recent BoardState, so overlapping operations interleave only at awaits and
    the last NotesLoaded to land wins.
    """

    def __init__(
        self,
        record_store: RecordStore,
        blob_store: BlobStore,
        session_id: str = "",
    ):
        self._records = record_store
        self._blobs = blob_store
        self.session_id = session_id
        self._state = BoardState()
        self._initialized = False

    @property
    def state(self) -> BoardState:
        return self._state

    @property
    def initialized(self) -> bool:
        return self._initialized

    # ── Public operations ─────────────────────────────────────────────────

    async def initialize(self) -> None:
        """Load the note list once. Later calls do nothing, even after a failure."""
        if self._initialized:
            return
        self._initialized = True
        await self.refresh()

    async def refresh(self) -> None:
        """
        Replace the displayed list with a freshly fetched, fully resolved one.

        Image keys are resolved concurrently with asyncio.gather. The list is
        committed only once every resolution has come back; if any failed, the
        first failure in list order is raised and the displayed list is left
        untouched.
        """
        records = self._unwrap(await self._records.list(), "list notes")

        keyed = [record for record in records if record.image_key]
        resolutions = await asyncio.gather(
            *(self._blobs.get(record.image_key) for record in keyed)
        )
        notes = tuple(self._resolve_all(records, resolutions))

        self._dispatch(NotesLoaded(notes=notes))
        logger.info(
            "[%s] Refreshed board: %d notes (%d images resolved)",
            self.session_id, len(notes), len(keyed),
        )

    def on_field_change(self, field: str, value: str) -> None:
        self._dispatch(FieldChanged(field=field, value=value))

    async def on_image_selected(self, filename: Optional[str], content: bytes = b"") -> None:
        """
        Record the filename in the form, then upload the bytes under it.

        The key is recorded before the upload starts; an upload failure
        propagates but leaves the key in the form.
        """
        await self._run(self._dispatch(ImageSelected(filename=filename, content=content)))

    async def create_note(self) -> None:
        """Submit the form as a new note; no-op when name or description is empty."""
        effects = self._dispatch(SubmitRequested())
        if not effects:
            logger.debug("[%s] Submit ignored: name or description empty", self.session_id)
        await self._run(effects)

    async def delete_note(self, note_id: str) -> None:
        """Remove the note from view, then delete it remotely. Never rolled back."""
        await self._run(self._dispatch(DeleteRequested(note_id=note_id)))

    # ── Effect interpreter ────────────────────────────────────────────────

    def _dispatch(self, event: Event) -> Tuple[Effect, ...]:
        result = transition(self._state, event)
        self._state = result.state
        return result.effects

    async def _run(self, effects: Iterable[Effect]) -> None:
        for effect in effects:
            if isinstance(effect, UploadImage):
                self._unwrap(await self._blobs.put(effect.key, effect.content), "upload image")
                logger.info(
                    "[%s] Uploaded image %s (%d bytes)",
                    self.session_id, effect.key, len(effect.content),
                )
            elif isinstance(effect, CreateRecord):
                record = self._unwrap(await self._records.create(effect.note), "create note")
                logger.info("[%s] Created note %s", self.session_id, record.id)
                await self._run(self._dispatch(NoteCreated(record=record)))
            elif isinstance(effect, DeleteRecord):
                self._unwrap(await self._records.delete(effect.note_id), "delete note")
                logger.info("[%s] Deleted note %s", self.session_id, effect.note_id)
            elif isinstance(effect, Refresh):
                await self.refresh()
            else:
                raise TypeError(f"Unknown board effect: {effect!r}")

    # ── Result matching ───────────────────────────────────────────────────

    def _unwrap(self, result: Result, action: str):
        if isinstance(result, Ok):
            return result.value
        if isinstance(result, Failure):
            logger.warning(
                "[%s] %s failed (%s): %s",
                self.session_id, action, result.kind.value, result.message,
            )
            raise error_for_failure(result)
        raise TypeError(f"Store returned {type(result).__name__}, expected Ok or Failure")

    def _resolve_all(
        self,
        records: List[NoteRecord],
        resolutions: List[Result],
    ) -> Iterable[DisplayNote]:
        pending = iter(resolutions)
        for record in records:
            url = None
            if record.image_key:
                url = self._unwrap(next(pending), f"resolve image {record.image_key}")
            yield DisplayNote.resolved(record, url)
