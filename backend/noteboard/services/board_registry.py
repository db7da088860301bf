"""
NoteBoard — Session Board Registry
===================================

What:  Holds one NoteBoard per browser session in process memory.
How:   OrderedDict keyed by session id. A board is created and inserted
       before its first await, so two concurrent first requests for one
       session share a board and initialize() runs once. When the registry
       is full, the least recently used session is evicted.
Who:   Stored on app.state by main.create_app(); used by the board routes.

Thread Safety:
    Safe for a single asyncio event loop (uvicorn worker). Boards are not
    shared across worker processes.
"""

import logging
from collections import OrderedDict
from typing import Optional

from noteboard.services.note_board import NoteBoard
from noteboard.services.store_base import BlobStore, RecordStore

logger = logging.getLogger(__name__)


class BoardRegistry:
    def __init__(self, record_store: RecordStore, blob_store: BlobStore, max_sessions: int = 1000):
        self.record_store = record_store
        self.blob_store = blob_store
        self.max_sessions = max_sessions
        self._boards: "OrderedDict[str, NoteBoard]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._boards)

    def peek(self, session_id: str) -> Optional[NoteBoard]:
        return self._boards.get(session_id)

    async def get(self, session_id: str) -> NoteBoard:
        """Return the session's board, creating and initializing it on first use."""
        board = self._boards.get(session_id)
        if board is not None:
            self._boards.move_to_end(session_id)
            return board

        board = NoteBoard(self.record_store, self.blob_store, session_id=session_id)
        self._boards[session_id] = board
        while len(self._boards) > self.max_sessions:
            evicted, _ = self._boards.popitem(last=False)
            logger.info("Evicted board for session %s", evicted)

        await board.initialize()
        return board

    def discard(self, session_id: str) -> bool:
        """Drop a session's board (sign-out). Returns False if there was none."""
        return self._boards.pop(session_id, None) is not None
