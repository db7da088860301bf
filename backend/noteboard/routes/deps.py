"""
NoteBoard — Route Dependencies
===============================

What:  FastAPI dependencies shared by the board routes.
How:   The registry and stores live on app.state (set by create_app); the
       board id is kept in the signed session cookie (SessionMiddleware)
       under "board" and minted on first use.
"""

import uuid
from typing import Optional, Tuple

from fastapi import Request, UploadFile

from noteboard.config import settings
from noteboard.exceptions import ValidationError
from noteboard.services.board_registry import BoardRegistry
from noteboard.services.note_board import NoteBoard

SESSION_BOARD_KEY = "board"


def get_registry(request: Request) -> BoardRegistry:
    return request.app.state.registry


def get_session_id(request: Request) -> str:
    session_id = request.session.get(SESSION_BOARD_KEY)
    if not session_id:
        session_id = uuid.uuid4().hex
        request.session[SESSION_BOARD_KEY] = session_id
    return session_id


async def get_board(request: Request) -> NoteBoard:
    """The caller's board, created and initialized on first use."""
    return await get_registry(request).get(get_session_id(request))


async def read_upload(file: Optional[UploadFile]) -> Tuple[Optional[str], bytes]:
    """
    Filename and bytes of an uploaded file, or (None, b"") when no file was chosen.

    Raises:
        ValidationError: If the file is larger than MAX_FILE_SIZE.
    """
    if file is None or not file.filename:
        return None, b""
    content = await file.read()
    if len(content) > settings.max_file_size:
        size_mb = len(content) / (1024 * 1024)
        max_mb = settings.max_file_size / (1024 * 1024)
        raise ValidationError(
            f"File is too large ({size_mb:.1f}MB). Maximum size is {max_mb:.0f}MB.",
            field="file",
            context={"size_bytes": len(content), "max_bytes": settings.max_file_size},
        )
    return file.filename, content
