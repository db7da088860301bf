"""
NoteBoard — Board JSON API
===========================

What:  The board operations as JSON endpoints under /api/board.
How:   Each handler resolves the caller's board (session cookie), runs one
       operation and returns the resulting board snapshot. Failures are
       raised as NoteBoardError and turned into JSON errors by the global
       handlers in main.py.
Who:   Script clients and the test suite.

Endpoints:
    GET    /api/board               snapshot
    PUT    /api/board/form          on_field_change(field, value)
    POST   /api/board/image         on_image_selected(file)
    POST   /api/board/notes         create_note()
    DELETE /api/board/notes/{id}    delete_note(id)
    POST   /api/board/refresh       refresh()
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile

from noteboard.routes.deps import get_board, read_upload
from noteboard.schemas.board import BoardResponse, ErrorResponse, FormUpdate
from noteboard.services.note_board import NoteBoard

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/board", tags=["Board API"])

STORE_ERRORS = {
    400: {"description": "Invalid input", "model": ErrorResponse},
    404: {"description": "Note or object not found", "model": ErrorResponse},
    502: {"description": "Blob storage failed", "model": ErrorResponse},
    503: {"description": "Store temporarily unavailable", "model": ErrorResponse},
}


@router.get("", response_model=BoardResponse, summary="Current board state")
async def get_board_state(board: NoteBoard = Depends(get_board)) -> BoardResponse:
    return BoardResponse.from_board(board)


@router.put(
    "/form",
    response_model=BoardResponse,
    responses={400: STORE_ERRORS[400]},
    summary="Change a form field",
)
async def update_form(
    update: FormUpdate,
    board: NoteBoard = Depends(get_board),
) -> BoardResponse:
    board.on_field_change(update.field, update.value)
    return BoardResponse.from_board(board)


@router.post(
    "/image",
    response_model=BoardResponse,
    responses=STORE_ERRORS,
    summary="Select an image and upload it under its filename",
    description=(
        "Records the filename in the form and uploads the bytes to the blob store. "
        "Sending no file is a no-op."
    ),
)
async def select_image(
    file: Optional[UploadFile] = File(default=None),
    board: NoteBoard = Depends(get_board),
) -> BoardResponse:
    filename, content = await read_upload(file)
    await board.on_image_selected(filename, content)
    return BoardResponse.from_board(board)


@router.post(
    "/notes",
    response_model=BoardResponse,
    responses=STORE_ERRORS,
    summary="Create a note from the form",
    description=(
        "Submits the form as a new note, resets the form and refreshes the list. "
        "Does nothing when name or description is empty."
    ),
)
async def create_note(board: NoteBoard = Depends(get_board)) -> BoardResponse:
    await board.create_note()
    return BoardResponse.from_board(board)


@router.delete(
    "/notes/{note_id}",
    response_model=BoardResponse,
    responses=STORE_ERRORS,
    summary="Delete a note",
    description="Removes the note from the board first, then from the record store.",
)
async def delete_note(note_id: str, board: NoteBoard = Depends(get_board)) -> BoardResponse:
    await board.delete_note(note_id)
    return BoardResponse.from_board(board)


@router.post(
    "/refresh",
    response_model=BoardResponse,
    responses=STORE_ERRORS,
    summary="Reload the note list",
)
async def refresh(board: NoteBoard = Depends(get_board)) -> BoardResponse:
    await board.refresh()
    return BoardResponse.from_board(board)
