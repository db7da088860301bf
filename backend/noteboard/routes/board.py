"""
NoteBoard — Board Page Routes
==============================

What:  The HTML surface: the board page and the form posts it makes.
How:   Every POST replays the form's text fields into the board, runs one
       board operation and answers 303 → / (post/redirect/get). A failed
       operation re-renders the page with the error and the error's status.
Who:   Browsers; templates/board.html.

Page Flow:
    GET  /                    reload notes from the stores, then render
    POST /image               file picker changed   → on_image_selected()
    POST /notes               "Create Note"         → create_note()
    POST /notes/{id}/delete   "Delete note"         → delete_note()
    POST /signout             "Sign out"            → board discarded, session cleared

Every page load re-lists the notes and re-resolves their image URLs, so a
reload shows notes added elsewhere and never serves expired image links.
"""

import logging
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, File, Form, Request, UploadFile
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from noteboard.exceptions import NoteBoardError
from noteboard.routes.deps import (
    SESSION_BOARD_KEY,
    get_board,
    get_registry,
    get_session_id,
    read_upload,
)
from noteboard.services.note_board import NoteBoard

logger = logging.getLogger(__name__)

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))

router = APIRouter(tags=["Board"])


def _render(request: Request, error: Optional[NoteBoardError] = None) -> HTMLResponse:
    board = get_registry(request).peek(get_session_id(request))
    state = board.state if board is not None else None
    return templates.TemplateResponse(
        request,
        "board.html",
        {
            "notes": state.notes if state else (),
            "form": state.form if state else None,
            "error": error.message if error else None,
        },
        status_code=error.status_code if error else 200,
    )


def _back_to_board() -> RedirectResponse:
    return RedirectResponse(url="/", status_code=303)


def _apply_fields(board: NoteBoard, name: str, description: str) -> None:
    board.on_field_change("name", name)
    board.on_field_change("description", description)


@router.get("/", response_class=HTMLResponse, summary="Render the note board")
async def show_board(request: Request) -> HTMLResponse:
    registry = get_registry(request)
    session_id = get_session_id(request)
    try:
        returning = registry.peek(session_id) is not None
        board = await registry.get(session_id)
        if returning:
            await board.refresh()
    except NoteBoardError as e:
        return _render(request, e)
    return _render(request)


@router.post("/image", summary="Select and upload an image")
async def select_image(
    request: Request,
    name: str = Form(default=""),
    description: str = Form(default=""),
    file: Optional[UploadFile] = File(default=None),
):
    try:
        board = await get_board(request)
        _apply_fields(board, name, description)
        filename, content = await read_upload(file)
        await board.on_image_selected(filename, content)
    except NoteBoardError as e:
        return _render(request, e)
    return _back_to_board()


@router.post("/notes", summary="Create a note from the form")
async def create_note(
    request: Request,
    name: str = Form(default=""),
    description: str = Form(default=""),
):
    try:
        board = await get_board(request)
        _apply_fields(board, name, description)
        await board.create_note()
    except NoteBoardError as e:
        return _render(request, e)
    return _back_to_board()


@router.post("/notes/{note_id}/delete", summary="Delete a note")
async def delete_note(request: Request, note_id: str):
    try:
        board = await get_board(request)
        await board.delete_note(note_id)
    except NoteBoardError as e:
        return _render(request, e)
    return _back_to_board()


@router.post("/signout", summary="Sign out and drop this session's board")
async def sign_out(request: Request):
    session_id = request.session.get(SESSION_BOARD_KEY)
    if session_id and get_registry(request).discard(session_id):
        logger.info("Session %s signed out", session_id[:8])
    request.session.clear()
    return _back_to_board()
