"""
NoteBoard — API Schemas
========================

What:  Request and response bodies of the JSON board API and /health.
How:   Plain Pydantic models; BoardResponse is built from the board's
       immutable BoardState.
Who:   routes/api.py, routes/health.py and the exception handlers in main.py.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from noteboard.schemas.note import DisplayNote


class FormResponse(BaseModel):
    name: str = Field(description="Current value of the name input")
    description: str = Field(description="Current value of the description input")
    image_key: Optional[str] = Field(
        default=None,
        description="Filename of the selected image (raw key, not a URL)",
    )


class BoardResponse(BaseModel):
    """
    What:  Snapshot of one session's board.

    Example:
        {
            "notes": [{"id": "7f…", "name": "Cat", "description": "Grey",
                       "image_url": "/storage/cat.png?token=…"}],
            "form": {"name": "", "description": "", "image_key": null}
        }
    """
    notes: List[DisplayNote] = Field(description="Displayed notes with resolved image URLs")
    form: FormResponse = Field(description="Current form state")

    @classmethod
    def from_board(cls, board) -> "BoardResponse":
        state = board.state
        return cls(
            notes=list(state.notes),
            form=FormResponse(
                name=state.form.name,
                description=state.form.description,
                image_key=state.form.image_key,
            ),
        )


class FormUpdate(BaseModel):
    field: str = Field(description="Form field to change: 'name' or 'description'")
    value: str = Field(default="", description="New value of the field")


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "not_found",
            "message": "Note with id '7f…' not found",
            "details": {"resource": "note"},
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    record_store: str = Field(description="Record store status: available, unavailable")
    blob_store: str = Field(description="Blob store status: available, unavailable")
    sessions: int = Field(description="Boards currently held in memory")
    uptime_seconds: float = Field(description="Seconds since service started")
