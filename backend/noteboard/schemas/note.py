"""
NoteBoard — Note Schemas
=========================

What:  Pydantic models for notes on both sides of the image resolution step.
How:   The Record Store's single wire field `image` is split into two typed
       fields that never share a model:

           NoteRecord.image_key   raw Blob Store key (filename), as stored
           DisplayNote.image_url  resolved, directly renderable URL

       `from_wire()` / `to_wire()` collapse them back to `image` only at the
       Record Store boundary (GraphQL payloads, SQL rows).
Who:   Produced by the record stores, consumed by the board state and routes.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class NoteInput(BaseModel):
    """
    What:  Payload of a Record Store create call.
    Who:   Built from FormState by the board on submit.

    `image_key` is submitted verbatim; the store keeps the raw filename.
    """
    name: str = Field(description="Display name of the note")
    description: str = Field(description="Body text of the note")
    image_key: Optional[str] = Field(default=None, description="Blob Store key of the attached image")

    model_config = {"frozen": True}

    def to_wire(self) -> Dict[str, Any]:
        """GraphQL `CreateNoteInput`; `image` is omitted when nothing is attached."""
        payload: Dict[str, Any] = {"name": self.name, "description": self.description}
        if self.image_key:
            payload["image"] = self.image_key
        return payload


class NoteRecord(BaseModel):
    """
    What:  A note exactly as the Record Store holds it.
    Who:   Returned by RecordStore.list/create/delete.
    """
    id: str = Field(description="Opaque identifier assigned by the Record Store")
    name: str
    description: str
    image_key: Optional[str] = Field(default=None, description="Raw Blob Store key, never a URL")
    created_at: Optional[datetime] = Field(default=None, description="Creation time, if the store reports it")
    updated_at: Optional[datetime] = None

    model_config = {"frozen": True}

    @classmethod
    def from_wire(cls, item: Dict[str, Any]) -> "NoteRecord":
        """Build from a GraphQL `Note` object (`id name description image createdAt updatedAt`)."""
        return cls(
            id=str(item["id"]),
            name=item.get("name") or "",
            description=item.get("description") or "",
            image_key=item.get("image") or None,
            created_at=item.get("createdAt"),
            updated_at=item.get("updatedAt"),
        )


class DisplayNote(BaseModel):
    """
    What:  A note as shown to the user.
    Who:   Held in BoardState.notes; rendered by the page and the JSON API.

    Invariant: `image_url` is either None or a URL returned by BlobStore.get.
    """
    id: str
    name: str
    description: str
    image_url: Optional[str] = Field(default=None, description="Resolved image URL")

    model_config = {"frozen": True}

    @classmethod
    def resolved(cls, record: NoteRecord, image_url: Optional[str]) -> "DisplayNote":
        return cls(
            id=record.id,
            name=record.name,
            description=record.description,
            image_url=image_url,
        )
