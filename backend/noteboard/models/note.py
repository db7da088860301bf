"""
NoteBoard — Note SQLAlchemy Model
==================================

What:  ORM model for the `notes` table of the local record store.
How:   Inherits from DeclarativeBase; Alembic reads this for migrations.
Who:   Used by SQLRecordStore only.

Table Design:
    - id: UUID string assigned on insert (opaque to the rest of the app)
    - name / description: required display strings
    - image: the raw Blob Store key, stored exactly as submitted
    - created_at / updated_at: UTC timestamps, created_at orders the list
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from noteboard.database import Base
from noteboard.schemas.note import NoteRecord


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class NoteRow(Base):
    __tablename__ = "notes"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
        comment="Opaque identifier assigned on insert",
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Display name of the note",
    )

    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Body text of the note",
    )

    # What: Blob Store key (the uploaded file's original name), never a URL
    image: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        default=None,
        comment="Blob Store key of the attached image",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        comment="When this note was created (UTC)",
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
        comment="When this note was last written (UTC)",
    )

    __table_args__ = (
        Index("idx_notes_created_at", "created_at"),
    )

    def to_record(self) -> NoteRecord:
        return NoteRecord(
            id=self.id,
            name=self.name,
            description=self.description,
            image_key=self.image or None,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    def __repr__(self) -> str:
        return f"<NoteRow(id={self.id}, name='{self.name}', image='{self.image}')>"
