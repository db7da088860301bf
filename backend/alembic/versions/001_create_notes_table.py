"""Create notes table

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates the `notes` table of the local record store.
How:   Portable column types only (String ids, timezone-aware DateTime), so the
       same revision runs on SQLite and PostgreSQL.

Rollback: downgrade() drops the table and every note in it.
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "notes",
        sa.Column(
            "id",
            sa.String(36),
            nullable=False,
            comment="Opaque identifier assigned on insert",
        ),
        sa.Column(
            "name",
            sa.String(255),
            nullable=False,
            comment="Display name of the note",
        ),
        sa.Column(
            "description",
            sa.Text(),
            nullable=False,
            comment="Body text of the note",
        ),
        # Blob Store key exactly as submitted; never a URL
        sa.Column(
            "image",
            sa.String(255),
            nullable=True,
            comment="Blob Store key of the attached image",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="When this note was created (UTC)",
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="When this note was last written (UTC)",
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    # The list is always read oldest-first
    op.create_index("idx_notes_created_at", "notes", ["created_at"])


def downgrade() -> None:
    op.drop_index("idx_notes_created_at", table_name="notes")
    op.drop_table("notes")
