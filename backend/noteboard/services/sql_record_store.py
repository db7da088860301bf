"""
NoteBoard — SQL Record Store
=============================

What:  Record Store backed by a SQL database through async SQLAlchemy.
Why:   Local stand-in for the managed GraphQL API during development and in
       tests; it honours the same contract, including its failures.
How:   One engine and session factory per store; every call runs in its own
       session_scope() transaction.
Who:   Used by NoteBoard when RECORD_STORE_BACKEND=sql (the default).

Query plan:
    list:   SELECT * FROM notes ORDER BY created_at, id
    create: INSERT ... (id generated in Python)
    delete: SELECT ... WHERE id = :id, then DELETE

Driver errors (SQLAlchemyError) become TRANSIENT_NETWORK failures; the
message returned never includes SQL text.
"""

import logging
from typing import List, Optional

from sqlalchemy import select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from noteboard.database import build_engine, build_session_factory, create_schema, session_scope
from noteboard.models.note import NoteRow
from noteboard.schemas.note import NoteInput, NoteRecord
from noteboard.services.store_base import Failure, FailureKind, Ok, RecordStore, Result

logger = logging.getLogger(__name__)


class SQLRecordStore(RecordStore):
    def __init__(self, database_url: Optional[str] = None, engine: Optional[AsyncEngine] = None):
        self.engine = engine or build_engine(database_url)
        self._sessions = build_session_factory(self.engine)

    async def create_schema(self) -> None:
        await create_schema(self.engine)

    def _db_failure(self, operation: str, error: SQLAlchemyError) -> Failure:
        logger.error("Database error during %s: %s", operation, str(error), exc_info=True)
        return Failure(
            FailureKind.TRANSIENT_NETWORK,
            "The notes database is unavailable. Please try again later.",
            {"operation": operation, "error_type": type(error).__name__},
        )

    async def list(self) -> Result[List[NoteRecord]]:
        try:
            async with session_scope(self._sessions) as session:
                result = await session.execute(
                    select(NoteRow).order_by(NoteRow.created_at, NoteRow.id)
                )
                rows = result.scalars().all()
                return Ok([row.to_record() for row in rows])
        except SQLAlchemyError as e:
            return self._db_failure("list", e)

    async def create(self, note: NoteInput) -> Result[NoteRecord]:
        if not note.name or not note.description:
            return Failure(
                FailureKind.VALIDATION,
                "Both name and description are required",
                {"field": "name" if not note.name else "description"},
            )
        try:
            async with session_scope(self._sessions) as session:
                row = NoteRow(
                    name=note.name,
                    description=note.description,
                    image=note.image_key,
                )
                session.add(row)
                await session.flush()
                record = row.to_record()
        except SQLAlchemyError as e:
            return self._db_failure("create", e)
        logger.debug("Inserted note %s", record.id)
        return Ok(record)

    async def delete(self, note_id: str) -> Result[NoteRecord]:
        try:
            async with session_scope(self._sessions) as session:
                result = await session.execute(select(NoteRow).where(NoteRow.id == note_id))
                row = result.scalar_one_or_none()
                if row is None:
                    return Failure(
                        FailureKind.NOT_FOUND,
                        f"note with ID '{note_id}' was not found",
                        {"resource": "note", "resource_id": note_id},
                    )
                record = row.to_record()
                await session.delete(row)
        except SQLAlchemyError as e:
            return self._db_failure("delete", e)
        return Ok(record)

    async def health_check(self) -> bool:
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.warning("Health check: database unreachable: %s", str(e))
            return False
        return True

    async def close(self) -> None:
        await self.engine.dispose()
