"""
NoteBoard — Test Configuration (conftest.py)
=============================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── temp_storage: Temporary directory for blob files
    ├── record_store / blob_store: In-memory store doubles that record calls
    ├── board: NoteBoard wired to the two doubles
    ├── sql_store: SQLRecordStore on a throwaway SQLite file
    └── test_client: HTTPX AsyncClient for endpoint tests (in-memory stores)
"""

import os
import tempfile
import uuid
from typing import Dict, List, Optional

# Override settings for testing BEFORE any noteboard imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test_noteboard.db"
os.environ["STORAGE_ROOT"] = tempfile.mkdtemp(prefix="noteboard_test_")
os.environ["URL_SIGNING_SECRET"] = "test-signing-secret"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from noteboard.schemas.note import NoteInput, NoteRecord
from noteboard.services.note_board import NoteBoard
from noteboard.services.store_base import (
    BlobStore,
    Failure,
    FailureKind,
    Ok,
    RecordStore,
    Result,
)


# ══════════════════════════════════════════════════════════════════════════
# Store Doubles
# ══════════════════════════════════════════════════════════════════════════

class InMemoryRecordStore(RecordStore):
    """
    Record Store double keeping notes in a dict.

    `calls` lists every operation in order, e.g. [("create", NoteInput), ("list",)].
    Set `fail_next[op] = Failure(...)` to make the next call of `op` fail.
    """

    def __init__(self):
        self.notes: Dict[str, NoteRecord] = {}
        self.calls: List[tuple] = []
        self.fail_next: Dict[str, Failure] = {}

    def seed(self, name: str, description: str, image_key: Optional[str] = None) -> NoteRecord:
        record = NoteRecord(
            id=str(uuid.uuid4()),
            name=name,
            description=description,
            image_key=image_key,
        )
        self.notes[record.id] = record
        return record

    async def list(self) -> Result:
        self.calls.append(("list",))
        if "list" in self.fail_next:
            return self.fail_next.pop("list")
        return Ok(list(self.notes.values()))

    async def create(self, note: NoteInput) -> Result:
        self.calls.append(("create", note))
        if "create" in self.fail_next:
            return self.fail_next.pop("create")
        record = self.seed(note.name, note.description, note.image_key)
        return Ok(record)

    async def delete(self, note_id: str) -> Result:
        self.calls.append(("delete", note_id))
        if "delete" in self.fail_next:
            return self.fail_next.pop("delete")
        record = self.notes.pop(note_id, None)
        if record is None:
            return Failure(
                FailureKind.NOT_FOUND,
                f"note with ID '{note_id}' was not found",
                {"resource": "note", "resource_id": note_id},
            )
        return Ok(record)

    async def health_check(self) -> bool:
        return True


class InMemoryBlobStore(BlobStore):
    """Blob Store double; get() returns `https://blobs.test/<key>?sig=1`."""

    def __init__(self):
        self.objects: Dict[str, bytes] = {}
        self.puts: List[str] = []
        self.gets: List[str] = []
        self.fail_keys: Dict[str, Failure] = {}

    async def put(self, key: str, content: bytes) -> Result:
        self.puts.append(key)
        if key in self.fail_keys:
            return self.fail_keys[key]
        self.objects[key] = content
        return Ok(None)

    async def get(self, key: str) -> Result:
        self.gets.append(key)
        if key in self.fail_keys:
            return self.fail_keys[key]
        if key not in self.objects:
            return Failure(
                FailureKind.NOT_FOUND,
                f"Object '{key}' was not found",
                {"resource": "object", "resource_id": key},
            )
        return Ok(f"https://blobs.test/{key}?sig=1")

    async def health_check(self) -> bool:
        return True


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def temp_storage(tmp_path):
    storage_dir = tmp_path / "storage"
    storage_dir.mkdir()
    return str(storage_dir)


@pytest.fixture
def record_store():
    return InMemoryRecordStore()


@pytest.fixture
def blob_store():
    return InMemoryBlobStore()


@pytest.fixture
def board(record_store, blob_store):
    return NoteBoard(record_store, blob_store, session_id="test-session")


@pytest.fixture
def sample_image_bytes():
    """Minimal JPEG: SOI marker + JFIF header + EOI marker."""
    return (
        b'\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00'
        b'\xff\xd9'
    )


@pytest_asyncio.fixture
async def sql_store(tmp_path):
    from noteboard.services.sql_record_store import SQLRecordStore

    store = SQLRecordStore(database_url=f"sqlite+aiosqlite:///{tmp_path / 'notes.db'}")
    await store.create_schema()
    yield store
    await store.close()


@pytest_asyncio.fixture
async def test_client(record_store, blob_store):
    """
    HTTPX AsyncClient talking to a fresh app wired to the in-memory stores.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from noteboard.main import create_app

    app = create_app(record_store=record_store, blob_store=blob_store)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
