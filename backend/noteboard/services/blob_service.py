"""
NoteBoard — Local Blob Store
=============================

What:  Blob Store backed by a directory on the local disk.
How:   Objects are written with aiofiles under STORAGE_ROOT using the key as
       the filename (overwrite-by-key). get() checks the object exists and
       returns a time-limited signed URL served by GET /storage/{key}.
Who:   Used by NoteBoard when BLOB_STORE_BACKEND=local (the default).

Key rules:
    Keys are the user's original filenames, so they are checked before they
    touch the filesystem:
    - non-empty, at most 255 characters
    - no path separators, no "." / ".." components, no NUL bytes
    A key that breaks a rule yields a VALIDATION failure.

    Directory Structure:
        storage/
        ├── cat.png
        └── receipt.jpg
"""

import logging
import os
from pathlib import Path
from typing import Optional

import aiofiles

from noteboard.config import settings
from noteboard.services.store_base import BlobStore, Failure, FailureKind, Ok, Result
from noteboard.services.url_signer import URLSigner

logger = logging.getLogger(__name__)

MAX_KEY_LENGTH = 255


class LocalBlobStore(BlobStore):
    """
    Lifecycle of an uploaded object:
        1. put(key, bytes) → key check → written to <root>/<key>
        2. get(key)        → key check → exists? → signed URL
        3. resolve(key)    → absolute path for the /storage route
    """

    def __init__(self, storage_root: Optional[str] = None, signer: Optional[URLSigner] = None):
        """
        Args:
            storage_root: Override the default storage path (used in tests).
            signer: Override the URL signer (used in tests).
        """
        self.storage_root = Path(storage_root or settings.storage_root).resolve()
        self.storage_root.mkdir(parents=True, exist_ok=True)
        self.signer = signer or URLSigner(
            secret=settings.url_signing_secret,
            expires_seconds=settings.url_expires_seconds,
            base_url=settings.public_base_url,
        )
        logger.info("LocalBlobStore initialized with storage_root=%s", self.storage_root)

    def validate_key(self, key: str) -> Optional[Failure]:
        """Return a VALIDATION failure for keys that cannot be used as filenames."""
        problem = None
        if not key:
            problem = "Object key is empty"
        elif len(key) > MAX_KEY_LENGTH:
            problem = f"Object key exceeds {MAX_KEY_LENGTH} characters"
        elif "/" in key or "\\" in key or "\x00" in key:
            problem = "Object key must not contain path separators"
        elif key in {".", ".."}:
            problem = "Object key must not be a relative path component"
        if problem is None:
            return None
        return Failure(FailureKind.VALIDATION, problem, {"field": "file", "key": key[:MAX_KEY_LENGTH]})

    def resolve(self, key: str) -> Optional[Path]:
        """Absolute path of a stored object, or None if the key is invalid or missing."""
        if self.validate_key(key) is not None:
            return None
        path = self.storage_root / key
        if not path.is_file():
            return None
        return path

    async def put(self, key: str, content: bytes) -> Result[None]:
        invalid = self.validate_key(key)
        if invalid is not None:
            return invalid

        path = self.storage_root / key
        try:
            async with aiofiles.open(path, "wb") as f:
                await f.write(content)
        except OSError as e:
            # disk full, permission denied, etc.
            logger.error("Failed to store object %s: %s", path, str(e))
            return Failure(
                FailureKind.STORAGE,
                "Failed to save uploaded image. Please try again.",
                {"key": key, "os_error": str(e)},
            )

        logger.debug("Object stored: %s (%d bytes)", key, len(content))
        return Ok(None)

    async def get(self, key: str) -> Result[str]:
        invalid = self.validate_key(key)
        if invalid is not None:
            return invalid
        if not (self.storage_root / key).is_file():
            return Failure(
                FailureKind.NOT_FOUND,
                f"Object '{key}' was not found",
                {"resource": "object", "resource_id": key},
            )
        return Ok(self.signer.sign(key))

    async def health_check(self) -> bool:
        return self.storage_root.is_dir() and os.access(self.storage_root, os.W_OK)
