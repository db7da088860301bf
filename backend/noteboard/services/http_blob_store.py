"""
NoteBoard — HTTP Blob Store
============================

What:  Blob Store client for the managed platform's storage gateway.
How:   httpx.AsyncClient against two endpoints:

           PUT  {endpoint}/objects/{key}       body = raw bytes   → 2xx
           GET  {endpoint}/objects/{key}/url                      → {"url": "..."}

       The gateway returns pre-signed URLs, so get() hands its answer to the
       page unchanged.
Who:   Used by NoteBoard when BLOB_STORE_BACKEND=http.

Failure mapping:
    put: transport error or non-2xx       → STORAGE
    get: 404                              → NOT_FOUND
    get: transport error, 5xx, bad body   → TRANSIENT_NETWORK
"""

import logging
from typing import Optional
from urllib.parse import quote

import httpx

from noteboard.config import settings
from noteboard.services.store_base import BlobStore, Failure, FailureKind, Ok, Result

logger = logging.getLogger(__name__)


class HTTPBlobStore(BlobStore):
    def __init__(
        self,
        endpoint: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        headers = {}
        key = settings.storage_api_key if api_key is None else api_key
        if key:
            headers["x-api-key"] = key
        self._client = httpx.AsyncClient(
            base_url=(endpoint or settings.storage_endpoint).rstrip("/"),
            headers=headers,
            timeout=timeout or settings.request_timeout,
            transport=transport,
        )

    @staticmethod
    def _object_path(key: str) -> str:
        return f"/objects/{quote(key, safe='')}"

    async def put(self, key: str, content: bytes) -> Result[None]:
        try:
            response = await self._client.put(
                self._object_path(key),
                content=content,
                headers={"Content-Type": "application/octet-stream"},
            )
        except httpx.HTTPError as e:
            logger.error("Upload of %s failed: %s", key, str(e))
            return Failure(FailureKind.STORAGE, "Could not reach the storage service", {"key": key})

        if response.is_error:
            logger.error("Upload of %s rejected: HTTP %d", key, response.status_code)
            return Failure(
                FailureKind.STORAGE,
                "The storage service rejected the upload",
                {"key": key, "status": response.status_code},
            )
        return Ok(None)

    async def get(self, key: str) -> Result[str]:
        try:
            response = await self._client.get(f"{self._object_path(key)}/url")
        except httpx.HTTPError as e:
            logger.error("URL lookup for %s failed: %s", key, str(e))
            return Failure(FailureKind.TRANSIENT_NETWORK, "Could not reach the storage service", {"key": key})

        if response.status_code == 404:
            return Failure(
                FailureKind.NOT_FOUND,
                f"Object '{key}' was not found",
                {"resource": "object", "resource_id": key},
            )
        if response.is_error:
            return Failure(
                FailureKind.TRANSIENT_NETWORK,
                "The storage service failed to issue a URL",
                {"key": key, "status": response.status_code},
            )

        try:
            url = response.json()["url"]
        except (ValueError, KeyError, TypeError):
            return Failure(
                FailureKind.TRANSIENT_NETWORK,
                "The storage service returned an unreadable response",
                {"key": key},
            )
        return Ok(url)

    async def health_check(self) -> bool:
        try:
            response = await self._client.get("/health")
        except httpx.HTTPError:
            return False
        return response.is_success

    async def close(self) -> None:
        await self._client.aclose()
