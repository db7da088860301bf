"""
NoteBoard — Signed Object Downloads
====================================

What:  GET /storage/{key}: serves blobs kept by LocalBlobStore.
How:   Verifies the signed token issued by LocalBlobStore.get(),
       then streams the file with FileResponse.
Who:   <img> tags on the board page (the URLs are the notes' image_url).

Responses:
    200  token valid, object exists
    403  token missing, issued for another key, or expired
    404  object missing, or the configured blob store is not local
"""

import logging

from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import FileResponse

from noteboard.exceptions import NotFoundError
from noteboard.services.blob_service import LocalBlobStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Storage"])


@router.get("/storage/{key}", summary="Download a stored image via a signed URL")
async def download_object(
    request: Request,
    key: str,
    token: str = Query(default=""),
) -> FileResponse:
    store = request.app.state.blob_store
    if not isinstance(store, LocalBlobStore):
        raise NotFoundError(resource="object", resource_id=key)

    if not token or not store.signer.verify(key, token):
        logger.warning("Rejected download of %s: bad or expired token", key)
        raise HTTPException(status_code=403, detail="Invalid or expired token")

    path = store.resolve(key)
    if path is None:
        raise NotFoundError(resource="object", resource_id=key)

    return FileResponse(path, headers={"Cache-Control": "private, max-age=60"})
