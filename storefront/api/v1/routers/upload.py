from fastapi import APIRouter, Depends, HTTPException, Query, Request
from starlette.datastructures import UploadFile
from typing import List, Optional, Tuple
import time

from storefront.api.deps import object_store_dep
from storefront.api.v1.schemas.envelope import ok
from storefront.core.config import get_settings
from storefront.utils.naming import unique_object_name

import logging
logger = logging.getLogger(__name__)

router = APIRouter(tags=["upload"])

# Multipart field names accepted for files
UPLOAD_FIELDS = ("file", "files", "files[]")

CHUNK_SIZE = 64 * 1024  # 64KB


def public_url(key: str) -> str:
    return f"{get_settings().PUBLIC_BASE_URL.rstrip('/')}/files/{key}"


async def _read_limited(upload: UploadFile, limit: int) -> bytes:
    """Read the whole file, failing with 413 as soon as it crosses `limit` bytes."""
    buf = bytearray()
    while True:
        chunk = await upload.read(CHUNK_SIZE)
        if not chunk:
            break
        buf += chunk
        if len(buf) > limit:
            raise HTTPException(
                status_code=413,
                detail=f"File '{upload.filename}' too large (> {get_settings().max_upload_mb} MB)",
            )
    return bytes(buf)


@router.post("/upload", summary="Store one or more files and return their public URLs")
async def upload_files(
    request: Request,
    filename: Optional[str] = Query(None, description="Name hint used for the storage key"),
    store = Depends(object_store_dep),
):
    settings = get_settings()
    limit = settings.max_upload_mb * 1024 * 1024
    t0 = time.perf_counter()

    form = await request.form()
    try:
        uploads: List[UploadFile] = [
            item for field in UPLOAD_FIELDS for item in form.getlist(field)
            if isinstance(item, UploadFile)
        ]
        if not uploads:
            raise HTTPException(status_code=400, detail="No files provided (use field 'file' or 'files')")

        # whole batch is size-checked before anything is stored
        payloads: List[Tuple[UploadFile, bytes]] = []
        for upload in uploads:
            if upload.size is not None and upload.size > limit:
                raise HTTPException(
                    status_code=413,
                    detail=f"File '{upload.filename}' too large (> {settings.max_upload_mb} MB)",
                )
            payloads.append((upload, await _read_limited(upload, limit)))

        urls: List[str] = []
        for upload, data in payloads:
            key = unique_object_name(filename or upload.filename or "file")
            await store.put(key, data, upload.content_type)
            urls.append(public_url(key))
            logger.info("upload stored key=%s bytes=%s type=%s", key, len(data), upload.content_type)
    finally:
        await form.close()

    logger.info("upload done files=%s time=%.3fs", len(urls), time.perf_counter() - t0)
    return ok(urls)
