# storefront/domain/repositories/object_store_repo.py
from __future__ import annotations
from typing import Optional, Tuple

from gridfs.errors import NoFile
from motor.motor_asyncio import AsyncIOMotorGridFSBucket

"""
Note:
    - Adapter over a GridFS bucket used as the object store for uploads.
    - Keys are generated by the caller (see storefront.utils.naming) and are unique.
    - No business logic here: put bytes, get bytes back.
"""

class ObjectStoreRepo:
    def __init__(self, bucket: AsyncIOMotorGridFSBucket):
        self.bucket = bucket

    async def put(self, key: str, data: bytes, content_type: Optional[str]) -> str:
        await self.bucket.upload_from_stream(
            key,
            data,
            metadata={"contentType": content_type or "application/octet-stream"},
        )
        return key

    async def get(self, key: str) -> Optional[Tuple[bytes, str]]:
        """Return (bytes, content_type) or None if the key is unknown."""
        try:
            grid_out = await self.bucket.open_download_stream_by_name(key)
        except NoFile:
            return None
        data = await grid_out.read()
        meta = grid_out.metadata or {}
        return data, meta.get("contentType", "application/octet-stream")
