from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from storefront.api.deps import object_store_dep

router = APIRouter(tags=["files"])


@router.get("/files/{key}", summary="Serve an uploaded object by its storage key")
async def get_file(key: str, store = Depends(object_store_dep)):
    found = await store.get(key)
    if found is None:
        raise HTTPException(status_code=404, detail="File not found")
    data, content_type = found
    # keys are unique per upload, so the content never changes
    return Response(content=data, media_type=content_type, headers={"Cache-Control": "public, max-age=31536000, immutable"})
