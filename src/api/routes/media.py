"""
Media serving routes for the local object store.

Serves uploaded images under the public URLs the store hands out.
"""

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from src.api.deps import get_object_store
from src.core.ports.storage import KeyNotFoundError

router = APIRouter()

CACHE_CONTROL = "public, max-age=3600"


@router.get("/{bucket}/{key:path}")
def get_media(bucket: str, key: str, store=Depends(get_object_store)) -> Response:
    if not hasattr(store, "read"):
        raise HTTPException(status_code=404, detail="Media is served by the object store")

    try:
        data, content_type = store.read(bucket, key)
    except KeyNotFoundError as e:
        raise HTTPException(status_code=404, detail="Media not found") from e

    return Response(
        content=data,
        media_type=content_type,
        headers={"Cache-Control": CACHE_CONTROL},
    )
