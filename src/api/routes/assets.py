"""
Assets API routes.

Provides endpoints for image upload and removal.
"""

from fastapi import APIRouter, Depends, File, HTTPException, Query, Response, UploadFile

from src.api.deps import get_attachment_manager, get_current_user, get_optional_user
from src.api.schemas import error_detail
from src.components.attachments import AttachmentManager
from src.domain.entities import ImageFile, ImageMode, UploadedImage, User

router = APIRouter()

_STATUS_BY_CODE = {
    "not_authenticated": 401,
    "invalid_file_type": 415,
    "file_too_large": 413,
    "upload_failed": 502,
}


async def _to_image_file(file: UploadFile) -> ImageFile:
    return ImageFile(
        filename=file.filename or "unnamed",
        content_type=file.content_type or "application/octet-stream",
        data=await file.read(),
    )


@router.post("/images", response_model=UploadedImage)
async def upload_image(
    file: UploadFile = File(...),
    mode: ImageMode = Query("content"),
    current_user: User | None = Depends(get_optional_user),
    manager: AttachmentManager = Depends(get_attachment_manager),
) -> UploadedImage:
    """Upload a content image or an avatar."""
    result = await manager.upload(await _to_image_file(file), current_user, mode)

    if not result.success or result.image is None:
        code = result.errors[0].code
        raise HTTPException(
            status_code=_STATUS_BY_CODE.get(code, 400),
            detail=error_detail(result.errors),
        )

    return result.image


@router.post("/images/batch", response_model=list[UploadedImage])
async def upload_images(
    files: list[UploadFile] = File(...),
    current_user: User | None = Depends(get_optional_user),
    manager: AttachmentManager = Depends(get_attachment_manager),
) -> list[UploadedImage]:
    """Upload several content images; any failure fails the batch."""
    result = await manager.upload_batch(
        [await _to_image_file(f) for f in files], current_user
    )

    if not result.success:
        code = result.errors[0].code
        raise HTTPException(
            status_code=_STATUS_BY_CODE.get(code, 400),
            detail=error_detail(result.errors),
        )

    return result.images


@router.delete("/images/{image_id:path}", status_code=204)
async def delete_image(
    image_id: str,
    mode: ImageMode = Query("content"),
    current_user: User = Depends(get_current_user),
    manager: AttachmentManager = Depends(get_attachment_manager),
) -> Response:
    """Best-effort removal; storage failures are not reported."""
    if not image_id.startswith(f"{current_user.id}/"):
        raise HTTPException(status_code=403, detail="Images can only be removed by their owner")

    await manager.remove(image_id, mode)
    return Response(status_code=204)
