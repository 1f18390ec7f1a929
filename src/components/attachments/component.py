"""
Attachments component - Image validation, upload and removal.

Validates selected images, uploads them to the object store under
collision-resistant keys and tracks them on flat drafts.

Invariants:
- Only image/* MIME types are accepted
- Avatars are limited to 5MB, content images to 10MB (configurable)
- A batch upload either contributes every image or none
- Storage deletes are best-effort: failures are logged, never surfaced

Avatar keys carry only a millisecond timestamp, so two avatar uploads by
the same user in the same millisecond collide; the store reports that as
an upload failure.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence

from src.core.ports.storage import StorageError
from src.domain.entities import FlatDraft, ImageFile, ImageMode, UploadedImage, User

from ._impl import (
    RandomToken,
    attach_images,
    avatar_key_from_url,
    build_storage_key,
    detach_image,
    set_cover_image,
    validate_image,
)
from .models import (
    AttachmentError,
    AttachmentOutput,
    BatchUploadOutput,
    ImageKindConfig,
    UploadOutput,
    kinds_from_rules,
)
from .ports import ClockPort, ObjectStorePort, TokenPort

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float], None]

_FAILURE_PREFIX: dict[str, str] = {
    "avatar": "Avatar upload failed",
    "content": "Image upload failed",
}


def _not_authenticated() -> AttachmentError:
    return AttachmentError(
        code="not_authenticated",
        message="Please sign in first",
        field="user",
    )


class AttachmentManager:
    """
    Uploads and removes images on behalf of a signed-in author.

    Usage:
        manager = AttachmentManager(storage=store, clock=SystemClock())
        result = await manager.upload(file, user)
    """

    def __init__(
        self,
        storage: ObjectStorePort,
        clock: ClockPort,
        kinds: dict[str, ImageKindConfig] | None = None,
        tokens: TokenPort | None = None,
    ) -> None:
        self._storage = storage
        self._clock = clock
        self._kinds = kinds or kinds_from_rules(None)
        self._tokens = tokens or RandomToken()

    def kind(self, mode: ImageMode) -> ImageKindConfig:
        return self._kinds[mode]

    def validate(self, file: ImageFile, mode: ImageMode = "content") -> list[AttachmentError]:
        return validate_image(file, self.kind(mode))

    async def upload(
        self,
        file: ImageFile,
        user: User | None,
        mode: ImageMode = "content",
    ) -> UploadOutput:
        """Validate and upload one image."""
        if user is None:
            return UploadOutput(errors=[_not_authenticated()], success=False)

        config = self.kind(mode)
        errors = validate_image(file, config)
        if errors:
            return UploadOutput(errors=errors, success=False)

        token = self._tokens.token() if config.random_token else None
        key = build_storage_key(user.id, file.filename, self._clock.now(), token)

        try:
            stored = await self._storage.put_object(
                config.bucket,
                key,
                file.data,
                file.content_type,
                cache_control=config.cache_control,
            )
        except StorageError as e:
            logger.warning("Upload of %s to %s failed: %s", key, config.bucket, e)
            return UploadOutput(
                errors=[
                    AttachmentError(
                        code="upload_failed",
                        message=f"{_FAILURE_PREFIX[mode]}: {e}",
                    )
                ],
                success=False,
            )

        logger.info("Uploaded %s (%d bytes) to %s", key, file.size_bytes, config.bucket)
        return UploadOutput(
            image=UploadedImage(
                id=key,
                url=stored.public_url,
                display_name=file.filename,
                size_bytes=file.size_bytes,
            )
        )

    async def upload_batch(
        self,
        files: Sequence[ImageFile],
        user: User | None,
        on_progress: ProgressCallback | None = None,
    ) -> BatchUploadOutput:
        """
        Upload content images concurrently, all-or-nothing.

        Progress is reported as a percentage that only grows. On any
        failure the first failure's message is returned and no image is
        handed back; already-stored blobs are left in place.
        """
        if user is None:
            return BatchUploadOutput(errors=[_not_authenticated()], success=False)
        if not files:
            return BatchUploadOutput()

        total = len(files)
        completed = 0
        failures: list[AttachmentError] = []

        async def _one(file: ImageFile) -> UploadedImage | None:
            nonlocal completed
            result = await self.upload(file, user, "content")
            if not result.success:
                failures.extend(result.errors)
                return None
            completed += 1
            if on_progress is not None:
                on_progress(completed / total * 100)
            return result.image

        results = await asyncio.gather(*(_one(file) for file in files))

        if failures:
            return BatchUploadOutput(errors=[failures[0]], success=False)

        return BatchUploadOutput(images=[image for image in results if image is not None])

    async def remove(self, image_id: str, mode: ImageMode = "content") -> None:
        """Best-effort delete from the object store."""
        bucket = self.kind(mode).bucket
        try:
            await self._storage.delete_object(bucket, image_id)
        except StorageError as e:
            logger.warning("Error deleting %s from %s: %s", image_id, bucket, e)

    async def delete_avatar(self, avatar_url: str) -> None:
        """Best-effort delete of a previous avatar by its public URL."""
        key = avatar_key_from_url(avatar_url, self.kind("avatar").bucket)
        if key is None:
            return
        await self.remove(key, "avatar")

    # --- Flat draft helpers ---

    async def upload_into_draft(
        self,
        draft: FlatDraft,
        files: Sequence[ImageFile],
        user: User | None,
        on_progress: ProgressCallback | None = None,
    ) -> BatchUploadOutput:
        """Batch upload and, on success only, attach the images to the draft."""
        result = await self.upload_batch(files, user, on_progress)
        if result.success:
            attach_images(draft, result.images)
        return result

    async def remove_from_draft(self, draft: FlatDraft, image: UploadedImage) -> None:
        """Delete from storage (best-effort) and always drop the draft's references."""
        try:
            await self.remove(image.id, "content")
        finally:
            detach_image(draft, image)

    def choose_cover(self, draft: FlatDraft, url: str | None) -> AttachmentOutput:
        errors = set_cover_image(draft, url)
        return AttachmentOutput(errors=errors, success=not errors)
