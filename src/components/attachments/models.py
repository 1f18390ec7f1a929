"""
Attachments component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from src.domain.entities import ImageMode, UploadedImage
from src.rules.models import UploadsRules

# --- Validation Error ---


@dataclass(frozen=True)
class AttachmentError:
    """Attachment error with actionable message."""

    code: str
    message: str
    field: str = "file"


# --- Configuration Models ---


@dataclass(frozen=True)
class ImageKindConfig:
    """Storage and limit configuration for one image mode."""

    mode: ImageMode
    bucket: str
    max_upload_bytes: int
    random_token: bool
    mime_prefix: str = "image/"
    cache_control: str = "3600"


DEFAULT_IMAGE_KINDS: dict[str, ImageKindConfig] = {
    "avatar": ImageKindConfig(
        mode="avatar",
        bucket="avatars",
        max_upload_bytes=5 * 1024 * 1024,  # 5MB
        random_token=False,
    ),
    "content": ImageKindConfig(
        mode="content",
        bucket="content-images",
        max_upload_bytes=10 * 1024 * 1024,  # 10MB
        random_token=True,
    ),
}


def kinds_from_rules(rules: UploadsRules | None) -> dict[str, ImageKindConfig]:
    """Build image kind configuration from rules or defaults."""
    if rules is None:
        return DEFAULT_IMAGE_KINDS.copy()

    return {
        mode: ImageKindConfig(
            mode=mode,  # type: ignore[arg-type]
            bucket=kind.bucket,
            max_upload_bytes=kind.max_upload_bytes,
            random_token=kind.random_token,
            mime_prefix=rules.mime_prefix,
            cache_control=rules.cache_control,
        )
        for mode, kind in (("avatar", rules.avatar), ("content", rules.content))
    }


# --- Output Models ---


@dataclass(frozen=True)
class UploadOutput:
    """Output from a single upload."""

    image: UploadedImage | None = None
    errors: list[AttachmentError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class BatchUploadOutput:
    """Output from a batch upload; images is empty unless every upload succeeded."""

    images: list[UploadedImage] = field(default_factory=list)
    errors: list[AttachmentError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class AttachmentOutput:
    """Output for draft attachment changes that can be refused."""

    errors: list[AttachmentError] = field(default_factory=list)
    success: bool = True
