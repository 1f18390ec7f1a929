"""
Pure helpers for image validation, storage keys and draft attachments.
"""

from __future__ import annotations

import secrets
import string
from datetime import datetime

from src.domain.entities import FlatDraft, ImageFile, UploadedImage

from .models import AttachmentError, ImageKindConfig

TOKEN_ALPHABET = string.digits + string.ascii_lowercase
TOKEN_LENGTH = 9


class RandomToken:
    """Base-36 random token source."""

    def token(self) -> str:
        return "".join(secrets.choice(TOKEN_ALPHABET) for _ in range(TOKEN_LENGTH))


def validate_image(file: ImageFile, config: ImageKindConfig) -> list[AttachmentError]:
    """
    Validate an image file for the given mode.

    Returns list of errors (empty if valid).
    """
    if not file.content_type.startswith(config.mime_prefix):
        return [
            AttachmentError(
                code="invalid_file_type",
                message=f"'{file.filename}' is not an image file",
                field="content_type",
            )
        ]

    if file.size_bytes > config.max_upload_bytes:
        limit_mb = config.max_upload_bytes // (1024 * 1024)
        return [
            AttachmentError(
                code="file_too_large",
                message=f"Image size cannot exceed {limit_mb}MB",
                field="file",
            )
        ]

    return []


def file_extension(filename: str) -> str:
    """Text after the last dot; the whole name when there is none."""
    return filename.rsplit(".", 1)[-1]


def build_storage_key(
    owner_id: str,
    filename: str,
    now: datetime,
    token: str | None = None,
) -> str:
    """
    Build a storage key for an upload.

    Format: {owner}/{epoch_ms}-{token}.{ext}, or {owner}/{epoch_ms}.{ext}
    without a token (avatars).
    """
    timestamp = int(now.timestamp() * 1000)
    stem = f"{timestamp}-{token}" if token else str(timestamp)
    return f"{owner_id}/{stem}.{file_extension(filename)}"


def attach_images(draft: FlatDraft, images: list[UploadedImage]) -> None:
    """Append images unique by id; the first new image becomes cover when none is set."""
    known = {image.id for image in draft.attachments}
    added = [image for image in images if image.id not in known]
    draft.attachments = [*draft.attachments, *added]
    if not draft.cover_image and added:
        draft.cover_image = added[0].url


def detach_image(draft: FlatDraft, image: UploadedImage) -> None:
    """Drop an attachment and every inline reference to it."""
    draft.attachments = [a for a in draft.attachments if a.id != image.id]
    draft.body = draft.body.replace(f"![{image.display_name}]({image.url})", "")
    if draft.cover_image == image.url:
        draft.cover_image = draft.attachments[0].url if draft.attachments else None


def set_cover_image(draft: FlatDraft, url: str | None) -> list[AttachmentError]:
    if url is not None and url not in {image.url for image in draft.attachments}:
        return [
            AttachmentError(
                code="unknown_cover_image",
                message="Cover image must be one of the uploaded images",
                field="cover_image",
            )
        ]
    draft.cover_image = url
    return []


def avatar_key_from_url(url: str, bucket: str = "avatars") -> str | None:
    """Storage key of an avatar public URL, or None if it is not one."""
    parts = url.split(f"/{bucket}/", 1)
    if len(parts) < 2 or not parts[1]:
        return None
    return parts[1]
