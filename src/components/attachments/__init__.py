"""
Attachments component - Image validation, upload and removal.
"""

from ._impl import (
    RandomToken,
    attach_images,
    avatar_key_from_url,
    build_storage_key,
    detach_image,
    file_extension,
    set_cover_image,
    validate_image,
)
from .component import AttachmentManager
from .models import (
    DEFAULT_IMAGE_KINDS,
    AttachmentError,
    AttachmentOutput,
    BatchUploadOutput,
    ImageKindConfig,
    UploadOutput,
    kinds_from_rules,
)
from .ports import TokenPort

__all__ = [
    # Service
    "AttachmentManager",
    # Output models
    "AttachmentError",
    "AttachmentOutput",
    "BatchUploadOutput",
    "UploadOutput",
    # Configuration
    "DEFAULT_IMAGE_KINDS",
    "ImageKindConfig",
    "kinds_from_rules",
    # Ports
    "TokenPort",
    # Helpers
    "RandomToken",
    "attach_images",
    "avatar_key_from_url",
    "build_storage_key",
    "detach_image",
    "file_extension",
    "set_cover_image",
    "validate_image",
]
