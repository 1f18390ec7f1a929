"""Publish component - validates composed drafts and hands them to persistence."""

from src.components.publish.component import (
    PublishCoordinator,
    build_blocks_payload,
    build_flat_payload,
    build_payload,
    validate_blocks_draft,
    validate_flat_draft,
    validate_for_publish,
)
from src.components.publish.models import PublishOutput, PublishValidationError
from src.components.publish.ports import PersistCallback

__all__ = [
    "PublishCoordinator",
    "PersistCallback",
    "PublishOutput",
    "PublishValidationError",
    "build_blocks_payload",
    "build_flat_payload",
    "build_payload",
    "validate_blocks_draft",
    "validate_flat_draft",
    "validate_for_publish",
]
