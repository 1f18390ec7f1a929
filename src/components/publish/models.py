"""Publish component input/output models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from src.domain.entities import PublishState


@dataclass(frozen=True)
class PublishValidationError:
    """Validation or persistence error surfaced to the author."""

    code: str
    message: str
    field: str | None = None


@dataclass(frozen=True)
class PublishOutput:
    """Outcome of a publish or save-draft attempt."""

    state: PublishState
    payload: dict[str, Any] | None = None
    errors: list[PublishValidationError] = field(default_factory=list)
    success: bool = True
