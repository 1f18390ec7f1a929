"""
Editor component output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field

# --- Validation Error ---


@dataclass(frozen=True)
class EditorError:
    """Draft editing error, shown inline to the author."""

    code: str
    message: str
    field: str | None = None


# --- Output Models ---


@dataclass(frozen=True)
class EditorOutput:
    """Output for draft mutations that can be refused."""

    errors: list[EditorError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class InsertImageOutput:
    """New body and cursor position after inserting an image reference."""

    body: str
    cursor: int


@dataclass(frozen=True)
class DeleteBlockOutput:
    """Output for block deletion; refused when it would leave no blocks."""

    errors: list[EditorError] = field(default_factory=list)
    success: bool = True
