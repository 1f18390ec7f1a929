"""
Attachments component port definitions.
"""

from __future__ import annotations

from typing import Protocol

from src.core.ports.clock import ClockPort
from src.core.ports.storage import ObjectStorePort


class TokenPort(Protocol):
    """Source of random tokens for collision-resistant storage keys."""

    def token(self) -> str:
        """Return a short random token."""
        ...


__all__ = ["ClockPort", "ObjectStorePort", "TokenPort"]
