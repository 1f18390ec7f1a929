"""
Markup component - Inline markup rendering for thread and post bodies.
"""

from ._impl import build_link_rel, is_safe_url
from .component import extract_mentions, image_markdown, process_content
from .models import DEFAULT_CONFIG, MarkupConfig

__all__ = [
    # Entry points
    "process_content",
    "extract_mentions",
    "image_markdown",
    # Configuration
    "DEFAULT_CONFIG",
    "MarkupConfig",
    # Helpers
    "build_link_rel",
    "is_safe_url",
]
