"""
Markup component - Inline markup rendering for thread and post bodies.

Transforms the constrained markup dialect (bold, italic, code, links,
mentions, image references) into display HTML, pulling image references
out for separate gallery rendering.

Invariants:
- Raw HTML in the body is escaped; only pass-generated tags reach the output
- Images are listed in encounter order, duplicates kept
- Links and images with a forbidden protocol are never emitted
- Rendering is pure; output is derived fresh on every call
"""

from __future__ import annotations

import html

from src.domain.entities import ProcessedContent, UploadedImage

from ._impl import (
    IMAGE_PATTERN,
    MENTION_PATTERN,
    extract_images,
    render_code,
    render_emphasis,
    render_links,
    render_mentions,
    render_paragraphs,
)
from .models import DEFAULT_CONFIG, MarkupConfig


def process_content(body: str, config: MarkupConfig = DEFAULT_CONFIG) -> ProcessedContent:
    """
    Render a body to sanitized HTML plus its extracted image URLs.

    Malformed markup (unclosed emphasis, markup spanning removed images)
    is not repaired; whatever the passes produce is returned.
    """
    if not body:
        return ProcessedContent(html="", images=[])

    text, images = extract_images(body, config)
    text = html.escape(text, quote=False)
    text = render_links(text, config)
    text = render_mentions(text, config)
    text = render_emphasis(text)
    text = render_code(text, config)

    return ProcessedContent(html=render_paragraphs(text), images=images)


def extract_mentions(body: str) -> list[str]:
    """Usernames mentioned in a body, first-seen order, without duplicates."""
    text = IMAGE_PATTERN.sub("", body)
    seen: dict[str, None] = {}
    for match in MENTION_PATTERN.finditer(text):
        seen.setdefault(match.group(1), None)
    return list(seen)


def image_markdown(image: UploadedImage) -> str:
    """Inline reference for an uploaded image."""
    return f"![{image.display_name}]({image.url})"
