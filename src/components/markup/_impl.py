"""
Inline markup passes.

Each pass is a regex substitution over the working text. Pass order is
significant: later passes must not re-match the output of earlier ones,
and bold must run before italic since "**" contains "*".
"""

from __future__ import annotations

import html
import re

from .models import DEFAULT_CONFIG, MarkupConfig

IMAGE_PATTERN = re.compile(r"!\[([^\]]*)\]\(([^)]+)\)")
LINK_PATTERN = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")
# Not preceded by a word char or slash, so e-mail addresses and URL paths stay intact
MENTION_PATTERN = re.compile(r"(?<![\w/])@(\w+)")
BOLD_PATTERN = re.compile(r"\*\*(.*?)\*\*")
ITALIC_PATTERN = re.compile(r"\*(.*?)\*")
CODE_PATTERN = re.compile(r"`([^`]+)`")
CONTROL_CHARS = re.compile(r"[\x00-\x20\x7f]")


def is_safe_url(url: str, config: MarkupConfig = DEFAULT_CONFIG) -> bool:
    """
    Check if URL is safe (no forbidden protocols).

    Returns True if URL is safe, False if it uses a forbidden protocol.
    """
    # Browsers drop control characters and whitespace inside a scheme
    url_lower = CONTROL_CHARS.sub("", url).lower()
    return not any(url_lower.startswith(protocol) for protocol in config.forbid_protocols)


def build_link_rel(config: MarkupConfig = DEFAULT_CONFIG) -> str:
    """Build rel attribute value for links."""
    parts = []
    if config.add_noopener:
        parts.append("noopener")
    if config.add_noreferrer:
        parts.append("noreferrer")
    if config.add_ugc:
        parts.append("ugc")
    return " ".join(parts)


def _attr(value: str) -> str:
    # Text is already &/</> escaped; only the attribute delimiter is left
    return value.replace('"', "&quot;")


def extract_images(text: str, config: MarkupConfig = DEFAULT_CONFIG) -> tuple[str, list[str]]:
    """Remove image references from text, returning (text, urls in encounter order)."""
    images: list[str] = []

    def _collect(match: re.Match[str]) -> str:
        url = match.group(2)
        if is_safe_url(url, config):
            images.append(url)
        return ""

    return IMAGE_PATTERN.sub(_collect, text), images


def render_links(text: str, config: MarkupConfig = DEFAULT_CONFIG) -> str:
    rel = build_link_rel(config)
    class_attr = f' class="{config.link_class}"' if config.link_class else ""

    def _anchor(match: re.Match[str]) -> str:
        label, url = match.group(1), match.group(2)
        if not is_safe_url(html.unescape(url), config):
            return label
        return f'<a href="{_attr(url)}"{class_attr} target="_blank" rel="{rel}">{label}</a>'

    return LINK_PATTERN.sub(_anchor, text)


def render_mentions(text: str, config: MarkupConfig = DEFAULT_CONFIG) -> str:
    class_attr = f' class="{config.mention_class}"' if config.mention_class else ""
    return MENTION_PATTERN.sub(rf"<span{class_attr}>@\1</span>", text)


def render_emphasis(text: str) -> str:
    text = BOLD_PATTERN.sub(r"<strong>\1</strong>", text)
    return ITALIC_PATTERN.sub(r"<em>\1</em>", text)


def render_code(text: str, config: MarkupConfig = DEFAULT_CONFIG) -> str:
    class_attr = f' class="{config.code_class}"' if config.code_class else ""
    return CODE_PATTERN.sub(rf"<code{class_attr}>\1</code>", text)


def render_paragraphs(text: str) -> str:
    text = text.replace("\n\n", "</p><p>")
    text = text.replace("\n", "<br>")
    if text.strip():
        return f"<p>{text}</p>"
    return ""
