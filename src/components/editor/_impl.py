"""
Pure helpers for ordered block sequences and flat bodies.

No storage or network calls happen here; every function returns a new
sequence and leaves its input untouched.
"""

from __future__ import annotations

from collections.abc import Sequence

from src.domain.entities import ContentBlock, UploadedImage


def renumber(blocks: Sequence[ContentBlock]) -> list[ContentBlock]:
    """Recompute ordinals so they run 0..n-1 in list order."""
    return [
        block if block.order == index else block.model_copy(update={"order": index})
        for index, block in enumerate(blocks)
    ]


def reorder_blocks(
    blocks: Sequence[ContentBlock],
    source_index: int,
    dest_index: int | None,
) -> list[ContentBlock]:
    """
    Move one block from source_index to dest_index.

    A dest_index of None (drop outside the list) leaves the order as is.
    Blocks outside the moved range keep their relative order.

    Raises:
        IndexError: If either index is outside the sequence.
    """
    items = list(blocks)
    if dest_index is None:
        return renumber(items)

    size = len(items)
    if not 0 <= source_index < size:
        raise IndexError(f"source index {source_index} out of range for {size} blocks")
    if not 0 <= dest_index < size:
        raise IndexError(f"destination index {dest_index} out of range for {size} blocks")

    moved = items.pop(source_index)
    items.insert(dest_index, moved)
    return renumber(items)


def has_content(block: ContentBlock) -> bool:
    """Text blocks need non-blank text; image blocks need a bound attachment."""
    if block.kind == "text":
        return bool(block.text.strip())
    if block.kind == "image":
        return block.image is not None
    return False


def insert_image_reference(body: str, image: UploadedImage, position: int) -> tuple[str, int]:
    """
    Insert an inline image reference on its own line at a cursor position.

    Returns (new body, cursor placed after the inserted reference).
    """
    position = max(0, min(position, len(body)))
    reference = f"\n![{image.display_name}]({image.url})\n"
    return body[:position] + reference + body[position:], position + len(reference)
