"""
Editor component - Draft state for block-based and flat composition.

Holds the author's in-progress draft and applies edits to it. A draft is
owned by one composing session; editors are handed their draft
explicitly rather than reading shared state.

Invariants:
- A block draft always contains at least one block
- Block ordinals are contiguous 0..n-1 after every mutation
- Tags are unique, non-blank and keep insertion order
- Pinned/locked flags are only set on thread drafts
"""

from __future__ import annotations

import logging

from src.domain.entities import (
    CATEGORIES,
    BlockDraft,
    ContentBlock,
    ContentFlags,
    FlatDraft,
    ImageRef,
    UploadedImage,
    new_block_id,
)
from src.rules.models import EditorRules

from ._impl import insert_image_reference, renumber, reorder_blocks
from .models import DeleteBlockOutput, EditorError, EditorOutput, InsertImageOutput

logger = logging.getLogger(__name__)

DEFAULT_MAX_TAGS = 10


class BlockEditor:
    """
    Block-based editing over an ordered list of text and image blocks.

    Usage:
        editor = BlockEditor(BlockDraft(mode="thread"))
        editor.set_title("Hello")
        editor.update_block(editor.draft.blocks[0].id, text="World")
    """

    def __init__(self, draft: BlockDraft) -> None:
        self.draft = draft

    @property
    def blocks(self) -> list[ContentBlock]:
        return self.draft.blocks

    def set_title(self, title: str) -> None:
        self.draft.title = title

    def add_text_block(self) -> ContentBlock:
        """Append an empty text block."""
        block = ContentBlock(id=new_block_id("text"), kind="text", order=len(self.blocks))
        self.draft.blocks = [*self.blocks, block]
        return block

    def add_image_block(self, image: UploadedImage | ImageRef, caption: str = "") -> ContentBlock:
        """Append an image block bound to an already-uploaded attachment."""
        ref = image.as_ref() if isinstance(image, UploadedImage) else image
        block = ContentBlock(
            id=new_block_id("image"),
            kind="image",
            text=caption,
            image=ref,
            order=len(self.blocks),
        )
        self.draft.blocks = [*self.blocks, block]
        return block

    def update_block(
        self,
        block_id: str,
        *,
        text: str | None = None,
        image: ImageRef | None = None,
    ) -> None:
        """Merge the given fields into the matching block; unknown ids are ignored."""
        updates: dict[str, object] = {}
        if text is not None:
            updates["text"] = text
        if image is not None:
            updates["image"] = image
        if not updates:
            return

        self.draft.blocks = [
            block.model_copy(update=updates) if block.id == block_id else block
            for block in self.blocks
        ]

    def delete_block(self, block_id: str) -> DeleteBlockOutput:
        """Remove a block, refusing to leave the draft empty."""
        if not any(block.id == block_id for block in self.blocks):
            return DeleteBlockOutput()

        if len(self.blocks) <= 1:
            return DeleteBlockOutput(
                errors=[
                    EditorError(
                        code="cannot_delete",
                        message="At least one content block must remain",
                        field="blocks",
                    )
                ],
                success=False,
            )

        self.draft.blocks = renumber([block for block in self.blocks if block.id != block_id])
        return DeleteBlockOutput()

    def reorder(self, source_index: int, dest_index: int | None) -> None:
        """Apply a drag gesture; see reorder_blocks."""
        self.draft.blocks = reorder_blocks(self.blocks, source_index, dest_index)


class FlatEditor:
    """Single-body editing with attachments, tags, category and thread flags."""

    def __init__(self, draft: FlatDraft, rules: EditorRules | None = None) -> None:
        self.draft = draft
        self._categories = tuple(rules.categories) if rules else CATEGORIES
        self._max_tags = rules.max_tags if rules else DEFAULT_MAX_TAGS

    def set_title(self, title: str) -> None:
        self.draft.title = title

    def set_body(self, body: str) -> None:
        self.draft.body = body

    def insert_image(self, image: UploadedImage, position: int) -> InsertImageOutput:
        body, cursor = insert_image_reference(self.draft.body, image, position)
        self.draft.body = body
        return InsertImageOutput(body=body, cursor=cursor)

    def add_tag(self, tag: str) -> EditorOutput:
        tag = tag.strip()
        if not tag:
            return _refused("tag_required", "Tag cannot be blank", "tags")
        if tag in self.draft.tags:
            return _refused("duplicate_tag", f"Tag '{tag}' is already added", "tags")
        if len(self.draft.tags) >= self._max_tags:
            return _refused("too_many_tags", f"At most {self._max_tags} tags allowed", "tags")

        self.draft.tags = [*self.draft.tags, tag]
        return EditorOutput()

    def remove_tag(self, tag: str) -> None:
        self.draft.tags = [t for t in self.draft.tags if t != tag]

    def set_category(self, category: str | None) -> EditorOutput:
        if category is not None and category not in self._categories:
            return _refused(
                "invalid_category",
                f"Unknown category '{category}'. Allowed: {', '.join(self._categories)}",
                "category",
            )
        self.draft.category = category
        return EditorOutput()

    def set_flags(self, *, pinned: bool = False, locked: bool = False) -> EditorOutput:
        if self.draft.mode != "thread":
            logger.debug("Ignoring flags for %s draft", self.draft.mode)
            return _refused(
                "flags_not_allowed",
                "Pinned and locked flags only apply to threads",
                "flags",
            )
        self.draft.flags = ContentFlags(pinned=pinned, locked=locked)
        return EditorOutput()


def _refused(code: str, message: str, field: str) -> EditorOutput:
    return EditorOutput(errors=[EditorError(code=code, message=message, field=field)], success=False)
