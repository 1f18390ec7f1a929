"""
Editor component - Draft state for block-based and flat composition.
"""

from ._impl import has_content, insert_image_reference, renumber, reorder_blocks
from .component import BlockEditor, FlatEditor
from .models import DeleteBlockOutput, EditorError, EditorOutput, InsertImageOutput

__all__ = [
    # Editors
    "BlockEditor",
    "FlatEditor",
    # Output models
    "DeleteBlockOutput",
    "EditorError",
    "EditorOutput",
    "InsertImageOutput",
    # Helpers
    "has_content",
    "insert_image_reference",
    "renumber",
    "reorder_blocks",
]
