from typing import Any

from pydantic import BaseModel, Field

from src.domain.entities import ContentFlags, EditorMode, FlatDraft, UploadedImage


# --- Drafts ---
class DraftRequest(BaseModel):
    title: str = ""
    body: str = ""
    attachments: list[UploadedImage] = Field(default_factory=list)
    cover_image: str | None = None
    tags: list[str] = Field(default_factory=list)
    category: str | None = None
    flags: ContentFlags = Field(default_factory=ContentFlags)

    def to_draft(self, mode: EditorMode) -> FlatDraft:
        return FlatDraft(mode=mode, **self.model_dump())


# --- Rendering ---
class PreviewRequest(BaseModel):
    body: str = ""


# --- Errors ---
class ErrorItem(BaseModel):
    code: str
    message: str
    field: str | None = None


def error_detail(errors: list[Any]) -> list[dict[str, Any]]:
    """Serialize component error records for an HTTPException detail."""
    return [ErrorItem(code=e.code, message=e.message, field=e.field).model_dump() for e in errors]
