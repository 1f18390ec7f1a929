from typing import Literal
from uuid import uuid4

from pydantic import BaseModel, Field

# --- Enums / Literals ---
EditorMode = Literal["forum", "thread", "reply"]
BlockKind = Literal["text", "image"]
ImageMode = Literal["avatar", "content"]
PublishType = Literal["publish", "draft"]
PublishState = Literal["idle", "validating", "publishing", "published", "failed"]

CATEGORIES: tuple[str, ...] = (
    "general",
    "technology",
    "gaming",
    "lifestyle",
    "education",
    "business",
)

# --- Users ---

class User(BaseModel):
    id: str
    username: str
    display_name: str = ""
    avatar_url: str | None = None

# --- Images ---

class ImageRef(BaseModel):
    """Attachment reference bound to an image block."""

    id: str
    url: str
    display_name: str

class UploadedImage(BaseModel):
    id: str  # storage key
    url: str
    display_name: str
    size_bytes: int

    def as_ref(self) -> ImageRef:
        return ImageRef(id=self.id, url=self.url, display_name=self.display_name)

class ImageFile(BaseModel):
    """A file selected for upload, before it reaches the object store."""

    filename: str
    content_type: str
    data: bytes

    @property
    def size_bytes(self) -> int:
        return len(self.data)

# --- Content ---

def new_block_id(kind: BlockKind) -> str:
    return f"{kind}-{uuid4().hex}"

class ContentBlock(BaseModel):
    id: str
    kind: BlockKind
    text: str = ""
    image: ImageRef | None = None
    order: int = 0

class BlockDraft(BaseModel):
    mode: EditorMode
    title: str = ""
    blocks: list[ContentBlock] = Field(
        default_factory=lambda: [ContentBlock(id=new_block_id("text"), kind="text", order=0)]
    )

class ContentFlags(BaseModel):
    pinned: bool = False
    locked: bool = False

class FlatDraft(BaseModel):
    mode: EditorMode
    title: str = ""
    body: str = ""
    attachments: list[UploadedImage] = Field(default_factory=list)
    cover_image: str | None = None
    tags: list[str] = Field(default_factory=list)
    category: str | None = None
    flags: ContentFlags = Field(default_factory=ContentFlags)
    publish_type: PublishType = "publish"

# --- Rendering ---

class ProcessedContent(BaseModel):
    html: str = ""
    images: list[str] = Field(default_factory=list)
