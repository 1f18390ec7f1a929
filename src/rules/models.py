from pydantic import BaseModel, Field


class ImageKindRules(BaseModel):
    bucket: str
    max_upload_bytes: int
    random_token: bool

class UploadsRules(BaseModel):
    mime_prefix: str = "image/"
    cache_control: str = "3600"
    avatar: ImageKindRules
    content: ImageKindRules

class LinkRelRules(BaseModel):
    noopener: bool = True
    noreferrer: bool = True
    ugc: bool = False

class MarkupRules(BaseModel):
    forbidden_protocols: list[str]
    link_rel: LinkRelRules = Field(default_factory=LinkRelRules)
    link_class: str = ""
    mention_class: str = ""
    code_class: str = ""

class EditorRules(BaseModel):
    categories: list[str]
    title_required_modes: list[str]
    max_tags: int = 10

class CatalogRules(BaseModel):
    base_url: str
    user_agent: str
    timeout_seconds: float = 10.0
    default_limit: int = 20

class Rules(BaseModel):
    uploads: UploadsRules
    markup: MarkupRules
    editor: EditorRules
    catalog: CatalogRules
