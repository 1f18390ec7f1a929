"""
Catalog component models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

ProjectType = Literal["mod", "modpack", "resourcepack", "shader", "all"]
SortIndex = Literal["relevance", "downloads", "follows", "newest", "updated"]


@dataclass(frozen=True)
class SearchParams:
    """Resource browser search input."""

    query: str = ""
    project_type: ProjectType = "all"
    categories: list[str] = field(default_factory=list)
    versions: list[str] = field(default_factory=list)
    index: SortIndex = "relevance"
    offset: int = 0
    limit: int = 20


class CatalogProject(BaseModel):
    """A catalog project as shown on a resource card."""

    model_config = ConfigDict(extra="ignore")

    slug: str
    title: str
    description: str = ""
    categories: list[str] = Field(default_factory=list)
    project_type: str = "mod"
    downloads: int = 0
    icon_url: str | None = None
    gallery: list[str] = Field(default_factory=list)
    date_created: str | None = None
    date_modified: str | None = None
    versions: list[str] = Field(default_factory=list)
    follows: int = 0
    author: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _from_project_shape(cls, data: Any) -> Any:
        # /projects/random returns full project records rather than search hits
        if not isinstance(data, dict):
            return data
        data = dict(data)
        data.setdefault("follows", data.get("followers", 0))
        data.setdefault("versions", data.get("game_versions", []))
        data.setdefault("date_created", data.get("published"))
        data.setdefault("date_modified", data.get("updated"))
        data["gallery"] = [
            item.get("url", "") if isinstance(item, dict) else item
            for item in data.get("gallery") or []
        ]
        return data


# Popular categories for different project types
CATEGORIES: dict[str, list[str]] = {
    "mod": ["technology", "adventure", "magic", "utility", "decoration", "food", "library"],
    "modpack": ["adventure", "tech", "magic", "kitchen-sink", "lightweight", "hardcore"],
    "resourcepack": ["realistic", "cartoon", "medieval", "modern", "simplistic", "photo-realistic"],
    "shader": ["atmospheric", "realistic", "fantasy", "performance", "cinematic"],
}


class CatalogUnavailableError(Exception):
    """Neither the primary query nor any fallback produced projects."""
