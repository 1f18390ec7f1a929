"""
Resource browser routes.

Proxies the third-party mod catalog with popular-project fallbacks.
"""

from fastapi import APIRouter, Depends, HTTPException, Query

from src.api.deps import get_catalog, get_rules
from src.components.catalog import (
    CATEGORIES,
    CatalogProject,
    CatalogUnavailableError,
    ProjectType,
    SearchParams,
    SortIndex,
    get_projects,
    get_random_projects,
)
from src.core.ports import CatalogPort
from src.rules.models import Rules

router = APIRouter()


@router.get("", response_model=list[CatalogProject])
async def list_resources(
    query: str = "",
    project_type: ProjectType = "all",
    categories: list[str] = Query([]),
    versions: list[str] = Query([]),
    index: SortIndex = "relevance",
    offset: int = Query(0, ge=0),
    limit: int | None = Query(None, ge=1, le=100),
    catalog: CatalogPort = Depends(get_catalog),
    rules: Rules = Depends(get_rules),
) -> list[CatalogProject]:
    params = SearchParams(
        query=query,
        project_type=project_type,
        categories=categories,
        versions=versions,
        index=index,
        offset=offset,
        limit=limit or rules.catalog.default_limit,
    )
    try:
        return await get_projects(params, catalog)
    except CatalogUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e)) from e


@router.get("/featured", response_model=list[CatalogProject])
async def featured_resources(
    count: int = Query(8, ge=1, le=50),
    catalog: CatalogPort = Depends(get_catalog),
) -> list[CatalogProject]:
    try:
        return await get_random_projects(count, catalog)
    except CatalogUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e)) from e


@router.get("/categories")
def list_categories() -> dict[str, list[str]]:
    """Popular filter categories per project type."""
    return CATEGORIES
