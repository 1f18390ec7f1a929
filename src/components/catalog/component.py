"""
Catalog component - Resource browser backed by the third-party mod catalog.

Lookups degrade in steps: a search that fails or comes back empty falls
back to popular projects, and popular projects fall back from the random
endpoint to a downloads-sorted search. Only when every step fails is an
error raised to the caller.
"""

from __future__ import annotations

import json
import logging

from pydantic import ValidationError

from src.core.ports.catalog import CatalogError, CatalogPort

from .models import CatalogProject, CatalogUnavailableError, SearchParams

logger = logging.getLogger(__name__)


def build_facets(params: SearchParams) -> list[list[str]]:
    """AND-of-OR facet groups for a search."""
    facets: list[list[str]] = []

    if params.project_type != "all":
        facets.append([f"project_type:{params.project_type}"])

    if params.categories:
        facets.append([f"categories:{cat}" for cat in params.categories])

    if params.versions:
        facets.append([f"versions:{ver}" for ver in params.versions])

    return facets


def build_query(params: SearchParams) -> dict[str, str]:
    query = {
        "query": params.query,
        "index": params.index,
        "offset": str(params.offset),
        "limit": str(params.limit),
    }
    facets = build_facets(params)
    if facets:
        query["facets"] = json.dumps(facets)
    return query


def _projects(hits: list[dict]) -> list[CatalogProject]:
    try:
        return [CatalogProject.model_validate(hit) for hit in hits]
    except ValidationError as e:
        raise CatalogError(f"Catalog returned malformed projects: {e}") from e


async def search_projects(params: SearchParams, catalog: CatalogPort) -> list[CatalogProject]:
    """Plain search; raises CatalogError on failure."""
    response = await catalog.search(build_query(params))
    return _projects(response.get("hits") or [])


async def get_random_projects(count: int, catalog: CatalogPort) -> list[CatalogProject]:
    """
    Popular projects for featured panels.

    Raises:
        CatalogUnavailableError: If both the random endpoint and the search fallback fail.
    """
    try:
        projects = await catalog.random(count)
        if projects:
            return _projects(projects)
        logger.info("Random projects came back empty, falling back to search")
    except CatalogError as e:
        logger.info("Random projects unavailable (%s), falling back to search", e)

    try:
        return await search_projects(SearchParams(index="downloads", limit=count), catalog)
    except CatalogError as e:
        raise CatalogUnavailableError(
            "Could not fetch random projects or search fallback from the catalog"
        ) from e


async def get_projects(params: SearchParams, catalog: CatalogPort) -> list[CatalogProject]:
    """Search, falling back to popular projects when the search fails or is empty."""
    try:
        projects = await search_projects(params, catalog)
        if projects:
            return projects
        logger.info("Search for %r returned no hits, falling back", params.query)
    except CatalogError as e:
        logger.info("Search failed (%s), falling back", e)

    return await get_random_projects(params.limit, catalog)
