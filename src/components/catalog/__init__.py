"""
Catalog component - Resource browser backed by the third-party mod catalog.
"""

from .component import (
    build_facets,
    build_query,
    get_projects,
    get_random_projects,
    search_projects,
)
from .models import (
    CATEGORIES,
    CatalogProject,
    CatalogUnavailableError,
    ProjectType,
    SearchParams,
    SortIndex,
)

__all__ = [
    # Entry points
    "get_projects",
    "get_random_projects",
    "search_projects",
    # Helpers
    "build_facets",
    "build_query",
    # Models
    "CATEGORIES",
    "CatalogProject",
    "CatalogUnavailableError",
    "ProjectType",
    "SearchParams",
    "SortIndex",
]
