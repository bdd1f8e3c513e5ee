from .pagination import ALL_PAGES_PREFIX, PageAggregator, PaginatedCollection
from .resources import RESOURCES, Resource
from .service import SWAPI_BASE_URL, SwapiService

__all__ = [
    "ALL_PAGES_PREFIX",
    "PageAggregator",
    "PaginatedCollection",
    "RESOURCES",
    "Resource",
    "SWAPI_BASE_URL",
    "SwapiService",
]
