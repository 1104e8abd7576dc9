"""
Shopping search providers.
"""
from .base import SearchProvider
from .cache import CachedSearchProvider
from .factory import get_search_provider
from .serpapi_provider import SerpApiShoppingProvider
from .serper_provider import SerperShoppingProvider

__all__ = [
    "SearchProvider",
    "CachedSearchProvider",
    "SerpApiShoppingProvider",
    "SerperShoppingProvider",
    "get_search_provider",
]
