"""
Search provider selection from configuration.
"""
from __future__ import annotations

from typing import Optional

from ..config import Config
from ..logger import get_logger
from .base import SearchProvider
from .cache import CachedSearchProvider
from .serpapi_provider import SerpApiShoppingProvider
from .serper_provider import SerperShoppingProvider

logger = get_logger(__name__)


def get_search_provider(
    provider_name: Optional[str] = None,
    *,
    use_cache: Optional[bool] = None,
) -> SearchProvider:
    """
    Build the configured search provider.

    Args:
        provider_name: "serpapi" or "serper" (defaults to Config.SEARCH_PROVIDER)
        use_cache: Wrap in a TTL cache (defaults to Config.CACHE_ENABLED)

    Raises:
        ValueError: Unknown provider name or missing API key
    """
    name = (provider_name or Config.SEARCH_PROVIDER).lower()

    if name == "serper":
        logger.debug("Using Serper shopping provider")
        provider: SearchProvider = SerperShoppingProvider()
    elif name == "serpapi":
        logger.debug("Using SerpApi shopping provider")
        provider = SerpApiShoppingProvider()
    else:
        raise ValueError(f"Unknown search provider '{name}'. Must be 'serpapi' or 'serper'")

    cache = Config.CACHE_ENABLED if use_cache is None else use_cache
    if cache:
        provider = CachedSearchProvider(
            provider,
            ttl_hours=Config.CACHE_TTL_HOURS,
            maxsize=Config.CACHE_MAX_ENTRIES,
        )

    return provider
