"""Google Shopping results through the SerpApi client."""
from __future__ import annotations

from typing import List, Optional

import requests
from serpapi import GoogleSearch

from ..config import Config
from ..exceptions import ProviderError
from ..logger import get_logger
from ..models import RawOffer
from .base import SearchProvider, raw_offer_from_item

logger = get_logger(__name__)

# SerpApi reports an empty result page as an error payload
_NO_RESULTS_MARKER = "hasn't returned any results"


class SerpApiShoppingProvider(SearchProvider):
    """Fetches google_shopping results for a single query."""

    name = "serpapi"

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        timeout_s: Optional[int] = None,
        language: Optional[str] = None,
    ):
        key = api_key or Config.SERP_API_KEY
        if not key:
            raise ValueError("SERP API key missing. Provide api_key or set SERP_API_KEY.")
        self.api_key = key
        self.timeout_s = timeout_s or Config.SEARCH_TIMEOUT_S
        self.language = language or Config.SEARCH_LANGUAGE

    def search(self, query: str, region: str = "us", max_results: int = 100) -> List[RawOffer]:
        params = {
            "engine": "google_shopping",
            "q": query,
            "gl": region,
            "hl": self.language,
            "num": min(max_results, 100),
            "api_key": self.api_key,
        }

        search = GoogleSearch(params)
        search.timeout = self.timeout_s

        try:
            response = search.get_response()
        except requests.Timeout as e:
            raise ProviderError(
                f"SerpApi timeout after {self.timeout_s}s for '{query}'",
                provider=self.name,
                retryable=True,
            ) from e
        except requests.RequestException as e:
            raise ProviderError(
                f"SerpApi request error for '{query}': {type(e).__name__}: {e}",
                provider=self.name,
                retryable=True,
            ) from e

        if response.status_code != 200:
            raise ProviderError.from_status(self.name, response.status_code, response.text[:200])

        try:
            results = response.json()
        except ValueError as e:
            raise ProviderError(f"SerpApi returned malformed JSON for '{query}'", provider=self.name) from e

        if not isinstance(results, dict):
            raise ProviderError(f"SerpApi returned unexpected payload for '{query}'", provider=self.name)

        error = results.get("error")
        if error:
            if _NO_RESULTS_MARKER in str(error):
                logger.info(f"SerpApi has no shopping results for '{query}'")
                return []
            raise ProviderError(f"SerpApi error for '{query}': {error}", provider=self.name)

        items = results.get("shopping_results") or []
        if not isinstance(items, list):
            raise ProviderError(f"SerpApi shopping_results is not a list for '{query}'", provider=self.name)

        offers = []
        for item in items[:max_results]:
            if not isinstance(item, dict):
                continue
            offer = raw_offer_from_item(item, image_key="thumbnail")
            if offer is not None:
                offers.append(offer)

        logger.info(f"SerpApi returned {len(items)} shopping results for '{query}' ({len(offers)} usable)")
        return offers
