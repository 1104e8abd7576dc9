"""Google Shopping results through the Serper.dev API."""
from __future__ import annotations

from typing import List, Optional

import requests

from ..config import Config
from ..exceptions import ProviderError
from ..logger import get_logger
from ..models import RawOffer
from .base import SearchProvider, raw_offer_from_item

logger = get_logger(__name__)

SERPER_SHOPPING_URL = "https://google.serper.dev/shopping"


class SerperShoppingProvider(SearchProvider):
    """POSTs a shopping query to Serper and maps its `shopping` rows."""

    name = "serper"

    def __init__(self, api_key: Optional[str] = None, *, timeout_s: Optional[int] = None):
        key = api_key or Config.SERPER_API_KEY
        if not key:
            raise ValueError("Serper API key missing. Provide api_key or set SERPER_API_KEY.")
        self.api_key = key
        self.timeout_s = timeout_s or Config.SEARCH_TIMEOUT_S

    def search(self, query: str, region: str = "us", max_results: int = 100) -> List[RawOffer]:
        try:
            r = requests.post(
                SERPER_SHOPPING_URL,
                headers={"X-API-KEY": self.api_key, "Content-Type": "application/json"},
                json={"q": query, "gl": region, "num": min(max_results, 100)},
                timeout=self.timeout_s,
            )
        except requests.Timeout as e:
            raise ProviderError(
                f"Serper timeout after {self.timeout_s}s for '{query}'",
                provider=self.name,
                retryable=True,
            ) from e
        except requests.RequestException as e:
            raise ProviderError(
                f"Serper request error for '{query}': {type(e).__name__}: {e}",
                provider=self.name,
                retryable=True,
            ) from e

        if r.status_code != 200:
            raise ProviderError.from_status(self.name, r.status_code, r.text[:200])

        try:
            data = r.json()
        except ValueError as e:
            raise ProviderError(f"Serper returned malformed JSON for '{query}'", provider=self.name) from e

        if not isinstance(data, dict):
            raise ProviderError(f"Serper returned unexpected payload for '{query}'", provider=self.name)

        items = data.get("shopping") or []
        if not isinstance(items, list):
            raise ProviderError(f"Serper shopping is not a list for '{query}'", provider=self.name)

        offers = []
        for item in items[:max_results]:
            if not isinstance(item, dict):
                continue
            offer = raw_offer_from_item(item, image_key="imageUrl", link_keys=("link",))
            if offer is not None:
                offers.append(offer)

        logger.info(f"Serper returned {len(items)} shopping results for '{query}' ({len(offers)} usable)")
        return offers
