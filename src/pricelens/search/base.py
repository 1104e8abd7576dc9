"""
Search provider interface.

A provider turns a query into raw shopping rows. It raises ProviderError
on transport failures, non-2xx responses and malformed payloads; callers
decide whether that means "no data" or a retry.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from ..models import RawOffer


class SearchProvider(ABC):
    """Abstract shopping-search backend."""

    name: str = "base"

    @abstractmethod
    def search(self, query: str, region: str = "us", max_results: int = 100) -> List[RawOffer]:
        """
        Run one shopping search.

        Args:
            query: Query text
            region: Two-letter region code
            max_results: Maximum rows to request (providers cap at 100)

        Returns:
            Raw offers in provider order
        """


def normalize_link(url: Optional[str]) -> str:
    """Make provider links absolute (Google returns some as relative paths)."""
    url = (url or "").strip()
    if not url:
        return ""
    if url.startswith("//"):
        return f"https:{url}"
    if url.startswith("/"):
        return f"https://www.google.com{url}"
    if url.startswith("www."):
        return f"https://{url}"
    return url


def raw_offer_from_item(
    item: Dict[str, Any],
    *,
    image_key: str,
    link_keys: tuple = ("link", "product_link"),
) -> Optional[RawOffer]:
    """
    Map one provider result row to a RawOffer.

    Rows without a title or without any price are skipped (None).
    """
    title = (item.get("title") or "").strip()
    if not title:
        return None

    price_text = item.get("price")
    if not price_text and item.get("extracted_price") is not None:
        price_text = str(item["extracted_price"])
    if not price_text:
        return None

    link = next((item[k] for k in link_keys if item.get(k)), "")

    return RawOffer(
        title=title,
        source_label=(item.get("source") or "").strip(),
        price_text=str(price_text),
        link=normalize_link(link),
        image_url=item.get(image_key) or None,
    )
