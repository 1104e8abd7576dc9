"""
Data models for Pricelens price aggregation.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import FrozenSet, Optional, List

from .categories import ProductCategory, infer_category
from .exceptions import InvalidQueryError
from .utils.text_cleaning import normalize_whitespace


def _money(value: Optional[Decimal]) -> Optional[str]:
    """Serialize a price as a fixed two-decimal string."""
    if value is None:
        return None
    return str(value.quantize(Decimal("0.01")))


@dataclass(slots=True)
class RawOffer:
    """
    One unvalidated row returned by a search provider.

    Attributes:
        title: Listing title as shown on the shopping feed
        source_label: Free-text store label (e.g. "Walmart - Seller X")
        price_text: Price exactly as displayed (e.g. "$1,099.00", "$28.00/mo")
        link: Listing URL
        image_url: Thumbnail URL, if any
    """

    title: str
    source_label: str
    price_text: str
    link: str = ""
    image_url: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "title": self.title,
            "source_label": self.source_label,
            "price_text": self.price_text,
            "link": self.link,
            "image_url": self.image_url,
        }


@dataclass(frozen=True, slots=True)
class ProductQuery:
    """A validated query with its inferred price category."""

    text: str
    inferred_category: ProductCategory

    @classmethod
    def from_text(cls, text: Optional[str]) -> ProductQuery:
        """
        Build a query, inferring its category.

        Raises:
            InvalidQueryError: If the text is empty or blank
        """
        cleaned = normalize_whitespace(text or "")
        if not cleaned:
            raise InvalidQueryError("Query text must not be empty")
        return cls(text=cleaned, inferred_category=infer_category(cleaned))

    @property
    def lowered(self) -> str:
        return self.text.lower()


@dataclass(frozen=True, slots=True)
class StoreIdentity:
    """
    Canonical store identity.

    `store_id` doubles as the deduplication key; many source labels map
    to one identity.
    """

    store_id: str
    display_name: str

    def to_dict(self) -> dict:
        return {"store_id": self.store_id, "display_name": self.display_name}


@dataclass(slots=True)
class ValidatedOffer:
    """
    An offer that passed geography, relevance and price checks.

    Attributes:
        store: Canonical store identity
        price: Sale price, always > 0
        url: Listing URL
        image: Thumbnail URL, if any
        title: Listing title the price belongs to
        fetched_at: When the provider returned this offer (UTC)
        currency: Always "USD"
    """

    store: StoreIdentity
    price: Decimal
    url: str = ""
    image: Optional[str] = None
    title: str = ""
    fetched_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    currency: str = "USD"

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "store_id": self.store.store_id,
            "store_name": self.store.display_name,
            "price": _money(self.price),
            "currency": self.currency,
            "url": self.url,
            "image": self.image,
            "title": self.title,
            "fetched_at": self.fetched_at.isoformat(),
        }


@dataclass
class AggregateOptions:
    """
    Per-call aggregation options.

    Attributes:
        limit: Truncate the ranked offer list to this many entries
        max_results: Raw results requested from the provider per call
        region: Provider region code
        allow_variant_query: Issue a shortened follow-up query when coverage is thin
        min_store_target: Distinct-store count below which the follow-up query runs
        exclude_stores: Canonical store ids (e.g. "amazon") dropped from the results
    """

    limit: Optional[int] = None
    max_results: int = 100
    region: str = "us"
    allow_variant_query: bool = True
    min_store_target: int = 50
    exclude_stores: FrozenSet[str] = frozenset()


@dataclass
class AggregationResult:
    """
    Final ranked offers for one query.

    Invariants:
        total_stores == len(offers)
        best_price == min(offer.price) when offers is non-empty
        max_savings == max(offer.price) - min(offer.price)
    """

    query: str
    offers: List[ValidatedOffer] = field(default_factory=list)
    total_stores: int = 0
    best_price: Optional[Decimal] = None
    best_store: Optional[str] = None
    max_savings: Optional[Decimal] = None
    variant_query: Optional[str] = None

    @classmethod
    def empty(cls, query: str) -> AggregationResult:
        """Zero-offer result, used for "no data available"."""
        return cls(query=query)

    @classmethod
    def from_offers(
        cls,
        query: str,
        offers: List[ValidatedOffer],
        variant_query: Optional[str] = None,
    ) -> AggregationResult:
        """Build a result from already-ranked offers, computing price stats."""
        result = cls(query=query, offers=list(offers), variant_query=variant_query)
        result.total_stores = len(result.offers)
        if result.offers:
            cheapest = min(result.offers, key=lambda o: o.price)
            highest = max(o.price for o in result.offers)
            result.best_price = cheapest.price
            result.best_store = cheapest.store.display_name
            result.max_savings = highest - cheapest.price
        return result

    @property
    def is_empty(self) -> bool:
        return self.total_stores == 0

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "query": self.query,
            "variant_query": self.variant_query,
            "offers": [o.to_dict() for o in self.offers],
            "total_stores": self.total_stores,
            "best_price": _money(self.best_price),
            "best_store": self.best_store,
            "max_savings": _money(self.max_savings),
        }
