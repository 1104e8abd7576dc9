"""
Pytest configuration and fixtures for Pricelens tests.
"""
import sys
from decimal import Decimal
from pathlib import Path
from typing import Dict, List, Optional, Union

# Add src to path for imports
project_root = Path(__file__).parent.parent
src_path = project_root / "src"
sys.path.insert(0, str(src_path))

import pytest
from pricelens.exceptions import ProviderError
from pricelens.models import ProductQuery, RawOffer, StoreIdentity, ValidatedOffer
from pricelens.search.base import SearchProvider


class FakeSearchProvider(SearchProvider):
    """
    Scripted provider for pipeline tests.

    `responses` maps query text to either a list of raw offers or an
    exception to raise. Each entry may also be a list of such outcomes,
    consumed one per call (for retry tests). Unknown queries return [].
    """

    name = "fake"

    def __init__(self, responses: Optional[Dict[str, object]] = None):
        self.responses = dict(responses or {})
        self.calls: List[str] = []

    def search(self, query: str, region: str = "us", max_results: int = 100) -> List[RawOffer]:
        self.calls.append(query)
        outcome = self.responses.get(query, [])

        if isinstance(outcome, tuple):
            # Sequence of outcomes, one per call
            index = min(self.calls.count(query) - 1, len(outcome) - 1)
            outcome = outcome[index]

        if isinstance(outcome, Exception):
            raise outcome
        return list(outcome)


def _slug(text: str) -> str:
    return "-".join("".join(ch if ch.isalnum() else " " for ch in text.lower()).split())


def make_raw(
    title: str,
    source: str,
    price: str,
    link: Optional[str] = None,
) -> RawOffer:
    """Build a raw offer with a plausible domestic link."""
    slug = "".join(ch for ch in source.lower() if ch.isalnum()) or "store"
    return RawOffer(
        title=title,
        source_label=source,
        price_text=price,
        link=link if link is not None else f"https://www.{slug}.com/item/{_slug(title)}",
    )


def make_offer(
    store_id: str,
    price: Union[str, Decimal],
    display_name: Optional[str] = None,
    url: str = "",
) -> ValidatedOffer:
    """Build a validated offer for a canonical store."""
    return ValidatedOffer(
        store=StoreIdentity(store_id=store_id, display_name=display_name or store_id.title()),
        price=Decimal(str(price)),
        url=url or f"https://{store_id}.example/{price}",
    )


@pytest.fixture
def fake_provider():
    """Empty scripted provider; tests fill `responses`."""
    return FakeSearchProvider()


@pytest.fixture
def rate_limited():
    """A retryable provider error."""
    return ProviderError("rate limited", provider="fake", status_code=429, retryable=True)


@pytest.fixture
def iphone_pro_max_query():
    return ProductQuery.from_text("iPhone 17 Pro Max")


@pytest.fixture
def iphone_offers_with_case():
    """Accessory plus two genuine listings for "iPhone 17 Pro Max"."""
    return [
        make_raw("iPhone 17 Pro Max case", "Amazon", "$19.99"),
        make_raw("iPhone 17 Pro Max 256GB", "Walmart", "$1099.00"),
        make_raw("iPhone 17 Pro Max 256GB", "Best Buy", "$1099.00"),
    ]


@pytest.fixture
def raw_offer():
    """Factory fixture: raw_offer(title, source, price, link=None)."""
    return make_raw


@pytest.fixture
def validated_offer():
    """Factory fixture: validated_offer(store_id, price, display_name=None, url="")."""
    return make_offer


@pytest.fixture
def provider_factory():
    """Factory fixture: provider_factory({query: offers | exception | (outcomes...)})."""
    return FakeSearchProvider
