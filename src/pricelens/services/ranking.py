"""
Store ranking.

Orders offers by a fixed, hand-curated store priority tier, then price,
then store name. The tier table is a product decision (trusted high-traffic
retailers first) and is kept exactly as curated.
"""
from __future__ import annotations

from decimal import Decimal
from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional, Tuple

from ..models import ValidatedOffer

UNKNOWN_TIER = 100

# Tier 1-9: top mass retailers; 10-30: department/specialty chains;
# 31-40: other recognized chains; everything else ranks at UNKNOWN_TIER.
DEFAULT_STORE_TIERS: Tuple[Tuple[str, int], ...] = (
    ("amazon", 1),
    ("walmart", 2),
    ("target", 3),
    ("bestbuy", 4),
    ("costco", 5),
    ("homedepot", 6),
    ("lowes", 7),
    ("kroger", 8),
    ("safeway", 9),
    ("ebay", 10),
    ("macys", 11),
    ("nordstrom", 12),
    ("jcpenney", 13),
    ("kohls", 14),
    ("bedbath", 15),
    ("wayfair", 16),
    ("overstock", 17),
    ("newegg", 18),
    ("microcenter", 19),
    ("officedepot", 20),
    ("staples", 21),
    ("officemax", 22),
    ("petco", 23),
    ("petsmart", 24),
    ("dicks", 25),
    ("rei", 26),
    ("basspro", 27),
    ("cabelas", 28),
    ("gamestop", 29),
    ("ulta", 30),
    ("quill", 31),
    ("uline", 32),
    ("fedexoffice", 33),
    ("containerstore", 34),
    ("publix", 35),
    ("wegmans", 36),
    ("wholefoods", 37),
    ("traderjoes", 38),
    ("aldi", 39),
    ("sprouts", 40),
)


class StoreRanker:
    """Deterministic total order over offers."""

    def __init__(
        self,
        tiers: Optional[Iterable[Tuple[str, int]]] = None,
        unknown_tier: int = UNKNOWN_TIER,
    ):
        self.tiers: Mapping[str, int] = MappingProxyType(
            dict(tiers if tiers is not None else DEFAULT_STORE_TIERS)
        )
        self.unknown_tier = unknown_tier

    def tier(self, store_id: str) -> int:
        """Priority tier for a canonical store id (lower ranks first)."""
        return self.tiers.get(store_id, self.unknown_tier)

    def sort_key(self, offer: ValidatedOffer) -> Tuple[int, Decimal, str, str]:
        return (
            self.tier(offer.store.store_id),
            offer.price,
            offer.store.display_name.casefold(),
            offer.url,
        )

    def rank(self, offers: List[ValidatedOffer]) -> List[ValidatedOffer]:
        """
        Order offers by tier, then ascending price, then store name.

        The URL is a final tie-break so marketplace listings at the same
        price still sort identically on every run.
        """
        return sorted(offers, key=self.sort_key)
