"""
Offer deduplication and primary/variant merging.

Handles:
- One offer per catalog store (lowest price wins)
- Up to a fixed number of listings per marketplace store
- Merging a variant query's offers without overriding primary prices
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set

from ..models import ValidatedOffer
from ..logger import get_logger

logger = get_logger(__name__)

# Peer-to-peer and resale platforms where one store id carries many sellers
DEFAULT_MARKETPLACE_STORES = frozenset({"ebay", "amazon", "swappa", "poshmark", "mercari"})

DEFAULT_MARKETPLACE_CAP = 15


@dataclass
class MergeResult:
    """Result from merging primary and variant offers."""
    offers: List[ValidatedOffer] = field(default_factory=list)
    added_from_variant: int = 0
    skipped_existing: int = 0
    notes: List[str] = field(default_factory=list)


class OfferDeduplicator:
    """
    Collapse offers by canonical store identity.

    Strategy:
    - Catalog stores keep one offer; a later offer replaces it only when
      its price is strictly lower
    - Marketplace stores keep distinct listings up to `marketplace_cap`;
      further listings are dropped in arrival order
    - Stores keep the position of their first arrival
    """

    def __init__(
        self,
        marketplace_stores: Optional[Iterable[str]] = None,
        marketplace_cap: int = DEFAULT_MARKETPLACE_CAP,
    ):
        """
        Initialize the deduplicator.

        Args:
            marketplace_stores: Store ids treated as marketplaces
            marketplace_cap: Maximum listings kept per marketplace store
        """
        self.marketplace_stores = frozenset(
            marketplace_stores if marketplace_stores is not None else DEFAULT_MARKETPLACE_STORES
        )
        self.marketplace_cap = marketplace_cap

    def is_marketplace(self, store_id: str) -> bool:
        return store_id in self.marketplace_stores

    def dedupe(self, offers: List[ValidatedOffer]) -> List[ValidatedOffer]:
        """
        Deduplicate offers by store identity.

        Args:
            offers: Validated offers in arrival order

        Returns:
            New list; the input list is not modified
        """
        catalog: Dict[str, ValidatedOffer] = {}
        marketplace: Dict[str, List[ValidatedOffer]] = {}
        order: List[str] = []
        dropped = 0

        for offer in offers:
            key = self._make_key(offer)

            if self.is_marketplace(key):
                listings = marketplace.setdefault(key, [])
                if not listings:
                    order.append(key)
                if len(listings) < self.marketplace_cap:
                    listings.append(offer)
                else:
                    dropped += 1
                continue

            current = catalog.get(key)
            if current is None:
                catalog[key] = offer
                order.append(key)
            elif offer.price < current.price:
                catalog[key] = offer
                dropped += 1
            else:
                dropped += 1

        result: List[ValidatedOffer] = []
        for key in order:
            if key in marketplace:
                result.extend(marketplace[key])
            else:
                result.append(catalog[key])

        if dropped:
            logger.debug(f"Dedupe: {len(offers)} offers -> {len(result)} ({dropped} dropped)")

        return result

    def merge_variant(
        self,
        primary: List[ValidatedOffer],
        variant: List[ValidatedOffer],
    ) -> MergeResult:
        """
        Merge variant-query offers into primary offers.

        Primary offers always win: the exact query's price is kept for any
        store it already found, and variant offers only add new stores.

        Args:
            primary: Deduplicated offers from the primary query
            variant: Deduplicated offers from the variant query

        Returns:
            MergeResult with the combined offers
        """
        result = MergeResult(offers=list(primary))
        seen_keys: Set[str] = {self._make_key(o) for o in primary}

        for offer in variant:
            key = self._make_key(offer)
            if key in seen_keys:
                result.skipped_existing += 1
                continue
            result.offers.append(offer)
            result.added_from_variant += 1

        # Keep the marketplace cap across both passes
        result.offers = self.dedupe(result.offers)

        result.notes.append(
            f"Merged {len(primary)} primary + {len(variant)} variant -> "
            f"{len(result.offers)} offers ({result.skipped_existing} kept primary price)"
        )
        logger.info(result.notes[-1])

        return result

    def _make_key(self, offer: ValidatedOffer) -> str:
        """Deduplication key for an offer."""
        return offer.store.store_id
