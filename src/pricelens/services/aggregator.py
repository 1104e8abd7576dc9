"""
Price aggregation orchestrator.

Drives one or two search-provider calls and runs every raw result through
the pipeline:

    domestic filter -> relevance -> price parse + plausibility -> identity -> dedupe

then merges a shortened variant query's offers (new stores only), ranks,
and computes price statistics.

States: IDLE -> PRIMARY_FETCH -> FILTERING -> (SECONDARY_FETCH) -> MERGE -> RANKED -> DONE
"""
from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Iterable, List, Optional

from ..config import Config
from ..exceptions import ProviderError
from ..keywords import VARIANT_BRANDS, VARIANT_PRODUCT_TYPES
from ..models import (
    AggregateOptions,
    AggregationResult,
    ProductQuery,
    RawOffer,
    ValidatedOffer,
)
from ..search.base import SearchProvider
from ..utils.text_cleaning import contains_term
from ..logger import get_logger
from .geo_filter import DomesticStoreFilter
from .offer_merge import OfferDeduplicator
from .price_rules import PriceValidator, parse_price
from .ranking import StoreRanker
from .relevance import RelevanceClassifier
from .store_identity import StoreIdentityResolver

logger = get_logger(__name__)


class AggregationState(str, Enum):
    IDLE = "idle"
    PRIMARY_FETCH = "primary_fetch"
    FILTERING = "filtering"
    SECONDARY_FETCH = "secondary_fetch"
    MERGE = "merge"
    RANKED = "ranked"
    DONE = "done"


def build_variant_query(text: str) -> Optional[str]:
    """
    Derive a shorter "brand + product type" query from a long product title.

    Examples:
        >>> build_variant_query("Lenovo IdeaPad Slim 3 15.6 inch FHD Laptop Intel Core i5")
        'Lenovo laptop'
        >>> build_variant_query("Sony WH-1000XM5 Wireless Noise Canceling Headphone")
        'Sony headphones'
        >>> build_variant_query("Organic whole milk half gallon") is None
        True
    """
    q = (text or "").lower()

    brand = next((b for b in VARIANT_BRANDS if contains_term(q, b)), None)
    if brand is None:
        return None

    product_type = next(
        (ptype for ptype, terms in VARIANT_PRODUCT_TYPES if any(t in q for t in terms)),
        None,
    )

    brand_label = brand.upper() if len(brand) <= 3 else brand.capitalize()
    return f"{brand_label} {product_type or 'laptop'}"


class PriceAggregator:
    """
    Aggregate per-store prices for one product query.

    All pipeline components are injected; defaults use the production
    rule tables. One instance is safe to share across calls: every call
    keeps its state in locals.
    """

    def __init__(
        self,
        provider: SearchProvider,
        *,
        resolver: Optional[StoreIdentityResolver] = None,
        geo_filter: Optional[DomesticStoreFilter] = None,
        classifier: Optional[RelevanceClassifier] = None,
        validator: Optional[PriceValidator] = None,
        deduplicator: Optional[OfferDeduplicator] = None,
        ranker: Optional[StoreRanker] = None,
        variant_min_length: Optional[int] = None,
    ):
        self.provider = provider
        self.resolver = resolver or StoreIdentityResolver()
        self.geo_filter = geo_filter or DomesticStoreFilter()
        self.classifier = classifier or RelevanceClassifier()
        self.validator = validator or PriceValidator()
        self.deduplicator = deduplicator or OfferDeduplicator(
            marketplace_cap=Config.MARKETPLACE_LISTING_CAP
        )
        self.ranker = ranker or StoreRanker()
        self.variant_min_length = (
            variant_min_length if variant_min_length is not None else Config.VARIANT_QUERY_MIN_LENGTH
        )

    # =========================================================================
    # Public API
    # =========================================================================

    def aggregate(self, query: str, options: Optional[AggregateOptions] = None) -> AggregationResult:
        """
        Aggregate ranked store offers for a query.

        Args:
            query: Product query text
            options: Per-call options (limit, region, thresholds)

        Returns:
            AggregationResult; empty (never an exception) on provider failure

        Raises:
            InvalidQueryError: If the query is empty or blank
        """
        product_query = ProductQuery.from_text(query)
        opts = options or AggregateOptions()
        fetched_at = datetime.now(timezone.utc)
        state = AggregationState.IDLE

        state = self._transition(state, AggregationState.PRIMARY_FETCH, product_query)
        try:
            raw = self.provider.search(product_query.text, region=opts.region, max_results=opts.max_results)
        except ProviderError as e:
            logger.warning(f"Primary search failed for '{product_query.text}': {e}")
            return AggregationResult.empty(product_query.text)

        state = self._transition(state, AggregationState.FILTERING, product_query)
        offers = self.process_raw_offers(raw, product_query, fetched_at, opts.exclude_stores)

        variant_text: Optional[str] = None
        variant_offers: List[ValidatedOffer] = []
        if self._needs_variant_query(product_query, offers, opts):
            variant_text = build_variant_query(product_query.text)

        if variant_text:
            state = self._transition(state, AggregationState.SECONDARY_FETCH, product_query)
            variant_raw = self._fetch_secondary(variant_text, opts)
            if variant_raw:
                variant_offers = self.process_raw_offers(
                    variant_raw, product_query, fetched_at, opts.exclude_stores
                )

        state = self._transition(state, AggregationState.MERGE, product_query)
        if variant_offers:
            offers = self.deduplicator.merge_variant(offers, variant_offers).offers

        state = self._transition(state, AggregationState.RANKED, product_query)
        ranked = self.ranker.rank(offers)
        if opts.limit is not None:
            ranked = ranked[: max(opts.limit, 0)]

        result = AggregationResult.from_offers(product_query.text, ranked, variant_query=variant_text)
        self._transition(state, AggregationState.DONE, product_query)

        logger.info(
            f"Aggregated '{product_query.text}': {len(raw)} raw -> {result.total_stores} offers, "
            f"best={result.best_price} at {result.best_store}"
        )
        return result

    def process_raw_offers(
        self,
        raw_offers: List[RawOffer],
        query: ProductQuery,
        fetched_at: Optional[datetime] = None,
        exclude_stores: Iterable[str] = (),
    ) -> List[ValidatedOffer]:
        """
        Filter, validate, resolve and deduplicate one provider response.

        Geography and relevance run first so plausibility and identity work
        is only spent on offers that can survive.
        Offers whose resolved store id is in `exclude_stores` are dropped.
        """
        fetched_at = fetched_at or datetime.now(timezone.utc)
        validated: List[ValidatedOffer] = []
        excluded = frozenset(exclude_stores)
        rejected = {"geo": 0, "relevance": 0, "price": 0, "excluded": 0}

        for raw in raw_offers:
            if not self._is_domestic(raw):
                rejected["geo"] += 1
                continue

            if not self.classifier.is_relevant(raw, query):
                rejected["relevance"] += 1
                continue

            price = parse_price(raw.price_text)
            if price is None or not self.validator.is_plausible(price, query, raw.price_text):
                rejected["price"] += 1
                continue

            store = self.resolver.resolve(raw.source_label)
            if store.store_id in excluded:
                rejected["excluded"] += 1
                continue

            validated.append(ValidatedOffer(
                store=store,
                price=price,
                url=raw.link,
                image=raw.image_url,
                title=raw.title,
                fetched_at=fetched_at,
            ))

        deduped = self.deduplicator.dedupe(validated)
        logger.info(
            f"Filtered {len(raw_offers)} raw offers for '{query.text}': "
            f"{len(deduped)} kept, rejected geo={rejected['geo']} "
            f"relevance={rejected['relevance']} price={rejected['price']} "
            f"excluded={rejected['excluded']}"
        )
        return deduped

    # =========================================================================
    # Helpers
    # =========================================================================

    def _is_domestic(self, raw: RawOffer) -> bool:
        if not self.geo_filter.is_domestic(raw.source_label):
            return False
        if self.geo_filter.is_foreign_link(raw.link):
            return False
        return True

    def _needs_variant_query(
        self,
        query: ProductQuery,
        offers: List[ValidatedOffer],
        opts: AggregateOptions,
    ) -> bool:
        if not opts.allow_variant_query:
            return False
        distinct_stores = len({o.store.store_id for o in offers})
        return distinct_stores < opts.min_store_target and len(query.text) > self.variant_min_length

    def _fetch_secondary(self, variant_text: str, opts: AggregateOptions) -> List[RawOffer]:
        """Secondary fetch: one retry on retryable errors, failures ignored."""
        for attempt in (1, 2):
            try:
                return self.provider.search(variant_text, region=opts.region, max_results=opts.max_results)
            except ProviderError as e:
                if e.retryable and attempt == 1:
                    logger.info(f"Retrying variant search '{variant_text}' after: {e}")
                    continue
                logger.warning(f"Variant search '{variant_text}' failed, keeping primary results: {e}")
                return []
        return []

    def _transition(
        self,
        current: AggregationState,
        target: AggregationState,
        query: ProductQuery,
    ) -> AggregationState:
        logger.debug(f"[{query.text}] {current.value} -> {target.value}")
        return target
