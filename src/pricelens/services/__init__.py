"""
Business logic services for price aggregation.

Provides modular components for:
- Store identity resolution and the domestic allowlist
- Relevance and price plausibility rules
- Offer deduplication, merging and ranking
- The aggregation orchestrator tying them together
"""

from .store_identity import StoreIdentityResolver, StorePattern
from .geo_filter import DomesticStoreFilter
from .relevance import RelevanceClassifier, RelevanceRules
from .price_rules import PriceValidator, parse_price
from .offer_merge import OfferDeduplicator, MergeResult
from .ranking import StoreRanker
from .aggregator import PriceAggregator, AggregationState, build_variant_query

__all__ = [
    'StoreIdentityResolver',
    'StorePattern',
    'DomesticStoreFilter',
    'RelevanceClassifier',
    'RelevanceRules',
    'PriceValidator',
    'parse_price',
    'OfferDeduplicator',
    'MergeResult',
    'StoreRanker',
    'PriceAggregator',
    'AggregationState',
    'build_variant_query',
]
