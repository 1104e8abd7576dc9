"""
Pricelens - per-store price aggregation.

Turns a noisy Google-Shopping-style result feed into a deduplicated,
plausibility-checked, ranked list of USA store offers for one product.
"""

__version__ = "1.0.0"
__author__ = "Pricelens"

from .models import (
    AggregateOptions,
    AggregationResult,
    ProductQuery,
    RawOffer,
    StoreIdentity,
    ValidatedOffer,
)
from .categories import ProductCategory
from .exceptions import InvalidQueryError, ProviderError
from .services.aggregator import PriceAggregator

__all__ = [
    "AggregateOptions",
    "AggregationResult",
    "ProductQuery",
    "ProductCategory",
    "RawOffer",
    "StoreIdentity",
    "ValidatedOffer",
    "InvalidQueryError",
    "ProviderError",
    "PriceAggregator",
]
