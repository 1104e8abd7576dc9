"""
Pydantic schemas for API validation and data contracts.
"""

from .prices import (
    PriceSearchRequest,
    OfferSchema,
    AggregationResultSchema,
    PriceSearchResponse,
)

__all__ = [
    'PriceSearchRequest',
    'OfferSchema',
    'AggregationResultSchema',
    'PriceSearchResponse',
]
