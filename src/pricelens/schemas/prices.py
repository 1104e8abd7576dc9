"""
Pydantic schemas for price aggregation API validation.

Provides strict input validation at the API boundary while the pipeline
itself works on dataclass-based models.
"""
from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from ..models import AggregateOptions, AggregationResult, ValidatedOffer


class PriceSearchRequest(BaseModel):
    """Request body for POST /api/prices."""
    query: str = Field(..., min_length=1, max_length=300, description="Product query text")
    limit: Optional[int] = Field(default=None, ge=1, le=500, description="Maximum offers to return")
    region: str = Field(default="us", min_length=2, max_length=2, description="Search region code")
    allow_variant_query: bool = Field(default=True, description="Allow a shortened follow-up query")
    exclude_stores: List[str] = Field(
        default_factory=list, max_length=50, description="Canonical store ids to leave out (e.g. \"amazon\")"
    )

    @field_validator('query')
    @classmethod
    def validate_query(cls, v: str) -> str:
        cleaned = ' '.join(v.split())
        if not cleaned:
            raise ValueError('query must not be blank')
        return cleaned

    @field_validator('region')
    @classmethod
    def validate_region(cls, v: str) -> str:
        return v.lower()

    @field_validator('exclude_stores')
    @classmethod
    def validate_exclude_stores(cls, v: List[str]) -> List[str]:
        return [s.strip().lower() for s in v if s.strip()]

    def to_options(self, max_results: int, min_store_target: int) -> AggregateOptions:
        return AggregateOptions(
            limit=self.limit,
            max_results=max_results,
            region=self.region,
            allow_variant_query=self.allow_variant_query,
            min_store_target=min_store_target,
            exclude_stores=frozenset(self.exclude_stores),
        )


class OfferSchema(BaseModel):
    """One ranked store offer."""
    store_id: str = Field(..., description="Canonical store id (dedup key)")
    store_name: str = Field(..., description="Store display name")
    price: str = Field(..., description="Price as a two-decimal string")
    currency: Literal["USD"] = "USD"
    url: str = ""
    image: Optional[str] = None
    title: str = ""
    fetched_at: str = Field(..., description="ISO-8601 UTC timestamp")

    @classmethod
    def from_offer(cls, offer: ValidatedOffer) -> OfferSchema:
        return cls(**offer.to_dict())


class AggregationResultSchema(BaseModel):
    """Ranked offers plus price statistics for one query."""
    query: str
    variant_query: Optional[str] = None
    offers: List[OfferSchema] = Field(default_factory=list)
    total_stores: int = Field(default=0, ge=0)
    best_price: Optional[str] = None
    best_store: Optional[str] = None
    max_savings: Optional[str] = None

    @classmethod
    def from_result(cls, result: AggregationResult) -> AggregationResultSchema:
        data = result.to_dict()
        data['offers'] = [OfferSchema.from_offer(o) for o in result.offers]
        return cls(**data)


class PriceSearchResponse(BaseModel):
    """Envelope returned by POST /api/prices."""
    status: Literal["success", "error"] = "success"
    data: Optional[AggregationResultSchema] = None
    message: Optional[str] = None
