"""
Exception types raised by Pricelens.

Only two conditions ever cross a module boundary as exceptions:
- InvalidQueryError: the caller passed a blank query (programmer error)
- ProviderError: a search backend failed; the aggregator absorbs these
"""
from __future__ import annotations

from typing import Optional


class PricelensError(Exception):
    """Base class for all Pricelens errors."""


class InvalidQueryError(PricelensError, ValueError):
    """Raised before any network call when the query text is empty or blank."""


class ProviderError(PricelensError):
    """
    A search provider call failed.

    Attributes:
        provider: Short provider name ("serpapi", "serper", ...)
        status_code: HTTP status when the failure came from a response
        retryable: True for rate limits (429), 5xx responses and timeouts
    """

    def __init__(
        self,
        message: str,
        *,
        provider: str = "unknown",
        status_code: Optional[int] = None,
        retryable: bool = False,
    ):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code
        self.retryable = retryable

    @classmethod
    def from_status(cls, provider: str, status_code: int, detail: str = "") -> ProviderError:
        """Build an error from a non-2xx HTTP status."""
        retryable = status_code == 429 or 500 <= status_code < 600
        message = f"{provider} returned HTTP {status_code}"
        if detail:
            message = f"{message}: {detail}"
        return cls(message, provider=provider, status_code=status_code, retryable=retryable)
