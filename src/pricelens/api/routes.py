"""
API routes for Pricelens application.
"""
from typing import Any, Dict, Optional

from flask import Blueprint, current_app, request, jsonify
from pydantic import ValidationError

from ..config import Config
from ..exceptions import InvalidQueryError
from ..logger import get_logger
from ..schemas.prices import AggregationResultSchema, PriceSearchRequest, PriceSearchResponse
from ..search.factory import get_search_provider
from ..services.aggregator import PriceAggregator

logger = get_logger(__name__)

# Create blueprint
api_bp = Blueprint('api', __name__, url_prefix='/api')

AGGREGATOR_KEY = 'pricelens.aggregator'


def get_aggregator() -> PriceAggregator:
    """
    Get the app's aggregator, building it from configuration on first use.

    Raises:
        ValueError: If the configured search provider cannot be built
    """
    aggregator: Optional[PriceAggregator] = current_app.extensions.get(AGGREGATOR_KEY)
    if aggregator is None:
        aggregator = PriceAggregator(get_search_provider())
        current_app.extensions[AGGREGATOR_KEY] = aggregator
        logger.info(f"Aggregator created with provider '{aggregator.provider.name}'")
    return aggregator


def _error(message: str, status: int, **extra: Any):
    body: Dict[str, Any] = PriceSearchResponse(status='error', message=message).model_dump(exclude_none=True)
    body.update(extra)
    return jsonify(body), status


@api_bp.route('/prices', methods=['POST'])
def search_prices():
    """
    Aggregate ranked store prices for a product.

    Expected JSON:
    {
        "query": "iPhone 17 Pro Max",
        "limit": 20,          (optional)
        "region": "us",       (optional)
        "exclude_stores": ["amazon"]  (optional)
    }

    Returns:
    {
        "status": "success",
        "data": {
            "query": "iPhone 17 Pro Max",
            "offers": [{"store_name": "Walmart", "price": "1099.00", ...}],
            "total_stores": 2,
            "best_price": "1099.00",
            "best_store": "Walmart",
            "max_savings": "0.00"
        }
    }
    """
    try:
        payload = PriceSearchRequest.model_validate(request.get_json(silent=True) or {})
    except ValidationError as e:
        logger.info(f"Rejected price search request: {e.errors()}")
        return _error('Invalid request', 400, errors=[err['msg'] for err in e.errors()])

    try:
        aggregator = get_aggregator()
        options = payload.to_options(
            max_results=Config.SEARCH_MAX_RESULTS,
            min_store_target=Config.MIN_STORE_TARGET,
        )
        result = aggregator.aggregate(payload.query, options)
    except InvalidQueryError as e:
        return _error(str(e), 400)
    except Exception as e:
        logger.error(f"Error in prices endpoint: {e}", exc_info=True)
        return _error('Price search failed. Please try again later.', 500)

    if result.is_empty:
        logger.info(f"No prices found for '{payload.query}'")

    response = PriceSearchResponse(data=AggregationResultSchema.from_result(result))
    return jsonify(response.model_dump())


@api_bp.route('/stores/resolve', methods=['GET'])
def resolve_store():
    """
    Show how a raw store label is resolved, ranked and filtered.

    Query params:
        label: Store label as it appears in the shopping feed
    """
    label = (request.args.get('label') or '').strip()
    if not label:
        return _error('label is required', 400)

    try:
        aggregator = get_aggregator()
    except Exception as e:
        logger.error(f"Error in store resolve endpoint: {e}", exc_info=True)
        return _error('Search provider is not configured.', 500)

    identity = aggregator.resolver.resolve(label)
    return jsonify({
        'status': 'success',
        'label': label,
        'store': identity.to_dict(),
        'tier': aggregator.ranker.tier(identity.store_id),
        'is_domestic': aggregator.geo_filter.is_domestic(label),
        'is_marketplace': aggregator.deduplicator.is_marketplace(identity.store_id),
    })
