"""
Flask application factory for Pricelens.
"""
from typing import Optional

from flask import Flask
from flask_cors import CORS

from .. import __version__
from ..config import Config
from ..logger import get_logger
from ..search.cache import CachedSearchProvider
from ..services.aggregator import PriceAggregator
from .routes import AGGREGATOR_KEY, api_bp

logger = get_logger(__name__)


def create_app(aggregator: Optional[PriceAggregator] = None) -> Flask:
    """
    Create and configure Flask application.

    Args:
        aggregator: Pre-built aggregator (tests inject one with a fake
            provider); built lazily from configuration when omitted

    Returns:
        Configured Flask app instance
    """
    app = Flask(__name__)

    app.config['SECRET_KEY'] = Config.SECRET_KEY
    app.config['JSON_SORT_KEYS'] = False

    # Enable CORS with configured origins
    cors_origins = Config.get_cors_origins()
    if cors_origins == ["*"]:
        CORS(app)
    else:
        CORS(app, origins=cors_origins)

    if aggregator is not None:
        app.extensions[AGGREGATOR_KEY] = aggregator
        _purge_expired_cache(aggregator)

    app.register_blueprint(api_bp)

    # Health check
    @app.route('/health')
    def health():
        """Health check endpoint."""
        return {'status': 'healthy', 'version': __version__}

    logger.info("Flask app created")
    logger.info(f"Configuration: {Config.get_summary()}")

    errors = Config.validate()
    if errors:
        logger.warning(f"Configuration warnings: {errors}")

    return app


def _purge_expired_cache(aggregator: PriceAggregator) -> None:
    """Drop expired search cache entries at startup."""
    if isinstance(aggregator.provider, CachedSearchProvider):
        removed = aggregator.provider.delete_expired()
        logger.info(f"Startup cache cleanup removed {removed} expired entries")
