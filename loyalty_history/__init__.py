"""
Loyalty History Service
Flask application factory
"""
import os
import logging
from flask import Flask
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from .extensions import db, migrate
from .config import get_config, validate_config
from .services.record_store import RecordStore
from .utils.errors import ErrorCode, error_response, internal_error, method_not_allowed, not_found
from .utils.exceptions import LoyaltyHistoryError, NotFoundError, StoreError, ValidationError
from .utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


def create_app(config_name: str = None) -> Flask:
    """
    Application factory for creating Flask app instances.

    Args:
        config_name: Configuration environment (development, production, testing)

    Returns:
        Configured Flask application
    """
    if config_name is None:
        config_name = os.getenv('FLASK_ENV', 'development')

    config = get_config(config_name)

    # Setup logging before anything else
    setup_logging(config.LOG_LEVEL, config.LOG_FILE)
    validate_config(config_name)

    app = Flask(__name__)
    app.config.from_object(config)
    app.json.sort_keys = False

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Schema models must be imported for create_all() and migrations
    from .models import history  # noqa: F401

    # One record store (and connection pool) per app
    with app.app_context():
        app.extensions['record_store'] = RecordStore(db.engine)

    CORS(app, origins=app.config['CORS_ORIGINS'], allow_headers=['Content-Type'])

    # Register blueprints
    register_blueprints(app)

    # Register CLI commands
    from .commands import init_app as init_commands
    init_commands(app)

    # Register error handlers
    register_error_handlers(app)

    # Health check endpoint
    @app.route('/health')
    def health_check():
        return {'status': 'healthy', 'service': 'loyalty-history'}

    logger.info(f'Loyalty history service created ({config_name})')
    return app


def register_blueprints(app: Flask) -> None:
    """Register all API blueprints."""
    from .api.history import history_bp

    app.register_blueprint(history_bp, url_prefix='/api/history')


def register_error_handlers(app: Flask) -> None:
    """Register error handlers."""

    @app.errorhandler(ValidationError)
    def validation_error(error):
        return error_response(error.message, ErrorCode(error.reason.value), 400,
                              details={'field': error.field})

    @app.errorhandler(NotFoundError)
    def record_not_found(error):
        return not_found(error.message)

    @app.errorhandler(StoreError)
    def store_error(error):
        # Driver messages stay in the logs
        return internal_error('Database operation failed', code=ErrorCode.DATABASE_ERROR,
                              details={'error': str(error.original_error)})

    @app.errorhandler(LoyaltyHistoryError)
    def loyalty_history_error(error):
        return internal_error(error.message)

    @app.errorhandler(404)
    def page_not_found(error):
        return not_found('Not found')

    @app.errorhandler(405)
    def wrong_method(error):
        return method_not_allowed()

    @app.errorhandler(HTTPException)
    def http_error(error):
        return error_response(error.description, ErrorCode.INVALID_REQUEST, error.code,
                              log_error=error.code >= 500)

    @app.errorhandler(500)
    def server_error(error):
        return internal_error()
