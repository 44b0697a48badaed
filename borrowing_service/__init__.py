"""Flask application factory with dependency injection."""
import logging
import sys
from flask import Flask, jsonify

from borrowing_service.config.settings import get_config
from borrowing_service.infrastructure.service_container import ServiceContainer
from borrowing_service.middleware.rate_limiter import create_rate_limiter
from borrowing_service.middleware.monitoring import register_metrics_middleware
from borrowing_service.middleware.error_handler import init_error_handlers
from borrowing_service.api import borrowings_blueprint, health_blueprint


def create_app(config_class=None) -> Flask:
    """
    Create and configure Flask application with dependency injection.

    Args:
        config_class: Optional configuration class (for testing)

    Returns:
        Configured Flask application
    """
    config = config_class or get_config()

    # Configure logging FIRST (needed for all subsequent operations)
    _configure_logging(config.DEBUG)
    _logger = logging.getLogger(__name__)

    app = Flask(__name__)
    app.config.from_object(config)

    app.register_blueprint(borrowings_blueprint)
    app.register_blueprint(health_blueprint)

    @app.route("/", methods=["GET"])
    def root():
        """Root endpoint for testing."""
        return jsonify({
            "status": "ok",
            "service": "borrowing-service",
            "message": "Service is running"
        }), 200

    try:
        config.validate()
    except ValueError as e:
        _logger.warning(f"Configuration validation warning: {e}")

    _initialize_middleware(app, config)
    _initialize_services(app, config)

    _logger.info(f"Application ready - registered blueprints: {[bp.name for bp in app.blueprints.values()]}")
    return app


def _configure_logging(debug: bool = False) -> None:
    """Configure application logging."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stdout,
        force=True
    )


def _initialize_middleware(app: Flask, config) -> None:
    """
    Initialize middleware (rate limiting, monitoring, error handling).

    Args:
        app: Flask application instance
        config: Configuration class
    """
    limiter = create_rate_limiter(app)
    app.config['limiter'] = limiter

    if config.ENABLE_METRICS:
        register_metrics_middleware(app)

    init_error_handlers(app)


def _initialize_services(app: Flask, config) -> None:
    """
    Create the service container and store it in app config.

    Services are built lazily on first use, so an unreachable Redis does
    not stop the app from starting; readiness reports it instead.

    Args:
        app: Flask application instance
        config: Configuration class
    """
    container = ServiceContainer(config)
    app.config['service_container'] = container
    logging.debug("Services will be initialized on demand via ServiceContainer")
