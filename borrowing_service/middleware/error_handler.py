"""Error handling middleware with Sentry integration."""
import logging
from flask import jsonify
from werkzeug.exceptions import HTTPException

from borrowing_service.config.settings import Config
from borrowing_service.domain.exceptions import BorrowingError

logger = logging.getLogger(__name__)


def init_sentry(app) -> None:
    """Initialize Sentry if DSN is provided."""
    if not Config.SENTRY_DSN:
        return

    import sentry_sdk
    from sentry_sdk.integrations.flask import FlaskIntegration
    from sentry_sdk.integrations.celery import CeleryIntegration

    sentry_sdk.init(
        dsn=Config.SENTRY_DSN,
        integrations=[
            FlaskIntegration(),
            CeleryIntegration(),
        ],
        traces_sample_rate=0.1,
        environment=app.config.get("FLASK_ENV", "production"),
    )
    logger.info("Sentry error tracking initialized")


def init_error_handlers(app) -> None:
    """
    Initialize error handlers for the application.

    Args:
        app: Flask application instance
    """
    init_sentry(app)

    @app.errorhandler(BorrowingError)
    def borrowing_error(error: BorrowingError):
        """Map operation-fatal errors to their HTTP status."""
        if error.status_code >= 500:
            logger.error(f"{type(error).__name__}: {error.message}", exc_info=error.__cause__)
        else:
            logger.info(f"{type(error).__name__}: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(404)
    def not_found(error):
        """Handle 404 errors."""
        return jsonify({"status": "error", "message": "Resource not found"}), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        """Handle 405 errors."""
        return jsonify({"status": "error", "message": "Method not allowed"}), 405

    @app.errorhandler(400)
    def bad_request(error):
        """Handle malformed requests (e.g. invalid JSON)."""
        description = error.description if isinstance(error, HTTPException) else "Bad request"
        return jsonify({"status": "error", "message": description}), 400

    @app.errorhandler(500)
    def internal_error(error):
        """Handle 500 errors."""
        logger.error(f"Internal server error: {error}", exc_info=True)
        return jsonify({"status": "error", "message": "Internal server error"}), 500

    @app.errorhandler(429)
    def rate_limit_error(error):
        """Handle rate limit errors."""
        return jsonify({
            "status": "error",
            "message": "Rate limit exceeded. Please try again later."
        }), 429
