"""Rate limiting middleware using Flask-Limiter."""
import logging
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask import request

from borrowing_service.config.settings import Config


def get_limiter_key() -> str:
    """
    Get rate limit key based on the member in the request or IP address.

    Returns:
        String key for rate limiting
    """
    if request.is_json:
        body = request.get_json(silent=True)
        if isinstance(body, dict):
            member_id = body.get("memberId")
            if member_id:
                return f"rate_limit:member:{member_id}"

    return get_remote_address()


def create_rate_limiter(app) -> Limiter:
    """
    Create and configure Flask-Limiter instance.

    Args:
        app: Flask application instance

    Returns:
        Configured Limiter instance
    """
    try:
        if not Config.RATELIMIT_ENABLED or app.config.get("TESTING"):
            limiter = Limiter(
                key_func=get_remote_address,
                default_limits=[],
                storage_uri="memory://",
                enabled=False,
            )
            limiter.init_app(app)
            return limiter

        limiter = Limiter(
            key_func=get_limiter_key,
            default_limits=["1000 per hour", "100 per minute"],
            storage_uri=Config.RATELIMIT_STORAGE_URL,
            strategy="fixed-window",
            headers_enabled=True
        )
        limiter.init_app(app)
        return limiter
    except Exception as e:
        logging.warning(f"Failed to initialize rate limiter: {e}, using memory storage")
        limiter = Limiter(
            key_func=get_limiter_key,
            default_limits=["1000 per hour", "100 per minute"],
            storage_uri="memory://"
        )
        limiter.init_app(app)
        return limiter
