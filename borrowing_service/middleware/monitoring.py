"""Monitoring and metrics middleware using Prometheus."""
import logging
import time
from functools import wraps
from typing import Callable
from flask import request
from prometheus_client import Counter, Histogram
from prometheus_client import make_wsgi_app
from werkzeug.middleware.dispatcher import DispatcherMiddleware

from borrowing_service.config.settings import Config

logger = logging.getLogger(__name__)

# Prometheus metrics
borrowing_operations_total = Counter(
    'borrowing_operations_total',
    'Total number of borrow/return operations by outcome',
    ['operation', 'outcome']
)

gateway_calls_total = Counter(
    'borrowing_gateway_calls_total',
    'Total number of calls to remote collaborator services',
    ['service', 'outcome']
)

advisory_failures_total = Counter(
    'borrowing_advisory_failures_total',
    'Best-effort side effects that failed and were absorbed',
    ['step']
)

api_requests_total = Counter(
    'borrowing_api_requests_total',
    'Total number of API requests',
    ['method', 'endpoint', 'status']
)

api_request_duration = Histogram(
    'borrowing_api_request_duration_seconds',
    'Time spent processing API requests',
    ['endpoint'],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0]
)


def register_metrics_middleware(app) -> None:
    """
    Register Prometheus metrics middleware.

    Args:
        app: Flask application instance
    """
    if not Config.ENABLE_METRICS:
        return

    app.wsgi_app = DispatcherMiddleware(app.wsgi_app, {
        '/metrics': make_wsgi_app()
    })

    logger.info("Prometheus metrics enabled at /metrics")


def track_request(endpoint: str):
    """
    Decorator to track API request metrics.

    Args:
        endpoint: Endpoint name for metrics
    """
    def decorator(f: Callable) -> Callable:
        @wraps(f)
        def wrapper(*args, **kwargs):
            if not Config.ENABLE_METRICS:
                return f(*args, **kwargs)

            start_time = time.time()
            try:
                response = f(*args, **kwargs)
            except Exception as e:
                status_code = getattr(e, "status_code", 500)
                api_requests_total.labels(
                    method=request.method,
                    endpoint=endpoint,
                    status=status_code
                ).inc()
                raise
            status_code = response[1] if isinstance(response, tuple) else 200
            api_requests_total.labels(
                method=request.method,
                endpoint=endpoint,
                status=status_code
            ).inc()
            api_request_duration.labels(endpoint=endpoint).observe(time.time() - start_time)
            return response
        return wrapper
    return decorator


def track_operation(operation: str, outcome: str) -> None:
    """
    Track a borrow/return outcome.

    Args:
        operation: 'borrow' or 'return'
        outcome: e.g. 'success', 'not_found', 'external_error'
    """
    try:
        if Config.ENABLE_METRICS:
            borrowing_operations_total.labels(operation=operation, outcome=outcome).inc()
    except Exception as e:
        # Don't fail if metrics tracking fails
        logger.debug(f"Failed to track operation metrics: {e}")


def track_gateway_call(service: str, outcome: str) -> None:
    try:
        if Config.ENABLE_METRICS:
            gateway_calls_total.labels(service=service, outcome=outcome).inc()
    except Exception as e:
        logger.debug(f"Failed to track gateway call metrics: {e}")


def track_advisory_failure(step: str) -> None:
    try:
        if Config.ENABLE_METRICS:
            advisory_failures_total.labels(step=step).inc()
    except Exception as e:
        logger.debug(f"Failed to track advisory failure metrics: {e}")
