"""External API clients module."""
from borrowing_service.infrastructure.clients.http_client import ServiceHttpClient

__all__ = [
    "ServiceHttpClient",
]
