"""Factories for infrastructure components."""
from borrowing_service.infrastructure.factories.service_factory import ServiceFactory

__all__ = [
    "ServiceFactory",
]
