"""API endpoints module.

HTTP endpoints organized by domain; thin wrappers around the orchestrator.
"""

from borrowing_service.api.borrowings import borrowings_blueprint
from borrowing_service.api.health import health_blueprint

__all__ = [
    "borrowings_blueprint",
    "health_blueprint",
]
