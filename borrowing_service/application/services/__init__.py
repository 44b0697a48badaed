"""Application services module.

Core borrowing logic, independent of HTTP and of concrete collaborators.
"""
from borrowing_service.application.services.borrowing_orchestrator import (
    AdvisoryOutcome,
    BorrowingOrchestrator,
    BorrowingResult,
)

__all__ = [
    "AdvisoryOutcome",
    "BorrowingOrchestrator",
    "BorrowingResult",
]
