"""Domain entities - core business objects."""
from borrowing_service.domain.entities.borrowing_transaction import (
    BorrowingTransaction,
    TransactionStatus,
)
from borrowing_service.domain.entities.collaborators import BookInfo, MemberContact

__all__ = [
    "BorrowingTransaction",
    "TransactionStatus",
    "BookInfo",
    "MemberContact",
]
