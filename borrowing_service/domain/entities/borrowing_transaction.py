"""Borrowing transaction domain entity."""
import uuid
from dataclasses import dataclass, replace
from datetime import date, timedelta
from enum import Enum
from typing import Optional, Dict, Any

from borrowing_service.domain.exceptions import InvalidTransitionError


class TransactionStatus(str, Enum):
    """Lifecycle states of a borrowing transaction."""

    BORROWED = "BORROWED"
    RETURNED = "RETURNED"


@dataclass(frozen=True)
class BorrowingTransaction:
    """
    Domain entity representing one loan of a book to a member.

    Created BORROWED, moved to RETURNED exactly once, never deleted.
    ``book_title`` is a display cache filled from the catalog and is not
    part of the persisted record.
    """

    transaction_id: str
    book_id: str
    member_id: str
    borrow_date: date
    status: TransactionStatus = TransactionStatus.BORROWED
    return_date: Optional[date] = None
    book_title: str = ""
    version: int = 1

    def __post_init__(self):
        """Validate transaction entity."""
        if not self.transaction_id:
            raise ValueError("transaction_id is required")
        if not self.book_id:
            raise ValueError("book_id is required")
        if not self.member_id:
            raise ValueError("member_id is required")
        if self.borrow_date is None:
            raise ValueError("borrow_date is required")
        if not isinstance(self.status, TransactionStatus):
            raise ValueError(f"Invalid status: {self.status}")
        if (self.return_date is not None) != (self.status is TransactionStatus.RETURNED):
            raise ValueError("return_date must be set if and only if status is RETURNED")
        if self.return_date is not None and self.return_date < self.borrow_date:
            raise ValueError("return_date cannot precede borrow_date")
        if self.version < 1:
            raise ValueError("version must be positive")

    @classmethod
    def open(cls, book_id: str, member_id: str, borrow_date: date) -> "BorrowingTransaction":
        """Start a new active loan with a freshly assigned id."""
        return cls(
            transaction_id=uuid.uuid4().hex,
            book_id=book_id,
            member_id=member_id,
            borrow_date=borrow_date,
        )

    @property
    def is_active(self) -> bool:
        return self.status is TransactionStatus.BORROWED

    def due_date(self, loan_period_days: int) -> date:
        return self.borrow_date + timedelta(days=loan_period_days)

    def mark_returned(self, return_date: date) -> "BorrowingTransaction":
        """
        Transition BORROWED -> RETURNED.

        Args:
            return_date: Date the book came back

        Returns:
            New transaction instance with the next version

        Raises:
            InvalidTransitionError: If the transaction is already RETURNED
        """
        if not self.is_active:
            raise InvalidTransitionError(
                f"Transaction {self.transaction_id} is already {self.status.value}"
            )
        return replace(
            self,
            status=TransactionStatus.RETURNED,
            return_date=return_date,
            version=self.version + 1,
        )

    def with_title(self, title: Optional[str]) -> "BorrowingTransaction":
        return replace(self, book_title=title or "")

    def to_record(self) -> Dict[str, Any]:
        """Serialize to the persisted shape (the title cache is left out)."""
        return {
            "id": self.transaction_id,
            "book_id": self.book_id,
            "member_id": self.member_id,
            "borrow_date": self.borrow_date.isoformat(),
            "return_date": self.return_date.isoformat() if self.return_date else None,
            "status": self.status.value,
            "version": self.version,
        }

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "BorrowingTransaction":
        return_date = record.get("return_date")
        return cls(
            transaction_id=record["id"],
            book_id=record["book_id"],
            member_id=record["member_id"],
            borrow_date=date.fromisoformat(record["borrow_date"]),
            status=TransactionStatus(record["status"]),
            return_date=date.fromisoformat(return_date) if return_date else None,
            version=int(record.get("version", 1)),
        )

    def to_dict(self, loan_period_days: Optional[int] = None) -> Dict[str, Any]:
        """Serialize to the API shape."""
        data = {
            "id": self.transaction_id,
            "bookId": self.book_id,
            "memberId": self.member_id,
            "borrowDate": self.borrow_date.isoformat(),
            "returnDate": self.return_date.isoformat() if self.return_date else None,
            "status": self.status.value,
            "bookTitle": self.book_title,
        }
        if loan_period_days is not None:
            data["dueDate"] = self.due_date(loan_period_days).isoformat()
        return data
