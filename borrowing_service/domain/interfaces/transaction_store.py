"""Interface for the borrowing transaction store (Repository Pattern)."""
from abc import ABC, abstractmethod
from typing import List, Optional

from borrowing_service.domain.entities.borrowing_transaction import BorrowingTransaction


class ITransactionStore(ABC):
    """
    Interface for borrowing transaction persistence following Repository Pattern.

    The store is the single source of truth. Implementations must make
    ``create_if_no_active`` and ``compare_and_swap`` atomic so that at most
    one active loan exists per (book, member) pair and a loan can be
    returned only once.

    Ordering: ``find_*`` methods return records in insertion order. When
    more than one active record matches a (book, member) pair, the oldest
    ``borrow_date`` wins, ties broken by insertion order.

    Backend failures are raised as ``StoreError``.
    """

    @abstractmethod
    def create(self, transaction: BorrowingTransaction) -> BorrowingTransaction:
        """
        Persist a new transaction unconditionally.

        Args:
            transaction: Transaction to store

        Returns:
            The stored transaction
        """
        pass

    @abstractmethod
    def create_if_no_active(self, transaction: BorrowingTransaction) -> BorrowingTransaction:
        """
        Persist a new transaction only if no active loan exists for its pair.

        Args:
            transaction: New BORROWED transaction

        Returns:
            The stored transaction

        Raises:
            DuplicateActiveLoanError: If an active loan already exists
        """
        pass

    @abstractmethod
    def get(self, transaction_id: str) -> Optional[BorrowingTransaction]:
        """
        Retrieve a transaction by id.

        Args:
            transaction_id: Transaction identifier

        Returns:
            Transaction if exists, None otherwise
        """
        pass

    @abstractmethod
    def find_active_by_book_and_member(
        self, book_id: str, member_id: str
    ) -> Optional[BorrowingTransaction]:
        """
        Find the active loan for a book/member pair.

        Args:
            book_id: Book identifier
            member_id: Member identifier

        Returns:
            The matching BORROWED transaction, or None
        """
        pass

    @abstractmethod
    def find_active_by_member(self, member_id: str) -> List[BorrowingTransaction]:
        """
        List all active loans of a member in insertion order.

        Args:
            member_id: Member identifier

        Returns:
            List of BORROWED transactions (empty if none)
        """
        pass

    @abstractmethod
    def find_all(self, limit: Optional[int] = None, offset: int = 0) -> List[BorrowingTransaction]:
        """
        List every transaction in insertion order.

        Args:
            limit: Maximum number of records (None for all)
            offset: Number of records to skip

        Returns:
            List of transactions
        """
        pass

    @abstractmethod
    def save(self, transaction: BorrowingTransaction) -> BorrowingTransaction:
        """
        Overwrite an existing transaction without a version check.

        Args:
            transaction: Transaction to store

        Returns:
            The stored transaction
        """
        pass

    @abstractmethod
    def compare_and_swap(
        self, transaction: BorrowingTransaction, expected_version: int
    ) -> BorrowingTransaction:
        """
        Overwrite a transaction only if the stored version still matches.

        Args:
            transaction: New state of the transaction
            expected_version: Version the caller read before mutating

        Returns:
            The stored transaction

        Raises:
            ConcurrentModificationError: If the stored version differs
        """
        pass

    @abstractmethod
    def ping(self) -> bool:
        """Return True if the backend is reachable."""
        pass
