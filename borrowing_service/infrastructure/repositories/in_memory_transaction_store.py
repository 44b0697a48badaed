"""In-process transaction store, used for tests and single-process deployments."""
import logging
import threading
from typing import Dict, List, Optional

from borrowing_service.domain.entities.borrowing_transaction import BorrowingTransaction
from borrowing_service.domain.exceptions import (
    ConcurrentModificationError,
    DuplicateActiveLoanError,
    StoreError,
)
from borrowing_service.domain.interfaces.transaction_store import ITransactionStore


class InMemoryTransactionStore(ITransactionStore):
    """
    Dictionary-backed store.

    Insertion order is kept by the dict itself. A per-store lock makes the
    conditional insert and the compare-and-swap atomic across threads.
    """

    def __init__(self):
        self._records: Dict[str, BorrowingTransaction] = {}
        self._lock = threading.RLock()
        self._logger = logging.getLogger(__name__)

    def create(self, transaction: BorrowingTransaction) -> BorrowingTransaction:
        with self._lock:
            if transaction.transaction_id in self._records:
                raise StoreError(f"Transaction {transaction.transaction_id} already exists")
            stored = transaction.with_title(None)
            self._records[transaction.transaction_id] = stored
            self._logger.debug(f"Created transaction {transaction.transaction_id}")
            return transaction

    def create_if_no_active(self, transaction: BorrowingTransaction) -> BorrowingTransaction:
        with self._lock:
            existing = self.find_active_by_book_and_member(
                transaction.book_id, transaction.member_id
            )
            if existing is not None:
                raise DuplicateActiveLoanError(
                    transaction.book_id, transaction.member_id, existing.transaction_id
                )
            return self.create(transaction)

    def get(self, transaction_id: str) -> Optional[BorrowingTransaction]:
        with self._lock:
            return self._records.get(transaction_id)

    def find_active_by_book_and_member(
        self, book_id: str, member_id: str
    ) -> Optional[BorrowingTransaction]:
        with self._lock:
            matches = [
                tx for tx in self._records.values()
                if tx.is_active and tx.book_id == book_id and tx.member_id == member_id
            ]
        if not matches:
            return None
        # sorted() is stable, so equal borrow dates keep insertion order
        return sorted(matches, key=lambda tx: tx.borrow_date)[0]

    def find_active_by_member(self, member_id: str) -> List[BorrowingTransaction]:
        with self._lock:
            return [
                tx for tx in self._records.values()
                if tx.is_active and tx.member_id == member_id
            ]

    def find_all(self, limit: Optional[int] = None, offset: int = 0) -> List[BorrowingTransaction]:
        with self._lock:
            records = list(self._records.values())
        end = None if limit is None else offset + limit
        return records[offset:end]

    def save(self, transaction: BorrowingTransaction) -> BorrowingTransaction:
        with self._lock:
            if transaction.transaction_id not in self._records:
                raise StoreError(f"Transaction {transaction.transaction_id} does not exist")
            self._records[transaction.transaction_id] = transaction.with_title(None)
            return transaction

    def compare_and_swap(
        self, transaction: BorrowingTransaction, expected_version: int
    ) -> BorrowingTransaction:
        with self._lock:
            current = self._records.get(transaction.transaction_id)
            if current is None or current.version != expected_version:
                raise ConcurrentModificationError(transaction.transaction_id, expected_version)
            return self.save(transaction)

    def ping(self) -> bool:
        return True
