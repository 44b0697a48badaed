"""Redis-based borrowing transaction store."""
import logging
import json
from typing import Optional, List
import redis

from borrowing_service.config.settings import Config
from borrowing_service.domain.entities.borrowing_transaction import BorrowingTransaction
from borrowing_service.domain.exceptions import (
    ConcurrentModificationError,
    DuplicateActiveLoanError,
    StoreError,
)
from borrowing_service.domain.interfaces.transaction_store import ITransactionStore


class RedisTransactionStore(ITransactionStore):
    """
    Redis-based transaction store.

    Key layout (all under the configured prefix):

    - ``tx:<id>``                            JSON record
    - ``all``                                list of ids in insertion order
    - ``member:<member_id>:active``          list of active ids in insertion order
    - ``active:["<book_id>","<member_id>"]`` id of the active loan for the pair

    The active-pair key is the uniqueness constraint. Conditional insert and
    compare-and-swap run as WATCH/MULTI transactions over it and the record.
    """

    def __init__(self, redis_client: Optional[redis.Redis] = None, key_prefix: Optional[str] = None):
        """
        Initialize the transaction store.

        Args:
            redis_client: Redis client instance (Dependency Injection)
            key_prefix: Namespace for all keys (defaults to Config value)
        """
        self.redis = redis_client
        self._key_prefix = key_prefix or Config.REDIS_KEY_PREFIX
        self._logger = logging.getLogger(__name__)

    def _record_key(self, transaction_id: str) -> str:
        return f"{self._key_prefix}tx:{transaction_id}"

    def _all_key(self) -> str:
        return f"{self._key_prefix}all"

    def _member_key(self, member_id: str) -> str:
        return f"{self._key_prefix}member:{member_id}:active"

    def _active_key(self, book_id: str, member_id: str) -> str:
        # identifiers may contain ":", so the pair is JSON-encoded
        pair = json.dumps([book_id, member_id], separators=(",", ":"))
        return f"{self._key_prefix}active:{pair}"

    def _client(self) -> redis.Redis:
        if not self.redis:
            self._logger.error("Redis client not initialized")
            raise StoreError("Redis not available - cannot access borrowing records")
        return self.redis

    @staticmethod
    def _serialize(transaction: BorrowingTransaction) -> str:
        return json.dumps(transaction.to_record())

    def _load_many(self, ids: List[str]) -> List[BorrowingTransaction]:
        if not ids:
            return []
        raw_records = self._client().mget([self._record_key(tx_id) for tx_id in ids])
        transactions = []
        for tx_id, raw in zip(ids, raw_records):
            if raw is None:
                self._logger.warning(f"Index references missing transaction {tx_id}")
                continue
            transactions.append(BorrowingTransaction.from_record(json.loads(raw)))
        return transactions

    def _queue_insert(self, pipe, transaction: BorrowingTransaction) -> None:
        tx_id = transaction.transaction_id
        pipe.set(self._record_key(tx_id), self._serialize(transaction))
        pipe.rpush(self._all_key(), tx_id)
        if transaction.is_active:
            pipe.rpush(self._member_key(transaction.member_id), tx_id)

    def _queue_update(self, pipe, transaction: BorrowingTransaction, active_owner: Optional[str]) -> None:
        tx_id = transaction.transaction_id
        pipe.set(self._record_key(tx_id), self._serialize(transaction))
        if not transaction.is_active:
            pipe.lrem(self._member_key(transaction.member_id), 0, tx_id)
            if active_owner == tx_id:
                pipe.delete(self._active_key(transaction.book_id, transaction.member_id))

    def create(self, transaction: BorrowingTransaction) -> BorrowingTransaction:
        client = self._client()
        try:
            with client.pipeline(transaction=True) as pipe:
                self._queue_insert(pipe, transaction)
                if transaction.is_active:
                    pipe.set(
                        self._active_key(transaction.book_id, transaction.member_id),
                        transaction.transaction_id,
                        nx=True,
                    )
                pipe.execute()
            self._logger.debug(f"Created transaction {transaction.transaction_id}")
            return transaction
        except redis.RedisError as e:
            self._logger.error(f"Error creating transaction {transaction.transaction_id}: {e}")
            raise StoreError(str(e)) from e

    def create_if_no_active(self, transaction: BorrowingTransaction) -> BorrowingTransaction:
        active_key = self._active_key(transaction.book_id, transaction.member_id)

        def _insert(pipe) -> None:
            existing = pipe.get(active_key)
            if existing:
                raise DuplicateActiveLoanError(transaction.book_id, transaction.member_id, existing)
            pipe.multi()
            pipe.set(active_key, transaction.transaction_id)
            self._queue_insert(pipe, transaction)

        try:
            self._client().transaction(_insert, active_key)
            self._logger.info(
                f"Created transaction {transaction.transaction_id} "
                f"for book {transaction.book_id} / member {transaction.member_id}"
            )
            return transaction
        except redis.RedisError as e:
            self._logger.error(f"Error creating transaction {transaction.transaction_id}: {e}")
            raise StoreError(str(e)) from e

    def get(self, transaction_id: str) -> Optional[BorrowingTransaction]:
        try:
            raw = self._client().get(self._record_key(transaction_id))
        except redis.RedisError as e:
            self._logger.error(f"Error retrieving transaction {transaction_id}: {e}")
            raise StoreError(str(e)) from e
        if raw is None:
            return None
        return BorrowingTransaction.from_record(json.loads(raw))

    def find_active_by_book_and_member(
        self, book_id: str, member_id: str
    ) -> Optional[BorrowingTransaction]:
        matches = [tx for tx in self.find_active_by_member(member_id) if tx.book_id == book_id]
        if not matches:
            return None
        # stable sort keeps insertion order for equal borrow dates
        return sorted(matches, key=lambda tx: tx.borrow_date)[0]

    def find_active_by_member(self, member_id: str) -> List[BorrowingTransaction]:
        try:
            ids = self._client().lrange(self._member_key(member_id), 0, -1)
            return [tx for tx in self._load_many(ids) if tx.is_active]
        except redis.RedisError as e:
            self._logger.error(f"Error listing active transactions for member {member_id}: {e}")
            raise StoreError(str(e)) from e

    def find_all(self, limit: Optional[int] = None, offset: int = 0) -> List[BorrowingTransaction]:
        end = -1 if limit is None else offset + limit - 1
        try:
            ids = self._client().lrange(self._all_key(), offset, end)
            return self._load_many(ids)
        except redis.RedisError as e:
            self._logger.error(f"Error listing transactions: {e}")
            raise StoreError(str(e)) from e

    def save(self, transaction: BorrowingTransaction) -> BorrowingTransaction:
        client = self._client()
        record_key = self._record_key(transaction.transaction_id)
        active_key = self._active_key(transaction.book_id, transaction.member_id)
        try:
            if not client.exists(record_key):
                raise StoreError(f"Transaction {transaction.transaction_id} does not exist")
            active_owner = client.get(active_key)
            with client.pipeline(transaction=True) as pipe:
                self._queue_update(pipe, transaction, active_owner)
                pipe.execute()
            return transaction
        except redis.RedisError as e:
            self._logger.error(f"Error saving transaction {transaction.transaction_id}: {e}")
            raise StoreError(str(e)) from e

    def compare_and_swap(
        self, transaction: BorrowingTransaction, expected_version: int
    ) -> BorrowingTransaction:
        record_key = self._record_key(transaction.transaction_id)
        active_key = self._active_key(transaction.book_id, transaction.member_id)

        def _swap(pipe) -> None:
            raw = pipe.get(record_key)
            if raw is None:
                raise ConcurrentModificationError(transaction.transaction_id, expected_version)
            current = BorrowingTransaction.from_record(json.loads(raw))
            if current.version != expected_version:
                raise ConcurrentModificationError(transaction.transaction_id, expected_version)
            active_owner = pipe.get(active_key)
            pipe.multi()
            self._queue_update(pipe, transaction, active_owner)

        try:
            self._client().transaction(_swap, record_key, active_key)
            self._logger.info(
                f"Transaction {transaction.transaction_id} moved to {transaction.status.value}"
            )
            return transaction
        except redis.RedisError as e:
            self._logger.error(f"Error updating transaction {transaction.transaction_id}: {e}")
            raise StoreError(str(e)) from e

    def ping(self) -> bool:
        try:
            return bool(self._client().ping())
        except (redis.RedisError, StoreError) as e:
            self._logger.error(f"Redis ping failed: {e}")
            return False
