"""Repository implementations (Infrastructure Layer).

These implement ``ITransactionStore`` defined in borrowing_service.domain.interfaces.
"""
from borrowing_service.infrastructure.repositories.in_memory_transaction_store import InMemoryTransactionStore
from borrowing_service.infrastructure.repositories.redis_transaction_store import RedisTransactionStore

__all__ = [
    "InMemoryTransactionStore",
    "RedisTransactionStore",
]
