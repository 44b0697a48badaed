"""Factory for creating stores and gateways (Factory Pattern)."""
import logging
from typing import Optional

from borrowing_service.domain.exceptions import StoreError
from borrowing_service.domain.interfaces.catalog_gateway import ICatalogGateway
from borrowing_service.domain.interfaces.directory_gateway import IDirectoryGateway
from borrowing_service.domain.interfaces.notification_gateway import INotificationGateway
from borrowing_service.domain.interfaces.transaction_store import ITransactionStore
from borrowing_service.infrastructure.gateways.catalog_gateway import HttpCatalogGateway
from borrowing_service.infrastructure.gateways.directory_gateway import HttpDirectoryGateway
from borrowing_service.infrastructure.gateways.notification_gateway import HttpNotificationGateway
from borrowing_service.infrastructure.gateways.queued_notification_gateway import QueuedNotificationGateway
from borrowing_service.infrastructure.redis_client import RedisClientFactory
from borrowing_service.infrastructure.repositories.in_memory_transaction_store import InMemoryTransactionStore
from borrowing_service.infrastructure.repositories.redis_transaction_store import RedisTransactionStore


logger = logging.getLogger(__name__)


class ServiceFactory:
    """
    Factory for creating infrastructure implementations following Factory Pattern.

    Centralizes creation logic and allows switching implementations by configuration.
    """

    @staticmethod
    def create_transaction_store(storage_type: str = "redis") -> ITransactionStore:
        """
        Create a transaction store instance.

        Args:
            storage_type: Type of storage ("redis", "memory")

        Returns:
            ITransactionStore instance

        Raises:
            ValueError: If storage type is not supported
            StoreError: If the Redis backend cannot be reached
        """
        storage_type = storage_type.lower()

        if storage_type == "redis":
            redis_client = RedisClientFactory.get_client()
            if redis_client is None:
                raise StoreError("Redis not available - transaction store cannot start")
            return RedisTransactionStore(redis_client=redis_client)
        elif storage_type == "memory":
            logger.warning("Using in-memory transaction store; records will not survive a restart")
            return InMemoryTransactionStore()
        else:
            raise ValueError(f"Unsupported storage type: {storage_type}")

    @staticmethod
    def create_catalog_gateway(base_url: Optional[str] = None) -> ICatalogGateway:
        return HttpCatalogGateway(base_url=base_url)

    @staticmethod
    def create_directory_gateway(base_url: Optional[str] = None) -> IDirectoryGateway:
        return HttpDirectoryGateway(base_url=base_url)

    @staticmethod
    def create_notification_gateway(
        dispatch: str = "sync", base_url: Optional[str] = None
    ) -> INotificationGateway:
        """
        Create a notification gateway.

        Args:
            dispatch: "sync" to call the mail service inline, "celery" to queue
            base_url: Mail service URL for inline delivery (defaults to Config value)

        Returns:
            INotificationGateway instance

        Raises:
            ValueError: If dispatch mode is not supported
        """
        dispatch = dispatch.lower()

        if dispatch == "sync":
            return HttpNotificationGateway(base_url=base_url)
        elif dispatch == "celery":
            return QueuedNotificationGateway()
        else:
            raise ValueError(f"Unsupported notification dispatch: {dispatch}")
