"""Service container for dependency injection (IoC Container Pattern)."""
import logging
from typing import Optional

from borrowing_service.config.settings import Config
from borrowing_service.domain.interfaces.catalog_gateway import ICatalogGateway
from borrowing_service.domain.interfaces.directory_gateway import IDirectoryGateway
from borrowing_service.domain.interfaces.notification_gateway import INotificationGateway
from borrowing_service.domain.interfaces.transaction_store import ITransactionStore
from borrowing_service.application.services.borrowing_orchestrator import BorrowingOrchestrator
from borrowing_service.infrastructure.factories.service_factory import ServiceFactory


class ServiceContainer:
    """
    Service container implementing Dependency Injection pattern.

    Follows Singleton pattern and Dependency Inversion Principle.
    Uses Factory Pattern to create implementations based on configuration.
    """

    _instance: Optional['ServiceContainer'] = None
    _config: type = Config
    _transaction_store: Optional[ITransactionStore] = None
    _catalog_gateway: Optional[ICatalogGateway] = None
    _directory_gateway: Optional[IDirectoryGateway] = None
    _notification_gateway: Optional[INotificationGateway] = None
    _orchestrator: Optional[BorrowingOrchestrator] = None

    def __new__(cls, config: Optional[type] = None):
        """Singleton pattern implementation."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        if config is not None:
            cls._config = config
        return cls._instance

    def __init__(self, config: Optional[type] = None):
        """Initialize service container."""
        self._logger = logging.getLogger(__name__)

    def get_transaction_store(self) -> ITransactionStore:
        """Get or create transaction store instance."""
        if self._transaction_store is None:
            storage_type = self._config.TRANSACTION_STORE
            try:
                type(self)._transaction_store = ServiceFactory.create_transaction_store(storage_type)
                self._logger.info(f"TransactionStore created with {storage_type}")
            except Exception as e:
                self._logger.error(f"Failed to create TransactionStore: {e}")
                raise
        return self._transaction_store

    def get_catalog_gateway(self) -> ICatalogGateway:
        """Get or create catalog gateway instance."""
        if self._catalog_gateway is None:
            type(self)._catalog_gateway = ServiceFactory.create_catalog_gateway(
                self._config.CATALOG_SERVICE_URL
            )
            self._logger.info("CatalogGateway created")
        return self._catalog_gateway

    def get_directory_gateway(self) -> IDirectoryGateway:
        """Get or create directory gateway instance."""
        if self._directory_gateway is None:
            type(self)._directory_gateway = ServiceFactory.create_directory_gateway(
                self._config.DIRECTORY_SERVICE_URL
            )
            self._logger.info("DirectoryGateway created")
        return self._directory_gateway

    def get_notification_gateway(self) -> INotificationGateway:
        """Get or create notification gateway instance."""
        if self._notification_gateway is None:
            dispatch = self._config.NOTIFICATION_DISPATCH
            try:
                type(self)._notification_gateway = ServiceFactory.create_notification_gateway(
                    dispatch, self._config.NOTIFICATION_SERVICE_URL
                )
                self._logger.info(f"NotificationGateway created: {dispatch}")
            except Exception as e:
                self._logger.error(f"Failed to create NotificationGateway: {e}")
                raise
        return self._notification_gateway

    def get_orchestrator(self) -> BorrowingOrchestrator:
        """Get or create borrowing orchestrator instance."""
        if self._orchestrator is None:
            type(self)._orchestrator = BorrowingOrchestrator(
                transaction_store=self.get_transaction_store(),
                catalog_gateway=self.get_catalog_gateway(),
                directory_gateway=self.get_directory_gateway(),
                notification_gateway=self.get_notification_gateway(),
                loan_period_days=self._config.LOAN_PERIOD_DAYS,
            )
            self._logger.info("BorrowingOrchestrator created")
        return self._orchestrator

    def register(
        self,
        transaction_store: Optional[ITransactionStore] = None,
        catalog_gateway: Optional[ICatalogGateway] = None,
        directory_gateway: Optional[IDirectoryGateway] = None,
        notification_gateway: Optional[INotificationGateway] = None,
    ) -> None:
        """Override implementations (useful for testing); drops the cached orchestrator."""
        cls = type(self)
        if transaction_store is not None:
            cls._transaction_store = transaction_store
        if catalog_gateway is not None:
            cls._catalog_gateway = catalog_gateway
        if directory_gateway is not None:
            cls._directory_gateway = directory_gateway
        if notification_gateway is not None:
            cls._notification_gateway = notification_gateway
        cls._orchestrator = None

    @classmethod
    def reset(cls) -> None:
        """Reset all service instances (useful for testing)."""
        cls._instance = None
        cls._config = Config
        cls._transaction_store = None
        cls._catalog_gateway = None
        cls._directory_gateway = None
        cls._notification_gateway = None
        cls._orchestrator = None
