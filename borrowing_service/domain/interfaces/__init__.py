"""Domain interfaces following Dependency Inversion Principle."""

from borrowing_service.domain.interfaces.transaction_store import ITransactionStore
from borrowing_service.domain.interfaces.catalog_gateway import ICatalogGateway
from borrowing_service.domain.interfaces.directory_gateway import IDirectoryGateway
from borrowing_service.domain.interfaces.notification_gateway import INotificationGateway

__all__ = [
    "ITransactionStore",
    "ICatalogGateway",
    "IDirectoryGateway",
    "INotificationGateway",
]
