"""Gateway implementations for the remote collaborator services."""
from borrowing_service.infrastructure.gateways.catalog_gateway import HttpCatalogGateway
from borrowing_service.infrastructure.gateways.directory_gateway import HttpDirectoryGateway
from borrowing_service.infrastructure.gateways.notification_gateway import HttpNotificationGateway
from borrowing_service.infrastructure.gateways.queued_notification_gateway import QueuedNotificationGateway

__all__ = [
    "HttpCatalogGateway",
    "HttpDirectoryGateway",
    "HttpNotificationGateway",
    "QueuedNotificationGateway",
]
