"""HTTP adapter for the notification (mail) service."""
import logging
from typing import Optional

from borrowing_service.config.settings import Config
from borrowing_service.domain.exceptions import GatewayCommunicationError, RecordNotFoundError
from borrowing_service.domain.interfaces.notification_gateway import INotificationGateway
from borrowing_service.infrastructure.clients.http_client import ServiceHttpClient


class HttpNotificationGateway(INotificationGateway):
    """Posts ``{"to", "subject", "body"}`` to ``/notifications/email``."""

    SERVICE_NAME = "notification"

    def __init__(self, client: Optional[ServiceHttpClient] = None, base_url: Optional[str] = None):
        self.client = client or ServiceHttpClient(
            self.SERVICE_NAME, base_url or Config.NOTIFICATION_SERVICE_URL, max_retries=0
        )
        self._logger = logging.getLogger(__name__)

    def send(self, to: str, subject: str, body: str) -> None:
        payload = {"to": to, "subject": subject, "body": body}
        try:
            self.client.request("POST", "/notifications/email", json_data=payload)
        except RecordNotFoundError as e:
            # a missing endpoint is a delivery failure, not a missing record
            raise GatewayCommunicationError(self.SERVICE_NAME, "endpoint not found") from e
        self._logger.info(f"Notification '{subject}' handed off for {to}")
