"""Celery tasks for delivering borrowing notifications in the background."""
import logging
from typing import Dict, Any
from celery import Task

from borrowing_service.config.settings import get_config
from borrowing_service.domain.exceptions import GatewayError
from borrowing_service.infrastructure.celery_app import celery_app
from borrowing_service.infrastructure.gateways.notification_gateway import HttpNotificationGateway
from borrowing_service.middleware.monitoring import track_advisory_failure


logger = logging.getLogger(__name__)


class NotificationTask(Task):
    """Task base that logs failures; delivery is never retried."""

    _gateway = None

    @property
    def gateway(self) -> HttpNotificationGateway:
        if self._gateway is None:
            self._gateway = HttpNotificationGateway(base_url=get_config().NOTIFICATION_SERVICE_URL)
        return self._gateway

    def on_failure(self, exc, task_id, args, kwargs, einfo):
        """Handle task failure."""
        logger.error(f"Notification task {task_id} failed: {exc}", exc_info=einfo)


@celery_app.task(
    bind=True,
    base=NotificationTask,
    max_retries=0,
    name="borrowing_service.send_notification"
)
def send_notification_task(self, to: str, subject: str, body: str) -> Dict[str, Any]:
    """
    Deliver one notification through the HTTP notification service.

    Args:
        self: Task instance (bound task)
        to: Recipient email address
        subject: Message subject
        body: Message body

    Returns:
        Delivery result dictionary
    """
    try:
        self.gateway.send(to, subject, body)
        return {"status": "success", "to": to}
    except GatewayError as exc:
        logger.warning(f"Notification to {to} not delivered: {exc}")
        track_advisory_failure("notification")
        return {"status": "error", "to": to, "error": str(exc)}
