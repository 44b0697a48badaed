"""Notification gateway that hands messages to a Celery worker."""
import logging

from kombu.exceptions import KombuError

from borrowing_service.domain.exceptions import GatewayCommunicationError
from borrowing_service.domain.interfaces.notification_gateway import INotificationGateway


class QueuedNotificationGateway(INotificationGateway):
    """
    Enqueues ``send_notification_task`` instead of calling the mail service
    inline. Only the enqueue happens inside the request.
    """

    SERVICE_NAME = "notification-queue"

    def __init__(self, task=None):
        if task is None:
            from borrowing_service.tasks.notification_tasks import send_notification_task
            task = send_notification_task
        self.task = task
        self._logger = logging.getLogger(__name__)

    def send(self, to: str, subject: str, body: str) -> None:
        try:
            result = self.task.delay(to, subject, body)
        except (KombuError, OSError) as e:
            self._logger.error(f"Failed to enqueue notification for {to}: {e}")
            raise GatewayCommunicationError(self.SERVICE_NAME, "broker unavailable") from e
        self._logger.info(f"Notification for {to} queued as task {result.id}")
