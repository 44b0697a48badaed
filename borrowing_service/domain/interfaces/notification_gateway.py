"""Interface for outbound notifications (Strategy Pattern).

Delivery is fire-and-forget: callers treat every failure as advisory.
"""
from abc import ABC, abstractmethod


class INotificationGateway(ABC):
    """Interface for delivering a text message to an email address."""

    @abstractmethod
    def send(self, to: str, subject: str, body: str) -> None:
        """
        Send a message.

        Args:
            to: Recipient email address
            subject: Message subject
            body: Plain text body

        Raises:
            GatewayCommunicationError: If the message could not be handed off
        """
        pass
