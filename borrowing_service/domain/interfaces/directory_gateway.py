"""Interface for the member directory service (Adapter Pattern)."""
from abc import ABC, abstractmethod

from borrowing_service.domain.entities.collaborators import MemberContact


class IDirectoryGateway(ABC):
    """Interface for member contact lookups."""

    @abstractmethod
    def get_contact(self, member_id: str) -> MemberContact:
        """
        Look up a member's contact details.

        Args:
            member_id: Member identifier

        Returns:
            Contact details with a non-empty email

        Raises:
            RecordNotFoundError: If the directory has no such member
            FieldAbsentError: If the response lacks an email
            GatewayCommunicationError: If the directory cannot be reached
        """
        pass
