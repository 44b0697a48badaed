"""HTTP adapter for the member directory service."""
import logging
from typing import Optional

from borrowing_service.config.settings import Config
from borrowing_service.domain.entities.collaborators import MemberContact
from borrowing_service.domain.exceptions import FieldAbsentError
from borrowing_service.domain.interfaces.directory_gateway import IDirectoryGateway
from borrowing_service.infrastructure.clients.http_client import ServiceHttpClient


class HttpDirectoryGateway(IDirectoryGateway):
    """Reads ``GET /members/<member_id>`` -> ``{"email": str, "name": str}``."""

    SERVICE_NAME = "directory"

    def __init__(self, client: Optional[ServiceHttpClient] = None, base_url: Optional[str] = None):
        self.client = client or ServiceHttpClient(self.SERVICE_NAME, base_url or Config.DIRECTORY_SERVICE_URL)
        self._logger = logging.getLogger(__name__)

    def get_contact(self, member_id: str) -> MemberContact:
        data = self.client.request("GET", f"/members/{member_id}")

        email = data.get("email")
        if not isinstance(email, str) or "@" not in email:
            raise FieldAbsentError(self.SERVICE_NAME, "email")

        name = data.get("name")
        return MemberContact(
            member_id=member_id,
            email=email.strip(),
            name=name if isinstance(name, str) and name else None,
        )
