"""HTTP adapter for the book catalog service."""
import logging
from typing import Optional

from borrowing_service.config.settings import Config
from borrowing_service.domain.entities.collaborators import BookInfo
from borrowing_service.domain.exceptions import FieldAbsentError
from borrowing_service.domain.interfaces.catalog_gateway import ICatalogGateway
from borrowing_service.infrastructure.clients.http_client import ServiceHttpClient


class HttpCatalogGateway(ICatalogGateway):
    """Reads ``GET /books/<book_id>`` -> ``{"title": str, "available": bool}``."""

    SERVICE_NAME = "catalog"

    def __init__(self, client: Optional[ServiceHttpClient] = None, base_url: Optional[str] = None):
        self.client = client or ServiceHttpClient(self.SERVICE_NAME, base_url or Config.CATALOG_SERVICE_URL)
        self._logger = logging.getLogger(__name__)

    def get_book(self, book_id: str) -> BookInfo:
        data = self.client.request("GET", f"/books/{book_id}")

        title = data.get("title")
        if not isinstance(title, str) or not title.strip():
            raise FieldAbsentError(self.SERVICE_NAME, "title")

        available = data.get("available")
        if not isinstance(available, bool):
            available = None

        self._logger.debug(f"Catalog lookup for book {book_id}: '{title}'")
        return BookInfo(book_id=book_id, title=title.strip(), available=available)
