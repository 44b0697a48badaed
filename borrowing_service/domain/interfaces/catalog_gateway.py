"""Interface for the book catalog service (Adapter Pattern)."""
from abc import ABC, abstractmethod

from borrowing_service.domain.entities.collaborators import BookInfo


class ICatalogGateway(ABC):
    """
    Interface for book catalog lookups.

    Implementations translate the remote response into ``BookInfo`` and
    never fall back to an empty title silently.
    """

    @abstractmethod
    def get_book(self, book_id: str) -> BookInfo:
        """
        Look up a book.

        Args:
            book_id: Book identifier

        Returns:
            Catalog information for the book

        Raises:
            RecordNotFoundError: If the catalog has no such book
            FieldAbsentError: If the response lacks a title
            GatewayCommunicationError: If the catalog cannot be reached
        """
        pass

    def get_title(self, book_id: str) -> str:
        """Shortcut for ``get_book(book_id).title``."""
        return self.get_book(book_id).title
