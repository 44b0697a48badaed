"""In-process stand-ins for the remote collaborators."""
from typing import Dict, List, Optional, Tuple

from borrowing_service.domain.entities.collaborators import BookInfo, MemberContact
from borrowing_service.domain.exceptions import RecordNotFoundError
from borrowing_service.domain.interfaces.catalog_gateway import ICatalogGateway
from borrowing_service.domain.interfaces.directory_gateway import IDirectoryGateway
from borrowing_service.domain.interfaces.notification_gateway import INotificationGateway


class FakeCatalogGateway(ICatalogGateway):
    def __init__(self, titles: Optional[Dict[str, str]] = None):
        self.titles = dict(titles or {})
        self.error: Optional[Exception] = None
        self.calls: List[str] = []

    def get_book(self, book_id: str) -> BookInfo:
        self.calls.append(book_id)
        if self.error is not None:
            raise self.error
        if book_id not in self.titles:
            raise RecordNotFoundError("catalog", f"book {book_id} not found")
        return BookInfo(book_id=book_id, title=self.titles[book_id], available=True)


class FakeDirectoryGateway(IDirectoryGateway):
    def __init__(self, emails: Optional[Dict[str, str]] = None):
        self.emails = dict(emails or {})
        self.error: Optional[Exception] = None
        self.calls: List[str] = []

    def get_contact(self, member_id: str) -> MemberContact:
        self.calls.append(member_id)
        if self.error is not None:
            raise self.error
        if member_id not in self.emails:
            raise RecordNotFoundError("directory", f"member {member_id} not found")
        return MemberContact(member_id=member_id, email=self.emails[member_id])


class FakeNotificationGateway(INotificationGateway):
    def __init__(self):
        self.sent: List[Tuple[str, str, str]] = []
        self.error: Optional[Exception] = None

    def send(self, to: str, subject: str, body: str) -> None:
        if self.error is not None:
            raise self.error
        self.sent.append((to, subject, body))
