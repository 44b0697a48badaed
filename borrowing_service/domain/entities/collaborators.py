"""Typed responses returned by the remote collaborator gateways."""
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class BookInfo:
    """Catalog view of a book."""

    book_id: str
    title: str
    available: Optional[bool] = None

    def __post_init__(self):
        if not self.title:
            raise ValueError("title is required")


@dataclass(frozen=True)
class MemberContact:
    """Directory view of a member's contact details."""

    member_id: str
    email: str
    name: Optional[str] = None

    def __post_init__(self):
        if not self.email:
            raise ValueError("email is required")
