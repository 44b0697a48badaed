"""Domain exceptions.

Two families live here:

- ``BorrowingError`` subclasses are operation-fatal. They interrupt the
  orchestrator and are mapped to an HTTP status by the error handler.
- ``GatewayError`` and ``StoreError`` subclasses are raised by the
  infrastructure adapters. The orchestrator decides whether each one is
  fatal (translated into a ``BorrowingError``) or advisory (logged only).
"""
from typing import Dict, Optional


class BorrowingError(Exception):
    """Base class for errors surfaced to the caller of an operation."""

    status_code = 400
    default_message = "Borrowing operation failed"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, object]:
        return {"status": "error", "message": self.message}


class TransactionNotFoundError(BorrowingError):
    """No active loan matches the requested book/member pair."""

    status_code = 404

    def __init__(self, book_id: str, member_id: str):
        self.book_id = book_id
        self.member_id = member_id
        super().__init__(
            f"No active borrowing found for book {book_id} and member {member_id}"
        )

    def to_dict(self) -> Dict[str, object]:
        body = super().to_dict()
        body["bookId"] = self.book_id
        body["memberId"] = self.member_id
        return body


class ExternalServiceError(BorrowingError):
    """A remote lookup needed to admit a borrow could not be completed."""

    status_code = 400
    default_message = "Borrowing not allowed due to external service error"


class ActiveLoanExistsError(BorrowingError):
    """The member already holds an active loan for this book."""

    status_code = 409

    def __init__(self, book_id: str, member_id: str):
        self.book_id = book_id
        self.member_id = member_id
        super().__init__(
            f"Member {member_id} already has an active borrowing for book {book_id}"
        )


class InvalidTransitionError(BorrowingError):
    """A state transition was requested that the state machine forbids."""

    status_code = 409
    default_message = "Invalid borrowing state transition"


class RequestValidationError(BorrowingError):
    """Malformed request payload; carries one message per offending field."""

    status_code = 400
    default_message = "Invalid request"

    def __init__(self, errors: Dict[str, str], message: Optional[str] = None):
        self.errors = errors
        super().__init__(message)

    def to_dict(self) -> Dict[str, object]:
        body = super().to_dict()
        body["errors"] = self.errors
        return body


class StoreUnavailableError(BorrowingError):
    """The transaction store could not complete the authoritative write/read."""

    status_code = 503
    default_message = "Borrowing records are temporarily unavailable"


class StoreError(Exception):
    """Raised by transaction store implementations on backend failure."""


class ConcurrentModificationError(StoreError):
    """A compare-and-swap lost against a concurrent writer."""

    def __init__(self, transaction_id: str, expected_version: int):
        self.transaction_id = transaction_id
        self.expected_version = expected_version
        super().__init__(
            f"Transaction {transaction_id} changed (expected version {expected_version})"
        )


class DuplicateActiveLoanError(StoreError):
    """Conditional insert refused because an active loan already exists."""

    def __init__(self, book_id: str, member_id: str, existing_id: Optional[str] = None):
        self.book_id = book_id
        self.member_id = member_id
        self.existing_id = existing_id
        super().__init__(
            f"Active loan already exists for book {book_id} / member {member_id}"
        )


class GatewayError(Exception):
    """Base class for remote collaborator failures."""

    def __init__(self, service: str, message: str):
        self.service = service
        super().__init__(f"[{service}] {message}")


class RecordNotFoundError(GatewayError):
    """The collaborator answered, but has no record for the identifier."""


class FieldAbsentError(GatewayError):
    """The collaborator answered, but the expected field is missing or malformed."""

    def __init__(self, service: str, field: str):
        self.field = field
        super().__init__(service, f"response field '{field}' is absent")


class GatewayCommunicationError(GatewayError):
    """The collaborator could not be reached or answered with a server error."""
