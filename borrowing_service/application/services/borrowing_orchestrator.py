"""Borrowing orchestrator (Service Layer Pattern).

Owns the BORROWED -> RETURNED state machine and sequences the remote
collaborators around it:

- borrow: gating lookups (catalog, directory) -> atomic conditional insert
  -> best-effort notification
- return: lookup -> compare-and-swap transition -> best-effort title
  lookup and notification

The store write is the only step that decides success. Anything after it
is advisory: failures are logged, counted and reported in
``BorrowingResult.advisories``, never raised.
"""
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, List, Optional, Tuple, TypeVar

from borrowing_service.config.settings import Config
from borrowing_service.domain.entities.borrowing_transaction import BorrowingTransaction
from borrowing_service.domain.entities.collaborators import MemberContact
from borrowing_service.domain.exceptions import (
    ActiveLoanExistsError,
    ConcurrentModificationError,
    DuplicateActiveLoanError,
    ExternalServiceError,
    FieldAbsentError,
    GatewayCommunicationError,
    GatewayError,
    RecordNotFoundError,
    RequestValidationError,
    StoreError,
    StoreUnavailableError,
    TransactionNotFoundError,
)
from borrowing_service.domain.interfaces.catalog_gateway import ICatalogGateway
from borrowing_service.domain.interfaces.directory_gateway import IDirectoryGateway
from borrowing_service.domain.interfaces.notification_gateway import INotificationGateway
from borrowing_service.domain.interfaces.transaction_store import ITransactionStore
from borrowing_service.middleware.monitoring import (
    track_advisory_failure,
    track_gateway_call,
    track_operation,
)


logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class AdvisoryOutcome:
    """Outcome of one best-effort side effect."""
    step: str
    success: bool
    error: Optional[str] = None
    skipped: bool = False


@dataclass
class BorrowingResult:
    """Result of a committed borrow or return."""
    transaction: BorrowingTransaction
    message: str
    advisories: List[AdvisoryOutcome] = field(default_factory=list)

    @property
    def degraded(self) -> bool:
        """True if any best-effort step failed."""
        return any(not a.success and not a.skipped for a in self.advisories)


class BorrowingOrchestrator:
    """
    Coordinates borrowing transactions with the catalog, directory and
    notification services.

    Holds no per-request state; one instance serves concurrent requests.
    """

    def __init__(
        self,
        transaction_store: ITransactionStore,
        catalog_gateway: ICatalogGateway,
        directory_gateway: IDirectoryGateway,
        notification_gateway: INotificationGateway,
        loan_period_days: Optional[int] = None,
        clock: Optional[Callable[[], date]] = None,
    ):
        """
        Initialize orchestrator with dependencies (Dependency Injection).

        Args:
            transaction_store: Authoritative store for transaction records
            catalog_gateway: Book title lookup
            directory_gateway: Member email lookup
            notification_gateway: Outbound message delivery
            loan_period_days: Days until a loan is due (defaults to Config value)
            clock: Returns today's date (defaults to date.today)
        """
        self.transaction_store = transaction_store
        self.catalog_gateway = catalog_gateway
        self.directory_gateway = directory_gateway
        self.notification_gateway = notification_gateway
        self.loan_period_days = loan_period_days if loan_period_days is not None else Config.LOAN_PERIOD_DAYS
        self._clock = clock or date.today
        self._logger = logging.getLogger(__name__)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def borrow_book(self, book_id: str, member_id: str) -> BorrowingResult:
        """
        Record that a member borrowed a book.

        Catalog and directory are consulted before anything is written, so
        a communication failure leaves no record behind.

        Args:
            book_id: Book identifier
            member_id: Member identifier

        Returns:
            Result with the created transaction and a due-date message

        Raises:
            ExternalServiceError: If the catalog or directory cannot be reached
            ActiveLoanExistsError: If the member already holds this book
            StoreUnavailableError: If the record could not be written
        """
        book = self._gating_lookup("catalog", self.catalog_gateway.get_book, book_id)
        contact = self._gating_lookup("directory", self.directory_gateway.get_contact, member_id)

        if book is not None and book.available is False:
            self._logger.warning(f"Catalog reports book {book_id} as unavailable; recording borrow anyway")

        transaction = BorrowingTransaction.open(book_id, member_id, self._clock())
        try:
            self.transaction_store.create_if_no_active(transaction)
        except DuplicateActiveLoanError as e:
            track_operation("borrow", "duplicate")
            self._logger.info(f"Borrow refused: {e}")
            raise ActiveLoanExistsError(book_id, member_id) from e
        except StoreError as e:
            track_operation("borrow", "store_error")
            self._logger.error(f"Failed to persist borrow of book {book_id} by member {member_id}: {e}")
            raise StoreUnavailableError() from e

        track_operation("borrow", "success")
        self._logger.info(
            f"Book {book_id} borrowed by member {member_id} "
            f"(transaction {transaction.transaction_id})"
        )

        transaction = transaction.with_title(book.title if book else None)
        due_date = transaction.due_date(self.loan_period_days)
        label = _book_label(transaction)

        result = BorrowingResult(
            transaction=transaction,
            message=f"Book '{label}' borrowed successfully. Please return it by {due_date.isoformat()}.",
        )
        result.advisories.append(
            self._notify(
                contact,
                subject="Library: borrowing confirmation",
                body=(
                    f"You borrowed '{label}' on {transaction.borrow_date.isoformat()}.\n"
                    f"Please return it by {due_date.isoformat()}.\n"
                ),
            )
        )
        return result

    def return_book(self, member_id: str, book_id: str) -> BorrowingResult:
        """
        Record that a member returned a book.

        Args:
            member_id: Member identifier
            book_id: Book identifier

        Returns:
            Result with the RETURNED transaction and a confirmation message

        Raises:
            TransactionNotFoundError: If there is no active loan for the pair
            StoreUnavailableError: If the store could not be read or written
        """
        try:
            transaction = self.transaction_store.find_active_by_book_and_member(book_id, member_id)
        except StoreError as e:
            track_operation("return", "store_error")
            self._logger.error(f"Failed to look up loan of book {book_id} by member {member_id}: {e}")
            raise StoreUnavailableError() from e

        if transaction is None:
            track_operation("return", "not_found")
            raise TransactionNotFoundError(book_id, member_id)

        returned = transaction.mark_returned(self._clock())
        try:
            self.transaction_store.compare_and_swap(returned, expected_version=transaction.version)
        except ConcurrentModificationError as e:
            track_operation("return", "not_found")
            self._logger.info(f"Return lost a race: {e}")
            raise TransactionNotFoundError(book_id, member_id) from e
        except StoreError as e:
            track_operation("return", "store_error")
            self._logger.error(f"Failed to persist return of transaction {transaction.transaction_id}: {e}")
            raise StoreUnavailableError() from e

        track_operation("return", "success")
        self._logger.info(
            f"Book {book_id} returned by member {member_id} "
            f"(transaction {returned.transaction_id})"
        )

        advisories = []
        book, outcome = self._best_effort("title_lookup", self.catalog_gateway.get_book, book_id)
        advisories.append(outcome)
        returned = returned.with_title(book.title if book else None)
        label = _book_label(returned)

        contact, outcome = self._best_effort("contact_lookup", self.directory_gateway.get_contact, member_id)
        advisories.append(outcome)
        advisories.append(
            self._notify(
                contact,
                subject="Library: return confirmation",
                body=f"We received '{label}' on {returned.return_date.isoformat()}. Thank you!\n",
            )
        )

        return BorrowingResult(
            transaction=returned,
            message=f"Book '{label}' returned successfully on {returned.return_date.isoformat()}.",
            advisories=advisories,
        )

    def get_member_borrowed_books(self, member_id: str) -> List[BorrowingTransaction]:
        """
        List the member's active loans in insertion order.

        Args:
            member_id: Member identifier

        Returns:
            BORROWED transactions, empty if none
        """
        try:
            return self.transaction_store.find_active_by_member(member_id)
        except StoreError as e:
            self._logger.error(f"Failed to list loans for member {member_id}: {e}")
            raise StoreUnavailableError() from e

    def get_all_borrows(self, limit: Optional[int] = None, offset: int = 0) -> List[BorrowingTransaction]:
        """
        List every transaction in insertion order, optionally paginated.

        Args:
            limit: Page size (None for everything)
            offset: Records to skip

        Returns:
            Transactions regardless of status
        """
        errors = {}
        if offset < 0:
            errors["offset"] = "must be zero or positive"
        if limit is not None and limit <= 0:
            errors["limit"] = "must be positive"
        if errors:
            raise RequestValidationError(errors)

        try:
            return self.transaction_store.find_all(limit=limit, offset=offset)
        except StoreError as e:
            self._logger.error(f"Failed to list transactions: {e}")
            raise StoreUnavailableError() from e

    # ------------------------------------------------------------------
    # Collaborator calls
    # ------------------------------------------------------------------

    def _gating_lookup(self, service: str, call: Callable[[str], T], identifier: str) -> Optional[T]:
        """
        Lookup that admits or rejects a borrow.

        Missing data degrades to None; a communication failure is fatal.
        """
        try:
            value = call(identifier)
        except (RecordNotFoundError, FieldAbsentError) as e:
            track_gateway_call(service, "no_data")
            self._logger.warning(f"{service} has no usable data for {identifier}: {e}")
            return None
        except GatewayCommunicationError as e:
            track_gateway_call(service, "error")
            track_operation("borrow", "external_error")
            self._logger.error(f"{service} lookup for {identifier} failed: {e}")
            raise ExternalServiceError() from e
        track_gateway_call(service, "success")
        return value

    def _best_effort(
        self, step: str, call: Callable[[str], T], identifier: str
    ) -> Tuple[Optional[T], AdvisoryOutcome]:
        """Lookup whose failure is only logged."""
        try:
            value = call(identifier)
        except GatewayError as e:
            track_advisory_failure(step)
            self._logger.warning(f"{step} for {identifier} failed (ignored): {e}")
            return None, AdvisoryOutcome(step=step, success=False, error=str(e))
        except Exception as e:
            track_advisory_failure(step)
            self._logger.error(f"Unexpected error in {step} for {identifier}: {e}", exc_info=True)
            return None, AdvisoryOutcome(step=step, success=False, error=str(e))
        return value, AdvisoryOutcome(step=step, success=True)

    def _notify(self, contact: Optional[MemberContact], subject: str, body: str) -> AdvisoryOutcome:
        if contact is None:
            self._logger.info("No contact email known; notification skipped")
            return AdvisoryOutcome(step="notification", success=False, skipped=True)

        try:
            self.notification_gateway.send(contact.email, subject, body)
        except GatewayError as e:
            track_advisory_failure("notification")
            self._logger.warning(f"Notification to {contact.email} failed (ignored): {e}")
            return AdvisoryOutcome(step="notification", success=False, error=str(e))
        except Exception as e:
            track_advisory_failure("notification")
            self._logger.error(f"Unexpected error notifying {contact.email}: {e}", exc_info=True)
            return AdvisoryOutcome(step="notification", success=False, error=str(e))
        return AdvisoryOutcome(step="notification", success=True)


def _book_label(transaction: BorrowingTransaction) -> str:
    return transaction.book_title or transaction.book_id
