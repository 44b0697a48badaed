import threading
from datetime import date, timedelta

import pytest

from borrowing_service.domain.entities.borrowing_transaction import TransactionStatus
from borrowing_service.domain.exceptions import (
    ActiveLoanExistsError,
    ConcurrentModificationError,
    ExternalServiceError,
    FieldAbsentError,
    GatewayCommunicationError,
    RequestValidationError,
    StoreError,
    StoreUnavailableError,
    TransactionNotFoundError,
)
from tests.conftest import TODAY


def test_borrow_creates_active_transaction(orchestrator, store):
    result = orchestrator.borrow_book("B1", "M1")

    tx = result.transaction
    assert tx.status is TransactionStatus.BORROWED
    assert tx.borrow_date == TODAY
    assert tx.return_date is None
    assert tx.book_title == "Clean Code"
    assert store.get(tx.transaction_id) is not None
    assert result.message == (
        "Book 'Clean Code' borrowed successfully. Please return it by 2024-03-15."
    )


def test_borrow_then_member_listing_includes_loan(orchestrator):
    orchestrator.borrow_book("B1", "M1")

    borrowed = orchestrator.get_member_borrowed_books("M1")

    assert [(tx.book_id, tx.status, tx.borrow_date) for tx in borrowed] == [
        ("B1", TransactionStatus.BORROWED, TODAY)
    ]


def test_borrow_sends_confirmation(orchestrator, notifier):
    result = orchestrator.borrow_book("B1", "M1")

    assert len(notifier.sent) == 1
    to, subject, body = notifier.sent[0]
    assert to == "m1@example.com"
    assert "borrowing confirmation" in subject
    assert "'Clean Code'" in body
    assert "2024-03-01" in body
    assert not result.degraded


def test_borrow_unknown_book_uses_identifier(orchestrator, notifier):
    result = orchestrator.borrow_book("B404", "M1")

    assert result.transaction.book_title == ""
    assert "'B404'" in result.message
    assert "'B404'" in notifier.sent[0][2]


def test_borrow_title_field_absent_is_not_fatal(orchestrator, catalog):
    catalog.error = FieldAbsentError("catalog", "title")

    result = orchestrator.borrow_book("B1", "M1")

    assert result.transaction.book_title == ""
    assert result.transaction.status is TransactionStatus.BORROWED


def test_borrow_unknown_member_skips_notification(orchestrator, notifier):
    result = orchestrator.borrow_book("B1", "M404")

    assert notifier.sent == []
    assert result.advisories[-1].skipped
    assert not result.degraded


def test_borrow_catalog_unreachable_fails_without_record(orchestrator, catalog, store):
    catalog.error = GatewayCommunicationError("catalog", "request timed out")

    with pytest.raises(ExternalServiceError) as excinfo:
        orchestrator.borrow_book("B1", "M1")

    assert excinfo.value.message == "Borrowing not allowed due to external service error"
    assert store.find_all() == []


def test_borrow_directory_unreachable_fails_without_record(orchestrator, directory, store, notifier):
    directory.error = GatewayCommunicationError("directory", "request failed")

    with pytest.raises(ExternalServiceError):
        orchestrator.borrow_book("B1", "M1")

    assert store.find_all() == []
    assert notifier.sent == []


def test_notification_failure_does_not_change_result(orchestrator, notifier, store):
    notifier.error = GatewayCommunicationError("notification", "request failed")

    result = orchestrator.borrow_book("B1", "M1")

    assert result.transaction.status is TransactionStatus.BORROWED
    assert store.get(result.transaction.transaction_id) is not None
    assert result.degraded
    assert result.advisories[-1].step == "notification"


def test_unexpected_notification_error_is_absorbed(orchestrator, notifier):
    notifier.error = RuntimeError("boom")

    result = orchestrator.borrow_book("B1", "M1")

    assert result.transaction.status is TransactionStatus.BORROWED
    assert result.advisories[-1].error == "boom"


def test_second_borrow_of_same_pair_is_refused(orchestrator, store):
    orchestrator.borrow_book("B1", "M1")

    with pytest.raises(ActiveLoanExistsError):
        orchestrator.borrow_book("B1", "M1")

    assert len(store.find_all()) == 1


def test_store_failure_on_borrow_is_fatal(orchestrator, store, monkeypatch):
    def broken(tx):
        raise StoreError("connection reset")

    monkeypatch.setattr(store, "create_if_no_active", broken)

    with pytest.raises(StoreUnavailableError):
        orchestrator.borrow_book("B1", "M1")


def test_return_without_active_loan_is_not_found(orchestrator, store):
    with pytest.raises(TransactionNotFoundError) as excinfo:
        orchestrator.return_book("M1", "B1")

    assert excinfo.value.book_id == "B1"
    assert excinfo.value.member_id == "M1"
    assert store.find_all() == []


def test_return_transitions_loan(orchestrator, clock):
    borrowed = orchestrator.borrow_book("B1", "M1").transaction
    clock.today = TODAY + timedelta(days=3)

    result = orchestrator.return_book("M1", "B1")

    assert result.transaction.transaction_id == borrowed.transaction_id
    assert result.transaction.status is TransactionStatus.RETURNED
    assert result.transaction.return_date == date(2024, 3, 4)
    assert result.message == "Book 'Clean Code' returned successfully on 2024-03-04."
    assert orchestrator.get_member_borrowed_books("M1") == []


def test_return_twice_fails_second_time(orchestrator, store):
    orchestrator.borrow_book("B1", "M1")
    orchestrator.return_book("M1", "B1")
    before = store.find_all()

    with pytest.raises(TransactionNotFoundError):
        orchestrator.return_book("M1", "B1")

    assert store.find_all() == before


def test_return_survives_catalog_and_notification_failures(orchestrator, catalog, notifier):
    orchestrator.borrow_book("B1", "M1")
    catalog.error = GatewayCommunicationError("catalog", "request timed out")
    notifier.error = GatewayCommunicationError("notification", "request failed")

    result = orchestrator.return_book("M1", "B1")

    assert result.transaction.status is TransactionStatus.RETURNED
    assert result.transaction.book_title == ""
    assert "'B1'" in result.message
    assert {a.step for a in result.advisories if not a.success} == {"title_lookup", "notification"}


def test_return_sends_confirmation(orchestrator, notifier):
    orchestrator.borrow_book("B2", "M2")
    notifier.sent.clear()

    orchestrator.return_book("M2", "B2")

    assert notifier.sent[0][0] == "m2@example.com"
    assert "return confirmation" in notifier.sent[0][1]


def test_return_losing_race_reports_not_found(orchestrator, store, monkeypatch):
    borrowed = orchestrator.borrow_book("B1", "M1").transaction

    def lost(tx, expected_version):
        raise ConcurrentModificationError(tx.transaction_id, expected_version)

    monkeypatch.setattr(store, "compare_and_swap", lost)

    with pytest.raises(TransactionNotFoundError):
        orchestrator.return_book("M1", "B1")

    assert store.get(borrowed.transaction_id).is_active


def test_reborrow_after_return_creates_new_transaction(orchestrator):
    first = orchestrator.borrow_book("B1", "M1").transaction
    orchestrator.return_book("M1", "B1")

    second = orchestrator.borrow_book("B1", "M1").transaction

    assert second.transaction_id != first.transaction_id
    all_borrows = orchestrator.get_all_borrows()
    assert [tx.status for tx in all_borrows] == [
        TransactionStatus.RETURNED,
        TransactionStatus.BORROWED,
    ]


def test_member_listing_is_empty_when_nothing_borrowed(orchestrator):
    assert orchestrator.get_member_borrowed_books("M1") == []


def test_member_listing_only_returns_that_members_active_loans(orchestrator):
    orchestrator.borrow_book("B1", "M1")
    orchestrator.borrow_book("B2", "M1")
    orchestrator.borrow_book("B1", "M2")
    orchestrator.return_book("M1", "B1")

    assert [tx.book_id for tx in orchestrator.get_member_borrowed_books("M1")] == ["B2"]


def test_all_borrows_pagination(orchestrator):
    for book_id in ("B1", "B2", "B3"):
        orchestrator.borrow_book(book_id, "M1")

    assert [tx.book_id for tx in orchestrator.get_all_borrows(limit=2)] == ["B1", "B2"]
    assert [tx.book_id for tx in orchestrator.get_all_borrows(offset=2)] == ["B3"]


def test_all_borrows_rejects_bad_pagination(orchestrator):
    with pytest.raises(RequestValidationError) as excinfo:
        orchestrator.get_all_borrows(limit=0, offset=-1)

    assert set(excinfo.value.errors) == {"limit", "offset"}


def test_concurrent_borrows_of_same_pair_admit_one(orchestrator, store):
    barrier = threading.Barrier(8)
    outcomes = []

    def attempt():
        barrier.wait()
        try:
            orchestrator.borrow_book("B1", "M1")
            outcomes.append("ok")
        except ActiveLoanExistsError:
            outcomes.append("refused")

    threads = [threading.Thread(target=attempt) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert outcomes.count("ok") == 1
    assert len(store.find_active_by_member("M1")) == 1


def test_concurrent_returns_of_same_loan_admit_one(orchestrator, store):
    orchestrator.borrow_book("B1", "M1")
    barrier = threading.Barrier(6)
    outcomes = []

    def attempt():
        barrier.wait()
        try:
            orchestrator.return_book("M1", "B1")
            outcomes.append("ok")
        except TransactionNotFoundError:
            outcomes.append("missing")

    threads = [threading.Thread(target=attempt) for _ in range(6)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert outcomes.count("ok") == 1
    assert store.find_all()[0].version == 2
