"""Borrowing API endpoints."""
import logging

from flask import Blueprint, request, jsonify, current_app

from borrowing_service.application.services.borrowing_orchestrator import (
    BorrowingOrchestrator,
    BorrowingResult,
)
from borrowing_service.middleware.monitoring import track_request
from borrowing_service.utils.request_validator import BorrowingRequestValidator


borrowings_blueprint = Blueprint("borrowings", __name__, url_prefix="/borrowings")
_logger = logging.getLogger(__name__)


def _get_orchestrator() -> BorrowingOrchestrator:
    container = current_app.config.get('service_container')
    if not container:
        _logger.warning("Service container not in app.config, creating new instance")
        from borrowing_service.infrastructure.service_container import ServiceContainer
        container = ServiceContainer()
        current_app.config['service_container'] = container
    return container.get_orchestrator()


def _result_response(result: BorrowingResult, loan_period_days: int):
    return jsonify({
        "status": "success",
        "message": result.message,
        "transaction": result.transaction.to_dict(loan_period_days),
    }), 200


@borrowings_blueprint.route("/borrow", methods=["POST"])
@track_request("borrow")
def borrow_book():
    """
    Record a new loan.

    Expected payload:
    {
        "bookId": "B1",
        "memberId": "M1"
    }

    Returns:
        JSON response with the transaction and a due-date message
    """
    book_id, member_id = BorrowingRequestValidator.parse_borrowing_request(
        request.get_json(silent=True)
    )
    _logger.info(f"Borrow request: book={book_id}, member={member_id}")

    orchestrator = _get_orchestrator()
    result = orchestrator.borrow_book(book_id, member_id)
    return _result_response(result, orchestrator.loan_period_days)


@borrowings_blueprint.route("/return", methods=["PUT"])
@track_request("return")
def return_book():
    """
    Close an active loan.

    Expected payload:
    {
        "bookId": "B1",
        "memberId": "M1"
    }

    Returns:
        JSON response with the returned transaction and a confirmation message
    """
    book_id, member_id = BorrowingRequestValidator.parse_borrowing_request(
        request.get_json(silent=True)
    )
    _logger.info(f"Return request: book={book_id}, member={member_id}")

    orchestrator = _get_orchestrator()
    result = orchestrator.return_book(member_id, book_id)
    return _result_response(result, orchestrator.loan_period_days)


@borrowings_blueprint.route("/member/<member_id>", methods=["GET"])
@track_request("member_borrowings")
def member_borrowings(member_id: str):
    """List the member's active loans."""
    member_id = BorrowingRequestValidator.normalize_member_path(member_id)
    orchestrator = _get_orchestrator()
    transactions = orchestrator.get_member_borrowed_books(member_id)
    return jsonify({
        "status": "success",
        "data": [tx.to_dict(orchestrator.loan_period_days) for tx in transactions],
    }), 200


@borrowings_blueprint.route("/allborrow", methods=["GET"])
@track_request("all_borrowings")
def all_borrowings():
    """
    List every transaction.

    Optional query parameters ``limit`` and ``offset`` page through the list.
    """
    limit, offset = BorrowingRequestValidator.parse_pagination(request.args)
    orchestrator = _get_orchestrator()
    transactions = orchestrator.get_all_borrows(limit=limit, offset=offset)
    return jsonify({
        "status": "success",
        "count": len(transactions),
        "offset": offset,
        "data": [tx.to_dict(orchestrator.loan_period_days) for tx in transactions],
    }), 200
