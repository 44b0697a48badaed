"""Validation of inbound borrowing request payloads."""
import re
from typing import Any, Dict, Optional, Tuple

from borrowing_service.domain.exceptions import RequestValidationError


class BorrowingRequestValidator:
    """Utility class for borrowing payload validation and normalization."""

    IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.:-]{0,63}$")

    @classmethod
    def normalize_identifier(cls, value: Any) -> str:
        """
        Normalize an identifier.

        Args:
            value: Raw value from the payload (string or integer)

        Returns:
            Identifier as a stripped string

        Raises:
            ValueError: If the value is not a usable identifier
        """
        if isinstance(value, bool) or value is None:
            raise ValueError("is required")
        if isinstance(value, int):
            value = str(value)
        if not isinstance(value, str):
            raise ValueError("must be a string")
        value = value.strip()
        if not value:
            raise ValueError("is required")
        if not cls.IDENTIFIER_PATTERN.match(value):
            raise ValueError("has an invalid format")
        return value

    @classmethod
    def parse_borrowing_request(cls, body: Optional[Dict[str, Any]]) -> Tuple[str, str]:
        """
        Extract ``bookId`` and ``memberId`` from a request body.

        Args:
            body: Decoded JSON body

        Returns:
            Tuple of (book_id, member_id)

        Raises:
            RequestValidationError: With one message per invalid field
        """
        if not isinstance(body, dict):
            raise RequestValidationError({"body": "must be a JSON object"})

        errors: Dict[str, str] = {}
        values: Dict[str, str] = {}
        for field in ("bookId", "memberId"):
            try:
                values[field] = cls.normalize_identifier(body.get(field))
            except ValueError as e:
                errors[field] = f"{field} {e}"

        if errors:
            raise RequestValidationError(errors)
        return values["bookId"], values["memberId"]

    @classmethod
    def normalize_member_path(cls, member_id: str) -> str:
        """Validate a member id taken from the URL path."""
        try:
            return cls.normalize_identifier(member_id)
        except ValueError as e:
            raise RequestValidationError({"memberId": f"memberId {e}"})

    @staticmethod
    def parse_pagination(args: Dict[str, Any]) -> Tuple[Optional[int], int]:
        """
        Read optional ``limit`` / ``offset`` query parameters.

        Returns:
            Tuple of (limit, offset)

        Raises:
            RequestValidationError: If either is not an integer
        """
        errors: Dict[str, str] = {}
        limit: Optional[int] = None
        offset = 0

        raw_limit = args.get("limit")
        if raw_limit not in (None, ""):
            try:
                limit = int(raw_limit)
            except (TypeError, ValueError):
                errors["limit"] = "limit must be an integer"

        raw_offset = args.get("offset")
        if raw_offset not in (None, ""):
            try:
                offset = int(raw_offset)
            except (TypeError, ValueError):
                errors["offset"] = "offset must be an integer"

        if errors:
            raise RequestValidationError(errors)
        return limit, offset
