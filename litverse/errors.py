"""
Domain error taxonomy.

Every error carries the HTTP status it maps to at the API boundary; the
handlers in ``litverse.main`` turn them into the uniform
``{error, details, timestamp, path}`` envelope.
"""
from typing import Any, List, Optional


class LitVerseError(Exception):
    status_code = 500
    default_message = "Internal Server Error"

    def __init__(self, message: Optional[str] = None, details: Optional[List[Any]] = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class ValidationError(LitVerseError):
    status_code = 400
    default_message = "Validation Error"


class NotFoundError(LitVerseError):
    status_code = 404
    default_message = "Resource not found"


class AuthError(LitVerseError):
    status_code = 401
    default_message = "Could not validate credentials"


class ForbiddenError(LitVerseError):
    status_code = 403
    default_message = "Access denied"


class ConflictError(LitVerseError):
    status_code = 400
    default_message = "Duplicate field value"


class UnavailableItemError(LitVerseError):
    """Checkout attempted with one or more out-of-stock lines."""

    status_code = 409
    default_message = "Some items in your cart are unavailable"

    def __init__(self, book_ids: List[int], message: Optional[str] = None):
        self.book_ids = list(book_ids)
        super().__init__(
            message,
            details=[f"Book {book_id} is out of stock" for book_id in self.book_ids],
        )


class InvalidCouponError(LitVerseError):
    status_code = 400
    default_message = "Invalid coupon code"

    def __init__(self, code: str):
        self.code = code
        super().__init__(details=[f"Unknown coupon '{code}'"])


class InvalidTimestampError(LitVerseError):
    """Reading activity dated before the last recorded reading day."""

    status_code = 400
    default_message = "Reading activity is older than the last recorded reading date"


class UpstreamUnavailableError(LitVerseError):
    status_code = 503
    default_message = "Recommendation service unavailable"
