import logging
from typing import Optional
from sqlalchemy import update
from sqlmodel import Session

from litverse.errors import NotFoundError, ValidationError
from litverse.models.book import Book

logger = logging.getLogger(__name__)


def rate_book(session: Session, book_id: int, rating: int, review: Optional[str] = None) -> Book:
    """
    Add one rating to a book.

    Sum and count are bumped in a single UPDATE so concurrent raters never
    overwrite each other; the average is derived when it is read.
    """
    if not 1 <= rating <= 5:
        raise ValidationError("Validation Error", details=["Rating must be between 1 and 5"])

    values = {
        "rating_sum": Book.rating_sum + rating,
        "rating_count": Book.rating_count + 1,
    }
    if review:
        values["review_count"] = Book.review_count + 1

    result = session.execute(
        update(Book).where(Book.id == book_id).values(**values)
    )
    if result.rowcount == 0:
        session.rollback()
        raise NotFoundError("Book not found")

    session.commit()

    book = session.get(Book, book_id)
    session.refresh(book)
    logger.info(f"Book {book_id} rated {rating} ({book.rating_count} ratings)")
    return book
