"""
Catalog queries.

Turns the public listing parameters into one SQL statement. Every filter
that is present narrows the result (they are AND-ed), and only
``Published`` books are ever listed.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import Float, cast, func
from sqlmodel import Session, select

from litverse.errors import ValidationError
from litverse.models.book import BOOK_FORMATS, Book, BookGenre
from litverse.utils.clock import utc_now
from litverse.utils.pagination import paginate

PUBLISHED = "Published"
NEW_RELEASE_WINDOW = timedelta(days=30)
SIMILAR_BOOKS_LIMIT = 5


def contains_pattern(text: str) -> str:
    """LIKE pattern matching ``text`` literally anywhere; use with escape="\\"."""
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _average_rating_expr():
    return cast(Book.rating_sum, Float) / func.nullif(Book.rating_count, 0)


SORT_FIELDS = {
    "title": lambda: Book.title,
    "author": lambda: Book.author,
    "price": lambda: Book.physical_price,
    "rating": _average_rating_expr,
    "created_at": lambda: Book.created_at,
    "createdAt": lambda: Book.created_at,
    "publication_date": lambda: Book.publication_date,
}


@dataclass
class CatalogQuery:
    page: int = 1
    limit: int = 12
    genre: Optional[str] = None
    search: Optional[str] = None
    sort_by: str = "title"
    sort_order: str = "asc"
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    format: Optional[str] = None


def published_books():
    return select(Book).where(Book.status == PUBLISHED)


def with_genre(query, genre: str):
    return query.where(
        Book.id.in_(select(BookGenre.book_id).where(BookGenre.genre == genre))
    )


def build_catalog_query(params: CatalogQuery):
    query = published_books()

    if params.genre:
        query = with_genre(query, params.genre)

    if params.search:
        like = contains_pattern(params.search)
        query = query.where(
            Book.title.ilike(like, escape="\\") |
            Book.author.ilike(like, escape="\\") |
            Book.description.ilike(like, escape="\\")
        )

    if params.min_price is not None:
        query = query.where(Book.physical_price >= params.min_price)

    if params.max_price is not None:
        query = query.where(Book.physical_price <= params.max_price)

    if params.format:
        if params.format not in BOOK_FORMATS:
            raise ValidationError(
                "Invalid format",
                details=[f"format must be one of {', '.join(BOOK_FORMATS)}"],
            )
        query = query.where(getattr(Book, f"{params.format}_available") == True)  # noqa: E712

    if params.sort_by not in SORT_FIELDS:
        raise ValidationError(
            "Invalid sort field",
            details=[f"sortBy must be one of {', '.join(sorted(SORT_FIELDS))}"],
        )
    if params.sort_order not in ("asc", "desc"):
        raise ValidationError("Invalid sort order", details=["sortOrder must be 'asc' or 'desc'"])

    column = SORT_FIELDS[params.sort_by]()
    ordering = column.desc() if params.sort_order == "desc" else column.asc()
    ordering = ordering.nulls_last()
    # id as tie breaker keeps pages stable
    return query.order_by(ordering, Book.id)


def list_books(session: Session, params: CatalogQuery):
    return paginate(
        session=session,
        query=build_catalog_query(params),
        page=params.page,
        limit=params.limit,
    )


def featured_books(session: Session, limit: int = 8):
    return session.exec(
        published_books().where(Book.is_featured == True).limit(limit)  # noqa: E712
    ).all()


def bestsellers(session: Session, limit: int = 10):
    return session.exec(
        published_books()
        .where(Book.is_bestseller == True)  # noqa: E712
        .order_by(_average_rating_expr().desc().nulls_last(), Book.id)
        .limit(limit)
    ).all()


def new_releases(session: Session, limit: int = 10, now: Optional[datetime] = None):
    since = (now or utc_now()) - NEW_RELEASE_WINDOW
    return session.exec(
        published_books()
        .where(Book.is_new_release == True, Book.created_at >= since)  # noqa: E712
        .order_by(Book.created_at.desc())
        .limit(limit)
    ).all()


def similar_books(session: Session, book: Book, limit: int = SIMILAR_BOOKS_LIMIT):
    genres = book.genre_names
    if not genres:
        return []
    return session.exec(
        published_books()
        .where(
            Book.id != book.id,
            Book.id.in_(select(BookGenre.book_id).where(BookGenre.genre.in_(genres))),
        )
        .order_by(_average_rating_expr().desc().nulls_last(), Book.id)
        .limit(limit)
    ).all()


def find_published(session: Session, title: str, author: Optional[str] = None) -> Optional[Book]:
    """Case-insensitive title (and author) match used to resolve AI suggestions."""
    query = published_books().where(Book.title.ilike(contains_pattern(title), escape="\\"))
    if author:
        query = query.where(Book.author.ilike(contains_pattern(author), escape="\\"))
    return session.exec(query.order_by(Book.id)).first()
