from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session, select
from typing import Optional
from litverse.database import get_session
from litverse.errors import ConflictError, NotFoundError
from litverse.models.book import Book, BookGenre
from litverse.models.user import User
from litverse.schemas.book_schemas import BookCreate, BookRead, RateRequest, serialize_books
from litverse.services import catalog
from litverse.services.ratings import rate_book
from litverse.utils.token import get_current_user, require_admin
from slugify import slugify

router = APIRouter()


def _get_book_or_404(session: Session, book_id: int) -> Book:
    book = session.get(Book, book_id)
    if not book:
        raise NotFoundError("Book not found")
    return book


# ---------- LIST BOOKS ----------
@router.get("/", summary="List books with filtering and pagination")
def list_books(
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=100),
    genre: Optional[str] = None,
    search: Optional[str] = None,
    sort_by: str = Query("title", alias="sortBy"),
    sort_order: str = Query("asc", alias="sortOrder"),
    min_price: Optional[float] = Query(None, alias="minPrice", ge=0),
    max_price: Optional[float] = Query(None, alias="maxPrice", ge=0),
    format: Optional[str] = None,
    session: Session = Depends(get_session)
):
    params = catalog.CatalogQuery(
        page=page,
        limit=limit,
        genre=genre,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
        min_price=min_price,
        max_price=max_price,
        format=format,
    )
    books, pagination = catalog.list_books(session, params)

    return {
        "books": serialize_books(books),
        "pagination": pagination,
    }


@router.get("/featured")
def featured_books(session: Session = Depends(get_session)):
    return {"books": serialize_books(catalog.featured_books(session))}


@router.get("/bestsellers")
def bestsellers(session: Session = Depends(get_session)):
    return {"books": serialize_books(catalog.bestsellers(session))}


@router.get("/new-releases")
def new_releases(session: Session = Depends(get_session)):
    return {"books": serialize_books(catalog.new_releases(session))}


# ---------- SEARCH ----------
@router.get("/search/{query}", summary="Search books by title, author or description")
def search_books(
    query: str,
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=100),
    session: Session = Depends(get_session)
):
    books, pagination = catalog.list_books(
        session, catalog.CatalogQuery(page=page, limit=limit, search=query)
    )
    return {"books": serialize_books(books), "query": query, "pagination": pagination}


@router.get("/genre/{genre}", summary="List books in a genre, best rated first")
def books_by_genre(
    genre: str,
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=100),
    session: Session = Depends(get_session)
):
    books, pagination = catalog.list_books(
        session,
        catalog.CatalogQuery(page=page, limit=limit, genre=genre, sort_by="rating", sort_order="desc"),
    )
    return {"books": serialize_books(books), "genre": genre, "pagination": pagination}


# ---------- BOOK DETAIL ----------
@router.get("/{book_id}")
def get_book(book_id: int, session: Session = Depends(get_session)):
    book = _get_book_or_404(session, book_id)
    return {
        "book": BookRead.from_book(book).model_dump(mode="json"),
        "similarBooks": serialize_books(catalog.similar_books(session, book)),
    }


@router.get("/{book_id}/stats")
def book_stats(book_id: int, session: Session = Depends(get_session)):
    book = _get_book_or_404(session, book_id)
    return {
        "stats": {
            "totalRatings": book.rating_count,
            "averageRating": round(book.average_rating, 2),
            "totalReviews": book.review_count,
            "formats": {
                "physical": book.physical_available,
                "ebook": book.ebook_available,
                "audiobook": book.audiobook_available,
            },
            "readingTime": book.reading_time_minutes(),
            "complexity": book.complexity,
            "readingLevel": book.reading_level,
        }
    }


# ---------- RATE ----------
@router.post("/{book_id}/rate")
def rate(
    book_id: int,
    data: RateRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    book = rate_book(session, book_id, data.rating, data.review)
    return {
        "message": "Rating submitted successfully",
        "newAverageRating": round(book.average_rating, 2),
        "totalRatings": book.rating_count,
    }


# ---------- ADMIN CREATE ----------
@router.post("/", status_code=status.HTTP_201_CREATED)
def create_book(
    data: BookCreate,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin)
):
    slug = data.slug or slugify(data.title)
    if session.exec(select(Book).where(Book.slug == slug)).first():
        raise ConflictError(details=["slug already exists"])
    if data.isbn and session.exec(select(Book).where(Book.isbn == data.isbn)).first():
        raise ConflictError(details=["isbn already exists"])

    fields = data.model_dump(exclude={"genres", "slug", "cover_image"})
    book = Book(slug=slug, **fields)
    if data.cover_image:
        book.cover_image = data.cover_image
    book.genres = [BookGenre(genre=g) for g in dict.fromkeys(data.genres)]

    session.add(book)
    session.commit()
    session.refresh(book)

    return {"message": "Book created", "book": BookRead.from_book(book).model_dump(mode="json")}
