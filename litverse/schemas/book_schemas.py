from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime


class BookCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    slug: Optional[str] = None
    author: str = Field(..., min_length=1, max_length=100)
    author_bio: Optional[str] = None
    description: str
    long_description: Optional[str] = None
    genres: List[str] = []

    isbn: Optional[str] = None
    publisher: Optional[str] = None
    publication_date: Optional[datetime] = None
    pages: Optional[int] = Field(None, ge=0)
    word_count: Optional[int] = Field(None, ge=0)
    reading_level: Optional[str] = None
    complexity: Optional[int] = Field(None, ge=1, le=10)
    cover_image: Optional[str] = None

    physical_available: bool = True
    physical_price: float = Field(0.0, ge=0)
    physical_original_price: Optional[float] = Field(None, ge=0)
    physical_stock: int = Field(0, ge=0)
    ebook_available: bool = False
    ebook_price: float = Field(0.0, ge=0)
    audiobook_available: bool = False
    audiobook_price: float = Field(0.0, ge=0)

    status: str = "Published"
    is_featured: bool = False
    is_bestseller: bool = False
    is_new_release: bool = False


class RateRequest(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    review: Optional[str] = None


class BookRead(BaseModel):
    id: int
    title: str
    slug: str
    author: str
    description: str
    genres: List[str]
    cover_image: Optional[str]
    pages: Optional[int]
    formats: dict
    available_formats: List[str]
    in_stock: bool
    average_rating: float
    rating_count: int
    review_count: int
    status: str
    is_featured: bool
    is_bestseller: bool
    is_new_release: bool
    publication_date: Optional[datetime]
    created_at: datetime

    @classmethod
    def from_book(cls, book) -> "BookRead":
        return cls(
            id=book.id,
            title=book.title,
            slug=book.slug,
            author=book.author,
            description=book.description,
            genres=book.genre_names,
            cover_image=book.cover_image,
            pages=book.pages,
            formats={
                "physical": {
                    "available": book.physical_available,
                    "price": book.physical_price,
                    "original_price": book.physical_original_price,
                    "stock": book.physical_stock,
                },
                "ebook": {"available": book.ebook_available, "price": book.ebook_price},
                "audiobook": {"available": book.audiobook_available, "price": book.audiobook_price},
            },
            available_formats=book.available_formats(),
            in_stock=book.in_stock,
            average_rating=round(book.average_rating, 2),
            rating_count=book.rating_count,
            review_count=book.review_count,
            status=book.status,
            is_featured=book.is_featured,
            is_bestseller=book.is_bestseller,
            is_new_release=book.is_new_release,
            publication_date=book.publication_date,
            created_at=book.created_at,
        )


def serialize_books(books) -> List[dict]:
    return [BookRead.from_book(book).model_dump(mode="json") for book in books]
