from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, List
from datetime import datetime
from sqlalchemy import Column, ForeignKey, UniqueConstraint

from litverse.utils.clock import utc_now


BOOK_FORMATS = ("physical", "ebook", "audiobook")


class BookGenre(SQLModel, table=True):
    __table_args__ = (UniqueConstraint("book_id", "genre"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    book_id: int = Field(
        sa_column=Column(
            ForeignKey("book.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )
    )
    genre: str = Field(index=True)

    book: Optional["Book"] = Relationship(back_populates="genres")


class Book(SQLModel, table=True):
    #main info
    id: Optional[int] = Field(default=None, primary_key=True)
    title: str = Field(index=True)
    slug: str = Field(index=True, unique=True)
    description: str
    long_description: Optional[str] = None

    #author and meta
    author: str = Field(index=True)
    author_bio: Optional[str] = None
    isbn: Optional[str] = Field(default=None, unique=True)
    publisher: Optional[str] = None
    publication_date: Optional[datetime] = None
    pages: Optional[int] = None
    word_count: Optional[int] = None
    reading_level: Optional[str] = None
    complexity: Optional[int] = None

    cover_image: str = Field(default="/uploads/book_covers/placeholder.jpg")

    #formats
    physical_available: bool = True
    physical_price: float = 0.0
    physical_original_price: Optional[float] = None
    physical_stock: int = 0
    ebook_available: bool = False
    ebook_price: float = 0.0
    audiobook_available: bool = False
    audiobook_price: float = 0.0

    #community, average is derived from sum / count
    rating_sum: int = 0
    rating_count: int = 0
    review_count: int = 0

    status: str = Field(default="Published", index=True)
    is_featured: bool = False
    is_bestseller: bool = False
    is_new_release: bool = False

    #timestamps
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    genres: List["BookGenre"] = Relationship(
        back_populates="book",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )

    @property
    def genre_names(self) -> List[str]:
        return [g.genre for g in self.genres]

    @property
    def average_rating(self) -> float:
        if not self.rating_count:
            return 0.0
        return self.rating_sum / self.rating_count

    @property
    def in_stock(self) -> bool:
        return self.physical_available and self.physical_stock > 0

    def available_formats(self) -> List[str]:
        return [f for f in BOOK_FORMATS if getattr(self, f"{f}_available")]

    def price_for(self, format: str) -> float:
        return getattr(self, f"{format}_price")

    def lowest_price(self) -> float:
        prices = [self.price_for(f) for f in BOOK_FORMATS if self.price_for(f) > 0]
        return min(prices) if prices else 0.0

    def reading_time_minutes(self, reading_speed: int = 200) -> Optional[int]:
        if not self.word_count:
            return None
        return -(-self.word_count // reading_speed)
