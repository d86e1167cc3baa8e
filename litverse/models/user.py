from sqlmodel import SQLModel, Field
from typing import Optional, List
from datetime import date, datetime
from sqlalchemy import Column, ForeignKey, UniqueConstraint

from litverse.services.streaks import PointsLedger, ReadingStreakState
from litverse.utils.clock import utc_now


LIBRARY_SHELVES = ("owned", "wishlist", "reading", "completed")


class User(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(index=True, unique=True)
    email: str = Field(index=True, unique=True)
    password: str
    first_name: str
    last_name: str
    avatar: Optional[str] = None
    role: str = Field(default="user")
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utc_now)
    last_login: Optional[datetime] = None

    # reading preferences
    favorite_genres: Optional[str] = None  # comma separated
    reading_speed: int = 200  # words per minute
    preferred_format: str = "Mixed"
    books_per_year_goal: int = 12
    pages_per_day_goal: int = 30

    # streaks
    current_streak: int = 0
    longest_streak: int = 0
    last_reading_date: Optional[date] = None

    # points ledger
    total_points: int = Field(default=0, index=True)
    reading_points: int = 0
    social_points: int = 0
    challenge_points: int = 0
    redeemed_points: int = 0

    # analytics
    total_books_read: int = 0
    total_pages_read: int = 0
    total_reading_minutes: int = 0

    @property
    def favorite_genre_list(self) -> List[str]:
        if not self.favorite_genres:
            return []
        return [g.strip() for g in self.favorite_genres.split(",") if g.strip()]

    def streak_state(self) -> ReadingStreakState:
        return ReadingStreakState(
            current_streak_days=self.current_streak,
            longest_streak_days=self.longest_streak,
            last_reading_date=self.last_reading_date,
        )

    def apply_streak(self, state: ReadingStreakState):
        self.current_streak = state.current_streak_days
        self.longest_streak = state.longest_streak_days
        self.last_reading_date = state.last_reading_date

    def ledger(self) -> PointsLedger:
        return PointsLedger(
            total_points=self.total_points,
            reading_points=self.reading_points,
            social_points=self.social_points,
            challenge_points=self.challenge_points,
            redeemed_points=self.redeemed_points,
        )

    def apply_ledger(self, ledger: PointsLedger):
        self.total_points = ledger.total_points
        self.reading_points = ledger.reading_points
        self.social_points = ledger.social_points
        self.challenge_points = ledger.challenge_points
        self.redeemed_points = ledger.redeemed_points


class UserBadge(SQLModel, table=True):
    __table_args__ = (UniqueConstraint("user_id", "name"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    name: str
    description: str
    icon: str
    earned_at: datetime = Field(default_factory=utc_now)


class LibraryEntry(SQLModel, table=True):
    __table_args__ = (UniqueConstraint("user_id", "book_id"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    book_id: int = Field(
        sa_column=Column(
            ForeignKey("book.id", ondelete="CASCADE"),
            nullable=False
        )
    )
    shelf: str
    added_at: datetime = Field(default_factory=utc_now)


class Follow(SQLModel, table=True):
    __table_args__ = (UniqueConstraint("follower_id", "followed_id"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    follower_id: int = Field(foreign_key="user.id", index=True)
    followed_id: int = Field(foreign_key="user.id", index=True)
    created_at: datetime = Field(default_factory=utc_now)


class MoodEntry(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    mood: str
    book_id: Optional[int] = Field(default=None, foreign_key="book.id")
    created_at: datetime = Field(default_factory=utc_now)
