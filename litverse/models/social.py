from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime
from sqlalchemy import UniqueConstraint

from litverse.utils.clock import utc_now


class BookClub(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True)
    description: str
    is_public: bool = True
    creator_id: int = Field(foreign_key="user.id")
    current_book_id: Optional[int] = Field(default=None, foreign_key="book.id")
    next_meeting: Optional[datetime] = None
    created_at: datetime = Field(default_factory=utc_now)


class BookClubMember(SQLModel, table=True):
    __table_args__ = (UniqueConstraint("club_id", "user_id"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    club_id: int = Field(foreign_key="bookclub.id", index=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    joined_at: datetime = Field(default_factory=utc_now)


class Discussion(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    club_id: int = Field(foreign_key="bookclub.id", index=True)
    author_id: int = Field(foreign_key="user.id")
    topic: str
    content: str
    created_at: datetime = Field(default_factory=utc_now)
