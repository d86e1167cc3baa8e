from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class BookClubCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    is_public: bool = True
    current_book_id: Optional[int] = None
    next_meeting: Optional[datetime] = None


class DiscussionCreate(BaseModel):
    club_id: int
    topic: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
