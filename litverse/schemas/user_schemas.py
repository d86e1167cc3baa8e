from pydantic import BaseModel, EmailStr, Field, model_validator
from typing import Optional, List
from datetime import datetime

FORMAT_PREFERENCES = ("Physical", "E-Book", "Audiobook", "Mixed")


class UserRegister(BaseModel):
    username: str = Field(..., min_length=3, max_length=30)
    email: EmailStr
    password: str = Field(..., min_length=6)
    confirm_password: Optional[str] = None
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)

    @model_validator(mode="after")
    def validate_passwords(self):
        if self.confirm_password is not None and self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class Token(BaseModel):
    access_token: str
    token_type: str


class ProfileUpdate(BaseModel):
    first_name: Optional[str] = Field(None, min_length=1)
    last_name: Optional[str] = Field(None, min_length=1)
    avatar: Optional[str] = None
    favorite_genres: Optional[List[str]] = None
    reading_speed: Optional[int] = Field(None, ge=50, le=500)
    preferred_format: Optional[str] = None
    books_per_year_goal: Optional[int] = Field(None, ge=0)
    pages_per_day_goal: Optional[int] = Field(None, ge=0)

    @model_validator(mode="after")
    def validate_format(self):
        if self.preferred_format is not None and self.preferred_format not in FORMAT_PREFERENCES:
            raise ValueError(f"preferred_format must be one of {', '.join(FORMAT_PREFERENCES)}")
        return self


class LibraryRequest(BaseModel):
    book_id: int


class ReadingProgressRequest(BaseModel):
    book_id: int
    pages_read: int = Field(..., ge=0)
    time_spent: int = Field(0, ge=0)  # minutes
    read_at: Optional[datetime] = None


class RedeemRequest(BaseModel):
    amount: int = Field(..., ge=100)
    reward: str = Field(..., min_length=1)


class MoodUpdate(BaseModel):
    mood: str = Field(..., min_length=1)
    book_id: Optional[int] = None


def profile_dict(user) -> dict:
    return {
        "id": user.id,
        "username": user.username,
        "email": user.email,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "avatar": user.avatar,
        "role": user.role,
        "created_at": user.created_at,
        "reading_preferences": {
            "favorite_genres": user.favorite_genre_list,
            "reading_speed": user.reading_speed,
            "preferred_format": user.preferred_format,
            "books_per_year_goal": user.books_per_year_goal,
            "pages_per_day_goal": user.pages_per_day_goal,
        },
    }


def points_dict(user) -> dict:
    return {
        "total": user.total_points,
        "reading": user.reading_points,
        "social": user.social_points,
        "challenges": user.challenge_points,
        "redeemed": user.redeemed_points,
    }


def streaks_dict(user) -> dict:
    return {
        "current": user.current_streak,
        "longest": user.longest_streak,
        "last_reading_date": user.last_reading_date,
    }


def analytics_dict(user) -> dict:
    return {
        "total_books_read": user.total_books_read,
        "total_pages_read": user.total_pages_read,
        "total_reading_minutes": user.total_reading_minutes,
    }


def badge_dict(badge) -> dict:
    return {
        "name": badge.name,
        "description": badge.description,
        "icon": badge.icon,
        "earned_at": badge.earned_at,
    }
