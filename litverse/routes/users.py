from fastapi import APIRouter, BackgroundTasks, Depends
from fastapi.encoders import jsonable_encoder
from sqlmodel import Session, select
from datetime import timezone
from litverse.database import get_session
from litverse.errors import NotFoundError, ValidationError
from litverse.models.book import Book
from litverse.models.user import Follow, User, UserBadge
from litverse.realtime import hub, notify_achievements
from litverse.schemas.user_schemas import (
    LibraryRequest,
    ProfileUpdate,
    ReadingProgressRequest,
    analytics_dict,
    badge_dict,
    points_dict,
    profile_dict,
    streaks_dict,
)
from litverse.services.badges import level_for_points
from litverse.services.reading import library_for, record_progress, shelve_book, unshelve_book
from litverse.utils.clock import utc_now
from litverse.utils.token import get_current_user

router = APIRouter()


def _achievements(session: Session, user: User) -> dict:
    badges = session.exec(
        select(UserBadge).where(UserBadge.user_id == user.id).order_by(UserBadge.earned_at)
    ).all()
    return {
        "badges": [badge_dict(b) for b in badges],
        "points": points_dict(user),
        "level": level_for_points(user.total_points),
        "streaks": streaks_dict(user),
    }


def _notify(background_tasks: BackgroundTasks, user_id: int, badges):
    if badges:
        payload = jsonable_encoder([badge_dict(b) for b in badges])
        background_tasks.add_task(notify_achievements, hub, user_id, payload)


# -------- USER PROFILE --------

@router.get("/profile")
def get_profile(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    return {
        "user": {
            **profile_dict(current_user),
            "library": library_for(session, current_user.id),
        }
    }


@router.put("/profile")
def update_profile(
    data: ProfileUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    changes = data.model_dump(exclude_unset=True)

    if "favorite_genres" in changes:
        genres = changes.pop("favorite_genres") or []
        current_user.favorite_genres = ",".join(dict.fromkeys(g.strip() for g in genres if g.strip()))

    for field, value in changes.items():
        if value is not None:
            setattr(current_user, field, value)

    session.add(current_user)
    session.commit()
    session.refresh(current_user)

    return {
        "message": "Profile updated successfully",
        "user": {
            **profile_dict(current_user),
            "achievements": _achievements(session, current_user),
            "analytics": analytics_dict(current_user),
        },
    }


# -------- LIBRARY --------

@router.get("/library")
def get_library(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    return {"library": library_for(session, current_user.id)}


@router.post("/library/{action}")
def add_to_library(
    action: str,
    data: LibraryRequest,
    background_tasks: BackgroundTasks,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    _, badges = shelve_book(session, current_user, data.book_id, action)
    _notify(background_tasks, current_user.id, badges)

    return {
        "message": f"Book added to {action} successfully",
        "library": library_for(session, current_user.id),
        "newBadges": [badge_dict(b) for b in badges],
    }


@router.delete("/library/{action}/{book_id}")
def remove_from_library(
    action: str,
    book_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    unshelve_book(session, current_user, action, book_id)
    return {
        "message": f"Book removed from {action} successfully",
        "library": library_for(session, current_user.id),
    }


# -------- ACHIEVEMENTS & ANALYTICS --------

@router.get("/achievements")
def get_achievements(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    achievements = _achievements(session, current_user)
    return {
        "achievements": achievements,
        "level": achievements["level"],
        "analytics": analytics_dict(current_user),
    }


@router.get("/analytics")
def get_analytics(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    return {
        "analytics": analytics_dict(current_user),
        "readingPreferences": profile_dict(current_user)["reading_preferences"],
        "achievements": _achievements(session, current_user),
    }


@router.post("/reading-progress")
def update_reading_progress(
    data: ReadingProgressRequest,
    background_tasks: BackgroundTasks,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    if not session.get(Book, data.book_id):
        raise NotFoundError("Book not found")

    now = data.read_at
    if now is not None:
        # naive timestamps are taken as UTC
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        now = now.astimezone(timezone.utc)
        if now.date() > utc_now().date():
            raise ValidationError("Invalid reading date", details=["read_at cannot be in the future"])

    points, badges = record_progress(
        session,
        current_user,
        pages_read=data.pages_read,
        minutes_spent=data.time_spent,
        now=now,
    )
    _notify(background_tasks, current_user.id, badges)

    return {
        "message": "Reading progress updated successfully",
        "pointsAwarded": points,
        "newBadges": [badge_dict(b) for b in badges],
        "analytics": analytics_dict(current_user),
        "achievements": _achievements(session, current_user),
    }


# -------- SOCIAL --------

def _public_user(user: User) -> dict:
    return {
        "id": user.id,
        "username": user.username,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "avatar": user.avatar,
    }


@router.get("/social")
def get_social(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    followers = session.exec(
        select(User).join(Follow, Follow.follower_id == User.id).where(Follow.followed_id == current_user.id)
    ).all()
    following = session.exec(
        select(User).join(Follow, Follow.followed_id == User.id).where(Follow.follower_id == current_user.id)
    ).all()

    return {
        "followers": [_public_user(u) for u in followers],
        "following": [_public_user(u) for u in following],
    }


@router.post("/social/follow/{user_id}")
def toggle_follow(
    user_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    if user_id == current_user.id:
        raise ValidationError("Cannot follow yourself")

    if not session.get(User, user_id):
        raise NotFoundError("User not found")

    existing = session.exec(
        select(Follow).where(Follow.follower_id == current_user.id, Follow.followed_id == user_id)
    ).first()

    if existing:
        session.delete(existing)
    else:
        session.add(Follow(follower_id=current_user.id, followed_id=user_id))
    session.commit()

    return {
        "message": "Unfollowed successfully" if existing else "Followed successfully",
        "isFollowing": existing is None,
    }
