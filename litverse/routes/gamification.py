import logging
from fastapi import APIRouter, Depends, Query
from sqlmodel import Session, select
from litverse.database import get_session
from litverse.errors import ValidationError
from litverse.models.user import User, UserBadge
from litverse.schemas.user_schemas import (
    RedeemRequest,
    analytics_dict,
    badge_dict,
    points_dict,
    streaks_dict,
)
from litverse.services.badges import BADGE_BONUS_POINTS, BADGE_RULES, level_for_points
from litverse.services.reading import owned_badge_names
from litverse.utils.token import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter()

LEADERBOARD_FIELDS = {
    "points": User.total_points,
    "books": User.total_books_read,
    "pages": User.total_pages_read,
    "streak": User.longest_streak,
}


# ---------- ACHIEVEMENTS ----------
@router.get("/achievements")
def get_achievements(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    badges = session.exec(
        select(UserBadge).where(UserBadge.user_id == current_user.id).order_by(UserBadge.earned_at)
    ).all()

    return {
        "achievements": {
            "badges": [badge_dict(b) for b in badges],
            "points": points_dict(current_user),
            "streaks": streaks_dict(current_user),
        },
        "level": level_for_points(current_user.total_points),
        "analytics": analytics_dict(current_user),
    }


# ---------- LEADERBOARD ----------
@router.get("/leaderboard")
def leaderboard(
    type: str = "points",
    limit: int = Query(10, ge=1, le=100),
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    column = LEADERBOARD_FIELDS.get(type)
    if column is None:
        raise ValidationError(
            "Invalid leaderboard type",
            details=[f"type must be one of {', '.join(LEADERBOARD_FIELDS)}"],
        )

    users = session.exec(
        select(User)
        .where(User.is_active == True)  # noqa: E712
        .order_by(column.desc(), User.id)
        .limit(limit)
    ).all()

    return {
        "type": type,
        "leaderboard": [
            {
                "rank": position,
                "id": u.id,
                "username": u.username,
                "first_name": u.first_name,
                "last_name": u.last_name,
                "avatar": u.avatar,
                "points": u.total_points,
                "booksRead": u.total_books_read,
                "pagesRead": u.total_pages_read,
                "longestStreak": u.longest_streak,
                "level": level_for_points(u.total_points),
            }
            for position, u in enumerate(users, start=1)
        ],
    }


# ---------- STATS ----------
@router.get("/stats")
def get_stats(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    return {
        "stats": {
            "totalPoints": current_user.total_points,
            "readingPoints": current_user.reading_points,
            "socialPoints": current_user.social_points,
            "challengePoints": current_user.challenge_points,
            "redeemedPoints": current_user.redeemed_points,
            "level": level_for_points(current_user.total_points),
            "badges": len(owned_badge_names(session, current_user.id)),
            "currentStreak": current_user.current_streak,
            "longestStreak": current_user.longest_streak,
            "booksRead": current_user.total_books_read,
            "pagesRead": current_user.total_pages_read,
        }
    }


# ---------- BADGES ----------
@router.get("/badges")
def list_badges(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    owned = set(owned_badge_names(session, current_user.id))
    return {
        "badges": [
            {
                "id": rule.slug,
                "name": rule.name,
                "description": rule.description,
                "icon": rule.icon,
                "points": BADGE_BONUS_POINTS,
                "isEarned": rule.name in owned,
            }
            for rule in BADGE_RULES
        ]
    }


# ---------- REDEEM ----------
@router.post("/redeem-points")
def redeem_points(
    data: RedeemRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    current_user.apply_ledger(current_user.ledger().redeem(data.amount))

    session.add(current_user)
    session.commit()
    session.refresh(current_user)

    logger.info(f"User {current_user.id} redeemed {data.amount} points for '{data.reward}'")

    return {
        "message": "Points redeemed successfully",
        "redeemedAmount": data.amount,
        "reward": data.reward,
        "remainingPoints": current_user.total_points,
        "points": points_dict(current_user),
    }


# ---------- STREAKS ----------
@router.get("/streaks")
def get_streaks(current_user: User = Depends(get_current_user)):
    return {"streaks": streaks_dict(current_user)}
