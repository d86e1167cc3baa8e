import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy import func
from sqlmodel import Session, select
from litverse.database import get_session
from litverse.errors import ForbiddenError, NotFoundError, ValidationError
from litverse.models.book import Book
from litverse.models.social import BookClub, BookClubMember, Discussion
from litverse.models.user import User
from litverse.schemas.social_schemas import BookClubCreate, DiscussionCreate
from litverse.utils.token import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter()

CLUB_CREATED_POINTS = 25
CLUB_JOINED_POINTS = 10
DISCUSSION_POINTS = 5


def _award_social(user: User, points: int):
    user.apply_ledger(user.ledger().award_social(points))


def _member_count(session: Session, club_id: int) -> int:
    return session.exec(
        select(func.count()).select_from(BookClubMember).where(BookClubMember.club_id == club_id)
    ).one()


def _is_member(session: Session, club_id: int, user_id: int) -> bool:
    return session.exec(
        select(BookClubMember).where(BookClubMember.club_id == club_id, BookClubMember.user_id == user_id)
    ).first() is not None


def _club_dict(session: Session, club: BookClub) -> dict:
    current_book = session.get(Book, club.current_book_id) if club.current_book_id else None
    return {
        "id": club.id,
        "name": club.name,
        "description": club.description,
        "isPublic": club.is_public,
        "creatorId": club.creator_id,
        "memberCount": _member_count(session, club.id),
        "currentBook": {
            "id": current_book.id,
            "title": current_book.title,
            "author": current_book.author,
        } if current_book else None,
        "nextMeeting": club.next_meeting,
        "createdAt": club.created_at,
    }


def _get_club_or_404(session: Session, club_id: int) -> BookClub:
    club = session.get(BookClub, club_id)
    if not club:
        raise NotFoundError("Book club not found")
    return club


# ---------- BOOK CLUBS ----------
@router.get("/book-clubs")
def list_book_clubs(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    clubs = session.exec(select(BookClub).order_by(BookClub.created_at.desc())).all()
    visible = [
        c for c in clubs
        if c.is_public or _is_member(session, c.id, current_user.id)
    ]
    return {"bookClubs": [_club_dict(session, c) for c in visible]}


@router.post("/book-clubs", status_code=status.HTTP_201_CREATED)
def create_book_club(
    data: BookClubCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    if data.current_book_id is not None and not session.get(Book, data.current_book_id):
        raise NotFoundError("Book not found")

    club = BookClub(**data.model_dump(), creator_id=current_user.id)
    session.add(club)
    session.flush()

    session.add(BookClubMember(club_id=club.id, user_id=current_user.id))
    _award_social(current_user, CLUB_CREATED_POINTS)
    session.add(current_user)

    session.commit()
    session.refresh(club)

    logger.info(f"User {current_user.id} created book club {club.id}")

    return {
        "message": "Book club created successfully",
        "bookClub": _club_dict(session, club),
    }


@router.get("/book-clubs/{club_id}")
def get_book_club(
    club_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    club = _get_club_or_404(session, club_id)
    if not club.is_public and not _is_member(session, club.id, current_user.id):
        raise ForbiddenError("This book club is private")

    discussions = session.exec(
        select(Discussion, User)
        .join(User, Discussion.author_id == User.id)
        .where(Discussion.club_id == club.id)
        .order_by(Discussion.created_at.desc())
    ).all()

    return {
        "bookClub": {
            **_club_dict(session, club),
            "isMember": _is_member(session, club.id, current_user.id),
            "discussions": [
                {
                    "id": d.id,
                    "topic": d.topic,
                    "content": d.content,
                    "author": author.username,
                    "createdAt": d.created_at,
                }
                for d, author in discussions
            ],
        }
    }


@router.post("/book-clubs/{club_id}/join")
def join_book_club(
    club_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    club = _get_club_or_404(session, club_id)

    if _is_member(session, club.id, current_user.id):
        raise ValidationError("Already a member of this book club")

    if not club.is_public:
        raise ForbiddenError("This book club is private")

    session.add(BookClubMember(club_id=club.id, user_id=current_user.id))
    _award_social(current_user, CLUB_JOINED_POINTS)
    session.add(current_user)
    session.commit()

    return {
        "message": "Successfully joined book club",
        "clubId": club.id,
        "memberCount": _member_count(session, club.id),
    }


# ---------- DISCUSSIONS ----------
@router.post("/discussions", status_code=status.HTTP_201_CREATED)
def create_discussion(
    data: DiscussionCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    club = _get_club_or_404(session, data.club_id)
    if not _is_member(session, club.id, current_user.id):
        raise ForbiddenError("Join the book club before posting")

    discussion = Discussion(
        club_id=club.id,
        author_id=current_user.id,
        topic=data.topic,
        content=data.content,
    )
    session.add(discussion)
    _award_social(current_user, DISCUSSION_POINTS)
    session.add(current_user)
    session.commit()
    session.refresh(discussion)

    return {
        "message": "Discussion created successfully",
        "discussion": {
            "id": discussion.id,
            "clubId": discussion.club_id,
            "topic": discussion.topic,
            "content": discussion.content,
            "authorId": discussion.author_id,
            "createdAt": discussion.created_at,
        },
        "pointsAwarded": DISCUSSION_POINTS,
    }
