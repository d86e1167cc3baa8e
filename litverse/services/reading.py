import logging
from datetime import date, datetime
from typing import List, Optional, Union

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from litverse.errors import ConflictError, NotFoundError, ValidationError
from litverse.models.book import Book, BookGenre
from litverse.models.user import LIBRARY_SHELVES, LibraryEntry, User, UserBadge
from litverse.services.badges import BADGE_BONUS_POINTS, ReaderProgress, newly_earned
from litverse.services.streaks import advance_streak, record_reading
from litverse.utils.clock import utc_now

logger = logging.getLogger(__name__)


def completed_genre_count(session: Session, user_id: int) -> int:
    return session.exec(
        select(func.count(func.distinct(BookGenre.genre)))
        .select_from(BookGenre)
        .join(LibraryEntry, LibraryEntry.book_id == BookGenre.book_id)
        .where(LibraryEntry.user_id == user_id, LibraryEntry.shelf == "completed")
    ).one()


def owned_badge_names(session: Session, user_id: int) -> List[str]:
    return list(session.exec(
        select(UserBadge.name).where(UserBadge.user_id == user_id)
    ).all())


def award_badges(session: Session, user: User) -> List[UserBadge]:
    """
    Insert every badge whose threshold the user now meets and does not
    already hold. Safe to call repeatedly: held badges are skipped by name.
    """
    progress = ReaderProgress(
        books_completed=user.total_books_read,
        pages_read=user.total_pages_read,
        current_streak_days=user.current_streak,
        genres_completed=completed_genre_count(session, user.id),
    )

    earned = []
    ledger = user.ledger()
    for rule in newly_earned(progress, owned_badge_names(session, user.id)):
        badge = UserBadge(
            user_id=user.id,
            name=rule.name,
            description=rule.description,
            icon=rule.icon,
        )
        session.add(badge)
        ledger = ledger.award_challenge(BADGE_BONUS_POINTS)
        earned.append(badge)
        logger.info(f"User {user.id} earned badge '{rule.name}'")

    user.apply_ledger(ledger)
    return earned


def _commit(session: Session, user: User):
    try:
        session.commit()
    except IntegrityError:
        # another request inserted the same badge row first
        logger.warning(f"Concurrent progress update for user {user.id} rolled back")
        session.rollback()
        raise ConflictError(details=["progress was updated concurrently, retry the request"])


def record_progress(
    session: Session,
    user: User,
    pages_read: int,
    minutes_spent: int = 0,
    now: Optional[Union[date, datetime]] = None,
):
    if minutes_spent < 0:
        raise ValidationError("Time spent must not be negative")

    update = record_reading(user.streak_state(), user.ledger(), now or utc_now(), pages_read)

    user.apply_streak(update.streak)
    user.apply_ledger(update.ledger)
    user.total_pages_read += pages_read
    user.total_reading_minutes += minutes_spent

    badges = award_badges(session, user)

    session.add(user)
    _commit(session, user)
    session.refresh(user)
    for badge in badges:
        session.refresh(badge)

    return update.points_awarded, badges


def shelve_book(
    session: Session,
    user: User,
    book_id: int,
    shelf: str,
    now: Optional[Union[date, datetime]] = None,
):
    """
    Put a book on exactly one shelf. Completing a book counts it towards
    the analytics, advances the streak and re-checks badges.
    """
    if shelf not in LIBRARY_SHELVES:
        raise ValidationError("Invalid action", details=[f"shelf must be one of {', '.join(LIBRARY_SHELVES)}"])

    book = session.get(Book, book_id)
    if not book:
        raise NotFoundError("Book not found")

    entry = session.exec(
        select(LibraryEntry).where(LibraryEntry.user_id == user.id, LibraryEntry.book_id == book_id)
    ).first()

    already_completed = entry is not None and entry.shelf == "completed"

    # streak first, so a bad timestamp leaves the library untouched
    streak = None
    if shelf == "completed" and not already_completed:
        streak = advance_streak(user.streak_state(), now or utc_now())

    if entry:
        entry.shelf = shelf
        entry.added_at = utc_now()
    else:
        entry = LibraryEntry(user_id=user.id, book_id=book_id, shelf=shelf)
    session.add(entry)

    badges = []
    if streak is not None:
        user.apply_streak(streak)
        user.total_books_read += 1
        user.total_pages_read += book.pages or 0
        session.flush()
        badges = award_badges(session, user)

    session.add(user)
    _commit(session, user)
    session.refresh(user)
    return entry, badges


def unshelve_book(session: Session, user: User, shelf: str, book_id: int):
    if shelf not in LIBRARY_SHELVES:
        raise ValidationError("Invalid action", details=[f"shelf must be one of {', '.join(LIBRARY_SHELVES)}"])

    entry = session.exec(
        select(LibraryEntry).where(
            LibraryEntry.user_id == user.id,
            LibraryEntry.book_id == book_id,
            LibraryEntry.shelf == shelf,
        )
    ).first()
    if not entry:
        raise NotFoundError(f"Book not found in {shelf}")

    session.delete(entry)
    session.commit()


def library_for(session: Session, user_id: int) -> dict:
    rows = session.exec(
        select(LibraryEntry, Book)
        .join(Book, LibraryEntry.book_id == Book.id)
        .where(LibraryEntry.user_id == user_id)
        .order_by(LibraryEntry.added_at)
    ).all()

    library = {shelf: [] for shelf in LIBRARY_SHELVES}
    for entry, book in rows:
        library[entry.shelf].append({
            "id": book.id,
            "title": book.title,
            "author": book.author,
            "coverImage": book.cover_image,
            "genres": book.genre_names,
            "averageRating": book.average_rating,
        })
    return library
