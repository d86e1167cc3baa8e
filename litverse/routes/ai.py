from fastapi import APIRouter, Depends, Query
from sqlmodel import Session, select
from typing import Optional
from litverse.database import get_session
from litverse.errors import NotFoundError
from litverse.models.book import Book
from litverse.models.user import LibraryEntry, MoodEntry, User
from litverse.schemas.ai_schemas import CompanionContentRequest, ReadingJourneyRequest
from litverse.schemas.user_schemas import MoodUpdate
from litverse.services import catalog
from litverse.services.insights import BookBrief, InsightService, ReaderStats
from litverse.services.recommendations import (
    MAX_RECOMMENDATIONS,
    RECENT_BOOKS_IN_PROMPT,
    ReaderProfile,
    RecommendationService,
    build_provider,
)
from litverse.utils.token import get_current_user

router = APIRouter()

# provider is picked once from configuration
_service = RecommendationService(build_provider())
_insights = InsightService(_service.provider)


def get_recommendation_service() -> RecommendationService:
    return _service


def get_insight_service() -> InsightService:
    return _insights


def _catalog_resolver(session: Session):
    def resolve(title: str, author: Optional[str]):
        book = catalog.find_published(session, title, author)
        if not book:
            return None
        return {
            "bookId": book.id,
            "coverImage": book.cover_image,
            "price": book.lowest_price(),
        }
    return resolve


def _recent_completed(session: Session, user_id: int):
    books = session.exec(
        select(Book)
        .join(LibraryEntry, LibraryEntry.book_id == Book.id)
        .where(LibraryEntry.user_id == user_id, LibraryEntry.shelf == "completed")
        .order_by(LibraryEntry.added_at.desc())
        .limit(RECENT_BOOKS_IN_PROMPT)
    ).all()
    return [{"title": b.title, "author": b.author, "genres": b.genre_names} for b in books]


# ---------- RECOMMENDATIONS ----------
@router.get("/recommendations")
def recommendations(
    mood: Optional[str] = None,
    context: Optional[str] = None,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
    service: RecommendationService = Depends(get_recommendation_service)
):
    profile = ReaderProfile(
        favorite_genres=current_user.favorite_genre_list,
        recent_books=_recent_completed(session, current_user.id),
        reading_speed=current_user.reading_speed,
        mood=mood,
        context=context,
    )
    result = service.recommend(profile, _catalog_resolver(session))
    return result.to_dict()


@router.get("/mood-recommendations")
def mood_recommendations(
    mood: str = Query(..., min_length=1),
    limit: int = Query(MAX_RECOMMENDATIONS, ge=1, le=MAX_RECOMMENDATIONS),
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
    service: RecommendationService = Depends(get_recommendation_service)
):
    result = service.recommend_for_mood(mood, _catalog_resolver(session), limit)
    return {**result.to_dict(), "mood": mood}


def _book_brief(session: Session, book_id: int, reading_speed: int = 200) -> BookBrief:
    book = session.get(Book, book_id)
    if not book:
        raise NotFoundError("Book not found")
    return BookBrief(
        title=book.title,
        author=book.author,
        description=book.description,
        genres=book.genre_names,
        reading_minutes=book.reading_time_minutes(reading_speed),
    )


def _reader_stats(session: Session, user: User) -> ReaderStats:
    return ReaderStats(
        total_books_read=user.total_books_read,
        total_pages_read=user.total_pages_read,
        current_streak=user.current_streak,
        reading_speed=user.reading_speed,
        books_per_year_goal=user.books_per_year_goal,
        favorite_genres=user.favorite_genre_list,
        recent_books=_recent_completed(session, user.id),
    )


# ---------- INSIGHTS ----------
@router.post("/analyze-book/{book_id}")
def analyze_book(
    book_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
    service: InsightService = Depends(get_insight_service)
):
    book = _book_brief(session, book_id, current_user.reading_speed)
    return service.analyze_book(book).to_dict("analysis")


@router.post("/reading-journey")
def reading_journey(
    data: ReadingJourneyRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
    service: InsightService = Depends(get_insight_service)
):
    goal = data.goal.strip()
    result = service.reading_journey(_reader_stats(session, current_user), goal, _catalog_resolver(session))
    return {**result.to_dict("journey"), "goal": goal}


@router.post("/companion-content/{book_id}")
def companion_content(
    book_id: int,
    data: CompanionContentRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
    service: InsightService = Depends(get_insight_service)
):
    book = _book_brief(session, book_id)
    return service.companion_content(book, data.content_type).to_dict("content")


@router.get("/movie-potential/{book_id}")
def movie_potential(
    book_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
    service: InsightService = Depends(get_insight_service)
):
    book = _book_brief(session, book_id)
    return service.movie_potential(book).to_dict("prediction")


@router.get("/reading-insights")
def reading_insights(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
    service: InsightService = Depends(get_insight_service)
):
    return service.reading_insights(_reader_stats(session, current_user)).to_dict("insights")


# ---------- MOOD ----------
@router.post("/update-mood")
def update_mood(
    data: MoodUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    if data.book_id is not None and not session.get(Book, data.book_id):
        raise NotFoundError("Book not found")

    entry = MoodEntry(user_id=current_user.id, mood=data.mood.strip(), book_id=data.book_id)
    session.add(entry)
    session.commit()
    session.refresh(entry)

    history = session.exec(
        select(MoodEntry)
        .where(MoodEntry.user_id == current_user.id)
        .order_by(MoodEntry.created_at.desc(), MoodEntry.id.desc())
        .limit(10)
    ).all()

    return {
        "message": "Mood updated successfully",
        "mood": entry.mood,
        "bookId": entry.book_id,
        "history": [
            {"mood": m.mood, "bookId": m.book_id, "createdAt": m.created_at}
            for m in history
        ],
    }
