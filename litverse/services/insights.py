"""
Per-book and per-reader AI insights: book analysis, reading journeys,
companion content, adaptation potential and reading-habit insights.

Each insight is one JSON completion through the configured
``RecommendationProvider``. When no model is configured, or the model
fails or answers with the wrong shape, a fallback built from what the
catalog and the reader's own stats already say is served instead, and
``source`` tells the caller which one they got.
"""
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from litverse.errors import UpstreamUnavailableError
from litverse.services.recommendations import (
    FALLBACK_RECOMMENDATIONS,
    RecommendationProvider,
    Resolver,
    StaticFallbackProvider,
)

logger = logging.getLogger(__name__)

COMPANION_TYPES = ("discussion", "activities", "soundtrack", "recipes")
JOURNEY_LENGTH = 5

EXPLORE_GENRES = ("Literary Fiction", "Mystery", "Science Fiction", "Fantasy", "Biography", "History", "Poetry")


@dataclass
class BookBrief:
    title: str
    author: str
    description: str = ""
    genres: List[str] = field(default_factory=list)
    reading_minutes: Optional[int] = None


@dataclass
class ReaderStats:
    total_books_read: int = 0
    total_pages_read: int = 0
    current_streak: int = 0
    reading_speed: int = 200
    books_per_year_goal: int = 0
    favorite_genres: List[str] = field(default_factory=list)
    recent_books: List[dict] = field(default_factory=list)  # {title, author}


@dataclass
class InsightResult:
    payload: object
    source: str

    def to_dict(self, key: str) -> dict:
        return {key: self.payload, "source": self.source}


ANALYSIS_PROMPT = """
Analyze this book and provide detailed insights:

Title: {title}
Author: {author}
Description: {description}
Genres: {genres}

Please provide:
1. Overall sentiment analysis (Positive/Negative/Neutral/Mixed)
2. Key themes (3-5 themes with descriptions)
3. Character analysis (main characters with roles and relationships)
4. Reading level assessment
5. Estimated reading time for average reader
6. Key quotes (3-5 memorable quotes)
7. Discussion questions (5-7 questions for book clubs)

Return a JSON object with the keys: sentiment, themes, characters,
readingLevel, readingTime, quotes, discussionQuestions
"""

JOURNEY_PROMPT = """
Create a personalized reading journey for a reader who wants to {goal}.

Current preferences:
- Favorite genres: {genres}
- Reading speed: {speed} words per minute
- Completed books: {completed}

Create a {count}-book journey that:
1. Starts with something familiar but introduces new elements
2. Gradually expands horizons
3. Builds complexity and depth
4. Connects themes across books
5. Ends with a satisfying culmination

Return a JSON object {{"journey": [...]}} whose items have the keys:
title, author, reason, benefits, readingTime, order
"""

COMPANION_PROMPTS = {
    "discussion": 'Generate 10 thought-provoking discussion questions for "{title}" by {author}. '
                  "Include questions about themes, characters, plot, and personal connections.",
    "activities": 'Create 5 engaging activities related to "{title}" by {author}. These could be '
                  "creative writing, art projects, research tasks, or experiential activities.",
    "soundtrack": 'Suggest a playlist of 10 songs that would complement the mood and themes of "{title}" '
                  "by {author}. Include song titles and artists.",
    "recipes": 'If "{title}" by {author} mentions food or cooking, suggest 3 recipes inspired by the book. '
               "If not food-related, suggest 3 comfort food recipes that would pair well with reading this book.",
}

COMPANION_SUFFIX = '\n\nReturn a JSON object {"items": [...]} with one entry per suggestion.'

MOVIE_PROMPT = """
Analyze the movie adaptation potential of "{title}" by {author}.

Consider:
- Visual storytelling elements
- Character development
- Plot structure
- Market appeal
- Technical feasibility

Provide:
1. Adaptation potential score (1-10)
2. Recommended genre for film
3. Key challenges
4. Suggested director style
5. Casting suggestions for main characters
6. Estimated budget range

Return a JSON object with the keys: score, genre, challenges, directorStyle, casting, budget
"""

INSIGHTS_PROMPT = """
Analyze this reader's profile and provide personalized insights:

Reading Stats:
- Total books read: {books}
- Total pages read: {pages}
- Reading speed: {speed} words per minute
- Current streak: {streak} days

Favorite Genres: {genres}

Recent Books:
{recent}

Provide:
1. Reading personality type
2. Strengths and areas for growth
3. Genre exploration suggestions
4. Reading habit recommendations
5. Goal-setting advice

Return a JSON object with the keys: personalityType, strengths, growthAreas,
genreSuggestions, habitRecommendations, goalAdvice
"""


def _list(value) -> list:
    return value if isinstance(value, list) else []


def _hours(minutes: Optional[int]) -> Optional[str]:
    if not minutes:
        return None
    hours = max(1, round(minutes / 60))
    return f"about {hours} hour{'s' if hours != 1 else ''}"


# ---------- normalizers: reject shapes we cannot use ----------

def normalize_analysis(data: dict) -> dict:
    if not data.get("sentiment") or not isinstance(data.get("themes"), list):
        raise UpstreamUnavailableError("Book analysis is missing sentiment or themes")
    return {
        "sentiment": str(data["sentiment"]),
        "themes": data["themes"],
        "characters": _list(data.get("characters")),
        "readingLevel": data.get("readingLevel"),
        "readingTime": data.get("readingTime"),
        "quotes": _list(data.get("quotes")),
        "discussionQuestions": _list(data.get("discussionQuestions")),
    }


def normalize_journey(data: dict) -> List[dict]:
    steps = [s for s in _list(data.get("journey")) if isinstance(s, dict) and s.get("title")]
    if not steps:
        raise UpstreamUnavailableError("Reading journey has no steps")
    steps.sort(key=lambda s: s.get("order") if isinstance(s.get("order"), int) else len(steps))
    return [
        {
            "order": position,
            "title": str(step["title"]),
            "author": str(step.get("author") or ""),
            "reason": step.get("reason"),
            "benefits": step.get("benefits"),
            "readingTime": step.get("readingTime"),
        }
        for position, step in enumerate(steps[:JOURNEY_LENGTH], start=1)
    ]


def normalize_companion(data: dict) -> List:
    items = [i for i in _list(data.get("items")) if i]
    if not items:
        raise UpstreamUnavailableError("Companion content is empty")
    return items


def normalize_movie(data: dict) -> dict:
    try:
        score = int(data.get("score"))
    except (TypeError, ValueError) as e:
        raise UpstreamUnavailableError("Adaptation score is not a number") from e
    return {
        "score": max(1, min(score, 10)),
        "genre": data.get("genre"),
        "challenges": _list(data.get("challenges")),
        "directorStyle": data.get("directorStyle"),
        "casting": data.get("casting") or [],
        "budget": data.get("budget"),
    }


def normalize_insights(data: dict) -> dict:
    if not data.get("personalityType"):
        raise UpstreamUnavailableError("Reading insights are missing a personality type")
    return {
        "personalityType": str(data["personalityType"]),
        "strengths": _list(data.get("strengths")),
        "growthAreas": _list(data.get("growthAreas")),
        "genreSuggestions": _list(data.get("genreSuggestions")),
        "habitRecommendations": _list(data.get("habitRecommendations")),
        "goalAdvice": data.get("goalAdvice"),
    }


# ---------- fallbacks ----------

def fallback_analysis(book: BookBrief) -> dict:
    return {
        "sentiment": "Not analyzed",
        "themes": [{"name": genre, "description": f"Shelved under {genre}"} for genre in book.genres],
        "characters": [],
        "readingLevel": None,
        "readingTime": _hours(book.reading_minutes),
        "quotes": [],
        "discussionQuestions": fallback_companion(book, "discussion"),
    }


def fallback_journey() -> List[dict]:
    return [
        {
            "order": position,
            "title": rec["title"],
            "author": rec["author"],
            "reason": rec["reason"],
            "benefits": rec["moodMatch"],
            "readingTime": rec["estimatedReadingTime"],
        }
        for position, rec in enumerate(FALLBACK_RECOMMENDATIONS, start=1)
    ]


def fallback_companion(book: BookBrief, content_type: str) -> List[str]:
    title = book.title
    if content_type == "activities":
        return [
            f"Write a letter from one character of {title} to another",
            f"Sketch a map of the places {title} visits",
            f"Research the period or setting {title} is drawn from",
        ]
    if content_type == "soundtrack":
        return [
            f"Pick one song for the opening chapter of {title}",
            f"Pick one song for the ending of {title}",
            "Build the rest of the playlist around the mood in between",
        ]
    if content_type == "recipes":
        return ["Spiced hot chocolate", "Tomato soup with grilled cheese", "Shortbread with tea"]
    return [
        f"What did you expect {title} to be about, and how did that change?",
        f"Which character in {title} changed the most?",
        f"Which scene in {title} would you reread first?",
        f"What would you ask {book.author} about this book?",
        "Who would you recommend this book to, and why?",
    ]


def fallback_movie() -> dict:
    return {
        "score": None,
        "genre": None,
        "challenges": [],
        "directorStyle": None,
        "casting": [],
        "budget": None,
    }


def fallback_insights(stats: ReaderStats) -> dict:
    if stats.total_books_read == 0:
        personality = "Curious Beginner"
    elif stats.total_books_read < 10:
        personality = "Steady Explorer"
    else:
        personality = "Devoted Bookworm"

    strengths = []
    if stats.current_streak >= 7:
        strengths.append(f"Consistent habit: a {stats.current_streak}-day streak")
    if stats.total_pages_read >= 1000:
        strengths.append(f"Reads at volume: {stats.total_pages_read} pages so far")
    if len(stats.favorite_genres) >= 3:
        strengths.append("Broad taste across several genres")

    growth = []
    if stats.current_streak < 3:
        growth.append("Build a daily reading streak")
    if len(stats.favorite_genres) < 3:
        growth.append("Try a genre outside your favorites")

    favorites = {g.lower() for g in stats.favorite_genres}
    suggestions = [g for g in EXPLORE_GENRES if g.lower() not in favorites][:3]

    if stats.books_per_year_goal:
        per_month = -(-stats.books_per_year_goal // 12)
        goal = f"Your goal of {stats.books_per_year_goal} books a year is about {per_month} a month."
    else:
        goal = "Set a yearly reading goal to track your pace."

    return {
        "personalityType": personality,
        "strengths": strengths,
        "growthAreas": growth,
        "genreSuggestions": suggestions,
        "habitRecommendations": ["Read at the same time every day", "Keep your current book within reach"],
        "goalAdvice": goal,
    }


class InsightService:
    def __init__(self, provider: RecommendationProvider):
        self.provider = provider

    def analyze_book(self, book: BookBrief) -> InsightResult:
        prompt = ANALYSIS_PROMPT.format(
            title=book.title,
            author=book.author,
            description=book.description,
            genres=", ".join(book.genres) or "Not specified",
        )
        return self._ask(prompt, normalize_analysis, lambda: fallback_analysis(book), 1500, 0.5)

    def reading_journey(self, stats: ReaderStats, goal: str, resolver: Resolver) -> InsightResult:
        prompt = JOURNEY_PROMPT.format(
            goal=goal,
            genres=", ".join(stats.favorite_genres) or "Not specified",
            speed=stats.reading_speed,
            completed=stats.total_books_read,
            count=JOURNEY_LENGTH,
        )
        result = self._ask(prompt, normalize_journey, fallback_journey, 1200, 0.7)
        if result.source != "fallback":
            # unlike recommendations, steps missing from the catalog stay in the path
            for step in result.payload:
                step.update(resolver(step["title"], step["author"] or None) or {})
        return result

    def companion_content(self, book: BookBrief, content_type: str = "discussion") -> InsightResult:
        if content_type not in COMPANION_TYPES:
            content_type = "discussion"
        prompt = COMPANION_PROMPTS[content_type].format(title=book.title, author=book.author) + COMPANION_SUFFIX
        result = self._ask(prompt, normalize_companion, lambda: fallback_companion(book, content_type), 800, 0.7)
        result.payload = {"contentType": content_type, "items": result.payload}
        return result

    def movie_potential(self, book: BookBrief) -> InsightResult:
        prompt = MOVIE_PROMPT.format(title=book.title, author=book.author)
        return self._ask(prompt, normalize_movie, fallback_movie, 1000, 0.6)

    def reading_insights(self, stats: ReaderStats) -> InsightResult:
        recent = "\n".join(f'- "{b["title"]}" by {b["author"]}' for b in stats.recent_books) or "- none yet"
        prompt = INSIGHTS_PROMPT.format(
            books=stats.total_books_read,
            pages=stats.total_pages_read,
            speed=stats.reading_speed,
            streak=stats.current_streak,
            genres=", ".join(stats.favorite_genres) or "Not specified",
            recent=recent,
        )
        return self._ask(prompt, normalize_insights, lambda: fallback_insights(stats), 1200, 0.7)

    def _ask(
        self,
        prompt: str,
        normalize: Callable[[dict], object],
        fallback: Callable[[], object],
        max_tokens: int,
        temperature: float,
    ) -> InsightResult:
        if isinstance(self.provider, StaticFallbackProvider):
            return InsightResult(fallback(), "fallback")
        try:
            data = self.provider.ask_json(prompt, max_tokens=max_tokens, temperature=temperature)
            return InsightResult(normalize(data), self.provider.source)
        except UpstreamUnavailableError as e:
            logger.warning(f"Insight provider unavailable, serving fallback: {e.message}")
            return InsightResult(fallback(), "fallback")
