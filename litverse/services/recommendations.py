"""
Book recommendations.

Two providers sit behind one interface: ``LLMBackedProvider`` asks an
OpenAI chat model for suggestions, ``StaticFallbackProvider`` returns a
fixed list. ``build_provider`` picks one from configuration once, and
``RecommendationService`` falls back to the static list whenever the model
call fails, times out or returns something that is not the JSON we asked
for. Read-style recommendation requests never fail because of the
upstream.
"""
import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from openai import OpenAI, OpenAIError

from litverse.config import settings
from litverse.errors import UpstreamUnavailableError

logger = logging.getLogger(__name__)

MAX_RECOMMENDATIONS = 5
RECENT_BOOKS_IN_PROMPT = 5


@dataclass
class ReaderProfile:
    favorite_genres: List[str] = field(default_factory=list)
    recent_books: List[dict] = field(default_factory=list)  # {title, author, genres}
    reading_speed: int = 200
    mood: Optional[str] = None
    context: Optional[str] = None


@dataclass
class RecommendationResult:
    recommendations: List[dict]
    source: str
    unresolved_count: int = 0

    def to_dict(self):
        return {
            "recommendations": self.recommendations,
            "source": self.source,
            "unresolvedCount": self.unresolved_count,
        }


FALLBACK_RECOMMENDATIONS = [
    {
        "title": "The Great Gatsby",
        "author": "F. Scott Fitzgerald",
        "reason": "Classic literature that matches your reading preferences",
        "estimatedReadingTime": "4-5 hours",
        "moodMatch": "Thoughtful and reflective",
    },
    {
        "title": "1984",
        "author": "George Orwell",
        "reason": "Dystopian fiction that challenges your thinking",
        "estimatedReadingTime": "5-6 hours",
        "moodMatch": "Intense and thought-provoking",
    },
]


PROFILE_PROMPT = """
As a literary expert, recommend {count} books for a reader with the following profile:

Favorite Genres: {genres}
Reading Speed: {speed} words per minute
Current Mood: {mood}
Context: {context}

Recently Read Books:
{recent}

Please recommend {count} diverse books that would appeal to this reader. For each book, provide:
1. Title and Author
2. Brief reason for recommendation
3. Expected reading time
4. Mood match (if mood was specified)

Return a JSON object {{"recommendations": [...]}} whose items have the keys:
title, author, reason, estimatedReadingTime, moodMatch
"""

MOOD_PROMPT = """
Recommend {count} books that match the mood: "{mood}"

Consider:
- Books that evoke or complement this mood
- Different genres that can express this mood
- Both uplifting and contemplative options

Return a JSON object {{"recommendations": [...]}} whose items have the keys:
title, author, reason, estimatedReadingTime, moodMatch
"""


def build_profile_prompt(profile: ReaderProfile, count: int = MAX_RECOMMENDATIONS) -> str:
    recent = "\n".join(
        f'- "{book["title"]}" by {book["author"]} ({", ".join(book.get("genres") or [])})'
        for book in profile.recent_books[-RECENT_BOOKS_IN_PROMPT:]
    ) or "- none yet"
    return PROFILE_PROMPT.format(
        count=count,
        genres=", ".join(profile.favorite_genres) or "Not specified",
        speed=profile.reading_speed,
        mood=profile.mood or "Not specified",
        context=profile.context or "General reading",
        recent=recent,
    )


def build_mood_prompt(mood: str, count: int = MAX_RECOMMENDATIONS) -> str:
    return MOOD_PROMPT.format(mood=mood, count=count)


def parse_recommendations(content: Optional[str]) -> List[dict]:
    """Accept either a bare JSON array or ``{"recommendations": [...]}``."""
    try:
        data = json.loads(content or "")
    except json.JSONDecodeError as e:
        raise UpstreamUnavailableError("Recommendation service returned invalid JSON") from e

    if isinstance(data, dict):
        data = data.get("recommendations")
    if not isinstance(data, list):
        raise UpstreamUnavailableError("Recommendation service returned an unexpected shape")

    parsed = []
    for item in data:
        if not isinstance(item, dict) or not item.get("title"):
            continue
        parsed.append({
            "title": str(item["title"]),
            "author": str(item.get("author") or ""),
            "reason": str(item.get("reason") or ""),
            "estimatedReadingTime": item.get("estimatedReadingTime") or item.get("readingTime"),
            "moodMatch": item.get("moodMatch"),
        })
    return parsed


class RecommendationProvider(ABC):
    source = "unknown"

    @abstractmethod
    def for_profile(self, profile: ReaderProfile, limit: int = MAX_RECOMMENDATIONS) -> List[dict]:
        ...

    @abstractmethod
    def for_mood(self, mood: str, limit: int = MAX_RECOMMENDATIONS) -> List[dict]:
        ...

    def ask_json(self, prompt: str, max_tokens: int = 1000, temperature: Optional[float] = None) -> dict:
        """Free-form JSON completion. Providers without a model cannot answer."""
        raise UpstreamUnavailableError("No language model configured")


class StaticFallbackProvider(RecommendationProvider):
    source = "fallback"

    def for_profile(self, profile, limit=MAX_RECOMMENDATIONS):
        return [dict(rec) for rec in FALLBACK_RECOMMENDATIONS[:limit]]

    def for_mood(self, mood, limit=MAX_RECOMMENDATIONS):
        return [dict(rec) for rec in FALLBACK_RECOMMENDATIONS[:limit]]


class LLMBackedProvider(RecommendationProvider):
    source = "llm"

    def __init__(self, client, model: str = "gpt-4o-mini", temperature: float = 0.7):
        self.client = client
        self.model = model
        self.temperature = temperature

    def for_profile(self, profile, limit=MAX_RECOMMENDATIONS):
        return self._complete(build_profile_prompt(profile, limit))[:limit]

    def for_mood(self, mood, limit=MAX_RECOMMENDATIONS):
        return self._complete(build_mood_prompt(mood, limit))[:limit]

    def ask_json(self, prompt, max_tokens=1000, temperature=None):
        content = self._chat(prompt, max_tokens, temperature)
        try:
            data = json.loads(content or "")
        except json.JSONDecodeError as e:
            raise UpstreamUnavailableError("Language model returned invalid JSON") from e
        if not isinstance(data, dict):
            raise UpstreamUnavailableError("Language model returned an unexpected shape")
        return data

    def _complete(self, prompt: str) -> List[dict]:
        return parse_recommendations(self._chat(prompt))

    def _chat(self, prompt: str, max_tokens: int = 1000, temperature: Optional[float] = None) -> Optional[str]:
        try:
            completion = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                response_format={"type": "json_object"},
                temperature=self.temperature if temperature is None else temperature,
                max_tokens=max_tokens,
            )
            return completion.choices[0].message.content
        except OpenAIError as e:
            raise UpstreamUnavailableError(f"Recommendation service error: {e}") from e
        except (AttributeError, IndexError) as e:
            raise UpstreamUnavailableError("Recommendation service returned no choices") from e


def build_provider(config=settings) -> RecommendationProvider:
    if not config.ai_enabled:
        logger.info("OPENAI_API_KEY not configured, using static recommendations")
        return StaticFallbackProvider()
    client = OpenAI(api_key=config.openai_api_key, timeout=config.ai_timeout_seconds, max_retries=0)
    return LLMBackedProvider(client, model=config.openai_model)


Resolver = Callable[[str, Optional[str]], Optional[dict]]


class RecommendationService:
    """
    Façade used by the routes.

    ``resolver`` maps a suggested (title, author) to catalog fields
    (``bookId``, ``coverImage``, ``price``) or ``None``; suggestions it
    cannot resolve are dropped and counted in ``unresolved_count``.
    Fallback items are returned as-is.
    """

    def __init__(self, provider: RecommendationProvider, fallback: Optional[RecommendationProvider] = None):
        self.provider = provider
        self.fallback = fallback or StaticFallbackProvider()

    def recommend(self, profile: ReaderProfile, resolver: Resolver, limit: int = MAX_RECOMMENDATIONS):
        return self._run(lambda p: p.for_profile(profile, limit), resolver, limit)

    def recommend_for_mood(self, mood: str, resolver: Resolver, limit: int = MAX_RECOMMENDATIONS):
        return self._run(lambda p: p.for_mood(mood, limit), resolver, limit)

    def _run(self, ask, resolver: Resolver, limit: int) -> RecommendationResult:
        limit = max(1, min(limit, MAX_RECOMMENDATIONS))

        if isinstance(self.provider, StaticFallbackProvider):
            return self._fallback(ask, limit)

        try:
            suggestions = ask(self.provider)
        except UpstreamUnavailableError as e:
            logger.warning(f"Recommendation provider unavailable, serving fallback: {e.message}")
            return self._fallback(ask, limit)

        resolved = []
        for rec in suggestions:
            match = resolver(rec["title"], rec.get("author") or None)
            if match:
                resolved.append({**rec, **match})

        unresolved = len(suggestions) - len(resolved)
        if unresolved:
            logger.info(f"Dropped {unresolved} recommendation(s) not found in the catalog")

        return RecommendationResult(
            recommendations=resolved[:limit],
            source=self.provider.source,
            unresolved_count=unresolved,
        )

    def _fallback(self, ask, limit: int) -> RecommendationResult:
        return RecommendationResult(
            recommendations=ask(self.fallback)[:limit],
            source=self.fallback.source,
        )
