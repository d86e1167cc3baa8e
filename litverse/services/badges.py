from dataclasses import dataclass
from typing import Callable, Iterable, List

BADGE_BONUS_POINTS = 100
STREAK_MASTER_DAYS = 7
PAGE_TURNER_PAGES = 1000
GENRE_EXPLORER_GENRES = 5

LEVEL_TITLES = [
    "Novice Reader", "Book Explorer", "Page Turner", "Story Seeker",
    "Literary Adventurer", "Word Wanderer", "Tale Traveler", "Narrative Navigator",
    "Epic Reader", "Legendary Bibliophile",
]


@dataclass(frozen=True)
class ReaderProgress:
    books_completed: int
    pages_read: int
    current_streak_days: int
    genres_completed: int


@dataclass(frozen=True)
class BadgeRule:
    slug: str
    name: str
    description: str
    icon: str
    earned: Callable[[ReaderProgress], bool]


BADGE_RULES: List[BadgeRule] = [
    BadgeRule(
        slug="first-book",
        name="First Book",
        description="Completed your first book!",
        icon="📚",
        earned=lambda p: p.books_completed >= 1,
    ),
    BadgeRule(
        slug="page-turner",
        name="Page Turner",
        description=f"Read {PAGE_TURNER_PAGES} pages!",
        icon="📖",
        earned=lambda p: p.pages_read >= PAGE_TURNER_PAGES,
    ),
    BadgeRule(
        slug="streak-master",
        name="Streak Master",
        description=f"Maintained a {STREAK_MASTER_DAYS}-day reading streak",
        icon="🔥",
        earned=lambda p: p.current_streak_days >= STREAK_MASTER_DAYS,
    ),
    BadgeRule(
        slug="genre-explorer",
        name="Genre Explorer",
        description=f"Read books from {GENRE_EXPLORER_GENRES} different genres",
        icon="🗺️",
        earned=lambda p: p.genres_completed >= GENRE_EXPLORER_GENRES,
    ),
]


def newly_earned(progress: ReaderProgress, owned_names: Iterable[str]) -> List[BadgeRule]:
    """Badges whose threshold is met and that the reader does not hold yet."""
    owned = set(owned_names)
    return [rule for rule in BADGE_RULES if rule.name not in owned and rule.earned(progress)]


def level_for_points(total_points: int) -> dict:
    level = min(max(total_points, 0) // 1000 + 1, len(LEVEL_TITLES))
    return {"level": level, "title": LEVEL_TITLES[level - 1]}
