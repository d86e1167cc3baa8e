"""
Reading streaks and the points ledger.

Streak continuity is decided by the whole-day difference between the
calendar day of ``now`` and the last recorded reading day:

    no previous day  -> streak starts at 1
    same day         -> streak unchanged (points are still awarded)
    next day         -> streak + 1
    two or more days -> streak resets to 1
    earlier day      -> InvalidTimestampError, nothing changes

Nothing in here touches the database; the routes copy the results onto the
``User`` row.
"""
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Optional, Union

from litverse.errors import InvalidTimestampError, ValidationError

PAGES_PER_POINT = 10
MIN_REDEMPTION = 100


@dataclass(frozen=True)
class ReadingStreakState:
    current_streak_days: int = 0
    longest_streak_days: int = 0
    last_reading_date: Optional[date] = None


@dataclass(frozen=True)
class PointsLedger:
    total_points: int = 0
    reading_points: int = 0
    social_points: int = 0
    challenge_points: int = 0
    redeemed_points: int = 0

    def award_reading(self, points: int) -> "PointsLedger":
        return self._award("reading_points", points)

    def award_social(self, points: int) -> "PointsLedger":
        return self._award("social_points", points)

    def award_challenge(self, points: int) -> "PointsLedger":
        return self._award("challenge_points", points)

    def redeem(self, amount: int) -> "PointsLedger":
        if amount < MIN_REDEMPTION:
            raise ValidationError(
                "Invalid redemption",
                details=[f"Minimum redemption is {MIN_REDEMPTION} points"],
            )
        if amount > self.total_points:
            raise ValidationError("Insufficient points")
        return replace(
            self,
            total_points=self.total_points - amount,
            redeemed_points=self.redeemed_points + amount,
        )

    def _award(self, category: str, points: int) -> "PointsLedger":
        if points < 0:
            raise ValidationError("Points awarded must not be negative")
        return replace(
            self,
            total_points=self.total_points + points,
            **{category: getattr(self, category) + points},
        )


@dataclass(frozen=True)
class ReadingUpdate:
    streak: ReadingStreakState
    ledger: PointsLedger
    points_awarded: int


def _as_day(value: Union[date, datetime]) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def advance_streak(state: ReadingStreakState, now: Union[date, datetime]) -> ReadingStreakState:
    today = _as_day(now)
    last = state.last_reading_date

    if last is None:
        current = 1
    else:
        days = (today - _as_day(last)).days
        if days < 0:
            raise InvalidTimestampError(
                details=[f"now={today.isoformat()} is before last reading date {_as_day(last).isoformat()}"]
            )
        if days == 0:
            current = state.current_streak_days
        elif days == 1:
            current = state.current_streak_days + 1
        else:
            current = 1

    return ReadingStreakState(
        current_streak_days=current,
        longest_streak_days=max(state.longest_streak_days, current),
        last_reading_date=today,
    )


def points_for_pages(pages_read: int) -> int:
    if pages_read < 0:
        raise ValidationError("Pages read must not be negative")
    return pages_read // PAGES_PER_POINT


def record_reading(
    state: ReadingStreakState,
    ledger: PointsLedger,
    now: Union[date, datetime],
    pages_read: int,
) -> ReadingUpdate:
    # validate both inputs before producing anything
    points = points_for_pages(pages_read)
    streak = advance_streak(state, now)
    return ReadingUpdate(
        streak=streak,
        ledger=ledger.award_reading(points),
        points_awarded=points,
    )
