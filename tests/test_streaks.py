from datetime import date, datetime, timedelta

import pytest

from litverse.errors import InvalidTimestampError, ValidationError
from litverse.services.streaks import (
    PointsLedger,
    ReadingStreakState,
    advance_streak,
    points_for_pages,
    record_reading,
)

D0 = date(2026, 3, 1)


def test_worked_example_sequence():
    state = advance_streak(ReadingStreakState(), D0)
    assert (state.current_streak_days, state.longest_streak_days) == (1, 1)

    state = advance_streak(state, D0 + timedelta(days=1))
    assert (state.current_streak_days, state.longest_streak_days) == (2, 2)

    state = advance_streak(state, D0 + timedelta(days=4))
    assert (state.current_streak_days, state.longest_streak_days) == (1, 2)


@pytest.mark.parametrize("days", range(1, 11))
def test_consecutive_days_extend_streak(days):
    state = advance_streak(ReadingStreakState(), D0)
    for offset in range(1, days + 1):
        state = advance_streak(state, D0 + timedelta(days=offset))

    assert state.current_streak_days == days + 1
    assert state.longest_streak_days == days + 1


def test_same_day_keeps_streak():
    state = ReadingStreakState(3, 5, D0)
    same = advance_streak(state, datetime(2026, 3, 1, 23, 59))
    assert same == state


def test_earlier_day_is_rejected():
    state = ReadingStreakState(3, 5, D0)
    with pytest.raises(InvalidTimestampError):
        advance_streak(state, D0 - timedelta(days=1))


def test_points_are_floor_of_pages_over_ten():
    assert points_for_pages(0) == 0
    assert points_for_pages(9) == 0
    assert points_for_pages(25) == 2
    with pytest.raises(ValidationError):
        points_for_pages(-1)


def test_record_reading_same_day_still_awards_points():
    state = ReadingStreakState(2, 2, D0)
    update = record_reading(state, PointsLedger(), D0, 45)

    assert update.streak.current_streak_days == 2
    assert update.points_awarded == 4
    assert update.ledger.total_points == 4
    assert update.ledger.reading_points == 4


def test_bad_timestamp_leaves_ledger_untouched():
    ledger = PointsLedger(total_points=10, reading_points=10)
    with pytest.raises(InvalidTimestampError):
        record_reading(ReadingStreakState(1, 1, D0), ledger, D0 - timedelta(days=2), 100)
    assert ledger.total_points == 10


def test_ledger_invariant_across_operations():
    ledger = (
        PointsLedger()
        .award_reading(120)
        .award_social(15)
        .award_challenge(100)
        .redeem(100)
    )
    assert ledger.total_points == (
        ledger.reading_points + ledger.social_points + ledger.challenge_points - ledger.redeemed_points
    )
    assert ledger.total_points == 135


def test_redeem_requires_minimum_and_balance():
    ledger = PointsLedger(total_points=150, reading_points=150)
    with pytest.raises(ValidationError):
        ledger.redeem(99)
    with pytest.raises(ValidationError, match="Insufficient points"):
        ledger.redeem(200)
    assert ledger.redeem(150).total_points == 0


def test_negative_award_rejected():
    with pytest.raises(ValidationError):
        PointsLedger().award_social(-5)
