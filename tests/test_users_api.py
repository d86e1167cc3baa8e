from datetime import datetime, timedelta

from sqlmodel import select

from conftest import auth_headers
from litverse.models.user import User, UserBadge
from litverse.services import reading


def test_profile_update_preferences(client, headers):
    response = client.put("/api/users/profile", headers=headers, json={
        "favorite_genres": ["Mystery", "Sci-Fi", "Mystery"],
        "reading_speed": 320,
        "preferred_format": "E-Book",
    })

    assert response.status_code == 200
    prefs = response.json()["user"]["reading_preferences"]
    assert prefs["favorite_genres"] == ["Mystery", "Sci-Fi"]
    assert prefs["reading_speed"] == 320


def test_profile_rejects_unknown_format(client, headers):
    response = client.put("/api/users/profile", headers=headers, json={"preferred_format": "Scroll"})
    assert response.status_code == 400


def test_book_lives_on_one_shelf(client, headers, make_book):
    book = make_book()

    client.post("/api/users/library/wishlist", headers=headers, json={"book_id": book.id})
    response = client.post("/api/users/library/reading", headers=headers, json={"book_id": book.id})

    library = response.json()["library"]
    assert library["wishlist"] == []
    assert [b["id"] for b in library["reading"]] == [book.id]


def test_invalid_shelf(client, headers, make_book):
    book = make_book()
    response = client.post("/api/users/library/borrowed", headers=headers, json={"book_id": book.id})
    assert response.status_code == 400


def test_completing_first_book_awards_badge(client, headers, make_book, user, session):
    book = make_book(pages=320)

    response = client.post("/api/users/library/completed", headers=headers, json={"book_id": book.id})

    assert response.status_code == 200
    assert [b["name"] for b in response.json()["newBadges"]] == ["First Book"]

    session.refresh(user)
    assert user.total_books_read == 1
    assert user.total_pages_read == 320
    assert user.current_streak == 1
    assert user.challenge_points == 100

    # completing again does not double count
    again = client.post("/api/users/library/completed", headers=headers, json={"book_id": book.id})
    assert again.json()["newBadges"] == []
    session.refresh(user)
    assert user.total_books_read == 1


def test_remove_from_library(client, headers, make_book):
    book = make_book()
    client.post("/api/users/library/owned", headers=headers, json={"book_id": book.id})

    response = client.delete(f"/api/users/library/owned/{book.id}", headers=headers)
    assert response.json()["library"]["owned"] == []

    missing = client.delete(f"/api/users/library/owned/{book.id}", headers=headers)
    assert missing.status_code == 404


def test_reading_progress_points_and_streak(client, headers, make_book, user, session):
    book = make_book()
    day0 = datetime(2026, 5, 1, 20, 0)

    first = client.post("/api/users/reading-progress", headers=headers, json={
        "book_id": book.id, "pages_read": 45, "time_spent": 30, "read_at": day0.isoformat(),
    })
    second = client.post("/api/users/reading-progress", headers=headers, json={
        "book_id": book.id, "pages_read": 20, "read_at": (day0 + timedelta(days=1)).isoformat(),
    })

    assert first.json()["pointsAwarded"] == 4
    assert second.json()["pointsAwarded"] == 2
    streaks = second.json()["achievements"]["streaks"]
    assert streaks["current"] == 2
    assert streaks["longest"] == 2

    session.refresh(user)
    assert user.total_pages_read == 65
    assert user.total_reading_minutes == 30
    assert user.reading_points == 6


def test_reading_progress_in_the_past_is_rejected(client, headers, make_book, user, session):
    book = make_book()
    day0 = datetime(2026, 5, 10, 9, 0)
    client.post("/api/users/reading-progress", headers=headers, json={
        "book_id": book.id, "pages_read": 10, "read_at": day0.isoformat(),
    })

    response = client.post("/api/users/reading-progress", headers=headers, json={
        "book_id": book.id, "pages_read": 100, "read_at": (day0 - timedelta(days=2)).isoformat(),
    })

    assert response.status_code == 400
    session.refresh(user)
    assert user.total_pages_read == 10


def test_page_turner_badge_from_progress(client, headers, make_book):
    book = make_book()
    response = client.post("/api/users/reading-progress", headers=headers, json={
        "book_id": book.id, "pages_read": 1000,
    })

    assert [b["name"] for b in response.json()["newBadges"]] == ["Page Turner"]
    points = response.json()["achievements"]["points"]
    assert points["reading"] == 100
    assert points["challenges"] == 100
    assert points["total"] == 200


def test_page_turner_not_awarded_twice(client, headers, make_book, user, session):
    book = make_book()
    for _ in range(2):
        response = client.post("/api/users/reading-progress", headers=headers, json={
            "book_id": book.id, "pages_read": 1000,
        })
        assert response.status_code == 200

    assert response.json()["newBadges"] == []
    rows = session.exec(
        select(UserBadge).where(UserBadge.user_id == user.id, UserBadge.name == "Page Turner")
    ).all()
    assert len(rows) == 1

    session.refresh(user)
    assert user.total_pages_read == 2000
    assert user.challenge_points == 100


def test_future_reading_date_rejected(client, headers, make_book, user, session):
    book = make_book(pages=200)

    future = client.post("/api/users/reading-progress", headers=headers, json={
        "book_id": book.id, "pages_read": 10, "read_at": "2099-01-01T00:00:00",
    })
    assert future.status_code == 400
    assert future.json()["details"] == ["read_at cannot be in the future"]

    today = client.post("/api/users/reading-progress", headers=headers, json={
        "book_id": book.id, "pages_read": 10,
    })
    assert today.status_code == 200

    completed = client.post("/api/users/library/completed", headers=headers, json={"book_id": book.id})
    assert completed.status_code == 200

    session.refresh(user)
    assert user.current_streak == 1


def test_concurrent_badge_award_is_conflict(client, headers, make_book, user, session, monkeypatch):
    book = make_book()
    session.add(UserBadge(user_id=user.id, name="Page Turner", description="Read 1000 pages", icon="x"))
    session.commit()
    # the other request's badge is not visible yet when this one checks
    monkeypatch.setattr(reading, "owned_badge_names", lambda session, user_id: [])

    response = client.post("/api/users/reading-progress", headers=headers, json={
        "book_id": book.id, "pages_read": 1000,
    })

    assert response.status_code == 400
    assert response.json()["error"] == "Duplicate field value"
    session.refresh(user)
    assert user.total_pages_read == 0


def test_follow_toggle(client, headers, make_user, user):
    other = make_user()

    followed = client.post(f"/api/users/social/follow/{other.id}", headers=headers)
    assert followed.json()["isFollowing"] is True

    theirs = client.get("/api/users/social", headers=auth_headers(other)).json()
    assert [u["id"] for u in theirs["followers"]] == [user.id]

    unfollowed = client.post(f"/api/users/social/follow/{other.id}", headers=headers)
    assert unfollowed.json()["isFollowing"] is False


def test_cannot_follow_self(client, headers, user):
    response = client.post(f"/api/users/social/follow/{user.id}", headers=headers)
    assert response.status_code == 400


def test_timestamps_default_to_aware_utc():
    user = User(username="tz", email="tz@litverse.io", password="x", first_name="T", last_name="Z")
    badge = UserBadge(user_id=1, name="First Book", description="d", icon="i")

    assert user.created_at.utcoffset() == timedelta(0)
    assert badge.earned_at.utcoffset() == timedelta(0)
