from conftest import auth_headers


def test_leaderboard_orders_by_type(client, make_user, headers):
    make_user(username="bookworm", total_points=50, total_books_read=9)
    make_user(username="pointhog", total_points=900, total_books_read=1)

    by_points = client.get("/api/gamification/leaderboard", headers=headers).json()
    by_books = client.get("/api/gamification/leaderboard", params={"type": "books"}, headers=headers).json()

    assert by_points["leaderboard"][0]["username"] == "pointhog"
    assert by_points["leaderboard"][0]["rank"] == 1
    assert by_books["leaderboard"][0]["username"] == "bookworm"


def test_leaderboard_rejects_unknown_type(client, headers):
    response = client.get("/api/gamification/leaderboard", params={"type": "vibes"}, headers=headers)
    assert response.status_code == 400


def test_inactive_users_are_not_ranked(client, make_user, headers):
    make_user(username="ghost", total_points=10_000, is_active=False)
    board = client.get("/api/gamification/leaderboard", headers=headers).json()["leaderboard"]
    assert "ghost" not in [row["username"] for row in board]


def test_redeem_points(client, make_user):
    rich = make_user(total_points=250, reading_points=250)

    response = client.post(
        "/api/gamification/redeem-points",
        json={"amount": 150, "reward": "Free e-book"},
        headers=auth_headers(rich),
    )

    assert response.status_code == 200
    body = response.json()
    assert body["remainingPoints"] == 100
    assert body["points"]["redeemed"] == 150


def test_redeem_more_than_balance(client, make_user):
    poor = make_user(total_points=120, reading_points=120)
    response = client.post(
        "/api/gamification/redeem-points",
        json={"amount": 200, "reward": "Poster"},
        headers=auth_headers(poor),
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Insufficient points"


def test_redeem_below_minimum(client, headers):
    response = client.post(
        "/api/gamification/redeem-points", json={"amount": 50, "reward": "Sticker"}, headers=headers
    )
    assert response.status_code == 400


def test_badge_catalog_marks_earned(client, headers, make_book):
    book = make_book()
    client.post("/api/users/library/completed", headers=headers, json={"book_id": book.id})

    badges = client.get("/api/gamification/badges", headers=headers).json()["badges"]
    earned = {b["name"]: b["isEarned"] for b in badges}

    assert earned == {
        "First Book": True,
        "Page Turner": False,
        "Streak Master": False,
        "Genre Explorer": False,
    }


def test_stats_and_level(client, make_user):
    reader = make_user(total_points=2500, reading_points=2500, current_streak=3, longest_streak=8)

    stats = client.get("/api/gamification/stats", headers=auth_headers(reader)).json()["stats"]

    assert stats["level"] == {"level": 3, "title": "Page Turner"}
    assert stats["longestStreak"] == 8

    streaks = client.get("/api/gamification/streaks", headers=auth_headers(reader)).json()["streaks"]
    assert streaks["current"] == 3
