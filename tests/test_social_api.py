from conftest import auth_headers


def create_club(client, headers, **overrides):
    payload = {"name": "Mystery Mondays", "description": "Whodunits weekly"}
    payload.update(overrides)
    return client.post("/api/social/book-clubs", headers=headers, json=payload)


def test_create_club_makes_creator_a_member(client, headers, user, session):
    response = create_club(client, headers)

    assert response.status_code == 201
    club = response.json()["bookClub"]
    assert club["memberCount"] == 1
    assert club["creatorId"] == user.id

    session.refresh(user)
    assert user.social_points == 25


def test_join_and_post_discussion(client, headers, make_user, session):
    club_id = create_club(client, headers).json()["bookClub"]["id"]
    member = make_user()
    member_headers = auth_headers(member)

    joined = client.post(f"/api/social/book-clubs/{club_id}/join", headers=member_headers)
    assert joined.json()["memberCount"] == 2

    twice = client.post(f"/api/social/book-clubs/{club_id}/join", headers=member_headers)
    assert twice.status_code == 400

    posted = client.post("/api/social/discussions", headers=member_headers, json={
        "club_id": club_id, "topic": "Chapter 3", "content": "Who did it?",
    })
    assert posted.status_code == 201

    detail = client.get(f"/api/social/book-clubs/{club_id}", headers=member_headers).json()["bookClub"]
    assert detail["isMember"] is True
    assert [d["topic"] for d in detail["discussions"]] == ["Chapter 3"]

    session.refresh(member)
    assert member.social_points == 15
    assert member.total_points == 15


def test_non_member_cannot_post(client, headers, make_user):
    club_id = create_club(client, headers).json()["bookClub"]["id"]
    outsider = make_user()

    response = client.post("/api/social/discussions", headers=auth_headers(outsider), json={
        "club_id": club_id, "topic": "Hi", "content": "Let me in",
    })
    assert response.status_code == 403


def test_private_clubs_hidden_from_outsiders(client, headers, make_user):
    create_club(client, headers, name="Secret Society", is_public=False)
    outsider = make_user()

    clubs = client.get("/api/social/book-clubs", headers=auth_headers(outsider)).json()["bookClubs"]
    assert clubs == []

    mine = client.get("/api/social/book-clubs", headers=headers).json()["bookClubs"]
    assert [c["name"] for c in mine] == ["Secret Society"]


def test_missing_club(client, headers):
    assert client.get("/api/social/book-clubs/404", headers=headers).status_code == 404


def test_private_club_cannot_be_joined(client, headers, make_user, session):
    club_id = create_club(client, headers, name="Secret Society", is_public=False).json()["bookClub"]["id"]
    outsider = make_user()
    outsider_headers = auth_headers(outsider)

    joined = client.post(f"/api/social/book-clubs/{club_id}/join", headers=outsider_headers)
    assert joined.status_code == 403
    assert joined.json()["error"] == "This book club is private"

    assert client.get(f"/api/social/book-clubs/{club_id}", headers=outsider_headers).status_code == 403

    session.refresh(outsider)
    assert outsider.social_points == 0
