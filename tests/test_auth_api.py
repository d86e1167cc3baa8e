from sqlalchemy.exc import IntegrityError


def register(client, **overrides):
    payload = {
        "username": "newreader",
        "email": "New.Reader@litverse.io",
        "password": "secret123",
        "confirm_password": "secret123",
        "first_name": "New",
        "last_name": "Reader",
    }
    payload.update(overrides)
    return client.post("/api/auth/register", json=payload)


def test_register_login_and_me(client):
    response = register(client)
    assert response.status_code == 201
    assert response.json()["user"]["email"] == "new.reader@litverse.io"

    login = client.post("/api/auth/login", json={"email": "new.reader@litverse.io", "password": "secret123"})
    assert login.status_code == 200
    token = login.json()["access_token"]

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.json()["user"]["username"] == "newreader"


def test_duplicate_email_rejected(client):
    register(client)
    response = register(client, username="someoneelse")
    assert response.status_code == 400
    assert response.json()["details"] == ["email already exists"]


def test_password_mismatch_is_validation_error(client):
    response = register(client, confirm_password="different")
    assert response.status_code == 400
    assert response.json()["error"] == "Validation Error"


def test_wrong_password(client):
    register(client)
    response = client.post("/api/auth/login", json={"email": "new.reader@litverse.io", "password": "nope"})
    assert response.status_code == 401


def test_garbage_token(client):
    response = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
    assert response.json()["error"] == "Invalid token"


def test_registration_losing_unique_race_is_conflict(client, session, monkeypatch):
    def lost_race():
        raise IntegrityError("INSERT INTO user", {}, Exception("UNIQUE constraint failed: user.email"))

    monkeypatch.setattr(session, "commit", lost_race)
    response = register(client)

    assert response.status_code == 400
    assert response.json()["error"] == "Duplicate field value"
    assert response.json()["details"] == ["email or username already exists"]
