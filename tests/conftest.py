import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["DATABASE_URI"] = "sqlite://"
os.environ["ENV"] = "test"
os.environ["OPENAI_API_KEY"] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

import litverse.models  # noqa: F401
from litverse.database import get_session
from litverse.main import app
from litverse.models.book import Book, BookGenre
from litverse.models.user import User
from litverse.utils.hash import hash_password
from litverse.utils.token import create_access_token


@pytest.fixture(name="session")
def session_fixture():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session


@pytest.fixture(name="client")
def client_fixture(session: Session):
    def get_session_override():
        return session

    app.dependency_overrides[get_session] = get_session_override
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(session: Session):
    counter = {"n": 0}

    def _make(**overrides) -> User:
        counter["n"] += 1
        n = counter["n"]
        fields = {
            "username": f"reader{n}",
            "email": f"reader{n}@litverse.io",
            "password": hash_password("secret123"),
            "first_name": "Ada",
            "last_name": f"Reader{n}",
        }
        fields.update(overrides)
        user = User(**fields)
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    return _make


@pytest.fixture
def make_book(session: Session):
    counter = {"n": 0}

    def _make(genres=("Fiction",), **overrides) -> Book:
        counter["n"] += 1
        n = counter["n"]
        fields = {
            "title": f"Book {n}",
            "slug": f"book-{n}",
            "author": "Jane Author",
            "description": "A story.",
            "pages": 300,
            "word_count": 60000,
            "physical_price": 19.99,
            "physical_stock": 10,
        }
        fields.update(overrides)
        book = Book(**fields)
        book.genres = [BookGenre(genre=g) for g in genres]
        session.add(book)
        session.commit()
        session.refresh(book)
        return book

    return _make


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token({'user_id': user.id})}"}


@pytest.fixture
def user(make_user):
    return make_user()


@pytest.fixture
def headers(user):
    return auth_headers(user)
