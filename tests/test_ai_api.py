import json
from types import SimpleNamespace

import pytest

from litverse.main import app
from litverse.routes.ai import get_insight_service, get_recommendation_service
from litverse.services.insights import InsightService
from litverse.services.recommendations import LLMBackedProvider, RecommendationService


class ScriptedCompletions:
    def __init__(self, content):
        self.content = content

    def create(self, **kwargs):
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


@pytest.fixture
def llm_service(client):
    def install(content):
        client_stub = SimpleNamespace(chat=SimpleNamespace(completions=ScriptedCompletions(content)))
        service = RecommendationService(LLMBackedProvider(client_stub))
        app.dependency_overrides[get_recommendation_service] = lambda: service
        return service
    return install


def test_fallback_without_api_key(client, headers):
    response = client.get("/api/ai/recommendations", headers=headers)

    assert response.status_code == 200
    body = response.json()
    assert body["source"] == "fallback"
    assert body["recommendations"][0]["title"] == "The Great Gatsby"


def test_llm_suggestions_resolved_against_catalog(client, headers, make_book, llm_service):
    dune = make_book(title="Dune", author="Frank Herbert", physical_price=18.0, ebook_price=7.5)
    llm_service(json.dumps({"recommendations": [
        {"title": "dune", "author": "frank herbert", "reason": "Sand"},
        {"title": "Not In Stock Anywhere", "author": "Nobody", "reason": "?"},
    ]}))

    body = client.get("/api/ai/recommendations", headers=headers).json()

    assert body["source"] == "llm"
    assert body["unresolvedCount"] == 1
    assert body["recommendations"][0]["bookId"] == dune.id
    assert body["recommendations"][0]["price"] == 7.5


def test_bad_llm_output_never_500s(client, headers, llm_service):
    llm_service("I think you would enjoy...")
    response = client.get("/api/ai/mood-recommendations", params={"mood": "cozy", "limit": 1}, headers=headers)

    assert response.status_code == 200
    assert response.json()["source"] == "fallback"
    assert len(response.json()["recommendations"]) == 1


def test_mood_is_required(client, headers):
    response = client.get("/api/ai/mood-recommendations", headers=headers)
    assert response.status_code == 400


def test_update_mood_keeps_history(client, headers, make_book):
    book = make_book()
    client.post("/api/ai/update-mood", headers=headers, json={"mood": "curious"})
    response = client.post("/api/ai/update-mood", headers=headers, json={"mood": "cozy", "book_id": book.id})

    body = response.json()
    assert body["mood"] == "cozy"
    assert [h["mood"] for h in body["history"]] == ["cozy", "curious"]


@pytest.fixture
def llm_insights(client):
    def install(content):
        client_stub = SimpleNamespace(chat=SimpleNamespace(completions=ScriptedCompletions(content)))
        service = InsightService(LLMBackedProvider(client_stub))
        app.dependency_overrides[get_insight_service] = lambda: service
        return service
    return install


def test_analyze_book_without_api_key(client, headers, make_book):
    book = make_book(genres=["Mystery", "Thriller"])

    response = client.post(f"/api/ai/analyze-book/{book.id}", headers=headers)

    assert response.status_code == 200
    body = response.json()
    assert body["source"] == "fallback"
    assert [t["name"] for t in body["analysis"]["themes"]] == ["Mystery", "Thriller"]


def test_insights_for_missing_book_are_404(client, headers):
    assert client.post("/api/ai/analyze-book/999", headers=headers).status_code == 404
    assert client.get("/api/ai/movie-potential/999", headers=headers).status_code == 404


def test_movie_potential_from_model(client, headers, make_book, llm_insights):
    book = make_book()
    llm_insights(json.dumps({"score": 8, "genre": "Thriller", "challenges": ["Pacing"]}))

    body = client.get(f"/api/ai/movie-potential/{book.id}", headers=headers).json()

    assert body["source"] == "llm"
    assert body["prediction"]["score"] == 8
    assert body["prediction"]["challenges"] == ["Pacing"]


def test_reading_journey_links_catalog_books(client, headers, make_book, llm_insights):
    dune = make_book(title="Dune", author="Frank Herbert")
    llm_insights(json.dumps({"journey": [
        {"title": "Dune", "author": "Frank Herbert", "order": 1, "reason": "Start big"},
        {"title": "Unwritten Sequel", "author": "Nobody", "order": 2},
    ]}))

    response = client.post("/api/ai/reading-journey", headers=headers, json={"goal": "explore sci-fi"})

    body = response.json()
    assert body["goal"] == "explore sci-fi"
    assert [s["title"] for s in body["journey"]] == ["Dune", "Unwritten Sequel"]
    assert body["journey"][0]["bookId"] == dune.id


def test_reading_journey_requires_goal(client, headers):
    response = client.post("/api/ai/reading-journey", headers=headers, json={"goal": ""})
    assert response.status_code == 400


def test_companion_content_type_is_validated(client, headers, make_book):
    book = make_book()

    bad = client.post(f"/api/ai/companion-content/{book.id}", headers=headers, json={"content_type": "karaoke"})
    assert bad.status_code == 400

    good = client.post(f"/api/ai/companion-content/{book.id}", headers=headers, json={"content_type": "recipes"})
    assert good.json()["content"]["contentType"] == "recipes"
    assert good.json()["source"] == "fallback"


def test_reading_insights_fallback(client, headers):
    body = client.get("/api/ai/reading-insights", headers=headers).json()

    assert body["source"] == "fallback"
    assert body["insights"]["personalityType"] == "Curious Beginner"
