"""Smoke tests for form and health routes."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from horizon_talk.api.routes import router


@pytest.fixture
def client():
    app = FastAPI()
    app.include_router(router)
    with TestClient(app) as c:
        yield c


CONTACT = {
    "name": "Sarah",
    "email": "sarah@example.com",
    "subject": "Question",
    "message": "How do I reset my progress?",
}

FEEDBACK = {
    "rating": 4,
    "category": "feature",
    "subject": "Flashcards",
    "message": "Please add spaced repetition.",
    "userId": "u1",
    "userEmail": "sarah@example.com",
}


class TestHealthCheck:
    def test_health_returns_ok(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestContact:
    def test_valid_submission(self, client):
        response = client.post("/api/contact", json=CONTACT)
        assert response.status_code == 200
        assert response.json()["success"] is True

    @pytest.mark.parametrize("field", ["name", "email", "subject", "message"])
    def test_missing_field(self, client, field):
        body = {k: v for k, v in CONTACT.items() if k != field}
        response = client.post("/api/contact", json=body)
        assert response.status_code == 400
        assert response.json() == {"error": "All fields are required"}

    def test_malformed_email(self, client):
        response = client.post("/api/contact", json={**CONTACT, "email": "not-an-email"})
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid email address"}


class TestFeedbackForm:
    def test_valid_submission(self, client):
        response = client.post("/api/feedback", json=FEEDBACK)
        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Thank you for your feedback!"}

    def test_user_fields_optional(self, client):
        body = {k: v for k, v in FEEDBACK.items() if k not in ("userId", "userEmail")}
        assert client.post("/api/feedback", json=body).status_code == 200

    @pytest.mark.parametrize("field", ["rating", "category", "subject", "message"])
    def test_missing_field(self, client, field):
        body = {k: v for k, v in FEEDBACK.items() if k != field}
        response = client.post("/api/feedback", json=body)
        assert response.status_code == 400

    @pytest.mark.parametrize("rating", [0, 6, -3])
    def test_rating_out_of_range(self, client, rating):
        response = client.post("/api/feedback", json={**FEEDBACK, "rating": rating})
        assert response.status_code == 400
        assert response.json() == {"error": "Rating must be between 1 and 5"}
