"""Integration tests for Tutors API endpoints via TestClient."""

from datetime import UTC, datetime

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from protean.integrations.fastapi import register_exception_handlers
from shared.events.reviews import ReviewCreated
from tutors.api.routes import tutor_router
from tutors.rating.review_events import ReviewEventsHandler


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(tutor_router)
    register_exception_handlers(app)
    return TestClient(app)


def _review(review_id, rating, tutor_id="7"):
    ReviewEventsHandler().on_review_created(
        ReviewCreated(
            review_id=review_id,
            session_id=f"s-{review_id}",
            tutor_id=tutor_id,
            student_id="9",
            rating=rating,
            created_at=datetime.now(UTC),
        )
    )


class TestTutorRatingAPI:
    def test_unrated_tutor(self, client):
        response = client.get("/tutors/7/rating")
        assert response.status_code == 200
        assert response.json() == {"tutor_id": "7", "average_rating": 0.0, "review_count": 0}

    def test_rating_rounded_to_two_decimals(self, client):
        for review_id, score in (("a", 5), ("b", 4), ("c", 4)):
            _review(review_id, score)
        data = client.get("/tutors/7/rating").json()
        assert data["average_rating"] == 4.33
        assert data["review_count"] == 3

    def test_list_best_rated_first(self, client):
        _review("a", 3, tutor_id="7")
        _review("b", 5, tutor_id="8")
        data = client.get("/tutors").json()
        assert [t["tutor_id"] for t in data] == ["8", "7"]
