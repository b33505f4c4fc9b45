from datetime import UTC, datetime
from uuid import uuid4

import pytest


@pytest.fixture(autouse=True)
def _ctx(reviews_bed):
    with reviews_bed.domain_context():
        yield


@pytest.fixture()
def complete_session():
    """Hand a SessionCompleted event to the Tutoring events handler; returns the session id."""
    from reviews.review.tutoring_events import TutoringEventsHandler
    from shared.events.tutoring import SessionCompleted

    def _complete(tutor_id="7", student_id="9", subject="Calculus", session_id=None):
        session_id = session_id or str(uuid4())
        TutoringEventsHandler().on_session_completed(
            SessionCompleted(
                session_id=session_id,
                tutor_id=tutor_id,
                student_id=student_id,
                subject=subject,
                completed_at=datetime.now(UTC),
            )
        )
        return session_id

    return _complete


@pytest.fixture()
def review_service():
    from reviews.review.service import ReviewService

    return ReviewService()
