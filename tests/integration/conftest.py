"""Fixtures for cross-context integration tests.

Nothing crosses a context boundary on its own: a test moves events along
with ``deliver`` (root conftest), which publishes a context's outbox and
hands the messages to the subscribed handlers. Each step pushes the
context it acts in.
"""

import pytest


@pytest.fixture()
def lifecycle():
    from tutoring.session.lifecycle import SessionLifecycle

    return SessionLifecycle()


@pytest.fixture()
def review_service():
    from reviews.review.service import ReviewService

    return ReviewService()
