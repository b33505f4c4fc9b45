"""Shared BDD fixtures and step definitions for the Reviews domain."""

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, then
from reviews.review.review import Review


@pytest.fixture()
def error():
    """Container for captured errors."""
    return {"exc": None}


@pytest.fixture()
def context():
    """Scenario state: session id and last review id."""
    return {"session_id": None, "review_id": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("a session that never completed")
def never_completed(context):
    context["session_id"] = "sess-never-completed"


@given("a completed session")
def completed(context, complete_session):
    context["session_id"] = complete_session()


@given("the student already reviewed it")
def already_reviewed(context, review_service):
    result = review_service.create_review(session_id=context["session_id"], tutor_id="7", student_id="9", rating=5)
    context["review_id"] = result.review_id


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then("the session can be reviewed")
def can_be_reviewed(context, review_service):
    assert review_service.can_review(context["session_id"]).eligible


@then(parsers.cfparse('the session cannot be reviewed because "{reason}"'))
def cannot_be_reviewed(context, review_service, reason):
    eligibility = review_service.can_review(context["session_id"])
    assert not eligibility.eligible
    assert eligibility.reason == reason


@then("no review is stored")
def no_review_stored():
    assert current_domain.repository_for(Review)._dao.query.all().items == []
