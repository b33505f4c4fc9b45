"""Shared BDD fixtures and step definitions for the Tutoring domain."""

from datetime import date

import pytest
from pytest_bdd import given, parsers, then
from shared.errors import ConflictError
from tutoring.session.events import SessionCancelled, SessionCompleted, SessionConfirmed, SessionCreated, SessionDeleted
from tutoring.session.session import Session

_SESSION_EVENT_CLASSES = {
    "SessionCreated": SessionCreated,
    "SessionConfirmed": SessionConfirmed,
    "SessionCancelled": SessionCancelled,
    "SessionCompleted": SessionCompleted,
    "SessionDeleted": SessionDeleted,
}


@pytest.fixture()
def error():
    """Container for captured errors."""
    return {"exc": None}


def _book():
    session = Session.book(
        tutor_id="tutor-bdd",
        student_id="student-bdd",
        subject="Physics",
        date=date(2025, 4, 1),
        time="10:00",
        price=15000,
    )
    session._events.clear()
    return session


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("a pending session", target_fixture="session")
def pending_session():
    return _book()


@given("a confirmed session", target_fixture="session")
def confirmed_session():
    session = _book()
    session.confirm()
    session._events.clear()
    return session


@given("a completed session", target_fixture="session")
def completed_session():
    session = _book()
    session.confirm()
    session.complete()
    session._events.clear()
    return session


@given("a cancelled session", target_fixture="session")
def cancelled_session():
    session = _book()
    session.cancel()
    session._events.clear()
    return session


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the session status is "{status}"'))
def session_status_is(session, status):
    assert session.status == status


@then("the session action fails with a state conflict")
def session_action_conflicts(error):
    assert error["exc"] is not None, "Expected a state conflict but none was raised"
    assert isinstance(error["exc"], ConflictError)


@then(parsers.cfparse("a {event_type} event is raised"))
def session_event_raised(session, event_type):
    event_cls = _SESSION_EVENT_CLASSES[event_type]
    assert any(
        isinstance(e, event_cls) for e in session._events
    ), f"No {event_type} event found. Events: {[type(e).__name__ for e in session._events]}"
