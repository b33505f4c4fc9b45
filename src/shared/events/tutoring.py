"""Cross-context event contracts for Tutoring domain events.

These classes define the event shape for consumption by other contexts (the
Reviews context opens the review gate on SessionCompleted, the notification
collaborator reads SessionCreated). They are registered as external events
via domain.register_external_event() with matching __type__ strings so
Protean's stream deserialization works correctly.

Every event on the ``tutoring::session`` stream has a contract here, so a
consumer of that stream can deserialize all of them, including the ones it
ignores.

The source-of-truth events are in src/tutoring/session/events.py.
"""

from protean.core.event import BaseEvent
from protean.fields import Date, DateTime, Float, Identifier, String


class SessionCreated(BaseEvent):
    """A student booked a session with a tutor."""

    __version__ = 1

    session_id = Identifier(required=True)
    tutor_id = Identifier(required=True)
    student_id = Identifier(required=True)
    subject = String(required=True)
    date = Date(required=True)
    time = String(required=True)
    price = Float(required=True)
    created_at = DateTime(required=True)


class SessionConfirmed(BaseEvent):
    __version__ = 1

    session_id = Identifier(required=True)
    tutor_id = Identifier(required=True)
    confirmed_at = DateTime(required=True)


class SessionCancelled(BaseEvent):
    __version__ = 1

    session_id = Identifier(required=True)
    previous_status = String(required=True)
    cancelled_at = DateTime(required=True)


class SessionCompleted(BaseEvent):
    """The tutor marked a confirmed session as completed.

    Consumed by the Reviews context: a completed session becomes reviewable.
    """

    __version__ = 1

    session_id = Identifier(required=True)
    tutor_id = Identifier(required=True)
    student_id = Identifier(required=True)
    subject = String(required=True)
    completed_at = DateTime(required=True)


class SessionDeleted(BaseEvent):
    __version__ = 1

    session_id = Identifier(required=True)
    tutor_id = Identifier(required=True)
    previous_status = String(required=True)
    deleted_at = DateTime(required=True)


TUTORING_EVENT_TYPES = {
    SessionCreated: "Tutoring.SessionCreated.v1",
    SessionConfirmed: "Tutoring.SessionConfirmed.v1",
    SessionCancelled: "Tutoring.SessionCancelled.v1",
    SessionCompleted: "Tutoring.SessionCompleted.v1",
    SessionDeleted: "Tutoring.SessionDeleted.v1",
}
