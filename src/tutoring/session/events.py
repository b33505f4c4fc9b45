"""Domain events for the Session aggregate.

Raised on the aggregate and written to the outbox in the same unit of work
as the state change. The Engine's OutboxProcessor publishes them on the
``tutoring::session`` stream, where the other contexts read them through
the contracts in ``shared.events.tutoring``.
"""

from protean.fields import Date, DateTime, Float, Identifier, String

from tutoring.domain import tutoring


@tutoring.event(part_of="Session")
class SessionCreated:
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


@tutoring.event(part_of="Session")
class SessionConfirmed:
    """The tutor accepted the booking."""

    __version__ = 1

    session_id = Identifier(required=True)
    tutor_id = Identifier(required=True)
    confirmed_at = DateTime(required=True)


@tutoring.event(part_of="Session")
class SessionCancelled:
    """Either party cancelled the session before it was completed."""

    __version__ = 1

    session_id = Identifier(required=True)
    previous_status = String(required=True)
    cancelled_at = DateTime(required=True)


@tutoring.event(part_of="Session")
class SessionCompleted:
    """The tutor marked the session as held."""

    __version__ = 1

    session_id = Identifier(required=True)
    tutor_id = Identifier(required=True)
    student_id = Identifier(required=True)
    subject = String(required=True)
    completed_at = DateTime(required=True)


@tutoring.event(part_of="Session")
class SessionDeleted:
    """A session that was never held was removed."""

    __version__ = 1

    session_id = Identifier(required=True)
    tutor_id = Identifier(required=True)
    previous_status = String(required=True)
    deleted_at = DateTime(required=True)
