"""Domain events for the Review aggregate.

Written to the outbox with the review change and published on the
``reviews::review`` stream. The Tutors context reads them through the
contracts in ``shared.events.reviews``.
"""

from protean.fields import DateTime, Identifier, Integer, Text

from reviews.domain import reviews


@reviews.event(part_of="Review")
class ReviewCreated:
    """A student reviewed a completed session."""

    __version__ = 1

    review_id = Identifier(required=True)
    session_id = Identifier(required=True)
    tutor_id = Identifier(required=True)
    student_id = Identifier(required=True)
    rating = Integer(required=True)
    comment = Text()
    created_at = DateTime(required=True)


@reviews.event(part_of="Review")
class ReviewDeleted:
    """A review was deleted."""

    __version__ = 1

    review_id = Identifier(required=True)
    session_id = Identifier(required=True)
    tutor_id = Identifier(required=True)
    rating = Integer(required=True)
    deleted_at = DateTime(required=True)
