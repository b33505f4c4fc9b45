"""Cross-context event contracts for Reviews domain events.

These classes define the event shape for consumption by other contexts (the
Tutors context folds ReviewCreated into a tutor's mean and takes
ReviewDeleted back out of it). They are registered as external events via
domain.register_external_event() with matching __type__ strings so Protean's
stream deserialization works correctly.

The source-of-truth events are in src/reviews/review/events.py.
"""

from protean.core.event import BaseEvent
from protean.fields import DateTime, Identifier, Integer, Text


class ReviewCreated(BaseEvent):
    """A student reviewed a completed session."""

    __version__ = 1

    review_id = Identifier(required=True)
    session_id = Identifier(required=True)
    tutor_id = Identifier(required=True)
    student_id = Identifier(required=True)
    rating = Integer(required=True)
    comment = Text()
    created_at = DateTime(required=True)


class ReviewDeleted(BaseEvent):
    """A review was deleted; its rating must be taken out of the tutor's mean."""

    __version__ = 1

    review_id = Identifier(required=True)
    session_id = Identifier(required=True)
    tutor_id = Identifier(required=True)
    rating = Integer(required=True)
    deleted_at = DateTime(required=True)


REVIEW_EVENT_TYPES = {
    ReviewCreated: "Reviews.ReviewCreated.v1",
    ReviewDeleted: "Reviews.ReviewDeleted.v1",
}
