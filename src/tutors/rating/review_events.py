"""Inbound cross-context event handler — Tutors reacts to Reviews events.

ReviewCreated folds the rating into the tutor's mean and ReviewDeleted
retracts it. Both are idempotent, and the order they arrive in does not
matter (see ``tutors.rating.rating``).

The Engine reads the ``reviews::review`` stream with one consumer group per
handler class, so horizontally scaled workers compete for messages instead
of each applying every one.

Cross-context events are imported from shared.events.reviews and registered
as external events via tutors.register_external_event().
"""

import structlog
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from shared.events.reviews import REVIEW_EVENT_TYPES, ReviewCreated, ReviewDeleted
from tutors.domain import tutors
from tutors.rating.aggregation import ApplyReviewRating, RetractReviewRating
from tutors.rating.rating import TutorRating

logger = structlog.get_logger(__name__)

# Register external events so Protean can deserialize them
for event_cls, type_string in REVIEW_EVENT_TYPES.items():
    tutors.register_external_event(event_cls, type_string)


@tutors.event_handler(part_of=TutorRating, stream_category="reviews::review")
class ReviewEventsHandler:
    """Keeps each tutor's rating in step with the reviews written about them."""

    @handle(ReviewCreated)
    def on_review_created(self, event: ReviewCreated) -> None:
        applied = current_domain.process(
            ApplyReviewRating(tutor_id=event.tutor_id, review_id=event.review_id, rating=event.rating),
            asynchronous=False,
        )
        if applied:
            logger.info(
                "tutor_rating_applied",
                tutor_id=str(event.tutor_id),
                review_id=str(event.review_id),
                rating=event.rating,
            )

    @handle(ReviewDeleted)
    def on_review_deleted(self, event: ReviewDeleted) -> None:
        retracted = current_domain.process(
            RetractReviewRating(tutor_id=event.tutor_id, review_id=event.review_id),
            asynchronous=False,
        )
        if retracted:
            logger.info("tutor_rating_retracted", tutor_id=str(event.tutor_id), review_id=str(event.review_id))
