"""ApplyReviewRating / RetractReviewRating — keep a tutor's mean in step with reviews.

Both commands are idempotent against the aggregate's review ledger,
so a redelivered ReviewCreated or ReviewDeleted changes nothing, and a
ReviewCreated arriving after its ReviewDeleted is ignored.
"""

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from tutors.domain import tutors
from tutors.rating.rating import TutorRating

logger = structlog.get_logger(__name__)


@tutors.command(part_of="TutorRating")
class ApplyReviewRating:
    tutor_id = Identifier(required=True)
    review_id = Identifier(required=True)
    rating = Integer(required=True, min_value=1, max_value=5)


@tutors.command(part_of="TutorRating")
class RetractReviewRating:
    tutor_id = Identifier(required=True)
    review_id = Identifier(required=True)


def _load_or_start(repo, tutor_id) -> TutorRating:
    try:
        return repo.get(tutor_id)
    except ObjectNotFoundError:
        return TutorRating.start(tutor_id)


@tutors.command_handler(part_of=TutorRating)
class TutorRatingCommandHandler:
    @handle(ApplyReviewRating)
    def apply_review_rating(self, command):
        repo = current_domain.repository_for(TutorRating)
        rating = _load_or_start(repo, command.tutor_id)

        if not rating.apply(command.review_id, command.rating):
            logger.info(
                "review_rating_skipped",
                tutor_id=command.tutor_id,
                review_id=command.review_id,
                retracted=rating.is_retracted(command.review_id),
            )
            return False

        repo.add(rating)
        return True

    @handle(RetractReviewRating)
    def retract_review_rating(self, command):
        repo = current_domain.repository_for(TutorRating)
        rating = _load_or_start(repo, command.tutor_id)

        if not rating.retract(command.review_id):
            logger.info("review_rating_already_retracted", tutor_id=command.tutor_id, review_id=command.review_id)
            return False

        repo.add(rating)
        return True
