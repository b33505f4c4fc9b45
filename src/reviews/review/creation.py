"""CreateReview — the student reviews a completed session.

Checks run in a fixed order so the caller always learns the most specific
reason first:

1. field validation (command and aggregate) raises ValidationError
2. a review already stored for the session raises ConflictError
3. a session not in the review gate raises NotEligibleError

Review.create raises ReviewCreated, which is written to the outbox together
with the review.
"""

from protean.fields import Identifier, Integer, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from reviews.domain import reviews
from reviews.review.gate import REASON_ALREADY_REVIEWED, REASON_NOT_COMPLETED, get_gate, has_review
from reviews.review.review import Review
from shared.errors import ConflictError, NotEligibleError


@reviews.command(part_of="Review")
class CreateReview:
    session_id = Identifier(required=True)
    tutor_id = Identifier(required=True)
    student_id = Identifier(required=True)
    rating = Integer(required=True)
    comment = Text()
    punctuality = Integer()
    clarity = Integer()
    patience = Integer()


@reviews.command_handler(part_of=Review)
class CreateReviewHandler:
    @handle(CreateReview)
    def create_review(self, command):
        review = Review.create(
            session_id=command.session_id,
            tutor_id=command.tutor_id,
            student_id=command.student_id,
            rating=command.rating,
            comment=command.comment,
            punctuality=command.punctuality,
            clarity=command.clarity,
            patience=command.patience,
        )

        if has_review(command.session_id):
            raise ConflictError({"session_id": [REASON_ALREADY_REVIEWED]})
        if not get_gate().is_completed(command.session_id):
            raise NotEligibleError({"session_id": [REASON_NOT_COMPLETED]})

        current_domain.repository_for(Review).add(review)
        return str(review.id)
