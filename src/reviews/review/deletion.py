"""DeleteReview — remove a review and announce it with ReviewDeleted.

Deletion is a compensating action for the Tutors context: it retracts the
review's rating from the tutor's average. The review is loaded inside the
handler's unit of work, so the event it raises is still collected after the
row is deleted.
"""

from protean.fields import Identifier
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from reviews.domain import reviews
from reviews.review.review import Review


@reviews.command(part_of="Review")
class DeleteReview:
    review_id = Identifier(required=True)


@reviews.command_handler(part_of=Review)
class DeleteReviewHandler:
    @handle(DeleteReview)
    def delete_review(self, command):
        repo = current_domain.repository_for(Review)
        review = repo.get(command.review_id)
        review.delete()
        repo._dao.delete(review)
        return str(review.session_id)
