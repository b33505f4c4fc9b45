"""Review aggregate — a student's review of one completed tutoring session.

CQRS (not event sourced). A review is written once and never edited; it can
only be deleted. At most one review exists per session: ``session_id`` is
declared unique so the storage layer rejects a second insert, and the
CreateReview handler checks the store before writing.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, Integer, Text, ValueObject

from reviews.domain import reviews
from reviews.review.events import ReviewCreated, ReviewDeleted

MIN_RATING = 1
MAX_RATING = 5


def _check_range(field_name, value):
    if value is not None and not (MIN_RATING <= value <= MAX_RATING):
        raise ValidationError({field_name: [f"Rating must be between {MIN_RATING} and {MAX_RATING}"]})


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@reviews.value_object(part_of="Review")
class SubRatings:
    """Optional per-aspect scores. Each is 1..5 or absent."""

    punctuality = Integer()
    clarity = Integer()
    patience = Integer()

    @invariant.post
    def scores_must_be_in_range(self):
        _check_range("punctuality", self.punctuality)
        _check_range("clarity", self.clarity)
        _check_range("patience", self.patience)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@reviews.aggregate
class Review:
    """A review left by the student of a completed session."""

    session_id = Identifier(required=True, unique=True)
    tutor_id = Identifier(required=True)
    student_id = Identifier(required=True)

    rating = Integer(required=True)
    comment = Text(default="")
    sub_ratings = ValueObject(SubRatings)

    created_at = DateTime()

    @invariant.post
    def rating_must_be_in_range(self):
        _check_range("rating", self.rating)

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        session_id,
        tutor_id,
        student_id,
        rating,
        comment=None,
        punctuality=None,
        clarity=None,
        patience=None,
    ):
        """Create the review of a session."""
        now = datetime.now(UTC)

        sub_ratings = None
        if any(score is not None for score in (punctuality, clarity, patience)):
            sub_ratings = SubRatings(punctuality=punctuality, clarity=clarity, patience=patience)

        review = cls(
            session_id=session_id,
            tutor_id=tutor_id,
            student_id=student_id,
            rating=rating,
            comment=comment or "",
            sub_ratings=sub_ratings,
            created_at=now,
        )

        review.raise_(
            ReviewCreated(
                review_id=str(review.id),
                session_id=str(review.session_id),
                tutor_id=str(review.tutor_id),
                student_id=str(review.student_id),
                rating=review.rating,
                comment=review.comment,
                created_at=now,
            )
        )

        return review

    def delete(self):
        """Record the deletion. The handler removes the review from the store."""
        self.raise_(
            ReviewDeleted(
                review_id=str(self.id),
                session_id=str(self.session_id),
                tutor_id=str(self.tutor_id),
                rating=self.rating,
                deleted_at=datetime.now(UTC),
            )
        )
