"""TutorRating aggregate — streaming mean of a tutor's review ratings.

CQRS (not event sourced). The mean is updated incrementally, one review at
a time:

    apply:    n' = n + 1,  m' = (m * n + r) / n'
    retract:  n' = n - 1,  m' = (m * n - r) / n'   (0 when n' == 0)

Every review the tutor has heard of is kept as an AppliedReview child, and
that ledger is what makes delivery order and redelivery safe:

- a review id already in the ledger is never applied again
- a retraction uses the rating that was actually applied and leaves the
  entry behind as a tombstone (``retracted_at`` set) instead of removing it
- a retraction of an id the ledger has never seen records a tombstone, so a
  ReviewCreated delivered after its ReviewDeleted is skipped

``recompute`` rebuilds mean and count from the live (non-tombstoned) entries.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer

from tutors.domain import tutors
from tutors.rating.events import TutorRatingChanged


@tutors.entity(part_of="TutorRating")
class AppliedReview:
    review_id = Identifier(required=True)
    rating = Integer(min_value=1, max_value=5)  # None on a tombstone of a never-applied review
    applied_at = DateTime()
    retracted_at = DateTime()


def _is_live(entry) -> bool:
    return entry.retracted_at is None and entry.rating is not None


@tutors.aggregate
class TutorRating:
    tutor_id = Identifier(identifier=True, required=True)
    average_rating = Float(default=0.0)
    review_count = Integer(default=0)
    applied_reviews = HasMany(AppliedReview)
    updated_at = DateTime()

    @invariant.post
    def average_must_be_a_valid_rating(self):
        if self.review_count and not (0.0 <= self.average_rating <= 5.0):
            raise ValidationError({"average_rating": ["Average rating must be between 0 and 5"]})

    @classmethod
    def start(cls, tutor_id):
        """A tutor with no reviews yet: (0, 0)."""
        return cls(tutor_id=tutor_id, average_rating=0.0, review_count=0, updated_at=datetime.now(UTC))

    def _entry(self, review_id):
        return next((a for a in self.applied_reviews if str(a.review_id) == str(review_id)), None)

    def has_applied(self, review_id) -> bool:
        """Whether the review currently counts towards the mean."""
        entry = self._entry(review_id)
        return entry is not None and _is_live(entry)

    def is_retracted(self, review_id) -> bool:
        entry = self._entry(review_id)
        return entry is not None and entry.retracted_at is not None

    def apply(self, review_id, rating) -> bool:
        """Fold a review into the mean.

        Returns False when the review was already applied or already retracted.
        """
        if self._entry(review_id) is not None:
            return False

        now = datetime.now(UTC)
        n, m = self.review_count, self.average_rating
        self.review_count = n + 1
        self.average_rating = (m * n + rating) / self.review_count
        self.add_applied_reviews(AppliedReview(review_id=review_id, rating=rating, applied_at=now))
        self.updated_at = now

        self._changed(review_id, now)
        return True

    def retract(self, review_id) -> bool:
        """Take a review back out of the mean, leaving a tombstone.

        Returns False when the review was already retracted. A review that was
        never applied gets a tombstone and leaves the mean untouched.
        """
        entry = self._entry(review_id)
        if entry is not None and entry.retracted_at is not None:
            return False

        now = datetime.now(UTC)
        if entry is None:
            self.add_applied_reviews(AppliedReview(review_id=review_id, retracted_at=now))
            self.updated_at = now
            return True

        n, m = self.review_count, self.average_rating
        self.review_count = n - 1
        self.average_rating = (m * n - entry.rating) / self.review_count if self.review_count else 0.0
        entry.retracted_at = now
        self.add_applied_reviews(entry)
        self.updated_at = now

        self._changed(review_id, now)
        return True

    def recompute(self):
        """Rebuild mean and count from the live applied reviews."""
        ratings = [a.rating for a in self.applied_reviews if _is_live(a)]
        self.review_count = len(ratings)
        self.average_rating = sum(ratings) / len(ratings) if ratings else 0.0
        self.updated_at = datetime.now(UTC)

    def _changed(self, review_id, now):
        self.raise_(
            TutorRatingChanged(
                tutor_id=str(self.tutor_id),
                review_id=str(review_id),
                average_rating=self.average_rating,
                review_count=self.review_count,
                changed_at=now,
            )
        )
