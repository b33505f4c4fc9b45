from protean.fields import DateTime, Float, Identifier, Integer

from tutors.domain import tutors


@tutors.event(part_of="TutorRating")
class TutorRatingChanged:
    """A review was folded into, or retracted from, the tutor's rating."""

    __version__ = 1

    tutor_id = Identifier(required=True)
    review_id = Identifier(required=True)
    average_rating = Float(required=True)
    review_count = Integer(required=True)
    changed_at = DateTime(required=True)
