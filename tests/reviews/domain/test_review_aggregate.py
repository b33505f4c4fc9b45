"""Tests for the Review aggregate and its SubRatings value object."""

import pytest
from protean.exceptions import ValidationError
from reviews.review.events import ReviewCreated, ReviewDeleted
from reviews.review.review import Review, SubRatings


def _create(**overrides):
    defaults = {"session_id": "sess-1", "tutor_id": "7", "student_id": "9", "rating": 4}
    defaults.update(overrides)
    return Review.create(**defaults)


class TestReviewCreation:
    def test_create(self):
        review = _create(comment="Very clear")
        assert review.rating == 4
        assert review.comment == "Very clear"
        assert review.created_at is not None

    def test_comment_defaults_to_empty(self):
        assert _create().comment == ""

    def test_no_sub_ratings_by_default(self):
        assert _create().sub_ratings is None

    def test_sub_ratings(self):
        review = _create(punctuality=5, clarity=4)
        assert review.sub_ratings == SubRatings(punctuality=5, clarity=4)
        assert review.sub_ratings.patience is None

    def test_raises_review_created(self):
        review = _create()
        assert len(review._events) == 1
        event = review._events[0]
        assert isinstance(event, ReviewCreated)
        assert event.session_id == "sess-1"
        assert event.rating == 4


class TestRatingRange:
    @pytest.mark.parametrize("rating", [1, 2, 3, 4, 5])
    def test_valid_ratings(self, rating):
        assert _create(rating=rating).rating == rating

    @pytest.mark.parametrize("rating", [0, 6, -1, 100])
    def test_out_of_range_rejected(self, rating):
        with pytest.raises(ValidationError) as exc:
            _create(rating=rating)
        assert "Rating must be between 1 and 5" in str(exc.value)

    def test_missing_rating_rejected(self):
        with pytest.raises(ValidationError) as exc:
            Review(session_id="sess-1", tutor_id="7", student_id="9")
        assert "rating" in exc.value.messages

    @pytest.mark.parametrize("field", ["punctuality", "clarity", "patience"])
    def test_sub_rating_out_of_range_rejected(self, field):
        with pytest.raises(ValidationError) as exc:
            _create(**{field: 6})
        assert field in exc.value.messages


class TestReviewDeletion:
    def test_delete_raises_review_deleted(self):
        review = _create()
        review._events.clear()
        review.delete()
        event = review._events[-1]
        assert isinstance(event, ReviewDeleted)
        assert event.review_id == str(review.id)
        assert event.rating == 4
