"""End-to-end flows across the tutoring, reviews and tutors contexts."""

from datetime import date

import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError
from reviews.domain import reviews
from reviews.review.review import Review
from shared.errors import NotEligibleError
from tutoring.domain import tutoring
from tutors.domain import tutors
from tutors.rating.rating import TutorRating


def _tutor_rating(tutor_id="7"):
    with tutors.domain_context():
        rating = current_domain.repository_for(TutorRating).get(tutor_id)
        return round(rating.average_rating, 2), rating.review_count


def _outbox_types(domain):
    with domain.domain_context():
        return sorted(r.type for r in domain._get_outbox_repo("default")._dao.query.all().items)


def _completed_session(lifecycle, deliver, tutor_id="7"):
    with tutoring.domain_context():
        session_id = lifecycle.book(
            tutor_id=tutor_id,
            student_id="9",
            subject="Calculus",
            date=date(2025, 3, 10),
            time="16:00",
            price=20000,
        ).session_id
        lifecycle.confirm(session_id)
        lifecycle.complete(session_id)
    deliver(tutoring)
    return session_id


def _review(review_service, session_id, rating):
    with reviews.domain_context():
        return review_service.create_review(session_id=session_id, tutor_id="7", student_id="9", rating=rating)


class TestEndToEnd:
    def test_session_to_tutor_rating(self, lifecycle, review_service, deliver):
        with tutoring.domain_context():
            booked = lifecycle.book(
                tutor_id="7",
                student_id="9",
                subject="Calculus",
                date=date(2025, 3, 10),
                time="16:00",
                price=20000,
            )
        session_id = booked.session_id
        assert booked.status == "pending"
        assert booked.propagation == "pending"
        assert _outbox_types(tutoring) == ["Tutoring.SessionCreated.v1"]

        deliver(tutoring)
        with reviews.domain_context():
            assert not review_service.can_review(session_id).eligible

        with tutoring.domain_context():
            lifecycle.confirm(session_id)
            completed = lifecycle.complete(session_id)
        assert completed.status == "completed"

        # Not reviewable until the completion is delivered
        with reviews.domain_context():
            assert not review_service.can_review(session_id).eligible
        assert deliver(tutoring) == 2

        with reviews.domain_context():
            assert review_service.can_review(session_id).eligible
            result = review_service.create_review(session_id=session_id, tutor_id="7", student_id="9", rating=4)
            assert review_service.get(result.review_id).rating == 4
            assert not review_service.can_review(session_id).eligible

        with tutors.domain_context():
            with pytest.raises(ObjectNotFoundError):
                current_domain.repository_for(TutorRating).get("7")

        assert deliver(reviews) == 1
        assert _tutor_rating() == (4.00, 1)

    def test_never_completed_session(self, lifecycle, review_service, deliver):
        with tutoring.domain_context():
            session_id = lifecycle.book(
                tutor_id="7",
                student_id="9",
                subject="Calculus",
                date=date(2025, 3, 10),
                time="16:00",
                price=20000,
            ).session_id
            lifecycle.confirm(session_id)
        deliver(tutoring)

        with reviews.domain_context():
            with pytest.raises(NotEligibleError):
                review_service.create_review(session_id=session_id, tutor_id="7", student_id="9", rating=4)
            assert current_domain.repository_for(Review)._dao.query.all().items == []

        assert _outbox_types(reviews) == []

    def test_several_reviews_stream_into_mean(self, lifecycle, review_service, deliver):
        for score in (5, 3, 4):
            _review(review_service, _completed_session(lifecycle, deliver), score)

        deliver(reviews)

        assert _tutor_rating() == (4.00, 3)


class TestRedelivery:
    def test_redelivered_review_created_counts_once(self, lifecycle, review_service, publish_outbox, consume, deliver):
        _review(review_service, _completed_session(lifecycle, deliver), 5)

        messages = publish_outbox(reviews)
        consume(messages)
        consume(messages)

        assert _tutor_rating() == (5.00, 1)

    def test_deleted_review_is_retracted_once(self, lifecycle, review_service, publish_outbox, consume, deliver):
        _review(review_service, _completed_session(lifecycle, deliver), 5)
        deleted_session = _completed_session(lifecycle, deliver)
        doomed = _review(review_service, deleted_session, 1)
        deliver(reviews)
        assert _tutor_rating() == (3.00, 2)

        with reviews.domain_context():
            review_service.delete_review(doomed.review_id)
            assert review_service.can_review(deleted_session).eligible

        messages = publish_outbox(reviews)
        consume(messages)
        consume(messages)
        assert _tutor_rating() == (5.00, 1)

    def test_delete_delivered_before_create(self, lifecycle, review_service, publish_outbox, consume, deliver):
        session_id = _completed_session(lifecycle, deliver)
        result = _review(review_service, session_id, 2)
        created = publish_outbox(reviews)

        with reviews.domain_context():
            review_service.delete_review(result.review_id)
        deleted = publish_outbox(reviews)

        consume(deleted)
        consume(created)

        assert _tutor_rating() == (0.00, 0)

    def test_batch_consumed_in_reverse_order(self, lifecycle, review_service, publish_outbox, consume, deliver):
        kept = _review(review_service, _completed_session(lifecycle, deliver), 4)
        doomed = _review(review_service, _completed_session(lifecycle, deliver), 1)
        _review(review_service, _completed_session(lifecycle, deliver), 2)
        with reviews.domain_context():
            review_service.delete_review(doomed.review_id)

        messages = publish_outbox(reviews)
        assert len(messages) == 4

        consume(list(reversed(messages)))

        assert _tutor_rating() == (3.00, 2)
        with tutors.domain_context():
            rating = current_domain.repository_for(TutorRating).get("7")
            assert rating.has_applied(kept.review_id)
            assert rating.is_retracted(doomed.review_id)


class TestRestart:
    def test_gate_rebuilt_after_restart(self, lifecycle, review_service, deliver):
        from reviews.review.gate import rebuild_gate, reset_gate

        session_id = _completed_session(lifecycle, deliver)

        reset_gate()
        with reviews.domain_context():
            assert rebuild_gate() == 1
            result = review_service.create_review(session_id=session_id, tutor_id="7", student_id="9", rating=4)
            assert result.review_id

    def test_undelivered_completion_is_picked_up_later(self, lifecycle, review_service, deliver):
        with tutoring.domain_context():
            session_id = lifecycle.book(
                tutor_id="7",
                student_id="9",
                subject="Calculus",
                date=date(2025, 3, 10),
                time="16:00",
                price=20000,
            ).session_id
            lifecycle.confirm(session_id)
            lifecycle.complete(session_id)

        # The committed outbox rows survive until a worker publishes them
        with reviews.domain_context():
            assert not review_service.can_review(session_id).eligible

        deliver(tutoring)

        with reviews.domain_context():
            assert review_service.can_review(session_id).eligible
