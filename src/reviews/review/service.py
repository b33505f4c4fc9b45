"""ReviewService — application service for review creation, deletion and queries.

Creation is serialised per session: a striped lock keyed by session id is
held around the unit of work, so two requests for the same session through
one service never interleave. Across processes and service instances the
unique ``session_id`` column rejects the second insert, either when the
session flushes or at commit, and that rejection is reported as a
ConflictError like the handler's own check.

After the unit of work commits the gate is updated. The result carries the
propagation state of the review's outbox rows.
"""

import threading
from dataclasses import dataclass, field

import structlog
from protean.exceptions import ObjectNotFoundError, TransactionError, ValidationError
from protean.utils.globals import current_domain
from sqlalchemy.exc import IntegrityError

from reviews.projections.completed_sessions import CompletedSession
from reviews.review.creation import CreateReview
from reviews.review.deletion import DeleteReview
from reviews.review.gate import REASON_ALREADY_REVIEWED, Eligibility, ReviewGate, get_gate, has_review
from reviews.review.review import MAX_RATING, MIN_RATING, Review
from shared.errors import ConflictError
from shared.outbox import FAILED, PUBLISHED, propagation_for, stream_name
from shared.queries import iter_all

logger = structlog.get_logger(__name__)

LOCK_STRIPES = 64
LATEST_REVIEWS = 5


@dataclass(frozen=True)
class ReviewResult:
    review_id: str
    propagation: str = PUBLISHED  # "published" | "pending" | "failed"

    @property
    def degraded(self) -> bool:
        return self.propagation == FAILED


@dataclass
class TutorStats:
    tutor_id: str
    total_reviews: int = 0
    average_rating: float = 0.0
    distribution: dict[int, int] = field(default_factory=lambda: dict.fromkeys(range(MIN_RATING, MAX_RATING + 1), 0))
    latest: list = field(default_factory=list)


class ReviewService:
    def __init__(self, gate: ReviewGate | None = None) -> None:
        self._gate = gate
        self._locks = [threading.Lock() for _ in range(LOCK_STRIPES)]

    @property
    def gate(self) -> ReviewGate:
        return self._gate or get_gate()

    def _lock_for(self, session_id) -> threading.Lock:
        return self._locks[hash(str(session_id)) % LOCK_STRIPES]

    # -------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------
    def create_review(self, **fields) -> ReviewResult:
        session_id = fields.get("session_id")

        with self._lock_for(session_id):
            try:
                review_id = current_domain.process(CreateReview(**fields), asynchronous=False)
            except ValidationError as exc:
                # Unique check in the DAO saw a review committed by another writer
                if "session_id" in exc.messages and has_review(session_id):
                    raise ConflictError({"session_id": [REASON_ALREADY_REVIEWED]}) from exc
                raise
            except (IntegrityError, TransactionError) as exc:
                # The unique index rejected the insert, on flush or at commit
                if has_review(session_id):
                    logger.info("review_insert_rejected", session_id=str(session_id))
                    raise ConflictError({"session_id": [REASON_ALREADY_REVIEWED]}) from exc
                raise

        self.gate.close(session_id)
        logger.info(
            "review_created",
            review_id=review_id,
            session_id=str(session_id),
            tutor_id=str(fields.get("tutor_id")),
            rating=fields.get("rating"),
        )
        return ReviewResult(review_id=review_id, propagation=self._propagation(review_id))

    def delete_review(self, review_id) -> ReviewResult:
        session_id = current_domain.process(DeleteReview(review_id=review_id), asynchronous=False)

        try:
            current_domain.repository_for(CompletedSession).get(session_id)
        except ObjectNotFoundError:
            pass
        else:
            self.gate.open(session_id)

        logger.info("review_deleted", review_id=str(review_id), session_id=session_id)
        return ReviewResult(review_id=str(review_id), propagation=self._propagation(review_id))

    def _propagation(self, review_id) -> str:
        return propagation_for(stream_name(Review, review_id))

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def can_review(self, session_id) -> Eligibility:
        return self.gate.can_review(session_id)

    def get(self, review_id) -> Review:
        return current_domain.repository_for(Review).get(str(review_id))

    def find(self, tutor_id=None, student_id=None, session_id=None) -> list[Review]:
        """Reviews matching the given filters, newest first."""
        criteria = {}
        if tutor_id is not None:
            criteria["tutor_id"] = str(tutor_id)
        if student_id is not None:
            criteria["student_id"] = str(student_id)
        if session_id is not None:
            criteria["session_id"] = str(session_id)

        query = current_domain.repository_for(Review)._dao.query
        found = list(iter_all(query.filter(**criteria) if criteria else query))
        return sorted(found, key=lambda r: r.created_at, reverse=True)

    def tutor_stats(self, tutor_id) -> TutorStats:
        """Totals, mean, per-star distribution and latest reviews for a tutor."""
        found = self.find(tutor_id=tutor_id)
        stats = TutorStats(tutor_id=str(tutor_id), total_reviews=len(found))
        if not found:
            return stats

        for review in found:
            stats.distribution[review.rating] += 1
        stats.average_rating = round(sum(r.rating for r in found) / len(found), 2)
        stats.latest = found[:LATEST_REVIEWS]
        return stats
