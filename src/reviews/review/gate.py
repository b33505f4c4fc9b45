"""Review gate — which sessions may be reviewed right now.

The Reviewable Registry is a process-local set of session ids that have
completed and not yet been reviewed. It is a warm cache of that predicate,
not a source of truth:

- SessionCompleted adds an id (TutoringEventsHandler)
- an accepted review removes it (ReviewService)
- a deleted review puts it back when the session is known to be completed
- on process start it is rebuilt from the CompletedSession projection minus
  the sessions that already have a review (``rebuild_gate``)
- a registry miss is checked against the projection and cached on a hit

``can_review`` consults the Review store first. The store, with its unique
``session_id``, is what keeps a session from being reviewed twice; the
registry only answers "has this session completed".

The registry is mutated from event handlers and request handlers
concurrently, so every access goes through one lock.
"""

import threading
from dataclasses import dataclass

import structlog
from protean.utils.globals import current_domain

from reviews.projections.completed_sessions import CompletedSession
from reviews.review.review import Review
from shared.queries import iter_all

logger = structlog.get_logger(__name__)

REASON_ELIGIBLE = "Session completed, it can be reviewed"
REASON_ALREADY_REVIEWED = "This session already has a review"
REASON_NOT_COMPLETED = "The session must be completed first"


@dataclass(frozen=True)
class Eligibility:
    eligible: bool
    reason: str


class ReviewGate:
    """Lock-guarded registry of reviewable session ids."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._sessions: set[str] = set()

    def open(self, session_id) -> None:
        with self._lock:
            self._sessions.add(str(session_id))

    def close(self, session_id) -> None:
        with self._lock:
            self._sessions.discard(str(session_id))

    def rebuild(self, session_ids) -> None:
        with self._lock:
            self._sessions = {str(s) for s in session_ids}

    def __contains__(self, session_id) -> bool:
        with self._lock:
            return str(session_id) in self._sessions

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def is_completed(self, session_id) -> bool:
        """Registry lookup, falling back to the CompletedSession projection on a miss.

        Another process, such as the Engine worker, may have handled the
        SessionCompleted event; a hit in the projection warms the registry.
        """
        if session_id in self:
            return True
        if not _completed_session_exists(session_id):
            return False
        self.open(session_id)
        return True

    def can_review(self, session_id) -> Eligibility:
        if has_review(session_id):
            return Eligibility(eligible=False, reason=REASON_ALREADY_REVIEWED)
        if not self.is_completed(session_id):
            return Eligibility(eligible=False, reason=REASON_NOT_COMPLETED)
        return Eligibility(eligible=True, reason=REASON_ELIGIBLE)


def has_review(session_id) -> bool:
    """Authoritative check against the Review store."""
    repo = current_domain.repository_for(Review)
    return bool(repo._dao.query.filter(session_id=str(session_id)).all().items)


def _completed_session_exists(session_id) -> bool:
    repo = current_domain.repository_for(CompletedSession)
    return bool(repo._dao.query.filter(session_id=str(session_id)).all().items)


def rebuild_gate(gate: "ReviewGate | None" = None) -> int:
    """Rebuild the registry from completed sessions that have no review.

    Must run inside the reviews domain context. Returns the registry size.
    """
    gate = gate or get_gate()
    completed = list(iter_all(current_domain.repository_for(CompletedSession)._dao.query))
    reviewable = [c.session_id for c in completed if not has_review(c.session_id)]
    gate.rebuild(reviewable)
    logger.info("review_gate_rebuilt", reviewable=len(reviewable), completed=len(completed))
    return len(reviewable)


_current_gate: ReviewGate | None = None
_gate_lock = threading.Lock()


def get_gate() -> ReviewGate:
    """Return the process-wide gate."""
    global _current_gate
    with _gate_lock:
        if _current_gate is None:
            _current_gate = ReviewGate()
        return _current_gate


def reset_gate() -> None:
    """Drop the process-wide gate (useful for tests and simulated restarts)."""
    global _current_gate
    with _gate_lock:
        _current_gate = None
