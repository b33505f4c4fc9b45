"""SessionLifecycle — application service in front of the Session commands.

Runs each command synchronously, so the state change and its outbox rows are
committed when ``process()`` returns. Publishing is left to the Engine's
OutboxProcessor, which therefore never announces a transition that did not
happen. The result carries the propagation state of the session's stream:
``pending`` until the processor publishes, ``failed`` once a publish of this
session has failed, and ``published`` when everything went out.
"""

from dataclasses import dataclass

import structlog
from protean.utils.globals import current_domain

from shared.outbox import FAILED, PUBLISHED, propagation_for, stream_name
from tutoring.session.booking import BookSession
from tutoring.session.cancellation import CancelSession
from tutoring.session.completion import CompleteSession
from tutoring.session.confirmation import ConfirmSession
from tutoring.session.deletion import DeleteSession
from tutoring.session.session import Session, SessionStatus

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class LifecycleResult:
    session_id: str
    status: str
    propagation: str = PUBLISHED  # "published" | "pending" | "failed"

    @property
    def degraded(self) -> bool:
        return self.propagation == FAILED


class SessionLifecycle:
    # -------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------
    def book(self, **fields) -> LifecycleResult:
        session_id = current_domain.process(BookSession(**fields), asynchronous=False)
        logger.info("session_booked", session_id=session_id, tutor_id=str(fields.get("tutor_id")))
        return self._result(session_id)

    def confirm(self, session_id) -> LifecycleResult:
        current_domain.process(ConfirmSession(session_id=session_id), asynchronous=False)
        logger.info("session_confirmed", session_id=str(session_id))
        return self._result(session_id)

    def cancel(self, session_id) -> LifecycleResult:
        current_domain.process(CancelSession(session_id=session_id), asynchronous=False)
        logger.info("session_cancelled", session_id=str(session_id))
        return self._result(session_id)

    def complete(self, session_id) -> LifecycleResult:
        current_domain.process(CompleteSession(session_id=session_id), asynchronous=False)
        logger.info("session_completed", session_id=str(session_id))
        return self._result(session_id)

    def delete(self, session_id) -> LifecycleResult:
        current_domain.process(DeleteSession(session_id=session_id), asynchronous=False)
        logger.info("session_deleted", session_id=str(session_id))
        return self._result(session_id, status="deleted")

    def _result(self, session_id, status=None) -> LifecycleResult:
        return LifecycleResult(
            session_id=str(session_id),
            status=status or self.get(session_id).status,
            propagation=propagation_for(stream_name(Session, session_id)),
        )

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def get(self, session_id) -> Session:
        return current_domain.repository_for(Session).get(str(session_id))

    def find(self, tutor_id=None, student_id=None, status=None) -> list[Session]:
        """Sessions matching the given filters, latest date and time first."""
        criteria = {}
        if tutor_id is not None:
            criteria["tutor_id"] = str(tutor_id)
        if student_id is not None:
            criteria["student_id"] = str(student_id)
        if status is not None:
            criteria["status"] = SessionStatus(status).value

        query = current_domain.repository_for(Session)._dao.query
        sessions = (query.filter(**criteria) if criteria else query).all().items
        return sorted(sessions, key=lambda s: (s.date, s.time), reverse=True)
