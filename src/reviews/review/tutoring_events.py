"""Inbound cross-context event handler — Reviews reacts to Tutoring events.

Listens for SessionCompleted to record the completed session and open the
review gate for it. The other Tutoring events are registered too, so every
message on the ``tutoring::session`` stream deserializes; they have no
handler here and are acknowledged without effect.

Idempotent: the projection row is keyed by session id and opening the gate
twice is a no-op, so a redelivered SessionCompleted changes nothing.
"""

from datetime import UTC, datetime

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from reviews.domain import reviews
from reviews.projections.completed_sessions import CompletedSession
from reviews.review.gate import get_gate
from reviews.review.review import Review
from shared.events.tutoring import TUTORING_EVENT_TYPES, SessionCompleted

logger = structlog.get_logger(__name__)

# Register external events so Protean can deserialize them
for event_cls, type_string in TUTORING_EVENT_TYPES.items():
    reviews.register_external_event(event_cls, type_string)


@reviews.event_handler(part_of=Review, stream_category="tutoring::session")
class TutoringEventsHandler:
    """Reacts to Tutoring events to track which sessions may be reviewed."""

    @handle(SessionCompleted)
    def on_session_completed(self, event: SessionCompleted) -> None:
        repo = current_domain.repository_for(CompletedSession)
        try:
            repo.get(str(event.session_id))
        except ObjectNotFoundError:
            repo.add(
                CompletedSession(
                    session_id=str(event.session_id),
                    tutor_id=str(event.tutor_id),
                    student_id=str(event.student_id),
                    subject=event.subject,
                    completed_at=event.completed_at or datetime.now(UTC),
                )
            )

        get_gate().open(event.session_id)
        logger.info("session_reviewable", session_id=str(event.session_id), tutor_id=str(event.tutor_id))
