"""Session aggregate — a tutoring session booked by a student with a tutor.

CQRS (not event sourced). Status only moves along the lifecycle graph and
never leaves a terminal state.

State Machine (4 states):
    PENDING → CONFIRMED | CANCELLED
    CONFIRMED → COMPLETED | CANCELLED
    COMPLETED → (terminal)
    CANCELLED → (terminal)
"""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Date, DateTime, Float, Identifier, Integer, String, Text

from shared.errors import ConflictError
from tutoring.domain import tutoring
from tutoring.session.events import (
    SessionCancelled,
    SessionCompleted,
    SessionConfirmed,
    SessionCreated,
    SessionDeleted,
)


class SessionStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Modality(Enum):
    ONLINE = "online"
    IN_PERSON = "in_person"


_VALID_TRANSITIONS = {
    SessionStatus.PENDING: {SessionStatus.CONFIRMED, SessionStatus.CANCELLED},
    SessionStatus.CONFIRMED: {SessionStatus.COMPLETED, SessionStatus.CANCELLED},
    SessionStatus.COMPLETED: set(),
    SessionStatus.CANCELLED: set(),
}

DEFAULT_DURATION_MINUTES = 60


@tutoring.aggregate
class Session:
    """A one-to-one tutoring session."""

    tutor_id = Identifier(required=True)
    student_id = Identifier(required=True)
    subject = String(required=True, max_length=100)
    date = Date(required=True)
    time = String(required=True, max_length=8)
    duration = Integer(default=DEFAULT_DURATION_MINUTES, min_value=1)
    price = Float(required=True, min_value=0.0)
    modality = String(choices=Modality, default=Modality.ONLINE.value)
    notes = Text(default="")
    status = String(choices=SessionStatus, default=SessionStatus.PENDING.value)

    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def subject_must_not_be_blank(self):
        if self.subject is not None and len(self.subject.strip()) == 0:
            raise ValidationError({"subject": ["Subject cannot be empty"]})

    @invariant.post
    def time_must_look_like_a_clock_time(self):
        if self.time and not _is_clock_time(self.time):
            raise ValidationError({"time": ["Time must be formatted as HH:MM"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def book(
        cls,
        tutor_id,
        student_id,
        subject,
        date,
        time,
        price,
        duration=None,
        modality=None,
        notes=None,
    ):
        """Book a new session in PENDING status."""
        now = datetime.now(UTC)

        session = cls(
            tutor_id=tutor_id,
            student_id=student_id,
            subject=subject,
            date=date,
            time=time,
            price=price,
            duration=duration or DEFAULT_DURATION_MINUTES,
            modality=modality or Modality.ONLINE.value,
            notes=notes or "",
            status=SessionStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )

        session.raise_(
            SessionCreated(
                session_id=str(session.id),
                tutor_id=str(session.tutor_id),
                student_id=str(session.student_id),
                subject=session.subject,
                date=session.date,
                time=session.time,
                price=session.price,
                created_at=now,
            )
        )

        return session

    # -------------------------------------------------------------------
    # State transitions
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        current = SessionStatus(self.status)
        if target_status not in _VALID_TRANSITIONS[current]:
            raise ConflictError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    def confirm(self):
        """Tutor accepts the booking."""
        self._assert_can_transition(SessionStatus.CONFIRMED)

        now = datetime.now(UTC)
        self.status = SessionStatus.CONFIRMED.value
        self.updated_at = now

        self.raise_(
            SessionConfirmed(
                session_id=str(self.id),
                tutor_id=str(self.tutor_id),
                confirmed_at=now,
            )
        )

    def cancel(self):
        """Either party calls the session off before it is held."""
        previous = SessionStatus(self.status)
        self._assert_can_transition(SessionStatus.CANCELLED)

        now = datetime.now(UTC)
        self.status = SessionStatus.CANCELLED.value
        self.updated_at = now

        self.raise_(
            SessionCancelled(
                session_id=str(self.id),
                previous_status=previous.value,
                cancelled_at=now,
            )
        )

    def complete(self):
        """Tutor marks a confirmed session as held."""
        self._assert_can_transition(SessionStatus.COMPLETED)

        now = datetime.now(UTC)
        self.status = SessionStatus.COMPLETED.value
        self.updated_at = now

        self.raise_(
            SessionCompleted(
                session_id=str(self.id),
                tutor_id=str(self.tutor_id),
                student_id=str(self.student_id),
                subject=self.subject,
                completed_at=now,
            )
        )

    def delete(self):
        """Record the removal of a session that was never held.

        A completed session may already carry a review, so it stays.
        The handler removes the session from the store.
        """
        if SessionStatus(self.status) == SessionStatus.COMPLETED:
            raise ConflictError({"status": ["A completed session cannot be deleted"]})

        self.raise_(
            SessionDeleted(
                session_id=str(self.id),
                tutor_id=str(self.tutor_id),
                previous_status=self.status,
                deleted_at=datetime.now(UTC),
            )
        )


def _is_clock_time(value: str) -> bool:
    parts = value.split(":")
    if len(parts) not in (2, 3) or not all(p.isdigit() and len(p) == 2 for p in parts):
        return False
    hours, minutes = int(parts[0]), int(parts[1])
    return 0 <= hours < 24 and 0 <= minutes < 60
