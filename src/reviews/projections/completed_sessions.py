"""CompletedSession — sessions the Tutoring context reported as completed.

Populated by the SessionCompleted handler. Keyed by session id, so
redelivered events overwrite the same row. The review gate is rebuilt from
this projection after a restart.
"""

from protean.fields import DateTime, Identifier, String

from reviews.domain import reviews


@reviews.projection
class CompletedSession:
    session_id = Identifier(identifier=True, required=True)
    tutor_id = String(required=True)
    student_id = String(required=True)
    subject = String(max_length=100)
    completed_at = DateTime(required=True)
