"""Reviews bounded context — session reviews and review eligibility.

Handles review creation (one review per completed session), deletion, and
per-tutor review statistics. Learns about completed sessions from the
Tutoring context from SessionCompleted events on the ``tutoring::session``
stream and announces ReviewCreated / ReviewDeleted on ``reviews::review``
for the Tutors context.
"""

import structlog
from protean.domain import Domain

reviews = Domain(name="reviews")

logger = structlog.get_logger(__name__)
