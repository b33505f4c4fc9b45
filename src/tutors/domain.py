"""Tutors bounded context — each tutor's aggregate rating.

Folds ReviewCreated into a running mean and ReviewDeleted back out of it.
The context never reads the Reviews store; everything it knows arrives on
the ``reviews::review`` stream.
"""

import structlog
from protean.domain import Domain

tutors = Domain(name="tutors")

logger = structlog.get_logger(__name__)
