"""Tutoring bounded context — session booking and lifecycle.

Owns the Session aggregate and its state machine. Announces bookings and
completions to the other contexts through Protean's outbox, written in the
same unit of work as the state change and published by the Engine.
"""

from protean.domain import Domain

from shared.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

tutoring = Domain(name="tutoring")
