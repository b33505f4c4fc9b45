"""Outbox state of a context, as seen from the request side.

Requests never publish. Events are written to Protean's outbox in the unit
of work that raised them and the Engine's OutboxProcessor publishes them to
the broker, retrying with backoff. These helpers report where that stands:

- ``propagation_for``: the state of one aggregate's stream
- ``outbox_status``: queue depth per status for a whole context
"""

import structlog
from protean.utils.globals import current_domain
from protean.utils.outbox import OutboxStatus

logger = structlog.get_logger(__name__)

PUBLISHED = "published"
PENDING = "pending"
FAILED = "failed"

_FAILED_STATUSES = {OutboxStatus.FAILED.value, OutboxStatus.ABANDONED.value}
_PENDING_STATUSES = {OutboxStatus.PENDING.value, OutboxStatus.PROCESSING.value}


def stream_name(aggregate_cls, identifier) -> str:
    """Event stream of one aggregate instance, e.g. ``tutoring::session-<id>``."""
    return f"{aggregate_cls.meta_.stream_category}-{identifier}"


def propagation_for(stream: str, provider: str = "default") -> str:
    """Collapse the outbox rows of ``stream`` into one propagation state.

    ``failed`` when any row has failed or was abandoned after its retries,
    ``pending`` when any row still waits for the OutboxProcessor, otherwise
    ``published``. Must run inside the owning domain's context.
    """
    rows = current_domain._get_outbox_repo(provider).find_by_stream(stream, limit=None)
    statuses = {row.status for row in rows}

    if statuses & _FAILED_STATUSES:
        logger.warning("propagation_failed", stream=stream)
        return FAILED
    if statuses & _PENDING_STATUSES:
        return PENDING
    return PUBLISHED


def outbox_status(domain, provider: str = "default") -> dict:
    """Outbox counts of ``domain``; ``degraded`` when messages failed or were abandoned."""
    with domain.domain_context():
        counts = domain._get_outbox_repo(provider).count_by_status()

    degraded = any(counts.get(status, 0) for status in _FAILED_STATUSES)
    return {"status": "degraded" if degraded else "ok", "counts": counts}
