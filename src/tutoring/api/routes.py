"""FastAPI routes for the Tutoring bounded context.

Each route translates between Pydantic schemas (external contract) and the
SessionLifecycle service, which owns command processing and reports how
far the resulting events have propagated.
"""

from typing import Literal

from fastapi import APIRouter

from tutoring.api.schemas import BookSessionRequest, LifecycleResponse, SessionResponse
from tutoring.session.lifecycle import LifecycleResult, SessionLifecycle

session_router = APIRouter(prefix="/sessions", tags=["sessions"])

lifecycle = SessionLifecycle()


def _session_response(session) -> SessionResponse:
    return SessionResponse(
        session_id=str(session.id),
        tutor_id=str(session.tutor_id),
        student_id=str(session.student_id),
        subject=session.subject,
        date=session.date,
        time=session.time,
        duration=session.duration,
        price=session.price,
        modality=session.modality,
        notes=session.notes or "",
        status=session.status,
    )


def _lifecycle_response(result: LifecycleResult) -> LifecycleResponse:
    return LifecycleResponse(
        session_id=result.session_id,
        status=result.status,
        propagation=result.propagation,
    )


@session_router.post("", status_code=201, response_model=LifecycleResponse)
async def book_session(body: BookSessionRequest) -> LifecycleResponse:
    """Book a new tutoring session."""
    result = lifecycle.book(**body.model_dump(exclude_none=True))
    return _lifecycle_response(result)


@session_router.get("", response_model=list[SessionResponse])
async def list_sessions(
    tutor_id: str | None = None,
    student_id: str | None = None,
    status: Literal["pending", "confirmed", "completed", "cancelled"] | None = None,
) -> list[SessionResponse]:
    """List sessions, optionally filtered by tutor, student or status."""
    return [_session_response(s) for s in lifecycle.find(tutor_id=tutor_id, student_id=student_id, status=status)]


@session_router.get("/{session_id}", response_model=SessionResponse)
async def get_session(session_id: str) -> SessionResponse:
    return _session_response(lifecycle.get(session_id))


@session_router.put("/{session_id}/confirm", response_model=LifecycleResponse)
async def confirm_session(session_id: str) -> LifecycleResponse:
    """Tutor confirms a pending session."""
    return _lifecycle_response(lifecycle.confirm(session_id))


@session_router.put("/{session_id}/cancel", response_model=LifecycleResponse)
async def cancel_session(session_id: str) -> LifecycleResponse:
    """Cancel a session that has not been completed."""
    return _lifecycle_response(lifecycle.cancel(session_id))


@session_router.put("/{session_id}/complete", response_model=LifecycleResponse)
async def complete_session(session_id: str) -> LifecycleResponse:
    """Tutor marks a confirmed session as completed."""
    return _lifecycle_response(lifecycle.complete(session_id))


@session_router.delete("/{session_id}", response_model=LifecycleResponse)
async def delete_session(session_id: str) -> LifecycleResponse:
    """Delete a session that has not been completed."""
    return _lifecycle_response(lifecycle.delete(session_id))
