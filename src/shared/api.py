"""FastAPI exception handlers for the coordination errors in ``shared.errors``.

Protean's own exceptions (ValidationError, ObjectNotFoundError) are mapped by
``protean.integrations.fastapi.register_exception_handlers``; this adds the
rest, rendered with the same ``{"error": messages}`` body.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from shared.errors import ConflictError, CoordinationError, NotEligibleError

logger = structlog.get_logger(__name__)

STATUS_CODES = {
    NotEligibleError: 400,
    ConflictError: 409,
}


async def coordination_error_handler(request: Request, exc: CoordinationError) -> JSONResponse:
    status_code = STATUS_CODES.get(type(exc), 400)
    logger.info(
        "request_rejected",
        path=request.url.path,
        error=type(exc).__name__,
        status_code=status_code,
    )
    return JSONResponse(status_code=status_code, content={"error": exc.messages})


def register_coordination_handlers(app: FastAPI) -> None:
    for exc_class in STATUS_CODES:
        app.add_exception_handler(exc_class, coordination_error_handler)
