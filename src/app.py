"""TutorLink FastAPI application.

Multi-domain web server that processes commands synchronously via HTTP.
Each request is wrapped in the correct domain context based on URL prefix.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

from reviews.domain import reviews
from shared.api import register_coordination_handlers
from shared.outbox import outbox_status
from tutoring.domain import tutoring
from tutors.domain import tutors

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# PROTEAN_ENV selects the config overlay of each domain.toml.
tutoring.init()
reviews.init()
tutors.init()

# ---------------------------------------------------------------------------
# Route-to-domain mapping
# ---------------------------------------------------------------------------
_ROUTE_DOMAIN_MAP = {
    "/sessions": tutoring,
    "/reviews": reviews,
    "/tutors": tutors,
}


def _resolve_domain(path: str):
    """Return the domain for the given request path, or None."""
    for prefix, domain in _ROUTE_DOMAIN_MAP.items():
        if path.startswith(prefix):
            return domain
    return None


@asynccontextmanager
async def lifespan(app: FastAPI):
    from reviews.review.gate import rebuild_gate

    with reviews.domain_context():
        rebuild_gate()
    yield


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="TutorLink API",
    description="Tutoring sessions, session reviews and tutor ratings",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)
register_coordination_handlers(app)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the correct Protean domain context for each request."""
    domain = _resolve_domain(request.url.path)
    if domain is not None:
        with domain.domain_context():
            response = await call_next(request)
        return response
    # No domain match: health check, docs
    return await call_next(request)


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from reviews.api.routes import review_router  # noqa: E402
from tutoring.api.routes import session_router  # noqa: E402
from tutors.api.routes import tutor_router  # noqa: E402

app.include_router(session_router)
app.include_router(review_router)
app.include_router(tutor_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    """Liveness plus the outbox backlog of every context.

    ``degraded`` when some context holds messages the OutboxProcessor failed
    to publish; the state changes behind them are committed but the other
    contexts have not heard of them yet.
    """
    domains = {domain.name: outbox_status(domain) for domain in (tutoring, reviews, tutors)}
    degraded = any(d["status"] == "degraded" for d in domains.values())
    return JSONResponse(content={"status": "degraded" if degraded else "ok", "domains": domains})
