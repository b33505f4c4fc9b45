"""FastAPI routes for the Reviews bounded context.

Each route translates between Pydantic schemas (external contract) and the
ReviewService, which owns command processing, the review gate and
propagation reporting.
"""

from fastapi import APIRouter

from reviews.api.schemas import (
    CreateReviewRequest,
    EligibilityResponse,
    ReviewResponse,
    ReviewResultResponse,
    SubRatingsSchema,
    TutorStatsResponse,
)
from reviews.review.service import ReviewResult, ReviewService

review_router = APIRouter(prefix="/reviews", tags=["reviews"])

service = ReviewService()


def _review_response(review) -> ReviewResponse:
    sub_ratings = None
    if review.sub_ratings is not None:
        sub_ratings = SubRatingsSchema(
            punctuality=review.sub_ratings.punctuality,
            clarity=review.sub_ratings.clarity,
            patience=review.sub_ratings.patience,
        )
    return ReviewResponse(
        review_id=str(review.id),
        session_id=str(review.session_id),
        tutor_id=str(review.tutor_id),
        student_id=str(review.student_id),
        rating=review.rating,
        comment=review.comment or "",
        sub_ratings=sub_ratings,
        created_at=review.created_at,
    )


def _result_response(result: ReviewResult) -> ReviewResultResponse:
    return ReviewResultResponse(review_id=result.review_id, propagation=result.propagation)


@review_router.post("", status_code=201, response_model=ReviewResultResponse)
async def create_review(body: CreateReviewRequest) -> ReviewResultResponse:
    """Review a completed session. One review per session."""
    fields = body.model_dump(exclude={"sub_ratings"}, exclude_none=True)
    if body.sub_ratings is not None:
        fields.update(body.sub_ratings.model_dump(exclude_none=True))
    return _result_response(service.create_review(**fields))


@review_router.get("", response_model=list[ReviewResponse])
async def list_reviews(
    tutor_id: str | None = None,
    student_id: str | None = None,
    session_id: str | None = None,
) -> list[ReviewResponse]:
    reviews = service.find(tutor_id=tutor_id, student_id=student_id, session_id=session_id)
    return [_review_response(r) for r in reviews]


@review_router.get("/session/{session_id}/can-review", response_model=EligibilityResponse)
async def can_review(session_id: str) -> EligibilityResponse:
    """Whether the session may be reviewed now, and why."""
    eligibility = service.can_review(session_id)
    return EligibilityResponse(session_id=session_id, eligible=eligibility.eligible, reason=eligibility.reason)


@review_router.get("/tutor/{tutor_id}/stats", response_model=TutorStatsResponse)
async def tutor_stats(tutor_id: str) -> TutorStatsResponse:
    stats = service.tutor_stats(tutor_id)
    return TutorStatsResponse(
        tutor_id=stats.tutor_id,
        total_reviews=stats.total_reviews,
        average_rating=stats.average_rating,
        distribution=stats.distribution,
        latest_reviews=[_review_response(r) for r in stats.latest],
    )


@review_router.get("/{review_id}", response_model=ReviewResponse)
async def get_review(review_id: str) -> ReviewResponse:
    return _review_response(service.get(review_id))


@review_router.delete("/{review_id}", response_model=ReviewResultResponse)
async def delete_review(review_id: str) -> ReviewResultResponse:
    """Delete a review. The tutor's rating is corrected downstream."""
    return _result_response(service.delete_review(review_id))
