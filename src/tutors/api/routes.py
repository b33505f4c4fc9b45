"""FastAPI routes for the Tutors bounded context (read side only).

Ratings change only through Reviews events, so there are no write routes here.
"""

from fastapi import APIRouter
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from shared.queries import iter_all
from tutors.api.schemas import TutorRatingResponse
from tutors.rating.rating import TutorRating

tutor_router = APIRouter(prefix="/tutors", tags=["tutors"])


def _rating_response(rating: TutorRating) -> TutorRatingResponse:
    return TutorRatingResponse(
        tutor_id=str(rating.tutor_id),
        average_rating=round(rating.average_rating, 2),
        review_count=rating.review_count,
    )


@tutor_router.get("", response_model=list[TutorRatingResponse])
async def list_tutor_ratings() -> list[TutorRatingResponse]:
    """All rated tutors, best rated first."""
    ratings = iter_all(current_domain.repository_for(TutorRating)._dao.query)
    ordered = sorted(ratings, key=lambda r: (r.average_rating, r.review_count), reverse=True)
    return [_rating_response(r) for r in ordered]


@tutor_router.get("/{tutor_id}/rating", response_model=TutorRatingResponse)
async def get_tutor_rating(tutor_id: str) -> TutorRatingResponse:
    """A tutor's mean rating and review count. Unrated tutors report (0.00, 0)."""
    try:
        rating = current_domain.repository_for(TutorRating).get(tutor_id)
    except ObjectNotFoundError:
        return TutorRatingResponse(tutor_id=tutor_id, average_rating=0.0, review_count=0)
    return _rating_response(rating)
