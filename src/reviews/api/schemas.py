"""Pydantic request/response schemas for the Reviews API.

These are separate from Protean commands (anti-corruption pattern).
The API layer is the external contract; commands are internal domain concepts.
Request fields are optional here so that missing or out-of-range values are
rejected by the domain with a ValidationError, not by FastAPI.
"""

from __future__ import annotations

import datetime as dt
from typing import Literal

from pydantic import BaseModel


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class SubRatingsSchema(BaseModel):
    punctuality: int | None = None
    clarity: int | None = None
    patience: int | None = None


class CreateReviewRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "session_id": "b2f0c6c4-3a51-4d8e-9c43-1c0e0b7a9d11",
                    "tutor_id": "7",
                    "student_id": "9",
                    "rating": 4,
                    "comment": "Clear explanations",
                    "sub_ratings": {"punctuality": 5, "clarity": 4},
                }
            ]
        }
    }

    session_id: str | None = None
    tutor_id: str | None = None
    student_id: str | None = None
    rating: int | None = None
    comment: str | None = None
    sub_ratings: SubRatingsSchema | None = None


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class ReviewResponse(BaseModel):
    review_id: str
    session_id: str
    tutor_id: str
    student_id: str
    rating: int
    comment: str
    sub_ratings: SubRatingsSchema | None = None
    created_at: dt.datetime | None = None


class ReviewResultResponse(BaseModel):
    review_id: str
    propagation: Literal["pending", "published", "failed"] = "pending"


class EligibilityResponse(BaseModel):
    session_id: str
    eligible: bool
    reason: str


class TutorStatsResponse(BaseModel):
    tutor_id: str
    total_reviews: int
    average_rating: float
    distribution: dict[int, int]
    latest_reviews: list[ReviewResponse]
