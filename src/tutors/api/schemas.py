"""Pydantic response schemas for the Tutors API."""

from __future__ import annotations

from pydantic import BaseModel


class TutorRatingResponse(BaseModel):
    tutor_id: str
    average_rating: float
    review_count: int
